from hypothesis import given, strategies as st

from malt.types.trampoline import done, more, sequence, traverse, zip_with


def test_done_runs_to_its_value():
    assert done(42).run() == 42


def test_long_more_chain_is_stack_safe():
    def count_down(n):
        if n == 0:
            return done("finished")
        return more(lambda: count_down(n - 1))

    assert count_down(100_000).run() == "finished"


def test_left_nested_maps_are_stack_safe():
    computation = done(0)
    for _ in range(100_000):
        computation = computation.map(lambda x: x + 1)
    assert computation.run() == 100_000


def test_right_nested_flat_maps_are_stack_safe():
    def build(n):
        if n == 0:
            return done(0)
        return more(lambda: build(n - 1)).flat_map(lambda x: done(x + 1))

    assert build(50_000).run() == 50_000


def test_and_then_discards_first_value():
    seen = []
    first = more(lambda: done(seen.append("first")))
    assert first.and_then(done("second")).run() == "second"
    assert seen == ["first"]


def test_zip_with_runs_left_then_right():
    order = []

    def step(name, value):
        def thunk():
            order.append(name)
            return done(value)

        return more(thunk)

    result = zip_with(step("a", 1), step("b", 2), lambda x, y: x * 10 + y).run()
    assert result == 12
    assert order == ["a", "b"]


@given(st.lists(st.integers(), max_size=100))
def test_traverse_preserves_order_of_results_and_effects(items):
    effects = []

    def visit(x):
        effects.append(x)
        return done(x * 2)

    result = traverse(items, visit).run()
    assert list(result) == [x * 2 for x in items]
    assert effects == items


def test_traverse_calls_fn_lazily():
    calls = []
    computation = traverse([1, 2, 3], lambda x: done(calls.append(x)))
    assert calls == []
    computation.run()
    assert calls == [1, 2, 3]


def test_sequence_collects_computations():
    assert list(sequence([done(1), more(lambda: done(2)), done(3)]).run()) == [1, 2, 3]
