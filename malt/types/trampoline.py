"""Stack-safe deferred computations.

A computation is one of:

- ``Done(value)``: finished;
- ``More(thunk)``: call ``thunk()`` to get the next computation;
- ``FlatMap(source, fn)``: run ``source``, then feed its value to ``fn``.

``run()`` drives these with an explicit continuation list instead of the host
call stack, so recursion depth in user programs only costs heap. A step whose
result is in tail position returns the next computation instead of calling
it, which is what gives the evaluator proper tail calls.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable

from malt.types.persistent import SegmentedList


class Trampoline:
    __slots__ = ()

    def map(self, fn: Callable[[Any], Any]) -> Trampoline:
        return FlatMap(self, lambda value: Done(fn(value)))

    def flat_map(self, fn: Callable[[Any], Trampoline]) -> Trampoline:
        return FlatMap(self, fn)

    def and_then(self, nxt: Trampoline) -> Trampoline:
        return FlatMap(self, lambda _: nxt)

    def run(self) -> Any:
        current: Trampoline = self
        stack: list[Callable[[Any], Trampoline]] = []
        while True:
            if isinstance(current, Done):
                if not stack:
                    return current.value
                current = stack.pop()(current.value)
            elif isinstance(current, More):
                current = current.thunk()
            elif isinstance(current, FlatMap):
                stack.append(current.fn)
                current = current.source
            else:
                raise TypeError(f"Not a trampoline step: {current!r}")


class Done(Trampoline):
    __slots__ = ("value",)

    def __init__(self, value: Any):
        self.value = value

    def __repr__(self):
        return f"Done({self.value!r})"


class More(Trampoline):
    __slots__ = ("thunk",)

    def __init__(self, thunk: Callable[[], Trampoline]):
        self.thunk = thunk

    def __repr__(self):
        return "More(...)"


class FlatMap(Trampoline):
    __slots__ = ("source", "fn")

    def __init__(self, source: Trampoline, fn: Callable[[Any], Trampoline]):
        self.source = source
        self.fn = fn

    def __repr__(self):
        return f"FlatMap({self.source!r}, ...)"


def done(value: Any) -> Trampoline:
    return Done(value)


def more(thunk: Callable[[], Trampoline]) -> Trampoline:
    return More(thunk)


def zip_with(
    first: Trampoline, second: Trampoline, fn: Callable[[Any, Any], Any]
) -> Trampoline:
    return first.flat_map(lambda a: second.map(lambda b: fn(a, b)))


def traverse(
    items: Iterable[Any], fn: Callable[[Any], Trampoline]
) -> Trampoline:
    """Turn each item into a computation and collect the results in order.

    ``fn`` is only called once the previous item's computation has finished,
    so side effects happen left to right. The result is a SegmentedList.
    """
    pending = tuple(items)
    count = len(pending)

    def step(index: int, acc: SegmentedList) -> Trampoline:
        if index == count:
            return Done(acc)
        return FlatMap(
            More(lambda: fn(pending[index])),
            lambda value: step(index + 1, acc.append(value)),
        )

    return More(lambda: step(0, SegmentedList.empty()))


def sequence(computations: Iterable[Trampoline]) -> Trampoline:
    return traverse(computations, lambda computation: computation)
