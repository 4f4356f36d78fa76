import pytest

from malt.errors import EvalError, LazyContractError, MaltError, ReaderError, UserError
from malt.types.error_value import ErrorValue


def test_throw_and_catch_string(interp):
    assert interp.rep('(try* (throw "boom") (catch* e e))') == '"boom"'


def test_thrown_value_is_bound_unchanged(interp):
    assert interp.rep("(try* (throw {:code 7}) (catch* e (get e :code)))") == "7"
    assert interp.rep("(try* (throw [1 2]) (catch* e (count e)))") == "2"


def test_try_without_error_returns_body(interp):
    assert interp.rep("(try* (+ 1 2) (catch* e :never))") == "3"
    assert interp.rep("(try* 42)") == "42"


def test_undefined_symbol_is_catchable(interp):
    assert interp.rep(
        "(try* undefined-thing (catch* e (str e)))"
    ) == "\"'undefined-thing' not found\""


def test_builtin_failure_is_catchable(interp):
    assert interp.rep('(try* (nth (list 1) 5) (catch* e (str "caught: " e)))') == (
        '"caught: nth: index 5 out of bounds"'
    )


def test_reader_failure_is_catchable(interp):
    assert interp.rep('(try* (read-string "(1 2") (catch* e (str e)))') == (
        "\"expected ')', got EOF\""
    )


def test_caught_errors_keep_their_kind(interp):
    caught = interp.eval("(try* (/ 1 0) (catch* e e))")
    assert isinstance(caught, ErrorValue)
    assert caught.kind == "eval"
    assert caught.message == "Division by zero"
    assert interp.eval('(try* (read-string "[") (catch* e e))').kind == "reader"
    assert interp.eval("(try* (first (lazy-seq 1)) (catch* e e))").kind == "lazy-contract"


def test_rethrow_from_handler(interp):
    assert interp.rep("(try* (try* (throw 1) (catch* e (throw (+ e 1)))) (catch* e e))") == "2"


def test_try_without_catch_propagates(interp):
    with pytest.raises(UserError):
        interp.eval('(try* (throw "x"))')


def test_handler_binding_is_local(interp):
    interp.eval("(def! e :outer)")
    interp.eval('(try* (throw "inner") (catch* e e))')
    assert interp.rep("e") == ":outer"


def test_catch_inside_loop_body(interp):
    interp.eval(
        """
        (def! safe-div
          (fn* (a b)
            (try* (/ a b) (catch* e :div-error))))
        """
    )
    assert interp.rep("(map (fn* (b) (safe-div 10 b)) (list 1 0 5))") == "(10 :div-error 2)"


@pytest.mark.parametrize(
    "code, error_type",
    [
        ("(undefined)", EvalError),
        ('(throw "x")', UserError),
        ('(read-string "(")', ReaderError),
        ("(first (lazy-seq 1))", LazyContractError),
    ],
)
def test_error_hierarchy(interp, code, error_type):
    with pytest.raises(error_type) as exc_info:
        interp.eval(code)
    assert isinstance(exc_info.value, MaltError)


def test_user_error_message_is_display_form():
    assert str(UserError("boom")) == "boom"
    assert UserError("boom").value == "boom"
    assert UserError("boom").kind == "user"


def test_malformed_try(interp):
    with pytest.raises(EvalError, match=r"try\* expects \(catch\* name handler\)"):
        interp.eval("(try* 1 (oops e e))")
    with pytest.raises(EvalError, match="catch\\* name must be a symbol"):
        interp.eval("(try* 1 (catch* 1 2))")


def test_host_stack_exhaustion_is_not_caught(interp):
    interp.eval(
        """
        (def! nest
          (fn* (n)
            (if (= n 0)
              0
              (+ 1 (try* (nest (- n 1)) (catch* e 0))))))
        """
    )
    assert interp.eval("(nest 20)") == 20
    with pytest.raises(RecursionError):
        interp.eval("(nest 5000)")
    assert interp.eval("(nest 20)") == 20


def test_thrown_lazy_sequence_does_not_realize(interp):
    interp.eval("(def! ones (fn* () (lazy-seq (cons 1 (ones)))))")
    with pytest.raises(UserError) as exc_info:
        interp.eval("(throw (ones))")
    assert str(exc_info.value) == "#lazy"
