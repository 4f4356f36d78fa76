from malt import EvaluatorFn
from malt import SExpression
from malt.errors import EvalError
from malt.types.environment import Environment
from malt.types.symbol import Symbol
from malt.types.trampoline import Trampoline


def define_form(
    tail: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
) -> Trampoline:
    """(def! name expr): bind in the current frame and return the value."""
    if len(tail) != 2:
        raise EvalError("def! requires a name and a value")
    name, value_expr = tail
    if not isinstance(name, Symbol):
        raise EvalError(f"def! name must be a symbol, got {name!r}")
    return evaluate_fn(value_expr, env).map(lambda value: env.set(name, value))
