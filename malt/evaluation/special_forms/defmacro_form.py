from malt import EvaluatorFn
from malt import SExpression
from malt.errors import EvalError
from malt.types.environment import Environment
from malt.types.lambda_fn import Lambda
from malt.types.symbol import Symbol
from malt.types.trampoline import Trampoline


def defmacro_form(
    tail: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
) -> Trampoline:
    """
    (defmacro! name fn-expr)

    The value must evaluate to a closure; a macro-flagged copy is bound so the
    original function stays callable as a function.
    """
    if len(tail) != 2:
        raise EvalError("defmacro! requires a name and a function")
    name, fn_expr = tail
    if not isinstance(name, Symbol):
        raise EvalError(f"defmacro! name must be a symbol, got {name!r}")

    def bind(value):
        if not isinstance(value, Lambda):
            raise EvalError(f"defmacro! expects a function for '{name}'")
        return env.set(name, value.as_macro())

    return evaluate_fn(fn_expr, env).map(bind)
