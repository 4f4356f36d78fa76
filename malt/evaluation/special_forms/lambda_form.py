from malt import EvaluatorFn
from malt import SExpression
from malt.errors import EvalError
from malt.types.environment import Environment
from malt.types.lambda_fn import Lambda
from malt.types.nil import Nil
from malt.types.sequences import LispList, Vector, list_of
from malt.types.symbol import DO, Symbol
from malt.types.trampoline import Trampoline, done


def lambda_form(
    tail: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
) -> Trampoline:
    """
    (fn* (params...) body...)

    Captures the current environment. Several body forms are wrapped in an
    implicit `do`.
    """
    if not tail:
        raise EvalError("fn* requires a parameter list")
    params = tail[0]
    if not isinstance(params, (LispList, Vector)):
        raise EvalError("fn* parameters must be a list or vector")
    formals = list(params)
    for p in formals:
        if not isinstance(p, Symbol):
            raise EvalError(f"fn* parameter must be a symbol, got {p!r}")

    body_forms = tail[1:]
    if not body_forms:
        body = Nil
    elif len(body_forms) == 1:
        body = body_forms[0]
    else:
        body = list_of(DO, *body_forms)
    return done(Lambda(formals, body, env))
