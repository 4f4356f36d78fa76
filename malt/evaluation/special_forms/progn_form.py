from malt import EvaluatorFn
from malt import SExpression
from malt.types.environment import Environment
from malt.types.nil import Nil
from malt.types.trampoline import Trampoline, done, traverse


def progn_form(
    tail: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
) -> Trampoline:
    """(do e1 ... en): evaluate in order; en is in tail position."""
    if not tail:
        return done(Nil)
    leading, last = tail[:-1], tail[-1]
    if not leading:
        return evaluate_fn(last, env)
    return traverse(leading, lambda e: evaluate_fn(e, env)).and_then(
        evaluate_fn(last, env)
    )
