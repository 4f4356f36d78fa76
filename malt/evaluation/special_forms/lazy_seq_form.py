from malt import EvaluatorFn
from malt import SExpression
from malt.errors import EvalError
from malt.types.environment import Environment
from malt.types.sequences import LazySeq
from malt.types.trampoline import Trampoline, done


def lazy_seq_form(
    tail: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
) -> Trampoline:
    """
    (lazy-seq body)

    The body is not evaluated now. It runs at most once, the first time the
    sequence is observed, and must produce a sequence or nil.
    """
    if len(tail) != 1:
        raise EvalError("lazy-seq requires exactly one body form")
    body = tail[0]
    return done(LazySeq(lambda: evaluate_fn(body, env).run()))
