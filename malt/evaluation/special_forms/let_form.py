from malt import EvaluatorFn
from malt import SExpression
from malt.errors import EvalError
from malt.evaluation.special_forms.progn_form import progn_form
from malt.types.environment import Environment
from malt.types.sequences import LispList, Vector
from malt.types.symbol import Symbol
from malt.types.trampoline import Trampoline, traverse


def let_form(
    tail: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
) -> Trampoline:
    """
    (let* (n1 e1 n2 e2 ...) body...)

    Bindings are evaluated left to right in a fresh child frame, so each one
    sees the ones before it. The body runs in tail position.
    """
    if not tail:
        raise EvalError("let* requires a binding list")
    bindings = tail[0]
    if not isinstance(bindings, (LispList, Vector)):
        raise EvalError("let* bindings must be a list or vector")
    items = list(bindings)
    if len(items) % 2 != 0:
        raise EvalError("let* requires an even number of binding forms")

    pairs = [(items[i], items[i + 1]) for i in range(0, len(items), 2)]
    for name, _ in pairs:
        if not isinstance(name, Symbol):
            raise EvalError(f"let* binding name must be a symbol, got {name!r}")

    local_env = Environment(outer=env)
    bound = traverse(
        pairs,
        lambda pair: evaluate_fn(pair[1], local_env).map(
            lambda value: local_env.set(pair[0], value)
        ),
    )
    return bound.flat_map(lambda _: progn_form(tail[1:], local_env, evaluate_fn))
