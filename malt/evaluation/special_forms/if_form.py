from malt import EvaluatorFn
from malt import SExpression, LispValue
from malt.errors import EvalError
from malt.types.environment import Environment
from malt.types.nil import Nil, is_truthy
from malt.types.trampoline import Trampoline, done


def if_form(
    tail: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
) -> Trampoline:
    if len(tail) not in (2, 3):
        raise EvalError("if requires a condition, a then-expression and an optional else")

    def branch(cond: LispValue) -> Trampoline:
        # only nil and false are falsy
        if is_truthy(cond):
            return evaluate_fn(tail[1], env)
        elif len(tail) > 2:
            return evaluate_fn(tail[2], env)
        else:
            return done(Nil)

    return evaluate_fn(tail[0], env).flat_map(branch)
