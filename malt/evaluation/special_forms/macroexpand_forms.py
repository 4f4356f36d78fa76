from malt import EvaluatorFn
from malt import SExpression
from malt.errors import EvalError
from malt.evaluation.apply import apply
from malt.types.environment import Environment, NOT_FOUND
from malt.types.lambda_fn import Lambda
from malt.types.sequences import LispList
from malt.types.symbol import Symbol
from malt.types.trampoline import Trampoline, done


def macro_for(form: SExpression, env: Environment) -> Lambda | None:
    """The macro named by the head of `form`, if there is one."""
    if not isinstance(form, LispList) or form.is_empty():
        return None
    head = form.head()
    if not isinstance(head, Symbol):
        return None
    value = env.get(head)
    if value is NOT_FOUND or not isinstance(value, Lambda) or not value.is_macro:
        return None
    return value


def expand_once(form: SExpression, env: Environment, evaluate_fn: EvaluatorFn) -> SExpression:
    macro = macro_for(form, env)
    if macro is None:
        return form
    return apply(macro, list(form)[1:], env, evaluate_fn).run()


def macroexpand_1_form(
    tail: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
) -> Trampoline:
    """(macroexpand-1 form): a single expansion step, argument unevaluated."""
    if len(tail) != 1:
        raise EvalError("macroexpand-1 requires exactly one argument")
    return done(expand_once(tail[0], env, evaluate_fn))


def macroexpand_form(
    tail: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
) -> Trampoline:
    """(macroexpand form): expand the head macro until it is no longer one."""
    if len(tail) != 1:
        raise EvalError("macroexpand requires exactly one argument")
    form = tail[0]
    while macro_for(form, env) is not None:
        form = expand_once(form, env, evaluate_fn)
    return done(form)
