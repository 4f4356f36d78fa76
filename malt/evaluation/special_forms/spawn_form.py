from malt import EvaluatorFn
from malt import SExpression, LispValue
from malt.errors import EvalError
from malt.evaluation.apply import apply, is_function
from malt.runtime_context import start_fiber
from malt.types.environment import Environment
from malt.types.fiber import Fiber
from malt.types.trampoline import Trampoline, done


def _run_fiber(
    body: SExpression, fiber_env: Environment, evaluate_fn: EvaluatorFn
) -> LispValue:
    fn = evaluate_fn(body, fiber_env).run()
    if not is_function(fn):
        raise EvalError("spawn body must evaluate to a function")
    return apply(fn, [], fiber_env, evaluate_fn).run()


def spawn_form(
    tail: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
) -> Trampoline:
    """
    (spawn fn-expr)

    Evaluates fn-expr on its own worker thread, in a child of the current frame, and calls
    the resulting function with no arguments. Returns a fiber immediately;
    `join` or `deref` waits for the result or re-raises the failure.
    """
    if len(tail) != 1:
        raise EvalError("spawn requires exactly one body form")
    fiber_env = Environment(outer=env)
    future = start_fiber(_run_fiber, tail[0], fiber_env, evaluate_fn)
    return done(Fiber(future))
