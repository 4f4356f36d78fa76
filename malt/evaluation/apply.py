"""Application engine for malt.

This module centralizes function application for the interpreter:
- Lambda closures bind their arguments in a fresh frame and return the body's
  computation unevaluated, so a call in tail position costs no host stack.
- Python callables registered in the environment are invoked with the caller
  env and the evaluated argument list; they may return a plain value or a
  Trampoline when they need to call back into the evaluator.

Keeping this logic in one place prevents duplication between the evaluator,
special forms and builtin helpers.
"""

from typing import Callable, Iterable

from malt import LispValue, EvaluatorFn
from malt.errors import EvalError
from malt.types.environment import Environment
from malt.types.lambda_fn import Lambda
from malt.types.trampoline import Trampoline, done


def apply(
    head: Lambda | Callable[[Environment, list[LispValue]], LispValue] | object,
    args: Iterable[LispValue],
    env: Environment,
    evaluate_fn: EvaluatorFn,
) -> Trampoline:
    """Apply either a Lambda or a Python callable.

    - For Lambda, bind the arguments (arity is checked by the binder) and
      hand back the body's computation.
    - For Python callables (builtins), invoke with the runtime env and list of args.
    - Otherwise, raise an EvalError.
    """
    if isinstance(head, Lambda):
        return evaluate_fn(head.body, head.extend_env(list(args)))
    elif callable(head):
        result = head(env, list(args))
        return result if isinstance(result, Trampoline) else done(result)
    else:
        from malt.printer import pr_str

        raise EvalError(f"Cannot apply non-function {pr_str(head, True)}")


def is_function(value: LispValue) -> bool:
    """True for closures and builtins, false for macros."""
    if isinstance(value, Lambda):
        return not value.is_macro
    return callable(value)
