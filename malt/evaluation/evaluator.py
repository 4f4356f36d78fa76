"""Core evaluator for the malt interpreter.

Evaluation builds a Trampoline instead of recursing on the host stack:
every form becomes a deferred step, argument lists are evaluated with
`traverse`, and a closure call in tail position hands back its body's
computation. `eval_form` drives the whole thing to a value.

Dispatch order for a non-empty list form:
    1. special form named by a head symbol
    2. macro: expand on the unevaluated arguments, evaluate the expansion
    3. function: evaluate the arguments left to right, then apply
"""

from __future__ import annotations

from malt import SExpression, LispValue
from malt.printer import pr_str
from malt.types.environment import Environment
from malt.types.hash_map import HashMap
from malt.types.lambda_fn import Lambda
from malt.types.sequences import Cons, LispList, Vector
from malt.types.symbol import Symbol
from malt.types.trampoline import Trampoline, done, more, traverse
from malt.evaluation.apply import apply
from malt.evaluation.special_forms import SPECIAL_FORMS


def eval_form(expr: SExpression, env: Environment) -> LispValue:
    """Evaluate `expr` in `env` to a value."""
    return evaluate(expr, env).run()


def evaluate(expr: SExpression, env: Environment) -> Trampoline:
    """
    Deferred evaluation of `expr`.

    Nothing happens until the returned computation is run, so callers can
    build sequences of evaluations and have lookups happen in order.
    """
    return more(lambda: _evaluate_now(expr, env))


def _evaluate_now(expr: SExpression, env: Environment) -> Trampoline:
    if env.is_debug_eval():
        print(f"EVAL: {pr_str(expr, True)}")

    match expr:
        case Symbol():
            return done(env.lookup(expr))

        case LispList() | Cons() if not expr.is_empty():
            return _evaluate_list(list(expr), env)

        case Vector() if not expr.is_empty():
            return traverse(expr, lambda item: evaluate(item, env)).map(Vector)

        case HashMap() if not expr.is_empty():
            return traverse(
                expr.items(),
                lambda entry: evaluate(entry[1], env).map(lambda v: (entry[0], v)),
            ).map(lambda entries: HashMap(dict(entries)))

    # --- Everything else evaluates to itself ---
    return done(expr)


def _evaluate_list(forms: list[SExpression], env: Environment) -> Trampoline:
    head, tail_args = forms[0], forms[1:]

    # --- Special forms handling ---
    if isinstance(head, Symbol):
        handler = SPECIAL_FORMS.get(head)
        if handler is not None:
            return handler(tail_args, env, evaluate)

    def dispatch(fn: LispValue) -> Trampoline:
        if isinstance(fn, Lambda) and fn.is_macro:
            # Macro: arguments are passed unevaluated, the expansion is evaluated
            return apply(fn, tail_args, env, evaluate).flat_map(
                lambda expansion: evaluate(expansion, env)
            )
        return traverse(tail_args, lambda arg: evaluate(arg, env)).flat_map(
            lambda args: apply(fn, args, env, evaluate)
        )

    return evaluate(head, env).flat_map(dispatch)
