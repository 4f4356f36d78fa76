"""quote, quasiquote and the unquote markers.

Quasiquote is rewritten into ordinary `cons`/`concat`/`vec` calls and the
result is evaluated. The rewrite itself runs on the trampoline so deeply
nested templates do not grow the host stack.

    `x          -> (quote x)             for symbols and maps
    `~x         -> x
    `(a ~@b c)  -> (cons a' (concat b (cons c' ())))
    `[a b]      -> (vec <rewrite of (a b)>)
"""

from malt import EvaluatorFn
from malt import SExpression
from malt.errors import EvalError
from malt.types.environment import Environment
from malt.types.hash_map import HashMap
from malt.types.sequences import Cons, EMPTY_LIST, LispList, Sequence, Vector, list_of
from malt.types.symbol import CONCAT, CONS, QUOTE, SPLICE_UNQUOTE, Symbol, UNQUOTE, VEC
from malt.types.trampoline import Trampoline, done, traverse


def quote_form(
    tail: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
) -> Trampoline:
    if len(tail) != 1:
        raise EvalError("quote requires exactly one argument")
    return done(tail[0])


def quasiquote_form(
    tail: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
) -> Trampoline:
    if len(tail) != 1:
        raise EvalError("quasiquote requires exactly one argument")
    return quasiquote_expand(tail[0]).flat_map(lambda form: evaluate_fn(form, env))


def unquote_form(
    tail: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
) -> Trampoline:
    raise EvalError("unquote used outside of quasiquote")


def unquote_splice_form(
    tail: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
) -> Trampoline:
    raise EvalError("splice-unquote used outside of quasiquote")


def _is_call_to(form: SExpression, name: Symbol) -> bool:
    if not isinstance(form, (LispList, Cons)) or form.is_empty():
        return False
    head = form.head()
    if not (isinstance(head, Symbol) and head == name):
        return False
    if len(form) != 2:
        raise EvalError(f"{name} requires exactly one argument")
    return True


def quasiquote_expand(form: SExpression) -> Trampoline:
    """Rewrite a quasiquoted template into the code that builds it."""
    if isinstance(form, (Symbol, HashMap)):
        return done(list_of(QUOTE, form))
    if isinstance(form, Vector):
        return _expand_elements(form).map(lambda built: list_of(VEC, built))
    if isinstance(form, Sequence):
        if form.is_empty():
            return done(form)
        if _is_call_to(form, UNQUOTE):
            return done(form.nth(1))
        return _expand_elements(form)
    return done(form)


def _expand_elements(items: Sequence) -> Trampoline:
    def expand(element: SExpression) -> Trampoline:
        if _is_call_to(element, SPLICE_UNQUOTE):
            return done((True, element.nth(1)))
        return quasiquote_expand(element).map(lambda built: (False, built))

    def fold(parts) -> SExpression:
        acc: SExpression = EMPTY_LIST
        for spliced, built in reversed(parts):
            acc = list_of(CONCAT if spliced else CONS, built, acc)
        return acc

    return traverse(list(items), expand).map(fold)
