"""Printer: value -> text.

Output is re-readable for data values. Printing runs on the trampoline so
long or deeply nested structures do not grow the host stack. Lazy sequences
are never forced: only their realized prefix is shown, followed by `#lazy`.
"""

from __future__ import annotations

from malt import LispValue
from malt.types.atom import Atom
from malt.types.error_value import ErrorValue
from malt.types.fiber import Fiber
from malt.types.hash_map import HashMap
from malt.types.lambda_fn import Lambda
from malt.types.nil import Constant
from malt.types.sequences import Cons, LazySeq, Sequence, Vector
from malt.types.symbol import Keyword, Symbol
from malt.types.trampoline import Trampoline, done, more, traverse, zip_with

LAZY = "#lazy"

_ESCAPES = {"\\": "\\\\", '"': '\\"', "\n": "\\n", "\t": "\\t", "\r": "\\r"}


def escape(text: str) -> str:
    return "".join(_ESCAPES.get(ch, ch) for ch in text)


def pr_str(value: LispValue, readably: bool = True) -> str:
    return safe_print(value, readably).run()


def safe_print(value: LispValue, readably: bool) -> Trampoline:
    if isinstance(value, (Sequence, HashMap, Atom)):
        return more(lambda: _print_compound(value, readably))
    return done(_print_scalar(value, readably))


def _print_scalar(value: LispValue, readably: bool) -> str:
    if isinstance(value, Constant):
        return value.name
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str):
        return f'"{escape(value)}"' if readably else value
    if isinstance(value, (Symbol, Keyword)):
        return str(value)
    if isinstance(value, Lambda) or callable(value):
        return "#function"
    if isinstance(value, Fiber):
        return "#fiber"
    if isinstance(value, ErrorValue):
        return _print_scalar(value.message, readably)
    return str(value)


def _visible_items(seq: Sequence) -> tuple[list[LispValue], bool]:
    """Elements of a cons/lazy chain that are already realized.

    Stops at the first unrealized lazy sequence and reports whether one was hit;
    printing never forces a lazy sequence.
    """
    items: list[LispValue] = []
    while True:
        if isinstance(seq, LazySeq):
            realized = seq.peek()
            if realized is None:
                return items, True
            seq = realized
        elif isinstance(seq, Cons):
            items.append(seq.head())
            seq = seq.tail()
        else:
            items.extend(seq)
            return items, False


def _print_compound(value: LispValue, readably: bool) -> Trampoline:
    if isinstance(value, (Cons, LazySeq)):
        items, pending = _visible_items(value)
        if pending and not items:
            return done(LAZY)
        suffix = " . " + LAZY if pending else ""
        return traverse(items, lambda item: safe_print(item, readably)).map(
            lambda parts: "(" + " ".join(parts) + suffix + ")"
        )
    if isinstance(value, Sequence):
        opener, closer = ("[", "]") if isinstance(value, Vector) else ("(", ")")
        return traverse(value, lambda item: safe_print(item, readably)).map(
            lambda parts: opener + " ".join(parts) + closer
        )
    if isinstance(value, HashMap):
        return traverse(
            value.items(),
            lambda entry: zip_with(
                safe_print(entry[0], readably),
                safe_print(entry[1], readably),
                lambda k, v: f"{k} {v}",
            ),
        ).map(lambda parts: "{" + " ".join(parts) + "}")
    return safe_print(value.deref(), readably).map(lambda text: f"(atom {text})")
