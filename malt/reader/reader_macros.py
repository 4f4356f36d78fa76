from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from malt.types.sequences import list_of
from malt.types.symbol import (
    DEREF,
    QUASIQUOTE,
    QUOTE,
    SPLICE_UNQUOTE,
    Symbol,
    UNQUOTE,
    WITH_META,
)
from malt.types.trampoline import Trampoline, zip_with

if TYPE_CHECKING:
    from malt.reader.parser import TokenStream

ReaderMacroFn = Callable[["TokenStream"], Trampoline]


class ReaderMacros:
    """
    Registry of reader macros.
    Maps a macro token (', `, ~, ~@, ^, @) to a function that consumes the
    following form(s) from the TokenStream and returns the rewritten form.
    """

    def __init__(self):
        self.macros: dict[str, ReaderMacroFn] = {}

    def define(self, char: str, fn: ReaderMacroFn) -> None:
        """Register a reader macro for a given character or sequence."""
        self.macros[char] = fn

    def dispatch(self, char: str, stream: "TokenStream") -> Trampoline:
        if char not in self.macros:
            raise ValueError(f"No reader macro defined for {char!r}")
        return self.macros[char](stream)


def _wrap_next(symbol: Symbol) -> ReaderMacroFn:
    """x -> (symbol x)"""
    def expand(stream: "TokenStream") -> Trampoline:
        return stream.parse_form().map(lambda form: list_of(symbol, form))
    return expand


def _with_meta(stream: "TokenStream") -> Trampoline:
    """^m x -> (with-meta x m); the metadata is written first."""
    return zip_with(
        stream.parse_form(),
        stream.parse_form(),
        lambda meta, form: list_of(WITH_META, form, meta),
    )


# -------------------------
# Single global instance
# -------------------------
reader_macros: ReaderMacros = ReaderMacros()

QUOTE_FORMS: dict[str, Symbol] = {
    "'": QUOTE,
    "`": QUASIQUOTE,
    "~": UNQUOTE,
    "~@": SPLICE_UNQUOTE,
    "@": DEREF,
}

for key, name in QUOTE_FORMS.items():
    reader_macros.define(key, _wrap_next(name))

reader_macros.define("^", _with_meta)
