from __future__ import annotations
import sys


class Symbol:
    __slots__ = ("id",)

    def __init__(self, name: str):
        # Intern to ensure fast equality/hash and reduce memory
        self.id = sys.intern(name)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Symbol) and self.id == other.id

    def __hash__(self) -> int:
        return hash(("symbol", self.id))

    def __repr__(self):
        return f"Symbol({self.id!r})"

    def __str__(self):
        return self.id


class Keyword:
    """A `:name` keyword. Stored without the leading colon."""

    __slots__ = ("name",)

    def __init__(self, name: str):
        self.name = sys.intern(name)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Keyword) and self.name == other.name

    def __hash__(self) -> int:
        return hash(("keyword", self.name))

    def __repr__(self):
        return f"Keyword({self.name!r})"

    def __str__(self):
        return ":" + self.name


# Symbols the reader and evaluator refer to by identity of name
QUOTE = Symbol("quote")
QUASIQUOTE = Symbol("quasiquote")
UNQUOTE = Symbol("unquote")
SPLICE_UNQUOTE = Symbol("splice-unquote")
WITH_META = Symbol("with-meta")
DEREF = Symbol("deref")
DEBUG_EVAL = Symbol("DEBUG-EVAL")
AMPERSAND = Symbol("&")
CONS = Symbol("cons")
CONCAT = Symbol("concat")
VEC = Symbol("vec")
DO = Symbol("do")
