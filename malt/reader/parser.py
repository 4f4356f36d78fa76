"""
  Reader: lexer and recursive-descent parser

- Regex tokenizer; commas are whitespace, `;` comments run to end of line
- Parsing runs on the trampoline, so nesting depth and input length are
  limited by memory, not by the host call stack

    - nil/true/false -> Nil/TRUE/FALSE
    - integers      -> int (signed 64-bit; anything wider is a ReaderError)
    - strings       -> str (escapes decoded)
    - :name         -> Keyword
    - other atoms   -> Symbol
    - ( )           -> LispList
    - [ ]           -> Vector
    - { }           -> HashMap
    - 'x `x ~x ~@x @x ^m x -> (quote x) etc., see reader_macros
"""

from __future__ import annotations

import re
from typing import Iterator, Optional

from malt import SExpression
from malt.errors import EvalError, ReaderError
from malt.reader.reader_macros import reader_macros
from malt.types.hash_map import HashMap
from malt.types.nil import FALSE, Nil, TRUE
from malt.types.persistent import SegmentedList
from malt.types.sequences import LispList, Vector
from malt.types.symbol import Keyword, Symbol
from malt.types.trampoline import Trampoline, done, more


TOKEN_RE = re.compile(
    r"[\s,]*(?:"
    r"(?P<comment>;[^\n]*)"  # single-line comment
    r"|(?P<splice>~@)"  # ~@
    r"|(?P<macro>['`~^@])"  # ' ` ~ ^ @
    r"|(?P<open>[\[({])"  # ( [ {
    r"|(?P<close>[\])}])"  # ) ] }
    r'|(?P<string>"(?:\\.|[^\\"])*(?P<closed>")?)'  # double-quoted strings
    r'|(?P<atom>[^\s\[\]{}()\'"`,;]+)'  # numbers, keywords, symbols
    r")",
    re.DOTALL,
)

INT_RE = re.compile(r"-?[0-9]+")
INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

CLOSERS: dict[str, str] = {"(": ")", "[": "]", "{": "}"}

STRING_ESCAPES: dict[str, str] = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    '"': '"',
    "\\": "\\",
}


def lex(source: str) -> Iterator[tuple[str, str]]:
    """Token generator: yields (token_type, token_value) tuples."""
    pos = 0
    n = len(source)
    while pos < n:
        match = TOKEN_RE.match(source, pos)
        if not match or match.end() == pos:
            # only whitespace and commas remain
            break
        pos = match.end()
        kind = match.lastgroup
        if kind == "comment":
            continue
        if kind == "string" and match.group("closed") is None:
            raise ReaderError("expected '\"', got EOF")
        yield kind, match.group(kind)


def unescape(body: str) -> str:
    return re.sub(
        r"\\(.)",
        lambda m: STRING_ESCAPES.get(m.group(1), m.group(1)),
        body,
        flags=re.DOTALL,
    )


def read_atom(token: str) -> SExpression:
    if token == "nil":
        return Nil
    if token == "true":
        return TRUE
    if token == "false":
        return FALSE
    if INT_RE.fullmatch(token):
        value = int(token)
        if not INT64_MIN <= value <= INT64_MAX:
            raise ReaderError(f"integer literal out of range: {token}")
        return value
    if token.startswith(":"):
        return Keyword(token[1:])
    return Symbol(token)


class TokenStream:
    def __init__(self, token_iter: Iterator[tuple[str, str]]):
        self.tokens = iter(token_iter)
        self.buffer: list[tuple[str, str]] = []

    def peek(self) -> tuple[Optional[str], Optional[str]]:
        if not self.buffer:
            try:
                self.buffer.append(next(self.tokens))
            except StopIteration:
                return None, None
        return self.buffer[0]

    def advance(self) -> tuple[Optional[str], Optional[str]]:
        if self.buffer:
            return self.buffer.pop(0)
        return next(self.tokens, (None, None))

    def parse_form(self) -> Trampoline:
        """Deferred parse of exactly one form; tokens are consumed when run."""
        return more(self._parse_now)

    def _parse_now(self) -> Trampoline:
        tok_type, tok_val = self.advance()
        if tok_type is None:
            raise ReaderError("unexpected EOF")

        if tok_type in ("macro", "splice"):
            return reader_macros.dispatch(tok_val, self)

        if tok_type == "open":
            closer = CLOSERS[tok_val]
            items = self._read_seq(closer, SegmentedList.empty())
            if tok_val == "(":
                return items.map(LispList)
            if tok_val == "[":
                return items.map(Vector)
            return items.map(self._build_map)

        if tok_type == "close":
            raise ReaderError(f"unexpected '{tok_val}'")

        if tok_type == "string":
            return done(unescape(tok_val[1:-1]))

        return done(read_atom(tok_val))

    def _read_seq(self, closer: str, acc: SegmentedList) -> Trampoline:
        tok_type, tok_val = self.peek()
        if tok_type is None:
            raise ReaderError(f"expected '{closer}', got EOF")
        if tok_type == "close" and tok_val == closer:
            self.advance()
            return done(acc)
        return self.parse_form().flat_map(
            lambda form: self._read_seq(closer, acc.append(form))
        )

    @staticmethod
    def _build_map(items: SegmentedList) -> HashMap:
        try:
            return HashMap.from_pairs(items)
        except EvalError as e:
            raise ReaderError(str(e)) from e

    def parse_expr(self) -> SExpression:
        """Read one complete form."""
        return self.parse_form().run()

    def parse_all(self) -> Iterator[SExpression]:
        while True:
            tok_type, _ = self.peek()
            if tok_type is None:
                break
            yield self.parse_expr()


def read_str(source: str) -> SExpression:
    """Read the first form in `source`; nil when there is none."""
    stream = TokenStream(lex(source))
    if stream.peek()[0] is None:
        return Nil
    return stream.parse_expr()


def read_all(source: str) -> Iterator[SExpression]:
    return TokenStream(lex(source)).parse_all()
