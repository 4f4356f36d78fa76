"""Closure representation for malt functions and macros."""

from __future__ import annotations

from io import StringIO

from malt import SExpression, LispValue
from malt.types.environment import Environment
from malt.types.symbol import Symbol


class Lambda:
    """A first-class closure: formal parameters, body and defining env.

    Macros are the same shape with ``is_macro`` set; `defmacro!` makes a
    flagged copy rather than mutating the function it was given.
    """

    __slots__ = ("formals", "body", "env", "meta", "is_macro")

    def __init__(
        self,
        formals: list[Symbol],
        body: SExpression,
        env: Environment,
        meta: LispValue = None,
        is_macro: bool = False,
    ):
        self.formals: list[Symbol] = formals
        self.body: SExpression = body
        self.env: Environment = env
        self.meta: LispValue = meta
        self.is_macro: bool = is_macro

    def __str__(self) -> str:
        with StringIO() as buffer:
            buffer.write("(macro (" if self.is_macro else "(fn* (")
            buffer.write(" ".join(str(f) for f in self.formals))
            buffer.write(") ")
            buffer.write(repr(self.body))
            buffer.write(")")
            return buffer.getvalue()

    def __repr__(self) -> str:
        return str(self)

    def as_macro(self) -> Lambda:
        return Lambda(self.formals, self.body, self.env, self.meta, True)

    def with_meta(self, meta: LispValue) -> Lambda:
        return Lambda(self.formals, self.body, self.env, meta, self.is_macro)

    def extend_env(self, args: list[LispValue]) -> Environment:
        """
        Bind the given argument values to this lambda's formal parameters and
        return a new Environment for evaluating the body.

        Delegates to the shared binder in malt.types.bind.
        """
        from malt.types.bind import bind_arguments
        return bind_arguments(self.formals, list(args), self.env)
