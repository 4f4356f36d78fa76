"""Runtime environment for malt.

The Environment stores bindings of Symbols to evaluated values and supports
nested scopes via an `outer` link. Writes always land in the local frame,
which keeps scoping lexical: a child frame can shadow but never rebind an
ancestor's name.
"""

from __future__ import annotations

from typing import Optional

from malt import LispValue
from malt.errors import EvalError
from malt.types.nil import is_truthy
from malt.types.symbol import DEBUG_EVAL, Symbol


class _NotFound:
    def __repr__(self):
        return "NOT_FOUND"


# Returned by Environment.get for unbound names; never a language value
NOT_FOUND = _NotFound()


class Environment:
    """Hierarchical mapping from Symbols to values."""

    __slots__ = ("vars", "outer")

    def __init__(
        self,
        outer: Optional[Environment] = None,
        bindings: dict[Symbol, LispValue] | None = None,
    ):
        self.vars: dict[Symbol, LispValue] = {}
        self.outer: Environment | None = outer
        if bindings:
            self.update(bindings)

    def set(self, name: Symbol, value: LispValue) -> LispValue:
        """Bind `name` to `value` in this frame.

        Raises EvalError if `name` is not a Symbol.
        """
        if not isinstance(name, Symbol):
            raise EvalError(f"Cannot bind {name!r}: not a symbol")
        self.vars[name] = value
        return value

    def get(self, name: Symbol) -> LispValue:
        """Return the value bound to `name`, or NOT_FOUND."""
        env: Optional[Environment] = self
        while env is not None:
            value = env.vars.get(name, NOT_FOUND)
            if value is not NOT_FOUND:
                return value
            env = env.outer
        return NOT_FOUND

    def lookup(self, name: Symbol) -> LispValue:
        """Look up `name`; raises EvalError if it is unbound."""
        value = self.get(name)
        if value is NOT_FOUND:
            raise EvalError(f"'{name}' not found")
        return value

    def update(self, mapping: dict[Symbol, LispValue]) -> None:
        """Bulk-define a mapping of Symbol -> value in the current frame."""
        for k, v in mapping.items():
            self.set(k, v)

    def is_debug_eval(self) -> bool:
        value = self.get(DEBUG_EVAL)
        return value is not NOT_FOUND and is_truthy(value)

    def __repr__(self) -> str:
        """Frame sizes along the chain; values may be large or cyclic."""
        sizes = []
        env: Optional[Environment] = self
        while env is not None:
            sizes.append(str(len(env.vars)))
            env = env.outer
        return f"<Environment chain: {' -> '.join(sizes)}>"
