from __future__ import annotations


class Constant:
    """One of the three language constants. Compared by identity."""

    __slots__ = ("name",)

    def __init__(self, name: str):
        self.name = name

    def __repr__(self):
        return self.name

    def __bool__(self):
        return self.name == "true"


Nil = Constant("nil")
TRUE = Constant("true")
FALSE = Constant("false")


def is_truthy(value) -> bool:
    """Anything other than nil and false is truthy."""
    return value is not Nil and value is not FALSE


def to_bool(flag: bool) -> Constant:
    return TRUE if flag else FALSE
