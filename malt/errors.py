from __future__ import annotations

from typing import Any


class MaltError(Exception):
    """ Base class for all malt errors"""

    kind = "error"


class ReaderError(MaltError):
    """ Raised when source text cannot be read (unbalanced brackets, EOF in a string)"""

    kind = "reader"


class EvalError(MaltError):
    """ Raised for unresolved symbols, malformed special forms and bad builtin calls"""

    kind = "eval"


class LazyContractError(EvalError):
    """ Raised when a lazy-seq body yields neither nil nor a sequence"""

    kind = "lazy-contract"


class UserError(MaltError):
    """ Raised by the language's own `throw`; carries the thrown value"""

    kind = "user"

    def __init__(self, value: Any):
        from malt.printer import pr_str

        super().__init__(pr_str(value, False))
        self.value = value
