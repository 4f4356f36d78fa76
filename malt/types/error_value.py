from __future__ import annotations

from malt import LispValue


class ErrorValue:
    """A caught host or interpreter failure, as seen from `catch*`."""

    __slots__ = ("exception", "meta")

    def __init__(self, exception: BaseException, meta: LispValue = None):
        self.exception = exception
        self.meta = meta

    @property
    def message(self) -> str:
        return str(self.exception) or type(self.exception).__name__

    @property
    def kind(self) -> str:
        return getattr(self.exception, "kind", "host")

    def with_meta(self, meta: LispValue) -> ErrorValue:
        return ErrorValue(self.exception, meta)

    def __repr__(self) -> str:
        return f"ErrorValue({self.exception!r})"
