from __future__ import annotations

from concurrent.futures import Future

from malt import LispValue


class Fiber:
    """Joinable handle to work scheduled by `spawn`."""

    __slots__ = ("_future",)

    def __init__(self, future: Future):
        self._future = future

    def done(self) -> bool:
        return self._future.done()

    def join(self) -> LispValue:
        """Block until the work finishes; a worker failure is re-raised here."""
        return self._future.result()

    def __repr__(self) -> str:
        state = "done" if self.done() else "running"
        return f"Fiber<{state}>"
