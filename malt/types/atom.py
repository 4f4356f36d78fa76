from __future__ import annotations

import threading
from typing import Callable

from malt import LispValue


class Atom:
    """The one mutable value: a single reference cell.

    Equality is identity. Reads and writes go through a per-atom lock;
    `swap` is a compare-and-retry loop so concurrent fibers never lose an update.
    """

    __slots__ = ("_value", "_lock", "meta")

    def __init__(self, value: LispValue, meta: LispValue = None):
        self._value = value
        self._lock = threading.Lock()
        self.meta = meta

    def deref(self) -> LispValue:
        with self._lock:
            return self._value

    def reset(self, value: LispValue) -> LispValue:
        with self._lock:
            self._value = value
        return value

    def compare_and_set(self, expected: LispValue, value: LispValue) -> bool:
        with self._lock:
            if self._value is not expected:
                return False
            self._value = value
            return True

    def swap(self, update: Callable[[LispValue], LispValue]) -> LispValue:
        # `update` may run more than once under contention
        while True:
            current = self.deref()
            new_value = update(current)
            if self.compare_and_set(current, new_value):
                return new_value

    def with_meta(self, meta: LispValue) -> Atom:
        # Same cell contents, new identity: metadata never mutates the original
        return Atom(self.deref(), meta)

    def __repr__(self) -> str:
        from malt.printer import pr_str

        return pr_str(self, True)
