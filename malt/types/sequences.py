"""Sequence values: list, vector, cons cell and lazy sequence.

All four answer the same protocol (``head``, ``tail``, ``is_empty``,
iteration, ``nth``) and compare element-wise with each other. Lists and
vectors are backed by SegmentedList; the evaluator tells them apart by type,
a list head may be a special form or callable, a vector's never is.
"""

from __future__ import annotations

import threading
from typing import Any, Callable, Iterable, Iterator

from malt import LispValue
from malt.errors import LazyContractError
from malt.types.nil import Nil
from malt.types.persistent import SegmentedList


class Sequence:
    """Shared behaviour of every ordered collection value."""

    __slots__ = ()

    meta: LispValue

    def head(self) -> LispValue:
        raise NotImplementedError

    def tail(self) -> Sequence:
        raise NotImplementedError

    def is_empty(self) -> bool:
        raise NotImplementedError

    def with_meta(self, meta: LispValue) -> Sequence:
        raise NotImplementedError

    def __iter__(self) -> Iterator[LispValue]:
        seq: Sequence = self
        while not seq.is_empty():
            yield seq.head()
            seq = seq.tail()

    def __len__(self) -> int:
        count = 0
        for _ in self:
            count += 1
        return count

    def __bool__(self) -> bool:
        # Python truthiness follows the language: every sequence is truthy
        return True

    def nth(self, index: int) -> LispValue:
        if index >= 0:
            for i, item in enumerate(self):
                if i == index:
                    return item
        raise IndexError(f"index {index} out of bounds")

    def first(self) -> LispValue:
        return Nil if self.is_empty() else self.head()

    def rest(self) -> Sequence:
        return EMPTY_LIST if self.is_empty() else self.tail()

    def to_list(self) -> LispList:
        return LispList(SegmentedList.of(iter(self)))

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, Sequence):
            return False
        mine, theirs = iter(self), iter(other)
        sentinel = object()
        while True:
            a = next(mine, sentinel)
            b = next(theirs, sentinel)
            if a is sentinel or b is sentinel:
                return a is b
            if not values_equal(a, b):
                return False

    __hash__ = None  # type: ignore[assignment]


class _Backed(Sequence):
    """Sequence over a SegmentedList."""

    __slots__ = ("items", "meta")

    def __init__(self, items: SegmentedList, meta: LispValue = None):
        self.items = items
        self.meta = meta

    def head(self) -> LispValue:
        return self.items.first()

    def tail(self) -> LispList:
        return LispList(self.items.drop_first())

    def is_empty(self) -> bool:
        return not self.items

    def __iter__(self) -> Iterator[LispValue]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def nth(self, index: int) -> LispValue:
        return self.items.get(index)

    def __getitem__(self, index: int) -> LispValue:
        return self.items.get(index)

    def __repr__(self) -> str:
        from malt.printer import pr_str

        return pr_str(self, True)


class LispList(_Backed):
    __slots__ = ()

    def with_meta(self, meta: LispValue) -> LispList:
        return LispList(self.items, meta)

    def to_list(self) -> LispList:
        return self

    def prepend(self, item: LispValue) -> LispList:
        return LispList(self.items.prepend(item))


class Vector(_Backed):
    __slots__ = ()

    def with_meta(self, meta: LispValue) -> Vector:
        return Vector(self.items, meta)

    def append(self, item: LispValue) -> Vector:
        return Vector(self.items.append(item))


class Cons(Sequence):
    """A head in front of any sequence; O(1) and never copies the tail."""

    __slots__ = ("first_item", "rest_seq", "meta")

    def __init__(self, head: LispValue, tail: Sequence, meta: LispValue = None):
        self.first_item = head
        self.rest_seq = tail
        self.meta = meta

    def head(self) -> LispValue:
        return self.first_item

    def tail(self) -> Sequence:
        return self.rest_seq

    def is_empty(self) -> bool:
        return False

    def with_meta(self, meta: LispValue) -> Cons:
        return Cons(self.first_item, self.rest_seq, meta)

    def __repr__(self) -> str:
        return f"Cons({self.first_item!r}, ...)"


class LazySeq(Sequence):
    """Unrealized thunk that becomes a concrete sequence on first observation.

    The thunk runs at most once. ``nil`` realizes to the empty list; a nested
    lazy sequence is unwrapped one layer at a time, iteratively.
    """

    __slots__ = ("_thunk", "_value", "_lock", "_realizing", "meta")

    def __init__(self, thunk: Callable[[], LispValue], meta: LispValue = None):
        self._thunk: Callable[[], LispValue] | None = thunk
        self._value: Sequence | None = None
        self._lock = threading.RLock()
        self._realizing = False
        self.meta = meta

    def is_realized(self) -> bool:
        return self._thunk is None

    def peek(self) -> Sequence | None:
        """The sequence behind this one if already realized, without forcing it."""
        return self._value if self._thunk is None else None

    def _force_once(self) -> Sequence:
        if self._thunk is None:
            return self._value
        with self._lock:
            if self._thunk is None:
                return self._value
            if self._realizing:
                raise LazyContractError("lazy-seq forced itself while being realized")
            self._realizing = True
            try:
                result = self._thunk()
            finally:
                self._realizing = False
            if result is Nil:
                value = EMPTY_LIST
            elif isinstance(result, Sequence):
                value = result
            else:
                from malt.printer import pr_str

                raise LazyContractError(
                    f"lazy-seq must return a sequence or nil, got: {pr_str(result, True)}"
                )
            self._value = value
            self._thunk = None
            return value

    def realize(self) -> Sequence:
        """Return the first non-lazy sequence behind this one."""
        seq = self._force_once()
        while isinstance(seq, LazySeq):
            seq = seq._force_once()
        self._value = seq
        return seq

    def head(self) -> LispValue:
        return self.realize().head()

    def tail(self) -> Sequence:
        return self.realize().tail()

    def is_empty(self) -> bool:
        return self.realize().is_empty()

    def with_meta(self, meta: LispValue) -> LazySeq:
        return LazySeq(self.realize, meta)

    def __repr__(self) -> str:
        state = "realized" if self.is_realized() else "pending"
        return f"LazySeq<{state}>"


EMPTY_LIST = LispList(SegmentedList.empty())
EMPTY_VECTOR = Vector(SegmentedList.empty())


def list_of(*items: LispValue) -> LispList:
    return LispList(SegmentedList.of(items))


def make_list(items: Iterable[LispValue]) -> LispList:
    if isinstance(items, LispList):
        return items
    if isinstance(items, _Backed):
        return LispList(items.items)
    return LispList(SegmentedList.of(items))


def make_vector(items: Iterable[LispValue]) -> Vector:
    if isinstance(items, Vector):
        return items
    if isinstance(items, _Backed):
        return Vector(items.items)
    return Vector(SegmentedList.of(items))


def values_equal(a: Any, b: Any) -> bool:
    """Language equality: deep for collections, identity for atoms/functions.

    Python's ``1 == True`` style coercions never apply since the language's
    constants are not Python bools.
    """
    if a is b:
        return True
    if isinstance(a, Sequence) or isinstance(b, Sequence):
        return isinstance(a, Sequence) and isinstance(b, Sequence) and a == b
    if type(a) is not type(b):
        return False
    return a == b
