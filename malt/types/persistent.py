"""Immutable segmented list.

Backed by a tuple of tuples ("segments") plus a tuple of cumulative sizes:

- append/prepend copy at most one end segment (or add a new one);
- random access is a binary search over the cumulative sizes (O(log k));
- segments are tuples, so no two instances can ever alias mutable storage.

Every ordered collection value (list, vector, evaluated argument lists)
is built on top of this type.
"""

from __future__ import annotations

from bisect import bisect_right
from typing import Any, Iterable, Iterator

from malt.config import get_segment_size


class SegmentedList:
    __slots__ = ("_segments", "_cumulative", "_size", "_capacity")

    def __init__(
        self,
        segments: tuple[tuple[Any, ...], ...],
        cumulative: tuple[int, ...],
        capacity: int,
    ):
        self._segments = segments
        # cumulative[i] = number of elements up to and including segment i
        self._cumulative = cumulative
        self._size = cumulative[-1] if cumulative else 0
        self._capacity = capacity

    # --- Construction ---
    @classmethod
    def empty(cls, capacity: int | None = None) -> SegmentedList:
        if capacity is None:
            capacity = get_segment_size()
        if capacity <= 0:
            raise ValueError("segment capacity must be > 0")
        return cls((), (), capacity)

    @classmethod
    def of(cls, items: Iterable[Any], capacity: int | None = None) -> SegmentedList:
        """Build a list from any iterable, packing full segments."""
        if isinstance(items, SegmentedList):
            return items
        if capacity is None:
            capacity = get_segment_size()
        flat = tuple(items)
        segments = tuple(
            flat[i:i + capacity] for i in range(0, len(flat), capacity)
        )
        cumulative = []
        total = 0
        for seg in segments:
            total += len(seg)
            cumulative.append(total)
        return cls(segments, tuple(cumulative), capacity)

    # --- Queries ---
    def __len__(self) -> int:
        return self._size

    def __bool__(self) -> bool:
        return self._size > 0

    @property
    def capacity(self) -> int:
        return self._capacity

    def get(self, index: int) -> Any:
        if index < 0 or index >= self._size:
            raise IndexError(f"index={index}")
        seg_idx = bisect_right(self._cumulative, index)
        seg_start = self._cumulative[seg_idx - 1] if seg_idx else 0
        return self._segments[seg_idx][index - seg_start]

    __getitem__ = get

    def first(self) -> Any:
        if not self._size:
            raise IndexError("empty")
        return self._segments[0][0]

    def last(self) -> Any:
        if not self._size:
            raise IndexError("empty")
        return self._segments[-1][-1]

    def __iter__(self) -> Iterator[Any]:
        for seg in self._segments:
            yield from seg

    def __reversed__(self) -> Iterator[Any]:
        for seg in reversed(self._segments):
            yield from reversed(seg)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SegmentedList):
            return NotImplemented
        if self._size != other._size:
            return False
        return all(a == b for a, b in zip(self, other))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"SegmentedList([{', '.join(repr(x) for x in self)}])"

    # --- "Mutators" returning new instances ---
    def append(self, elem: Any) -> SegmentedList:
        segments, cumulative = self._segments, self._cumulative
        if segments and len(segments[-1]) < self._capacity:
            return SegmentedList(
                segments[:-1] + (segments[-1] + (elem,),),
                cumulative[:-1] + (cumulative[-1] + 1,),
                self._capacity,
            )
        return SegmentedList(
            segments + ((elem,),),
            cumulative + (self._size + 1,),
            self._capacity,
        )

    def prepend(self, elem: Any) -> SegmentedList:
        segments = self._segments
        if segments and len(segments[0]) < self._capacity:
            new_segments = ((elem,) + segments[0],) + segments[1:]
            new_cumulative = tuple(c + 1 for c in self._cumulative)
        else:
            new_segments = ((elem,),) + segments
            new_cumulative = (1,) + tuple(c + 1 for c in self._cumulative)
        return SegmentedList(new_segments, new_cumulative, self._capacity)

    def concat(self, other: SegmentedList) -> SegmentedList:
        if not other._size:
            return self
        if not self._size:
            return other
        offset = self._size
        return SegmentedList(
            self._segments + other._segments,
            self._cumulative + tuple(c + offset for c in other._cumulative),
            self._capacity,
        )

    def drop_first(self) -> SegmentedList:
        if not self._size:
            raise IndexError("empty")
        segments = self._segments
        if len(segments[0]) > 1:
            return SegmentedList(
                (segments[0][1:],) + segments[1:],
                tuple(c - 1 for c in self._cumulative),
                self._capacity,
            )
        # first segment held a single element: drop the segment
        return SegmentedList(
            segments[1:],
            tuple(c - 1 for c in self._cumulative[1:]),
            self._capacity,
        )

    def drop_last(self) -> SegmentedList:
        if not self._size:
            raise IndexError("empty")
        segments, cumulative = self._segments, self._cumulative
        if len(segments[-1]) > 1:
            return SegmentedList(
                segments[:-1] + (segments[-1][:-1],),
                cumulative[:-1] + (cumulative[-1] - 1,),
                self._capacity,
            )
        return SegmentedList(segments[:-1], cumulative[:-1], self._capacity)
