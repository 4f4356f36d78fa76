from __future__ import annotations

from typing import Iterable, Iterator

from malt import LispValue
from malt.errors import EvalError
from malt.types.nil import Nil
from malt.types.symbol import Keyword, Symbol

# The only values allowed as map keys
MapKey = str | Keyword | Symbol


def check_key(key: LispValue) -> MapKey:
    if isinstance(key, (str, Keyword, Symbol)):
        return key
    from malt.printer import pr_str

    raise EvalError(f"invalid map key {pr_str(key, True)}: keys must be strings, keywords or symbols")


class HashMap:
    """Immutable map keyed by strings, keywords and symbols.

    The backing dict is private and never handed out; assoc/dissoc copy it.
    """

    __slots__ = ("_entries", "meta")

    def __init__(self, entries: dict[MapKey, LispValue] | None = None, meta: LispValue = None):
        self._entries: dict[MapKey, LispValue] = {}
        if entries:
            for k, v in entries.items():
                self._entries[check_key(k)] = v
        self.meta = meta

    @classmethod
    def from_pairs(cls, flat: Iterable[LispValue]) -> HashMap:
        """Build from k1 v1 k2 v2 ..."""
        items = list(flat)
        if len(items) % 2:
            raise EvalError("map requires an even number of forms")
        result = cls()
        for i in range(0, len(items), 2):
            result._entries[check_key(items[i])] = items[i + 1]
        return result

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return True

    def is_empty(self) -> bool:
        return not self._entries

    def __iter__(self) -> Iterator[MapKey]:
        return iter(self._entries)

    def items(self):
        return self._entries.items()

    def keys(self):
        return self._entries.keys()

    def values(self):
        return self._entries.values()

    def get(self, key: LispValue, default: LispValue = Nil) -> LispValue:
        if not isinstance(key, (str, Keyword, Symbol)):
            return default
        return self._entries.get(key, default)

    def contains(self, key: LispValue) -> bool:
        return isinstance(key, (str, Keyword, Symbol)) and key in self._entries

    def assoc(self, pairs: dict[MapKey, LispValue]) -> HashMap:
        copy = dict(self._entries)
        for k, v in pairs.items():
            copy[check_key(k)] = v
        return HashMap(copy)

    def dissoc(self, keys: Iterable[LispValue]) -> HashMap:
        copy = dict(self._entries)
        for k in keys:
            if isinstance(k, (str, Keyword, Symbol)):
                copy.pop(k, None)
        return HashMap(copy)

    def with_meta(self, meta: LispValue) -> HashMap:
        result = HashMap(meta=meta)
        result._entries = self._entries
        return result

    def __eq__(self, other: object) -> bool:
        from malt.types.sequences import values_equal

        if not isinstance(other, HashMap):
            return False
        if self._entries.keys() != other._entries.keys():
            return False
        return all(values_equal(v, other._entries[k]) for k, v in self._entries.items())

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        from malt.printer import pr_str

        return pr_str(self, True)


EMPTY_MAP = HashMap()
