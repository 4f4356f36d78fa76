"""The malt value universe, re-exported for convenience."""

from malt.types.symbol import Symbol, Keyword
from malt.types.nil import Nil, TRUE, FALSE, Constant, is_truthy
from malt.types.persistent import SegmentedList
from malt.types.sequences import (
    Sequence,
    LispList,
    Vector,
    Cons,
    LazySeq,
    EMPTY_LIST,
    EMPTY_VECTOR,
    list_of,
    make_list,
    make_vector,
    values_equal,
)
from malt.types.hash_map import HashMap, EMPTY_MAP
from malt.types.atom import Atom
from malt.types.fiber import Fiber
from malt.types.error_value import ErrorValue
from malt.types.environment import Environment, NOT_FOUND
from malt.types.lambda_fn import Lambda
from malt.types.trampoline import Trampoline, done, more

__all__ = [
    "Symbol",
    "Keyword",
    "Nil",
    "TRUE",
    "FALSE",
    "Constant",
    "is_truthy",
    "SegmentedList",
    "Sequence",
    "LispList",
    "Vector",
    "Cons",
    "LazySeq",
    "EMPTY_LIST",
    "EMPTY_VECTOR",
    "list_of",
    "make_list",
    "make_vector",
    "values_equal",
    "HashMap",
    "EMPTY_MAP",
    "Atom",
    "Fiber",
    "ErrorValue",
    "Environment",
    "NOT_FOUND",
    "Lambda",
    "Trampoline",
    "done",
    "more",
]
