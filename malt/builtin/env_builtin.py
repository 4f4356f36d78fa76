"""Built-in functions for the malt runtime environment.

This module defines core arithmetic, comparison, collection processing,
predicates, atoms and fibers, metadata, printing and registration utilities
exposed to Lisp code.

Every builtin takes (env, args) and returns either a value or, when it has to
call back into the evaluator, a Trampoline.
"""
from __future__ import annotations

import time
from typing import Any

from malt import LispValue
from malt.errors import EvalError, UserError
from malt.evaluation.apply import apply as apply_engine, is_function
from malt.evaluation.evaluator import evaluate
from malt.printer import pr_str
from malt.reader.parser import read_str
from malt.types.atom import Atom
from malt.types.environment import Environment
from malt.types.fiber import Fiber
from malt.types.hash_map import HashMap
from malt.types.lambda_fn import Lambda
from malt.types.nil import Constant, FALSE, Nil, TRUE, to_bool
from malt.types.persistent import SegmentedList
from malt.types.sequences import (
    Cons,
    EMPTY_LIST,
    LispList,
    Sequence,
    Vector,
    list_of,
    make_list,
    make_vector,
    values_equal,
)
from malt.types.symbol import Keyword, Symbol
from malt.types.trampoline import Trampoline, traverse

_INT64_MIN = -(2 ** 63)
_INT64_SPAN = 2 ** 64


def _arity(name: str, args: list[LispValue], count: int) -> None:
    if len(args) != count:
        raise EvalError(f"{name} requires exactly {count} argument(s), got {len(args)}")


def _min_arity(name: str, args: list[LispValue], count: int) -> None:
    if len(args) < count:
        raise EvalError(f"{name} requires at least {count} argument(s), got {len(args)}")


def _expect(name: str, value: LispValue, types: Any, what: str) -> Any:
    if not isinstance(value, types):
        raise EvalError(f"{name} expects {what}, got {pr_str(value, True)}")
    return value


def _numbers(name: str, args: list[LispValue]) -> list[int]:
    for x in args:
        _expect(name, x, int, "numbers")
    return args


def _seq_or_nil(name: str, value: LispValue) -> Sequence:
    """Sequence arguments also accept nil, read as the empty list."""
    if value is Nil:
        return EMPTY_LIST
    return _expect(name, value, Sequence, "a sequence or nil")


# -------------------------------
# Arithmetic (64-bit, wrapping)
# -------------------------------
def wrap64(n: int) -> int:
    """Two's complement wrap of an arbitrary int into the signed 64-bit range."""
    return (n - _INT64_MIN) % _INT64_SPAN + _INT64_MIN


def _trunc_div(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


def add(env: Environment, args: list[LispValue]) -> LispValue:
    """Return the wrapped sum of all arguments; 0 for none."""
    return wrap64(sum(_numbers("+", args)))


def sub(env: Environment, args: list[LispValue]) -> LispValue:
    """Subtract all subsequent numbers from the first; unary negation for one arg."""
    _min_arity("-", args, 1)
    nums = _numbers("-", args)
    if len(nums) == 1:
        return wrap64(-nums[0])
    result = nums[0]
    for x in nums[1:]:
        result = wrap64(result - x)
    return result


def mul(env: Environment, args: list[LispValue]) -> LispValue:
    """Return the wrapped product of all arguments; 1 for none."""
    result = 1
    for x in _numbers("*", args):
        result = wrap64(result * x)
    return result


def div(env: Environment, args: list[LispValue]) -> LispValue:
    """Divide left-to-right, truncating toward zero."""
    _min_arity("/", args, 2)
    nums = _numbers("/", args)
    result = nums[0]
    for x in nums[1:]:
        if x == 0:
            raise EvalError("Division by zero")
        result = wrap64(_trunc_div(result, x))
    return result


def mod(env: Environment, args: list[LispValue]) -> LispValue:
    """(% n d): remainder with the sign of the dividend."""
    _arity("%", args, 2)
    n, d = _numbers("%", args)
    if d == 0:
        raise EvalError("Modulo by zero")
    return wrap64(n - d * _trunc_div(n, d))


# -------------------------------
# Comparison
# -------------------------------
def equals(env: Environment, args: list[LispValue]) -> Constant:
    """Return true if all arguments are equal (deep for collections)."""
    _min_arity("=", args, 1)
    first = args[0]
    return to_bool(all(values_equal(first, other) for other in args[1:]))


def _chain(name: str, args: list[LispValue], op) -> Constant:
    _min_arity(name, args, 2)
    nums = _numbers(name, args)
    return to_bool(all(op(a, b) for a, b in zip(nums, nums[1:])))


def lt(env: Environment, args: list[LispValue]) -> Constant:
    """Chainable less-than: true if a0 < a1 < a2 ... holds for all pairs."""
    return _chain("<", args, lambda a, b: a < b)


def lte(env: Environment, args: list[LispValue]) -> Constant:
    return _chain("<=", args, lambda a, b: a <= b)


def gt(env: Environment, args: list[LispValue]) -> Constant:
    return _chain(">", args, lambda a, b: a > b)


def gte(env: Environment, args: list[LispValue]) -> Constant:
    return _chain(">=", args, lambda a, b: a >= b)


# -------------------------------
# Predicates
# -------------------------------
def _predicate(name: str, test):
    def check(env: Environment, args: list[LispValue]) -> Constant:
        _arity(name, args, 1)
        return to_bool(test(args[0]))

    check.__name__ = name
    check.__doc__ = f"({name} x)"
    return check


PREDICATES = {
    "nil?": lambda x: x is Nil,
    "true?": lambda x: x is TRUE,
    "false?": lambda x: x is FALSE,
    "symbol?": lambda x: isinstance(x, Symbol),
    "keyword?": lambda x: isinstance(x, Keyword),
    "string?": lambda x: isinstance(x, str),
    "number?": lambda x: isinstance(x, int),
    "fn?": is_function,
    "macro?": lambda x: isinstance(x, Lambda) and x.is_macro,
    "list?": lambda x: isinstance(x, LispList),
    "vector?": lambda x: isinstance(x, Vector),
    "sequential?": lambda x: isinstance(x, Sequence),
    "map?": lambda x: isinstance(x, HashMap),
    "atom?": lambda x: isinstance(x, Atom),
    "fiber?": lambda x: isinstance(x, Fiber),
}


# -------------------------------
# Constructors
# -------------------------------
def list_builtin(env: Environment, args: list[LispValue]) -> LispList:
    """Construct a list from the provided arguments."""
    return make_list(args)


def vector_builtin(env: Environment, args: list[LispValue]) -> Vector:
    return make_vector(args)


def hash_map(env: Environment, args: list[LispValue]) -> HashMap:
    """(hash-map k1 v1 ...)"""
    return HashMap.from_pairs(args)


def symbol(env: Environment, args: list[LispValue]) -> Symbol:
    _arity("symbol", args, 1)
    return Symbol(_expect("symbol", args[0], str, "a string"))


def keyword(env: Environment, args: list[LispValue]) -> Keyword:
    _arity("keyword", args, 1)
    if isinstance(args[0], Keyword):
        return args[0]
    return Keyword(_expect("keyword", args[0], str, "a string"))


# -------------------------------
# Sequences
# -------------------------------
def cons(env: Environment, args: list[LispValue]) -> Sequence:
    """Prepend head to a sequence.

    Behavior:
    - If the tail is nil, returns a single-element list.
    - If the tail is a list or vector, returns a new list (non-destructive).
    - If the tail is a cons cell or lazy sequence, returns a cons cell so the
      tail is not forced.
    """
    _arity("cons", args, 2)
    head, tail = args
    if tail is Nil:
        return list_of(head)
    if isinstance(tail, (LispList, Vector)):
        return LispList(tail.items.prepend(head))
    return Cons(head, _expect("cons", tail, Sequence, "a sequence or nil"))


def concat(env: Environment, args: list[LispValue]) -> LispList:
    """(concat s1 s2 ...) -> one list with the elements of every argument."""
    result = SegmentedList.empty()
    for arg in args:
        seq = _seq_or_nil("concat", arg)
        if isinstance(seq, (LispList, Vector)):
            result = result.concat(seq.items)
        else:
            result = result.concat(SegmentedList.of(iter(seq)))
    return LispList(result)


def vec(env: Environment, args: list[LispValue]) -> Vector:
    _arity("vec", args, 1)
    return make_vector(_seq_or_nil("vec", args[0]))


def nth(env: Environment, args: list[LispValue]) -> LispValue:
    _arity("nth", args, 2)
    seq = _seq_or_nil("nth", args[0])
    index = _expect("nth", args[1], int, "an integer index")
    try:
        return seq.nth(index)
    except IndexError:
        raise EvalError(f"nth: index {index} out of bounds")


def first(env: Environment, args: list[LispValue]) -> LispValue:
    """Return the first element; nil for an empty sequence or nil."""
    _arity("first", args, 1)
    return _seq_or_nil("first", args[0]).first()


def rest(env: Environment, args: list[LispValue]) -> Sequence:
    """Return everything after the first element; () for an empty sequence or nil."""
    _arity("rest", args, 1)
    return _seq_or_nil("rest", args[0]).rest()


def seq(env: Environment, args: list[LispValue]) -> LispValue:
    """(seq x): nil when empty, otherwise a list view of x."""
    _arity("seq", args, 1)
    value = args[0]
    if isinstance(value, str):
        return make_list(value) if value else Nil
    s = _seq_or_nil("seq", value)
    if s.is_empty():
        return Nil
    if isinstance(s, Vector):
        return make_list(s)
    return s


def conj(env: Environment, args: list[LispValue]) -> Sequence:
    """Lists grow at the front, vectors at the back."""
    _min_arity("conj", args, 1)
    coll = _seq_or_nil("conj", args[0])
    if isinstance(coll, Vector):
        for item in args[1:]:
            coll = coll.append(item)
        return coll
    if not isinstance(coll, LispList):
        coll = coll.to_list()
    for item in args[1:]:
        coll = coll.prepend(item)
    return coll


def count(env: Environment, args: list[LispValue]) -> int:
    _arity("count", args, 1)
    value = args[0]
    if isinstance(value, HashMap):
        return len(value)
    return len(_seq_or_nil("count", value))


def is_empty(env: Environment, args: list[LispValue]) -> Constant:
    _arity("empty?", args, 1)
    value = args[0]
    if isinstance(value, HashMap):
        return to_bool(value.is_empty())
    return to_bool(_seq_or_nil("empty?", value).is_empty())


def take(env: Environment, args: list[LispValue]) -> LispList:
    """(take n coll): at most n leading elements; only those are realized."""
    _arity("take", args, 2)
    n = _expect("take", args[0], int, "an integer count")
    s = _seq_or_nil("take", args[1])
    taken = []
    while len(taken) < n and not s.is_empty():
        taken.append(s.head())
        s = s.tail()
    return make_list(taken)


def map_builtin(env: Environment, args: list[LispValue]) -> Trampoline:
    """(map f coll): apply f to each element, in order, into a list."""
    _arity("map", args, 2)
    fn, coll = args
    return traverse(
        _seq_or_nil("map", coll),
        lambda item: apply_engine(fn, [item], env, evaluate),
    ).map(LispList)


def apply(env: Environment, args: list[LispValue]) -> Trampoline:
    """Builtin apply: (apply f a b [c d]) spreads the last argument.

    Delegates to the central engine so a closure applied in tail position
    stays on the trampoline.
    """
    _min_arity("apply", args, 1)
    fn = args[0]
    if len(args) == 1:
        return apply_engine(fn, [], env, evaluate)
    spread = list(_seq_or_nil("apply", args[-1]))
    return apply_engine(fn, list(args[1:-1]) + spread, env, evaluate)


# -------------------------------
# Maps
# -------------------------------
def _map_or_nil(name: str, value: LispValue) -> HashMap:
    if value is Nil:
        return HashMap()
    return _expect(name, value, HashMap, "a map")


def assoc(env: Environment, args: list[LispValue]) -> HashMap:
    _min_arity("assoc", args, 1)
    base = _map_or_nil("assoc", args[0])
    additions = HashMap.from_pairs(args[1:])
    return base.assoc(dict(additions.items()))


def dissoc(env: Environment, args: list[LispValue]) -> HashMap:
    _min_arity("dissoc", args, 1)
    return _map_or_nil("dissoc", args[0]).dissoc(args[1:])


def get(env: Environment, args: list[LispValue]) -> LispValue:
    """(get m k): the value for k, or nil when absent or m is nil."""
    _arity("get", args, 2)
    m, key = args
    if m is Nil:
        return Nil
    return _expect("get", m, HashMap, "a map").get(key)


def contains(env: Environment, args: list[LispValue]) -> Constant:
    _arity("contains?", args, 2)
    return to_bool(_map_or_nil("contains?", args[0]).contains(args[1]))


def keys(env: Environment, args: list[LispValue]) -> LispList:
    _arity("keys", args, 1)
    return make_list(_map_or_nil("keys", args[0]).keys())


def vals(env: Environment, args: list[LispValue]) -> LispList:
    _arity("vals", args, 1)
    return make_list(_map_or_nil("vals", args[0]).values())


# -------------------------------
# Atoms and fibers
# -------------------------------
def atom(env: Environment, args: list[LispValue]) -> Atom:
    """(atom x): a new mutable reference holding x."""
    _arity("atom", args, 1)
    return Atom(args[0])


def deref(env: Environment, args: list[LispValue]) -> LispValue:
    """(deref a): an atom's current value, or a fiber's result (waiting for it)."""
    _arity("deref", args, 1)
    target = args[0]
    if isinstance(target, Atom):
        return target.deref()
    if isinstance(target, Fiber):
        return target.join()
    raise EvalError(f"deref expects an atom or fiber, got {pr_str(target, True)}")


def reset(env: Environment, args: list[LispValue]) -> LispValue:
    _arity("reset!", args, 2)
    return _expect("reset!", args[0], Atom, "an atom").reset(args[1])


def swap(env: Environment, args: list[LispValue]) -> LispValue:
    """(swap! a f & more): set a to (f @a more...), retrying if a changed meanwhile."""
    _min_arity("swap!", args, 2)
    target = _expect("swap!", args[0], Atom, "an atom")
    fn, extra = args[1], list(args[2:])
    return target.swap(
        lambda current: apply_engine(fn, [current, *extra], env, evaluate).run()
    )


def join(env: Environment, args: list[LispValue]) -> LispValue:
    """(join f): wait for a fiber; its failure is re-raised here."""
    _arity("join", args, 1)
    return _expect("join", args[0], Fiber, "a fiber").join()


# -------------------------------
# Metadata
# -------------------------------
def meta(env: Environment, args: list[LispValue]) -> LispValue:
    _arity("meta", args, 1)
    value = getattr(args[0], "meta", None)
    return Nil if value is None else value


def with_meta(env: Environment, args: list[LispValue]) -> LispValue:
    """(with-meta x m): a copy of x carrying m; x itself is unchanged."""
    _arity("with-meta", args, 2)
    target, new_meta = args
    if not hasattr(target, "with_meta"):
        raise EvalError(f"with-meta: cannot attach metadata to {pr_str(target, True)}")
    return target.with_meta(new_meta)


# -------------------------------
# Errors, strings and I/O
# -------------------------------
def throw(env: Environment, args: list[LispValue]) -> LispValue:
    """(throw v): raise v; `catch*` binds it unchanged."""
    _arity("throw", args, 1)
    raise UserError(args[0])


def pr_str_builtin(env: Environment, args: list[LispValue]) -> str:
    return " ".join(pr_str(a, True) for a in args)


def str_builtin(env: Environment, args: list[LispValue]) -> str:
    return "".join(pr_str(a, False) for a in args)


def prn(env: Environment, args: list[LispValue]) -> LispValue:
    """Print readable representations of args followed by newline; returns nil."""
    print(" ".join(pr_str(a, True) for a in args))
    return Nil


def println(env: Environment, args: list[LispValue]) -> LispValue:
    """Print display representations of args followed by newline; returns nil."""
    print(" ".join(pr_str(a, False) for a in args))
    return Nil


def read_string(env: Environment, args: list[LispValue]) -> LispValue:
    _arity("read-string", args, 1)
    return read_str(_expect("read-string", args[0], str, "a string"))


def time_ms(env: Environment, args: list[LispValue]) -> int:
    return int(time.time() * 1000)


def register(env: Environment) -> None:
    """Register all builtin functions into the given environment."""
    env.update(
        {
            Symbol("+"): add,
            Symbol("-"): sub,
            Symbol("*"): mul,
            Symbol("/"): div,
            Symbol("%"): mod,
            Symbol("="): equals,
            Symbol("<"): lt,
            Symbol("<="): lte,
            Symbol(">"): gt,
            Symbol(">="): gte,
            Symbol("list"): list_builtin,
            Symbol("vector"): vector_builtin,
            Symbol("hash-map"): hash_map,
            Symbol("symbol"): symbol,
            Symbol("keyword"): keyword,
            Symbol("cons"): cons,
            Symbol("concat"): concat,
            Symbol("vec"): vec,
            Symbol("nth"): nth,
            Symbol("first"): first,
            Symbol("rest"): rest,
            Symbol("seq"): seq,
            Symbol("conj"): conj,
            Symbol("count"): count,
            Symbol("empty?"): is_empty,
            Symbol("take"): take,
            Symbol("map"): map_builtin,
            Symbol("apply"): apply,
            Symbol("assoc"): assoc,
            Symbol("dissoc"): dissoc,
            Symbol("get"): get,
            Symbol("contains?"): contains,
            Symbol("keys"): keys,
            Symbol("vals"): vals,
            Symbol("atom"): atom,
            Symbol("deref"): deref,
            Symbol("reset!"): reset,
            Symbol("swap!"): swap,
            Symbol("join"): join,
            Symbol("meta"): meta,
            Symbol("with-meta"): with_meta,
            Symbol("throw"): throw,
            Symbol("pr-str"): pr_str_builtin,
            Symbol("str"): str_builtin,
            Symbol("prn"): prn,
            Symbol("println"): println,
            Symbol("read-string"): read_string,
            Symbol("time-ms"): time_ms,
        }
    )
    env.update({Symbol(name): _predicate(name, test) for name, test in PREDICATES.items()})
