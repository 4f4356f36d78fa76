from __future__ import annotations

from typing import List

from malt import LispValue
from malt.errors import EvalError
from malt.types.environment import Environment
from malt.types.sequences import make_list
from malt.types.symbol import AMPERSAND, Symbol


def bind_arguments(
    formals: List[Symbol],
    supplied_args: List[LispValue],
    closure_env: Environment,
) -> Environment:
    """
    Single source of truth for parameter binding.

    Supports:
    - Positional required parameters
    - `&` followed by one name, capturing the remaining supplied args as a list

    Returns a new Environment whose outer is the closure_env.
    """
    local_env = Environment(outer=closure_env)
    formals = list(formals)
    supplied = list(supplied_args)

    if AMPERSAND in formals:
        amp_index = formals.index(AMPERSAND)
        if amp_index != len(formals) - 2:
            raise EvalError("Malformed parameter list: & must be followed by exactly one name")
        required = formals[:amp_index]
        rest_name = formals[amp_index + 1]
    else:
        required = formals
        rest_name = None

    for formal in required + ([rest_name] if rest_name is not None else []):
        if not isinstance(formal, Symbol):
            raise EvalError(f"Parameter names must be symbols, got {formal!r}")

    if len(supplied) < len(required):
        missing = required[len(supplied):]
        raise EvalError(
            f"Too few arguments; missing {len(missing)} parameter(s): {[str(s) for s in missing]}"
        )
    if rest_name is None and len(supplied) > len(required):
        raise EvalError(f"Too many arguments: expected {len(required)}, got {len(supplied)}")

    for formal, value in zip(required, supplied):
        local_env.set(formal, value)
    if rest_name is not None:
        local_env.set(rest_name, make_list(supplied[len(required):]))
    return local_env
