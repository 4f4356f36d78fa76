from __future__ import annotations
import os


_DEFAULT_SEGMENT_SIZE = 64


def int_from_env(var: str, default: int) -> int:
    raw = os.environ.get(var)
    if not raw or not raw.strip():
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        raise ValueError(f"{var} must be an integer, got {raw!r}")
    if value <= 0:
        raise ValueError(f"{var} must be > 0, got {value}")
    return value


def flag_from_env(var: str, default: bool = False) -> bool:
    raw = os.environ.get(var)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def get_segment_size() -> int:
    return int_from_env('MALT_SEGMENT_SIZE', _DEFAULT_SEGMENT_SIZE)


def get_debug_eval() -> bool:
    return flag_from_env('MALT_DEBUG_EVAL')
