from __future__ import annotations
import os


# The single grammar version accepted by the reader
SUPPORTED_VERSION = "v0.1"

# Defaults
_DEFAULT_MAX_CALL_DEPTH = 100
_DEFAULT_MAX_EXPANSION_DEPTH = 100


def int_from_env(var: str, default: int) -> int:
    raw = os.environ.get(var)
    if not raw or not raw.strip():
        return default
    value = int(raw.strip())
    if value < 1:
        raise ValueError(f"{var} must be a positive integer, got {value}")
    return value


def get_max_call_depth() -> int:
    return int_from_env('JEXL_MAX_CALL_DEPTH', _DEFAULT_MAX_CALL_DEPTH)


def get_max_expansion_depth() -> int:
    return int_from_env('JEXL_MAX_EXPANSION_DEPTH', _DEFAULT_MAX_EXPANSION_DEPTH)
