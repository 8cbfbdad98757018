"""
Case conversion for API responses.
Internal records use snake_case; the browser client expects camelCase keys.
"""
from typing import Any, Iterable

from pydantic.alias_generators import to_camel


def to_camel_key(s: str) -> str:
    """Convert a single snake_case key to camelCase (first letter lower)."""
    return to_camel(s)


def dict_keys_to_camel(obj: Any, verbatim: Iterable[str] = ()) -> Any:
    """
    Recursively convert dict keys from snake_case to camelCase.

    Values under a key listed in `verbatim` are copied without touching their
    own keys (e.g. preference maps keyed by milestone type).
    """
    verbatim = frozenset(verbatim)
    return _convert(obj, verbatim)


def _convert(obj: Any, verbatim: frozenset) -> Any:
    if isinstance(obj, dict):
        out: dict = {}
        for k, v in obj.items():
            out[to_camel_key(k)] = v if k in verbatim else _convert(v, verbatim)
        return out
    if isinstance(obj, list):
        return [_convert(x, verbatim) for x in obj]
    return obj
