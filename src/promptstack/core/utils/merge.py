"""Dictionary merging for layered configuration.

Dicts merge recursively; lists are replaced unless the overriding list
starts with a ``"+"`` marker, in which case its remaining items are appended.
A leading ``"="`` marker forces replacement explicitly.
"""
from __future__ import annotations

from typing import Any, Dict, List


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``override`` onto ``base`` without mutating either.

    Example:
        >>> deep_merge({"a": 1, "b": {"c": 2}}, {"b": {"d": 3}})
        {'a': 1, 'b': {'c': 2, 'd': 3}}
    """
    result: Dict[str, Any] = dict(base)
    for key, value in (override or {}).items():
        current = result.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            result[key] = deep_merge(current, value)
        elif isinstance(current, list) and isinstance(value, list):
            result[key] = merge_arrays(current, value)
        elif isinstance(value, list):
            result[key] = merge_arrays([], value)
        else:
            result[key] = value
    return result


def merge_arrays(base: List[Any], override: List[Any]) -> List[Any]:
    """Merge two lists honoring the ``"+"`` / ``"="`` markers.

    Example:
        >>> merge_arrays(["a"], ["+", "b"])
        ['a', 'b']
        >>> merge_arrays(["a"], ["b"])
        ['b']
    """
    if not override:
        return list(base)
    first = override[0]
    if first == "+":
        return [*base, *override[1:]]
    if first == "=":
        return list(override[1:])
    return list(override)


__all__ = ["deep_merge", "merge_arrays"]
