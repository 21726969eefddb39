"""Conversion between domain dataclasses and plain JSON-compatible documents"""

from functools import lru_cache
from typing import Any, Dict, Type, TypeVar

import pydantic
from pydantic import TypeAdapter

from wealthblend.domain.exceptions import ValidationError

T = TypeVar("T")


@lru_cache(maxsize=None)
def adapter(cls: Any) -> TypeAdapter:
    return TypeAdapter(cls)


def dump(obj: Any, cls: Any = None) -> Any:
    """Serialize a dataclass (or list of them) to JSON-compatible values"""
    return adapter(cls or type(obj)).dump_python(obj, mode="json")


def load(cls: Type[T], data: Any) -> T:
    """
    Build a domain object from a document.

    Type and enum mismatches surface as ValidationError on the first
    offending field.
    """
    try:
        return adapter(cls).validate_python(data)
    except pydantic.ValidationError as e:
        error = e.errors()[0]
        field = _format_loc(error["loc"])
        raise ValidationError(field or "body", error["msg"]) from e


def deep_merge(base: Dict[str, Any], patch: Dict[str, Any]) -> Dict[str, Any]:
    """Merge `patch` into `base`: nested dicts merge, everything else replaces"""
    merged = dict(base)
    for key, value in patch.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _format_loc(loc: tuple) -> str:
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        elif path:
            path += f".{part}"
        else:
            path = str(part)
    return path
