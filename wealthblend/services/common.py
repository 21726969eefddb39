"""Helpers shared by the record pipelines"""

from typing import Any, Dict, Iterable, Type, TypeVar

from wealthblend.domain.exceptions import ValidationError
from wealthblend.utils.serialization import deep_merge, dump, load

T = TypeVar("T")

# Set by the store, never by callers
PROTECTED_FIELDS = frozenset({"id", "user_id", "created_at", "updated_at"})


def build_record(cls: Type[T], user_id: str, raw: Dict[str, Any], derived: Iterable[str]) -> T:
    """Construct a new record from caller input, discarding derived and store-owned fields"""
    data = _strip(raw, derived)
    data["user_id"] = user_id
    return load(cls, data)


def merge_patch(current: T, patch: Dict[str, Any], derived: Iterable[str], immutable: Iterable[str] = ()) -> T:
    """
    Apply a partial update to a loaded record.

    Nested objects merge key by key; lists and scalars replace. Fields in
    `immutable` may not be patched at all.
    """
    for name in immutable:
        if name in patch:
            raise ValidationError(name, "cannot be modified by an update")
    merged = deep_merge(dump(current), _strip(patch, derived))
    return load(type(current), merged)


def _strip(raw: Dict[str, Any], derived: Iterable[str]) -> Dict[str, Any]:
    blocked = PROTECTED_FIELDS | set(derived)
    return {key: value for key, value in raw.items() if key not in blocked}
