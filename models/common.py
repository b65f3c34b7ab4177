"""Helpers shared by the document-backed data models."""

from __future__ import annotations

from dataclasses import fields
from datetime import datetime, timezone
from typing import Any, Dict, List, Type, TypeVar

T = TypeVar("T")


def utc_now() -> str:
    """ISO-8601 timestamp in UTC."""

    return datetime.now(timezone.utc).isoformat()


def ensure_list(value: Any) -> List[Any]:
    """Coerce a scalar or iterable into a list."""

    if value is None:
        return []
    if isinstance(value, (list, tuple, set)):
        return list(value)
    return [value]


def unique_ids(values: Any) -> List[str]:
    """Stringify ids and drop duplicates while keeping first-seen order."""

    seen = set()
    result = []
    for value in ensure_list(values):
        key = str(value)
        if key not in seen:
            seen.add(key)
            result.append(key)
    return result


def build_from_document(cls: Type[T], document: Dict[str, Any]) -> T:
    """Instantiate a dataclass from a stored document, ignoring unknown keys."""

    known = {f.name for f in fields(cls)}  # type: ignore[arg-type]
    return cls(**{key: value for key, value in document.items() if key in known})
