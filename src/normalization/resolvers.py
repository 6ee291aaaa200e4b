"""Field resolver chains over loosely structured provider records.

OCR providers disagree on field names (``fontWeight`` vs ``font_weight`` vs
``style.fontWeight``...). Each canonical field owns one ``FieldResolver``: an
ordered list of accessors tried until one yields an acceptable value. Keeping
the variants in declarative chains keeps provider knowledge in one place.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Callable, Iterator, Mapping, Optional, Tuple

from pydantic import BaseModel

Accessor = Callable[[Any], Any]
Predicate = Callable[[Any], bool]


def as_mapping(record: object) -> Mapping[str, Any]:
    """View any input as a mapping; models are dumped with their JSON aliases."""
    if isinstance(record, BaseModel):
        return record.model_dump(by_alias=True)
    if isinstance(record, Mapping):
        return record
    return {}


def as_list(value: object) -> list:
    if isinstance(value, (list, tuple)):
        return list(value)
    return []


def as_number(value: object) -> Optional[float]:
    """Coerce ints, floats and numeric strings; everything else is ``None``."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def is_present(value: object) -> bool:
    return value is not None


def is_truthy(value: object) -> bool:
    return bool(value)


def is_text(value: object) -> bool:
    return isinstance(value, str) and bool(value.strip())


def is_number(value: object) -> bool:
    return as_number(value) is not None and not isinstance(value, str)


def is_non_empty_list(value: object) -> bool:
    return isinstance(value, (list, tuple)) and len(value) > 0


def key(path: str) -> Accessor:
    """Accessor for a dotted key path such as ``"style.fontWeight"``."""
    parts = tuple(path.split("."))

    def access(record: object) -> Any:
        current: Any = record
        for part in parts:
            if not isinstance(current, Mapping):
                return None
            current = current.get(part)
            if current is None:
                return None
        return current

    access.__name__ = f"key({path})"
    return access


@dataclass(frozen=True)
class FieldResolver:
    """Ordered accessor chain for one canonical field."""

    accessors: Tuple[Accessor, ...]
    accept: Predicate = is_present

    @classmethod
    def of(cls, *paths: str, accept: Predicate = is_present) -> "FieldResolver":
        return cls(tuple(key(path) for path in paths), accept)

    def resolve(self, record: object, default: Any = None) -> Any:
        for value in self.candidates(record):
            return value
        return default

    def candidates(self, record: object) -> Iterator[Any]:
        """Yield every accepted value in priority order."""
        mapping = as_mapping(record)
        for accessor in self.accessors:
            value = accessor(mapping)
            if self.accept(value):
                yield value

    def any(self, record: object) -> bool:
        return any(bool(value) for value in self.candidates(record))


__all__ = [
    "Accessor",
    "FieldResolver",
    "as_list",
    "as_mapping",
    "as_number",
    "is_non_empty_list",
    "is_number",
    "is_present",
    "is_text",
    "is_truthy",
    "key",
]
