"""JSON encoding for callbacks: camelCase field names, enums as their names."""

from __future__ import annotations

import dataclasses
import json
import re
import typing
from enum import Enum
from typing import Any, Mapping, Type, TypeVar

T = TypeVar("T")

_WORD_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def camel_case(name: str) -> str:
    head, *rest = name.split("_")
    if not rest:
        return name[:1].lower() + name[1:]
    return head.lower() + "".join(part[:1].upper() + part[1:] for part in rest)


def snake_case(name: str) -> str:
    return _WORD_BOUNDARY.sub("_", name).lower()


def to_jsonable(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.name
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            camel_case(field.name): to_jsonable(getattr(value, field.name))
            for field in dataclasses.fields(value)
        }
    if isinstance(value, Mapping):
        return {
            camel_case(key) if isinstance(key, str) else key: to_jsonable(item)
            for key, item in value.items()
        }
    if isinstance(value, (list, tuple, set, frozenset)):
        return [to_jsonable(item) for item in value]
    return value


def _parse_enum(enum_type: Type[Enum], value: Any) -> Enum:
    if isinstance(value, str):
        for member in enum_type:
            if member.name.lower() == value.lower():
                return member
    raise ValueError(f"Invalid {enum_type.__name__} value: {value!r}")


def _coerce(field_type: Any, value: Any) -> Any:
    if value is None:
        return None
    if typing.get_origin(field_type) is typing.Union:
        field_type = next(arg for arg in typing.get_args(field_type) if arg is not type(None))
    if isinstance(field_type, type) and issubclass(field_type, Enum):
        return _parse_enum(field_type, value)
    if field_type is int:
        return int(value)
    if field_type is str:
        return str(value)
    return value


def from_jsonable(cls: Type[T], data: Mapping[str, Any]) -> T:
    """Build dataclass ``cls`` from a camelCase JSON object, ignoring unknown keys."""
    hints = typing.get_type_hints(cls)
    names = {field.name for field in dataclasses.fields(cls)}
    values = {}
    for key, value in data.items():
        name = snake_case(key)
        if name in names:
            values[name] = _coerce(hints[name], value)
    return cls(**values)


def to_json(value: Any) -> str:
    return json.dumps(to_jsonable(value))


def from_json(content: str | bytes) -> Any:
    return json.loads(content)
