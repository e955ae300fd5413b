"""
JSON codec for persisted collections.

Each collection is stored as ``{"version": SCHEMA_VERSION, "items": [...]}``.
Dates are ISO-8601 strings, enums their labels, nested records inline. A bare
JSON list (payloads written before the version tag existed) reads as version 0.
"""
from __future__ import annotations

import dataclasses
import json
import types
import typing
from datetime import datetime
from enum import Enum
from functools import lru_cache
from typing import Any, Type, TypeVar

SCHEMA_VERSION = 1

T = TypeVar("T")


class CodecError(ValueError):
    """Raised when persisted bytes cannot be turned back into records."""


def to_primitive(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_primitive(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return [to_primitive(item) for item in value]
    if isinstance(value, dict):
        return {str(key): to_primitive(item) for key, item in value.items()}
    return value


@lru_cache(maxsize=None)
def _field_types(cls: type) -> dict[str, Any]:
    return typing.get_type_hints(cls)


def _decode_value(tp: Any, value: Any, where: str) -> Any:
    origin = typing.get_origin(tp)
    if origin is typing.Union or origin is getattr(types, "UnionType", None):
        args = [arg for arg in typing.get_args(tp) if arg is not type(None)]
        if value is None:
            return None
        return _decode_value(args[0], value, where)
    if origin is list:
        if not isinstance(value, list):
            raise CodecError(f"{where}: expected a list")
        (item_type,) = typing.get_args(tp) or (Any,)
        return [_decode_value(item_type, item, f"{where}[{i}]") for i, item in enumerate(value)]
    if tp is Any:
        return value
    if isinstance(tp, type) and dataclasses.is_dataclass(tp):
        return from_primitive(tp, value)
    if isinstance(tp, type) and issubclass(tp, Enum):
        try:
            return tp(value)
        except ValueError as exc:
            raise CodecError(f"{where}: unknown {tp.__name__} label {value!r}") from exc
    if tp is datetime:
        if not isinstance(value, str):
            raise CodecError(f"{where}: expected an ISO-8601 string")
        try:
            return datetime.fromisoformat(value)
        except ValueError as exc:
            raise CodecError(f"{where}: invalid date {value!r}") from exc
    if tp is bool:
        if not isinstance(value, bool):
            raise CodecError(f"{where}: expected a boolean")
        return value
    if tp is int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise CodecError(f"{where}: expected an integer")
        return value
    if tp is float:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise CodecError(f"{where}: expected a number")
        return float(value)
    if tp is str:
        if not isinstance(value, str):
            raise CodecError(f"{where}: expected a string")
        return value
    return value


def from_primitive(cls: Type[T], data: Any) -> T:
    if not isinstance(data, dict):
        raise CodecError(f"{cls.__name__}: expected an object")
    hints = _field_types(cls)
    kwargs: dict[str, Any] = {}
    for f in dataclasses.fields(cls):
        if f.name not in data:
            if f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING:
                raise CodecError(f"{cls.__name__}: missing field {f.name!r}")
            continue
        kwargs[f.name] = _decode_value(hints[f.name], data[f.name], f"{cls.__name__}.{f.name}")
    return cls(**kwargs)


def _dumps(payload: Any) -> bytes:
    return json.dumps(payload, ensure_ascii=False, separators=(",", ":")).encode("utf-8")


def _unwrap(raw: bytes, key: str) -> Any:
    try:
        payload = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise CodecError(f"invalid JSON payload: {exc}") from exc
    if isinstance(payload, dict) and "version" in payload:
        version = payload.get("version")
        if not isinstance(version, int) or version > SCHEMA_VERSION:
            raise CodecError(f"unsupported schema version {version!r}")
        return payload.get(key)
    return payload


def encode_collection(items: list[Any]) -> bytes:
    return _dumps({"version": SCHEMA_VERSION, "items": [to_primitive(item) for item in items]})


def decode_collection(cls: Type[T], raw: bytes) -> list[T]:
    items = _unwrap(raw, "items")
    if not isinstance(items, list):
        raise CodecError(f"{cls.__name__}: expected a list of records")
    return [from_primitive(cls, item) for item in items]


def encode_record(record: Any) -> bytes:
    return _dumps({"version": SCHEMA_VERSION, "item": to_primitive(record)})


def decode_record(cls: Type[T], raw: bytes) -> T:
    return from_primitive(cls, _unwrap(raw, "item"))
