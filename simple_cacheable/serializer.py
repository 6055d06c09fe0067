"""
Value serialization for backends that store bytes.

Supports JSON, pickle and MessagePack. JSON and MessagePack share one set of
type tags so that datetimes, UUIDs, decimals, enums, sets, bytes, pydantic
models and dataclasses survive a round trip through the remote store.
"""

import importlib
import json
import pickle
import warnings
from dataclasses import asdict, is_dataclass
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Optional, Union
from uuid import UUID

import msgpack
from pydantic import BaseModel

TYPE_TAG = "__type__"


class SerializationFormat(str, Enum):
    """Supported serialization formats."""
    JSON = "json"
    PICKLE = "pickle"
    MSGPACK = "msgpack"


def _qualified_name(cls: type) -> str:
    return f"{cls.__module__}.{cls.__qualname__}"


def _load_class(path: str) -> Optional[type]:
    module_path, _, class_name = path.rpartition(".")
    try:
        module = importlib.import_module(module_path)
        return getattr(module, class_name)
    except (ImportError, AttributeError, ValueError):
        return None


def encode_value(obj: Any) -> Any:
    """
    Convert a value the wire formats do not know into a tagged dict.

    Used as the ``default`` hook of both the JSON encoder and msgpack.

    :param obj: Object to convert.
    :return: Tagged, format-neutral representation.
    :raises TypeError: If the type is not supported.
    """
    # datetime must be tested before date, it is a subclass
    if isinstance(obj, datetime):
        return {TYPE_TAG: "datetime", "value": obj.isoformat()}
    if isinstance(obj, date):
        return {TYPE_TAG: "date", "value": obj.isoformat()}
    if isinstance(obj, time):
        return {TYPE_TAG: "time", "value": obj.isoformat()}
    if isinstance(obj, timedelta):
        return {TYPE_TAG: "timedelta", "value": obj.total_seconds()}
    if isinstance(obj, UUID):
        return {TYPE_TAG: "uuid", "value": str(obj)}
    if isinstance(obj, Decimal):
        return {TYPE_TAG: "decimal", "value": str(obj)}
    if isinstance(obj, Enum):
        return {TYPE_TAG: "enum", "class": _qualified_name(type(obj)), "value": obj.value}
    if isinstance(obj, (bytes, bytearray)):
        return {TYPE_TAG: "bytes", "value": bytes(obj).decode("latin-1")}
    if isinstance(obj, frozenset):
        return {TYPE_TAG: "frozenset", "value": list(obj)}
    if isinstance(obj, set):
        return {TYPE_TAG: "set", "value": list(obj)}
    if isinstance(obj, BaseModel):
        return {
            TYPE_TAG: "pydantic",
            "class": _qualified_name(type(obj)),
            "value": obj.model_dump(mode="json"),
        }
    if is_dataclass(obj) and not isinstance(obj, type):
        return {TYPE_TAG: "dataclass", "class": _qualified_name(type(obj)), "value": asdict(obj)}

    raise TypeError(f"Object of type {type(obj).__name__} is not serializable")


def decode_value(obj: dict) -> Any:
    """
    Inverse of :func:`encode_value`, used as the object hook on decode.

    Classes that can no longer be imported decode to their plain value.
    """
    tag = obj.get(TYPE_TAG)
    if tag is None:
        return obj

    value = obj.get("value")

    if tag == "datetime":
        return datetime.fromisoformat(value)
    if tag == "date":
        return date.fromisoformat(value)
    if tag == "time":
        return time.fromisoformat(value)
    if tag == "timedelta":
        return timedelta(seconds=value)
    if tag == "uuid":
        return UUID(value)
    if tag == "decimal":
        return Decimal(value)
    if tag == "bytes":
        return value.encode("latin-1")
    if tag == "set":
        return set(value)
    if tag == "frozenset":
        return frozenset(value)

    if tag in ("enum", "pydantic", "dataclass"):
        cls = _load_class(obj.get("class", ""))
        if cls is None:
            return value
        if tag == "enum":
            return cls(value)
        if tag == "pydantic":
            return cls.model_validate(value)
        return cls(**value)

    return obj


class JSONEncoder(json.JSONEncoder):
    """
    JSON encoder aware of the tagged types in :func:`encode_value`.
    """

    def default(self, obj: Any) -> Any:
        try:
            return encode_value(obj)
        except TypeError:
            return super().default(obj)


def serialize_json(data: Any) -> bytes:
    return json.dumps(
        data, cls=JSONEncoder, separators=(",", ":"), ensure_ascii=False
    ).encode("utf-8")


def deserialize_json(data: bytes) -> Any:
    if isinstance(data, (bytes, bytearray)):
        data = data.decode("utf-8")
    return json.loads(data, object_hook=decode_value)


def serialize_pickle(data: Any) -> bytes:
    """
    Serialize data with pickle.

    Note: pickle is the most flexible format but the least safe one. Only use
    it with a store nobody else can write to.
    """
    warnings.warn(
        "Pickle serialization is unsafe for untrusted data. "
        "Only use with trusted cache backends.",
        RuntimeWarning,
        stacklevel=2,
    )
    return pickle.dumps(data, protocol=pickle.HIGHEST_PROTOCOL)


def deserialize_pickle(data: bytes) -> Any:
    return pickle.loads(data)


def serialize_msgpack(data: Any) -> bytes:
    # bytes are native to msgpack; only the other tagged types go through the hook
    return msgpack.packb(data, default=encode_value, use_bin_type=True)


def deserialize_msgpack(data: bytes) -> Any:
    return msgpack.unpackb(
        data, raw=False, object_hook=decode_value, strict_map_key=False
    )


Serializer = Callable[[Any], bytes]
Deserializer = Callable[[bytes], Any]

_DEFAULT_FORMAT: str = SerializationFormat.JSON.value

_FORMATS: dict[str, tuple[Serializer, Deserializer]] = {
    SerializationFormat.JSON.value: (serialize_json, deserialize_json),
    SerializationFormat.PICKLE.value: (serialize_pickle, deserialize_pickle),
    SerializationFormat.MSGPACK.value: (serialize_msgpack, deserialize_msgpack),
}


def _format_name(format: Union[str, SerializationFormat]) -> str:
    if isinstance(format, SerializationFormat):
        return format.value
    return format


def set_default_format(format: Union[str, SerializationFormat]) -> None:
    """
    Set the process-wide default serialization format.
    :param format: A built-in or registered format name.
    :raises ValueError: If the format is unknown.
    """
    global _DEFAULT_FORMAT
    name = _format_name(format)
    if name not in _FORMATS:
        raise ValueError(f"Unsupported serialization format: {name}")
    _DEFAULT_FORMAT = name


def get_default_format() -> str:
    return _DEFAULT_FORMAT


def register_serializer(
    format: Union[str, SerializationFormat],
    serializer: Serializer,
    deserializer: Deserializer,
) -> None:
    """
    Register a custom serializer/deserializer pair under a format name.

    :param format: Format identifier, e.g. ``"cbor"``
    :param serializer: Serialization function
    :param deserializer: Deserialization function
    """
    _FORMATS[_format_name(format)] = (serializer, deserializer)


def _lookup(format: Optional[Union[str, SerializationFormat]]) -> tuple[str, tuple[Serializer, Deserializer]]:
    name = _DEFAULT_FORMAT if format is None else _format_name(format)
    try:
        return name, _FORMATS[name]
    except KeyError:
        raise ValueError(f"Unsupported serialization format: {name}") from None


def serialize(
    data: Any,
    format: Optional[Union[str, SerializationFormat]] = None,
) -> bytes:
    """
    Serialize data to bytes using the specified or default format.

    :param data: Data to serialize
    :param format: Optional serialization format (uses default if not specified)
    :return: Serialized bytes
    :raises ValueError: If the format is unknown or serialization fails
    """
    name, (serializer, _) = _lookup(format)
    try:
        return serializer(data)
    except Exception as e:
        raise ValueError(f"Failed to serialize data with format {name}: {e}") from e


def deserialize(
    data: bytes,
    format: Optional[Union[str, SerializationFormat]] = None,
) -> Any:
    """
    Deserialize bytes using the specified or default format.

    :raises ValueError: If the format is unknown or deserialization fails
    """
    name, (_, deserializer) = _lookup(format)
    try:
        return deserializer(data)
    except Exception as e:
        raise ValueError(f"Failed to deserialize data with format {name}: {e}") from e


__all__ = [
    "JSONEncoder",
    "SerializationFormat",
    "decode_value",
    "deserialize",
    "deserialize_json",
    "deserialize_msgpack",
    "deserialize_pickle",
    "encode_value",
    "get_default_format",
    "register_serializer",
    "serialize",
    "serialize_json",
    "serialize_msgpack",
    "serialize_pickle",
    "set_default_format",
]
