"""
passport_assessment.runtime.state_adapter
-----------------------------------------

Typed accessors over the contract byte store.

- ``Item``: a singleton slot stored under its namespace bytes.
- ``Map``: a keyed region; each entry lives at
  ``uvarint(len(namespace)) || namespace || key_bytes``.

Values are encoded with canonical CBOR (``cbor2``, ``canonical=True``) so the
same logical value always produces the same bytes. A value that cannot be
decoded is reported as ``StoreFailure`` (corrupt store), never as a missing
entry.

Typical usage
=============
    STATE = Item("state", ModelCodec(State))
    SCORES = Map("scores", INT32)

    STATE.save(storage, State(owner="owner"))
    SCORES.may_load(storage, "someone")     # -> Optional[int]
"""

from __future__ import annotations

from typing import Any, Generic, Optional, Protocol, Type, TypeVar

import cbor2
from pydantic import BaseModel, ValidationError

from passport_assessment.errors import StoreFailure, Uninitialized

from .storage_api import Storage

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1


# --------------------------------------------------------------------------- #
# Codecs                                                                      #
# --------------------------------------------------------------------------- #


class Codec(Protocol[T]):
    name: str

    def to_primitive(self, value: T) -> Any: ...
    def from_primitive(self, raw: Any) -> T: ...


class ModelCodec(Generic[M]):
    """pydantic model <-> plain dict (JSON mode)."""

    def __init__(self, model: Type[M]) -> None:
        self.model = model
        self.name = model.__name__

    def to_primitive(self, value: M) -> Any:
        return value.model_dump(mode="json")

    def from_primitive(self, raw: Any) -> M:
        return self.model.model_validate(raw)


class Int32Codec:
    name = "i32"

    def to_primitive(self, value: int) -> Any:
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"i32 value must be int, got {type(value).__name__}")
        if not INT32_MIN <= value <= INT32_MAX:
            raise ValueError(f"i32 out of range: {value}")
        return value

    def from_primitive(self, raw: Any) -> int:
        if isinstance(raw, bool) or not isinstance(raw, int) or not INT32_MIN <= raw <= INT32_MAX:
            raise ValueError(f"stored value is not an i32: {raw!r}")
        return raw


INT32 = Int32Codec()


def _encode(codec: Codec[Any], value: Any) -> bytes:
    return cbor2.dumps(codec.to_primitive(value), canonical=True)


def _decode(codec: Codec[T], raw: bytes, key: bytes) -> T:
    try:
        return codec.from_primitive(cbor2.loads(raw))
    except (cbor2.CBORDecodeError, ValidationError, ValueError) as e:
        raise StoreFailure(
            f"corrupt {codec.name} value in store",
            context={"op": "decode", "key": key.hex(), "cause": str(e)},
        ) from e


def _uvarint_len(n: int) -> bytes:
    """LEB128-like unsigned length prefix."""
    out = bytearray()
    while True:
        b = n & 0x7F
        n >>= 7
        if n:
            out.append(0x80 | b)
        else:
            out.append(b)
            return bytes(out)


# --------------------------------------------------------------------------- #
# Item / Map                                                                  #
# --------------------------------------------------------------------------- #


class Item(Generic[T]):
    """A single typed value stored under a fixed key."""

    def __init__(self, namespace: str, codec: Codec[T]) -> None:
        if not namespace:
            raise ValueError("namespace must be non-empty")
        self.namespace = namespace
        self.key = namespace.encode("utf-8")
        self.codec = codec

    def may_load(self, storage: Storage) -> Optional[T]:
        raw = storage.get(self.key)
        if raw is None:
            return None
        return _decode(self.codec, raw, self.key)

    def load(self, storage: Storage) -> T:
        value = self.may_load(storage)
        if value is None:
            raise Uninitialized(f"{self.codec.name} not found", context={"key": self.namespace})
        return value

    def save(self, storage: Storage, value: T) -> None:
        storage.set(self.key, _encode(self.codec, value))


class Map(Generic[T]):
    """A typed mapping from string keys to values, sharing one namespace."""

    def __init__(self, namespace: str, codec: Codec[T]) -> None:
        if not namespace:
            raise ValueError("namespace must be non-empty")
        ns = namespace.encode("utf-8")
        self.namespace = namespace
        self.prefix = _uvarint_len(len(ns)) + ns
        self.codec = codec

    def key(self, k: str) -> bytes:
        return self.prefix + k.encode("utf-8")

    def may_load(self, storage: Storage, k: str) -> Optional[T]:
        key = self.key(k)
        raw = storage.get(key)
        if raw is None:
            return None
        return _decode(self.codec, raw, key)

    def save(self, storage: Storage, k: str, value: T) -> None:
        storage.set(self.key(k), _encode(self.codec, value))

    def has(self, storage: Storage, k: str) -> bool:
        return storage.get(self.key(k)) is not None


__all__ = [
    "Codec",
    "ModelCodec",
    "Int32Codec",
    "INT32",
    "INT32_MIN",
    "INT32_MAX",
    "Item",
    "Map",
]
