"""
passport_assessment.runtime.outcome — acknowledgments and tagged results.

``Response`` is what instantiate/execute handlers return on success: an
ordered list of string attributes plus optional opaque ``data``.

``Outcome`` is what every engine entrypoint returns:

    Outcome.success(value)   -> ok=True,  value set
    Outcome.failure(err)     -> ok=False, error set (a ContractError)

Callers branch on ``.ok`` or use ``unwrap()`` / ``unwrap_err()``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Generic, List, Optional, Tuple, TypeVar

from passport_assessment.errors import ContractError

T = TypeVar("T")


@dataclass
class Response:
    attributes: List[Tuple[str, str]] = field(default_factory=list)
    data: Optional[bytes] = None

    def add_attribute(self, key: str, value: Any) -> "Response":
        self.attributes.append((str(key), str(value)))
        return self

    def attribute(self, key: str) -> Optional[str]:
        """First value recorded for `key`, if any."""
        for k, v in self.attributes:
            if k == key:
                return v
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "attributes": [{"key": k, "value": v} for k, v in self.attributes],
            "data": self.data.hex() if self.data is not None else None,
        }


@dataclass(frozen=True)
class Outcome(Generic[T]):
    ok: bool
    value: Optional[T] = None
    error: Optional[ContractError] = None

    @classmethod
    def success(cls, value: T) -> "Outcome[T]":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: ContractError) -> "Outcome[T]":
        return cls(ok=False, error=error)

    def is_err(self) -> bool:
        return not self.ok

    def unwrap(self) -> T:
        """Return the value or raise the carried error."""
        if not self.ok:
            assert self.error is not None
            raise self.error
        return self.value  # type: ignore[return-value]

    def unwrap_err(self) -> ContractError:
        if self.ok:
            raise ValueError(f"called unwrap_err on a successful outcome: {self.value!r}")
        assert self.error is not None
        return self.error

    def to_dict(self) -> Dict[str, Any]:
        if not self.ok:
            assert self.error is not None
            return {"ok": False, "error": self.error.to_dict()}
        value = self.value
        if hasattr(value, "to_dict"):
            value = value.to_dict()  # type: ignore[union-attr]
        elif isinstance(value, (bytes, bytearray)):
            value = bytes(value).decode("utf-8")
        return {"ok": True, "value": value}


__all__ = ["Response", "Outcome"]
