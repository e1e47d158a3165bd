"""
passport_assessment.errors — structured contract errors.

Handlers raise these; the runtime engine folds them into an ``Outcome``.

    ContractError        root; code + message + context, ``to_dict()``
    ├── Unauthorized     caller is not the stored owner (recoverable)
    ├── Uninitialized    the state singleton was never written (fatal)
    ├── StoreFailure     backend read/write failure or corrupt value (fatal)
    └── InvalidMessage   request failed to decode/validate
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional


@dataclass(eq=False)
class ContractError(Exception):
    """
    Root error for the contract and its host runtime.

    Attributes:
        code: short machine-readable code string
        message: human-readable message
        context: optional extra fields for debugging / CLI output
        fatal: True when retrying with different inputs cannot help
    """

    code: str
    message: str
    context: Dict[str, Any]
    fatal: bool

    default_code = "contract_error"
    default_message = ""
    default_fatal = False

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        code: Optional[str] = None,
        context: Optional[Mapping[str, Any]] = None,
    ) -> None:
        msg = self.default_message if message is None else str(message)
        super().__init__(msg)
        self.code = code or self.default_code
        self.message = msg
        self.context = dict(context or {})
        self.fatal = self.default_fatal

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "code": self.code,
            "message": self.message,
            "fatal": self.fatal,
        }
        if self.context:
            out["context"] = dict(self.context)
        return out


class Unauthorized(ContractError):
    default_code = "unauthorized"
    default_message = "Unauthorized"


class Uninitialized(ContractError):
    default_code = "uninitialized"
    default_message = "contract state not found"
    default_fatal = True


class StoreFailure(ContractError):
    """Backend failure; ``__cause__`` carries the original exception."""

    default_code = "store_failure"
    default_message = "storage backend failure"
    default_fatal = True

    @classmethod
    def wrap(cls, exc: BaseException, *, op: str, key: Optional[bytes] = None) -> "StoreFailure":
        ctx: Dict[str, Any] = {"op": op, "cause": f"{type(exc).__name__}: {exc}"}
        if key is not None:
            ctx["key"] = key.hex()
        err = cls(f"storage {op} failed: {exc}", context=ctx)
        err.__cause__ = exc
        return err


class InvalidMessage(ContractError):
    default_code = "invalid_message"
    default_message = "invalid message"


__all__ = [
    "ContractError",
    "Unauthorized",
    "Uninitialized",
    "StoreFailure",
    "InvalidMessage",
]
