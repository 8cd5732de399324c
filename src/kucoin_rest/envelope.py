"""Decoding of the KuCoin JSON response envelope."""

from __future__ import annotations

from dataclasses import dataclass, field
import json
from typing import Any, Dict, Optional

from .errors import ApplicationError, ResponseDecodeError


@dataclass(frozen=True)
class Envelope:
    """Every field the API may put around a payload, decoded in one pass."""

    success: Optional[bool] = None
    code: Optional[str] = None
    msg: Optional[str] = None
    timestamp: Optional[int] = None
    data: Any = None
    error: Any = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "Envelope":
        code = payload.get("code")
        return cls(
            success=payload.get("success"),
            code=str(code) if code is not None else None,
            msg=payload.get("msg"),
            timestamp=payload.get("timestamp"),
            data=payload.get("data"),
            error=payload.get("error"),
            raw=payload,
        )

    @property
    def ok(self) -> bool:
        return self.success is not False and self.error is None

    def error_message(self) -> str:
        if isinstance(self.error, dict) and self.error.get("message"):
            return str(self.error["message"])
        if isinstance(self.error, str) and self.error:
            return self.error
        if self.msg:
            return self.msg
        return self.code or "unknown error"

    def raise_for_error(self) -> None:
        if not self.ok:
            raise ApplicationError(self.error_message(), code=self.code, payload=self.raw)


def decode_envelope(body: bytes) -> Envelope:
    """Parse a 200 response body and raise ApplicationError if it reports failure."""

    try:
        payload = json.loads(body)
    except ValueError as exc:
        raise ResponseDecodeError(f"Invalid JSON response: {body[:200]!r}") from exc
    if not isinstance(payload, dict):
        raise ResponseDecodeError(f"Unexpected JSON response type: {type(payload).__name__}")
    envelope = Envelope.from_payload(payload)
    envelope.raise_for_error()
    return envelope


__all__ = ["Envelope", "decode_envelope"]
