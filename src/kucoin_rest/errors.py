"""Exceptions raised by the KuCoin client."""

from __future__ import annotations

import json
from typing import Any, Dict, Optional


class KucoinError(RuntimeError):
    """Base class for every client failure."""


class CredentialsMissing(KucoinError):
    """Raised before any network call when an authenticated request lacks a key or secret."""

    def __init__(self, message: str = "API key and API secret are required for this call") -> None:
        super().__init__(message)


class TransportError(KucoinError):
    """DNS, connection or TLS failure reported by the HTTP transport."""

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.cause = cause


class RequestTimeout(KucoinError):
    """The request did not complete within the configured timeout."""

    def __init__(self, timeout: float) -> None:
        super().__init__(f"timeout on reading data from KuCoin API after {timeout:g}s")
        self.timeout = timeout


class HTTPError(KucoinError):
    """Transport succeeded but the status code was not 200."""

    def __init__(self, status_code: int, body: bytes) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"HTTP {status_code}: {self.message or self.text[:200]}")

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    @property
    def message(self) -> Optional[str]:
        """Error message embedded in a JSON body, if the exchange sent one."""
        try:
            payload = json.loads(self.body)
        except ValueError:
            return None
        if not isinstance(payload, dict):
            return None
        error = payload.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str) and error:
            return error
        msg = payload.get("msg")
        return str(msg) if msg else None


class ApplicationError(KucoinError):
    """A 200 response whose envelope reports failure."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        payload: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(f"KuCoin API error: {message}")
        self.code = code
        self.payload = payload or {}


class ResponseDecodeError(KucoinError):
    """A 200 response body that is not a JSON object."""


__all__ = [
    "ApplicationError",
    "CredentialsMissing",
    "HTTPError",
    "KucoinError",
    "RequestTimeout",
    "ResponseDecodeError",
    "TransportError",
]
