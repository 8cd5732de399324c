"""Masking of credentials in diagnostic output."""

from __future__ import annotations

from typing import Mapping

REDACTED = "[REDACTED]"

SENSITIVE_HEADERS = frozenset(
    {
        "kc-api-key",
        "kc-api-nonce",
        "kc-api-signature",
        "authorization",
        "cookie",
    }
)


def redact_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """Copy headers with authentication values replaced; header names match case-insensitively."""
    return {
        name: REDACTED if name.lower() in SENSITIVE_HEADERS else value
        for name, value in headers.items()
    }


def mask_secret(value: str, visible: int = 4) -> str:
    if not value:
        return ""
    if len(value) <= visible:
        return "*" * len(value)
    return "*" * (len(value) - visible) + value[-visible:]


__all__ = ["REDACTED", "SENSITIVE_HEADERS", "mask_secret", "redact_headers"]
