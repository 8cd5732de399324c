"""KuCoin request signing."""

from __future__ import annotations

import base64
import hashlib
import hmac
import threading
import time
from typing import Mapping, Optional
from urllib.parse import quote_plus


def canonical_form(params: Optional[Mapping[str, str]]) -> str:
    """Serialize request parameters the way the server recomputes them.

    Keys are sorted ascending by code point (no case folding) and joined as
    ``key=value`` pairs with ``&``. Keys and values are query-escaped, the
    separators are not. The result is used both as the signed string and as
    the query string or form body that goes over the wire.

    >>> canonical_form({"price": "1.1", "type": "BUY", "amount": "10"})
    'amount=10&price=1.1&type=BUY'
    """

    if not params:
        return ""
    return "&".join(
        f"{quote_plus(key, safe='')}={quote_plus(str(params[key]), safe='')}"
        for key in sorted(params)
    )


def compute_hmac256(message: str, secret: str) -> str:
    digest = hmac.new(secret.encode("utf-8"), message.encode("utf-8"), hashlib.sha256)
    return digest.hexdigest()


def sign(path: str, canonical: str, nonce: int, secret: str) -> str:
    """Return the hex HMAC-SHA256 signature for a request.

    ``path`` is the URL path only (``/v1/user/info``), without scheme, host or
    query string. The signed text is ``{path}/{nonce}/{canonical}``, base64
    encoded before it is fed to the HMAC.
    """

    payload = f"{path}/{nonce}/{canonical}"
    encoded = base64.b64encode(payload.encode("utf-8")).decode("ascii")
    return compute_hmac256(encoded, secret)


class NonceGenerator:
    """Epoch-millisecond nonces that never repeat for one client."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._last = 0

    def next(self) -> int:
        with self._lock:
            now_ms = time.time_ns() // 1_000_000
            nonce = max(now_ms, self._last + 1)
            self._last = nonce
            return nonce


__all__ = ["NonceGenerator", "canonical_form", "compute_hmac256", "sign"]
