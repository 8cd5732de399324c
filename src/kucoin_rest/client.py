"""Signed request dispatch for the KuCoin REST API."""

from __future__ import annotations

from concurrent.futures import Future
from concurrent.futures import TimeoutError as FutureTimeout
from dataclasses import dataclass, field
import enum
import json
import logging
import threading
from types import MappingProxyType
from typing import Any, Dict, Mapping, MutableMapping, Optional
from urllib.parse import parse_qsl, urlsplit

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .errors import CredentialsMissing, HTTPError, RequestTimeout, TransportError
from .redaction import redact_headers
from .signer import NonceGenerator, canonical_form, sign

API_BASE = "https://api.kucoin.com"
API_PREFIX = "/v1"
DEFAULT_TIMEOUT = 30.0

HEADER_API_KEY = "KC-API-KEY"
HEADER_NONCE = "KC-API-NONCE"
HEADER_SIGNATURE = "KC-API-SIGNATURE"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded;charset=utf-8"

logger = logging.getLogger(__name__)


class Method(str, enum.Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"


@dataclass(frozen=True)
class RequestSpec:
    """One outbound call: verb, path, flat string parameters, auth flag."""

    method: Method
    path: str
    params: Mapping[str, str] = field(default_factory=dict)
    auth_needed: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", Method(self.method))
        object.__setattr__(
            self,
            "params",
            MappingProxyType({str(key): str(value) for key, value in self.params.items()}),
        )


@dataclass(frozen=True)
class RawResponse:
    status_code: int
    body: bytes

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    def json(self) -> Any:
        return json.loads(self.body)


@dataclass(frozen=True)
class PreparedCall:
    method: Method
    url: str
    headers: Dict[str, str]
    body: Optional[str]


@dataclass
class ApiClient:
    """Owns credentials and the HTTP transport; turns a RequestSpec into a call.

    Every ``send`` is a single attempt. Failures are raised as
    :class:`~kucoin_rest.errors.KucoinError` subclasses and leave the client
    usable for the next call.
    """

    api_key: str = ""
    api_secret: str = field(default="", repr=False)
    timeout: float = DEFAULT_TIMEOUT
    debug: bool = False
    base_url: str = API_BASE
    prefix: str = API_PREFIX
    session: Optional[requests.Session] = field(default=None, repr=False)
    proxies: Optional[MutableMapping[str, str]] = field(default=None, repr=False)
    pool_size: int = 10
    _nonces: NonceGenerator = field(default_factory=NonceGenerator, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.session is None:
            self.session = requests.Session()
            # Single attempt per send; the adapter is kept for connection pooling.
            retry = Retry(total=0, redirect=0, raise_on_status=False)
            adapter = HTTPAdapter(max_retries=retry, pool_maxsize=self.pool_size)
            self.session.mount("https://", adapter)
            self.session.mount("http://", adapter)

    def set_debug(self, enable: bool) -> None:
        """Enable or disable request/response dumps for this client only."""
        self.debug = enable

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "ApiClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def resolve_url(self, path: str) -> str:
        if path.startswith("http"):
            return path
        return f"{self.base_url}{self.prefix}/{path.lstrip('/')}"

    def prepare(self, spec: RequestSpec) -> PreparedCall:
        """Build URL, headers and body for ``spec``, signing it when required."""

        url = self.resolve_url(spec.path)
        params: Dict[str, str] = dict(spec.params)
        headers = {"Accept": "application/json"}
        body: Optional[str] = None

        if spec.method is Method.GET:
            parts = urlsplit(url)
            if parts.query:
                embedded = dict(parse_qsl(parts.query, keep_blank_values=True))
                embedded.update(params)
                params = embedded
                url = parts._replace(query="").geturl()
            canonical = canonical_form(params)
            if canonical:
                url = f"{url}?{canonical}"
        else:
            canonical = canonical_form(params)
            body = canonical
            headers["Content-Type"] = FORM_CONTENT_TYPE

        if spec.auth_needed:
            if not self.api_key or not self.api_secret:
                raise CredentialsMissing()
            nonce = self._nonces.next()
            headers[HEADER_API_KEY] = self.api_key
            headers[HEADER_NONCE] = str(nonce)
            headers[HEADER_SIGNATURE] = sign(urlsplit(url).path, canonical, nonce, self.api_secret)

        return PreparedCall(method=spec.method, url=url, headers=headers, body=body)

    def send(self, spec: RequestSpec) -> RawResponse:
        """Execute ``spec`` once and return the 200 response body unmodified.

        Raises CredentialsMissing, RequestTimeout, TransportError or HTTPError.
        A 200 status does not imply application-level success; decode the
        envelope with :func:`kucoin_rest.envelope.decode_envelope`.
        """

        call = self.prepare(spec)
        if self.debug:
            self._dump_request(call)

        future = self._start(call)
        try:
            response = future.result(timeout=self.timeout)
        except FutureTimeout:
            logger.warning("%s %s timed out after %ss", call.method.value, spec.path, self.timeout)
            raise RequestTimeout(self.timeout) from None
        except requests.Timeout as exc:
            raise RequestTimeout(self.timeout) from exc
        except requests.RequestException as exc:
            raise TransportError(f"{call.method.value} {spec.path} failed: {exc}", cause=exc) from exc

        raw = RawResponse(status_code=response.status_code, body=response.content)
        if self.debug:
            self._dump_response(response, raw)
        if raw.status_code != 200:
            raise HTTPError(raw.status_code, raw.body)
        return raw

    def _start(self, call: PreparedCall) -> "Future[requests.Response]":
        """Run the call on its own daemon thread; an abandoned call never blocks later ones."""
        future: "Future[requests.Response]" = Future()
        future.set_running_or_notify_cancel()

        def run() -> None:
            try:
                future.set_result(self._execute(call))
            except Exception as exc:
                future.set_exception(exc)

        threading.Thread(target=run, name="kucoin-send", daemon=True).start()
        return future

    def _execute(self, call: PreparedCall) -> requests.Response:
        return self.session.request(
            call.method.value,
            call.url,
            data=call.body,
            headers=call.headers,
            timeout=self.timeout,
            proxies=self.proxies,
        )

    def _dump_request(self, call: PreparedCall) -> None:
        logger.info(
            "dumpRequest %s %s headers=%s body=%r",
            call.method.value,
            call.url,
            redact_headers(call.headers),
            call.body,
        )

    def _dump_response(self, response: requests.Response, raw: RawResponse) -> None:
        headers = getattr(response, "headers", None) or {}
        logger.info(
            "dumpResponse %s headers=%s body=%s",
            raw.status_code,
            redact_headers(dict(headers)),
            raw.text,
        )


__all__ = [
    "API_BASE",
    "API_PREFIX",
    "ApiClient",
    "DEFAULT_TIMEOUT",
    "HEADER_API_KEY",
    "HEADER_NONCE",
    "HEADER_SIGNATURE",
    "Method",
    "PreparedCall",
    "RawResponse",
    "RequestSpec",
]
