"""KuCoin REST client package."""

from .client import API_BASE, API_PREFIX, ApiClient, Method, RawResponse, RequestSpec
from .config import ClientConfig, ProxyConfig, load_client_config, load_proxy_config
from .envelope import Envelope, decode_envelope
from .errors import (
    ApplicationError,
    CredentialsMissing,
    HTTPError,
    KucoinError,
    RequestTimeout,
    ResponseDecodeError,
    TransportError,
)
from .kucoin import Kucoin, summarize_symbols
from .signer import NonceGenerator, canonical_form, sign

__all__ = [
    "API_BASE",
    "API_PREFIX",
    "ApiClient",
    "ApplicationError",
    "ClientConfig",
    "CredentialsMissing",
    "Envelope",
    "HTTPError",
    "Kucoin",
    "KucoinError",
    "Method",
    "NonceGenerator",
    "ProxyConfig",
    "RawResponse",
    "RequestSpec",
    "RequestTimeout",
    "ResponseDecodeError",
    "TransportError",
    "canonical_form",
    "decode_envelope",
    "load_client_config",
    "load_proxy_config",
    "sign",
    "summarize_symbols",
]
