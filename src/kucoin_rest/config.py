"""Client configuration helpers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping
import os

from .client import DEFAULT_TIMEOUT
from .redaction import mask_secret

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class ProxyConfig:
    """Explicit proxies for KuCoin traffic.

    ``requests`` already honors ``HTTP_PROXY``/``HTTPS_PROXY``/``NO_PROXY`` on
    its own; this only carries a proxy meant for this client alone.
    """

    http: str | None = None
    https: str | None = None

    @property
    def enabled(self) -> bool:
        return bool(self.http or self.https)

    def as_requests_proxies(self) -> dict[str, str]:
        return {scheme: url for scheme, url in (("http", self.http), ("https", self.https)) if url}


@dataclass(frozen=True)
class ClientConfig:
    api_key: str = field(default="", repr=False)
    api_secret: str = field(default="", repr=False)
    timeout: float = DEFAULT_TIMEOUT
    debug: bool = False
    proxy: ProxyConfig = field(default_factory=ProxyConfig)

    @property
    def has_credentials(self) -> bool:
        return bool(self.api_key and self.api_secret)

    def summary(self) -> dict[str, object]:
        """Printable view of the configuration with credentials masked."""
        return {
            "api_key": mask_secret(self.api_key),
            "api_secret": "set" if self.api_secret else "missing",
            "timeout": self.timeout,
            "debug": self.debug,
            "proxies": self.proxy.as_requests_proxies(),
        }


def _lookup(
    settings: Mapping[str, object],
    env: Mapping[str, str],
    key: str,
) -> object | None:
    """Explicit setting first, then ``KUCOIN_<KEY>``; empty strings count as unset."""
    value = settings.get(key)
    if value is None or value == "":
        value = env.get("KUCOIN_" + key.upper()) or None
    return value


def _as_bool(value: object) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_VALUES
    return bool(value)


def load_proxy_config(
    settings: Mapping[str, object] | None = None,
    env: Mapping[str, str] | None = None,
) -> ProxyConfig:
    """Read ``http``/``https`` from settings; ``KUCOIN_PROXY`` covers both schemes."""

    settings = settings or {}
    env = env if env is not None else os.environ

    if "enabled" in settings and not _as_bool(settings["enabled"]):
        return ProxyConfig()

    shared = env.get("KUCOIN_PROXY") or None
    http = settings.get("http") or shared
    https = settings.get("https") or shared
    return ProxyConfig(http=str(http) if http else None, https=str(https) if https else None)


def load_client_config(
    settings: Mapping[str, object] | None = None,
    env: Mapping[str, str] | None = None,
) -> ClientConfig:
    """Load credentials, timeout and debug flag; explicit settings win over ``KUCOIN_*`` variables."""

    settings = settings or {}
    env = env if env is not None else os.environ

    raw_timeout = _lookup(settings, env, "timeout")
    timeout = DEFAULT_TIMEOUT if raw_timeout is None else float(raw_timeout)  # type: ignore[arg-type]
    if timeout <= 0:
        raise ValueError(f"timeout must be positive, got {timeout}")

    proxy_settings = settings.get("proxy")
    return ClientConfig(
        api_key=str(_lookup(settings, env, "api_key") or ""),
        api_secret=str(_lookup(settings, env, "api_secret") or ""),
        timeout=timeout,
        debug=_as_bool(_lookup(settings, env, "debug")),
        proxy=load_proxy_config(
            proxy_settings if isinstance(proxy_settings, Mapping) else None,
            env=env,
        ),
    )


__all__ = [
    "ClientConfig",
    "ProxyConfig",
    "load_client_config",
    "load_proxy_config",
]
