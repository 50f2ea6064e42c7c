from __future__ import annotations
import os
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping, Optional

from ..infrastructure.http.exceptions import ConfigurationError

API_KEY_ENV = "DSALTA_API_KEY"
BASE_URL_ENV = "DSALTA_BASE_URL"
TIMEOUT_ENV = "DSALTA_TIMEOUT_MS"

DEFAULT_CONFIG: Mapping[str, Any] = MappingProxyType({"timeout_ms": 5000})


@dataclass(frozen=True)
class ClientConfig:
    api_key: str
    base_url: str
    timeout_ms: int = 5000

    @property
    def timeout_sec(self) -> float:
        return self.timeout_ms / 1000


def _timeout_from_env() -> Optional[int]:
    raw = os.getenv(TIMEOUT_ENV)
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(
            f"{TIMEOUT_ENV} must be an integer number of milliseconds, got {raw!r}"
        ) from e


def build_config(
    api_key: Optional[str] = None,
    base_url: Optional[str] = None,
    timeout_ms: Optional[int] = None,
) -> ClientConfig:
    """
    Merge explicit values over DEFAULT_CONFIG and validate the result.

    Values left as None fall back to DSALTA_API_KEY / DSALTA_BASE_URL /
    DSALTA_TIMEOUT_MS, then to the defaults.
    """
    if api_key is None:
        api_key = os.getenv(API_KEY_ENV)
    if base_url is None:
        base_url = os.getenv(BASE_URL_ENV)
    if timeout_ms is None:
        timeout_ms = _timeout_from_env()

    overrides = {"api_key": api_key, "base_url": base_url, "timeout_ms": timeout_ms}
    merged = {**DEFAULT_CONFIG, **{k: v for k, v in overrides.items() if v is not None}}

    if not merged.get("api_key"):
        raise ConfigurationError(
            f"API key is required. Pass api_key=... or set {API_KEY_ENV}."
        )
    if not merged.get("base_url"):
        raise ConfigurationError(
            f"Base URL is required. Pass base_url=... or set {BASE_URL_ENV}."
        )
    if isinstance(merged["timeout_ms"], bool) or not isinstance(merged["timeout_ms"], int):
        raise ConfigurationError(f"timeout_ms must be an int, got {merged['timeout_ms']!r}")
    if merged["timeout_ms"] <= 0:
        raise ConfigurationError(f"timeout_ms must be positive, got {merged['timeout_ms']}")

    return ClientConfig(
        api_key=merged["api_key"],
        base_url=str(merged["base_url"]).rstrip("/"),
        timeout_ms=merged["timeout_ms"],
    )
