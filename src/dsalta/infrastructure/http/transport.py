from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Union

import requests

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransportResponse:
    """2xx response with a JSON body."""

    status: int
    body: Any


@dataclass(frozen=True)
class TransportFailure:
    """HTTP error status; body is the parsed JSON error body, if there was one."""

    status: int
    message: str
    body: Optional[Dict[str, Any]] = None


@dataclass(frozen=True)
class RawFailure:
    """No usable response: network error, timeout, or unreadable body."""

    message: str
    error: Optional[BaseException] = None


TransportOutcome = Union[TransportResponse, TransportFailure, RawFailure]


class HttpTransport:
    """
    Thin requests wrapper bound to one base URL, timeout and header set.

    Holds no per-request state, so one instance can serve concurrent calls.
    """

    def __init__(self, base_url: str, timeout_sec: float, api_key: str):
        self.base_url = base_url.rstrip("/")
        self.timeout_sec = timeout_sec
        self._api_key = api_key

    def _headers_multipart(self) -> Dict[str, str]:
        # No Content-Type; requests sets the multipart boundary.
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Accept": "application/json",
        }

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def post_multipart(
        self,
        path: str,
        files: Mapping[str, Any],
        data: Optional[Mapping[str, str]] = None,
    ) -> TransportOutcome:
        url = self.url(path)
        logger.debug(f"Transport: POST {url} (timeout {self.timeout_sec}s)")

        try:
            r = requests.post(
                url,
                headers=self._headers_multipart(),
                files=files,
                data=data,
                timeout=self.timeout_sec,
            )
        except requests.Timeout as e:
            logger.error(f"Transport: Timeout after {self.timeout_sec}s calling {url}")
            return RawFailure(message=f"Timeout of {self.timeout_sec}s exceeded: {e}", error=e)
        except requests.RequestException as e:
            logger.error(f"Transport: Network error calling {url}: {e}")
            return RawFailure(message=str(e) or f"Network error calling {url}", error=e)

        if r.status_code >= 400:
            body = _json_or_none(r)
            return TransportFailure(
                status=r.status_code,
                message=f"Request failed with status code {r.status_code}",
                body=body if isinstance(body, dict) else None,
            )

        try:
            return TransportResponse(status=r.status_code, body=r.json())
        except ValueError as e:
            logger.error(f"Transport: Non-JSON response from {url}: {r.text[:500]}")
            return RawFailure(message=f"Invalid JSON response: {e}", error=e)


def _json_or_none(r: requests.Response) -> Any:
    try:
        return r.json()
    except ValueError:
        return None
