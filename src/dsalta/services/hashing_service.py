from __future__ import annotations

import base64
import binascii
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from ..config.settings import ClientConfig, build_config
from ..domain.models import (
    FileInfo,
    FileMetadata,
    FileReference,
    HashError,
    HashFileFailure,
    HashFileResponse,
    HashFileSuccess,
)
from ..infrastructure.http.exceptions import (
    UNEXPECTED_ERROR_MESSAGE,
    DsaltaError,
    FileReadError,
    TransportError,
    UnexpectedError,
)
from ..infrastructure.http.transport import (
    HttpTransport,
    RawFailure,
    TransportFailure,
    TransportOutcome,
    TransportResponse,
)
from ..infrastructure.io.file_source import file_to_bytes, resolve_file_info

logger = logging.getLogger(__name__)

HASH_FILE_PATH = "/hash/file"


def _now_iso() -> str:
    return (
        datetime.now(timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


def _decode_echo(value: Any) -> Optional[bytes]:
    if not isinstance(value, str) or not value:
        return None
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError):
        logger.warning("Hashing: Server echoed a file payload that is not valid base64")
        return None


class DsaltaClient:
    """
    Client for the Dsalta file hashing API.

    Every hash_file call returns a HashFileSuccess or HashFileFailure; only
    configuration problems raise (ConfigurationError, at construction).
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_ms: Optional[int] = None,
    ):
        self.config: ClientConfig = build_config(
            api_key=api_key, base_url=base_url, timeout_ms=timeout_ms
        )
        self._transport = HttpTransport(
            base_url=self.config.base_url,
            timeout_sec=self.config.timeout_sec,
            api_key=self.config.api_key,
        )

    @classmethod
    def from_config(cls, config: ClientConfig) -> "DsaltaClient":
        return cls(
            api_key=config.api_key,
            base_url=config.base_url,
            timeout_ms=config.timeout_ms,
        )

    # ---------- Result builders ----------

    def _failure(
        self,
        file: Any,
        info: FileInfo,
        err: DsaltaError,
        file_bytes: Optional[bytes] = None,
    ) -> HashFileFailure:
        return HashFileFailure(
            timestamp=_now_iso(),
            file=file,
            filename=info.filename,
            file_type=info.file_type,
            error=HashError(message=err.message, status=err.status, code=err.code),
            file_bytes=file_bytes,
        )

    def _success(self, file: Any, info: FileInfo, body: Dict[str, Any]) -> HashFileSuccess:
        data = body.get("data")
        if not isinstance(data, dict) or not isinstance(data.get("hash"), str):
            raise UnexpectedError(f"Unexpected response shape: {body}")

        base64_file = data.get("file")
        return HashFileSuccess(
            timestamp=body.get("timestamp") or _now_iso(),
            file=file,
            filename=data.get("filename") or info.filename,
            file_type=data.get("fileType") or info.file_type,
            hash=data["hash"],
            metadata=data.get("metadata"),
            base64_file=base64_file,
            file_bytes=_decode_echo(base64_file),
        )

    def _server_failure(
        self,
        file: Any,
        info: FileInfo,
        body: Dict[str, Any],
        content: bytes,
        fallback_message: str = UNEXPECTED_ERROR_MESSAGE,
        fallback_status: int = 500,
    ) -> HashFileFailure:
        err = TransportError(
            body.get("message") or fallback_message,
            status=body.get("status") or fallback_status or 500,
            code=body.get("code"),
        )
        echo = body.get("data")
        echoed = _decode_echo(echo.get("file")) if isinstance(echo, dict) else None
        logger.warning(
            f"Hashing: Server rejected {info.filename}: {err.status} {err.code} {err.message}"
        )
        return self._failure(file, info, err, echoed if echoed is not None else content)

    # ---------- Outcome mapping ----------

    def _map_outcome(
        self,
        outcome: TransportOutcome,
        file: Any,
        info: FileInfo,
        content: bytes,
    ) -> HashFileResponse:
        if isinstance(outcome, TransportResponse):
            body = outcome.body
            if not isinstance(body, dict) or not isinstance(body.get("success"), bool):
                raise UnexpectedError(f"Unexpected response shape: {body}")
            if body["success"]:
                result = self._success(file, info, body)
                logger.info(f"Hashing: {result.filename} -> {result.hash}")
                return result
            return self._server_failure(file, info, body, content)

        if isinstance(outcome, TransportFailure):
            return self._server_failure(
                file,
                info,
                outcome.body or {},
                content,
                fallback_message=outcome.message,
                fallback_status=outcome.status,
            )

        if isinstance(outcome, RawFailure):
            raise UnexpectedError(outcome.message or UNEXPECTED_ERROR_MESSAGE)

        raise UnexpectedError(f"Unknown transport outcome: {outcome!r}")

    # ---------- Public API ----------

    def hash_file(
        self, file: FileReference, metadata: Optional[FileMetadata] = None
    ) -> HashFileResponse:
        """
        Upload a file (path, bytes, or binary stream) with optional metadata
        and return the normalized hash result.
        """
        info = resolve_file_info(file)

        try:
            content = file_to_bytes(file)
        except FileReadError as e:
            logger.warning(f"Hashing: Could not read {info.filename}: {e.message}")
            return self._failure(file, info, e)

        files = {"file": (info.filename, content, info.file_type)}

        try:
            data = None
            if metadata is not None:
                data = {"metadata": json.dumps(metadata)}
            outcome = self._transport.post_multipart(HASH_FILE_PATH, files=files, data=data)
            return self._map_outcome(outcome, file, info, content)
        except UnexpectedError as e:
            logger.error(f"Hashing: {info.filename} failed: {e.message}")
            return self._failure(file, info, e, content)
        except Exception as e:
            logger.error(f"Hashing: Unexpected failure for {info.filename}: {e}")
            err = UnexpectedError(str(e) or UNEXPECTED_ERROR_MESSAGE)
            return self._failure(file, info, err, content)
