from __future__ import annotations
from typing import Optional

FILE_READ_ERROR = "FILE_READ_ERROR"
UNEXPECTED_ERROR = "UNEXPECTED_ERROR"
UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred"


class DsaltaError(Exception):
    status: int = 500
    code: Optional[str] = None

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        code: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        if status is not None:
            self.status = status
        if code is not None:
            self.code = code


class ConfigurationError(DsaltaError):
    pass


class FileReadError(DsaltaError):
    status = 400
    code = FILE_READ_ERROR


class TransportError(DsaltaError):
    pass


class UnexpectedError(DsaltaError):
    status = 500
    code = UNEXPECTED_ERROR
