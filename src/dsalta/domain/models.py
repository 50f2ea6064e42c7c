from __future__ import annotations
import os
from dataclasses import dataclass, field
from typing import Any, BinaryIO, Dict, Optional, Union

FileMetadata = Dict[str, Any]

# path on disk | in-memory buffer | open binary stream
FileReference = Union[str, "os.PathLike[str]", bytes, bytearray, memoryview, BinaryIO]


@dataclass(frozen=True)
class FileInfo:
    filename: str
    file_type: str


@dataclass(frozen=True)
class HashError:
    message: str
    status: int
    code: Optional[str] = None


@dataclass
class HashFileSuccess:
    timestamp: str
    file: Any
    filename: str
    file_type: str
    hash: str
    metadata: Optional[FileMetadata]
    base64_file: Optional[str] = None
    file_bytes: Optional[bytes] = None
    success: bool = field(default=True, init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": True,
            "timestamp": self.timestamp,
            "filename": self.filename,
            "fileType": self.file_type,
            "data": {
                "hash": self.hash,
                "metadata": self.metadata,
                "base64File": self.base64_file,
            },
        }


@dataclass
class HashFileFailure:
    timestamp: str
    file: Any
    filename: str
    file_type: str
    error: HashError
    file_bytes: Optional[bytes] = None
    success: bool = field(default=False, init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": False,
            "timestamp": self.timestamp,
            "filename": self.filename,
            "fileType": self.file_type,
            "error": {
                "message": self.error.message,
                "status": self.error.status,
                "code": self.error.code,
            },
        }


HashFileResponse = Union[HashFileSuccess, HashFileFailure]
