# recorder/errors.py — erreurs typées (entrée invalide, format, stockage, réglages) + Outcome
"""
Error hierarchy for the recorder.

- RecorderError: root, never raised directly.
- InvalidArgument: missing or malformed caller input.
- InvalidFormat: payload does not match the expected data URL / MIME shape.
- StorageError: folder or file operation failed on the storage backend.
- ConfigReadError: settings sheet or cell unreadable (always handled fail-open).

Outcome tells apart the three ways an operation can end: it succeeded, it
failed without affecting the caller (history log, settings reads), or it
failed and the caller must see it.
"""
from __future__ import annotations
import enum
from typing import Any, Dict, Optional


class Outcome(enum.Enum):
    OK = "ok"
    ABSORBED = "absorbed"
    FAILED = "failed"


class RecorderError(Exception):
    code = "recorder_error"

    def __init__(self, message: str, *, code: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        self.details = details or {}

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"


class InvalidArgument(RecorderError):
    code = "invalid_argument"


class InvalidFormat(RecorderError):
    code = "invalid_format"


class StorageError(RecorderError):
    code = "storage_error"


class ConfigReadError(RecorderError):
    code = "config_read_error"


# codes HTTP utilisés par les blueprints
HTTP_STATUS = {
    InvalidArgument: 400,
    InvalidFormat: 400,
    StorageError: 500,
    ConfigReadError: 500,
}


def http_status_for(exc_type: Optional[type]) -> int:
    if exc_type is None:
        return 500
    for cls in exc_type.__mro__:
        if cls in HTTP_STATUS:
            return HTTP_STATUS[cls]
    return 500
