"""Structured errors for the vg CLI.

The core operations are total and never raise these; they exist so the CLI
can report configuration and input problems with stable codes, either as
text or as JSON (``vg --json-errors ...``).
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Stable error codes for programmatic consumers."""

    VAULT_NOT_CONFIGURED = "VAULT_NOT_CONFIGURED"
    VAULT_NOT_FOUND = "VAULT_NOT_FOUND"
    NOTE_NOT_FOUND = "NOTE_NOT_FOUND"
    FILE_READ_ERROR = "FILE_READ_ERROR"
    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    MISSING_ARGUMENT = "MISSING_ARGUMENT"
    UNKNOWN_OPTION = "UNKNOWN_OPTION"
    USAGE_ERROR = "USAGE_ERROR"
    CLI_ERROR = "CLI_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class VaultGraphError(Exception):
    """An error with a code, a message and optional details.

    Details may carry a ``suggestion`` key, which the CLI prints as a hint.
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        error: dict[str, Any] = {"code": self.code.value, "message": self.message}
        if self.details:
            error["details"] = self.details
        return {"error": error}

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), default=str)


def format_error_json(code: ErrorCode | str, message: str, details: dict | None = None) -> str:
    """Format an error as JSON for --json-errors output."""
    code_value = code.value if isinstance(code, ErrorCode) else code
    error: dict[str, dict[str, object]] = {"error": {"code": code_value, "message": message}}
    if details:
        error["error"]["details"] = details
    return json.dumps(error, default=str)
