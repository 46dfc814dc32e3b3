"""
PGP engine exception hierarchy.

All exceptions inherit from PgpEngineError for easy catching.
"""

from typing import Any


class PgpEngineError(Exception):
    """Base exception for all pgp_engine errors."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        if self.context:
            ctx = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({ctx})"
        return self.message


class MissingParameterError(PgpEngineError):
    """A required operation parameter was not supplied."""

    def __init__(self, parameter: str, *, operation: str | None = None) -> None:
        super().__init__(f"Missing required parameter: {parameter}", operation=operation)
        self.parameter = parameter
        self.operation = operation


class ProcessInvocationError(PgpEngineError):
    """The engine process could not be started or talked to."""


class EngineInvocationError(PgpEngineError):
    """The engine ran but reported failure."""


class EngineDiagnosticError(EngineInvocationError):
    """The engine wrote diagnostics where none were expected."""


class DecryptionFailedError(EngineInvocationError):
    """Decryption did not report success in the status output."""


class BadSignatureError(PgpEngineError):
    """The engine reported a signature mismatch."""

    def __init__(self, diagnostic_text: str) -> None:
        super().__init__(diagnostic_text)
        self.diagnostic_text = diagnostic_text


class KeyGenerationError(PgpEngineError):
    """Key generation produced no key material."""


class UnsupportedVersionError(PgpEngineError):
    """The installed engine version is known not to work."""

    def __init__(self, message: str, *, version: str) -> None:
        super().__init__(message, version=version)
        self.version = version


class UnimplementedOperationError(PgpEngineError):
    """The requested operation is intentionally not supported."""

    def __init__(self, message: str, *, operation: str) -> None:
        super().__init__(message, operation=operation)
        self.operation = operation
