"""
Exception types raised by nylas_ops.

HTTP and transport failures are not wrapped: sync calls let
httpx.HTTPStatusError / httpx.RequestError propagate unchanged.
"""
from __future__ import annotations

from typing import Any, Optional


class NylasError(Exception):
    """Base class for every error raised by this library."""


class NylasValidationError(NylasError, ValueError):
    """
    Caller-supplied parameters (or configuration) failed validation.

    Raised before any request is dispatched. When produced from a schema
    check, `errors` holds pydantic's structured error list.
    """

    def __init__(
        self,
        message: str,
        errors: Optional[list[dict[str, Any]]] = None,
        schema: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.errors: list[dict[str, Any]] = errors or []
        self.schema = schema

    @property
    def fields(self) -> list[str]:
        """Dotted locations of every failing field, e.g. 'when.time'."""
        return [".".join(str(p) for p in e.get("loc", ())) for e in self.errors]
