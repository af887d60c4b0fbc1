"""kb-blocks Error Hierarchy.

Provides a structured error hierarchy for the outer surfaces of the
block-tree editor (operation dispatch, serialization, the editing surface
and the CLI):
- KBBlocksError: Base exception for all application errors
- ValidationError: Input validation failures
- OperationError: Malformed or unknown edit operations
- SerializationError: Documents that cannot be loaded
- ConfigurationError: Configuration/setup issues

The structural edit engine itself never raises: operations addressed at
absent ids, out-of-range indices or boundary moves leave the tree unchanged.

Usage:
    from kbblocks.errors import OperationError

    if name not in HANDLERS:
        raise OperationError(f"Unknown operation: {name}", op=name)
"""

from __future__ import annotations

import logging
from typing import Any

logger = logging.getLogger(__name__)


# =============================================================================
# Error Base Classes
# =============================================================================


class KBBlocksError(Exception):
    """Base exception for all kb-blocks errors.

    Attributes:
        message: Human-readable error description
        recoverable: Whether the operation can be retried
        context: Additional context for debugging
    """

    def __init__(
        self,
        message: str,
        *,
        recoverable: bool = False,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.recoverable = recoverable
        self.context = context or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert to structured dictionary for API responses."""
        return {
            "type": type(self).__name__.lower().replace("error", ""),
            "message": self.message,
            "recoverable": self.recoverable,
            **{k: v for k, v in self.context.items() if v is not None},
        }


# =============================================================================
# Validation Errors
# =============================================================================


class ValidationError(KBBlocksError):
    """Input validation failed.

    Example:
        raise ValidationError("Block type not allowed here", field="type", value="columns")
    """

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        value: Any = None,
        constraint: str | None = None,
        **kwargs: Any,
    ) -> None:
        context = kwargs.pop("context", {})
        if field:
            context["field"] = field
        if constraint:
            context["constraint"] = constraint
        if value is not None:
            context["value"] = _truncate(str(value), 100)
        super().__init__(message, recoverable=False, context=context)
        self.field = field
        self.constraint = constraint


class OperationError(ValidationError):
    """An edit operation request was malformed (unknown name, missing params)."""

    def __init__(
        self,
        message: str,
        *,
        op: str | None = None,
        missing: list[str] | None = None,
    ) -> None:
        super().__init__(
            message,
            field="op",
            context={"op": op, "missing": missing or None},
        )
        self.op = op
        self.missing = missing or []


class SerializationError(KBBlocksError):
    """A serialized document could not be decoded into blocks."""

    def __init__(
        self,
        message: str,
        *,
        source: str | None = None,
    ) -> None:
        super().__init__(message, recoverable=False, context={"source": source})


class ConfigurationError(KBBlocksError):
    """Configuration is missing or invalid."""

    def __init__(
        self,
        message: str,
        *,
        setting: str | None = None,
    ) -> None:
        super().__init__(message, recoverable=False, context={"setting": setting})


# =============================================================================
# Helpers
# =============================================================================


def _truncate(value: str | None, max_len: int) -> str | None:
    """Truncate a string value for safe logging."""
    if value is None:
        return None
    if len(value) <= max_len:
        return value
    return value[:max_len] + "..."


# =============================================================================
# Error Code Mapping
# =============================================================================


# Map domain errors to JSON-RPC error codes
ERROR_CODES: dict[type[KBBlocksError], int] = {
    ValidationError: -32000,
    OperationError: -32602,
    SerializationError: -32700,
    ConfigurationError: -32030,
}


def get_error_code(exc: KBBlocksError) -> int:
    """Get the JSON-RPC error code for a domain error."""
    # Check exact type first
    if type(exc) in ERROR_CODES:
        return ERROR_CODES[type(exc)]
    # Check parent types
    for error_type, code in ERROR_CODES.items():
        if isinstance(exc, error_type):
            return code
    # Default internal error
    return -32603
