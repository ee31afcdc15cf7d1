"""
exceptions.py - Error taxonomy for the combo discovery engine

Zero combos found is not an error: drivers simply return an empty list.
"""
from typing import Any, Dict, Optional


class ComboEngineError(Exception):
    """Base class for combo engine errors.

    Attributes:
        code: Short error code for identifying the error type
        message: Human-readable error description
        details: Additional error context
    """

    def __init__(self, message: str, code: str = "COMBO_ERR", details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        error_msg = f"[{self.code}] {self.message}"
        if self.details:
            error_msg += f"\nDetails: {self.details}"
        return error_msg


class DataUnavailable(ComboEngineError):
    """The card store could not be queried; fatal for the session."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="DATA_UNAVAILABLE", details=details)


class MalformedCardText(ComboEngineError):
    """A card's rules text is missing or not a string."""

    def __init__(self, card_id: str, value: Any = None):
        super().__init__(
            f"Card {card_id} has no usable rules text",
            code="MALFORMED_TEXT",
            details={'card_id': card_id, 'type': type(value).__name__},
        )
        self.card_id = card_id


class UnsupportedFormat(ComboEngineError, ValueError):
    """The requested game format has no legality flag in the store."""

    def __init__(self, format_name: Any, supported=()):
        super().__init__(
            f"Unsupported format: {format_name}",
            code="UNSUPPORTED_FORMAT",
            details={'supported': list(supported)},
        )


class SessionNotInitialized(ComboEngineError):
    """A discovery driver was called without an initialized session."""

    def __init__(self, message: str = "Discovery session not initialized; call initialize(format) first"):
        super().__init__(message, code="SESSION_NOT_INITIALIZED")


class ConfigurationError(ComboEngineError):
    """Invalid engine configuration."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="CONFIG_ERR", details=details)
