"""Unified exception taxonomy.

Provides a shared base exception hierarchy for the extractor, the
clustering engine, and the HTTP boundary. Every domain exception inherits
from ``KhasraError`` and carries structured context fields so that the
entry point can map failures to a consistent response body.

Taxonomy categories
-------------------
- ``ValidationError``   — input violations (bad archive, bad XML).
- ``ContractError``     — request payload/schema drift at the HTTP boundary.
- anything else         — ``internal`` (e.g. invalid app settings).

Every exception exposes ``to_error_dict()`` for a stable structured
error payload suitable for responses and logging.
"""

from __future__ import annotations


class KhasraError(Exception):
    """Base exception for all wizard-domain errors.

    Attributes:
        message: Human-readable error description.
        stage: Stage where the error occurred
            (e.g. ``"extract_features"``, ``"ingress"``).
        code: Machine-readable error code (e.g. ``"KMZ_DECODE_FAILED"``).
        correlation_id: Request correlation identifier, filled in by the
            entry point when the request carries one.
    """

    #: Default stage for subclasses (override via class attribute or kwarg).
    default_stage: str = ""
    #: Default code for subclasses (override via class attribute or kwarg).
    default_code: str = ""

    def __init__(
        self,
        message: str = "",
        *,
        stage: str = "",
        code: str = "",
        correlation_id: str = "",
    ) -> None:
        self.message = message
        self.stage = stage or self.default_stage
        self.code = code or self.default_code
        self.correlation_id = correlation_id
        super().__init__(message)

    @property
    def category(self) -> str:
        """Return the error category based on concrete class."""
        if isinstance(self, ContractError):
            return "contract"
        if isinstance(self, ValidationError):
            return "validation"
        return "internal"

    def to_error_dict(self) -> dict[str, object]:
        """Return a structured error payload with stable keys."""
        return {
            "category": self.category,
            "code": self.code,
            "stage": self.stage,
            "message": self.message,
            "correlation_id": self.correlation_id,
        }


# ---------------------------------------------------------------------------
# Category base classes
# ---------------------------------------------------------------------------


class ValidationError(KhasraError):
    """Input or domain-model validation failure."""


class ContractError(KhasraError):
    """Request payload or schema drift at the HTTP boundary."""
