"""Wizard configuration loaded from environment variables.

All configuration values have defaults matching the wizard's clustering
controls (threshold slider 0-50, default 25) and its five-row data
preview. Azure Functions app settings (or ``local.settings.json`` for
local dev) are the source of truth.

Fail-fast validation:
    ``from_env()`` raises ``ConfigValidationError`` if any numeric
    value is out of its valid range.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from khasra_cluster.core.exceptions import KhasraError


class ConfigValidationError(KhasraError):
    """Raised when configuration values are out of valid range.

    Attributes:
        key: The configuration key that failed validation.
        value: The invalid value.
        message: Human-readable description of the valid range.
    """

    default_stage = "config"
    default_code = "CONFIG_VALIDATION_FAILED"

    def __init__(self, key: str, value: object, message: str) -> None:
        self.key = key
        self.value = value
        super().__init__(f"Invalid configuration {key}={value!r}: {message}")


@dataclass(frozen=True, slots=True)
class WizardConfig:
    """Immutable wizard configuration.

    Loaded once per request by the entry point. The clustering engine
    never reads it; callers pass the threshold explicitly.

    Attributes:
        default_distance_threshold: Threshold used when a clustering request
            omits one, in the same units as the coordinates (degrees).
        max_distance_threshold: Upper bound accepted from requests.
        max_upload_bytes: Largest KMZ upload accepted.
        preview_feature_count: Number of property rows in the upload preview.
    """

    default_distance_threshold: float = 25.0
    max_distance_threshold: float = 50.0
    max_upload_bytes: int = 50_000_000
    preview_feature_count: int = 5

    @classmethod
    def from_env(cls) -> WizardConfig:
        """Load and validate configuration from environment variables.

        Raises:
            ConfigValidationError: If a numeric value is out of range.
            ValueError: If a numeric environment variable cannot be
                parsed (e.g. ``MAX_UPLOAD_BYTES=abc``).
        """
        config = cls(
            default_distance_threshold=float(os.getenv("CLUSTER_DISTANCE_THRESHOLD", "25")),
            max_distance_threshold=float(os.getenv("CLUSTER_MAX_DISTANCE_THRESHOLD", "50")),
            max_upload_bytes=int(os.getenv("MAX_UPLOAD_BYTES", "50000000")),
            preview_feature_count=int(os.getenv("PREVIEW_FEATURE_COUNT", "5")),
        )
        _validate(config)
        return config


def _validate(config: WizardConfig) -> None:
    """Validate configuration ranges.  Raises ``ConfigValidationError``."""
    if config.max_distance_threshold <= 0:
        raise ConfigValidationError(
            "CLUSTER_MAX_DISTANCE_THRESHOLD",
            config.max_distance_threshold,
            "must be > 0",
        )

    if not 0.0 <= config.default_distance_threshold <= config.max_distance_threshold:
        raise ConfigValidationError(
            "CLUSTER_DISTANCE_THRESHOLD",
            config.default_distance_threshold,
            f"must be between 0 and {config.max_distance_threshold}",
        )

    if config.max_upload_bytes <= 0:
        raise ConfigValidationError(
            "MAX_UPLOAD_BYTES",
            config.max_upload_bytes,
            "must be > 0 (bytes)",
        )

    if config.preview_feature_count < 0:
        raise ConfigValidationError(
            "PREVIEW_FEATURE_COUNT",
            config.preview_feature_count,
            "must be >= 0",
        )
