"""Typed payload schemas for the HTTP request contracts.

The layer and clustering endpoints receive JSON bodies. These
``TypedDict`` definitions make the contracts explicit so that pyright
catches key mismatches at analysis time and ``validate_payload``
catches them at runtime.

Usage::

    from khasra_cluster.models.payloads import ClusterRequest, validate_payload

    def handle(raw: dict) -> ...:
        validate_payload(raw, ClusterRequest, endpoint="cluster_features")
        # raw is now known to contain all required keys
"""

from __future__ import annotations

from typing import Any, NotRequired, TypedDict

from khasra_cluster.core.exceptions import ContractError

# ---------------------------------------------------------------------------
# Select layers (wizard step 2)
# ---------------------------------------------------------------------------


class LayerFilterRequest(TypedDict):
    """Client → ``select_layers`` endpoint."""

    features: list[dict[str, Any]]
    layers: list[str]
    correlation_id: NotRequired[str]


# ---------------------------------------------------------------------------
# Cluster features (wizard step 3)
# ---------------------------------------------------------------------------


class ClusterRequest(TypedDict):
    """Client → ``cluster_features`` endpoint.

    ``threshold`` falls back to ``WizardConfig.default_distance_threshold``.
    """

    features: list[dict[str, Any]]
    threshold: NotRequired[float]
    layers: NotRequired[list[str]]
    correlation_id: NotRequired[str]


# ---------------------------------------------------------------------------
# Required-key registrations (used by validate_payload)
# ---------------------------------------------------------------------------

_REQUIRED_KEYS: dict[type, frozenset[str]] = {
    LayerFilterRequest: frozenset({"features", "layers"}),
    ClusterRequest: frozenset({"features"}),
}


# ---------------------------------------------------------------------------
# Runtime validation
# ---------------------------------------------------------------------------


def validate_payload(
    raw: dict[str, Any],
    schema: type,
    *,
    endpoint: str,
) -> None:
    """Validate that *raw* contains the required keys for *schema*.

    Raises:
        ContractError: If required keys are missing from the payload.
    """
    required = _REQUIRED_KEYS.get(schema)
    if required is None:
        return

    missing = required - raw.keys()
    if missing:
        msg = f"{endpoint}: missing required payload key(s): {', '.join(sorted(missing))}"
        raise ContractError(msg, stage=endpoint, code="PAYLOAD_MISSING_KEYS")
