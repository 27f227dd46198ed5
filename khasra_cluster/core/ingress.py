"""Thin ingress boundary helpers for the Azure Functions entry point.

Centralises the HTTP transport concerns so that ``function_app.py``
contains only route bindings and handoff:

- **read_upload** — validates the uploaded KMZ body (presence, size,
  extension) and returns its bytes and filename.
- **deserialize_request_body** — normalises a JSON request body to a
  dict, raising ``ContractError`` on anything else.
- **build_cluster_request** / **build_layer_request** — turn a JSON
  body into domain objects (features, threshold, layers).
- **resolve_correlation_id** — picks the request correlation id from
  the JSON body or the ``x-correlation-id`` header.
- **error_response_body** — renders a ``KhasraError`` as a response body.
"""

from __future__ import annotations

import json
import logging
import math
from typing import TYPE_CHECKING, Any

from khasra_cluster.core.constants import CORRELATION_ID_HEADER, KMZ_EXTENSION
from khasra_cluster.core.exceptions import ContractError
from khasra_cluster.models.feature import Feature
from khasra_cluster.models.payloads import (
    ClusterRequest,
    LayerFilterRequest,
    validate_payload,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

    from khasra_cluster.core.config import WizardConfig
    from khasra_cluster.core.exceptions import KhasraError
    from khasra_cluster.models.feature import Layer

logger = logging.getLogger("khasra_cluster.core.ingress")


# ---------------------------------------------------------------------------
# Upload handling
# ---------------------------------------------------------------------------


def read_upload(body: bytes, filename: str, config: WizardConfig) -> tuple[bytes, str]:
    """Validate an uploaded KMZ body.

    Args:
        body: Raw request body.
        filename: Client-supplied filename (query parameter or header).
        config: Active wizard configuration (upload size limit).

    Returns:
        ``(body, filename)`` unchanged once validated.

    Raises:
        ContractError: If the body is empty, too large, or the filename
            does not end in ``.kmz``.
    """
    if not body:
        msg = "Request body is empty; expected the bytes of a .kmz file"
        raise ContractError(msg, stage="ingress", code="EMPTY_UPLOAD")

    if len(body) > config.max_upload_bytes:
        msg = f"Upload is {len(body)} bytes, larger than the {config.max_upload_bytes}-byte limit"
        raise ContractError(msg, stage="ingress", code="UPLOAD_TOO_LARGE")

    if filename and not filename.lower().endswith(KMZ_EXTENSION):
        msg = f"Please select a valid KMZ file (got {filename!r})"
        raise ContractError(msg, stage="ingress", code="INVALID_FILE_TYPE")

    logger.debug("Upload accepted | filename=%s | size=%d", filename, len(body))
    return body, filename


# ---------------------------------------------------------------------------
# JSON body deserialisation
# ---------------------------------------------------------------------------


def deserialize_request_body(raw: bytes | str | dict[str, Any] | object) -> dict[str, Any]:
    """Normalise a JSON request body to a plain dict.

    Raises:
        ContractError: If *raw* is not a JSON object.
    """
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8", errors="replace")
    if isinstance(raw, str):
        try:
            parsed = json.loads(raw)
        except (json.JSONDecodeError, ValueError) as exc:
            msg = f"Request body is not valid JSON: {exc}"
            raise ContractError(msg, stage="ingress", code="INVALID_JSON") from exc
        if not isinstance(parsed, dict):
            msg = f"Request body JSON must be an object, got {type(parsed).__name__}"
            raise ContractError(msg, stage="ingress", code="INVALID_INPUT_TYPE")
        return parsed
    if isinstance(raw, dict):
        return raw
    msg = f"Unexpected request body type: {type(raw).__name__}"
    raise ContractError(msg, stage="ingress", code="INVALID_INPUT_TYPE")


# ---------------------------------------------------------------------------
# Domain request builders
# ---------------------------------------------------------------------------


def build_features(raw_features: object, *, endpoint: str) -> list[Feature]:
    """Deserialise a list of GeoJSON-style feature dicts.

    Raises:
        ContractError: If the value is not a list or a feature is malformed.
    """
    if not isinstance(raw_features, list):
        msg = f"{endpoint}: 'features' must be a list, got {type(raw_features).__name__}"
        raise ContractError(msg, stage=endpoint, code="INVALID_FEATURES")

    features: list[Feature] = []
    for idx, raw in enumerate(raw_features):
        if not isinstance(raw, dict):
            msg = f"{endpoint}: feature {idx} must be an object, got {type(raw).__name__}"
            raise ContractError(msg, stage=endpoint, code="INVALID_FEATURES")
        try:
            features.append(Feature.from_dict(raw))
        except (TypeError, ValueError, OverflowError) as exc:
            msg = f"{endpoint}: feature {idx} is malformed: {exc}"
            raise ContractError(msg, stage=endpoint, code="INVALID_FEATURES") from exc
    return features


def build_layers(raw_layers: object, *, endpoint: str) -> list[Layer]:
    """Deserialise a list of layer display names.

    Raises:
        ContractError: If the value is not a list of known layer names.
    """
    from khasra_cluster.activities.select_layers import parse_layer_names

    if not isinstance(raw_layers, list) or not all(isinstance(n, str) for n in raw_layers):
        msg = f"{endpoint}: 'layers' must be a list of layer names"
        raise ContractError(msg, stage=endpoint, code="INVALID_LAYER")
    try:
        return parse_layer_names(raw_layers)
    except ValueError as exc:
        raise ContractError(f"{endpoint}: {exc}", stage=endpoint, code="INVALID_LAYER") from exc


def build_threshold(raw: object, config: WizardConfig, *, endpoint: str) -> float:
    """Resolve the clustering threshold, defaulting from configuration.

    Raises:
        ContractError: If the value is not a number in
            ``[0, config.max_distance_threshold]``.
    """
    if raw is None:
        return config.default_distance_threshold

    if isinstance(raw, bool) or not isinstance(raw, int | float | str):
        msg = f"{endpoint}: 'threshold' must be a number, got {type(raw).__name__}"
        raise ContractError(msg, stage=endpoint, code="INVALID_THRESHOLD")
    try:
        threshold = float(raw)
    except (ValueError, OverflowError) as exc:
        msg = f"{endpoint}: 'threshold' must be a number, got {raw!r}"
        raise ContractError(msg, stage=endpoint, code="INVALID_THRESHOLD") from exc

    if math.isnan(threshold) or not 0.0 <= threshold <= config.max_distance_threshold:
        msg = (
            f"{endpoint}: 'threshold' must be between 0 and "
            f"{config.max_distance_threshold}, got {threshold}"
        )
        raise ContractError(msg, stage=endpoint, code="INVALID_THRESHOLD")
    return threshold


def build_layer_request(payload: dict[str, Any]) -> tuple[list[Feature], list[Layer]]:
    """Validate a layer-selection body and return ``(features, layers)``."""
    validate_payload(payload, LayerFilterRequest, endpoint="select_layers")
    features = build_features(payload["features"], endpoint="select_layers")
    layers = build_layers(payload["layers"], endpoint="select_layers")
    return features, layers


def build_cluster_request(
    payload: dict[str, Any], config: WizardConfig
) -> tuple[list[Feature], float, list[Layer] | None]:
    """Validate a clustering body and return ``(features, threshold, layers)``.

    ``layers`` is ``None`` when the request does not restrict layers.
    """
    validate_payload(payload, ClusterRequest, endpoint="cluster_features")
    features = build_features(payload["features"], endpoint="cluster_features")
    threshold = build_threshold(payload.get("threshold"), config, endpoint="cluster_features")
    layers = None
    if payload.get("layers") is not None:
        layers = build_layers(payload["layers"], endpoint="cluster_features")
    return features, threshold, layers


# ---------------------------------------------------------------------------
# Request correlation
# ---------------------------------------------------------------------------


def resolve_correlation_id(headers: Mapping[str, str], payload: dict[str, Any] | None = None) -> str:
    """Correlation id for log lines and error bodies.

    A non-empty ``correlation_id`` string in the JSON body wins over the
    ``x-correlation-id`` header; ``""`` when neither is present.
    """
    if payload is not None:
        from_body = payload.get("correlation_id")
        if isinstance(from_body, str) and from_body:
            return from_body
    return headers.get(CORRELATION_ID_HEADER, "") or ""


# ---------------------------------------------------------------------------
# Error rendering
# ---------------------------------------------------------------------------


def error_response_body(error: KhasraError) -> str:
    """Serialise a domain error as an ``ErrorResponse`` JSON string."""
    from khasra_cluster.models.responses import ErrorResponse

    return ErrorResponse(**error.to_error_dict()).model_dump_json()  # type: ignore[arg-type]
