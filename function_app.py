"""Azure Functions entry point — khasra clustering wizard backend.

This module registers the HTTP functions the wizard calls, using the
Python v2 programming model:

- ``POST /api/features``  — upload a KMZ archive, receive features
- ``POST /api/layers``    — filter features to the selected layers
- ``POST /api/clusters``  — cluster features by centroid distance

All business logic lives in the khasra_cluster package. This file is
purely the wiring layer between HTTP bindings and application code.
"""

from __future__ import annotations

import logging

import azure.functions as func

from khasra_cluster.core.config import WizardConfig
from khasra_cluster.core.constants import JSON_CONTENT_TYPE
from khasra_cluster.core.exceptions import ContractError, ValidationError
from khasra_cluster.core.ingress import (
    build_cluster_request,
    build_layer_request,
    deserialize_request_body,
    error_response_body,
    read_upload,
    resolve_correlation_id,
)

app = func.FunctionApp(http_auth_level=func.AuthLevel.FUNCTION)

logger = logging.getLogger("khasra_cluster.function_app")


def _error_response(
    error: ValidationError | ContractError,
    correlation_id: str = "",
    status_code: int = 400,
) -> func.HttpResponse:
    if not error.correlation_id:
        error.correlation_id = correlation_id
    logger.warning(
        "Request rejected | stage=%s | code=%s | correlation_id=%s | message=%s",
        error.stage,
        error.code,
        error.correlation_id,
        error.message,
    )
    return func.HttpResponse(
        error_response_body(error),
        status_code=status_code,
        mimetype=JSON_CONTENT_TYPE,
    )


# ---------------------------------------------------------------------------
# HTTP: Upload → Features (wizard step 1)
# ---------------------------------------------------------------------------


@app.function_name("extract_features")
@app.route(route="features", methods=["POST"])
def extract_features_http(req: func.HttpRequest) -> func.HttpResponse:
    """Extract placemark features from an uploaded KMZ archive.

    The request body is the raw ``.kmz`` file; the original filename is
    passed as the ``filename`` query parameter.

    Returns:
        200 with an ``ExtractionResponse`` body, or 400 with an
        ``ErrorResponse`` body when the upload cannot be decoded or parsed.
    """
    from khasra_cluster.activities.extract_features import extract_features
    from khasra_cluster.activities.select_layers import count_layers
    from khasra_cluster.models.responses import ExtractionResponse
    from khasra_cluster.utils.helpers import compute_map_center

    config = WizardConfig.from_env()
    filename = req.params.get("filename", "")
    correlation_id = resolve_correlation_id(req.headers)

    try:
        body, filename = read_upload(req.get_body(), filename, config)
        result = extract_features(body, source_filename=filename)
    except (ValidationError, ContractError) as exc:
        return _error_response(exc, correlation_id)

    logger.info(
        "extract_features completed | filename=%s | features=%d | correlation_id=%s",
        filename,
        len(result.features),
        correlation_id,
    )

    response = ExtractionResponse.from_result(
        result,
        layer_counts=count_layers(result.features),
        map_center=compute_map_center(result.features),
        preview_count=config.preview_feature_count,
    )
    return func.HttpResponse(response.model_dump_json(), mimetype=JSON_CONTENT_TYPE)


# ---------------------------------------------------------------------------
# HTTP: Layer selection (wizard step 2)
# ---------------------------------------------------------------------------


@app.function_name("select_layers")
@app.route(route="layers", methods=["POST"])
def select_layers_http(req: func.HttpRequest) -> func.HttpResponse:
    """Filter features to the requested layers.

    Body: ``LayerFilterRequest`` JSON (``features``, ``layers``).
    """
    from khasra_cluster.activities.select_layers import count_layers, filter_by_layers
    from khasra_cluster.models.responses import LayerSelectionResponse
    from khasra_cluster.utils.helpers import compute_map_center

    correlation_id = resolve_correlation_id(req.headers)

    try:
        payload = deserialize_request_body(req.get_body())
        correlation_id = resolve_correlation_id(req.headers, payload)
        features, layers = build_layer_request(payload)
    except ContractError as exc:
        return _error_response(exc, correlation_id)

    kept = filter_by_layers(features, layers)
    center = compute_map_center(kept)
    response = LayerSelectionResponse(
        features=[f.to_dict() for f in kept],
        layers=[layer.value for layer in layers],
        layer_counts=count_layers(kept),
        map_center=list(center) if center is not None else None,
    )
    return func.HttpResponse(response.model_dump_json(), mimetype=JSON_CONTENT_TYPE)


# ---------------------------------------------------------------------------
# HTTP: Clustering (wizard step 3)
# ---------------------------------------------------------------------------


@app.function_name("cluster_features")
@app.route(route="clusters", methods=["POST"])
def cluster_features_http(req: func.HttpRequest) -> func.HttpResponse:
    """Cluster features into connected components of the threshold graph.

    Body: ``ClusterRequest`` JSON (``features``, optional ``threshold``
    and ``layers``). The threshold defaults to
    ``CLUSTER_DISTANCE_THRESHOLD``.
    """
    from khasra_cluster.activities.cluster_features import cluster_features, summarize_clusters
    from khasra_cluster.activities.select_layers import filter_by_layers
    from khasra_cluster.models.responses import ClusteringResponse

    config = WizardConfig.from_env()
    correlation_id = resolve_correlation_id(req.headers)

    try:
        payload = deserialize_request_body(req.get_body())
        correlation_id = resolve_correlation_id(req.headers, payload)
        features, threshold, layers = build_cluster_request(payload, config)
    except ContractError as exc:
        return _error_response(exc, correlation_id)

    if layers is not None:
        features = filter_by_layers(features, layers)

    clusters = cluster_features(features, threshold)
    summary = summarize_clusters(clusters, len(features), threshold=threshold)

    logger.info(
        "cluster_features completed | features=%d | threshold=%s | clusters=%d | correlation_id=%s",
        len(features),
        threshold,
        summary.total_clusters,
        correlation_id,
    )

    response = ClusteringResponse.from_clusters(clusters, summary)
    return func.HttpResponse(response.model_dump_json(), mimetype=JSON_CONTENT_TYPE)
