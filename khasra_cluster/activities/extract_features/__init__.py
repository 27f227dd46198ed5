"""Feature extraction activity — composable pipeline.

Turns the bytes of an uploaded KMZ archive into typed placemark features,
the sorted list of property columns, and a suggested identifier column.

The extraction pipeline is split into focused stages:
- **_archive**: locate the KML document inside the zip archive
- **_validation**: error kinds and well-formed XML parsing
- **_normalization**: element lookup, coordinate text, ExtendedData
- **_classification**: ordered keyword rules assigning a thematic layer
- **_lxml_parser**: Placemark → Feature conversion

Failure semantics:
- Archive problems raise ``ArchiveDecodeError`` (kind ``decode``)
- Malformed XML raises ``KmlParseError`` (kind ``parse``)
- Either way nothing partial is returned
- An archive without a KML document yields an empty result
- Placemarks without geometry are dropped, not reported as errors
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from khasra_cluster.activities.extract_features._archive import find_kml_document
from khasra_cluster.activities.extract_features._classification import (
    LAYER_RULES,
    LayerRule,
    classification_text,
    classify_layer,
)
from khasra_cluster.activities.extract_features._constants import (
    GEOMETRY_PRECEDENCE,
    KML_NAMESPACE,
)
from khasra_cluster.activities.extract_features._lxml_parser import (
    parse_placemarks,
    resolve_geometry,
)
from khasra_cluster.activities.extract_features._normalization import (
    extract_extended_data,
    parse_coordinates_text,
    parse_number,
    parse_point_text,
)
from khasra_cluster.activities.extract_features._validation import (
    ArchiveDecodeError,
    ExtractionError,
    KmlParseError,
    parse_kml_document,
)
from khasra_cluster.core.constants import DEFAULT_ID_COLUMN
from khasra_cluster.models.extraction import ExtractionResult

if TYPE_CHECKING:
    from collections.abc import Sequence

    from khasra_cluster.models.feature import Feature

logger = logging.getLogger("khasra_cluster.activities.extract_features")

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

__all__ = [
    "GEOMETRY_PRECEDENCE",
    "KML_NAMESPACE",
    "LAYER_RULES",
    "ArchiveDecodeError",
    "ExtractionError",
    "KmlParseError",
    "LayerRule",
    "classification_text",
    "classify_layer",
    "collect_columns",
    "default_id_column",
    "extract_extended_data",
    "extract_features",
    "extract_features_from_kml",
    "find_kml_document",
    "parse_coordinates_text",
    "parse_kml_document",
    "parse_number",
    "parse_placemarks",
    "parse_point_text",
    "resolve_geometry",
]


def extract_features(archive_bytes: bytes, *, source_filename: str = "") -> ExtractionResult:
    """Extract placemark features from a KMZ archive.

    Args:
        archive_bytes: Raw bytes of the uploaded ``.kmz`` file.
        source_filename: Upload filename, used in log and error messages.

    Returns:
        An ``ExtractionResult``. Empty (no features, no columns, default
        identifier column ``"name"``) when the archive has no KML document.

    Raises:
        ArchiveDecodeError: If the bytes are not a readable zip archive.
        KmlParseError: If the KML document is not well-formed XML.
    """
    logger.info("Extracting features from %s", source_filename or "upload")

    document = find_kml_document(archive_bytes, source_filename)
    if document is None:
        return ExtractionResult()

    member_name, kml_bytes = document
    result = extract_features_from_kml(kml_bytes, document_name=member_name)

    logger.info(
        "Extracted %d feature(s) | archive=%s | document=%s | columns=%d | id_column=%s",
        len(result.features),
        source_filename or "upload",
        member_name,
        len(result.columns),
        result.default_id_column,
    )
    return result


def extract_features_from_kml(kml_bytes: bytes, *, document_name: str = "") -> ExtractionResult:
    """Extract placemark features from a bare KML document.

    Raises:
        KmlParseError: If the document is not well-formed XML.
    """
    root = parse_kml_document(kml_bytes, document_name)
    features = parse_placemarks(root, document_name)
    columns = collect_columns(features)
    return ExtractionResult(
        features=features,
        columns=columns,
        default_id_column=default_id_column(columns),
        source_document=document_name,
    )


def collect_columns(features: Sequence[Feature]) -> list[str]:
    """Distinct property keys across *features*, sorted lexicographically."""
    return sorted({key for feature in features for key in feature.properties})


def default_id_column(columns: Sequence[str]) -> str:
    """First column name, or ``"name"`` when there are none."""
    return columns[0] if columns else DEFAULT_ID_COLUMN
