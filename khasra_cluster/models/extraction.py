"""Result of extracting features from one KMZ upload."""

from __future__ import annotations

from dataclasses import dataclass, field

from khasra_cluster.core.constants import DEFAULT_ID_COLUMN, MISSING_VALUE_PLACEHOLDER
from khasra_cluster.models.feature import Feature


@dataclass(frozen=True, slots=True)
class ExtractionResult:
    """Features, property columns and suggested identifier column.

    Attributes:
        features: Features with a resolved geometry, in document order.
        columns: Distinct property keys across ``features``, sorted.
        default_id_column: First entry of ``columns``, or ``"name"``.
        source_document: Archive member name of the KML document that
            was parsed (``""`` when the archive held none).
    """

    features: list[Feature] = field(default_factory=list)
    columns: list[str] = field(default_factory=list)
    default_id_column: str = DEFAULT_ID_COLUMN
    source_document: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.features

    def preview_rows(self, limit: int) -> list[dict[str, str]]:
        """Property rows of the first *limit* features keyed by ``columns``.

        Columns a feature does not carry are rendered as ``"-"``.
        """
        return [
            {column: feature.properties.get(column, MISSING_VALUE_PLACEHOLDER) for column in self.columns}
            for feature in self.features[: max(limit, 0)]
        ]

    def to_dict(self) -> dict[str, object]:
        return {
            "features": [f.to_dict() for f in self.features],
            "columns": list(self.columns),
            "default_id_column": self.default_id_column,
            "source_document": self.source_document,
        }
