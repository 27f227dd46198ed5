"""Shared constants — single source of truth.

Centralises default strings and file-type literals used by the
extractor, the layer step, and the HTTP entry point.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Placemark defaults
# ---------------------------------------------------------------------------

DEFAULT_PLACEMARK_NAME: str = "Unnamed"
"""Name assigned to a placemark without a ``<name>`` element."""

DEFAULT_ID_COLUMN: str = "name"
"""Identifier column suggested when a dataset has no property columns."""

MISSING_VALUE_PLACEHOLDER: str = "-"
"""Rendered in preview rows for a column a feature does not carry."""

# ---------------------------------------------------------------------------
# File types
# ---------------------------------------------------------------------------

KMZ_EXTENSION: str = ".kmz"
"""Extension of uploaded placemark archives."""

KML_EXTENSION: str = ".kml"
"""Extension of the markup document inside a KMZ archive (case-sensitive)."""

JSON_CONTENT_TYPE: str = "application/json"

# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------

CORRELATION_ID_HEADER: str = "x-correlation-id"
"""Request header carrying a caller-supplied correlation id."""
