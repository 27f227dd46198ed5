"""Coordinate and property normalization helpers for placemark extraction.

Responsibilities:
- Locate KML elements by local name (namespaced or namespace-less documents)
- Parse KML coordinate text into ``(lon, lat)`` tuples
- Extract ExtendedData key-value pairs from a Placemark

Malformed numeric tokens become NaN and are kept; they are not an error
and are not filtered out.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

    from lxml.etree import _Element

    from khasra_cluster.models.feature import Coordinate

# ---------------------------------------------------------------------------
# Element lookup
# ---------------------------------------------------------------------------


def local_name(elem: _Element) -> str:
    """Tag name without its ``{namespace}`` prefix (``""`` for comments/PIs)."""
    tag = elem.tag
    if not isinstance(tag, str):
        return ""
    return tag.rsplit("}", 1)[-1]


def iter_descendants(elem: _Element, name: str) -> Iterator[_Element]:
    """Yield descendants of *elem* (not *elem* itself) named *name*, in document order."""
    for child in elem.iterdescendants():
        if local_name(child) == name:
            yield child


def first_descendant(elem: _Element, name: str) -> _Element | None:
    """First descendant of *elem* named *name*, or ``None``."""
    return next(iter_descendants(elem, name), None)


def find_path(elem: _Element, *names: str) -> _Element | None:
    """First element matching a descendant chain, like the CSS ``a b c`` selector."""
    candidates = [elem]
    for name in names:
        candidates = [found for c in candidates for found in iter_descendants(c, name)]
        if not candidates:
            return None
    return candidates[0]


def text_content(elem: _Element | None) -> str:
    """Concatenated text of *elem* and its descendants (``""`` for ``None``)."""
    if elem is None:
        return ""
    return "".join(elem.itertext())


# ---------------------------------------------------------------------------
# KML coordinate text parsing
# ---------------------------------------------------------------------------


def parse_number(token: str) -> float:
    """Parse a numeric token, returning NaN when it is malformed."""
    try:
        return float(token)
    except ValueError:
        return math.nan


def parse_point_text(text: str) -> Coordinate | None:
    """Parse a single ``lon,lat[,alt]`` position.

    Altitude is ignored. An empty component (``",12.5"``) or a missing
    latitude reads as ``0.0``; a non-numeric component reads as NaN.
    Returns ``None`` for blank text.
    """
    stripped = text.strip()
    if not stripped:
        return None
    parts = stripped.split(",")
    lon_token = parts[0].strip()
    lat_token = parts[1].strip() if len(parts) > 1 else ""
    lon = parse_number(lon_token) if lon_token else 0.0
    lat = parse_number(lat_token) if lat_token else 0.0
    return (lon, lat)


def parse_coordinates_text(text: str) -> list[Coordinate]:
    """Parse KML coordinate text (``lon,lat,alt lon,lat,alt ...``) to (lon, lat) tuples.

    Every whitespace-separated token yields one tuple; a token without a
    latitude, or with a non-numeric component, yields NaN in that slot.
    """
    coords: list[Coordinate] = []
    for token in text.split():
        parts = token.split(",")
        lon = parse_number(parts[0])
        lat = parse_number(parts[1]) if len(parts) > 1 else math.nan
        coords.append((lon, lat))
    return coords


# ---------------------------------------------------------------------------
# ExtendedData extraction
# ---------------------------------------------------------------------------


def extract_extended_data(placemark_elem: _Element) -> dict[str, str]:
    """Extract ExtendedData metadata from a Placemark element.

    Handles both KML metadata patterns:
    - ``ExtendedData/Data/value`` — untyped key-value pairs.
    - ``ExtendedData/SchemaData/SimpleData`` — typed fields defined by a
      ``<Schema>`` element.

    Entries without a ``name`` attribute are skipped. A present key with
    an empty or missing value is kept as ``""``. Later duplicates
    overwrite earlier values.
    """
    metadata: dict[str, str] = {}
    for extended in iter_descendants(placemark_elem, "ExtendedData"):
        for data_elem in iter_descendants(extended, "Data"):
            key = data_elem.get("name", "")
            if key:
                metadata[key] = text_content(first_descendant(data_elem, "value"))

        for simple_data in iter_descendants(extended, "SimpleData"):
            key = simple_data.get("name", "")
            if key:
                metadata[key] = text_content(simple_data)

    return metadata
