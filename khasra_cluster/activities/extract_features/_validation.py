"""Error types and XML well-formedness checking for extraction.

Responsibilities:
- Exception taxonomy for the two user-facing failure kinds
  (``decode`` and ``parse``)
- Parsing KML bytes into an lxml element tree with safe parser settings
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from khasra_cluster.core.exceptions import ValidationError

if TYPE_CHECKING:
    from lxml.etree import _Element


# ---------------------------------------------------------------------------
# Exceptions (public API, re-exported from __init__)
# ---------------------------------------------------------------------------


class ExtractionError(ValidationError):
    """Raised when an upload cannot be turned into features.

    Attributes:
        kind: ``"decode"`` for archive problems, ``"parse"`` for markup problems.
    """

    default_stage = "extract_features"
    default_code = "EXTRACTION_FAILED"
    kind: str = ""


class ArchiveDecodeError(ExtractionError):
    """Raised when the upload is not a readable KMZ (zip) archive."""

    default_code = "KMZ_DECODE_FAILED"
    kind = "decode"


class KmlParseError(ExtractionError):
    """Raised when the KML document inside the archive is not well-formed XML."""

    default_code = "KML_PARSE_FAILED"
    kind = "parse"


# ---------------------------------------------------------------------------
# XML parsing
# ---------------------------------------------------------------------------


def parse_kml_document(content: bytes, document_name: str = "") -> _Element:
    """Parse KML bytes into the root element.

    Raises:
        KmlParseError: If the content is empty or not well-formed XML.
    """
    from lxml import etree  # type: ignore[attr-defined]

    label = document_name or "KML document"
    if not content.strip():
        msg = f"{label} is empty"
        raise KmlParseError(msg)

    parser = etree.XMLParser(resolve_entities=False, no_network=True, huge_tree=False)
    try:
        return etree.fromstring(content, parser=parser)
    except etree.XMLSyntaxError as exc:
        msg = f"{label} is not valid XML: {exc}"
        raise KmlParseError(msg) from exc
