"""KMZ archive access.

A KMZ upload is a zip archive holding one KML document (plus optional
icons and overlays). Only the first member whose name ends in ``.kml``
is used; any further KML members are ignored.
"""

from __future__ import annotations

import io
import logging
import zipfile
import zlib

from khasra_cluster.activities.extract_features._validation import ArchiveDecodeError
from khasra_cluster.core.constants import KML_EXTENSION

logger = logging.getLogger("khasra_cluster.activities.extract_features")

# Errors zipfile raises for corrupt, truncated, encrypted or exotic archives
_ARCHIVE_ERRORS = (
    zipfile.BadZipFile,
    zlib.error,
    EOFError,
    NotImplementedError,
    RuntimeError,
    OSError,
)


def find_kml_document(archive_bytes: bytes, archive_name: str = "") -> tuple[str, bytes] | None:
    """Return ``(member_name, content)`` of the first KML member.

    Members are scanned in archive directory order. Returns ``None``
    when the archive holds no ``.kml`` member.

    Raises:
        ArchiveDecodeError: If the bytes are empty, not a zip archive,
            or the KML member cannot be decompressed.
    """
    label = archive_name or "upload"
    if not archive_bytes:
        msg = f"{label} is empty"
        raise ArchiveDecodeError(msg)

    try:
        with zipfile.ZipFile(io.BytesIO(archive_bytes)) as archive:
            kml_members = [
                info.filename
                for info in archive.infolist()
                if not info.is_dir() and info.filename.endswith(KML_EXTENSION)
            ]
            if not kml_members:
                logger.warning("No %s document found in %s", KML_EXTENSION, label)
                return None

            if len(kml_members) > 1:
                logger.warning(
                    "Using %s from %s, ignoring %d other KML document(s): %s",
                    kml_members[0],
                    label,
                    len(kml_members) - 1,
                    ", ".join(kml_members[1:]),
                )

            return kml_members[0], archive.read(kml_members[0])
    except _ARCHIVE_ERRORS as exc:
        msg = f"{label} is not a valid KMZ archive: {exc}"
        raise ArchiveDecodeError(msg) from exc
