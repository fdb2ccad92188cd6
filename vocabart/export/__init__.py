"""Deck exporters: image archive, JSON manifest, print PDF.

`print_export` is not imported here; it pulls in the face renderer.
"""

from vocabart.export.archive import ARCHIVE_NAME, archive_entries, export_archive
from vocabart.export.manifest import (
    HINTS_NAME,
    MANIFEST_NAME,
    apply_hints,
    build_manifest,
    export_hints,
    export_manifest,
    load_hints,
    load_manifest,
)

__all__ = [
    "ARCHIVE_NAME",
    "archive_entries",
    "export_archive",
    "MANIFEST_NAME",
    "build_manifest",
    "export_manifest",
    "load_manifest",
    "HINTS_NAME",
    "export_hints",
    "load_hints",
    "apply_hints",
]
