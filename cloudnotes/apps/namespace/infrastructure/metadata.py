"""Metadata extraction utilities for files."""

import mimetypes
from pathlib import Path
from typing import Final

from cloudnotes.apps.namespace.models import FileKind

_DEFAULT_MIME_TYPE: Final = 'application/octet-stream'

# MIME types the stdlib table does not know on every platform
_EXTRA_MIME_TYPES: Final = {
    '.md': 'text/markdown',
    '.markdown': 'text/markdown',
}


def detect_mime_type(filename: str) -> str:
    """Detect MIME type from filename.

    Uses Python's built-in mimetypes module to guess MIME type
    from filename extension.

    Args:
        filename: Filename with extension.

    Returns:
        MIME type string (e.g., 'text/markdown', 'application/pdf').
        Returns 'application/octet-stream' if type cannot be determined.
    """
    extension = Path(filename).suffix.lower()
    if extension in _EXTRA_MIME_TYPES:
        return _EXTRA_MIME_TYPES[extension]

    mime_type, _ = mimetypes.guess_type(filename)
    if mime_type is None:
        return _DEFAULT_MIME_TYPE
    return mime_type


def classify_file_kind(mime_type: str) -> FileKind:
    """Map a MIME type onto the coarse file kind shown in the tree.

    Args:
        mime_type: MIME type string (e.g., 'image/png').

    Returns:
        Matching FileKind, FileKind.OTHER when nothing matches.
    """
    mime_type = mime_type.lower()
    if mime_type.startswith('image/'):
        return FileKind.IMAGE
    if mime_type == 'application/pdf':
        return FileKind.PDF
    if 'word' in mime_type or 'document' in mime_type:
        return FileKind.DOCUMENT
    if 'text' in mime_type or 'markdown' in mime_type:
        return FileKind.MARKDOWN
    return FileKind.OTHER
