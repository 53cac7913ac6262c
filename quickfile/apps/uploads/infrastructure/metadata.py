"""Metadata helpers for uploaded files."""

import mimetypes
from collections.abc import Iterable, Mapping
from pathlib import Path


def get_file_extension(filename: str) -> str:
    """Get file extension from filename.

    Args:
        filename: Filename (e.g., 'document.PDF').

    Returns:
        Extension with dot, lowercase (e.g., '.pdf').
        Returns empty string if no extension.
    """
    return Path(filename).suffix.lower()


def guess_mime_type(
    extension: str,
    redirects: Mapping[str, str],
) -> str:
    """Resolve a MIME type from an extension.

    Uses Python's built-in mimetypes module. The resolved type (or the
    empty string when the extension is unknown) is then looked up in
    ``redirects``, which lets unsafe or unknown types be served as
    something generic.

    Args:
        extension: Extension including the dot (e.g., '.png').
        redirects: Map of resolved type -> replacement type.

    Returns:
        MIME type string, or empty string if nothing resolved.
    """
    mime_type, _ = mimetypes.guess_type(f'file{extension}', strict=False)
    mime_type = mime_type or ''
    return redirects.get(mime_type, mime_type)


def matches_any_prefix(value: str, prefixes: Iterable[str]) -> bool:
    """Check whether ``value`` starts with any of ``prefixes``."""
    return any(value.startswith(prefix) for prefix in prefixes if prefix)
