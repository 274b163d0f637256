"""
Supported upload file types.

Maps filename extensions to the document type names stored on documents.

System role: Upload whitelist shared by ingestion and document loading
"""

from pathlib import Path

from askdoc.core.exceptions import UnsupportedFileTypeError

EXTENSION_TO_TYPE: dict[str, str] = {
    ".pdf": "pdf",
    ".md": "md",
    ".markdown": "md",
    ".txt": "txt",
    ".html": "html",
    ".htm": "html",
    ".adoc": "adoc",
    ".asciidoc": "adoc",
}

# Probed in order when deleting an original whose extension is unknown
CLEANUP_EXTENSIONS: tuple[str, ...] = tuple(EXTENSION_TO_TYPE)


def detect_file_type(filename: str) -> str:
    """
    Resolve the document type for a filename.

    Args:
        filename: Original upload filename

    Returns:
        str: One of pdf, md, txt, html, adoc

    Raises:
        UnsupportedFileTypeError: If the extension is not supported
    """
    ext = Path(filename).suffix.lower()
    try:
        return EXTENSION_TO_TYPE[ext]
    except KeyError:
        raise UnsupportedFileTypeError(f"unsupported file type: {ext or filename}") from None


def is_supported(filename: str) -> bool:
    """Return True when the filename has a supported extension."""
    return Path(filename).suffix.lower() in EXTENSION_TO_TYPE
