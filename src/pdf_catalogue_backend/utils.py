"""
Utility functions for file system operations and string handling.

This module provides helper functions for:
- Sanitizing uploaded filenames before they become object keys
- Ensuring directory creation with proper error handling
- Resolving front-end asset paths without escaping the static root
- Decoding base64 data URLs
"""

from __future__ import annotations

import base64
import re
from pathlib import Path
from typing import Optional, Tuple

# Pattern to match characters that are not safe for filenames
# Allows: alphanumeric characters, underscores, and hyphens
SANITIZE_PATTERN = re.compile(r"[^a-zA-Z0-9_-]+")

DATA_URL_PATTERN = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,(?P<data>.*)$", re.DOTALL)


def sanitize_filename(filename: str, fallback: str = "document", suffix: str = ".pdf") -> str:
    """
    Generate a safe filename with a fixed extension from user input.

    Args:
        filename: The original filename (may include a path)
        fallback: Stem to use if sanitization leaves nothing
        suffix: Extension forced onto the result

    Returns:
        A lowercase, filesystem-safe filename ending in ``suffix``

    Example:
        >>> sanitize_filename("My Document!.PDF")
        "my-document.pdf"
        >>> sanitize_filename("@#$.pdf")
        "document.pdf"
    """
    stem = Path(filename).stem
    # Replace non-safe characters with hyphens
    cleaned = SANITIZE_PATTERN.sub("-", stem.strip())
    cleaned = cleaned.strip("-_").lower()
    return f"{cleaned or fallback}{suffix}"


def ensure_directory(path: Path) -> Path:
    """
    Create a directory if it doesn't exist, including parent directories.

    Args:
        path: The directory path to create

    Returns:
        The same path object for chaining

    Raises:
        OSError: If directory creation fails due to permissions or other I/O errors
    """
    path.mkdir(parents=True, exist_ok=True)
    return path


def resolve_static_path(root: Path, requested: str) -> Optional[Path]:
    """
    Map a request path onto an existing file under ``root``.

    Returns None when the path is empty, escapes ``root``, or does not name
    a regular file.
    """
    if not requested:
        return None
    base_path = root.resolve()
    file_path = (base_path / requested).resolve()
    if base_path not in file_path.parents:
        return None
    if not file_path.is_file():
        return None
    return file_path


def parse_data_url(data_url: str) -> Tuple[str, bytes]:
    """
    Split a base64 data URL into its mime type and decoded payload.

    Example:
        >>> parse_data_url("data:image/png;base64,aGk=")
        ("image/png", b"hi")

    Raises:
        ValueError: If the string is not a base64 data URL or the payload is not valid base64
    """
    match = DATA_URL_PATTERN.match(data_url)
    if not match:
        raise ValueError("Not a base64 data URL")
    # binascii.Error is a ValueError subclass
    payload = base64.b64decode(match.group("data"), validate=True)
    return match.group("mime"), payload
