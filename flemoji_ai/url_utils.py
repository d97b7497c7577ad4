"""Build public URLs for stored audio and image files."""

from __future__ import annotations

import logging
from typing import Optional

from . import config

logger = logging.getLogger(__name__)


def get_public_url_base(base_url: Optional[str] = None) -> Optional[str]:
    """Return the absolute public URL base, or None when not configured."""
    url = base_url if base_url is not None else config.R2_PUBLIC_URL
    if not url:
        return None
    url = url.rstrip("/")
    if url.startswith("http://") or url.startswith("https://"):
        return url
    return f"https://{url}"


def construct_file_url(file_path: Optional[str], base_url: Optional[str] = None) -> str:
    """Construct a full URL from a stored file path.

    Args:
        file_path: Path stored with the record, e.g. "audio/user1/abc.mp3".
        base_url: Override for the configured public domain.

    Returns:
        The complete URL, the path itself when it is already absolute, or an
        empty string when either the path or the public domain is missing.
    """
    if not file_path:
        return ""

    if file_path.startswith("http://") or file_path.startswith("https://"):
        return file_path

    base = get_public_url_base(base_url)
    if base is None:
        logger.debug("R2_PUBLIC_URL not configured; cannot resolve %s", file_path)
        return ""

    return f"{base}/{file_path.lstrip('/')}"
