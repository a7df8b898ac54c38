"""Validation utilities for the yaus URL shortener."""

import re
from urllib.parse import urlparse
from typing import Tuple

from ..locator import LocatorGenerator

# RFC 3986 scheme followed by the colon
SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*:")


def is_valid_url(url: str) -> Tuple[bool, str]:
    """Validate a long URL syntactically.

    Any absolute URL is accepted, whatever its scheme or length. URLs with an
    authority part (``scheme://...``) must name a host and a valid port. No
    normalization is applied: a URL that passes is stored exactly as given.

    Args:
        url: The URL to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not url or not isinstance(url, str):
        return False, "URL is required"

    if any(c.isspace() or not c.isprintable() for c in url):
        return False, "URL must not contain whitespace or control characters"

    match = SCHEME_RE.match(url)
    if not match:
        return False, "URL must be absolute (scheme:...)"

    if len(url) == match.end():
        return False, "URL has nothing after the scheme"

    try:
        result = urlparse(url)
        # Accessing the port validates it
        result.port
    except ValueError as e:
        return False, f"Invalid URL format: {e}"

    if url[match.end():].startswith("//") and not result.hostname:
        return False, "URL must have a valid host"

    return True, ""


def is_valid_locator(locator: str) -> Tuple[bool, str]:
    """Validate a locator taken from a request path.

    Args:
        locator: The locator to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not locator or not isinstance(locator, str):
        return False, "Locator is required"

    if not LocatorGenerator.is_valid_format(locator):
        return False, "Locator can only contain lowercase hexadecimal characters"

    return True, ""
