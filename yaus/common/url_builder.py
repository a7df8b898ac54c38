"""URL building utilities for the yaus URL shortener."""


def build_short_url(
    locator: str,
    base_url: str,
    path_prefix: str = "",
) -> str:
    """Build complete short URL.

    Args:
        locator: The locator
        base_url: Host prefix (e.g., http://yaus.pw)
        path_prefix: Optional path prefix (e.g., /s)

    Returns:
        Complete short URL
    """
    base = base_url.rstrip("/")
    prefix = path_prefix.strip("/")

    if prefix:
        return f"{base}/{prefix}/{locator}"
    return f"{base}/{locator}"
