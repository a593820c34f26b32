"""URL building utilities for shortlink."""


def build_short_url(
    short_code: str,
    base_url: str,
    path_prefix: str = "",
) -> str:
    """Build complete short URL.

    Args:
        short_code: The short code
        base_url: Base URL (e.g., https://example.com)
        path_prefix: Optional path prefix (e.g., /s)

    Returns:
        Complete short URL
    """
    base = base_url.rstrip("/")
    prefix = path_prefix.strip("/")

    if prefix:
        return f"{base}/{prefix}/{short_code}"
    return f"{base}/{short_code}"


class ShortLinkBuilder:
    """Builds short links against a fixed base address."""

    def __init__(self, base_url: str, path_prefix: str = ""):
        self.base_url = base_url
        self.path_prefix = path_prefix

    def __call__(self, short_code: str) -> str:
        return build_short_url(short_code, self.base_url, self.path_prefix)
