"""Locator derivation utilities."""

import hashlib
import string
from typing import Iterator, Optional

DIGEST_HEX_LENGTH = 64
DEFAULT_LOCATOR_LENGTH = 7


def derive_locator(long_url: str, length: int = DEFAULT_LOCATOR_LENGTH) -> str:
    """Derive the candidate locator for a long URL.

    The locator is a prefix of the lowercase hex SHA-256 digest of the
    URL's UTF-8 bytes. The URL is not validated here.

    Args:
        long_url: The long URL
        length: Number of hex characters to keep

    Returns:
        Candidate locator

    Raises:
        ValueError: If length is outside 1..64
    """
    if not 1 <= length <= DIGEST_HEX_LENGTH:
        raise ValueError(f"Locator length must be between 1 and {DIGEST_HEX_LENGTH} (given: {length})")

    return hashlib.sha256(long_url.encode("utf-8")).hexdigest()[:length]


class LocatorGenerator:
    """Generate candidate locators for URLs."""

    HEX_CHARS = frozenset(string.hexdigits.lower())

    def __init__(self, length: int = DEFAULT_LOCATOR_LENGTH, max_length: Optional[int] = None):
        """Initialize locator generator.

        Args:
            length: Length of the first candidate
            max_length: Longest candidate to fall back to on collision
                (defaults to ``length``, i.e. no fallback)
        """
        max_length = max_length or length
        if not 1 <= length <= max_length <= DIGEST_HEX_LENGTH:
            raise ValueError(
                f"Expected 1 <= length <= max_length <= {DIGEST_HEX_LENGTH} "
                f"(given: length={length}, max_length={max_length})"
            )

        self.length = length
        self.max_length = max_length

    def generate(self, long_url: str) -> str:
        """Return the primary candidate locator for a URL."""
        return derive_locator(long_url, self.length)

    def candidates(self, long_url: str) -> Iterator[str]:
        """Yield candidate locators for a URL, shortest first.

        Every candidate is a prefix of the same digest, so the sequence is
        deterministic for a given URL.
        """
        digest = derive_locator(long_url, DIGEST_HEX_LENGTH)
        for length in range(self.length, self.max_length + 1):
            yield digest[:length]

    @classmethod
    def is_valid_format(cls, locator: str) -> bool:
        """Check if a locator has a valid format (lowercase hex).

        Args:
            locator: Locator to validate

        Returns:
            True if valid format
        """
        return bool(locator) and len(locator) <= DIGEST_HEX_LENGTH and all(c in cls.HEX_CHARS for c in locator)
