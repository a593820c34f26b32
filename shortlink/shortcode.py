"""Short code generation utilities."""

import re
import secrets
import string
from typing import Optional


class ShortCodeGenerator:
    """Generate short codes for URLs."""

    # URL-safe characters accepted in short codes (a-zA-Z0-9, dash, underscore)
    ALPHABET = string.ascii_letters + string.digits + "-_"

    MIN_LENGTH = 3
    MAX_LENGTH = 20

    PATTERN = re.compile(r"^[A-Za-z0-9_-]{3,20}$")

    def __init__(self, default_length: int = 8):
        """Initialize short code generator.

        Args:
            default_length: Default length for generated codes

        Raises:
            ValueError: If default_length is outside the allowed code length
        """
        if not self.MIN_LENGTH <= default_length <= self.MAX_LENGTH:
            raise ValueError(
                f"default_length must be between {self.MIN_LENGTH} and {self.MAX_LENGTH}"
            )
        self.default_length = default_length

    def generate_random(self, length: Optional[int] = None) -> str:
        """Generate a random short code.

        Every character is drawn uniformly from ALPHABET.

        Args:
            length: Length of the code (uses default if not specified)

        Returns:
            Random short code
        """
        length = length or self.default_length
        return ''.join(secrets.choice(self.ALPHABET) for _ in range(length))

    def candidates(self, max_attempts_per_length: int = 5):
        """Yield an endless stream of random candidate codes.

        Codes start at the default length. After ``max_attempts_per_length``
        candidates at one length, the length grows by one until MAX_LENGTH is
        reached; from then on candidates stay at MAX_LENGTH.

        Args:
            max_attempts_per_length: Candidates to try before growing the length

        Yields:
            Candidate short codes
        """
        length = self.default_length
        while True:
            for _ in range(max_attempts_per_length):
                yield self.generate_random(length)
            if length < self.MAX_LENGTH:
                length += 1

    @classmethod
    def is_valid_format(cls, code: str) -> bool:
        """Check if code has valid format (3-20 chars of letters, digits, '-' or '_').

        Args:
            code: Code to validate

        Returns:
            True if valid format
        """
        return isinstance(code, str) and cls.PATTERN.fullmatch(code) is not None
