"""Exception hierarchy for the URL shortener core."""

from typing import Optional


class ShortenerError(Exception):
    """Base exception for all shortener errors."""
    pass


class InvalidRequestError(ShortenerError):
    """Raised when a short id or URL fails validation."""

    def __init__(self, message: str = "invalid request", urls: Optional[list] = None):
        self.urls = urls or []
        super().__init__(message)


class NotFoundError(ShortenerError):
    """Raised when a short id is unknown in the requested owner scope."""

    def __init__(self, short_id: str):
        self.short_id = short_id
        super().__init__(f"no url for id = {short_id}")


class URLConflictError(ShortenerError):
    """Raised by a store when the URL is already shortened for the owner.

    Carries the pre-existing short id. The service turns this into a
    successful result with the conflict flag set.
    """

    def __init__(self, short_id: str, original_url: str = ""):
        self.short_id = short_id
        self.original_url = original_url
        super().__init__(f"URL conflict: {original_url} already stored as {short_id}")


class GenerationExhaustedError(ShortenerError):
    """Raised when no free short id was found within the attempt ceiling."""

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(f"unable to generate a free short id after {attempts} attempts")


class StoreUnavailableError(ShortenerError):
    """Raised when the storage backend fails (I/O, connection, driver errors)."""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        self.original_error = original_error
        super().__init__(message)
