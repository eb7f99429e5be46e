class SafeLinksError(Exception):
    """Base class for errors the HTTP layer knows how to report."""

    status_code = 500
    message = "Internal server error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        if message:
            self.message = message


class ValidationError(SafeLinksError):
    """Client input was rejected. ``reason`` is a stable machine-readable code."""

    status_code = 400

    def __init__(self, reason: str, message: str):
        super().__init__(message)
        self.reason = reason


class NotFoundError(SafeLinksError):
    status_code = 404
    message = "Short code not found"


class UniquenessExhausted(SafeLinksError):
    # Safe to retry the whole request; every attempt draws fresh codes
    message = "Could not allocate a short code, please try again"


class StoreError(SafeLinksError):
    message = "Database error"
