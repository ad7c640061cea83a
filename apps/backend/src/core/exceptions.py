class DomainError(Exception):
    """Base class for domain-specific errors."""

    pass


class InvalidRequestError(DomainError):
    """Raised when an inbound roast request cannot be served.

    Surfaced before any streaming starts, as a 400 response.
    """

    def __init__(self, message: str = "Username required") -> None:
        super().__init__(message)
        self.message = message
