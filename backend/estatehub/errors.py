"""Domain error taxonomy shared by services and the API layer.

Services raise these; ``estatehub.main`` renders them as JSON with an HTTP
status and a machine-readable ``code``.
"""


class EstateHubError(Exception):
    """Base class for errors that map to a client-facing response."""

    status_code: int = 500
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str = "Internal server error") -> None:
        super().__init__(message)
        self.message = message

    @property
    def public_message(self) -> str:
        return self.message


class NotFoundError(EstateHubError):
    status_code = 404
    code = "NOT_FOUND"

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message)


class ValidationError(EstateHubError):
    """Malformed or incomplete input, rejected before any write."""

    status_code = 422
    code = "BAD_USER_INPUT"

    def __init__(self, message: str = "Invalid input") -> None:
        super().__init__(message)


class PersistenceError(EstateHubError):
    """The relational store rejected or failed an operation.

    The original driver exception is chained as ``__cause__`` for the logs;
    clients only ever see a generic message.
    """

    def __init__(self, message: str = "Database operation failed") -> None:
        super().__init__(message)

    @property
    def public_message(self) -> str:
        return "Internal server error"


class NotificationError(Exception):
    """An email or SMS provider call failed. Never escapes the dispatcher."""
