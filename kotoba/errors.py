"""Error taxonomy shared by the search core and the request boundary."""


class KotobaError(Exception):
    """Base class for all kotoba errors."""

    status_code = 500
    default_message = "Internal error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class UnexpectedError(KotobaError):
    """Internal misconfiguration, e.g. an index that was never loaded."""

    status_code = 500
    default_message = "Unexpected internal error"


class NotFoundError(KotobaError):
    """A lookup yielded nothing where something was structurally expected."""

    status_code = 404
    default_message = "Not found"


class BadRequestError(KotobaError):
    """Caller input violates a contract."""

    status_code = 400
    default_message = "Bad request"


class SearchTimeoutError(KotobaError):
    """A bounded operation exceeded its deadline."""

    status_code = 408
    default_message = "Request timed out"


class AlreadyInitializedError(KotobaError):
    """A process-wide resource was initialized twice."""

    default_message = "Resource already initialized"


class NotInitializedError(KotobaError):
    """A process-wide resource was read before initialization."""

    default_message = "Resource not initialized"
