class PlacementError(Exception):
    """Base exception for placement workflow errors."""

    def __init__(self, message: str, error_code: str = "PLACEMENT_ERROR"):
        super().__init__(message)
        self.message = message
        self.error_code = error_code


class ValidationError(PlacementError):
    """Malformed input or a missing required field."""

    def __init__(self, message: str, error_code: str = "VALIDATION_ERROR"):
        super().__init__(message, error_code)


class PreconditionError(PlacementError):
    """A state precondition of the requested operation is not met."""

    def __init__(self, message: str, error_code: str = "PRECONDITION_FAILED"):
        super().__init__(message, error_code)


class NotFoundError(PlacementError):
    """A referenced entity does not exist."""

    def __init__(
        self, message: str = "Resource not found", error_code: str = "NOT_FOUND"
    ):
        super().__init__(message, error_code)


class PersistenceError(PlacementError):
    """Reading or writing a data file failed.

    Raised by the file codec and absorbed by the repositories, which log it
    and keep the in-memory state.
    """

    def __init__(self, message: str, error_code: str = "PERSISTENCE_ERROR"):
        super().__init__(message, error_code)
