class AppError(Exception):
    """Base class for all application exceptions."""
    def __init__(self, message: str, status_code: int = 500, details: dict = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

class InvalidInputError(AppError):
    """Raised for unknown identifiers, malformed dates or requests the roster cannot satisfy."""
    def __init__(self, message: str, details: dict = None, status_code: int = 400):
        super().__init__(message, status_code=status_code, details=details)

class ResourceNotFoundError(InvalidInputError):
    """Raised when a requested resource is not found."""
    def __init__(self, resource_type: str, resource_id):
        super().__init__(
            f"{resource_type} with id {resource_id} not found",
            details={"resource_type": resource_type, "resource_id": resource_id},
            status_code=404,
        )

class ConflictError(AppError):
    """Raised when a substitute assignment would break a coverage invariant.

    ``reason`` is either the blocking availability status of the substitute
    (``absent``, ``already_substituting``, ``has_own_class``, ``on_duty``) or
    ``already_assigned`` when the lesson is already covered.
    """
    def __init__(self, reason: str, message: str, details: dict = None):
        self.reason = reason
        super().__init__(message, status_code=409, details={"reason": reason, **(details or {})})
