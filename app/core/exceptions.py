from typing import Optional, Any

class GroupTextError(Exception):
    """
    Base exception for GroupText application.
    """
    def __init__(self, message: str, code: str = "INTERNAL_ERROR", status_code: int = 500, details: Optional[Any] = None):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)

class ResourceNotFoundError(GroupTextError):
    """
    Raised when a requested resource is not found.
    """
    def __init__(self, message: str = "Resource not found", details: Optional[Any] = None):
        super().__init__(message, code="NOT_FOUND", status_code=404, details=details)

class ValidationError(GroupTextError):
    """
    Raised when user input fails validation.
    The message is safe to send back to the user as a reply.
    """
    def __init__(self, message: str = "Validation error", details: Optional[Any] = None):
        super().__init__(message, code="VALIDATION_ERROR", status_code=422, details=details)

class UnknownCommandError(ValidationError):
    """
    Raised when the leading word of a message is not a known command.
    """
    def __init__(self, word: str):
        self.word = word
        super().__init__(f"Unknown command word: {word}", details={"word": word})

class ExternalServiceError(GroupTextError):
    """
    Raised when an external service (e.g., Twilio) fails.
    """
    def __init__(self, message: str = "External service error", details: Optional[Any] = None):
        super().__init__(message, code="EXTERNAL_SERVICE_ERROR", status_code=502, details=details)
