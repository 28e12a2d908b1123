from typing import Optional, Any

class BorsaBotError(Exception):
    """
    Base exception for the bot backend.
    """
    def __init__(self, message: str, code: str = "INTERNAL_ERROR", status_code: int = 500, details: Optional[Any] = None):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)

class ConfigurationError(BorsaBotError):
    """
    Raised when required secrets (bot token, Supabase credentials) are missing.
    """
    def __init__(self, message: str = "Service is not configured", details: Optional[Any] = None):
        super().__init__(message, code="CONFIGURATION_ERROR", status_code=503, details=details)

class ResourceNotFoundError(BorsaBotError):
    """
    Raised when a requested resource is not found.
    """
    def __init__(self, message: str = "Resource not found", details: Optional[Any] = None):
        super().__init__(message, code="NOT_FOUND", status_code=404, details=details)

class ValidationError(BorsaBotError):
    """
    Raised when input validation fails.
    """
    def __init__(self, message: str = "Validation error", details: Optional[Any] = None):
        super().__init__(message, code="VALIDATION_ERROR", status_code=422, details=details)

class ExternalServiceError(BorsaBotError):
    """
    Raised when an external service (e.g., Telegram) rejects a request.
    """
    def __init__(self, message: str = "External service error", details: Optional[Any] = None):
        super().__init__(message, code="EXTERNAL_SERVICE_ERROR", status_code=502, details=details)

class PersistenceError(BorsaBotError):
    """
    Raised when a write against the table store fails.
    """
    def __init__(self, message: str = "Database write failed", details: Optional[Any] = None):
        super().__init__(message, code="PERSISTENCE_ERROR", status_code=502, details=details)

class BadRequestError(BorsaBotError):
    """
    Raised when an admin action is rejected, e.g. Telegram cannot find the chat.
    """
    def __init__(self, message: str = "Bad request", details: Optional[Any] = None):
        super().__init__(message, code="BAD_REQUEST", status_code=400, details=details)
