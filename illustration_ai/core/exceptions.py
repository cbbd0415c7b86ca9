class AppError(Exception):
    """Base exception for application errors."""
    def __init__(self, message: str, original_error: Exception = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error

class ConfigurationError(AppError):
    """Raised when configuration is invalid or missing."""
    pass

class InvalidInputError(AppError):
    """Raised when the request carries no usable page images."""
    pass

class ServiceError(AppError):
    """Raised when the model service call fails."""

    def __init__(self, message: str, status_code: int = None, original_error: Exception = None):
        super().__init__(message, original_error=original_error)
        self.status_code = status_code

class APITimeoutError(ServiceError):
    """Raised when the model service call times out."""
    pass

class TemplateStoreError(AppError):
    """Raised inside the template repository when the datastore rejects a call."""
    pass
