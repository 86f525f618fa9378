"""Custom exceptions for the expense tracker application."""


class ExpenseTrackerException(Exception):
    """Base exception for all expense tracker errors."""

    def __init__(self, message: str, status_code: int = 500):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class ValidationError(ExpenseTrackerException):
    """Raised when input validation fails."""

    def __init__(self, message: str):
        super().__init__(message, status_code=400)


class NotFoundError(ExpenseTrackerException):
    """Raised when a record does not exist."""

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message, status_code=404)


class LoadError(ExpenseTrackerException):
    """Raised when any of the startup loads fails."""

    def __init__(self, message: str = "Failed to load data"):
        super().__init__(message, status_code=500)


class StorageError(ExpenseTrackerException):
    """Raised when storage operations fail."""

    def __init__(self, message: str = "Storage operation failed"):
        super().__init__(message, status_code=500)


class DatabaseError(ExpenseTrackerException):
    """Raised when database operations fail."""

    def __init__(self, message: str = "Database operation failed"):
        super().__init__(message, status_code=500)
