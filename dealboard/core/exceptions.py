"""Custom exceptions for the DealBoard application."""


class DealBoardException(Exception):
    """Base exception for DealBoard application."""

    pass


class ValidationError(DealBoardException):
    """Raised when an inbound payload is missing required fields."""

    pass


class NotFoundError(DealBoardException):
    """Raised when a resource is not found."""

    pass


class BackendError(DealBoardException):
    """Raised when a database operation fails."""

    pass


class LoadError(DealBoardException):
    """Raised when the board projection cannot be fetched."""

    pass


class PersistError(DealBoardException):
    """Raised when a stage move cannot be written."""

    pass


class ConfigurationError(DealBoardException):
    """Raised when configuration is invalid."""

    pass
