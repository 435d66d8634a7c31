from typing import Any


class CatalogError(Exception):
    """Base exception for catalog service errors.

    Attributes:
        message: Human-readable error message
        original_error: The exception that caused this error (if any)
        context: Additional context information about the error
    """

    def __init__(self, message: str, original_error: Exception | None = None, context: dict[str, Any] | None = None):
        self.message = message
        self.original_error = original_error
        self.context = context or {}
        super().__init__(message)

    def __str__(self) -> str:
        error_str = self.message
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            error_str += f" (Context: {context_str})"
        return error_str

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, original_error={self.original_error!r}, context={self.context!r})"


class ConfigurationError(CatalogError):
    """Raised when the config file is missing, unparseable or invalid."""


class BootstrapError(CatalogError):
    """Raised when the store cannot be made ready for serving traffic."""
