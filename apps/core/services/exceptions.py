"""Domain-specific exceptions for core services."""


class CoreServiceError(Exception):
    """Base exception for core services."""
    pass


class InvalidSettingError(CoreServiceError):
    """Raised when an admin setting key or value is rejected."""
    pass
