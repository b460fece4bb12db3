"""Domain-specific exceptions for safety services."""


class SafetyServiceError(Exception):
    """Base exception for safety services."""
    pass


class InvalidBlockTargetError(SafetyServiceError):
    """Raised when the block target is missing or is the member themselves."""
    pass


class InvalidReportError(SafetyServiceError):
    """Raised when a safety report is missing data or targets the reporter."""
    pass


class UserNotFoundError(SafetyServiceError):
    """Raised when the target member does not exist."""
    pass


class BlockNotFoundError(SafetyServiceError):
    """Raised when the member has not blocked the target."""
    pass


class ReportNotFoundError(SafetyServiceError):
    """Raised when a safety report does not exist."""
    pass


class InvalidModerationActionError(SafetyServiceError):
    """Raised when an admin action on a report is not recognised."""
    pass
