"""Domain-specific exceptions for video services."""


class VideoServiceError(Exception):
    """Base exception for video services."""
    pass


class VideoNotConfiguredError(VideoServiceError):
    """Raised when the Daily.co API key is missing."""
    pass


class VideoProviderError(VideoServiceError):
    """Raised when Daily.co rejects or fails a request."""
    pass


class VideoTrialExpiredError(VideoServiceError):
    """Raised when a free member's two-week video trial is over."""
    pass


class DailyMeetingLimitError(VideoServiceError):
    """Raised when a free member has used today's meetings."""

    def __init__(self, message, *, current_meetings, max_meetings, next_available_at):
        super().__init__(message)
        self.current_meetings = current_meetings
        self.max_meetings = max_meetings
        self.next_available_at = next_available_at


class VideoSessionNotFoundError(VideoServiceError):
    """Raised when a video session does not exist or is not the member's."""
    pass


class VideoSessionNotCompletableError(VideoServiceError):
    """Raised when a session that never connected is reported as complete."""
    pass


class ExtensionNotFoundError(VideoServiceError):
    """Raised when an extension request does not exist for the session."""
    pass


class ExtensionNotAllowedError(VideoServiceError):
    """Raised when an ended or failed session is asked to run longer."""
    pass


class ExtensionForbiddenError(VideoServiceError):
    """Raised when the wrong participant acts on an extension request."""
    pass


class ExtensionConflictError(VideoServiceError):
    """Raised when an extension is pending already or in the wrong state."""
    pass


class ExtensionExpiredError(VideoServiceError):
    """Raised when the partner answers after the request timed out."""
    pass


class ExtensionPaymentRequiredError(VideoServiceError):
    """Raised when an extension is confirmed before Stripe reports it paid."""
    pass
