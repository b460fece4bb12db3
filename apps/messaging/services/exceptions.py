"""Domain-specific exceptions for messaging services."""


class MessagingServiceError(Exception):
    """Base exception for messaging services."""
    pass


class InvalidMessageError(MessagingServiceError):
    """Raised when a message body is empty, too long or shares contact info."""
    pass


class ConversationBlockedError(MessagingServiceError):
    """Raised when either member has blocked the other."""
    pass


class QuotaExceededError(MessagingServiceError):
    """
    Raised when the daily allowance is used up and no credit is left.

    Carries the allowance so the view can tell the client why.
    """

    def __init__(self, message, *, reason, allowance, tier):
        super().__init__(message)
        self.reason = reason
        self.allowance = allowance
        self.tier = tier


class InvalidCreditPackError(MessagingServiceError):
    """Raised when an unknown credit pack is requested."""
    pass
