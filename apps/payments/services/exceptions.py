"""Domain-specific exceptions for payment services."""


class PaymentsServiceError(Exception):
    """Base exception for payment services."""
    pass


class InvalidCheckoutError(PaymentsServiceError):
    """Raised when the checkout kind, tier or amount is not allowed."""
    pass


class InvalidDowngradeError(PaymentsServiceError):
    """Raised when the requested tier is missing, unknown or not lower."""
    pass


class NoActiveSubscriptionError(PaymentsServiceError):
    """Raised when a downgrade needs a Stripe subscription and there is none."""
    pass


class NoScheduledDowngradeError(PaymentsServiceError):
    """Raised when cancelling a downgrade that was never scheduled."""
    pass


class WebhookNotConfiguredError(PaymentsServiceError):
    """Raised when STRIPE_WEBHOOK_SECRET is not set."""
    pass


class WebhookSignatureError(PaymentsServiceError):
    """Raised when the Stripe-Signature header is missing or invalid."""

    def __init__(self, message, *, missing=False):
        super().__init__(message)
        self.missing = missing


class WebhookProcessingError(PaymentsServiceError):
    """Raised when a verified event could not be applied."""
    pass
