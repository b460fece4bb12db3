"""Services for checkout, scheduled downgrades, webhooks and billing."""

from .exceptions import (
    PaymentsServiceError,
    InvalidCheckoutError,
    InvalidDowngradeError,
    NoActiveSubscriptionError,
    NoScheduledDowngradeError,
    WebhookNotConfiguredError,
    WebhookSignatureError,
    WebhookProcessingError,
)
from .checkout import CHECKOUT_KINDS, build_line_item, create_checkout
from .downgrades import SCHEDULED_TIER_KEY, DowngradeResult, schedule_downgrade, cancel_downgrade
from .webhooks import EVENT_HANDLERS, verify_event, process_event
from .billing import create_portal_url, get_receipts

__all__ = [
    # Exceptions
    'PaymentsServiceError',
    'InvalidCheckoutError',
    'InvalidDowngradeError',
    'NoActiveSubscriptionError',
    'NoScheduledDowngradeError',
    'WebhookNotConfiguredError',
    'WebhookSignatureError',
    'WebhookProcessingError',
    # Checkout
    'CHECKOUT_KINDS',
    'build_line_item',
    'create_checkout',
    # Downgrades
    'SCHEDULED_TIER_KEY',
    'DowngradeResult',
    'schedule_downgrade',
    'cancel_downgrade',
    # Webhooks
    'EVENT_HANDLERS',
    'verify_event',
    'process_event',
    # Billing
    'create_portal_url',
    'get_receipts',
]
