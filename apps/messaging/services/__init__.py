"""Services for messages, quotas and message credits."""

from .exceptions import (
    MessagingServiceError,
    InvalidMessageError,
    ConversationBlockedError,
    QuotaExceededError,
    InvalidCreditPackError,
)
from .content_filters import contains_phone_number, contains_email, contains_external_contact
from .quota import (
    DECAY_LIMIT,
    DAILY_LIMIT,
    PRE_VIDEO_LIMIT,
    TIER_DAILY_LIMIT,
    MatchAllowance,
    TierAllowance,
    match_message_limit,
    get_match_allowance,
    get_tier_allowance,
    get_credit_balance,
    get_quota,
)
from .sending import MAX_MESSAGE_LENGTH, SendResult, validate_message_body, send_message, get_conversation
from .credits import (
    MESSAGE_CREDITS_KIND,
    CREDIT_PACKS,
    CreditCheckout,
    get_pack,
    get_pricing_tier,
    get_credit_offer,
    start_credit_purchase,
    add_credits,
    fulfill_credit_purchase,
)

__all__ = [
    # Exceptions
    'MessagingServiceError',
    'InvalidMessageError',
    'ConversationBlockedError',
    'QuotaExceededError',
    'InvalidCreditPackError',
    # Content filters
    'contains_phone_number',
    'contains_email',
    'contains_external_contact',
    # Quota
    'DECAY_LIMIT',
    'DAILY_LIMIT',
    'PRE_VIDEO_LIMIT',
    'TIER_DAILY_LIMIT',
    'MatchAllowance',
    'TierAllowance',
    'match_message_limit',
    'get_match_allowance',
    'get_tier_allowance',
    'get_credit_balance',
    'get_quota',
    # Sending
    'MAX_MESSAGE_LENGTH',
    'SendResult',
    'validate_message_body',
    'send_message',
    'get_conversation',
    # Credits
    'MESSAGE_CREDITS_KIND',
    'CREDIT_PACKS',
    'CreditCheckout',
    'get_pack',
    'get_pricing_tier',
    'get_credit_offer',
    'start_credit_purchase',
    'add_credits',
    'fulfill_credit_purchase',
]
