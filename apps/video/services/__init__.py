"""Services for video rooms, call completion and the monthly reward."""

from .exceptions import (
    VideoServiceError,
    VideoNotConfiguredError,
    VideoProviderError,
    VideoTrialExpiredError,
    DailyMeetingLimitError,
    VideoSessionNotFoundError,
    VideoSessionNotCompletableError,
    ExtensionNotFoundError,
    ExtensionNotAllowedError,
    ExtensionForbiddenError,
    ExtensionConflictError,
    ExtensionExpiredError,
    ExtensionPaymentRequiredError,
)
from .daily_client import DailyClient, DailyRoom
from .rewards import (
    REWARD_THRESHOLD,
    WARNING_DAYS,
    current_month_year,
    days_until_month_end,
    count_monthly_partners,
    record_monthly_call,
    sync_reward_status,
    get_reward_summary,
)
from .rooms import FREE_TRIAL_DAYS, RoomResult, meetings_today, check_video_access, create_room
from .completion import CompletionResult, complete_call
from .extensions import (
    EXTENSION_KIND,
    EXTENSION_SECONDS,
    ACTION_ACCEPT,
    ACTION_DECLINE,
    ExtensionCheckout,
    extension_price_cents,
    get_session_for_participant,
    request_extension,
    respond_to_extension,
    settle_extension,
    confirm_extension,
    get_pending_extensions,
    get_remaining_seconds,
    get_past_sessions,
)

__all__ = [
    # Exceptions
    'VideoServiceError',
    'VideoNotConfiguredError',
    'VideoProviderError',
    'VideoTrialExpiredError',
    'DailyMeetingLimitError',
    'VideoSessionNotFoundError',
    'VideoSessionNotCompletableError',
    'ExtensionNotFoundError',
    'ExtensionNotAllowedError',
    'ExtensionForbiddenError',
    'ExtensionConflictError',
    'ExtensionExpiredError',
    'ExtensionPaymentRequiredError',
    # Daily.co
    'DailyClient',
    'DailyRoom',
    # Rewards
    'REWARD_THRESHOLD',
    'WARNING_DAYS',
    'current_month_year',
    'days_until_month_end',
    'count_monthly_partners',
    'record_monthly_call',
    'sync_reward_status',
    'get_reward_summary',
    # Rooms
    'FREE_TRIAL_DAYS',
    'RoomResult',
    'meetings_today',
    'check_video_access',
    'create_room',
    # Completion
    'CompletionResult',
    'complete_call',
    # Extensions
    'EXTENSION_KIND',
    'EXTENSION_SECONDS',
    'ACTION_ACCEPT',
    'ACTION_DECLINE',
    'ExtensionCheckout',
    'extension_price_cents',
    'get_session_for_participant',
    'request_extension',
    'respond_to_extension',
    'settle_extension',
    'confirm_extension',
    'get_pending_extensions',
    'get_remaining_seconds',
    'get_past_sessions',
]
