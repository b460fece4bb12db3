"""Services shared across apps: rate limiting, idempotency and settings."""

from .exceptions import (
    CoreServiceError,
    InvalidSettingError,
)
from .rate_limiting import (
    RateLimitRule,
    RateLimitResult,
    RateLimits,
    check_rate_limit,
)
from .idempotency import (
    get_cached_response,
    store_response,
    purge_expired_keys,
)
from .admin_settings import (
    get_setting,
    get_pricing,
    get_all_settings,
    update_settings,
)

__all__ = [
    # Exceptions
    'CoreServiceError',
    'InvalidSettingError',
    # Rate limiting
    'RateLimitRule',
    'RateLimitResult',
    'RateLimits',
    'check_rate_limit',
    # Idempotency
    'get_cached_response',
    'store_response',
    'purge_expired_keys',
    # Settings
    'get_setting',
    'get_pricing',
    'get_all_settings',
    'update_settings',
]
