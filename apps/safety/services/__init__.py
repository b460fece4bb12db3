"""Services for blocks, safety reports and moderation."""

from .exceptions import (
    SafetyServiceError,
    InvalidBlockTargetError,
    InvalidReportError,
    UserNotFoundError,
    BlockNotFoundError,
    ReportNotFoundError,
    InvalidModerationActionError,
)
from .moderation import (
    FLAG_THRESHOLD,
    REVIEW_THRESHOLD,
    StrikeResult,
    record_strike,
    get_flagged_users,
    clear_flag,
)
from .blocking import (
    BlockResult,
    block_user,
    update_block_notes,
    unblock_user,
    get_user_blocks,
    blocked_user_ids,
    is_blocked_between,
)
from .reports import create_report, get_reports, review_report

__all__ = [
    # Exceptions
    'SafetyServiceError',
    'InvalidBlockTargetError',
    'InvalidReportError',
    'UserNotFoundError',
    'BlockNotFoundError',
    'ReportNotFoundError',
    'InvalidModerationActionError',
    # Moderation
    'FLAG_THRESHOLD',
    'REVIEW_THRESHOLD',
    'StrikeResult',
    'record_strike',
    'get_flagged_users',
    'clear_flag',
    # Blocks
    'BlockResult',
    'block_user',
    'update_block_notes',
    'unblock_user',
    'get_user_blocks',
    'blocked_user_ids',
    'is_blocked_between',
    # Reports
    'create_report',
    'get_reports',
    'review_report',
]
