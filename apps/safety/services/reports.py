"""Safety report service."""

import logging
from typing import Optional
from uuid import UUID

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import QuerySet
from django.utils import timezone

from apps.accounts.models import User, AccountStatus
from apps.safety.models import SafetyReport, ReportStatus

from .exceptions import (
    InvalidReportError,
    ReportNotFoundError,
    InvalidModerationActionError,
)
from .moderation import record_strike

logger = logging.getLogger(__name__)

REPORT_ACTIONS = ('resolve', 'ban')


@transaction.atomic
def create_report(
    *,
    reporter: User,
    reported_user_id: UUID,
    reason: str,
    video_session_id: Optional[UUID] = None,
    context: str = 'video_call'
) -> SafetyReport:
    """
    File a safety report and count it as a strike against the reported member.

    Raises:
        InvalidReportError: If the reason is blank or the reporter reports themselves
        UserNotFoundError: If the reported member does not exist
    """
    reason = (reason or '').strip()
    if not reported_user_id or not reason:
        raise InvalidReportError("Reported user ID and reason are required")
    if str(reported_user_id) == str(reporter.id):
        raise InvalidReportError("Cannot report yourself")

    strike = record_strike(user_id=reported_user_id, escalate_to_review=False)

    report = SafetyReport.objects.create(
        reporter=reporter,
        reported_user_id=reported_user_id,
        video_session_id=video_session_id,
        reason=reason,
        context=context or 'video_call',
    )

    logger.info(
        'Safety report filed',
        extra={
            'report_id': str(report.id),
            'reporter_id': str(reporter.id),
            'reported_user_id': str(reported_user_id),
            'block_count': strike.block_count,
        }
    )
    return report


def get_reports(*, status: str = ReportStatus.PENDING) -> QuerySet:
    return (
        SafetyReport.objects
        .filter(status=status)
        .select_related('reporter', 'reported_user')
    )[:50]


@transaction.atomic
def review_report(*, report_id: UUID, admin: User, action: str, admin_notes: str = '') -> SafetyReport:
    """
    Resolve a report, or ban the reported member.

    Args:
        report_id: Report under review
        admin: Reviewing admin
        action: ``resolve`` or ``ban``
        admin_notes: Optional notes stored on the report

    Raises:
        InvalidModerationActionError: If action is not resolve or ban
        ReportNotFoundError: If the report does not exist
    """
    if action not in REPORT_ACTIONS:
        raise InvalidModerationActionError("Invalid action")

    try:
        report = SafetyReport.objects.select_for_update().get(id=report_id)
    except (SafetyReport.DoesNotExist, ValidationError, ValueError):
        raise ReportNotFoundError("Report not found")

    report.reviewed_at = timezone.now()
    report.reviewed_by = admin

    if action == 'resolve':
        report.status = ReportStatus.RESOLVED
        report.admin_notes = admin_notes or ''
    else:
        report.status = ReportStatus.ACTIONED
        report.admin_notes = admin_notes or 'User banned'
        User.objects.filter(id=report.reported_user_id).update(account_status=AccountStatus.BANNED)

    report.save(update_fields=['status', 'admin_notes', 'reviewed_at', 'reviewed_by', 'updated_at'])

    logger.info(
        'Safety report reviewed',
        extra={
            'report_id': str(report.id),
            'admin_id': str(admin.id),
            'action': action,
            'reported_user_id': str(report.reported_user_id),
        }
    )
    return report
