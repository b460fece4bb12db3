"""
Management command to delete expired idempotency keys and stale
rate-limit entries.

Meant to run from a scheduler (cron, Render cron job) once an hour.

Usage:
    python manage.py purge_expired_records
    python manage.py purge_expired_records --dry-run
"""

from datetime import timedelta

from django.core.management.base import BaseCommand
from django.utils import timezone

from apps.core.models import IdempotencyKey, RateLimitEntry
from apps.core.services import RateLimits, purge_expired_keys


class Command(BaseCommand):
    help = 'Delete expired idempotency keys and rate-limit entries outside every window'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be deleted without making changes',
        )

    def handle(self, *args, **options):
        dry_run = options['dry_run']
        now = timezone.now()

        longest_window = max(
            rule.window for rule in (
                RateLimits.VIDEO_ROOM_CREATE,
                RateLimits.BLOCKERS,
                RateLimits.LIKES,
            )
        )
        stale_entries = RateLimitEntry.objects.filter(created_at__lt=now - longest_window)
        expired_keys = IdempotencyKey.objects.filter(expires_at__lte=now)

        if dry_run:
            self.stdout.write(
                f'Would delete {expired_keys.count()} idempotency key(s) '
                f'and {stale_entries.count()} rate-limit entr(ies).'
            )
            return

        keys_deleted = purge_expired_keys()
        entries_deleted, _ = stale_entries.delete()

        self.stdout.write(
            self.style.SUCCESS(
                f'Deleted {keys_deleted} idempotency key(s) and {entries_deleted} rate-limit entr(ies).'
            )
        )
