# ==========================================
# apps/accounts/admin.py
# ==========================================

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.html import format_html

from .models import User, AccountStatus


BADGE_STYLE = 'color: white; padding: 3px 8px; border-radius: 10px; font-size: 11px;'

STATUS_COLORS = {
    AccountStatus.ACTIVE: '#6B8E5E',
    AccountStatus.UNDER_REVIEW: '#D4A017',
    AccountStatus.BANNED: '#B85C5C',
}


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """
    Admin interface for members.

    Adds membership and safety columns to the stock user admin, plus bulk
    actions for the moderation queue.
    """

    list_display = [
        'email',
        'display_name',
        'membership_tier',
        'scheduled_tier',
        'subscription_status',
        'account_status_badge',
        'block_count',
        'flagged_for_admin',
        'created_at',
    ]

    list_filter = [
        'membership_tier',
        'subscription_status',
        'account_status',
        'flagged_for_admin',
        'is_active',
        'is_staff',
    ]

    search_fields = [
        'email',
        'display_name',
        'stripe_customer_id',
    ]

    ordering = ['-created_at']
    date_hierarchy = 'created_at'

    fieldsets = (
        ('Basic Information', {
            'fields': ('email', 'display_name', 'password', 'email_verified')
        }),
        ('Membership', {
            'fields': (
                'membership_tier',
                'scheduled_tier',
                'tier_change_at',
                'subscription_status',
                'stripe_customer_id',
            ),
        }),
        ('Safety', {
            'fields': ('account_status', 'block_count', 'flagged_for_admin'),
        }),
        ('Video', {
            'fields': ('video_meetings_count', 'first_video_call_at', 'last_video_call_at'),
            'classes': ('collapse',),
        }),
        ('Permissions', {
            'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions'),
            'classes': ('collapse',),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'last_login', 'gdpr_deleted_at'),
            'classes': ('collapse',),
        }),
    )

    add_fieldsets = (
        ('Create User', {
            'classes': ('wide',),
            'fields': ('email', 'display_name', 'password1', 'password2'),
        }),
    )

    readonly_fields = [
        'created_at',
        'last_login',
        'gdpr_deleted_at',
    ]

    filter_horizontal = ['groups', 'user_permissions']

    def account_status_badge(self, obj):
        """Display account status as colored badge."""
        return format_html(
            '<span style="background: {}; {}">{}</span>',
            STATUS_COLORS.get(obj.account_status, '#ccc'),
            BADGE_STYLE,
            obj.get_account_status_display(),
        )
    account_status_badge.short_description = 'Status'
    account_status_badge.admin_order_field = 'account_status'

    actions = ['clear_flags', 'ban_users', 'anonymize_users']

    @admin.action(description='Clear safety flags and reactivate')
    def clear_flags(self, request, queryset):
        count = queryset.update(flagged_for_admin=False, account_status=AccountStatus.ACTIVE)
        self.message_user(request, f'Cleared flags on {count} user(s).')

    @admin.action(description='Ban selected users')
    def ban_users(self, request, queryset):
        """Ban selected users (excludes staff)."""
        count = queryset.filter(is_staff=False).update(account_status=AccountStatus.BANNED)
        self.message_user(request, f'Banned {count} user(s).')

    @admin.action(description='GDPR: Anonymize selected users (IRREVERSIBLE)')
    def anonymize_users(self, request, queryset):
        safe_queryset = queryset.filter(is_superuser=False, is_staff=False)
        count = 0
        for user in safe_queryset:
            user.anonymize()
            count += 1

        skipped = queryset.count() - count
        msg = f'Anonymized {count} user(s).'
        if skipped:
            msg += f' Skipped {skipped} staff/superuser(s) for safety.'
        self.message_user(request, msg)
