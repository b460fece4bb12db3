from django.contrib import admin

from .models import Block, SafetyReport


@admin.register(Block)
class BlockAdmin(admin.ModelAdmin):
    list_display = ['blocker', 'blocked', 'reason', 'created_at']
    search_fields = ['blocker__email', 'blocked__email']
    date_hierarchy = 'created_at'


@admin.register(SafetyReport)
class SafetyReportAdmin(admin.ModelAdmin):
    """Moderation queue for reports filed by members."""

    list_display = ['reported_user', 'reporter', 'reason', 'status', 'created_at', 'reviewed_by']
    list_filter = ['status', 'context']
    search_fields = ['reported_user__email', 'reporter__email', 'reason']
    readonly_fields = ['reporter', 'reported_user', 'video_session', 'created_at', 'updated_at']
    date_hierarchy = 'created_at'
