from django.contrib import admin

from .models import VideoSession, VideoSessionExtension, MonthlyVideoCall, RewardStatus


@admin.register(VideoSession)
class VideoSessionAdmin(admin.ModelAdmin):
    list_display = ['caller', 'callee', 'status', 'max_duration_minutes', 'duration_seconds', 'extended_seconds_total', 'started_at', 'ended_at']
    list_filter = ['status']
    search_fields = ['caller__email', 'callee__email', 'room_name']
    readonly_fields = ['room_name', 'room_url', 'started_at', 'ended_at']
    date_hierarchy = 'started_at'


@admin.register(VideoSessionExtension)
class VideoSessionExtensionAdmin(admin.ModelAdmin):
    list_display = ['video_session', 'initiator', 'responder', 'status', 'amount_cents', 'created_at']
    list_filter = ['status']
    search_fields = ['initiator__email', 'responder__email', 'stripe_session_id']
    readonly_fields = ['stripe_session_id', 'expires_at', 'created_at', 'updated_at']


@admin.register(MonthlyVideoCall)
class MonthlyVideoCallAdmin(admin.ModelAdmin):
    list_display = ['user', 'partner', 'month_year', 'completed_at']
    list_filter = ['month_year']
    search_fields = ['user__email', 'partner__email']


@admin.register(RewardStatus)
class RewardStatusAdmin(admin.ModelAdmin):
    list_display = ['user', 'month_year', 'current_month_calls', 'has_active_reward', 'updated_at']
    list_filter = ['has_active_reward', 'month_year']
    search_fields = ['user__email']
