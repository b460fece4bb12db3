from django.contrib import admin

from .models import AdminSettings, IdempotencyKey, RateLimitEntry


@admin.register(AdminSettings)
class AdminSettingsAdmin(admin.ModelAdmin):
    """Pricing and discount toggles editable without a deploy."""

    list_display = ['key', 'updated_at', 'updated_by']
    readonly_fields = ['updated_at', 'updated_by']


@admin.register(IdempotencyKey)
class IdempotencyKeyAdmin(admin.ModelAdmin):
    list_display = ['key', 'user', 'status_code', 'created_at', 'expires_at']
    search_fields = ['key', 'user__email']
    readonly_fields = ['key', 'user', 'response_body', 'status_code', 'created_at', 'expires_at']


@admin.register(RateLimitEntry)
class RateLimitEntryAdmin(admin.ModelAdmin):
    list_display = ['user', 'endpoint', 'created_at']
    list_filter = ['endpoint']
    search_fields = ['user__email']
