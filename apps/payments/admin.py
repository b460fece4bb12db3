from django.contrib import admin

from .models import WebhookEvent


@admin.register(WebhookEvent)
class WebhookEventAdmin(admin.ModelAdmin):
    """Read-only log of Stripe webhook deliveries."""

    list_display = ['event_type', 'event_id', 'status', 'source_ip', 'created_at']
    list_filter = ['status', 'event_type']
    search_fields = ['event_id', 'event_type']
    readonly_fields = ['event_id', 'event_type', 'status', 'error_message', 'source_ip', 'created_at', 'updated_at']
    date_hierarchy = 'created_at'
