from django.contrib import admin

from .models import Message, MessageCredits, MessageCreditPurchase


@admin.register(Message)
class MessageAdmin(admin.ModelAdmin):
    list_display = ['sender', 'match', 'body', 'used_credit', 'created_at']
    list_filter = ['used_credit']
    search_fields = ['sender__email', 'body']
    date_hierarchy = 'created_at'


@admin.register(MessageCredits)
class MessageCreditsAdmin(admin.ModelAdmin):
    list_display = ['user', 'credits_remaining', 'total_purchased', 'total_spent', 'updated_at']
    search_fields = ['user__email']


@admin.register(MessageCreditPurchase)
class MessageCreditPurchaseAdmin(admin.ModelAdmin):
    """Credit pack checkouts; completed rows have been credited."""

    list_display = ['user', 'pack', 'credits', 'amount_cents', 'pricing_tier', 'status', 'created_at']
    list_filter = ['status', 'pack', 'pricing_tier']
    search_fields = ['user__email', 'stripe_session_id']
    readonly_fields = ['stripe_session_id', 'credited_at', 'created_at']
