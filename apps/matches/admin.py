from django.contrib import admin

from .models import Like, Match


@admin.register(Like)
class LikeAdmin(admin.ModelAdmin):
    list_display = ['liker', 'liked', 'created_at']
    search_fields = ['liker__email', 'liked__email']


@admin.register(Match)
class MatchAdmin(admin.ModelAdmin):
    list_display = ['user_a', 'user_b', 'video_call_count', 'last_video_call_at', 'created_at']
    search_fields = ['user_a__email', 'user_b__email']
    readonly_fields = ['created_at']
