"""
URL configuration for the Rende-View API.

Each app ships its own urls module with an ``app_name`` namespace; this
module only mounts them under ``/api/``.
"""
from django.contrib import admin
from django.urls import path, include
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView
from rest_framework_simplejwt.views import TokenRefreshView

from config.views import health_check
from apps.video.views import reward_status

urlpatterns = [
    # Health check
    path('api/health/', health_check, name='health-check'),

    # Admin
    path('admin/', admin.site.urls),

    # API Documentation
    path('api/schema/', SpectacularAPIView.as_view(), name='api-schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='api-schema'), name='api-docs'),

    # Authentication
    path('api/auth/', include('apps.accounts.urls')),
    path('api/auth/token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),

    # API endpoints
    path('api/admin/', include('apps.core.urls')),
    path('api/matches/', include('apps.matches.urls')),
    path('api/', include('apps.safety.urls')),
    path('api/messages/', include('apps.messaging.urls')),
    path('api/video/', include('apps.video.urls')),
    path('api/rewards/status/', reward_status, name='reward-status'),
    path('api/payments/', include('apps.payments.urls')),
]


# Custom error handlers
handler404 = 'config.views.error_404'
handler500 = 'config.views.error_500'
