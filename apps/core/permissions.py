"""
Permission classes shared across apps.

``IsPlatformAdmin`` gates moderation and settings endpoints.
``FeatureEnabled`` turns a flag-guarded endpoint into a 503 when the flag
is switched off.
"""
from rest_framework.exceptions import APIException
from rest_framework.permissions import BasePermission

from .feature_flags import is_feature_enabled


class FeatureDisabled(APIException):
    """Feature switched off via FEATURE_FLAG_<NAME>."""
    status_code = 503
    default_detail = 'This feature is currently unavailable'
    default_code = 'feature_disabled'


class IsPlatformAdmin(BasePermission):
    """Allow staff accounts only."""

    message = 'Admin access required.'

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated and request.user.is_staff)


def FeatureEnabled(feature: str):
    """
    Build a permission class that requires ``feature`` to be enabled.

    Usage:
        @permission_classes([IsAuthenticated, FeatureEnabled(Feature.PAYMENT_CHECKOUT)])
        def checkout(request):
            ...
    """

    class _FeatureEnabled(BasePermission):
        def has_permission(self, request, view):
            if not is_feature_enabled(feature):
                raise FeatureDisabled()
            return True

    _FeatureEnabled.__name__ = f'FeatureEnabled_{feature}'
    return _FeatureEnabled
