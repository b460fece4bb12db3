from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from .permissions import IsPlatformAdmin
from .serializers import AdminSettingsSerializer
from .services import get_all_settings, update_settings, InvalidSettingError


@extend_schema(
    methods=['GET'],
    responses={200: None},
    description="Read pricing and discount settings.",
    tags=['admin'],
)
@extend_schema(
    methods=['PUT'],
    request=AdminSettingsSerializer,
    responses={200: None, 400: None},
    description="Replace pricing and/or discount settings.",
    tags=['admin'],
)
@api_view(['GET', 'PUT'])
@permission_classes([IsAuthenticated, IsPlatformAdmin])
def admin_settings(request):
    """Read or update admin-tunable settings."""
    if request.method == 'GET':
        return Response(get_all_settings())

    serializer = AdminSettingsSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        settings_data = update_settings(
            updates=serializer.validated_data,
            updated_by=request.user,
        )
    except InvalidSettingError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response(settings_data)
