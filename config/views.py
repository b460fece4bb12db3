import logging

from django.db import connection, DatabaseError
from django.http import JsonResponse
from drf_spectacular.utils import extend_schema
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


def error_404(request, exception):
    """Custom 404 handler."""
    return JsonResponse({
        'error': 'Not found',
        'status': 404
    }, status=404)


def error_500(request):
    """Custom 500 handler."""
    return JsonResponse({
        'error': 'Internal server error',
        'status': 500
    }, status=500)


def api_exception_handler(exc, context):
    """
    DRF exception handler that reports errors as ``{"error": ...}``.

    Field validation errors keep DRF's per-field shape; single-message
    errors (auth, permission, not found, throttling) are flattened.
    """
    response = exception_handler(exc, context)
    if response is None:
        return None

    data = response.data
    if isinstance(data, dict) and set(data.keys()) == {'detail'}:
        response.data = {'error': str(data['detail'])}
    return response


@extend_schema(
    responses={200: None, 503: None},
    description="Liveness check including a database round-trip.",
    tags=['health'],
)
@api_view(['GET'])
@permission_classes([AllowAny])
def health_check(request):
    """Health check for load balancers."""
    try:
        with connection.cursor() as cursor:
            cursor.execute('SELECT 1')
    except DatabaseError:
        logger.exception('Health check database probe failed')
        return Response({'status': 'unhealthy', 'database': 'unreachable'}, status=503)

    return Response({'status': 'ok', 'database': 'ok'})
