from drf_spectacular.utils import extend_schema, OpenApiParameter
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from apps.core.feature_flags import Feature
from apps.core.pagination import paginated_response
from apps.core.permissions import IsPlatformAdmin, FeatureEnabled
from apps.core.responses import rate_limit_exceeded_response
from apps.core.services import RateLimits, check_rate_limit

from .serializers import (
    BlockSerializer,
    BlockCreateSerializer,
    BlockNotesSerializer,
    BlockDeleteSerializer,
    SafetyReportCreateSerializer,
    SafetyReportSerializer,
    SafetyReportReviewSerializer,
    ReportStatusQuerySerializer,
    FlaggedUserSerializer,
    ClearFlagSerializer,
)
from .services import (
    block_user,
    update_block_notes,
    unblock_user,
    get_user_blocks,
    create_report,
    get_reports,
    review_report,
    get_flagged_users,
    clear_flag,
    # Exceptions
    InvalidBlockTargetError,
    InvalidReportError,
    UserNotFoundError,
    BlockNotFoundError,
    ReportNotFoundError,
    InvalidModerationActionError,
)


def _list_blocks(request):
    blocks = get_user_blocks(user=request.user)
    return paginated_response(request, blocks, BlockSerializer, key='blockers')


def _create_block(request):
    serializer = BlockCreateSerializer(data=request.data)
    if not serializer.is_valid():
        return Response({'error': 'Invalid user'}, status=status.HTTP_400_BAD_REQUEST)

    rate_limit = check_rate_limit(user_id=request.user.id, rule=RateLimits.BLOCKERS)
    if not rate_limit.allowed:
        return rate_limit_exceeded_response(rate_limit)

    try:
        result = block_user(
            blocker=request.user,
            blocked_id=serializer.validated_data['blockedId'],
            reason=serializer.validated_data['reason'],
        )
    except InvalidBlockTargetError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except UserNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

    return Response({
        'ok': True,
        'created': result.created,
        'blockCount': result.block_count,
        'warning': result.warning,
    }, status=status.HTTP_201_CREATED if result.created else status.HTTP_200_OK)


def _update_notes(request):
    serializer = BlockNotesSerializer(data=request.data)
    if not serializer.is_valid():
        return Response({'error': 'Invalid request'}, status=status.HTTP_400_BAD_REQUEST)

    try:
        block = update_block_notes(
            blocker=request.user,
            blocked_id=serializer.validated_data['blockedId'],
            notes=serializer.validated_data['notes'],
        )
    except BlockNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

    return Response(BlockSerializer(block).data)


def _delete_block(request):
    # Accept the id from the body or the query string
    data = request.data if request.data else request.query_params
    serializer = BlockDeleteSerializer(data=data)
    if not serializer.is_valid():
        return Response({'error': 'Invalid request'}, status=status.HTTP_400_BAD_REQUEST)

    try:
        unblock_user(blocker=request.user, blocked_id=serializer.validated_data['blockedId'])
    except BlockNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

    return Response({'ok': True})


@extend_schema(
    methods=['GET'],
    responses={200: BlockSerializer(many=True)},
    description="List members the caller has blocked.",
    tags=['safety'],
)
@extend_schema(
    methods=['POST'],
    request=BlockCreateSerializer,
    responses={200: None, 201: None, 400: None, 404: None, 429: None},
    description="Block a member. Rate limited to 20 per hour.",
    tags=['safety'],
)
@extend_schema(
    methods=['PATCH'],
    request=BlockNotesSerializer,
    responses={200: BlockSerializer, 400: None, 404: None},
    description="Update private notes on a block.",
    tags=['safety'],
)
@extend_schema(
    methods=['DELETE'],
    request=BlockDeleteSerializer,
    parameters=[OpenApiParameter('blockedId', str, required=False)],
    responses={200: None, 400: None, 404: None},
    description="Unblock a member.",
    tags=['safety'],
)
@api_view(['GET', 'POST', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def blockers(request):
    """Block list management for the signed-in member."""
    handlers = {
        'GET': _list_blocks,
        'POST': _create_block,
        'PATCH': _update_notes,
        'DELETE': _delete_block,
    }
    return handlers[request.method](request)


@extend_schema(
    methods=['POST'],
    request=SafetyReportCreateSerializer,
    responses={201: None, 400: None, 404: None},
    description="Report a member for admin review.",
    tags=['safety'],
)
@extend_schema(
    methods=['GET'],
    parameters=[ReportStatusQuerySerializer],
    responses={200: SafetyReportSerializer(many=True)},
    description="Admin: list reports by status (default pending).",
    tags=['admin'],
)
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, FeatureEnabled(Feature.SAFETY_REPORTS)])
def safety_reports(request):
    """File a report, or (admins) list reports."""
    if request.method == 'GET':
        if not IsPlatformAdmin().has_permission(request, None):
            return Response({'error': 'Forbidden'}, status=status.HTTP_403_FORBIDDEN)

        query = ReportStatusQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        reports = get_reports(status=query.validated_data['status'])
        return paginated_response(request, reports, SafetyReportSerializer, key='reports')

    serializer = SafetyReportCreateSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(
            {'error': 'Reported user ID and reason are required'},
            status=status.HTTP_400_BAD_REQUEST
        )

    data = serializer.validated_data
    try:
        report = create_report(
            reporter=request.user,
            reported_user_id=data['reportedUserId'],
            reason=data['reason'],
            video_session_id=data.get('videoSessionId'),
            context=data['context'],
        )
    except InvalidReportError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except UserNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

    return Response({
        'success': True,
        'reportId': str(report.id),
        'createdAt': report.created_at,
    }, status=status.HTTP_201_CREATED)


@extend_schema(
    request=SafetyReportReviewSerializer,
    responses={200: None, 400: None, 404: None},
    description="Admin: resolve a report or ban the reported member.",
    tags=['admin'],
)
@api_view(['PATCH'])
@permission_classes([IsAuthenticated, IsPlatformAdmin])
def review_safety_report(request, report_id):
    """Resolve or action a safety report."""
    serializer = SafetyReportReviewSerializer(data=request.data)
    if not serializer.is_valid():
        return Response({'error': 'Invalid action'}, status=status.HTTP_400_BAD_REQUEST)

    action = serializer.validated_data['action']
    try:
        report = review_report(
            report_id=report_id,
            admin=request.user,
            action=action,
            admin_notes=serializer.validated_data['adminNotes'],
        )
    except InvalidModerationActionError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except ReportNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

    if action == 'ban':
        return Response({'success': True, 'action': 'banned', 'userId': str(report.reported_user_id)})
    return Response({'success': True, 'action': 'resolved'})


@extend_schema(
    responses={200: FlaggedUserSerializer(many=True)},
    description="Admin: members flagged for review, most strikes first.",
    tags=['admin'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsPlatformAdmin])
def flagged_users(request):
    users = get_flagged_users()
    return paginated_response(request, users, FlaggedUserSerializer, key='users')


@extend_schema(
    request=ClearFlagSerializer,
    responses={200: FlaggedUserSerializer, 400: None, 404: None},
    description="Admin: clear a member's review flag.",
    tags=['admin'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated, IsPlatformAdmin])
def clear_user_flag(request):
    serializer = ClearFlagSerializer(data=request.data)
    if not serializer.is_valid():
        return Response({'error': 'userId is required'}, status=status.HTTP_400_BAD_REQUEST)

    try:
        user = clear_flag(user_id=serializer.validated_data['userId'], admin=request.user)
    except UserNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

    return Response({'success': True, 'user': FlaggedUserSerializer(user).data})
