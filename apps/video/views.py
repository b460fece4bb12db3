import logging
from datetime import timedelta

import stripe
from django.utils import timezone
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from apps.core.feature_flags import Feature
from apps.core.pagination import paginated_response
from apps.core.permissions import FeatureEnabled
from apps.core.responses import rate_limit_exceeded_response
from apps.core.services import RateLimits, check_rate_limit
from apps.matches.services import MatchNotFoundError, NotMatchParticipantError

from .serializers import (
    RoomCreateSerializer,
    CallCompleteSerializer,
    ExtensionResponseSerializer,
    PendingExtensionSerializer,
    VideoSessionExtensionSerializer,
    VideoSessionSerializer,
)
from .services import (
    DailyClient,
    create_room,
    complete_call,
    get_reward_summary,
    get_session_for_participant,
    get_pending_extensions,
    get_remaining_seconds,
    get_past_sessions,
    request_extension,
    respond_to_extension,
    confirm_extension,
    # Exceptions
    VideoNotConfiguredError,
    VideoProviderError,
    VideoTrialExpiredError,
    DailyMeetingLimitError,
    VideoSessionNotFoundError,
    VideoSessionNotCompletableError,
    ExtensionNotFoundError,
    ExtensionNotAllowedError,
    ExtensionForbiddenError,
    ExtensionConflictError,
    ExtensionExpiredError,
    ExtensionPaymentRequiredError,
)

logger = logging.getLogger(__name__)


@extend_schema(
    request=RoomCreateSerializer,
    responses={200: None, 400: None, 403: None, 404: None, 429: None, 502: None},
    description=(
        "Create a Daily.co room for a match. Rate limited to 10 per hour. "
        "Free members get a two-week trial and 3 meetings a day."
    ),
    tags=['video'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated, FeatureEnabled(Feature.VIDEO_CALLS)])
def room_create(request):
    rate_limit = check_rate_limit(user_id=request.user.id, rule=RateLimits.VIDEO_ROOM_CREATE)
    if not rate_limit.allowed:
        return rate_limit_exceeded_response(rate_limit)

    client = DailyClient()
    if not client.is_configured():
        return Response({'error': 'DAILY_API_KEY not configured'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    serializer = RoomCreateSerializer(data=request.data)
    if not serializer.is_valid():
        return Response({'error': 'matchId is required'}, status=status.HTTP_400_BAD_REQUEST)

    try:
        result = create_room(
            match_id=serializer.validated_data['matchId'],
            user=request.user,
            client=client,
        )
    except MatchNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except NotMatchParticipantError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
    except VideoTrialExpiredError as e:
        return Response({'error': str(e), 'upgradeRequired': True}, status=status.HTTP_403_FORBIDDEN)
    except DailyMeetingLimitError as e:
        seconds = max(0, int((e.next_available_at - timezone.now()).total_seconds()))
        return Response({
            'error': str(e),
            'isLimitExceeded': True,
            'currentMeetings': e.current_meetings,
            'maxMeetings': e.max_meetings,
            'nextAvailableAt': e.next_available_at,
            'secondsUntilAvailable': seconds,
        }, status=status.HTTP_429_TOO_MANY_REQUESTS)
    except VideoNotConfiguredError as e:
        return Response({'error': str(e)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
    except VideoProviderError as e:
        return Response({'error': str(e)}, status=status.HTTP_502_BAD_GATEWAY)

    return Response({
        'videoSessionId': str(result.video_session.id),
        'roomUrl': result.room_url,
        'roomName': result.room_name,
        'maxDurationMinutes': result.max_duration_minutes,
    })


@extend_schema(
    request=CallCompleteSerializer,
    responses={200: None, 400: None, 404: None, 409: None},
    description="Report a finished call. Updates match stats, meeting counters and the monthly reward.",
    tags=['video'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated, FeatureEnabled(Feature.VIDEO_CALLS)])
def call_complete(request):
    serializer = CallCompleteSerializer(data=request.data)
    if not serializer.is_valid():
        return Response({'error': 'videoSessionId is required'}, status=status.HTTP_400_BAD_REQUEST)

    try:
        result = complete_call(
            video_session_id=serializer.validated_data['videoSessionId'],
            user=request.user,
            duration_seconds=serializer.validated_data['durationSeconds'],
        )
    except VideoSessionNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except VideoSessionNotCompletableError as e:
        return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)

    return Response({
        'success': True,
        'alreadyCompleted': result.already_completed,
        'userVideoCallsThisMonth': result.user_reward.current_month_calls,
        'partnerVideoCallsThisMonth': result.partner_reward.current_month_calls,
        'userHasReward': result.user_reward.has_active_reward,
        'partnerHasReward': result.partner_reward.has_active_reward,
    })


@extend_schema(
    responses={200: None},
    description="Monthly video reward progress for the caller.",
    tags=['video'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def reward_status(request):
    return Response(get_reward_summary(user=request.user))


def _extension_error_response(e):
    if isinstance(e, (VideoSessionNotFoundError, ExtensionNotFoundError)):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(e, ExtensionForbiddenError):
        code = status.HTTP_403_FORBIDDEN
    elif isinstance(e, ExtensionConflictError):
        code = status.HTTP_409_CONFLICT
    elif isinstance(e, ExtensionExpiredError):
        code = status.HTTP_410_GONE
    elif isinstance(e, ExtensionPaymentRequiredError):
        code = status.HTTP_402_PAYMENT_REQUIRED
    else:
        code = status.HTTP_400_BAD_REQUEST
    return Response({'error': str(e)}, status=code)


EXTENSION_ERRORS = (
    VideoSessionNotFoundError,
    ExtensionNotFoundError,
    ExtensionNotAllowedError,
    ExtensionForbiddenError,
    ExtensionConflictError,
    ExtensionExpiredError,
    ExtensionPaymentRequiredError,
)


@extend_schema(
    responses={200: VideoSessionSerializer(many=True)},
    description="The member's past calls, newest first. Blocked members are hidden.",
    tags=['video'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def past_sessions(request):
    sessions = get_past_sessions(user=request.user)
    return paginated_response(
        request,
        sessions,
        VideoSessionSerializer,
        key='sessions',
        context={'request': request},
    )


@extend_schema(
    responses={200: None, 403: None, 404: None},
    description="A call with its time budget and any open extension requests.",
    tags=['video'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def session_detail(request, session_id):
    try:
        video_session = get_session_for_participant(video_session_id=session_id, user=request.user)
    except EXTENSION_ERRORS as e:
        return _extension_error_response(e)

    context = {'request': request}
    pending = get_pending_extensions(video_session=video_session)
    return Response({
        'session': VideoSessionSerializer(video_session, context=context).data,
        'remaining_seconds': get_remaining_seconds(video_session),
        'ends_at': video_session.started_at + timedelta(seconds=video_session.total_seconds),
        'pending_extensions': PendingExtensionSerializer(pending, many=True, context=context).data,
    })


@extend_schema(
    request=None,
    responses={201: VideoSessionExtensionSerializer, 400: None, 403: None, 404: None, 409: None},
    description="Ask the partner for ten more minutes. The partner has a minute to answer.",
    tags=['video'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated, FeatureEnabled(Feature.VIDEO_CALLS)])
def extension_create(request, session_id):
    try:
        extension = request_extension(video_session_id=session_id, user=request.user)
    except EXTENSION_ERRORS as e:
        return _extension_error_response(e)

    return Response(
        {'extension': VideoSessionExtensionSerializer(extension).data},
        status=status.HTTP_201_CREATED
    )


@extend_schema(
    request=ExtensionResponseSerializer,
    responses={200: None, 400: None, 403: None, 404: None, 409: None, 410: None, 502: None},
    description="Accept or decline an extension request. Accepting opens a checkout for the member who asked.",
    tags=['video'],
)
@api_view(['PUT'])
@permission_classes([IsAuthenticated, FeatureEnabled(Feature.VIDEO_CALLS)])
def extension_respond(request, session_id, extension_id):
    serializer = ExtensionResponseSerializer(data=request.data)
    if not serializer.is_valid():
        return Response({'error': 'Invalid action'}, status=status.HTTP_400_BAD_REQUEST)

    try:
        checkout = respond_to_extension(
            video_session_id=session_id,
            extension_id=extension_id,
            user=request.user,
            action=serializer.validated_data['action'],
            redirect_url=serializer.validated_data.get('redirectURL'),
        )
    except EXTENSION_ERRORS as e:
        return _extension_error_response(e)
    except stripe.StripeError as e:
        logger.error("Extension checkout failed", extra={'extension_id': str(extension_id), 'error': str(e)})
        return Response({'error': 'Payment provider error'}, status=status.HTTP_502_BAD_GATEWAY)

    return Response({
        'extension': VideoSessionExtensionSerializer(checkout.extension).data,
        'checkout_url': checkout.url or None,
    })


@extend_schema(
    request=None,
    responses={200: None, 402: None, 403: None, 404: None, 409: None, 502: None},
    description="Confirm a paid extension and add its time to the call.",
    tags=['video'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated, FeatureEnabled(Feature.VIDEO_CALLS)])
def extension_confirm(request, session_id, extension_id):
    try:
        video_session = confirm_extension(
            video_session_id=session_id,
            extension_id=extension_id,
            user=request.user,
        )
    except EXTENSION_ERRORS as e:
        return _extension_error_response(e)
    except stripe.StripeError as e:
        logger.error("Extension confirmation failed", extra={'extension_id': str(extension_id), 'error': str(e)})
        return Response({'error': 'Payment provider error'}, status=status.HTTP_502_BAD_GATEWAY)

    return Response({
        'success': True,
        'extended_seconds_total': video_session.extended_seconds_total,
        'total_duration_seconds': video_session.total_seconds,
    })
