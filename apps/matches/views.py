from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from apps.core.pagination import paginated_response
from apps.core.responses import rate_limit_exceeded_response
from apps.core.services import RateLimits, check_rate_limit

from .serializers import LikeRequestSerializer, MatchSerializer
from .services import (
    like_user,
    get_user_matches,
    CannotLikeSelfError,
    UserNotFoundError,
)


@extend_schema(
    request=LikeRequestSerializer,
    responses={200: None, 201: None, 400: None, 404: None, 429: None},
    description="Like a member. A reciprocal like creates a match. Rate limited to 100 per hour.",
    tags=['matches'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def like(request):
    """Like another member."""
    serializer = LikeRequestSerializer(data=request.data)
    if not serializer.is_valid():
        return Response({'error': 'userId is required'}, status=status.HTTP_400_BAD_REQUEST)

    rate_limit = check_rate_limit(user_id=request.user.id, rule=RateLimits.LIKES)
    if not rate_limit.allowed:
        return rate_limit_exceeded_response(rate_limit)

    try:
        result = like_user(liker=request.user, liked_id=serializer.validated_data['userId'])
    except CannotLikeSelfError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except UserNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

    return Response({
        'liked': True,
        'matched': result.matched,
        'matchId': str(result.match.id) if result.match else None,
    }, status=status.HTTP_201_CREATED if result.created else status.HTTP_200_OK)


@extend_schema(
    responses={200: MatchSerializer(many=True)},
    description="List the caller's matches, newest first. Blocked members are hidden.",
    tags=['matches'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def list_matches(request):
    matches = get_user_matches(user=request.user)
    return paginated_response(
        request,
        matches,
        MatchSerializer,
        key='matches',
        context={'request': request},
    )
