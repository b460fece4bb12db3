import logging

import stripe
from drf_spectacular.utils import extend_schema, OpenApiParameter
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from apps.core.feature_flags import Feature
from apps.core.pagination import StandardPagination, paginated_response
from apps.core.permissions import FeatureEnabled
from apps.matches.services import (
    get_match_for_participant,
    MatchNotFoundError,
    NotMatchParticipantError,
)

from .serializers import (
    MessageSerializer,
    MessageCreateSerializer,
    QuotaQuerySerializer,
    CreditPurchaseSerializer,
)
from .services import (
    send_message,
    get_conversation,
    get_quota,
    get_credit_offer,
    start_credit_purchase,
    get_credit_balance,
    # Exceptions
    InvalidMessageError,
    ConversationBlockedError,
    QuotaExceededError,
    InvalidCreditPackError,
)

logger = logging.getLogger(__name__)


class MessagePagination(StandardPagination):
    """Conversations page in larger chunks."""
    page_size = 50
    max_page_size = 200


@extend_schema(
    parameters=[OpenApiParameter('matchId', str, required=True)],
    responses={200: None, 400: None, 403: None, 404: None},
    description="Today's message allowance for a match, the daily tier allowance and the credit balance.",
    tags=['messages'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def quota(request):
    serializer = QuotaQuerySerializer(data=request.query_params)
    if not serializer.is_valid():
        return Response({'error': 'matchId is required'}, status=status.HTTP_400_BAD_REQUEST)

    try:
        match = get_match_for_participant(
            match_id=serializer.validated_data['matchId'],
            user=request.user,
        )
    except MatchNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except NotMatchParticipantError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

    return Response(get_quota(match=match, user=request.user))


def _list_messages(request, match_id):
    try:
        messages = get_conversation(match_id=match_id, user=request.user)
    except MatchNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except NotMatchParticipantError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

    return paginated_response(
        request, messages, MessageSerializer, key='messages', pagination_class=MessagePagination
    )


def _send_message(request, match_id):
    serializer = MessageCreateSerializer(data=request.data)
    if not serializer.is_valid():
        return Response({'error': 'Message cannot be empty'}, status=status.HTTP_400_BAD_REQUEST)

    try:
        result = send_message(
            match_id=match_id,
            sender=request.user,
            body=serializer.validated_data['body'],
        )
    except InvalidMessageError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except MatchNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except (NotMatchParticipantError, ConversationBlockedError) as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
    except QuotaExceededError as e:
        return Response({
            'error': str(e),
            'quotaExceeded': True,
            'reason': e.reason,
            'messagesAllowed': e.allowance.limit,
            'isDecay': e.allowance.is_decay,
            'hasCompletedVideo': e.allowance.has_completed_video,
            'tier': e.tier,
        }, status=status.HTTP_429_TOO_MANY_REQUESTS)

    return Response({
        'message': MessageSerializer(result.message).data,
        'usedCredit': result.used_credit,
        'creditsRemaining': get_credit_balance(user=request.user),
    }, status=status.HTTP_201_CREATED)


@extend_schema(
    methods=['GET'],
    responses={200: MessageSerializer(many=True), 403: None, 404: None},
    description="Messages in a match, oldest first.",
    tags=['messages'],
)
@extend_schema(
    methods=['POST'],
    request=MessageCreateSerializer,
    responses={201: MessageSerializer, 400: None, 403: None, 404: None, 429: None},
    description=(
        "Send a message. Free while today's allowances have room, otherwise one "
        "credit is spent. Returns 429 with the reason when neither is available."
    ),
    tags=['messages'],
)
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def conversation(request, match_id):
    if request.method == 'GET':
        return _list_messages(request, match_id)
    return _send_message(request, match_id)


@extend_schema(
    methods=['GET'],
    responses={200: None},
    description="Credit packs priced for the caller, with the current balance.",
    tags=['messages'],
)
@extend_schema(
    methods=['POST'],
    request=CreditPurchaseSerializer,
    responses={200: None, 400: None, 502: None},
    description="Start a Stripe Checkout session for a credit pack.",
    tags=['messages'],
)
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, FeatureEnabled(Feature.MESSAGE_CREDITS)])
def credit_purchase(request):
    if request.method == 'GET':
        return Response(get_credit_offer(user=request.user))

    serializer = CreditPurchaseSerializer(data=request.data)
    if not serializer.is_valid():
        return Response({'error': 'Invalid pack'}, status=status.HTTP_400_BAD_REQUEST)

    try:
        checkout = start_credit_purchase(
            user=request.user,
            pack=serializer.validated_data['pack'],
            redirect_url=serializer.validated_data.get('redirectURL'),
        )
    except InvalidCreditPackError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except stripe.StripeError as e:
        logger.error("Credit checkout failed", extra={'user_id': str(request.user.id), 'error': str(e)})
        return Response({'error': 'Payment provider error'}, status=status.HTTP_502_BAD_GATEWAY)

    return Response({
        'url': checkout.url,
        'id': checkout.purchase.stripe_session_id,
        'pack': checkout.purchase.pack,
        'credits': checkout.purchase.credits,
        'pricingTier': checkout.purchase.pricing_tier,
    })
