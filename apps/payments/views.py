import logging

import stripe
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from apps.core.feature_flags import Feature
from apps.core.permissions import FeatureEnabled
from apps.core.services import get_cached_response, store_response

from .serializers import CheckoutSerializer, DowngradeSerializer, PortalSerializer
from .services import (
    create_checkout,
    schedule_downgrade,
    cancel_downgrade,
    verify_event,
    process_event,
    create_portal_url,
    get_receipts,
    # Exceptions
    InvalidCheckoutError,
    InvalidDowngradeError,
    NoActiveSubscriptionError,
    NoScheduledDowngradeError,
    WebhookNotConfiguredError,
    WebhookSignatureError,
    WebhookProcessingError,
)

logger = logging.getLogger(__name__)


@extend_schema(
    request=CheckoutSerializer,
    responses={200: None, 400: None, 502: None},
    description=(
        "Start a Stripe Checkout session for a subscription, a call extension or a "
        "second date. Send an Idempotency-Key header to make retries safe."
    ),
    tags=['payments'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated, FeatureEnabled(Feature.PAYMENT_CHECKOUT)])
def checkout(request):
    idempotency_key = request.headers.get('Idempotency-Key', '')
    cached = get_cached_response(key=idempotency_key, user_id=request.user.id)
    if cached is not None:
        logger.info("Replaying idempotent checkout response", extra={'user_id': str(request.user.id)})
        return Response(cached.response_body, status=cached.status_code)

    serializer = CheckoutSerializer(data=request.data)
    if not serializer.is_valid():
        return Response({'error': 'Invalid request'}, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data

    try:
        result = create_checkout(
            user=request.user,
            kind=data['kind'],
            tier=data['tier'],
            cents=data['cents'],
            redirect_url=data['redirectURL'] or None,
        )
    except InvalidCheckoutError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except stripe.StripeError as e:
        logger.error("Stripe checkout creation failed", extra={'user_id': str(request.user.id), 'error': str(e)})
        return Response({'error': 'Payment provider error'}, status=status.HTTP_502_BAD_GATEWAY)

    if idempotency_key:
        stored = store_response(
            key=idempotency_key,
            user_id=request.user.id,
            response_body=result,
            status_code=status.HTTP_200_OK,
        )
        return Response(stored.response_body, status=stored.status_code)

    return Response(result)


@extend_schema(
    request=None,
    responses={200: None, 400: None, 500: None},
    description="Stripe webhook endpoint. Authenticated by the Stripe-Signature header.",
    tags=['payments'],
)
@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def webhook(request):
    source_ip = request.META.get('REMOTE_ADDR')
    payload = request.body

    try:
        event = verify_event(
            payload=payload,
            signature=request.headers.get('Stripe-Signature'),
            source_ip=source_ip,
        )
    except WebhookSignatureError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except WebhookNotConfiguredError as e:
        return Response({'error': str(e)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    try:
        process_event(event, source_ip=source_ip)
    except WebhookProcessingError as e:
        return Response({'error': str(e)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return Response({'received': True})


@extend_schema(
    request=DowngradeSerializer,
    responses={200: None, 400: None, 500: None},
    description="Schedule a move to a lower tier at the end of the billing period.",
    tags=['payments'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated, FeatureEnabled(Feature.SCHEDULED_DOWNGRADES)])
def downgrade(request):
    serializer = DowngradeSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        result = schedule_downgrade(user=request.user, tier=serializer.validated_data['tier'])
    except (InvalidDowngradeError, NoActiveSubscriptionError) as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except stripe.StripeError as e:
        logger.error("Stripe downgrade failed", extra={'user_id': str(request.user.id), 'error': str(e)})
        return Response(
            {'error': 'Failed to schedule downgrade with Stripe. Please try again or contact support.'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    return Response({
        'success': True,
        'message': result.message,
        'scheduledTier': result.scheduled_tier,
        'tierChangeAt': result.tier_change_at,
        'effectiveDate': result.tier_change_at,
    })


@extend_schema(
    request=None,
    responses={200: None, 400: None, 500: None},
    description="Cancel a scheduled downgrade and stay on the current plan.",
    tags=['payments'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated, FeatureEnabled(Feature.SCHEDULED_DOWNGRADES)])
def cancel_scheduled_downgrade(request):
    try:
        cancel_downgrade(user=request.user)
    except NoScheduledDowngradeError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except stripe.StripeError as e:
        logger.error("Stripe cancel downgrade failed", extra={'user_id': str(request.user.id), 'error': str(e)})
        return Response(
            {'error': 'Failed to cancel downgrade with Stripe. Please try again or contact support.'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    return Response({
        'success': True,
        'message': 'Scheduled downgrade has been cancelled. You will continue on your current plan.',
    })


@extend_schema(
    request=PortalSerializer,
    responses={200: None, 502: None},
    description="Stripe billing portal link for managing payment methods and invoices.",
    tags=['payments'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def portal(request):
    serializer = PortalSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        url = create_portal_url(
            user=request.user,
            redirect_url=serializer.validated_data['redirectURL'] or None,
        )
    except stripe.StripeError as e:
        logger.error("Billing portal creation failed", extra={'user_id': str(request.user.id), 'error': str(e)})
        return Response({'error': 'Payment provider error'}, status=status.HTTP_502_BAD_GATEWAY)

    return Response({'url': url})


@extend_schema(
    responses={200: None, 502: None},
    description="The caller's last 10 charges and 5 subscriptions.",
    tags=['payments'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def receipts(request):
    try:
        return Response(get_receipts(user=request.user))
    except stripe.StripeError as e:
        logger.error("Fetching receipts failed", extra={'user_id': str(request.user.id), 'error': str(e)})
        return Response({'error': 'Payment provider error'}, status=status.HTTP_502_BAD_GATEWAY)
