from rest_framework import status, serializers
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.tokens import RefreshToken
from drf_spectacular.utils import extend_schema

from .serializers import (
    UserRegistrationSerializer,
    UserLoginSerializer,
    UserSerializer,
    MagicLinkRequestSerializer,
    MagicLinkVerifySerializer,
    DeleteAccountSerializer,
    TierSerializer,
)
from .services import (
    register_user,
    authenticate_user,
    request_magic_link,
    verify_magic_link,
    delete_user_account,
    UserRegistrationError,
    InvalidCredentialsError,
    InactiveAccountError,
    InvalidTokenError,
    UserNotFoundError,
    PasswordConfirmationError,
)
from .tiers import TIERS, serialize_tier


# Response serializers for API documentation
class TokensResponseSerializer(serializers.Serializer):
    refresh = serializers.CharField()
    access = serializers.CharField()


class AuthResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    user = UserSerializer()
    tokens = TokensResponseSerializer()


class MessageResponseSerializer(serializers.Serializer):
    message = serializers.CharField()


class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()


def _auth_response(user, message, status_code=status.HTTP_200_OK):
    refresh = RefreshToken.for_user(user)
    return Response({
        'message': message,
        'user': UserSerializer(user).data,
        'tokens': {
            'refresh': str(refresh),
            'access': str(refresh.access_token),
        }
    }, status=status_code)


@extend_schema(
    request=UserRegistrationSerializer,
    responses={
        201: AuthResponseSerializer,
        400: ErrorResponseSerializer,
    },
    description="Register a new member account and receive JWT tokens.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def register(request):
    """Register a new member account."""
    serializer = UserRegistrationSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    data = serializer.validated_data.copy()
    data.pop('password_confirm', None)

    try:
        user = register_user(**data)
    except UserRegistrationError as e:
        return Response(
            {'error': str(e)},
            status=status.HTTP_400_BAD_REQUEST
        )

    return _auth_response(user, 'Registration successful', status.HTTP_201_CREATED)


@extend_schema(
    request=UserLoginSerializer,
    responses={
        200: AuthResponseSerializer,
        400: ErrorResponseSerializer,
        401: ErrorResponseSerializer,
        403: ErrorResponseSerializer,
    },
    description="Authenticate with email and password to receive JWT tokens.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def login(request):
    """Login with email and password."""
    serializer = UserLoginSerializer(data=request.data)

    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    try:
        user = authenticate_user(**serializer.validated_data)
    except InvalidCredentialsError as e:
        return Response({'error': str(e)}, status=status.HTTP_401_UNAUTHORIZED)
    except InactiveAccountError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

    return _auth_response(user, 'Login successful')


@extend_schema(
    request=MagicLinkRequestSerializer,
    responses={200: MessageResponseSerializer},
    description="Email a one-time sign-in link. Always returns success so emails cannot be enumerated.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def magic_link_request(request):
    """Send a magic sign-in link."""
    serializer = MagicLinkRequestSerializer(data=request.data)

    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    try:
        request_magic_link(email=serializer.validated_data['email'])
    except UserNotFoundError:
        # Don't reveal if email exists
        return Response({
            'message': 'If an account exists, a sign-in link has been sent'
        })

    return Response({
        'message': 'If an account exists, a sign-in link has been sent'
    })


@extend_schema(
    request=MagicLinkVerifySerializer,
    responses={
        200: AuthResponseSerializer,
        400: ErrorResponseSerializer,
        403: ErrorResponseSerializer,
    },
    description="Exchange a magic-link token for JWT tokens.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def magic_link_verify(request):
    """Sign in with a magic-link token."""
    serializer = MagicLinkVerifySerializer(data=request.data)

    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    try:
        user = verify_magic_link(token=serializer.validated_data['token'])
    except InvalidTokenError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except InactiveAccountError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

    return _auth_response(user, 'Login successful')


@extend_schema(
    methods=['GET'],
    responses={200: UserSerializer},
    description="Get the current member's profile and membership state.",
    tags=['auth'],
)
@extend_schema(
    methods=['PATCH'],
    request=UserSerializer,
    responses={200: UserSerializer, 400: ErrorResponseSerializer},
    description="Update the current member's profile.",
    tags=['auth'],
)
@extend_schema(
    methods=['DELETE'],
    request=DeleteAccountSerializer,
    responses={204: None, 400: ErrorResponseSerializer, 401: ErrorResponseSerializer},
    description="GDPR-compliant account deletion. Anonymizes member data.",
    tags=['auth'],
)
@api_view(['GET', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def current_user(request):
    """Read, update or delete the signed-in member."""
    if request.method == 'GET':
        return Response(UserSerializer(request.user).data)

    if request.method == 'PATCH':
        serializer = UserSerializer(request.user, data=request.data, partial=True)
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    serializer = DeleteAccountSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    if not serializer.validated_data['confirm']:
        return Response({
            'error': 'Confirmation required'
        }, status=status.HTTP_400_BAD_REQUEST)

    try:
        delete_user_account(
            user_id=request.user.id,
            password=serializer.validated_data['password'],
        )
    except PasswordConfirmationError as e:
        return Response({'error': str(e)}, status=status.HTTP_401_UNAUTHORIZED)

    return Response(status=status.HTTP_204_NO_CONTENT)


@extend_schema(
    responses={200: TierSerializer(many=True)},
    description="List membership tiers with their limits and prices.",
    tags=['auth'],
)
@api_view(['GET'])
@permission_classes([AllowAny])
def list_tiers(request):
    """List every membership tier, cheapest first."""
    tiers = sorted(TIERS, key=lambda tier: TIERS[tier].rank)
    return Response([serialize_tier(tier) for tier in tiers])
