from rest_framework import status, serializers
from rest_framework.decorators import api_view, permission_classes, throttle_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.exceptions import TokenError
from drf_spectacular.utils import extend_schema

from apps.debts.context import RequestContext
from apps.debts.permissions import CanAccessRegistration, CanDeleteAccounts, CanUpdateOwnAccount
from apps.security.throttles import (
    LoginRateThrottle,
    NotificationEmailRateThrottle,
    RegistrationRateThrottle,
)

from .serializers import (
    ConfirmEmailSerializer,
    UserRegistrationSerializer,
    UserLoginSerializer,
    UserSerializer,
    PasswordResetRequestSerializer,
    PasswordResetConfirmSerializer,
)
from .services import (
    AdminHasDebtsError,
    InactiveAccountError,
    InvalidCredentialsError,
    InvalidTokenError,
    UnconfirmedAccountError,
    UserNotFoundError,
    UserRegistrationError,
    authenticate_user,
    confirm_password_reset,
    delete_user_account,
    register_user,
    request_password_reset,
    verify_user_email,
)


# Response serializers for API documentation
class TokensResponseSerializer(serializers.Serializer):
    refresh = serializers.CharField()
    access = serializers.CharField()


class AuthResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    user = UserSerializer()
    tokens = TokensResponseSerializer()


class RegistrationResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    user = UserSerializer()


class MessageResponseSerializer(serializers.Serializer):
    message = serializers.CharField()


class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()


class LogoutRequestSerializer(serializers.Serializer):
    refresh = serializers.CharField(help_text="Refresh token to validate")


PASSWORD_RESET_MESSAGE = 'If account exists, password reset email has been sent'


@extend_schema(
    request=UserRegistrationSerializer,
    responses={
        201: RegistrationResponseSerializer,
        400: ErrorResponseSerializer,
    },
    description="Register a customer account. A confirmation email is sent; sign in after confirming.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([CanAccessRegistration])
@throttle_classes([RegistrationRateThrottle])
def register(request):
    """Register a new customer account."""
    serializer = UserRegistrationSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    data = serializer.validated_data.copy()
    data.pop('password_confirm', None)

    context = RequestContext.from_request(request)
    try:
        user = register_user(locale=context.locale, **data)
    except UserRegistrationError as e:
        return Response(
            {'error': str(e)},
            status=status.HTTP_400_BAD_REQUEST
        )

    return Response({
        'message': 'Registration successful. Please confirm your email.',
        'user': UserSerializer(user).data,
    }, status=status.HTTP_201_CREATED)


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
@throttle_classes([LoginRateThrottle])
def login(request):
    """Login with email and password."""
    serializer = UserLoginSerializer(data=request.data)

    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    try:
        user = authenticate_user(**serializer.validated_data)
    except InvalidCredentialsError:
        return Response({
            'error': 'Invalid credentials'
        }, status=status.HTTP_401_UNAUTHORIZED)
    except (InactiveAccountError, UnconfirmedAccountError) as e:
        return Response({
            'error': str(e)
        }, status=status.HTTP_403_FORBIDDEN)

    refresh = RefreshToken.for_user(user)

    return Response({
        'message': 'Login successful',
        'user': UserSerializer(user).data,
        'tokens': {
            'refresh': str(refresh),
            'access': str(refresh.access_token),
        }
    })


@extend_schema(
    request=LogoutRequestSerializer,
    responses={
        200: MessageResponseSerializer,
        400: ErrorResponseSerializer,
    },
    description="Logout. The client discards its tokens; a supplied refresh token is validated.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def logout(request):
    """Logout."""
    refresh_token = request.data.get('refresh')
    if refresh_token:
        try:
            RefreshToken(refresh_token)
        except TokenError:
            return Response({
                'error': 'Invalid token'
            }, status=status.HTTP_400_BAD_REQUEST)

    return Response({
        'message': 'Logout successful'
    })


@extend_schema(
    request=ConfirmEmailSerializer,
    responses={
        200: MessageResponseSerializer,
        400: ErrorResponseSerializer,
    },
    description="Confirm an email address with the token from the confirmation email.",
    tags=['auth'],
)
@api_view(['GET', 'POST'])
@permission_classes([AllowAny])
def confirm_email(request):
    """Confirm email with token (link from the email or POST body)."""
    payload = request.query_params if request.method == 'GET' else request.data
    serializer = ConfirmEmailSerializer(data=payload)

    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    try:
        verify_user_email(token=serializer.validated_data['token'])
    except InvalidTokenError:
        return Response({
            'error': 'Invalid confirmation token'
        }, status=status.HTTP_400_BAD_REQUEST)

    return Response({
        'message': 'Email confirmed successfully'
    })


@extend_schema(
    request=PasswordResetRequestSerializer,
    responses={200: MessageResponseSerializer},
    description="Request a password reset email. Always returns the same message.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
@throttle_classes([NotificationEmailRateThrottle])
def password_reset_request(request):
    """Request password reset email."""
    serializer = PasswordResetRequestSerializer(data=request.data)

    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    context = RequestContext.from_request(request)
    try:
        request_password_reset(
            email=serializer.validated_data['email'],
            locale=context.locale
        )
    except UserNotFoundError:
        # Don't reveal if email exists
        pass

    return Response({'message': PASSWORD_RESET_MESSAGE})


@extend_schema(
    request=PasswordResetConfirmSerializer,
    responses={
        200: MessageResponseSerializer,
        400: ErrorResponseSerializer,
    },
    description="Confirm password reset with token and set new password.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def password_reset_confirm(request):
    """Confirm password reset with token."""
    serializer = PasswordResetConfirmSerializer(data=request.data)

    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    try:
        confirm_password_reset(
            token=serializer.validated_data['token'],
            new_password=serializer.validated_data['new_password'],
        )
    except InvalidTokenError:
        return Response({
            'error': 'Invalid or expired reset token'
        }, status=status.HTTP_400_BAD_REQUEST)

    return Response({
        'message': 'Password reset successful'
    })


@extend_schema(
    request=UserSerializer,
    responses={
        200: UserSerializer,
        400: ErrorResponseSerializer,
    },
    description="Get or update the current account (display_name only).",
    tags=['auth'],
)
@api_view(['GET', 'PATCH'])
@permission_classes([IsAuthenticated])
def current_account(request):
    """Current account profile."""
    if request.method == 'GET':
        return Response(UserSerializer(request.user).data)

    if not CanUpdateOwnAccount().has_permission(request, None):
        return Response({'error': 'Access denied.'}, status=status.HTTP_403_FORBIDDEN)

    serializer = UserSerializer(request.user, data=request.data, partial=True)

    if serializer.is_valid():
        serializer.save()
        return Response(serializer.data)

    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@extend_schema(
    request=None,
    responses={
        204: None,
        404: ErrorResponseSerializer,
        409: ErrorResponseSerializer,
    },
    description="Delete a user account (admin only). Admins with created debts cannot be deleted.",
    tags=['admin'],
)
@api_view(['DELETE'])
@permission_classes([IsAuthenticated, CanDeleteAccounts])
def delete_account(request, pk):
    """Delete an account (admin only)."""
    try:
        delete_user_account(user_id=pk, deleted_by=request.user)
    except UserNotFoundError:
        return Response({'error': 'User not found.'}, status=status.HTTP_404_NOT_FOUND)
    except AdminHasDebtsError as e:
        return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)

    return Response(status=status.HTTP_204_NO_CONTENT)
