import hashlib
import logging
import secrets
from datetime import timedelta

from django.conf import settings
from django.utils import timezone
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import AuthenticationFailed, ValidationError
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from .. import notifications
from ..authentication import create_access_token
from ..models import User
from ..responses import envelope
from ..serializers import (
    ChangePasswordSerializer,
    CustomerProfileSerializer,
    EmailSerializer,
    HotelSerializer,
    LoginSerializer,
    RegisterSerializer,
    ResetPasswordSerializer,
    TokenSerializer,
    UserSerializer,
)

logger = logging.getLogger(__name__)

PUBLIC = {'permission_classes': [AllowAny]}


def hash_token(token):
    return hashlib.sha256(token.encode()).hexdigest()


def profile_data(user):
    if user.role == User.Role.CUSTOMER and hasattr(user, 'customer_profile'):
        return CustomerProfileSerializer(user.customer_profile).data
    if user.role == User.Role.HOTEL and hasattr(user, 'hotel'):
        return HotelSerializer(user.hotel).data
    return None


class AuthViewSet(viewsets.GenericViewSet):
    """Registration, login and password management."""

    @action(detail=False, methods=['post'], **PUBLIC)
    def register(self, request):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info('Registered %s user %s', user.role, user.pk)
        notifications.send_quietly(notifications.send_welcome_email, user)
        return envelope(
            {'user': UserSerializer(user).data, 'token': create_access_token(user)},
            'User registered successfully. Please verify your email.',
            status.HTTP_201_CREATED,
        )

    @action(detail=False, methods=['post'], **PUBLIC)
    def login(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        email = serializer.validated_data['email']
        logger.info('Login attempt for %s', email)

        user = User.objects.filter(email__iexact=email).first()
        if user is None or not user.check_password(serializer.validated_data['password']):
            logger.warning('Login failed for %s', email)
            raise AuthenticationFailed("Invalid email or password")
        if not user.is_active:
            logger.warning('Login refused for inactive user %s', user.pk)
            raise AuthenticationFailed("Account has been deactivated. Please contact support.")

        user.last_login = timezone.now()
        user.save(update_fields=['last_login'])
        logger.info('Login success for user %s (%s)', user.pk, user.role)
        return envelope(
            {'user': UserSerializer(user).data, 'token': create_access_token(user)},
            'Login successful',
        )

    @action(detail=False, methods=['post'], url_path='verify-email', **PUBLIC)
    def verify_email(self, request):
        serializer = TokenSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = User.objects.filter(verification_token=serializer.validated_data['token']).first()
        if user is None:
            raise ValidationError("Invalid or expired verification token")
        user.is_verified = True
        user.verification_token = ''
        user.save(update_fields=['is_verified', 'verification_token'])
        return envelope(message='Email verified successfully')

    @action(detail=False, methods=['post'], url_path='forgot-password', **PUBLIC)
    def forgot_password(self, request):
        serializer = EmailSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = User.objects.filter(email__iexact=serializer.validated_data['email']).first()
        if user is None:
            return envelope(message='If the email exists, a password reset link has been sent.')

        token = secrets.token_hex(32)
        user.password_reset_token = hash_token(token)
        user.password_reset_expires = timezone.now() + timedelta(minutes=settings.PASSWORD_RESET_EXPIRE_MINUTES)
        user.save(update_fields=['password_reset_token', 'password_reset_expires'])

        if not notifications.send_quietly(notifications.send_password_reset_email, user, token):
            user.password_reset_token = ''
            user.password_reset_expires = None
            user.save(update_fields=['password_reset_token', 'password_reset_expires'])
            return Response(
                {'success': False, 'message': 'Failed to send password reset email'},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )
        return envelope(message='Password reset email sent successfully')

    @action(detail=False, methods=['post'], url_path='reset-password', **PUBLIC)
    def reset_password(self, request):
        serializer = ResetPasswordSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = User.objects.filter(
            password_reset_token=hash_token(serializer.validated_data['token']),
            password_reset_expires__gt=timezone.now(),
        ).first()
        if user is None:
            raise ValidationError("Invalid or expired reset token")
        user.set_password(serializer.validated_data['password'])
        user.password_reset_token = ''
        user.password_reset_expires = None
        user.save()
        logger.info('Password reset for user %s', user.pk)
        return envelope(message='Password reset successfully')

    @action(detail=False, methods=['put', 'post'], url_path='change-password')
    def change_password(self, request):
        serializer = ChangePasswordSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = request.user
        if not user.check_password(serializer.validated_data['current_password']):
            raise ValidationError({'current_password': "Current password is incorrect"})
        user.set_password(serializer.validated_data['new_password'])
        user.save()
        return envelope(message='Password changed successfully')

    @action(detail=False, methods=['get'])
    def me(self, request):
        return envelope({'user': UserSerializer(request.user).data, 'profile': profile_data(request.user)})

    @action(detail=False, methods=['post'])
    def logout(self, request):
        # Tokens are stateless; the client drops its copy.
        logger.info('User %s logged out', request.user.pk)
        return envelope(message='Logged out successfully')
