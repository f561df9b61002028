from datetime import timedelta

from django.conf import settings
from django.utils import timezone
from jose import JWTError, jwt
from rest_framework import authentication, exceptions

from .models import User


def create_access_token(user):
    expire = timezone.now() + timedelta(days=settings.JWT_EXPIRE_DAYS)
    payload = {'id': user.pk, 'role': user.role, 'exp': expire}
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_token(token):
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        raise exceptions.AuthenticationFailed("Invalid token.")


class BearerTokenAuthentication(authentication.BaseAuthentication):
    """``Authorization: Bearer <jwt>`` where the token carries ``{id, role, exp}``."""
    keyword = 'Bearer'

    def authenticate(self, request):
        auth = authentication.get_authorization_header(request).split()
        if not auth or auth[0].lower() != self.keyword.lower().encode():
            return None
        if len(auth) != 2:
            raise exceptions.AuthenticationFailed("Invalid token header.")
        try:
            token = auth[1].decode()
        except UnicodeError:
            raise exceptions.AuthenticationFailed("Invalid token header.")

        payload = decode_token(token)
        try:
            user = User.objects.get(pk=payload.get('id'))
        except User.DoesNotExist:
            raise exceptions.AuthenticationFailed("Token is no longer valid.")
        if not user.is_active:
            raise exceptions.AuthenticationFailed("Account has been deactivated.")
        return user, payload

    def authenticate_header(self, request):
        return self.keyword
