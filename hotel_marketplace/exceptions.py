import logging
import traceback

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError
from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class Conflict(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Request conflicts with the current state of the resource.'
    default_code = 'conflict'


class BookingConflict(Conflict):
    """A booking transition was attempted from a status that does not allow it."""
    default_code = 'illegal_transition'

    def __init__(self, action, required, current):
        self.action = action
        self.required = tuple(required)
        self.current = current
        super().__init__(
            f"Booking must be {' or '.join(self.required)} to {action} (current status: {current})"
        )


class InsufficientAvailability(Conflict):
    default_code = 'insufficient_availability'

    def __init__(self, available, requested):
        self.available = available
        self.requested = requested
        super().__init__(f"Only {available} rooms available for selected dates")


def _message_from_detail(detail):
    if isinstance(detail, list):
        return ' '.join(_message_from_detail(item) for item in detail)
    if isinstance(detail, dict):
        parts = []
        for field, value in detail.items():
            text = _message_from_detail(value)
            parts.append(text if field == 'non_field_errors' else f'{field}: {text}')
        return ' '.join(parts)
    return str(detail)


def api_exception_handler(exc, context):
    """Render every error as ``{"success": false, "message": ...}``."""
    if isinstance(exc, DjangoValidationError):
        exc = ValidationError(exc.message_dict if hasattr(exc, 'error_dict') else exc.messages)
    elif isinstance(exc, IntegrityError):
        logger.warning('Integrity error: %s', exc)
        exc = Conflict('Resource already exists')

    response = exception_handler(exc, context)
    if response is not None:
        detail = response.data
        if isinstance(detail, dict) and 'detail' in detail:
            detail = detail['detail']
        body = {'success': False, 'message': _message_from_detail(detail)}
        if isinstance(exc, ValidationError):
            body['errors'] = response.data
        if isinstance(exc, InsufficientAvailability):
            body['data'] = {'available_rooms': exc.available, 'requested_rooms': exc.requested}
        if isinstance(exc, BookingConflict):
            body['data'] = {'required_status': list(exc.required), 'current_status': exc.current}
        response.data = body
        return response

    request = context.get('request')
    logger.exception(
        'Unhandled error on %s %s (user=%s)',
        getattr(request, 'method', '?'),
        getattr(request, 'path', '?'),
        getattr(getattr(request, 'user', None), 'pk', None),
    )
    body = {'success': False, 'message': 'Server error'}
    if settings.DEBUG:
        body['stack'] = traceback.format_exception(type(exc), exc, exc.__traceback__)
    return Response(body, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
