"""
Outgoing email.

Each ``send_*`` helper raises on delivery failure; callers that must not
fail because of email wrap the call in ``send_quietly``.
"""
import logging

from django.conf import settings
from django.core.mail import send_mail

logger = logging.getLogger(__name__)


def _send(subject, message, recipient):
    send_mail(subject, message, settings.DEFAULT_FROM_EMAIL, [recipient], fail_silently=False)
    logger.info('Email "%s" sent to %s', subject, recipient)


def send_quietly(func, *args, **kwargs):
    try:
        func(*args, **kwargs)
        return True
    except Exception:
        logger.exception('Failed to send email via %s', func.__name__)
        return False


def send_welcome_email(user):
    link = f'{settings.FRONTEND_URL}/verify-email?token={user.verification_token}'
    _send(
        'Welcome to the hotel marketplace',
        f'Hello {user.display_name},\n\nPlease verify your email address: {link}\n',
        user.email,
    )


def send_password_reset_email(user, token):
    link = f'{settings.FRONTEND_URL}/reset-password?token={token}'
    _send(
        'Password reset request',
        f'A password reset was requested for your account.\n\n'
        f'Reset your password within {settings.PASSWORD_RESET_EXPIRE_MINUTES} minutes: {link}\n\n'
        f'If you did not request this, ignore this email.\n',
        user.email,
    )


def send_booking_confirmation_email(booking):
    _send(
        f'Booking {booking.reference} received',
        f'Your booking at {booking.hotel.name} ({booking.room.name}) is {booking.status}.\n'
        f'Check-in: {booking.check_in:%Y-%m-%d}\n'
        f'Check-out: {booking.check_out:%Y-%m-%d}\n'
        f'Rooms: {booking.number_of_rooms}, nights: {booking.total_nights}\n'
        f'Total: {booking.total_amount} {booking.currency}\n',
        booking.contact_email,
    )


def send_hotel_verification_email(hotel, approved, reason=''):
    if approved:
        subject = 'Your hotel has been verified'
        message = f'{hotel.name} is now listed on the marketplace.\n'
    else:
        subject = 'Your hotel verification was rejected'
        message = f'{hotel.name} could not be verified.\n\nReason: {reason or "not specified"}\n'
    _send(subject, message, hotel.user.email)
