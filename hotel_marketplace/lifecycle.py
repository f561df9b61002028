"""
Booking lifecycle: creation, status transitions and modification.

Every transition checks the current status against ``TRANSITIONS`` and
raises ``BookingConflict`` naming the statuses it requires; nothing is
ever silently skipped except a repeated check-in.
Operations on an existing booking run on a freshly read, row-locked copy.
"""
import logging
from datetime import timedelta
from functools import wraps

from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from . import availability, pricing
from .exceptions import BookingConflict, Conflict
from .models import Booking

logger = logging.getLogger(__name__)

Status = Booking.Status

TRANSITIONS = {
    Status.PENDING: {Status.CONFIRMED, Status.REJECTED, Status.CANCELLED},
    Status.CONFIRMED: {Status.CHECKED_IN, Status.CANCELLED, Status.NO_SHOW},
    Status.CHECKED_IN: {Status.CHECKED_OUT, Status.NO_SHOW},
    Status.CHECKED_OUT: {Status.COMPLETED},
    Status.CANCELLED: set(),
    Status.REJECTED: set(),
    Status.COMPLETED: set(),
    Status.NO_SHOW: set(),
}

MODIFIABLE = (Status.PENDING, Status.CONFIRMED)


def sources_for(target):
    return tuple(source for source, targets in TRANSITIONS.items() if target in targets)


def _require(booking, action, target):
    allowed = sources_for(target)
    if booking.status not in allowed:
        raise BookingConflict(action, allowed, booking.status)


def locked(func):
    """Run a booking operation in a transaction on the row-locked, freshly read booking.

    The caller's instance is refreshed in place, so a status written by a
    concurrent request is what the transition checks see.
    """
    @wraps(func)
    def wrapper(booking, *args, **kwargs):
        with transaction.atomic():
            booking.refresh_from_db(from_queryset=Booking.objects.select_for_update())
            return func(booking, *args, **kwargs)
    return wrapper


def _move(booking, target, *fields):
    previous = booking.status
    booking.status = target
    booking.save(update_fields=['status', 'updated_at', *fields])
    logger.info('Booking %s: %s -> %s', booking.reference, previous, target)
    return booking


def create_booking(customer, room_id, check_in, check_out, number_of_rooms, adults,
                   children=0, infants=0, promo_code=None, **details):
    """Hold inventory and persist a pending booking priced from the room's current rates."""
    availability.validate_range(check_in, check_out)
    with transaction.atomic():
        room = availability.lock_room(room_id)
        availability.ensure_available(room, check_in, check_out, number_of_rooms)
        quote = pricing.quote(room, check_in, check_out, number_of_rooms, promo_code)
        booking = Booking.objects.create(
            customer=customer,
            hotel_id=room.hotel_id,
            room=room,
            check_in=check_in,
            check_out=check_out,
            adults=adults,
            children=children,
            infants=infants,
            number_of_rooms=number_of_rooms,
            room_price=quote.base,
            taxes=quote.taxes,
            service_fee=quote.service_fee,
            discount_amount=quote.discount,
            discount_reason=quote.promo_code,
            total_amount=quote.total,
            deposit_amount=quote.deposit_amount,
            currency=quote.currency,
            status=Status.PENDING,
            **details,
        )
    logger.info('Booking %s created for room %s (%s rooms)', booking.reference, room.pk, number_of_rooms)
    return booking


@locked
def confirm(booking):
    _require(booking, 'confirm', Status.CONFIRMED)
    booking.confirmed_at = timezone.now()
    return _move(booking, Status.CONFIRMED, 'confirmed_at')


@locked
def reject(booking):
    _require(booking, 'reject', Status.REJECTED)
    return _move(booking, Status.REJECTED)


@locked
def check_in(booking, notes=''):
    if booking.status == Status.CHECKED_IN:
        return booking
    _require(booking, 'check in', Status.CHECKED_IN)
    booking.actual_check_in = timezone.now()
    booking.check_in_notes = notes or ''
    return _move(booking, Status.CHECKED_IN, 'actual_check_in', 'check_in_notes')


@locked
def check_out(booking, notes='', damage_charges=None):
    _require(booking, 'check out', Status.CHECKED_OUT)
    booking.actual_check_out = timezone.now()
    booking.check_out_notes = notes or ''
    if damage_charges is not None:
        booking.damage_charges = pricing.to_cents(damage_charges)
    return _move(booking, Status.CHECKED_OUT, 'actual_check_out', 'check_out_notes', 'damage_charges')


@locked
def complete(booking):
    _require(booking, 'complete', Status.COMPLETED)
    return _move(booking, Status.COMPLETED)


@locked
def mark_no_show(booking):
    _require(booking, 'mark as no-show', Status.NO_SHOW)
    return _move(booking, Status.NO_SHOW)


def hours_until_check_in(booking, now=None):
    now = now or timezone.now()
    return (booking.check_in - now).total_seconds() / 3600


@locked
def cancel(booking, cancelled_by, reason='', now=None, refund_amount=None):
    """Cancel a booking and record the refund owed.

    The refund follows the tiered policy unless the hotel or an admin passes
    an explicit ``refund_amount``.
    """
    _require(booking, 'cancel', Status.CANCELLED)
    now = now or timezone.now()
    if refund_amount is None:
        refund = pricing.refund_for(booking.total_amount, hours_until_check_in(booking, now))
    else:
        refund = pricing.to_cents(refund_amount)
    booking.is_cancelled = True
    booking.cancelled_at = now
    booking.cancelled_by = cancelled_by
    booking.cancellation_reason = reason or f'Cancelled by {cancelled_by}'
    booking.refund_amount = refund
    booking.refund_status = (
        Booking.RefundStatus.PENDING if refund > 0 else Booking.RefundStatus.NOT_APPLICABLE
    )
    return _move(
        booking, Status.CANCELLED,
        'is_cancelled', 'cancelled_at', 'cancelled_by', 'cancellation_reason',
        'refund_amount', 'refund_status',
    )


@locked
def modify(booking, check_in, check_out, number_of_rooms=None):
    """Move a booking to new dates / room count, re-checking inventory and re-pricing.

    A discount applied earlier is dropped; the promo code has to be applied again.
    """
    if booking.status not in MODIFIABLE:
        raise BookingConflict('be modified', MODIFIABLE, booking.status)
    availability.validate_range(check_in, check_out)
    number_of_rooms = number_of_rooms or booking.number_of_rooms

    with transaction.atomic():
        room = availability.lock_room(booking.room_id)
        availability.ensure_available(room, check_in, check_out, number_of_rooms, exclude=booking)
        quote = pricing.quote(room, check_in, check_out, number_of_rooms)
        booking.check_in = check_in
        booking.check_out = check_out
        booking.number_of_rooms = number_of_rooms
        booking.room_price = quote.base
        booking.taxes = quote.taxes
        booking.service_fee = quote.service_fee
        booking.discount_amount = quote.discount
        booking.discount_reason = ''
        booking.total_amount = quote.total
        if not booking.deposit_paid:
            booking.deposit_amount = quote.deposit_amount
        booking.save(update_fields=[
            'check_in', 'check_out', 'total_nights', 'number_of_rooms', 'room_price', 'taxes',
            'service_fee', 'discount_amount', 'discount_reason', 'total_amount', 'deposit_amount',
            'updated_at',
        ])
    logger.info('Booking %s modified: %s nights, %s rooms', booking.reference,
                booking.total_nights, booking.number_of_rooms)
    return booking


@locked
def apply_promo(booking, code):
    if booking.status not in MODIFIABLE:
        raise BookingConflict('apply a promo code', MODIFIABLE, booking.status)
    normalized, discount = pricing.promo_discount(code, booking.room_price)
    booking.discount_amount = discount
    booking.discount_reason = normalized
    booking.total_amount = booking.room_price + booking.taxes + booking.service_fee - discount
    if not booking.deposit_paid:
        booking.deposit_amount = pricing.deposit_for(booking.total_amount)
    booking.save(update_fields=[
        'discount_amount', 'discount_reason', 'total_amount', 'deposit_amount', 'updated_at',
    ])
    return booking


@locked
def record_deposit(booking, amount):
    if booking.status not in MODIFIABLE:
        raise BookingConflict('record a deposit', MODIFIABLE, booking.status)
    if booking.deposit_paid:
        raise Conflict("Deposit already paid")
    if amount is None or amount <= 0:
        raise ValidationError({'amount': "Invalid deposit amount"})
    booking.deposit_amount = pricing.to_cents(amount)
    booking.deposit_paid = True
    booking.payment_status = Booking.PaymentStatus.PARTIALLY_PAID
    booking.save(update_fields=['deposit_amount', 'deposit_paid', 'payment_status', 'updated_at'])
    return booking


def rebook(original, days_ahead=30):
    """New pending booking for the same room and stay length, ``days_ahead`` days from now."""
    start = (timezone.now() + timedelta(days=days_ahead)).replace(hour=0, minute=0, second=0, microsecond=0)
    end = start + timedelta(days=original.total_nights or 1)
    return create_booking(
        original.customer,
        original.room_id,
        start,
        end,
        original.number_of_rooms,
        original.adults,
        children=original.children,
        infants=original.infants,
        guest_details=original.guest_details,
        contact_email=original.contact_email,
        contact_phone=original.contact_phone,
        emergency_contact=original.emergency_contact,
    )
