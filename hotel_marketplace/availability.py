"""
Room inventory availability.

A booking holds inventory while its status says so
(``Booking.Status.holds_inventory``); every other status releases the
units implicitly, so cancelling a booking frees its rooms immediately.
"""
from django.db.models import Sum
from rest_framework.exceptions import ValidationError

from .exceptions import InsufficientAvailability
from .models import Booking, Room


def validate_range(check_in, check_out):
    if not check_in or not check_out:
        raise ValidationError("check_in and check_out are required")
    if check_out <= check_in:
        raise ValidationError("check_out must be after check_in")


def overlapping_holds(room, check_in, check_out, exclude=None):
    """Bookings of ``room`` holding inventory on any night of ``[check_in, check_out)``."""
    qs = Booking.objects.filter(
        room=room,
        status__in=Booking.Status.holding(),
        check_in__lt=check_out,
        check_out__gt=check_in,
    )
    if exclude is not None:
        qs = qs.exclude(pk=exclude.pk)
    return qs


def committed_rooms(room, check_in, check_out, exclude=None):
    total = overlapping_holds(room, check_in, check_out, exclude).aggregate(
        total=Sum('number_of_rooms')
    )['total']
    return total or 0


def compute_available(room, check_in, check_out, exclude=None):
    validate_range(check_in, check_out)
    return max(0, room.total_rooms - committed_rooms(room, check_in, check_out, exclude))


def ensure_available(room, check_in, check_out, requested, exclude=None):
    """Raise ``InsufficientAvailability`` unless ``requested`` units are free."""
    available = compute_available(room, check_in, check_out, exclude)
    if available < requested:
        raise InsufficientAvailability(available, requested)
    return available


def lock_room(room_id):
    """Lock a room row for the rest of the current transaction.

    Every booking insert or date change for the room runs under this lock, so
    the availability check and the write cannot interleave with another request.
    """
    return Room.objects.select_for_update().get(pk=room_id)


def annotate_rooms(rooms, check_in, check_out, requested=1):
    """Pair each room with its remaining units for the range."""
    result = []
    for room in rooms:
        available = compute_available(room, check_in, check_out)
        result.append((room, available, available >= requested))
    return result
