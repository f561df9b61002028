from django.test import TestCase
from rest_framework.exceptions import ValidationError

from hotel_marketplace import availability
from hotel_marketplace.exceptions import InsufficientAvailability
from hotel_marketplace.models import Booking

from .factories import day, make_booking, make_customer, make_hotel, make_room


class AvailabilityTestCase(TestCase):
    """Remaining units per room type over a date range"""

    def setUp(self):
        self.customer = make_customer()
        self.room = make_room(make_hotel(), total_rooms=3)
        self.check_in = day(5)
        self.check_out = day(8)

    def test_empty_room_is_fully_available(self):
        self.assertEqual(availability.compute_available(self.room, self.check_in, self.check_out), 3)

    def test_overlapping_holds_are_subtracted(self):
        make_booking(self.customer, self.room, day(4), day(6), number_of_rooms=2)
        make_booking(self.customer, self.room, day(7), day(9), number_of_rooms=1,
                     status=Booking.Status.CONFIRMED)

        self.assertEqual(availability.compute_available(self.room, self.check_in, self.check_out), 0)

    def test_adjacent_bookings_do_not_overlap(self):
        make_booking(self.customer, self.room, day(2), self.check_in, number_of_rooms=3)
        make_booking(self.customer, self.room, self.check_out, day(10), number_of_rooms=3)

        self.assertEqual(availability.compute_available(self.room, self.check_in, self.check_out), 3)

    def test_released_statuses_do_not_hold_inventory(self):
        for status in (Booking.Status.CANCELLED, Booking.Status.REJECTED, Booking.Status.NO_SHOW,
                       Booking.Status.CHECKED_IN, Booking.Status.CHECKED_OUT, Booking.Status.COMPLETED):
            make_booking(self.customer, self.room, self.check_in, self.check_out, number_of_rooms=3,
                         status=status)

        self.assertEqual(availability.compute_available(self.room, self.check_in, self.check_out), 3)

    def test_cancelling_frees_units_immediately(self):
        booking = make_booking(self.customer, self.room, self.check_in, self.check_out, number_of_rooms=3)
        self.assertEqual(availability.compute_available(self.room, self.check_in, self.check_out), 0)

        booking.status = Booking.Status.CANCELLED
        booking.save()

        self.assertEqual(availability.compute_available(self.room, self.check_in, self.check_out), 3)

    def test_excluded_booking_is_ignored(self):
        booking = make_booking(self.customer, self.room, self.check_in, self.check_out, number_of_rooms=2)
        self.assertEqual(
            availability.compute_available(self.room, self.check_in, self.check_out, exclude=booking), 3
        )

    def test_never_negative(self):
        self.room.total_rooms = 1
        self.room.save()
        make_booking(self.customer, self.room, self.check_in, self.check_out, number_of_rooms=3)

        self.assertEqual(availability.compute_available(self.room, self.check_in, self.check_out), 0)

    def test_ensure_available_reports_remaining(self):
        make_booking(self.customer, self.room, self.check_in, self.check_out, number_of_rooms=2)

        with self.assertRaises(InsufficientAvailability) as ctx:
            availability.ensure_available(self.room, self.check_in, self.check_out, 2)
        self.assertEqual(ctx.exception.available, 1)
        self.assertEqual(ctx.exception.requested, 2)
        self.assertEqual(availability.ensure_available(self.room, self.check_in, self.check_out, 1), 1)

    def test_invalid_ranges_are_rejected(self):
        scenarios = [
            (self.check_in, self.check_in, 'zero length'),
            (self.check_out, self.check_in, 'inverted'),
        ]
        for check_in, check_out, description in scenarios:
            with self.subTest(scenario=description):
                with self.assertRaises(ValidationError):
                    availability.compute_available(self.room, check_in, check_out)

    def test_annotate_rooms(self):
        other = make_room(self.room.hotel, name='Suite', total_rooms=1)
        make_booking(self.customer, other, self.check_in, self.check_out)

        rows = availability.annotate_rooms([self.room, other], self.check_in, self.check_out, requested=2)

        self.assertEqual(rows, [(self.room, 3, True), (other, 0, False)])
