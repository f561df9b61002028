from concurrent.futures import ThreadPoolExecutor

from django.db import connection
from django.test import TransactionTestCase

from hotel_marketplace import lifecycle
from hotel_marketplace.exceptions import InsufficientAvailability
from hotel_marketplace.models import Booking

from .factories import day, make_customer, make_hotel, make_room


class ConcurrentBookingTestCase(TransactionTestCase):
    """Competing requests for the last unit of a room type"""

    def setUp(self):
        self.customer = make_customer()
        self.room = make_room(make_hotel(), total_rooms=1)

    def attempt(self, index):
        try:
            return lifecycle.create_booking(
                self.customer, self.room.pk, day(3), day(5), 1, 2,
                contact_email=f'guest{index}@example.com', contact_phone='+919800011122',
            )
        except InsufficientAvailability as exc:
            return exc
        finally:
            connection.close()

    def test_last_unit_is_sold_once(self):
        attempts = 6
        with ThreadPoolExecutor(max_workers=attempts) as executor:
            results = list(executor.map(self.attempt, range(attempts)))

        bookings = [result for result in results if isinstance(result, Booking)]
        refusals = [result for result in results if isinstance(result, InsufficientAvailability)]
        self.assertEqual(len(bookings), 1)
        self.assertEqual(len(refusals), attempts - 1)
        for refusal in refusals:
            self.assertEqual(refusal.available, 0)
            self.assertEqual(refusal.requested, 1)
        self.assertEqual(Booking.objects.filter(room=self.room).count(), 1)
