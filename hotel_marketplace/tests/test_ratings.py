from decimal import Decimal

from django.test import TestCase
from rest_framework.exceptions import NotFound, ValidationError

from hotel_marketplace import ratings
from hotel_marketplace.exceptions import Conflict
from hotel_marketplace.models import Booking, Review

from .factories import day, make_booking, make_customer, make_hotel, make_room


def review_fields(overall):
    return {
        'overall': overall,
        'title': f'{overall} stars',
        'comment': 'Stayed two nights',
        'stay_type': Review.StayType.LEISURE,
    }


class RatingAggregateTestCase(TestCase):
    """Hotel rating cache follows approved reviews"""

    def setUp(self):
        self.customer = make_customer()
        self.hotel = make_hotel()
        self.room = make_room(self.hotel, total_rooms=5)

    def stay(self, status=Booking.Status.COMPLETED):
        return make_booking(self.customer, self.room, day(-5), day(-3), status=status)

    def review(self, overall):
        return ratings.create_review(self.customer, self.stay().pk, **review_fields(overall))

    def test_average_and_count(self):
        reviews = [self.review(overall) for overall in (5, 4, 3)]
        self.hotel.refresh_from_db()
        self.assertEqual(self.hotel.rating_average, Decimal('4.0'))
        self.assertEqual(self.hotel.rating_total_reviews, 3)

        ratings.delete_review(reviews[2])
        self.hotel.refresh_from_db()
        self.assertEqual(self.hotel.rating_average, Decimal('4.5'))
        self.assertEqual(self.hotel.rating_total_reviews, 2)

    def test_no_reviews_resets_to_zero(self):
        review = self.review(5)
        ratings.delete_review(review)

        self.hotel.refresh_from_db()
        self.assertEqual(self.hotel.rating_average, Decimal('0.0'))
        self.assertEqual(self.hotel.rating_total_reviews, 0)

    def test_average_rounds_half_up(self):
        for overall in (5, 4, 4, 4):
            self.review(overall)
        self.hotel.refresh_from_db()
        self.assertEqual(self.hotel.rating_average, Decimal('4.3'))

    def test_hidden_reviews_are_excluded(self):
        review = self.review(1)
        self.review(5)

        ratings.set_approval(review, False, 'Abusive language')
        self.hotel.refresh_from_db()
        self.assertEqual(self.hotel.rating_average, Decimal('5.0'))
        self.assertEqual(self.hotel.rating_total_reviews, 1)

        ratings.set_approval(review, True)
        self.hotel.refresh_from_db()
        self.assertEqual(self.hotel.rating_average, Decimal('3.0'))

    def test_update_recomputes(self):
        review = self.review(2)
        ratings.update_review(review, overall=4)

        self.hotel.refresh_from_db()
        self.assertEqual(self.hotel.rating_average, Decimal('4.0'))

    def test_review_copies_stay_details(self):
        review = self.review(4)

        self.assertTrue(review.is_verified)
        self.assertEqual(review.room_type, self.room.room_type)
        self.assertEqual(review.stay_nights, 2)
        self.assertEqual(review.hotel, self.hotel)

    def test_only_finished_stays_can_be_reviewed(self):
        for status in (Booking.Status.PENDING, Booking.Status.CONFIRMED, Booking.Status.CANCELLED):
            booking = self.stay(status)
            with self.subTest(status=status):
                with self.assertRaises(ValidationError):
                    ratings.create_review(self.customer, booking.pk, **review_fields(5))

    def test_one_review_per_booking(self):
        booking = self.stay()
        ratings.create_review(self.customer, booking.pk, **review_fields(5))

        with self.assertRaises(Conflict):
            ratings.create_review(self.customer, booking.pk, **review_fields(4))

    def test_other_customers_booking_is_not_found(self):
        booking = self.stay()
        stranger = make_customer('stranger@example.com')

        with self.assertRaises(NotFound):
            ratings.create_review(stranger, booking.pk, **review_fields(5))

    def test_rating_distribution(self):
        for overall in (5, 5, 3):
            self.review(overall)
        distribution = ratings.rating_distribution(Review.objects.filter(hotel=self.hotel))
        self.assertEqual(distribution, {'5': 2, '4': 0, '3': 1, '2': 0, '1': 0})
