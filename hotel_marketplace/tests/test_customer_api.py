from django.core import mail
from rest_framework import status
from rest_framework.test import APITestCase

from hotel_marketplace.models import Booking, Grievance, Review

from .factories import bearer, day, make_booking, make_customer, make_hotel, make_room


class CustomerAPITestCase(APITestCase):

    def setUp(self):
        self.customer = make_customer()
        self.hotel = make_hotel(amenities=['WiFi', 'Pool'])
        self.room = make_room(self.hotel, total_rooms=2)
        self.client.credentials(HTTP_AUTHORIZATION=bearer(self.customer.user))

    def booking_payload(self, **overrides):
        payload = {
            'room_id': self.room.pk,
            'check_in': day(10).date().isoformat(),
            'check_out': day(12).date().isoformat(),
            'number_of_rooms': 1,
            'adults': 2,
            'contact_email': 'stay@example.com',
            'contact_phone': '+919800011122',
        }
        payload.update(overrides)
        return payload


class BookingAPITestCase(CustomerAPITestCase):
    """Customer booking endpoints"""

    def test_create_booking(self):
        response = self.client.post('/api/customer/bookings/', self.booking_payload())

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        data = response.data['data']
        self.assertEqual(data['status'], 'pending')
        self.assertEqual(data['total_nights'], 2)
        self.assertEqual(data['pricing']['room_price'], '2000.00')
        self.assertEqual(data['pricing']['total_amount'], '2250.00')
        self.assertEqual(data['pricing']['deposit_amount'], '450.00')
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, ['stay@example.com'])

    def test_inventory_is_enforced(self):
        first = self.client.post('/api/customer/bookings/', self.booking_payload())
        self.assertEqual(first.status_code, status.HTTP_201_CREATED)

        response = self.client.post('/api/customer/bookings/', self.booking_payload(number_of_rooms=2, adults=3))
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data['data']['available_rooms'], 1)

        second = self.client.post('/api/customer/bookings/', self.booking_payload())
        self.assertEqual(second.status_code, status.HTTP_201_CREATED)
        third = self.client.post('/api/customer/bookings/', self.booking_payload())
        self.assertEqual(third.status_code, status.HTTP_409_CONFLICT)

        cancel = self.client.post(f"/api/customer/bookings/{first.data['data']['id']}/cancel/", {'reason': 'Sick'})
        self.assertEqual(cancel.status_code, status.HTTP_200_OK)
        self.assertEqual(cancel.data['data']['status'], 'cancelled')
        self.assertEqual(cancel.data['data']['cancellation']['cancelled_by'], 'customer')

        again = self.client.post('/api/customer/bookings/', self.booking_payload())
        self.assertEqual(again.status_code, status.HTTP_201_CREATED)

    def test_invalid_bookings(self):
        scenarios = [
            (self.booking_payload(check_in=day(-2).date().isoformat()), status.HTTP_400_BAD_REQUEST, 'past check-in'),
            (self.booking_payload(check_out=day(10).date().isoformat()), status.HTTP_400_BAD_REQUEST, 'empty range'),
            (self.booking_payload(adults=5), status.HTTP_400_BAD_REQUEST, 'too many adults'),
            (self.booking_payload(promo_code='FAKE20'), status.HTTP_400_BAD_REQUEST, 'unknown promo'),
            (self.booking_payload(room_id=999999), status.HTTP_404_NOT_FOUND, 'missing room'),
        ]
        for payload, expected, description in scenarios:
            with self.subTest(scenario=description):
                response = self.client.post('/api/customer/bookings/', payload)
                self.assertEqual(response.status_code, expected)
                self.assertFalse(response.data['success'])
        self.assertFalse(Booking.objects.exists())

    def test_unverified_hotel_cannot_be_booked(self):
        self.hotel.is_verified = False
        self.hotel.save()

        response = self.client.post('/api/customer/bookings/', self.booking_payload())
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_quote(self):
        response = self.client.post('/api/customer/bookings/quote/', {
            'room_id': self.room.pk,
            'check_in': day(10).date().isoformat(),
            'check_out': day(12).date().isoformat(),
            'promo_code': 'welcome10',
        })

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.data['data']
        self.assertEqual(data['nights'], 2)
        self.assertEqual(data['discount'], '200.00')
        self.assertEqual(data['total'], '2050.00')
        self.assertEqual(data['promo_code'], 'WELCOME10')

    def test_quote_requires_bookable_room(self):
        scenarios = [
            (make_room(make_hotel('owner@pending.example', verified=False)), 'unverified hotel'),
            (make_room(self.hotel, name='Closed wing', is_available=False), 'unavailable room'),
        ]
        for room, description in scenarios:
            with self.subTest(scenario=description):
                response = self.client.post('/api/customer/bookings/quote/', {
                    'room_id': room.pk,
                    'check_in': day(10).date().isoformat(),
                    'check_out': day(12).date().isoformat(),
                })
                self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_other_customers_booking_is_hidden(self):
        stranger = make_customer('stranger@example.com')
        booking = make_booking(stranger, self.room, day(10), day(12))

        response = self.client.get(f'/api/customer/bookings/{booking.pk}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['message'], 'Booking not found')

    def test_list_filters_by_status(self):
        make_booking(self.customer, self.room, day(10), day(12))
        make_booking(self.customer, self.room, day(20), day(22), status=Booking.Status.CANCELLED)

        response = self.client.get('/api/customer/bookings/', {'status': 'cancelled'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['pagination']['total'], 1)
        self.assertEqual(response.data['data'][0]['status'], 'cancelled')

    def test_modify_promo_and_deposit(self):
        booking = make_booking(self.customer, self.room, day(10), day(12))
        url = f'/api/customer/bookings/{booking.pk}'

        modified = self.client.put(f'{url}/modify/', {
            'check_in': day(10).date().isoformat(), 'check_out': day(13).date().isoformat(),
        })
        self.assertEqual(modified.status_code, status.HTTP_200_OK)
        self.assertEqual(modified.data['data']['total_nights'], 3)
        self.assertEqual(modified.data['data']['pricing']['total_amount'], '3350.00')

        promo = self.client.post(f'{url}/promo/', {'code': 'WELCOME10'})
        self.assertEqual(promo.data['data']['pricing']['total_amount'], '3050.00')

        deposit = self.client.post(f'{url}/deposit/', {'amount': '610.00'})
        self.assertEqual(deposit.status_code, status.HTTP_200_OK)
        self.assertTrue(deposit.data['data']['pricing']['deposit_paid'])
        self.assertEqual(self.client.post(f'{url}/deposit/', {'amount': '610.00'}).status_code,
                         status.HTTP_409_CONFLICT)

    def test_add_request(self):
        booking = make_booking(self.customer, self.room, day(10), day(12))

        response = self.client.post(f'/api/customer/bookings/{booking.pk}/request/', {'note': 'Late arrival'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        booking.refresh_from_db()
        self.assertEqual(booking.additional_requests[0]['note'], 'Late arrival')
        self.assertEqual(booking.additional_requests[0]['request_type'], 'special')

    def test_rebook(self):
        booking = make_booking(self.customer, self.room, day(-4), day(-1), status=Booking.Status.COMPLETED)

        response = self.client.post(f'/api/customer/bookings/{booking.pk}/rebook/')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['total_nights'], 3)
        self.assertNotEqual(response.data['data']['id'], booking.pk)


class HotelDiscoveryTestCase(CustomerAPITestCase):
    """Browse, search and availability lookups"""

    def setUp(self):
        super().setUp()
        self.far_hotel = make_hotel('owner@delhi.example', name='Capital Stay', city='Delhi',
                                    latitude=28.6139, longitude=77.2090, amenities=['Gym'])
        make_room(self.far_hotel)
        make_hotel('owner@pending.example', verified=False, name='Pending Palace')

    def test_browse_lists_only_listed_hotels(self):
        response = self.client.get('/api/customer/hotels/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        names = {hotel['name'] for hotel in response.data['data']}
        self.assertEqual(names, {'Seaside Residency', 'Capital Stay'})
        self.assertIn('rooms', response.data['data'][0])

    def test_browse_by_location(self):
        response = self.client.get('/api/customer/hotels/', {'location': 'delhi'})
        self.assertEqual([hotel['name'] for hotel in response.data['data']], ['Capital Stay'])

    def test_search_by_radius(self):
        response = self.client.get('/api/customer/hotels/search/', {
            'latitude': 18.94, 'longitude': 72.82, 'radius': 50, 'sort_by': 'distance',
        })

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([hotel['name'] for hotel in response.data['data']], ['Seaside Residency'])
        self.assertLess(response.data['data'][0]['distance_km'], 1)
        self.assertEqual(response.data['filters']['location']['radius'], 50)

    def test_search_by_amenities(self):
        response = self.client.get('/api/customer/hotels/search/', {'amenities': 'Gym,Spa'})
        self.assertEqual([hotel['name'] for hotel in response.data['data']], ['Capital Stay'])

    def test_search_drops_sold_out_hotels(self):
        make_booking(self.customer, self.room, day(10), day(12), number_of_rooms=2)

        response = self.client.get('/api/customer/hotels/search/', {
            'check_in': day(10).date().isoformat(), 'check_out': day(12).date().isoformat(),
        })
        self.assertEqual([hotel['name'] for hotel in response.data['data']], ['Capital Stay'])
        self.assertEqual(response.data['data'][0]['available_rooms'][0]['available_rooms'], 1)

    def test_search_rejects_half_a_coordinate(self):
        response = self.client.get('/api/customer/hotels/search/', {'latitude': 18.94})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_hotel_detail(self):
        response = self.client.get(f'/api/customer/hotels/{self.hotel.pk}/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['hotel']['name'], 'Seaside Residency')
        self.assertEqual(len(response.data['data']['rooms']), 1)
        self.assertEqual(response.data['data']['rooms'][0]['price_per_night_with_tax'], '1100.00')

    def test_unlisted_hotel_detail_is_not_found(self):
        pending = make_hotel('owner@hidden.example', verified=False)
        response = self.client.get(f'/api/customer/hotels/{pending.pk}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_room_availability(self):
        make_booking(self.customer, self.room, day(10), day(12))

        response = self.client.get('/api/customer/rooms/availability/', {
            'hotel_id': self.hotel.pk,
            'check_in': day(11).date().isoformat(),
            'check_out': day(13).date().isoformat(),
            'rooms': 2,
        })
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data'][0]['available_rooms'], 1)
        self.assertFalse(response.data['data'][0]['is_available'])

    def test_favorites_toggle(self):
        url = f'/api/customer/favorites/{self.hotel.pk}/toggle/'

        added = self.client.post(url)
        self.assertEqual(added.data['data'], {'favorites': [self.hotel.pk], 'action': 'added'})
        self.assertEqual(len(self.client.get('/api/customer/favorites/').data['data']), 1)

        removed = self.client.post(url)
        self.assertEqual(removed.data['data']['action'], 'removed')
        self.assertEqual(removed.data['data']['favorites'], [])


class FeedbackTestCase(CustomerAPITestCase):
    """Reviews and grievances"""

    def review_payload(self, booking, overall=5):
        return {
            'booking': booking.pk,
            'overall': overall,
            'title': 'Lovely stay',
            'comment': 'Clean rooms and friendly staff',
            'stay_type': 'Leisure',
        }

    def test_review_lifecycle_updates_rating(self):
        booking = make_booking(self.customer, self.room, day(-5), day(-3), status=Booking.Status.COMPLETED)

        created = self.client.post('/api/customer/reviews/', self.review_payload(booking, 4))
        self.assertEqual(created.status_code, status.HTTP_201_CREATED)
        self.assertTrue(created.data['data']['is_verified'])
        self.hotel.refresh_from_db()
        self.assertEqual(str(self.hotel.rating_average), '4.0')

        review_id = created.data['data']['id']
        updated = self.client.patch(f'/api/customer/reviews/{review_id}/', {'overall': 2})
        self.assertEqual(updated.status_code, status.HTTP_200_OK)
        self.hotel.refresh_from_db()
        self.assertEqual(str(self.hotel.rating_average), '2.0')

        deleted = self.client.delete(f'/api/customer/reviews/{review_id}/')
        self.assertEqual(deleted.status_code, status.HTTP_200_OK)
        self.hotel.refresh_from_db()
        self.assertEqual(self.hotel.rating_total_reviews, 0)

    def test_short_review_comment_is_rejected(self):
        booking = make_booking(self.customer, self.room, day(-5), day(-3), status=Booking.Status.COMPLETED)
        payload = {**self.review_payload(booking), 'comment': 'ok'}

        response = self.client.post('/api/customer/reviews/', payload)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('comment', response.data['errors'])
        self.assertFalse(Review.objects.filter(booking=booking).exists())

    def test_cannot_review_unfinished_stay(self):
        booking = make_booking(self.customer, self.room, day(10), day(12))

        response = self.client.post('/api/customer/reviews/', self.review_payload(booking))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'You can only review completed stays')

    def test_duplicate_review_conflicts(self):
        booking = make_booking(self.customer, self.room, day(-5), day(-3), status=Booking.Status.CHECKED_OUT)
        self.client.post('/api/customer/reviews/', self.review_payload(booking))

        response = self.client.post('/api/customer/reviews/', self.review_payload(booking))
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_grievance(self):
        booking = make_booking(self.customer, self.room, day(-5), day(-3), status=Booking.Status.COMPLETED)

        response = self.client.post('/api/customer/grievances/', {
            'hotel': self.hotel.pk,
            'booking': booking.pk,
            'subject': 'Noisy room',
            'description': 'Construction noise all night',
            'category': 'noise_complaint',
        })

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        grievance = Grievance.objects.get()
        self.assertTrue(grievance.grievance_number.startswith('GR'))
        self.assertEqual(grievance.status, Grievance.Status.OPEN)
        self.assertEqual(grievance.timeline[0]['action'], 'created')
        self.assertEqual(len(self.client.get('/api/customer/grievances/').data['data']), 1)

    def test_grievance_booking_must_match_hotel(self):
        booking = make_booking(self.customer, self.room, day(-5), day(-3), status=Booking.Status.COMPLETED)
        other = make_hotel('owner@other.example')

        response = self.client.post('/api/customer/grievances/', {
            'hotel': other.pk,
            'booking': booking.pk,
            'subject': 'Wrong hotel',
            'description': 'Mismatch',
            'category': 'other',
        })
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_profile_update(self):
        response = self.client.put('/api/customer/profile/', {'city': 'Pune', 'loyalty_points': 999})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.customer.refresh_from_db()
        self.assertEqual(self.customer.city, 'Pune')
        self.assertEqual(self.customer.loyalty_points, 0)

    def test_support_ticket(self):
        response = self.client.post('/api/customer/support/ticket/', {'subject': 'Help', 'message': 'Question'})
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['subject'], 'Help')
