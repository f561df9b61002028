from datetime import datetime, timedelta
from datetime import timezone as dt_timezone
from decimal import Decimal

from django.test import SimpleTestCase
from rest_framework.exceptions import ValidationError

from hotel_marketplace import pricing
from hotel_marketplace.models import Room


class QuoteTestCase(SimpleTestCase):
    """Quotes computed from an unsaved room"""

    def setUp(self):
        self.room = Room(
            base_price=Decimal('1000'),
            tax_percent=Decimal('10'),
            service_fee=Decimal('50'),
            currency='INR',
        )
        self.check_in = datetime(2030, 1, 1, tzinfo=dt_timezone.utc)

    def test_two_nights_one_room(self):
        quote = pricing.quote(self.room, self.check_in, self.check_in + timedelta(days=2), 1)

        self.assertEqual(quote.nights, 2)
        self.assertEqual(quote.base, Decimal('2000.00'))
        self.assertEqual(quote.taxes, Decimal('200.00'))
        self.assertEqual(quote.service_fee, Decimal('50.00'))
        self.assertEqual(quote.discount, Decimal('0.00'))
        self.assertEqual(quote.total, Decimal('2250.00'))
        self.assertEqual(quote.deposit_amount, Decimal('450'))
        self.assertEqual(quote.currency, 'INR')

    def test_room_count_multiplies_base_not_fee(self):
        quote = pricing.quote(self.room, self.check_in, self.check_in + timedelta(days=2), 3)

        self.assertEqual(quote.base, Decimal('6000.00'))
        self.assertEqual(quote.taxes, Decimal('600.00'))
        self.assertEqual(quote.total, Decimal('6650.00'))

    def test_partial_day_counts_as_full_night(self):
        quote = pricing.quote(self.room, self.check_in, self.check_in + timedelta(days=1, hours=1), 1)
        self.assertEqual(quote.nights, 2)

    def test_inverted_range_is_rejected(self):
        with self.assertRaises(ValidationError):
            pricing.quote(self.room, self.check_in, self.check_in, 1)

    def test_zero_rooms_is_rejected(self):
        with self.assertRaises(ValidationError):
            pricing.quote(self.room, self.check_in, self.check_in + timedelta(days=1), 0)

    def test_promo_code_is_case_insensitive(self):
        quote = pricing.quote(self.room, self.check_in, self.check_in + timedelta(days=2), 1, 'welcome10')

        self.assertEqual(quote.promo_code, 'WELCOME10')
        self.assertEqual(quote.discount, Decimal('200.00'))
        self.assertEqual(quote.total, Decimal('2050.00'))
        self.assertEqual(quote.deposit_amount, Decimal('410'))


class PromoTestCase(SimpleTestCase):

    def test_discount_is_capped(self):
        code, discount = pricing.promo_discount('WELCOME10', Decimal('6000'))
        self.assertEqual(code, 'WELCOME10')
        self.assertEqual(discount, Decimal('500.00'))

    def test_discount_below_cap(self):
        _, discount = pricing.promo_discount('WELCOME10', Decimal('1234'))
        self.assertEqual(discount, Decimal('123.40'))

    def test_unknown_code_is_rejected(self):
        with self.assertRaises(ValidationError) as ctx:
            pricing.promo_discount('FAKE20', Decimal('6000'))
        self.assertIn('promo_code', ctx.exception.detail)


class RefundTestCase(SimpleTestCase):
    """Tiered refunds by hours remaining before check-in"""

    def test_refund_tiers(self):
        scenarios = [
            (30, Decimal('800.00')),
            (24.5, Decimal('800.00')),
            (24, Decimal('500.00')),
            (18, Decimal('500.00')),
            (12, Decimal('0.00')),
            (6, Decimal('0.00')),
            (-5, Decimal('0.00')),
        ]
        for hours, expected in scenarios:
            with self.subTest(hours=hours):
                self.assertEqual(pricing.refund_for(Decimal('1000'), hours), expected)

    def test_policy_label(self):
        self.assertEqual(pricing.refund_policy_label(48), '80% refund')
        self.assertEqual(pricing.refund_policy_label(20), '50% refund')
        self.assertEqual(pricing.refund_policy_label(2), 'No refund')

    def test_deposit_rounds_half_up_to_whole_unit(self):
        self.assertEqual(pricing.deposit_for(Decimal('2250.00')), Decimal('450'))
        self.assertEqual(pricing.deposit_for(Decimal('1002.50')), Decimal('201'))
