"""
Price quotes, promo discounts, deposits and cancellation refunds.

All amounts are ``Decimal``; taxes, discounts and refunds are rounded to
cents, deposits to a whole currency unit.
"""
from dataclasses import asdict, dataclass
from decimal import ROUND_HALF_UP, Decimal

from rest_framework.exceptions import ValidationError

from .models import Booking

CENTS = Decimal('0.01')
WHOLE = Decimal('1')

DEPOSIT_FRACTION = Decimal('0.20')

# code -> (fraction of the base price, absolute cap)
PROMO_CODES = {
    'WELCOME10': (Decimal('0.10'), Decimal('500')),
}

# (hours until check-in strictly greater than, refunded fraction), checked in order
REFUND_TIERS = (
    (24, Decimal('0.80')),
    (12, Decimal('0.50')),
)


def to_cents(amount):
    return Decimal(amount).quantize(CENTS, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class Quote:
    nights: int
    base: Decimal
    taxes: Decimal
    service_fee: Decimal
    discount: Decimal
    total: Decimal
    deposit_amount: Decimal
    currency: str
    promo_code: str = ''

    def as_dict(self):
        return asdict(self)


def count_nights(check_in, check_out):
    """Nights between two instants; any partial day counts as a full night."""
    nights = Booking.nights_between(check_in, check_out)
    if nights <= 0:
        raise ValidationError("check_out must be after check_in")
    return nights


def promo_discount(code, base):
    """Discount granted by ``code`` on ``base``; unknown codes are rejected."""
    normalized = (code or '').strip().upper()
    if normalized not in PROMO_CODES:
        raise ValidationError({'promo_code': f"Invalid promo code: {code}"})
    fraction, cap = PROMO_CODES[normalized]
    return normalized, to_cents(min(base * fraction, cap))


def deposit_for(total):
    return (total * DEPOSIT_FRACTION).quantize(WHOLE, rounding=ROUND_HALF_UP)


def quote(room, check_in, check_out, number_of_rooms, promo_code=None):
    if number_of_rooms < 1:
        raise ValidationError({'number_of_rooms': "At least one room is required"})
    nights = count_nights(check_in, check_out)
    base = to_cents(room.base_price * nights * number_of_rooms)
    taxes = to_cents(base * Decimal(room.tax_percent) / 100)
    service_fee = to_cents(room.service_fee or 0)

    code, discount = '', Decimal('0.00')
    if promo_code is not None and promo_code != '':
        code, discount = promo_discount(promo_code, base)

    total = base + taxes + service_fee - discount
    return Quote(
        nights=nights,
        base=base,
        taxes=taxes,
        service_fee=service_fee,
        discount=discount,
        total=total,
        deposit_amount=deposit_for(total),
        currency=room.currency,
        promo_code=code,
    )


def refund_fraction(hours_until_check_in):
    for threshold, fraction in REFUND_TIERS:
        if hours_until_check_in > threshold:
            return fraction
    return Decimal('0')


def refund_for(total, hours_until_check_in):
    return to_cents(Decimal(total) * refund_fraction(hours_until_check_in))


def refund_policy_label(hours_until_check_in):
    fraction = refund_fraction(hours_until_check_in)
    if not fraction:
        return 'No refund'
    return f'{int(fraction * 100)}% refund'
