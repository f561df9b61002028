from datetime import timedelta
from decimal import Decimal

from django.utils import timezone

from hotel_marketplace import pricing
from hotel_marketplace.authentication import create_access_token
from hotel_marketplace.models import Booking, CustomerProfile, Hotel, Room, User

PASSWORD = 'Str0ngPass!'


def day(offset):
    """Midnight UTC ``offset`` days from today."""
    return timezone.now().replace(hour=0, minute=0, second=0, microsecond=0) + timedelta(days=offset)


def make_user(email, role, password=PASSWORD, **extra):
    return User.objects.create_user(username=email, email=email, password=password, role=role, **extra)


def make_customer(email='guest@example.com', **fields):
    user = make_user(email, User.Role.CUSTOMER)
    fields.setdefault('first_name', 'Asha')
    fields.setdefault('last_name', 'Rao')
    fields.setdefault('phone', '+919800011122')
    return CustomerProfile.objects.create(user=user, **fields)


def make_hotel(email='owner@example.com', verified=True, **fields):
    user = make_user(email, User.Role.HOTEL)
    defaults = {
        'name': 'Seaside Residency',
        'description': 'Beachfront hotel',
        'street': '12 Marine Drive',
        'city': 'Mumbai',
        'state': 'Maharashtra',
        'country': 'India',
        'zip_code': '400020',
        'latitude': 18.9430,
        'longitude': 72.8230,
        'phone': '+912222001234',
        'email': email,
        'price_min': Decimal('1000'),
        'price_max': Decimal('5000'),
        'is_verified': verified,
    }
    defaults.update(fields)
    return Hotel.objects.create(user=user, **defaults)


def make_room(hotel, **fields):
    defaults = {
        'name': 'Standard Double',
        'room_type': Room.RoomType.DOUBLE,
        'description': 'Double room',
        'base_price': Decimal('1000'),
        'tax_percent': Decimal('10'),
        'service_fee': Decimal('50'),
        'capacity_adults': 2,
        'total_rooms': 1,
    }
    defaults.update(fields)
    return Room.objects.create(hotel=hotel, **defaults)


def make_booking(customer, room, check_in, check_out, number_of_rooms=1,
                 status=Booking.Status.PENDING, **fields):
    """Insert a booking directly, priced from the room, bypassing the availability check."""
    quote = pricing.quote(room, check_in, check_out, number_of_rooms)
    defaults = {
        'room_price': quote.base,
        'taxes': quote.taxes,
        'service_fee': quote.service_fee,
        'total_amount': quote.total,
        'deposit_amount': quote.deposit_amount,
        'adults': 1,
        'contact_email': customer.user.email,
        'contact_phone': customer.phone,
    }
    defaults.update(fields)
    return Booking.objects.create(
        customer=customer,
        hotel=room.hotel,
        room=room,
        check_in=check_in,
        check_out=check_out,
        number_of_rooms=number_of_rooms,
        status=status,
        **defaults,
    )


def bearer(user):
    return f'Bearer {create_access_token(user)}'
