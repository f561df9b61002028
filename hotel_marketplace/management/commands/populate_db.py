from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from hotel_marketplace.models import CustomerProfile, Hotel, Room, User

DEFAULT_PASSWORD = 'Password123!'


class Command(BaseCommand):
    help = 'Populate database with a sample admin, a verified hotel with rooms and a customer'

    def add_arguments(self, parser):
        parser.add_argument('--password', default=DEFAULT_PASSWORD, help='Password for every seeded account')

    def _user(self, email, role, password, **extra):
        user, created = User.objects.get_or_create(
            email=email,
            defaults={'username': email, 'role': role, 'is_verified': True, **extra},
        )
        if created:
            user.set_password(password)
            user.save()
            self.stdout.write(f'Created {role}: {email}')
        else:
            self.stdout.write(f'User {email} already exists')
        return user

    @transaction.atomic
    def handle(self, *args, **options):
        password = options['password']

        admin = self._user('admin@hotelbooking.local', User.Role.ADMIN, password, is_staff=True, is_superuser=True)

        owner = self._user('owner@seaside.example', User.Role.HOTEL, password)
        hotel, _ = Hotel.objects.get_or_create(
            user=owner,
            defaults={
                'name': 'Seaside Residency',
                'description': 'Beachfront hotel with sea-facing rooms',
                'street': '12 Marine Drive',
                'city': 'Mumbai',
                'state': 'Maharashtra',
                'country': 'India',
                'zip_code': '400020',
                'latitude': 18.9430,
                'longitude': 72.8230,
                'amenities': ['WiFi', 'Pool', 'Restaurant', 'Parking'],
                'phone': '+912222001234',
                'email': 'owner@seaside.example',
                'price_min': Decimal('2500'),
                'price_max': Decimal('12000'),
                'is_verified': True,
                'verified_at': timezone.now(),
                'verified_by': admin,
            },
        )

        rooms_data = [
            {
                'name': 'Standard Double',
                'room_type': Room.RoomType.DOUBLE,
                'description': 'Comfortable double room with city view',
                'base_price': Decimal('2500'),
                'tax_percent': Decimal('12'),
                'capacity_adults': 2,
                'total_rooms': 10,
            },
            {
                'name': 'Deluxe Sea View',
                'room_type': Room.RoomType.DELUXE,
                'description': 'Spacious deluxe room facing the sea',
                'base_price': Decimal('5000'),
                'tax_percent': Decimal('18'),
                'service_fee': Decimal('250'),
                'capacity_adults': 3,
                'capacity_children': 1,
                'total_rooms': 6,
            },
            {
                'name': 'Presidential Suite',
                'room_type': Room.RoomType.PRESIDENTIAL_SUITE,
                'description': 'Top floor suite with all amenities',
                'base_price': Decimal('12000'),
                'tax_percent': Decimal('18'),
                'service_fee': Decimal('1000'),
                'capacity_adults': 4,
                'capacity_children': 2,
                'total_rooms': 1,
            },
        ]

        for room_data in rooms_data:
            room, created = Room.objects.get_or_create(hotel=hotel, name=room_data['name'], defaults=room_data)
            if created:
                self.stdout.write(f'Created room: {room}')
            else:
                self.stdout.write(f'Room {room} already exists')

        customer = self._user('guest@example.com', User.Role.CUSTOMER, password)
        CustomerProfile.objects.get_or_create(
            user=customer,
            defaults={'first_name': 'Asha', 'last_name': 'Rao', 'phone': '+919800011122'},
        )

        self.stdout.write(
            self.style.SUCCESS('Successfully populated database with sample data')
        )
