import secrets
from datetime import date, datetime, time
from datetime import timezone as dt_timezone
from decimal import Decimal

from django.contrib.auth.password_validation import validate_password
from django.db import transaction
from django.utils import timezone
from django.utils.dateparse import parse_date
from rest_framework import serializers

from .exceptions import Conflict
from .models import Booking, CustomerProfile, Grievance, Hotel, Review, Room, User
from .pricing import to_cents


class FlexibleDateTimeField(serializers.DateTimeField):
    """Accepts full ISO datetimes as well as plain ``YYYY-MM-DD`` dates (midnight UTC)."""

    def to_internal_value(self, value):
        if isinstance(value, datetime):
            return super().to_internal_value(value)
        if isinstance(value, date):
            return datetime.combine(value, time.min, tzinfo=dt_timezone.utc)
        if isinstance(value, str) and len(value) == 10:
            parsed = parse_date(value)
            if parsed is not None:
                return datetime.combine(parsed, time.min, tzinfo=dt_timezone.utc)
        return super().to_internal_value(value)


def validate_date_range(data, instance=None):
    check_in = data.get('check_in') or getattr(instance, 'check_in', None)
    check_out = data.get('check_out') or getattr(instance, 'check_out', None)
    if check_in and check_out and check_out <= check_in:
        raise serializers.ValidationError("check_out must be after check_in")
    return data


# Accounts

class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ['id', 'email', 'role', 'is_verified', 'is_active', 'last_login', 'date_joined']
        read_only_fields = fields


class RegisterSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, min_length=6)
    role = serializers.ChoiceField(choices=[User.Role.CUSTOMER, User.Role.HOTEL])
    first_name = serializers.CharField(max_length=50, required=False)
    last_name = serializers.CharField(max_length=50, required=False)
    phone = serializers.RegexField(r'^\+?[1-9]\d{0,15}$', max_length=20)
    hotel_name = serializers.CharField(max_length=100, required=False)

    def validate_email(self, value):
        value = value.lower()
        if User.objects.filter(email__iexact=value).exists():
            raise Conflict("User with this email already exists")
        return value

    def validate(self, data):
        if data['role'] == User.Role.CUSTOMER:
            missing = [field for field in ('first_name', 'last_name') if not data.get(field)]
            if missing:
                raise serializers.ValidationError({field: "This field is required." for field in missing})
        elif not data.get('hotel_name'):
            raise serializers.ValidationError({'hotel_name': "This field is required."})
        validate_password(data['password'])
        return data

    @transaction.atomic
    def create(self, validated):
        user = User.objects.create_user(
            username=validated['email'],
            email=validated['email'],
            password=validated['password'],
            role=validated['role'],
            verification_token=secrets.token_hex(32),
        )
        if user.role == User.Role.CUSTOMER:
            CustomerProfile.objects.create(
                user=user,
                first_name=validated['first_name'],
                last_name=validated['last_name'],
                phone=validated['phone'],
            )
        else:
            # Placeholder listing; the hotel fills it in before verification.
            Hotel.objects.create(
                user=user,
                name=validated['hotel_name'],
                description='Hotel description to be updated',
                street='To be updated',
                city='To be updated',
                state='To be updated',
                country='To be updated',
                zip_code='To be updated',
                phone=validated['phone'],
                email=user.email,
                price_min=0,
                price_max=1000,
            )
        return user


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)


class TokenSerializer(serializers.Serializer):
    token = serializers.CharField()


class EmailSerializer(serializers.Serializer):
    email = serializers.EmailField()


class ResetPasswordSerializer(serializers.Serializer):
    token = serializers.CharField()
    password = serializers.CharField(write_only=True, min_length=6)


class ChangePasswordSerializer(serializers.Serializer):
    current_password = serializers.CharField(write_only=True)
    new_password = serializers.CharField(write_only=True, min_length=6)


# Profiles

class CustomerProfileSerializer(serializers.ModelSerializer):
    email = serializers.EmailField(source='user.email', read_only=True)
    full_name = serializers.CharField(read_only=True)

    class Meta:
        model = CustomerProfile
        exclude = ['user', 'favorites']
        read_only_fields = ['profile_image', 'loyalty_points', 'created_at', 'updated_at']


class HotelSerializer(serializers.ModelSerializer):
    class Meta:
        model = Hotel
        exclude = ['user', 'verified_by']
        read_only_fields = [
            'images', 'rating_average', 'rating_total_reviews', 'is_verified', 'is_active',
            'verified_at', 'rejection_reason', 'rejected_at', 'created_at', 'updated_at',
        ]

    def validate_amenities(self, value):
        unknown = [item for item in value if item not in Hotel.Amenity.values]
        if unknown:
            raise serializers.ValidationError(f"Unknown amenities: {', '.join(map(str, unknown))}")
        return value

    def validate(self, data):
        price_min = data.get('price_min', getattr(self.instance, 'price_min', None))
        price_max = data.get('price_max', getattr(self.instance, 'price_max', None))
        if price_min is not None and price_max is not None and price_max < price_min:
            raise serializers.ValidationError({'price_max': "Maximum price must not be below minimum price"})
        return data


class AdminHotelSerializer(HotelSerializer):
    owner_email = serializers.EmailField(source='user.email', read_only=True)
    owner_active = serializers.BooleanField(source='user.is_active', read_only=True)

    class Meta(HotelSerializer.Meta):
        exclude = ['user']


class HotelSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Hotel
        fields = ['id', 'name', 'city', 'state', 'country', 'images', 'phone', 'email',
                  'rating_average', 'rating_total_reviews']


# Rooms

class RoomSerializer(serializers.ModelSerializer):

    class Meta:
        model = Room
        fields = '__all__'
        read_only_fields = ['hotel', 'images', 'created_at', 'updated_at']

    def to_representation(self, instance):
        data = super().to_representation(instance)
        data['price_per_night_with_tax'] = str(
            to_cents(Decimal(instance.base_price) * (100 + Decimal(instance.tax_percent)) / 100)
        )
        return data


class RoomSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Room
        fields = ['id', 'name', 'room_type', 'images', 'base_price', 'currency']


class RoomAvailabilityToggleSerializer(serializers.Serializer):
    is_available = serializers.BooleanField()


# Bookings

class BookingSerializer(serializers.ModelSerializer):
    room = RoomSummarySerializer(read_only=True)
    hotel = HotelSummarySerializer(read_only=True)
    customer_name = serializers.CharField(source='customer.full_name', read_only=True)

    class Meta:
        model = Booking
        fields = [
            'id', 'reference', 'status', 'customer', 'customer_name', 'hotel', 'room',
            'check_in', 'check_out', 'total_nights', 'adults', 'children', 'infants',
            'number_of_rooms', 'guest_details', 'contact_email', 'contact_phone',
            'emergency_contact', 'special_requests', 'additional_requests',
            'confirmed_at', 'actual_check_in', 'check_in_notes', 'actual_check_out',
            'check_out_notes', 'created_at', 'updated_at',
        ]
        read_only_fields = fields

    def to_representation(self, instance):
        data = super().to_representation(instance)
        money = serializers.DecimalField(max_digits=12, decimal_places=2)
        data['pricing'] = {
            'room_price': money.to_representation(instance.room_price),
            'taxes': money.to_representation(instance.taxes),
            'service_fee': money.to_representation(instance.service_fee),
            'discount_amount': money.to_representation(instance.discount_amount),
            'discount_reason': instance.discount_reason,
            'total_amount': money.to_representation(instance.total_amount),
            'currency': instance.currency,
            'payment_status': instance.payment_status,
            'payment_method': instance.payment_method,
            'deposit_amount': money.to_representation(instance.deposit_amount),
            'deposit_paid': instance.deposit_paid,
            'damage_charges': money.to_representation(instance.damage_charges),
        }
        data['cancellation'] = None
        if instance.is_cancelled:
            data['cancellation'] = {
                'cancelled_at': serializers.DateTimeField().to_representation(instance.cancelled_at),
                'cancelled_by': instance.cancelled_by,
                'reason': instance.cancellation_reason,
                'refund_amount': (
                    money.to_representation(instance.refund_amount)
                    if instance.refund_amount is not None else None
                ),
                'refund_status': instance.refund_status,
            }
        return data


class BookingCreateSerializer(serializers.Serializer):
    room_id = serializers.IntegerField()
    check_in = FlexibleDateTimeField()
    check_out = FlexibleDateTimeField()
    number_of_rooms = serializers.IntegerField(min_value=1, default=1)
    adults = serializers.IntegerField(min_value=1)
    children = serializers.IntegerField(min_value=0, default=0)
    infants = serializers.IntegerField(min_value=0, default=0)
    guest_details = serializers.ListField(child=serializers.DictField(), required=False, default=list)
    contact_email = serializers.EmailField()
    contact_phone = serializers.RegexField(r'^\+?[1-9]\d{0,15}$', max_length=20)
    emergency_contact = serializers.DictField(required=False, default=dict)
    special_requests = serializers.CharField(max_length=500, required=False, allow_blank=True, default='')
    promo_code = serializers.CharField(max_length=50, required=False, allow_blank=True)

    def validate_check_in(self, value):
        today = timezone.now().replace(hour=0, minute=0, second=0, microsecond=0)
        if value < today:
            raise serializers.ValidationError("Check-in date cannot be in the past")
        return value

    def validate(self, data):
        return validate_date_range(data)


class QuoteRequestSerializer(serializers.Serializer):
    room_id = serializers.IntegerField()
    check_in = FlexibleDateTimeField()
    check_out = FlexibleDateTimeField()
    number_of_rooms = serializers.IntegerField(min_value=1, default=1)
    promo_code = serializers.CharField(max_length=50, required=False, allow_blank=True)

    def validate(self, data):
        return validate_date_range(data)


class QuoteSerializer(serializers.Serializer):
    nights = serializers.IntegerField()
    base = serializers.DecimalField(max_digits=12, decimal_places=2)
    taxes = serializers.DecimalField(max_digits=12, decimal_places=2)
    service_fee = serializers.DecimalField(max_digits=12, decimal_places=2)
    discount = serializers.DecimalField(max_digits=12, decimal_places=2)
    total = serializers.DecimalField(max_digits=12, decimal_places=2)
    deposit_amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    currency = serializers.CharField()
    promo_code = serializers.CharField()


class ModifyBookingSerializer(serializers.Serializer):
    check_in = FlexibleDateTimeField()
    check_out = FlexibleDateTimeField()
    number_of_rooms = serializers.IntegerField(min_value=1, required=False)

    def validate(self, data):
        return validate_date_range(data)


class CancelBookingSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=500, required=False, allow_blank=True, default='')
    refund_amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False)


class PromoSerializer(serializers.Serializer):
    code = serializers.CharField(max_length=50)


class DepositSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)


class BookingRequestSerializer(serializers.Serializer):
    request_type = serializers.CharField(max_length=50, default='special')
    note = serializers.CharField(max_length=500)


class CheckInSerializer(serializers.Serializer):
    notes = serializers.CharField(required=False, allow_blank=True, default='')


class CheckOutSerializer(serializers.Serializer):
    notes = serializers.CharField(required=False, allow_blank=True, default='')
    damage_charges = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False)


class BookingDecisionSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[Booking.Status.CONFIRMED, Booking.Status.REJECTED])


class HotelBookingEditSerializer(serializers.Serializer):
    """Fields a hotel may correct on a booking; new dates go through a re-quote."""
    check_in = FlexibleDateTimeField(required=False)
    check_out = FlexibleDateTimeField(required=False)
    number_of_rooms = serializers.IntegerField(min_value=1, required=False)
    guest_details = serializers.ListField(child=serializers.DictField(), required=False)
    contact_email = serializers.EmailField(required=False)
    contact_phone = serializers.RegexField(r'^\+?[1-9]\d{0,15}$', max_length=20, required=False)
    emergency_contact = serializers.DictField(required=False)
    special_requests = serializers.CharField(max_length=500, required=False, allow_blank=True)
    payment_status = serializers.ChoiceField(choices=Booking.PaymentStatus.choices, required=False)
    payment_method = serializers.ChoiceField(choices=Booking.PaymentMethod.choices, required=False)

    def validate(self, data):
        return validate_date_range(data, self.instance)


# Reviews

class ReviewSerializer(serializers.ModelSerializer):
    booking = serializers.PrimaryKeyRelatedField(queryset=Booking.objects.all())
    customer_name = serializers.CharField(source='customer.full_name', read_only=True)
    hotel_name = serializers.CharField(source='hotel.name', read_only=True)

    class Meta:
        model = Review
        fields = '__all__'
        read_only_fields = [
            'customer', 'hotel', 'room_type', 'stay_nights', 'stay_check_in', 'stay_check_out',
            'response_message', 'responded_at', 'responded_by', 'is_verified', 'is_approved',
            'moderation_notes', 'created_at', 'updated_at',
        ]
        extra_kwargs = {'comment': {'min_length': 10}}

    def get_fields(self):
        fields = super().get_fields()
        if self.instance is not None:
            fields['booking'].read_only = True
        return fields


class ReviewResponseSerializer(serializers.Serializer):
    message = serializers.CharField(max_length=500)


class ReviewApprovalSerializer(serializers.Serializer):
    is_approved = serializers.BooleanField()
    moderation_notes = serializers.CharField(max_length=300, required=False, allow_blank=True, default='')


# Grievances

class GrievanceSerializer(serializers.ModelSerializer):
    customer_name = serializers.CharField(source='customer.full_name', read_only=True)
    hotel_name = serializers.CharField(source='hotel.name', read_only=True)

    class Meta:
        model = Grievance
        fields = '__all__'
        read_only_fields = [
            'grievance_number', 'customer', 'status', 'timeline', 'admin_response',
            'responded_at', 'resolved_at', 'closed_at', 'created_at', 'updated_at',
        ]

    def validate(self, data):
        booking = data.get('booking')
        if booking is not None:
            customer = self.context['customer']
            if booking.customer_id != customer.pk:
                raise serializers.ValidationError({'booking': "Booking not found"})
            if booking.hotel_id != data['hotel'].pk:
                raise serializers.ValidationError({'booking': "Booking does not belong to this hotel"})
        return data


class GrievanceStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Grievance.Status.choices)
    response = serializers.CharField(required=False, allow_blank=True)


class SupportTicketSerializer(serializers.Serializer):
    subject = serializers.CharField(max_length=200)
    message = serializers.CharField(max_length=2000)


# Admin

class ActiveFlagSerializer(serializers.Serializer):
    is_active = serializers.BooleanField()


class HotelVerificationSerializer(serializers.Serializer):
    is_verified = serializers.BooleanField()
    rejection_reason = serializers.CharField(required=False, allow_blank=True, default='')


# Query parameters

class HotelSearchSerializer(serializers.Serializer):
    SORT_CHOICES = ['rating', 'price_low', 'price_high', 'newest', 'distance']

    latitude = serializers.FloatField(min_value=-90, max_value=90, required=False)
    longitude = serializers.FloatField(min_value=-180, max_value=180, required=False)
    radius = serializers.FloatField(min_value=0, default=10)
    check_in = FlexibleDateTimeField(required=False)
    check_out = FlexibleDateTimeField(required=False)
    guests = serializers.IntegerField(min_value=1, default=1)
    rooms = serializers.IntegerField(min_value=1, default=1)
    min_price = serializers.DecimalField(max_digits=10, decimal_places=2, required=False)
    max_price = serializers.DecimalField(max_digits=10, decimal_places=2, required=False)
    amenities = serializers.CharField(required=False, allow_blank=True)
    rating = serializers.FloatField(min_value=0, max_value=5, required=False)
    sort_by = serializers.ChoiceField(choices=SORT_CHOICES, default='rating')

    def validate_amenities(self, value):
        return [item.strip() for item in value.split(',') if item.strip()]

    def validate(self, data):
        if ('latitude' in data) != ('longitude' in data):
            raise serializers.ValidationError("latitude and longitude must be given together")
        if ('check_in' in data) != ('check_out' in data):
            raise serializers.ValidationError("check_in and check_out must be given together")
        return validate_date_range(data)


class HotelBrowseSerializer(serializers.Serializer):
    location = serializers.CharField(required=False, allow_blank=True)
    min_price = serializers.DecimalField(max_digits=10, decimal_places=2, required=False)
    max_price = serializers.DecimalField(max_digits=10, decimal_places=2, required=False)
    min_rating = serializers.FloatField(min_value=0, max_value=5, required=False)


class RoomAvailabilityQuerySerializer(serializers.Serializer):
    hotel_id = serializers.IntegerField()
    room_id = serializers.IntegerField(required=False)
    check_in = FlexibleDateTimeField()
    check_out = FlexibleDateTimeField()
    rooms = serializers.IntegerField(min_value=1, default=1)

    def validate(self, data):
        return validate_date_range(data)
