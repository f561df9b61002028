import math
import secrets
import time

from django.contrib.auth.models import AbstractUser
from django.core.validators import MaxValueValidator, MinValueValidator, RegexValidator
from django.db import models
from django.db.models import F, Q

PHONE_VALIDATOR = RegexValidator(r'^\+?[1-9]\d{0,15}$', 'Please enter a valid phone number')
TIME_VALIDATOR = RegexValidator(r'^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$', 'Invalid time format')
RATING_VALIDATORS = [MinValueValidator(1), MaxValueValidator(5)]

BASE36 = '0123456789abcdefghijklmnopqrstuvwxyz'


def to_base36(number):
    digits = ''
    while True:
        number, remainder = divmod(number, 36)
        digits = BASE36[remainder] + digits
        if not number:
            return digits


def generate_reference(prefix):
    """Human readable id: prefix + base36 millisecond timestamp + 5 random chars."""
    timestamp = to_base36(int(time.time() * 1000))
    random_part = ''.join(secrets.choice(BASE36) for _ in range(5))
    return f'{prefix}{timestamp}{random_part}'.upper()


class Currency(models.TextChoices):
    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    INR = "INR"
    CAD = "CAD"
    AUD = "AUD"


class User(AbstractUser):
    class Role(models.TextChoices):
        CUSTOMER = "customer"
        HOTEL = "hotel"
        ADMIN = "admin"

    email = models.EmailField(unique=True)
    role = models.CharField(max_length=10, choices=Role.choices, default=Role.CUSTOMER)
    is_verified = models.BooleanField(default=False)
    verification_token = models.CharField(max_length=64, blank=True)
    password_reset_token = models.CharField(max_length=64, blank=True)
    password_reset_expires = models.DateTimeField(null=True, blank=True)

    @property
    def display_name(self):
        if self.role == self.Role.CUSTOMER and hasattr(self, 'customer_profile'):
            return self.customer_profile.full_name
        if self.role == self.Role.HOTEL and hasattr(self, 'hotel'):
            return self.hotel.name
        return self.email


class CustomerProfile(models.Model):
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name="customer_profile")
    first_name = models.CharField(max_length=50)
    last_name = models.CharField(max_length=50)
    phone = models.CharField(max_length=20, validators=[PHONE_VALIDATOR])
    date_of_birth = models.DateField(null=True, blank=True)
    street = models.CharField(max_length=200, blank=True)
    city = models.CharField(max_length=100, blank=True)
    state = models.CharField(max_length=100, blank=True)
    country = models.CharField(max_length=100, blank=True)
    zip_code = models.CharField(max_length=20, blank=True)
    notify_email = models.BooleanField(default=True)
    notify_sms = models.BooleanField(default=False)
    search_radius_km = models.PositiveIntegerField(default=10)
    profile_image = models.CharField(max_length=255, blank=True)
    loyalty_points = models.PositiveIntegerField(default=0)
    favorites = models.ManyToManyField("Hotel", blank=True, related_name="favorited_by")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    @property
    def full_name(self):
        return f'{self.first_name} {self.last_name}'.strip()

    def __str__(self):
        return self.full_name


class Hotel(models.Model):
    class Amenity(models.TextChoices):
        WIFI = "WiFi"
        PARKING = "Parking"
        POOL = "Pool"
        GYM = "Gym"
        SPA = "Spa"
        RESTAURANT = "Restaurant"
        BAR = "Bar"
        ROOM_SERVICE = "Room Service"
        LAUNDRY = "Laundry"
        PET_FRIENDLY = "Pet Friendly"
        BUSINESS_CENTER = "Business Center"
        CONFERENCE_ROOM = "Conference Room"
        AIRPORT_SHUTTLE = "Airport Shuttle"
        CONCIERGE = "Concierge"
        AIR_CONDITIONING = "Air Conditioning"
        HEATING = "Heating"

    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name="hotel")
    name = models.CharField(max_length=100)
    description = models.TextField(max_length=1000)
    street = models.CharField(max_length=200)
    city = models.CharField(max_length=100)
    state = models.CharField(max_length=100)
    country = models.CharField(max_length=100)
    zip_code = models.CharField(max_length=20)
    latitude = models.FloatField(default=0, validators=[MinValueValidator(-90), MaxValueValidator(90)])
    longitude = models.FloatField(default=0, validators=[MinValueValidator(-180), MaxValueValidator(180)])
    amenities = models.JSONField(default=list, blank=True)
    specialties = models.JSONField(default=list, blank=True)
    images = models.JSONField(default=list, blank=True)
    phone = models.CharField(max_length=20, validators=[PHONE_VALIDATOR])
    email = models.EmailField()
    website = models.URLField(blank=True)
    rating_average = models.DecimalField(max_digits=2, decimal_places=1, default=0)
    rating_total_reviews = models.PositiveIntegerField(default=0)
    price_min = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    price_max = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    currency = models.CharField(max_length=3, choices=Currency.choices, default=Currency.INR)
    check_in_time = models.CharField(max_length=5, default="15:00", validators=[TIME_VALIDATOR])
    check_out_time = models.CharField(max_length=5, default="11:00", validators=[TIME_VALIDATOR])
    cancellation_policy = models.TextField(max_length=500, blank=True)
    children_policy = models.TextField(max_length=300, blank=True)
    pets_policy = models.TextField(max_length=300, blank=True)
    is_verified = models.BooleanField(default=False)
    is_active = models.BooleanField(default=True)
    verified_at = models.DateTimeField(null=True, blank=True)
    verified_by = models.ForeignKey(
        User, null=True, blank=True, on_delete=models.SET_NULL, related_name="verified_hotels"
    )
    rejection_reason = models.TextField(blank=True)
    rejected_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [models.Index(fields=["is_verified", "is_active"])]

    @property
    def is_listed(self):
        return self.is_verified and self.is_active

    def __str__(self):
        return self.name


class Room(models.Model):
    class RoomType(models.TextChoices):
        SINGLE = "Single"
        DOUBLE = "Double"
        TWIN = "Twin"
        TRIPLE = "Triple"
        QUAD = "Quad"
        SUITE = "Suite"
        PRESIDENTIAL_SUITE = "Presidential Suite"
        DELUXE = "Deluxe"
        STANDARD = "Standard"
        ECONOMY = "Economy"
        FAMILY_ROOM = "Family Room"

    class Status(models.TextChoices):
        READY = "ready"
        OCCUPIED = "occupied"
        MAINTENANCE = "maintenance"
        BLOCKED = "blocked"
        CLEANING = "cleaning"

    hotel = models.ForeignKey(Hotel, on_delete=models.CASCADE, related_name="rooms")
    room_type = models.CharField(max_length=30, choices=RoomType.choices)
    name = models.CharField(max_length=100)
    description = models.TextField(max_length=500)
    amenities = models.JSONField(default=list, blank=True)
    images = models.JSONField(default=list, blank=True)
    size_value = models.PositiveIntegerField(null=True, blank=True)
    size_unit = models.CharField(max_length=4, choices=[("sqft", "sqft"), ("sqm", "sqm")], default="sqft")
    bed_configuration = models.JSONField(default=list, blank=True)
    base_price = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])
    currency = models.CharField(max_length=3, choices=Currency.choices, default=Currency.INR)
    tax_percent = models.DecimalField(
        max_digits=5, decimal_places=2, default=0, validators=[MinValueValidator(0), MaxValueValidator(100)]
    )
    service_fee = models.DecimalField(max_digits=10, decimal_places=2, default=0, validators=[MinValueValidator(0)])
    capacity_adults = models.PositiveIntegerField(validators=[MinValueValidator(1), MaxValueValidator(10)])
    capacity_children = models.PositiveIntegerField(default=0, validators=[MaxValueValidator(5)])
    capacity_infants = models.PositiveIntegerField(default=0, validators=[MaxValueValidator(2)])
    total_rooms = models.PositiveIntegerField()
    status = models.CharField(max_length=12, choices=Status.choices, default=Status.READY)
    floor = models.PositiveIntegerField(null=True, blank=True)
    smoking_allowed = models.BooleanField(default=False)
    is_active = models.BooleanField(default=True)
    is_available = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [models.Index(fields=["hotel", "is_active"])]

    def __str__(self):
        return f'{self.name} ({self.room_type})'


class Booking(models.Model):
    class Status(models.TextChoices):
        PENDING = "pending"
        CONFIRMED = "confirmed"
        REJECTED = "rejected"
        CANCELLED = "cancelled"
        CHECKED_IN = "checked_in"
        CHECKED_OUT = "checked_out"
        COMPLETED = "completed"
        NO_SHOW = "no_show"

        @property
        def holds_inventory(self):
            return self in (Booking.Status.PENDING, Booking.Status.CONFIRMED)

        @property
        def is_terminal(self):
            return self in (
                Booking.Status.CANCELLED, Booking.Status.REJECTED,
                Booking.Status.COMPLETED, Booking.Status.NO_SHOW,
            )

        @classmethod
        def holding(cls):
            return [status for status in cls if status.holds_inventory]

    class PaymentStatus(models.TextChoices):
        PENDING = "pending"
        PAID = "paid"
        PARTIALLY_PAID = "partially_paid"
        REFUNDED = "refunded"
        FAILED = "failed"

    class PaymentMethod(models.TextChoices):
        CREDIT_CARD = "credit_card"
        DEBIT_CARD = "debit_card"
        PAYPAL = "paypal"
        STRIPE = "stripe"
        BANK_TRANSFER = "bank_transfer"

    class CancelledBy(models.TextChoices):
        CUSTOMER = "customer"
        HOTEL = "hotel"
        ADMIN = "admin"

    class RefundStatus(models.TextChoices):
        PENDING = "pending"
        PROCESSED = "processed"
        FAILED = "failed"
        NOT_APPLICABLE = "not_applicable"

    customer = models.ForeignKey(CustomerProfile, on_delete=models.PROTECT, related_name="bookings")
    hotel = models.ForeignKey(Hotel, on_delete=models.PROTECT, related_name="bookings")
    room = models.ForeignKey(Room, on_delete=models.PROTECT, related_name="bookings")
    reference = models.CharField(max_length=32, unique=True, editable=False)

    check_in = models.DateTimeField()
    check_out = models.DateTimeField()  # exclusive
    adults = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    children = models.PositiveIntegerField(default=0)
    infants = models.PositiveIntegerField(default=0)
    number_of_rooms = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    total_nights = models.PositiveIntegerField(default=1)

    guest_details = models.JSONField(default=list, blank=True)
    contact_email = models.EmailField()
    contact_phone = models.CharField(max_length=20)
    emergency_contact = models.JSONField(default=dict, blank=True)

    room_price = models.DecimalField(max_digits=12, decimal_places=2)
    taxes = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    service_fee = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    discount_amount = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    discount_reason = models.CharField(max_length=50, blank=True)
    total_amount = models.DecimalField(max_digits=12, decimal_places=2)
    currency = models.CharField(max_length=3, choices=Currency.choices, default=Currency.INR)
    payment_status = models.CharField(max_length=16, choices=PaymentStatus.choices, default=PaymentStatus.PENDING)
    payment_method = models.CharField(max_length=16, choices=PaymentMethod.choices, blank=True)
    deposit_amount = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    deposit_paid = models.BooleanField(default=False)

    status = models.CharField(max_length=12, choices=Status.choices, default=Status.PENDING)
    special_requests = models.TextField(max_length=500, blank=True)
    additional_requests = models.JSONField(default=list, blank=True)

    is_cancelled = models.BooleanField(default=False)
    cancelled_at = models.DateTimeField(null=True, blank=True)
    cancelled_by = models.CharField(max_length=10, choices=CancelledBy.choices, blank=True)
    cancellation_reason = models.TextField(blank=True)
    refund_amount = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    refund_status = models.CharField(max_length=16, choices=RefundStatus.choices, blank=True)

    confirmed_at = models.DateTimeField(null=True, blank=True)
    actual_check_in = models.DateTimeField(null=True, blank=True)
    check_in_notes = models.TextField(blank=True)
    actual_check_out = models.DateTimeField(null=True, blank=True)
    check_out_notes = models.TextField(blank=True)
    damage_charges = models.DecimalField(max_digits=12, decimal_places=2, default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["customer", "created_at"]),
            models.Index(fields=["hotel", "check_in"]),
            models.Index(fields=["room", "status"]),
            models.Index(fields=["status", "check_in"]),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(check_out__gt=F("check_in")),
                name="booking_check_out_after_check_in",
            ),
        ]

    @staticmethod
    def nights_between(check_in, check_out):
        return math.ceil((check_out - check_in).total_seconds() / 86400)

    def save(self, *args, **kwargs):
        if not self.reference:
            self.reference = generate_reference('HB')
        elif self.pk:
            stored = Booking.objects.filter(pk=self.pk).values_list('reference', flat=True).first()
            if stored and stored != self.reference:
                raise ValueError("Booking reference cannot be changed")
        if self.check_in and self.check_out:
            self.total_nights = self.nights_between(self.check_in, self.check_out)
        super().save(*args, **kwargs)

    def __str__(self):
        return f'{self.reference} - {self.room} ({self.check_in:%Y-%m-%d} to {self.check_out:%Y-%m-%d})'


class Review(models.Model):
    class StayType(models.TextChoices):
        BUSINESS = "Business"
        LEISURE = "Leisure"
        FAMILY = "Family"
        COUPLE = "Couple"
        SOLO = "Solo"
        GROUP = "Group"

    class Source(models.TextChoices):
        WEBSITE = "website"
        MOBILE_APP = "mobile_app"
        EMAIL = "email"

    booking = models.OneToOneField(Booking, on_delete=models.PROTECT, related_name="review")
    customer = models.ForeignKey(CustomerProfile, on_delete=models.CASCADE, related_name="reviews")
    hotel = models.ForeignKey(Hotel, on_delete=models.CASCADE, related_name="reviews")
    overall = models.PositiveSmallIntegerField(validators=RATING_VALIDATORS)
    cleanliness = models.PositiveSmallIntegerField(null=True, blank=True, validators=RATING_VALIDATORS)
    service = models.PositiveSmallIntegerField(null=True, blank=True, validators=RATING_VALIDATORS)
    location = models.PositiveSmallIntegerField(null=True, blank=True, validators=RATING_VALIDATORS)
    value = models.PositiveSmallIntegerField(null=True, blank=True, validators=RATING_VALIDATORS)
    amenities = models.PositiveSmallIntegerField(null=True, blank=True, validators=RATING_VALIDATORS)
    title = models.CharField(max_length=100)
    comment = models.TextField(max_length=1000)
    pros = models.JSONField(default=list, blank=True)
    cons = models.JSONField(default=list, blank=True)
    stay_type = models.CharField(max_length=10, choices=StayType.choices)
    room_type = models.CharField(max_length=30)
    stay_nights = models.PositiveIntegerField()
    stay_check_in = models.DateTimeField()
    stay_check_out = models.DateTimeField()
    response_message = models.TextField(max_length=500, blank=True)
    responded_at = models.DateTimeField(null=True, blank=True)
    responded_by = models.ForeignKey(
        User, null=True, blank=True, on_delete=models.SET_NULL, related_name="review_responses"
    )
    is_verified = models.BooleanField(default=False)
    is_approved = models.BooleanField(default=True)
    moderation_notes = models.TextField(max_length=300, blank=True)
    source = models.CharField(max_length=12, choices=Source.choices, default=Source.WEBSITE)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [models.Index(fields=["hotel", "is_approved", "created_at"])]

    def __str__(self):
        return f'{self.title} ({self.overall}/5)'


class Grievance(models.Model):
    class Category(models.TextChoices):
        BOOKING_ISSUE = "booking_issue"
        PAYMENT_PROBLEM = "payment_problem"
        SERVICE_QUALITY = "service_quality"
        CLEANLINESS = "cleanliness"
        STAFF_BEHAVIOR = "staff_behavior"
        AMENITIES = "amenities"
        SAFETY_SECURITY = "safety_security"
        ACCESSIBILITY = "accessibility"
        NOISE_COMPLAINT = "noise_complaint"
        BILLING_DISPUTE = "billing_dispute"
        CANCELLATION_REFUND = "cancellation_refund"
        OTHER = "other"

    class Priority(models.TextChoices):
        LOW = "low"
        MEDIUM = "medium"
        HIGH = "high"
        URGENT = "urgent"

    class Severity(models.TextChoices):
        MINOR = "minor"
        MODERATE = "moderate"
        MAJOR = "major"
        CRITICAL = "critical"

    class Status(models.TextChoices):
        OPEN = "open"
        ACKNOWLEDGED = "acknowledged"
        IN_PROGRESS = "in_progress"
        RESOLVED = "resolved"
        CLOSED = "closed"
        ESCALATED = "escalated"

    grievance_number = models.CharField(max_length=32, unique=True, editable=False)
    customer = models.ForeignKey(CustomerProfile, on_delete=models.CASCADE, related_name="grievances")
    hotel = models.ForeignKey(Hotel, on_delete=models.CASCADE, related_name="grievances")
    booking = models.ForeignKey(
        Booking, null=True, blank=True, on_delete=models.SET_NULL, related_name="grievances"
    )
    subject = models.CharField(max_length=200)
    description = models.TextField(max_length=2000)
    category = models.CharField(max_length=24, choices=Category.choices)
    subcategory = models.CharField(max_length=100, blank=True)
    priority = models.CharField(max_length=8, choices=Priority.choices, default=Priority.MEDIUM)
    severity = models.CharField(max_length=8, choices=Severity.choices, default=Severity.MODERATE)
    status = models.CharField(max_length=12, choices=Status.choices, default=Status.OPEN)
    timeline = models.JSONField(default=list, blank=True)
    admin_response = models.TextField(blank=True)
    responded_at = models.DateTimeField(null=True, blank=True)
    resolved_at = models.DateTimeField(null=True, blank=True)
    closed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def save(self, *args, **kwargs):
        if not self.grievance_number:
            self.grievance_number = generate_reference('GR')
        super().save(*args, **kwargs)

    def add_timeline_entry(self, action, description, user, when):
        self.timeline.append({
            'action': action,
            'description': description,
            'role': user.role,
            'user_id': user.pk,
            'name': user.display_name,
            'timestamp': when.isoformat(),
        })

    def __str__(self):
        return f'{self.grievance_number} - {self.subject}'
