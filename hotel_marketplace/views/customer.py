import logging

from django.utils import timezone
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action, api_view, parser_classes, permission_classes
from rest_framework.exceptions import NotFound, ValidationError
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated

from .. import lifecycle, notifications, pricing, ratings, search, uploads
from ..availability import annotate_rooms
from ..models import Booking, Grievance, Hotel, Review, Room
from ..permissions import IsCustomer
from ..responses import envelope
from ..serializers import (
    BookingCreateSerializer,
    BookingRequestSerializer,
    BookingSerializer,
    CancelBookingSerializer,
    CustomerProfileSerializer,
    DepositSerializer,
    GrievanceSerializer,
    HotelBrowseSerializer,
    HotelSearchSerializer,
    HotelSerializer,
    ModifyBookingSerializer,
    PromoSerializer,
    QuoteRequestSerializer,
    QuoteSerializer,
    ReviewSerializer,
    RoomAvailabilityQuerySerializer,
    RoomSerializer,
    SupportTicketSerializer,
)
from .base import EnvelopeMixin, customer_profile

logger = logging.getLogger(__name__)

CUSTOMER = [IsAuthenticated, IsCustomer]


@api_view(['GET', 'PUT'])
@permission_classes(CUSTOMER)
def profile(request):
    customer = customer_profile(request.user)
    if request.method == 'GET':
        return envelope(CustomerProfileSerializer(customer).data)
    serializer = CustomerProfileSerializer(customer, data=request.data, partial=True)
    serializer.is_valid(raise_exception=True)
    serializer.save()
    return envelope(serializer.data, 'Profile updated successfully')


@api_view(['POST'])
@permission_classes(CUSTOMER)
@parser_classes([MultiPartParser, FormParser])
def profile_image(request):
    customer = customer_profile(request.user)
    upload = request.FILES.get('profile_image')
    if upload is None:
        raise ValidationError("No image uploaded")
    url = uploads.save_images([upload], 'profiles')[0]
    customer.profile_image = url
    customer.save(update_fields=['profile_image', 'updated_at'])
    return envelope({'profile_image': url}, 'Profile image uploaded successfully')


@api_view(['GET'])
@permission_classes(CUSTOMER)
def room_availability(request):
    params = RoomAvailabilityQuerySerializer(data=request.query_params)
    params.is_valid(raise_exception=True)
    query = params.validated_data
    rooms = Room.objects.filter(
        hotel_id=query['hotel_id'], hotel__is_verified=True, hotel__is_active=True, is_active=True
    )
    if 'room_id' in query:
        rooms = rooms.filter(pk=query['room_id'])
    data = []
    for room, available, fits in annotate_rooms(rooms, query['check_in'], query['check_out'], query['rooms']):
        data.append(dict(RoomSerializer(room).data, available_rooms=available, is_available=fits))
    return envelope(data)


@api_view(['POST'])
@permission_classes(CUSTOMER)
def support_ticket(request):
    serializer = SupportTicketSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = dict(serializer.validated_data, created_at=timezone.now().isoformat())
    return envelope(data, 'Support request received', status.HTTP_201_CREATED)


class CustomerHotelViewSet(EnvelopeMixin, viewsets.ReadOnlyModelViewSet):
    """Listed hotels: browse, search and detail."""
    permission_classes = CUSTOMER
    serializer_class = HotelSerializer
    lookup_value_regex = r'\d+'
    not_found_message = 'Hotel not found'

    def get_queryset(self):
        return search.listed_hotels()

    def with_rooms(self, hotel):
        rooms = hotel.rooms.filter(is_active=True)
        return dict(HotelSerializer(hotel).data, rooms=RoomSerializer(rooms, many=True).data)

    def list(self, request, *args, **kwargs):
        params = HotelBrowseSerializer(data=request.query_params)
        params.is_valid(raise_exception=True)
        page = self.paginate_queryset(search.browse_hotels(**params.validated_data))
        return self.paginator.get_paginated_response([self.with_rooms(hotel) for hotel in page])

    def retrieve(self, request, *args, **kwargs):
        hotel = self.get_object()
        reviews = hotel.reviews.filter(is_approved=True).select_related('customer')[:10]
        return envelope({
            'hotel': HotelSerializer(hotel).data,
            'rooms': RoomSerializer(hotel.rooms.filter(is_active=True), many=True).data,
            'reviews': ReviewSerializer(reviews, many=True).data,
        })

    @action(detail=False, methods=['get'])
    def search(self, request):
        params = HotelSearchSerializer(data=request.query_params)
        params.is_valid(raise_exception=True)
        query = params.validated_data
        results = search.search_hotels(**query)

        page = self.paginate_queryset(results)
        data = []
        for result in page:
            item = HotelSerializer(result.hotel).data
            item['distance_km'] = round(result.distance_km, 2) if result.distance_km is not None else None
            if result.rooms is not None:
                item['available_rooms'] = [
                    dict(RoomSerializer(room).data, available_rooms=available)
                    for room, available in result.rooms
                ]
            data.append(item)

        filters = {
            'location': (
                {'latitude': query['latitude'], 'longitude': query['longitude'], 'radius': query['radius']}
                if 'latitude' in query else None
            ),
            'price_range': {'min': query.get('min_price'), 'max': query.get('max_price')},
            'amenities': query.get('amenities', []),
            'rating': query.get('rating'),
            'dates': (
                {'check_in': query['check_in'], 'check_out': query['check_out']}
                if 'check_in' in query else None
            ),
            'guests': query['guests'],
            'rooms': query['rooms'],
            'sort_by': query['sort_by'],
        }
        return self.paginator.get_paginated_response(data, filters=filters)


class CustomerBookingViewSet(EnvelopeMixin,
                             mixins.ListModelMixin,
                             mixins.RetrieveModelMixin,
                             viewsets.GenericViewSet):
    permission_classes = CUSTOMER
    serializer_class = BookingSerializer
    lookup_value_regex = r'\d+'
    not_found_message = 'Booking not found'

    def get_queryset(self):
        qs = Booking.objects.filter(customer=customer_profile(self.request.user)).select_related(
            'hotel', 'room', 'customer'
        )
        if self.action == 'list' and self.request.query_params.get('status'):
            qs = qs.filter(status=self.request.query_params['status'])
        return qs

    def create(self, request, *args, **kwargs):
        customer = customer_profile(request.user)
        serializer = BookingCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)

        room = Room.objects.select_related('hotel').filter(pk=data['room_id']).first()
        if room is None or not room.is_active or not room.is_available or not room.hotel.is_listed:
            raise NotFound("Room not found or not available")
        if data['adults'] > room.capacity_adults * data['number_of_rooms']:
            raise ValidationError({'adults': "Too many adults for the selected rooms"})

        booking = lifecycle.create_booking(
            customer,
            room.pk,
            data.pop('check_in'),
            data.pop('check_out'),
            data.pop('number_of_rooms'),
            data.pop('adults'),
            promo_code=data.pop('promo_code', None),
            **{key: value for key, value in data.items() if key != 'room_id'},
        )
        notifications.send_quietly(notifications.send_booking_confirmation_email, booking)
        return envelope(BookingSerializer(booking).data, 'Booking created successfully', status.HTTP_201_CREATED)

    @action(detail=False, methods=['post'])
    def quote(self, request):
        serializer = QuoteRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        room = Room.objects.select_related('hotel').filter(pk=data['room_id']).first()
        if room is None or not room.is_active or not room.is_available or not room.hotel.is_listed:
            raise NotFound("Room not found or not available")
        result = pricing.quote(
            room, data['check_in'], data['check_out'], data['number_of_rooms'], data.get('promo_code')
        )
        return envelope(QuoteSerializer(result).data)

    @action(detail=True, methods=['post', 'put'])
    def cancel(self, request, pk=None):
        booking = self.get_object()
        serializer = CancelBookingSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        lifecycle.cancel(booking, Booking.CancelledBy.CUSTOMER.value, serializer.validated_data['reason'])
        return envelope(BookingSerializer(booking).data, 'Booking cancelled successfully')

    @action(detail=True, methods=['put', 'post'])
    def modify(self, request, pk=None):
        booking = self.get_object()
        serializer = ModifyBookingSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        lifecycle.modify(booking, data['check_in'], data['check_out'], data.get('number_of_rooms'))
        return envelope(BookingSerializer(booking).data, 'Booking modified')

    @action(detail=True, methods=['post'])
    def rebook(self, request, pk=None):
        booking = lifecycle.rebook(self.get_object())
        return envelope(BookingSerializer(booking).data, 'Rebooked successfully', status.HTTP_201_CREATED)

    @action(detail=True, methods=['post'])
    def promo(self, request, pk=None):
        booking = self.get_object()
        serializer = PromoSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        lifecycle.apply_promo(booking, serializer.validated_data['code'])
        return envelope(BookingSerializer(booking).data, 'Promo applied')

    @action(detail=True, methods=['post'])
    def deposit(self, request, pk=None):
        booking = self.get_object()
        serializer = DepositSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        lifecycle.record_deposit(booking, serializer.validated_data['amount'])
        return envelope(BookingSerializer(booking).data, 'Deposit recorded')

    @action(detail=True, methods=['post'], url_path='request')
    def add_request(self, request, pk=None):
        booking = self.get_object()
        serializer = BookingRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        entry = dict(serializer.validated_data, created_at=timezone.now().isoformat())
        booking.additional_requests.append(entry)
        booking.save(update_fields=['additional_requests', 'updated_at'])
        return envelope(entry, 'Request added')


class FavoriteViewSet(viewsets.ViewSet):
    permission_classes = CUSTOMER
    lookup_value_regex = r'\d+'

    def list(self, request):
        customer = customer_profile(request.user)
        hotels = customer.favorites.filter(is_verified=True, is_active=True)
        return envelope(HotelSerializer(hotels, many=True).data)

    @action(detail=True, methods=['post'])
    def toggle(self, request, pk=None):
        customer = customer_profile(request.user)
        hotel = Hotel.objects.filter(pk=pk).first()
        if hotel is None or not hotel.is_listed:
            raise NotFound("Hotel not found or unavailable")
        if customer.favorites.filter(pk=hotel.pk).exists():
            customer.favorites.remove(hotel)
            outcome = 'removed'
        else:
            customer.favorites.add(hotel)
            outcome = 'added'
        favorites = list(customer.favorites.values_list('pk', flat=True))
        return envelope({'favorites': favorites, 'action': outcome}, f'Favorite {outcome}')


class CustomerReviewViewSet(EnvelopeMixin, viewsets.ModelViewSet):
    permission_classes = CUSTOMER
    serializer_class = ReviewSerializer
    lookup_value_regex = r'\d+'
    not_found_message = 'Review not found'
    created_message = 'Review submitted successfully'
    updated_message = 'Review updated successfully'
    deleted_message = 'Review deleted successfully'

    def get_queryset(self):
        return Review.objects.filter(customer=customer_profile(self.request.user)).select_related(
            'hotel', 'customer'
        )

    def perform_create(self, serializer):
        data = dict(serializer.validated_data)
        booking = data.pop('booking')
        serializer.instance = ratings.create_review(customer_profile(self.request.user), booking.pk, **data)

    def perform_update(self, serializer):
        ratings.update_review(serializer.instance, **serializer.validated_data)

    def perform_destroy(self, instance):
        ratings.delete_review(instance)


class CustomerGrievanceViewSet(EnvelopeMixin,
                               mixins.ListModelMixin,
                               mixins.CreateModelMixin,
                               viewsets.GenericViewSet):
    permission_classes = CUSTOMER
    serializer_class = GrievanceSerializer
    created_message = 'Grievance submitted successfully'

    def get_queryset(self):
        return Grievance.objects.filter(customer=customer_profile(self.request.user)).select_related(
            'hotel', 'customer'
        )

    def get_serializer_context(self):
        context = super().get_serializer_context()
        if self.action == 'create':
            context['customer'] = customer_profile(self.request.user)
        return context

    def perform_create(self, serializer):
        grievance = Grievance(customer=customer_profile(self.request.user), **serializer.validated_data)
        grievance.add_timeline_entry('created', 'Grievance submitted', self.request.user, timezone.now())
        grievance.save()
        serializer.instance = grievance
        logger.info('Grievance %s opened against hotel %s', grievance.grievance_number, grievance.hotel_id)
