import logging
from decimal import ROUND_HALF_UP, Decimal

from django.db.models import Avg, Count
from django.utils import timezone
from django.utils.dateparse import parse_date
from rest_framework import mixins, viewsets
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated

from .. import lifecycle, ratings, uploads
from ..exceptions import Conflict
from ..models import Booking, Review, Room
from ..permissions import IsHotel, IsVerifiedHotel
from ..responses import envelope
from ..serializers import (
    BookingDecisionSerializer,
    BookingSerializer,
    CancelBookingSerializer,
    CheckInSerializer,
    CheckOutSerializer,
    HotelBookingEditSerializer,
    HotelSerializer,
    ReviewResponseSerializer,
    ReviewSerializer,
    RoomAvailabilityToggleSerializer,
    RoomSerializer,
)
from .base import EnvelopeMixin, hotel_profile

logger = logging.getLogger(__name__)

HOTEL = [IsAuthenticated, IsHotel, IsVerifiedHotel]


def normalize_status(value):
    """Accepts kebab-case statuses (``checked-in``) as well as the stored form."""
    return value.strip().lower().replace('-', '_')


@api_view(['GET', 'PUT'])
@permission_classes(HOTEL)
def profile(request):
    hotel = hotel_profile(request.user)
    if request.method == 'GET':
        return envelope(HotelSerializer(hotel).data)
    serializer = HotelSerializer(hotel, data=request.data, partial=True)
    serializer.is_valid(raise_exception=True)
    serializer.save()
    logger.info('Hotel %s profile updated', hotel.pk)
    return envelope(serializer.data, 'Hotel profile updated successfully')


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsHotel])
def profile_images(request):
    hotel = hotel_profile(request.user)
    urls = uploads.save_images(request.FILES.getlist('images'), 'hotels')
    hotel.images = [*hotel.images, *urls]
    hotel.save(update_fields=['images', 'updated_at'])
    return envelope({'images': urls, 'total_images': len(hotel.images)}, 'Hotel images uploaded successfully')


class HotelBookingViewSet(EnvelopeMixin,
                          mixins.ListModelMixin,
                          mixins.RetrieveModelMixin,
                          viewsets.GenericViewSet):
    """Bookings received by the signed-in hotel and the transitions it drives."""
    permission_classes = HOTEL
    serializer_class = BookingSerializer
    lookup_value_regex = r'\d+'
    not_found_message = 'Booking not found'

    TRANSITIONS = {
        'confirm': lifecycle.confirm,
        'check-in': lifecycle.check_in,
        'check-out': lifecycle.check_out,
        'complete': lifecycle.complete,
        'no-show': lifecycle.mark_no_show,
    }

    def get_queryset(self):
        qs = Booking.objects.filter(hotel=hotel_profile(self.request.user)).select_related(
            'hotel', 'room', 'customer'
        )
        if self.action != 'list':
            return qs
        params = self.request.query_params
        if params.get('status'):
            qs = qs.filter(status=normalize_status(params['status']))
        start, end = params.get('start_date'), params.get('end_date')
        if start and end:
            start_date, end_date = parse_date(start), parse_date(end)
            if start_date is None or end_date is None:
                raise ValidationError("Invalid date format. Use YYYY-MM-DD")
            qs = qs.filter(check_in__date__gte=start_date, check_in__date__lte=end_date)
        return qs

    @action(detail=True, methods=['post'],
            url_path=r'(?P<transition>confirm|check-in|check-out|complete|no-show)')
    def transition(self, request, pk=None, transition=None):
        booking = self.get_object()
        if transition == 'check-in':
            serializer = CheckInSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            lifecycle.check_in(booking, serializer.validated_data['notes'])
        elif transition == 'check-out':
            serializer = CheckOutSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            lifecycle.check_out(
                booking, serializer.validated_data['notes'], serializer.validated_data.get('damage_charges')
            )
        else:
            self.TRANSITIONS[transition](booking)
        return envelope(BookingSerializer(booking).data, f'Booking {transition} successful', status=booking.status)

    @action(detail=True, methods=['post'])
    def cancel(self, request, pk=None):
        booking = self.get_object()
        serializer = CancelBookingSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        lifecycle.cancel(
            booking,
            Booking.CancelledBy.HOTEL.value,
            serializer.validated_data['reason'],
            refund_amount=serializer.validated_data.get('refund_amount'),
        )
        return envelope(BookingSerializer(booking).data, 'Booking cancelled successfully', status=booking.status)

    @action(detail=True, methods=['put'], url_path='status')
    def decide(self, request, pk=None):
        booking = self.get_object()
        serializer = BookingDecisionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        if serializer.validated_data['status'] == Booking.Status.CONFIRMED:
            lifecycle.confirm(booking)
        else:
            lifecycle.reject(booking)
        return envelope(BookingSerializer(booking).data, f'Booking {booking.status} successfully')

    @action(detail=True, methods=['put', 'patch'])
    def edit(self, request, pk=None):
        booking = self.get_object()
        serializer = HotelBookingEditSerializer(booking, data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)

        stay_fields = {key: data.pop(key) for key in ('check_in', 'check_out', 'number_of_rooms') if key in data}
        if stay_fields:
            lifecycle.modify(
                booking,
                stay_fields.get('check_in', booking.check_in),
                stay_fields.get('check_out', booking.check_out),
                stay_fields.get('number_of_rooms'),
            )
        if data:
            for attr, value in data.items():
                setattr(booking, attr, value)
            booking.save(update_fields=[*data, 'updated_at'])
        return envelope(BookingSerializer(booking).data, 'Booking updated successfully')


class HotelRoomViewSet(EnvelopeMixin, viewsets.ModelViewSet):
    permission_classes = HOTEL
    serializer_class = RoomSerializer
    lookup_value_regex = r'\d+'
    not_found_message = 'Room not found'
    created_message = 'Room created successfully'
    updated_message = 'Room updated successfully'

    def get_queryset(self):
        return Room.objects.filter(hotel=hotel_profile(self.request.user)).order_by('-created_at')

    def perform_create(self, serializer):
        room = serializer.save(hotel=hotel_profile(self.request.user))
        logger.info('Room %s created for hotel %s', room.pk, room.hotel_id)

    def destroy(self, request, *args, **kwargs):
        room = self.get_object()
        active = room.bookings.filter(status__in=Booking.Status.holding(), check_out__gte=timezone.now())
        if active.exists():
            raise Conflict("Cannot delete room with active bookings")
        if room.bookings.exists():
            room.is_active = False
            room.save(update_fields=['is_active', 'updated_at'])
            return envelope(message='Room has booking history and was deactivated')
        room.delete()
        return envelope(message='Room deleted successfully')

    @action(detail=True, methods=['put'])
    def availability(self, request, pk=None):
        room = self.get_object()
        serializer = RoomAvailabilityToggleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        room.is_available = serializer.validated_data['is_available']
        room.save(update_fields=['is_available', 'updated_at'])
        state = 'activated' if room.is_available else 'deactivated'
        return envelope(RoomSerializer(room).data, f'Room {state} successfully')

    @action(detail=True, methods=['post'])
    def images(self, request, pk=None):
        room = self.get_object()
        urls = uploads.save_images(request.FILES.getlist('images'), 'rooms')
        room.images = [*room.images, *urls]
        room.save(update_fields=['images', 'updated_at'])
        return envelope({'images': urls, 'total_images': len(room.images)}, 'Room images uploaded successfully')


class HotelReviewViewSet(EnvelopeMixin, mixins.ListModelMixin, viewsets.GenericViewSet):
    permission_classes = HOTEL
    serializer_class = ReviewSerializer
    lookup_value_regex = r'\d+'
    not_found_message = 'Review not found'

    def get_queryset(self):
        qs = Review.objects.filter(hotel=hotel_profile(self.request.user)).select_related('customer', 'hotel')
        rating = self.request.query_params.get('rating')
        if self.action == 'list' and rating:
            if not rating.isdigit():
                raise ValidationError({'rating': "Rating must be a number between 1 and 5"})
            qs = qs.filter(overall=int(rating))
        return qs

    def statistics(self):
        reviews = Review.objects.filter(hotel=hotel_profile(self.request.user))
        totals = reviews.aggregate(average=Avg('overall'), total=Count('id'))
        average = Decimal(str(totals['average'] or 0)).quantize(Decimal('0.1'), rounding=ROUND_HALF_UP)
        return {
            'average_rating': str(average),
            'total_reviews': totals['total'],
            'rating_distribution': ratings.rating_distribution(reviews),
        }

    def list(self, request, *args, **kwargs):
        return self.paginated(self.filter_queryset(self.get_queryset()), statistics=self.statistics())

    @action(detail=True, methods=['post', 'put'])
    def respond(self, request, pk=None):
        review = self.get_object()
        serializer = ReviewResponseSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        ratings.respond(review, request.user, serializer.validated_data['message'])
        return envelope(ReviewSerializer(review).data, 'Response added successfully')
