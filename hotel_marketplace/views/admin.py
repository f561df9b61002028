import logging
from datetime import timedelta
from decimal import ROUND_HALF_UP, Decimal

from django.db.models import Avg, Sum
from django.utils import timezone
from rest_framework import mixins, viewsets
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.permissions import IsAuthenticated

from .. import lifecycle, notifications, ratings
from ..models import Booking, Grievance, Hotel, Review, User
from ..permissions import IsAdmin
from ..responses import envelope
from ..serializers import (
    ActiveFlagSerializer,
    AdminHotelSerializer,
    BookingSerializer,
    CancelBookingSerializer,
    GrievanceSerializer,
    GrievanceStatusSerializer,
    HotelVerificationSerializer,
    ReviewApprovalSerializer,
    ReviewSerializer,
    UserSerializer,
)
from .base import EnvelopeMixin

logger = logging.getLogger(__name__)

ADMIN = [IsAuthenticated, IsAdmin]

ANALYTICS_PERIODS = {'7d': 7, '30d': 30, '90d': 90}


@api_view(['GET'])
@permission_classes(ADMIN)
def dashboard(request):
    return envelope({
        'total_customers': User.objects.filter(role=User.Role.CUSTOMER).count(),
        'total_hotels': User.objects.filter(role=User.Role.HOTEL).count(),
        'verified_hotels': Hotel.objects.filter(is_verified=True).count(),
        'pending_verifications': Hotel.objects.filter(is_verified=False).count(),
        'total_bookings': Booking.objects.count(),
        'pending_bookings': Booking.objects.filter(status=Booking.Status.PENDING).count(),
        'total_reviews': Review.objects.count(),
        'open_grievances': Grievance.objects.exclude(status=Grievance.Status.CLOSED).count(),
    })


@api_view(['GET'])
@permission_classes(ADMIN)
def analytics(request):
    period = request.query_params.get('period', '30d')
    if period not in ANALYTICS_PERIODS:
        period = '30d'
    since = timezone.now() - timedelta(days=ANALYTICS_PERIODS[period])

    revenue = Booking.objects.filter(created_at__gte=since, status=Booking.Status.COMPLETED).aggregate(
        total=Sum('total_amount')
    )['total'] or Decimal('0')
    average = Review.objects.aggregate(average=Avg('overall'))['average'] or 0
    return envelope({
        'revenue': str(revenue),
        'bookings': Booking.objects.filter(created_at__gte=since).count(),
        'new_customers': User.objects.filter(role=User.Role.CUSTOMER, date_joined__gte=since).count(),
        'new_hotels': Hotel.objects.filter(created_at__gte=since).count(),
        'average_rating': str(Decimal(str(average)).quantize(Decimal('0.1'), rounding=ROUND_HALF_UP)),
        'period': period,
    })


class AdminUserViewSet(EnvelopeMixin, mixins.ListModelMixin, viewsets.GenericViewSet):
    permission_classes = ADMIN
    serializer_class = UserSerializer
    lookup_value_regex = r'\d+'
    not_found_message = 'User not found'

    def get_queryset(self):
        qs = User.objects.order_by('-date_joined')
        params = self.request.query_params
        if params.get('role'):
            qs = qs.filter(role=params['role'])
        if params.get('status') in ('active', 'inactive'):
            qs = qs.filter(is_active=params['status'] == 'active')
        return qs

    @action(detail=True, methods=['put'])
    def status(self, request, pk=None):
        user = self.get_object()
        serializer = ActiveFlagSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user.is_active = serializer.validated_data['is_active']
        user.save(update_fields=['is_active'])
        state = 'activated' if user.is_active else 'deactivated'
        logger.info('User %s %s by admin %s', user.pk, state, request.user.pk)
        return envelope(UserSerializer(user).data, f'User {state} successfully')


class AdminHotelViewSet(EnvelopeMixin, viewsets.ReadOnlyModelViewSet):
    permission_classes = ADMIN
    serializer_class = AdminHotelSerializer
    lookup_value_regex = r'\d+'
    not_found_message = 'Hotel not found'

    def get_queryset(self):
        qs = Hotel.objects.select_related('user').order_by('-created_at')
        params = self.request.query_params
        if self.action == 'list':
            if params.get('verified') in ('true', 'false'):
                qs = qs.filter(is_verified=params['verified'] == 'true')
            if params.get('status') in ('active', 'inactive'):
                qs = qs.filter(is_active=params['status'] == 'active')
        return qs

    @action(detail=False, methods=['get'])
    def pending(self, request):
        return self.paginated(self.get_queryset().filter(is_verified=False))

    @action(detail=True, methods=['put'])
    def verify(self, request, pk=None):
        hotel = self.get_object()
        serializer = HotelVerificationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        approved = serializer.validated_data['is_verified']
        reason = serializer.validated_data['rejection_reason']

        now = timezone.now()
        hotel.is_verified = approved
        hotel.verified_by = request.user
        hotel.verified_at = now if approved else None
        if approved:
            hotel.rejection_reason = ''
            hotel.rejected_at = None
        else:
            hotel.rejection_reason = reason
            hotel.rejected_at = now
        hotel.save()
        logger.info('Hotel %s %s by admin %s', hotel.pk, 'verified' if approved else 'rejected', request.user.pk)
        notifications.send_quietly(notifications.send_hotel_verification_email, hotel, approved, reason)
        return envelope(
            AdminHotelSerializer(hotel).data, f"Hotel {'verified' if approved else 'rejected'} successfully"
        )

    @action(detail=True, methods=['put'])
    def status(self, request, pk=None):
        hotel = self.get_object()
        serializer = ActiveFlagSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        hotel.is_active = serializer.validated_data['is_active']
        hotel.save(update_fields=['is_active', 'updated_at'])
        state = 'activated' if hotel.is_active else 'deactivated'
        return envelope(AdminHotelSerializer(hotel).data, f'Hotel {state} successfully')


class AdminBookingViewSet(EnvelopeMixin, viewsets.ReadOnlyModelViewSet):
    permission_classes = ADMIN
    serializer_class = BookingSerializer
    lookup_value_regex = r'\d+'
    not_found_message = 'Booking not found'

    def get_queryset(self):
        qs = Booking.objects.select_related('hotel', 'room', 'customer')
        params = self.request.query_params
        if params.get('status'):
            qs = qs.filter(status=params['status'].replace('-', '_'))
        if params.get('hotel_id', '').isdigit():
            qs = qs.filter(hotel_id=int(params['hotel_id']))
        return qs

    @action(detail=True, methods=['post'])
    def cancel(self, request, pk=None):
        booking = self.get_object()
        serializer = CancelBookingSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        lifecycle.cancel(
            booking,
            Booking.CancelledBy.ADMIN.value,
            serializer.validated_data['reason'],
            refund_amount=serializer.validated_data.get('refund_amount'),
        )
        logger.info('Booking %s cancelled by admin %s', booking.reference, request.user.pk)
        return envelope(BookingSerializer(booking).data, 'Booking cancelled successfully', status=booking.status)


class AdminReviewViewSet(EnvelopeMixin, mixins.ListModelMixin, viewsets.GenericViewSet):
    permission_classes = ADMIN
    serializer_class = ReviewSerializer
    lookup_value_regex = r'\d+'
    not_found_message = 'Review not found'

    def get_queryset(self):
        qs = Review.objects.select_related('hotel', 'customer')
        params = self.request.query_params
        if params.get('approved') in ('true', 'false'):
            qs = qs.filter(is_approved=params['approved'] == 'true')
        if params.get('hotel_id', '').isdigit():
            qs = qs.filter(hotel_id=int(params['hotel_id']))
        return qs

    @action(detail=True, methods=['put'])
    def approval(self, request, pk=None):
        review = self.get_object()
        serializer = ReviewApprovalSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        ratings.set_approval(
            review, serializer.validated_data['is_approved'], serializer.validated_data['moderation_notes']
        )
        state = 'approved' if review.is_approved else 'hidden'
        return envelope(ReviewSerializer(review).data, f'Review {state} successfully')


class AdminGrievanceViewSet(EnvelopeMixin, mixins.ListModelMixin, viewsets.GenericViewSet):
    permission_classes = ADMIN
    serializer_class = GrievanceSerializer
    lookup_value_regex = r'\d+'
    not_found_message = 'Grievance not found'

    def get_queryset(self):
        qs = Grievance.objects.select_related('hotel', 'customer')
        params = self.request.query_params
        if params.get('status'):
            qs = qs.filter(status=params['status'])
        if params.get('priority'):
            qs = qs.filter(priority=params['priority'])
        return qs

    @action(detail=True, methods=['put'])
    def status(self, request, pk=None):
        grievance = self.get_object()
        serializer = GrievanceStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        new_status = serializer.validated_data['status']
        response = serializer.validated_data.get('response')

        now = timezone.now()
        grievance.status = new_status
        if response:
            grievance.admin_response = response
            grievance.responded_at = now
        if new_status == Grievance.Status.RESOLVED:
            grievance.resolved_at = now
        elif new_status == Grievance.Status.CLOSED:
            grievance.closed_at = now
        grievance.add_timeline_entry('status_changed', f'Status changed to {new_status}', request.user, now)
        grievance.save()
        return envelope(GrievanceSerializer(grievance).data, 'Grievance status updated successfully')
