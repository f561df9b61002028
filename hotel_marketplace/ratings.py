"""
Reviews and the hotel rating cache.

``Hotel.rating_average`` / ``rating_total_reviews`` are derived from the
approved reviews only. Every function here that changes a review calls
``recompute_hotel_rating`` before returning.
"""
import logging
from decimal import ROUND_HALF_UP, Decimal

from django.db import transaction
from django.db.models import Count, Sum
from django.utils import timezone
from rest_framework.exceptions import NotFound, ValidationError

from .exceptions import Conflict
from .models import Booking, Review

logger = logging.getLogger(__name__)

REVIEWABLE = (Booking.Status.CHECKED_OUT, Booking.Status.COMPLETED)
TENTH = Decimal('0.1')


def recompute_hotel_rating(hotel):
    totals = Review.objects.filter(hotel=hotel, is_approved=True).aggregate(
        count=Count('id'), total=Sum('overall')
    )
    count = totals['count']
    if count:
        average = (Decimal(totals['total']) / count).quantize(TENTH, rounding=ROUND_HALF_UP)
    else:
        average = Decimal('0.0')
    hotel.rating_average = average
    hotel.rating_total_reviews = count
    hotel.save(update_fields=['rating_average', 'rating_total_reviews', 'updated_at'])
    logger.debug('Hotel %s rating: %s over %s reviews', hotel.pk, average, count)
    return average, count


def create_review(customer, booking_id, **fields):
    """Review a finished stay of ``customer``; one review per booking."""
    try:
        booking = Booking.objects.select_related('room', 'hotel').get(pk=booking_id, customer=customer)
    except Booking.DoesNotExist:
        raise NotFound("Booking not found")
    if booking.status not in REVIEWABLE:
        raise ValidationError("You can only review completed stays")
    if Review.objects.filter(booking=booking).exists():
        raise Conflict("You have already reviewed this booking")

    with transaction.atomic():
        review = Review.objects.create(
            booking=booking,
            customer=customer,
            hotel=booking.hotel,
            room_type=booking.room.room_type,
            stay_nights=booking.total_nights,
            stay_check_in=booking.check_in,
            stay_check_out=booking.check_out,
            is_verified=True,
            **fields,
        )
        recompute_hotel_rating(booking.hotel)
    return review


def update_review(review, **fields):
    with transaction.atomic():
        for attr, value in fields.items():
            setattr(review, attr, value)
        review.save()
        recompute_hotel_rating(review.hotel)
    return review


def delete_review(review):
    hotel = review.hotel
    with transaction.atomic():
        review.delete()
        recompute_hotel_rating(hotel)


def set_approval(review, is_approved, notes=''):
    with transaction.atomic():
        review.is_approved = is_approved
        if notes:
            review.moderation_notes = notes
        review.save(update_fields=['is_approved', 'moderation_notes', 'updated_at'])
        recompute_hotel_rating(review.hotel)
    return review


def respond(review, user, message):
    review.response_message = message
    review.responded_at = timezone.now()
    review.responded_by = user
    review.save(update_fields=['response_message', 'responded_at', 'responded_by', 'updated_at'])
    return review


def rating_distribution(reviews):
    counts = dict(reviews.values_list('overall').annotate(n=Count('id')).order_by())
    return {str(star): counts.get(star, 0) for star in range(5, 0, -1)}
