"""
Hotel discovery for customers.

Only listed hotels (verified and active) are ever returned. Price and
rating filters run in the database; the geo radius and amenity filters
run in Python over the narrowed queryset.
"""
import math
from collections import namedtuple

from django.db.models import Q

from .availability import annotate_rooms
from .models import Hotel

EARTH_RADIUS_KM = 6371.0

SORT_ORDER = {
    'rating': ('-rating_average', '-rating_total_reviews'),
    'price_low': ('price_min',),
    'price_high': ('-price_min',),
    'newest': ('-created_at',),
}

SearchResult = namedtuple('SearchResult', 'hotel distance_km rooms')


def listed_hotels():
    return Hotel.objects.filter(is_verified=True, is_active=True)


def haversine_km(lat1, lon1, lat2, lon2):
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)
    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(a))


def browse_hotels(location=None, min_price=None, max_price=None, min_rating=None):
    qs = listed_hotels()
    if location:
        qs = qs.filter(
            Q(city__icontains=location) | Q(state__icontains=location) | Q(name__icontains=location)
        )
    if min_price is not None:
        qs = qs.filter(price_min__gte=min_price)
    if max_price is not None:
        qs = qs.filter(price_max__lte=max_price)
    if min_rating is not None:
        qs = qs.filter(rating_average__gte=min_rating)
    return qs.order_by('-rating_average', '-created_at')


def search_hotels(latitude=None, longitude=None, radius=10, min_price=None, max_price=None,
                  amenities=(), rating=None, check_in=None, check_out=None, guests=1, rooms=1,
                  sort_by='rating'):
    """Return ``SearchResult`` rows in display order.

    When a date range is given each result carries ``(room, available)``
    pairs for the room types that can still take ``rooms`` units for
    ``guests`` adults, and hotels with none are dropped.
    """
    qs = listed_hotels()
    if min_price is not None:
        qs = qs.filter(price_min__gte=min_price)
    if max_price is not None:
        qs = qs.filter(price_max__lte=max_price)
    if rating is not None:
        qs = qs.filter(rating_average__gte=rating)
    geo = latitude is not None and longitude is not None
    if sort_by != 'distance' or not geo:
        qs = qs.order_by(*SORT_ORDER.get(sort_by, SORT_ORDER['rating']))

    wanted = set(amenities or ())
    results = []
    for hotel in qs:
        distance = None
        if geo:
            distance = haversine_km(latitude, longitude, hotel.latitude, hotel.longitude)
            if distance > radius:
                continue
        if wanted and not wanted & set(hotel.amenities):
            continue
        room_rows = None
        if check_in and check_out:
            candidates = hotel.rooms.filter(is_active=True, capacity_adults__gte=guests)
            room_rows = [
                (room, available)
                for room, available, fits in annotate_rooms(candidates, check_in, check_out, rooms)
                if fits
            ]
            if not room_rows:
                continue
        results.append(SearchResult(hotel, distance, room_rows))

    if sort_by == 'distance' and geo:
        results.sort(key=lambda result: result.distance_km)
    return results
