from django.urls import path
from rest_framework.routers import DefaultRouter

from hotel_marketplace.views import admin, auth, customer, health_check, hotel

router = DefaultRouter()
router.register(r'auth', auth.AuthViewSet, basename='auth')

router.register(r'customer/hotels', customer.CustomerHotelViewSet, basename='customer-hotel')
router.register(r'customer/bookings', customer.CustomerBookingViewSet, basename='customer-booking')
router.register(r'customer/favorites', customer.FavoriteViewSet, basename='customer-favorite')
router.register(r'customer/reviews', customer.CustomerReviewViewSet, basename='customer-review')
router.register(r'customer/grievances', customer.CustomerGrievanceViewSet, basename='customer-grievance')

router.register(r'hotel/bookings', hotel.HotelBookingViewSet, basename='hotel-booking')
router.register(r'hotel/rooms', hotel.HotelRoomViewSet, basename='hotel-room')
router.register(r'hotel/reviews', hotel.HotelReviewViewSet, basename='hotel-review')

router.register(r'admin/users', admin.AdminUserViewSet, basename='admin-user')
router.register(r'admin/hotels', admin.AdminHotelViewSet, basename='admin-hotel')
router.register(r'admin/bookings', admin.AdminBookingViewSet, basename='admin-booking')
router.register(r'admin/reviews', admin.AdminReviewViewSet, basename='admin-review')
router.register(r'admin/grievances', admin.AdminGrievanceViewSet, basename='admin-grievance')

urlpatterns = [
    path('health/', health_check, name='api-health'),
    path('customer/profile/', customer.profile, name='customer-profile'),
    path('customer/profile/image/', customer.profile_image, name='customer-profile-image'),
    path('customer/rooms/availability/', customer.room_availability, name='customer-room-availability'),
    path('customer/support/ticket/', customer.support_ticket, name='customer-support-ticket'),
    path('hotel/profile/', hotel.profile, name='hotel-profile'),
    path('hotel/profile/images/', hotel.profile_images, name='hotel-profile-images'),
    path('admin/dashboard/', admin.dashboard, name='admin-dashboard'),
    path('admin/analytics/', admin.analytics, name='admin-analytics'),
] + router.urls
