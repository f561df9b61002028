from django.contrib import admin
from django.contrib.auth.admin import UserAdmin

from .models import Booking, CustomerProfile, Grievance, Hotel, Review, Room, User


@admin.register(User)
class MarketplaceUserAdmin(UserAdmin):
    list_display = ('email', 'role', 'is_verified', 'is_active', 'date_joined')
    list_filter = ('role', 'is_verified', 'is_active')
    fieldsets = UserAdmin.fieldsets + (
        ('Marketplace', {'fields': ('role', 'is_verified')}),
    )


@admin.register(CustomerProfile)
class CustomerProfileAdmin(admin.ModelAdmin):
    list_display = ('full_name', 'user', 'phone', 'city', 'loyalty_points')
    search_fields = ('first_name', 'last_name', 'user__email')


@admin.register(Hotel)
class HotelAdmin(admin.ModelAdmin):
    list_display = ('name', 'city', 'is_verified', 'is_active', 'rating_average', 'rating_total_reviews')
    list_filter = ('is_verified', 'is_active')
    search_fields = ('name', 'city')


@admin.register(Room)
class RoomAdmin(admin.ModelAdmin):
    list_display = ('name', 'hotel', 'room_type', 'base_price', 'total_rooms', 'is_active')
    list_filter = ('room_type', 'is_active')


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ('reference', 'hotel', 'room', 'check_in', 'check_out', 'number_of_rooms', 'status')
    list_filter = ('status',)
    search_fields = ('reference', 'contact_email')
    readonly_fields = ('reference',)


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ('title', 'hotel', 'overall', 'is_approved', 'created_at')
    list_filter = ('is_approved', 'overall')


@admin.register(Grievance)
class GrievanceAdmin(admin.ModelAdmin):
    list_display = ('grievance_number', 'subject', 'hotel', 'status', 'priority')
    list_filter = ('status', 'priority', 'category')
