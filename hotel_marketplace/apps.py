from django.apps import AppConfig


class HotelMarketplaceConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'hotel_marketplace'
    verbose_name = 'Hotel marketplace'
