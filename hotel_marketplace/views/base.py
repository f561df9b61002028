from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import NotFound

from ..models import CustomerProfile, Hotel
from ..responses import envelope


def customer_profile(user):
    try:
        return user.customer_profile
    except CustomerProfile.DoesNotExist:
        raise NotFound("Customer profile not found")


def hotel_profile(user):
    try:
        return user.hotel
    except Hotel.DoesNotExist:
        raise NotFound("Hotel profile not found")


class EnvelopeMixin:
    """Wraps the generic viewset handlers in the ``{success, data}`` envelope."""
    not_found_message = 'Resource not found'
    created_message = 'Created successfully'
    updated_message = 'Updated successfully'
    deleted_message = 'Deleted successfully'

    def get_object(self):
        try:
            return super().get_object()
        except Http404:
            raise NotFound(self.not_found_message)

    def paginated(self, items, serializer_class=None, **extra):
        page = self.paginate_queryset(items)
        serializer_class = serializer_class or self.get_serializer_class()
        serializer = serializer_class(page, many=True, context=self.get_serializer_context())
        return self.paginator.get_paginated_response(serializer.data, **extra)

    def list(self, request, *args, **kwargs):
        return self.paginated(self.filter_queryset(self.get_queryset()))

    def retrieve(self, request, *args, **kwargs):
        return envelope(self.get_serializer(self.get_object()).data)

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        self.perform_create(serializer)
        return envelope(serializer.data, self.created_message, status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        serializer = self.get_serializer(self.get_object(), data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        self.perform_update(serializer)
        return envelope(serializer.data, self.updated_message)

    def destroy(self, request, *args, **kwargs):
        self.perform_destroy(self.get_object())
        return envelope(message=self.deleted_message)