from django.http import JsonResponse
from django.utils import timezone


def welcome(request):
    return JsonResponse({"success": True, "message": "Welcome to the Hotel Marketplace API"})


def health_check(request):
    return JsonResponse({"success": True, "status": "ok", "timestamp": timezone.now().isoformat()})
