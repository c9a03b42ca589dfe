from django.http import JsonResponse

from accounts.models import User

import logging

logger = logging.getLogger(__name__)


# Identity comes from a trusted upstream proxy header
class HeaderLoginMiddleware:
    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        if request.path.startswith("/api"):
            username = request.headers.get("X-User-NAME")
            if username:
                logger.info("Header login for user: %s", username)
                try:
                    request.user = User.objects.get(username=username, is_active=True)
                except User.DoesNotExist:
                    return JsonResponse(
                        {"error": "User not found or invalid credentials.", "retryable": False},
                        status=401,
                    )
        response = self.get_response(request)
        return response
