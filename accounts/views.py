from rest_framework import status, viewsets
from rest_framework.decorators import api_view, action, permission_classes
from rest_framework.permissions import IsAdminUser
from rest_framework.response import Response
from django.core.management import call_command
import structlog

from studytrack.context import Credentials

logger = structlog.get_logger()


@api_view(["POST"])
@permission_classes([IsAdminUser])
def initialize_data(request):
    file_name = request.data.get("file", "MOCK_DATA.json")
    logger.info("init_data_requested", file=file_name)
    try:
        call_command("init_data", file=file_name)
    except Exception as e:
        logger.exception("init_data_failed", file=file_name)
        return Response(
            {"error": str(e), "retryable": False},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    return Response(
        {"message": f"Data initialized successfully from {file_name}"},
        status=status.HTTP_200_OK,
    )


class UserViewSet(viewsets.ViewSet):
    """
    ViewSet for user-related operations.
    """

    @action(detail=False, methods=["get"])
    def me(self, request):
        """
        Returns the username of the logged-in user.
        """
        credentials = Credentials.from_user(request.user)
        return Response({"username": credentials.username}, status=status.HTTP_200_OK)
