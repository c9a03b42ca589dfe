from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler
import structlog

logger = structlog.get_logger()


class StoreError(Exception):
    """Base class for failures talking to the backing store."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    retryable = False
    default_message = "Store error"

    def __init__(self, message=None):
        super().__init__(message or self.default_message)


class StoreUnavailable(StoreError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    retryable = True
    default_message = "Store unavailable"


class NotAuthenticated(StoreError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "User not authenticated"


class RecordNotFound(StoreError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Record not found"


def exception_handler(exc, context):
    if isinstance(exc, StoreError):
        logger.warning("store_error",
            error=type(exc).__name__,
            message=str(exc),
            retryable=exc.retryable,
        )
        return Response(
            {"error": str(exc), "retryable": exc.retryable},
            status=exc.status_code,
        )
    return drf_exception_handler(exc, context)
