import logging

from django.db import DatabaseError
from rest_framework import exceptions, status
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class InvalidArgument(exceptions.APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid argument."
    default_code = "invalid_argument"


class NotFound(exceptions.NotFound):
    default_detail = "Not found."
    default_code = "not_found"


class StorageError(exceptions.APIException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Storage failure."
    default_code = "storage_error"


def catalog_exception_handler(exc, context):
    """
    DRF exception handler that also answers database failures.
    IntegrityError and ProtectedError are DatabaseError subclasses, so
    constraint violations end up here too and are reported as StorageError.
    """
    if isinstance(exc, DatabaseError):
        view = context.get("view")
        # Called from inside DRF's except block, so the traceback is available.
        logger.exception("Storage failure in %s: %s", view.__class__.__name__ if view else "n/a", exc)
        exc = StorageError()
    return exception_handler(exc, context)
