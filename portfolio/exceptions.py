import logging

from django.core.exceptions import PermissionDenied
from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class EntityNotFound(exceptions.NotFound):
    """Raised by the content repositories when an id matches no record."""

    def __init__(self, model=None, pk=None):
        label = model._meta.verbose_name.capitalize() if model is not None else "Record"
        super().__init__(f"{label} not found")
        self.model = model
        self.pk = pk


def _first_message(detail):
    if isinstance(detail, dict):
        for key, value in detail.items():
            message = _first_message(value)
            if message:
                if key in ("non_field_errors", "detail"):
                    return message
                return f"{key}: {message}"
        return ""
    if isinstance(detail, (list, tuple)):
        for value in detail:
            message = _first_message(value)
            if message:
                return message
        return ""
    return str(detail)


def api_exception_handler(exc, context):
    """Every error leaves the API as ``{"message": ..., ["errors": ...]}``."""
    if isinstance(exc, Http404):
        exc = exceptions.NotFound("Not found")
    elif isinstance(exc, PermissionDenied):
        exc = exceptions.PermissionDenied()

    response = exception_handler(exc, context)
    if response is None:
        view = context.get("view")
        logger.exception("Unhandled error in %s", type(view).__name__ if view else "view", exc_info=exc)
        return Response({"message": "Server error"}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    if isinstance(exc, exceptions.ValidationError):
        response.data = {"message": _first_message(exc.detail) or "Invalid input", "errors": exc.detail}
    else:
        response.data = {"message": _first_message(response.data) or str(exc)}
    return response
