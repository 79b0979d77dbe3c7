import logging

from django.db import IntegrityError
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger("gmi.core")


class Conflict(APIException):
    """
    The request violates a uniqueness or cardinality rule
    (duplicate registration, team full, invite already answered, ...).
    """
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Request conflicts with the current state of the resource."
    default_code = "conflict"


def _envelope(status_code, errors):
    return Response(
        {
            "success": False,
            "status_code": status_code,
            "errors": errors,
        },
        status=status_code,
    )


def custom_exception_handler(exc, context):
    """
    Every error leaves the API as
    {"success": false, "status_code": N, "errors": {...}}.
    Success responses (2xx) never come through here.
    """
    # Services translate constraint violations themselves; one that slips
    # through is still a conflict, not a server error
    if isinstance(exc, IntegrityError):
        view = context.get("view")
        logger.warning(f"Untranslated integrity error in {type(view).__name__}: {exc}")
        exc = Conflict()

    response = drf_exception_handler(exc, context)
    if response is not None:
        return _envelope(response.status_code, response.data)

    logger.exception("Unhandled API exception", exc_info=exc)
    return _envelope(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        {"detail": "Internal server error."},
    )
