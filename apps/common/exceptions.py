import logging

from django.conf import settings
from django.db import IntegrityError
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler, set_rollback

logger = logging.getLogger(__name__)


class Unauthenticated(exceptions.NotAuthenticated):
    default_detail = "Unauthorized"


class Forbidden(exceptions.PermissionDenied):
    default_detail = "Insufficient permissions"


class NotFound(exceptions.NotFound):
    default_detail = "Not found"


class Conflict(exceptions.APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Resource already exists"
    default_code = "conflict"


class InvalidState(exceptions.APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Operation not allowed in the current state"
    default_code = "invalid_state"


class InvalidRole(exceptions.APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Unrecognized role"
    default_code = "invalid_role"


def _error_message(detail) -> str:
    if isinstance(detail, (list, tuple)):
        return _error_message(detail[0]) if detail else ""
    if isinstance(detail, dict):
        if "detail" in detail:
            return _error_message(detail["detail"])
        return "Invalid input"
    return str(detail)


def api_exception_handler(exc, context):
    """
    Render every error as ``{"success": false, "error": ...}``.

    Unknown exceptions become a generic 500 so that SQL or stack details do not
    reach the client outside DEBUG.
    """
    if isinstance(exc, IntegrityError):
        logger.warning("Integrity error in %s: %s", context.get("view").__class__.__name__, exc)
        exc = Conflict()

    response = exception_handler(exc, context)
    if response is None:
        logger.exception("Unhandled exception: %s", exc)
        set_rollback()
        payload = {"success": False, "error": "Internal server error"}
        if settings.DEBUG:
            payload["details"] = str(exc)
        return Response(payload, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    payload = {"success": False, "error": _error_message(response.data)}
    if isinstance(exc, exceptions.ValidationError) and isinstance(response.data, dict):
        payload["details"] = response.data
    response.data = payload
    return response
