import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError
from django.db.models import ProtectedError
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

from .services import LogisticsError

logger = logging.getLogger(__name__)

# check constraints from models.py
CHECK_MESSAGES = {
    "ck_booking_pickup_variant": "Pickup partner does not match the pickup type",
    "ck_booking_dates": "Expected receiving date must be after booking date",
    "ck_booking_bundle_count": "Bundle count must be at least 1",
    "ck_container_balance_nonnegative": "Advance payment cannot exceed booking charge",
}


def _flatten(errors, prefix=""):
    """yield (field, message) pairs from nested DRF / Django error structures"""
    if isinstance(errors, dict):
        for key, value in errors.items():
            yield from _flatten(value, f"{prefix}.{key}" if prefix else str(key))
    elif isinstance(errors, (list, tuple)):
        for index, item in enumerate(errors):
            if isinstance(item, (dict, list, tuple)):
                yield from _flatten(item, f"{prefix}[{index}]")
            else:
                yield prefix, str(item)
    else:
        yield prefix, str(errors)


def validation_failed(errors) -> Response:
    parts = []
    for field, message in _flatten(errors):
        if field and field not in ("non_field_errors", "__all__"):
            parts.append(f"{field}: {message}")
        else:
            parts.append(message)
    return Response(
        {"detail": "Validation failed: " + ", ".join(parts), "errors": errors},
        status=status.HTTP_400_BAD_REQUEST,
    )


def _check_message(text: str) -> str:
    for name, message in CHECK_MESSAGES.items():
        if name in text:
            return message
    return "Validation failed: stored values are out of range"


def logistics_exception_handler(exc, context):
    if isinstance(exc, LogisticsError):
        return Response({"detail": exc.detail}, status=exc.status_code)

    if isinstance(exc, DjangoValidationError):
        errors = exc.message_dict if hasattr(exc, "error_dict") else {"non_field_errors": exc.messages}
        return validation_failed(errors)

    if isinstance(exc, ValidationError):
        return validation_failed(exc.detail)

    if isinstance(exc, ProtectedError):
        return Response(
            {"detail": "Cannot delete this record while other records still reference it"},
            status=status.HTTP_409_CONFLICT,
        )

    if isinstance(exc, IntegrityError):
        logger.warning(f"Integrity error: {exc}")
        if "check constraint" in str(exc).lower():
            return Response({"detail": _check_message(str(exc))}, status=status.HTTP_400_BAD_REQUEST)
        return Response({"detail": "A conflicting record already exists"}, status=status.HTTP_409_CONFLICT)

    response = exception_handler(exc, context)
    if response is None:
        view = context.get("view")
        logger.error(f"Unhandled error in {view.__class__.__name__ if view else 'view'}: {exc}", exc_info=exc)
        return Response({"detail": "Internal server error"}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
    return response
