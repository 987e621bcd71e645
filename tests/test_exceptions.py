from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError
from rest_framework.exceptions import ValidationError

from logistics.exceptions import logistics_exception_handler
from logistics.services import BadRequest, Conflict, NotFound


def handle(exc):
    return logistics_exception_handler(exc, {"view": None})


def test_service_errors_keep_status() -> None:
    assert handle(BadRequest("nope")).status_code == 400
    assert handle(NotFound("gone")).data == {"detail": "gone"}
    assert handle(Conflict("taken")).status_code == 409


def test_serializer_errors_are_flattened() -> None:
    response = handle(ValidationError({"name": ["This field is required."], "price": ["Too low."]}))

    assert response.status_code == 400
    assert response.data["detail"] == "Validation failed: name: This field is required., price: Too low."
    assert response.data["errors"]["name"] == ["This field is required."]


def test_nested_errors_get_a_path() -> None:
    response = handle(ValidationError({"bundles": [{}, {"quantity": ["Required."]}]}))

    assert response.data["detail"] == "Validation failed: bundles[1].quantity: Required."


def test_model_validation_errors() -> None:
    field_error = handle(DjangoValidationError({"discount": ["Ensure this value is less than or equal to 100."]}))
    plain_error = handle(DjangoValidationError("Broken record"))

    assert field_error.status_code == 400
    assert field_error.data["detail"].startswith("Validation failed: discount: ")
    assert plain_error.data["detail"] == "Validation failed: Broken record"


def test_integrity_error_is_conflict() -> None:
    assert handle(IntegrityError("UNIQUE constraint failed")).status_code == 409


def test_unexpected_error_is_500() -> None:
    response = handle(RuntimeError("boom"))

    assert response.status_code == 500
    assert response.data == {"detail": "Internal server error"}


def test_check_constraint_is_bad_request() -> None:
    sqlite = handle(IntegrityError("CHECK constraint failed: ck_booking_dates"))
    postgres = handle(IntegrityError(
        'new row for relation "container" violates check constraint "ck_container_balance_nonnegative"'
    ))
    unnamed = handle(IntegrityError('CHECK constraint failed: (JSON_VALID("products") OR "products" IS NULL)'))

    assert sqlite.status_code == 400
    assert sqlite.data == {"detail": "Expected receiving date must be after booking date"}
    assert postgres.data == {"detail": "Advance payment cannot exceed booking charge"}
    assert unnamed.status_code == 400
    assert unnamed.data == {"detail": "Validation failed: stored values are out of range"}
