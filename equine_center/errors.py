"""Domain errors raised by services and mapped to HTTP responses."""

from typing import Any, Mapping


class AppError(Exception):
    code = "app_error"
    status_code = 400

    def __init__(self, message: str, *, details: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class AuthError(AppError):
    code = "auth_error"
    status_code = 401


class NotFoundError(AppError):
    code = "not_found"
    status_code = 404


class ValidationError(AppError):
    code = "validation_error"
    status_code = 422


class ConflictError(AppError):
    code = "conflict"
    status_code = 409


class DuplicateEmailError(ConflictError):
    code = "duplicate_email"


class DuplicateTrackingIdError(ConflictError):
    code = "duplicate_tracking_id"


class OwnerHasHorsesError(ConflictError):
    code = "owner_has_horses"


class TrackingIdExhaustedError(AppError):
    code = "tracking_id_exhausted"
    status_code = 503


class UnknownIndexError(AppError):
    code = "unknown_index"
    status_code = 400


class ImportFormatError(AppError):
    code = "import_format_error"
    status_code = 400


class SeasonMismatchError(AppError):
    code = "season_mismatch"
    status_code = 400


class StoreOperationError(AppError):
    code = "store_operation_failed"
    status_code = 500


class ViewLoadError(AppError):
    code = "view_load_failed"
    status_code = 500
