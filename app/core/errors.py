# app/core/errors.py
from fastapi import status


class AppError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "VALIDATION_ERROR"


class DuplicateCheckIn(AppError):
    """Same participant, same event, same calendar day. A business outcome, not a failure."""
    status_code = status.HTTP_400_BAD_REQUEST
    code = "DUPLICATE_CHECK_IN"

    def __init__(self, message: str = "Participant already checked in today"):
        super().__init__(message)


class Unauthenticated(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "UNAUTHENTICATED"


class AccessDenied(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "ACCESS_DENIED"


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"


class UpstreamError(AppError):
    status_code = status.HTTP_502_BAD_GATEWAY
    code = "UPSTREAM_ERROR"


class CheckInStorageError(RuntimeError):
    """Ledger insert rejected for a reason other than a same-day duplicate. Handled as a 500."""
