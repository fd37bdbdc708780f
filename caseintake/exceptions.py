"""Exception hierarchy for case intake.

All errors inherit from CaseIntakeError, which carries a machine-readable
error_code alongside the human-readable message.
"""

from enum import Enum


class ErrorCode(str, Enum):
    """Stable error codes."""

    INTERNAL_ERROR = "INTERNAL_ERROR"
    RECORD_NOT_FOUND = "RECORD_NOT_FOUND"
    RECORD_FETCH_TRANSIENT = "RECORD_FETCH_TRANSIENT"
    RECORD_ACCESS_DENIED = "RECORD_ACCESS_DENIED"
    FIELD_ACCESS = "FIELD_ACCESS"
    ACTIVE_CASE_EXISTS = "ACTIVE_CASE_EXISTS"
    MISSING_CUSTOMER = "MISSING_CUSTOMER"


class CaseIntakeError(Exception):
    """Base exception for all case intake errors."""

    error_code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class RecordFetchError(CaseIntakeError):
    """Raised when the remote record service cannot return a record."""

    def __init__(self, message: str, record_type: str, record_id: str) -> None:
        super().__init__(message)
        self.record_type = record_type
        self.record_id = record_id

    @property
    def reason(self) -> str:
        return self.error_code.value.lower()


class RecordNotFoundError(RecordFetchError):
    """Raised when the requested record does not exist."""

    error_code = ErrorCode.RECORD_NOT_FOUND


class TransientFetchError(RecordFetchError):
    """Raised on timeouts, throttling, server errors and transport failures."""

    error_code = ErrorCode.RECORD_FETCH_TRANSIENT


class RecordAccessDeniedError(RecordFetchError):
    """Raised when the caller may not read the record."""

    error_code = ErrorCode.RECORD_ACCESS_DENIED


class FieldAccessError(CaseIntakeError):
    """Raised by a form host when a field exists but cannot be read."""

    error_code = ErrorCode.FIELD_ACCESS

    def __init__(self, message: str, field_name: str) -> None:
        super().__init__(message)
        self.field_name = field_name


class AdmissionRejectedError(CaseIntakeError):
    """Raised when a case record may not be created."""


class ActiveCaseExistsError(AdmissionRejectedError):
    """Raised when the customer already has an active case."""

    error_code = ErrorCode.ACTIVE_CASE_EXISTS

    def __init__(self, customer_id: str) -> None:
        super().__init__("A case for this customer is already active. Unable to create Case.")
        self.customer_id = customer_id


class MissingCustomerError(AdmissionRejectedError):
    """Raised when the case being created has no usable customer reference."""

    error_code = ErrorCode.MISSING_CUSTOMER

    def __init__(self) -> None:
        super().__init__("The Customer ID is required to create a case.")
