"""
Custom exceptions.
Semantic errors raised by services and mapped to HTTP status codes in main.py.
"""


class BaseAppException(Exception):
    """
    Base application exception.
    Every custom exception inherits from it.
    """
    status_code: int = 400

    def __init__(self, message: str, code: str = "ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)


# ============================================
# VALIDATION ERRORS
# ============================================

class ValidationError(BaseAppException):
    """Malformed or missing input. No state was changed."""
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message, "VALIDATION_ERROR")


class InvalidStateError(BaseAppException):
    """Invalid state for the requested operation."""
    status_code = 409

    def __init__(self, message: str):
        super().__init__(message, "INVALID_STATE")


# ============================================
# NOT FOUND ERRORS
# ============================================

class NotFoundError(BaseAppException):
    """Resource not found."""
    status_code = 404

    def __init__(self, resource: str, identifier: str):
        super().__init__(
            f"{resource} with identifier '{identifier}' not found",
            "NOT_FOUND"
        )
        self.resource = resource
        self.identifier = identifier


class HospitalNotFoundError(NotFoundError):
    """Hospital not found."""
    def __init__(self, hospital_id: str):
        super().__init__("Hospital", hospital_id)


class DepartmentNotFoundError(NotFoundError):
    """Department not found."""
    def __init__(self, department_id: str):
        super().__init__("Department", department_id)


class BedNotFoundError(NotFoundError):
    """Bed not found, or not part of the given department."""
    def __init__(self, bed_id: str, department_id: str = None):
        super().__init__("Bed", bed_id)
        if department_id:
            self.message = (
                f"Bed with identifier '{bed_id}' not found "
                f"in department '{department_id}'"
            )
            self.args = (self.message,)


class PatientNotFoundError(NotFoundError):
    """Patient not found."""
    def __init__(self, patient_id: str):
        super().__init__("Patient", patient_id)


class BillNotFoundError(NotFoundError):
    """Bill not found."""
    def __init__(self, bill_id: str):
        super().__init__("Bill", bill_id)


# ============================================
# OCCUPANCY ERRORS
# ============================================

class BedUnavailableError(BaseAppException):
    """
    The bed could not be claimed: it is occupied, under maintenance, or a
    concurrent request won the race. Retry with another bed.
    """
    status_code = 409

    def __init__(self, bed_id: str, current_status: str = None, operation: str = "admission"):
        status_msg = f" Current status: {current_status}" if current_status else ""
        super().__init__(
            f"Bed {bed_id} is not available for {operation}.{status_msg}",
            "BED_UNAVAILABLE"
        )
        self.bed_id = bed_id
        self.current_status = current_status


class NoActiveAdmissionError(BaseAppException):
    """Discharge or transfer requested for a patient without an active stay."""
    status_code = 409

    def __init__(self, patient_id: str):
        super().__init__(
            f"Patient {patient_id} has no active admission",
            "NO_ACTIVE_ADMISSION"
        )
        self.patient_id = patient_id


class PatientAlreadyAdmittedError(BaseAppException):
    """Admission requested for a patient that already has an active stay."""
    status_code = 409

    def __init__(self, patient_id: str):
        super().__init__(
            f"Patient {patient_id} already has an active admission",
            "PATIENT_ALREADY_ADMITTED"
        )
        self.patient_id = patient_id


# ============================================
# BILLING ERRORS
# ============================================

class InvalidBillTransitionError(BaseAppException):
    """Bill status change not allowed by the billing lifecycle."""
    status_code = 409

    def __init__(self, current_status: str, new_status: str, allowed: list = None):
        allowed_msg = ""
        if allowed:
            allowed_msg = f" Allowed: {', '.join(allowed)}"
        super().__init__(
            f"Cannot change bill status from '{current_status}' to '{new_status}'.{allowed_msg}",
            "INVALID_BILL_TRANSITION"
        )
        self.current_status = current_status
        self.new_status = new_status


# ============================================
# STORE ERRORS
# ============================================

class StoreUnavailableError(BaseAppException):
    """Transient persistence failure. Callers should retry with backoff."""
    status_code = 503

    def __init__(self, message: str = "The data store is temporarily unavailable"):
        super().__init__(message, "STORE_UNAVAILABLE")
