"""
Pydantic schemas for validation and serialization.
"""
from medgrid.schemas.patient import (
    EmergencyContact,
    AdmitRequest,
    TransferRequest,
    AdmissionResponse,
    PatientResponse,
)

from medgrid.schemas.bed import (
    BedResponse,
    BedMaintenanceRequest,
)

from medgrid.schemas.department import DepartmentResponse

from medgrid.schemas.bill import (
    BillResponse,
    BillStatusUpdate,
)

from medgrid.schemas.events import (
    OccupancyChangedEvent,
    OCCUPANCY_CHANGED,
    RESYNC_REQUIRED,
)

from medgrid.schemas.responses import (
    MessageResponse,
    ErrorResponse,
)

__all__ = [
    "EmergencyContact",
    "AdmitRequest",
    "TransferRequest",
    "AdmissionResponse",
    "PatientResponse",
    "BedResponse",
    "BedMaintenanceRequest",
    "DepartmentResponse",
    "BillResponse",
    "BillStatusUpdate",
    "OccupancyChangedEvent",
    "OCCUPANCY_CHANGED",
    "RESYNC_REQUIRED",
    "MessageResponse",
    "ErrorResponse",
]
