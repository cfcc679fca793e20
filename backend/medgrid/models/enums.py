"""
System enumerations.
Centralized to avoid circular imports.
"""
from enum import Enum


class BedStatusEnum(str, Enum):
    """Status of a hospital bed."""
    AVAILABLE = "available"
    OCCUPIED = "occupied"
    MAINTENANCE = "maintenance"


class GenderEnum(str, Enum):
    """Patient gender as captured on the admission form."""
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class BillStatusEnum(str, Enum):
    """Billing lifecycle of a patient bill."""
    DRAFT = "draft"
    GENERATED = "generated"
    SENT = "sent"
    PAID = "paid"
    CANCELLED = "cancelled"


class OccupancyActionEnum(str, Enum):
    """Occupancy transition that produced a notification."""
    ADMIT = "admit"
    DISCHARGE = "discharge"
    TRANSFER = "transfer"
    MAINTENANCE = "maintenance"


# ============================================
# ENUM-RELATED CONSTANTS
# ============================================

# Allowed bill status transitions (paid and cancelled are terminal)
BILL_TRANSITIONS = {
    BillStatusEnum.DRAFT: [
        BillStatusEnum.GENERATED,
        BillStatusEnum.CANCELLED,
    ],
    BillStatusEnum.GENERATED: [
        BillStatusEnum.SENT,
        BillStatusEnum.PAID,
        BillStatusEnum.CANCELLED,
    ],
    BillStatusEnum.SENT: [
        BillStatusEnum.PAID,
        BillStatusEnum.CANCELLED,
    ],
    BillStatusEnum.PAID: [],
    BillStatusEnum.CANCELLED: [],
}
