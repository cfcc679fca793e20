"""
Occupancy service.
Sole writer of bed status, bed <-> patient links and admission records.

Every mutation runs in a single transaction and every guard is the WHERE
clause of the conditional UPDATE that performs the transition, so two
requests racing for the same bed cannot both succeed. Events are published
only after the commit.
"""
from typing import Optional, List, Dict, Any
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import date
import logging

from sqlalchemy.exc import IntegrityError, DBAPIError
from sqlmodel import Session

from medgrid.models.patient import Patient
from medgrid.models.admission import Admission
from medgrid.models.bed import Bed
from medgrid.models.department import Department
from medgrid.models.bill import Bill
from medgrid.models.enums import (
    BedStatusEnum,
    BillStatusEnum,
    GenderEnum,
    OccupancyActionEnum,
)
from medgrid.repositories.bed_repo import BedRepository
from medgrid.repositories.hospital_repo import DepartmentRepository
from medgrid.repositories.patient_repo import PatientRepository, AdmissionRepository
from medgrid.repositories.bill_repo import BillRepository
from medgrid.schemas.events import OccupancyChangedEvent
from medgrid.core.notification_channel import NotificationChannel, channel
from medgrid.core.exceptions import (
    BaseAppException,
    ValidationError,
    InvalidStateError,
    DepartmentNotFoundError,
    BedNotFoundError,
    PatientNotFoundError,
    BedUnavailableError,
    NoActiveAdmissionError,
    PatientAlreadyAdmittedError,
    StoreUnavailableError,
)
from medgrid.utils.validators import missing_fields, is_valid_phone, is_valid_birth_date

logger = logging.getLogger("medgrid.occupancy")


DEMOGRAPHIC_FIELDS = [
    "first_name",
    "last_name",
    "date_of_birth",
    "gender",
    "contact_number",
]

EMERGENCY_CONTACT_FIELDS = [
    "name",
    "relationship",
    "contact_number",
]


@dataclass
class OccupancyResult:
    """Result of an occupancy operation."""
    success: bool
    message: str
    patient: Optional[Patient] = None
    admission: Optional[Admission] = None
    bill: Optional[Bill] = None
    events: List[OccupancyChangedEvent] = field(default_factory=list)


class OccupancyService:
    """
    Service for admissions, discharges, transfers and bed maintenance.

    Handles:
    - Admission of new and returning patients into an available bed
    - Discharge (closes the admission and frees the bed)
    - Transfer between beds, possibly across departments
    - Putting beds into and out of maintenance
    - Occupancy queries that always read committed state
    """

    def __init__(self, session: Session, notifier: Optional[NotificationChannel] = channel):
        self.session = session
        self.notifier = notifier
        self.bed_repo = BedRepository(session)
        self.department_repo = DepartmentRepository(session)
        self.patient_repo = PatientRepository(session)
        self.admission_repo = AdmissionRepository(session)
        self.bill_repo = BillRepository(session)

    # ============================================
    # UNIT OF WORK
    # ============================================

    @contextmanager
    def _unit_of_work(self, operation: str, bed_id: Optional[str] = None):
        """
        Commits on success, rolls everything back on any failure.

        A unique-constraint violation on a bed link means a concurrent
        request won the bed; connectivity problems become a transient
        StoreUnavailableError.
        """
        try:
            yield
            self.session.commit()
        except BaseAppException:
            self.session.rollback()
            raise
        except IntegrityError as e:
            self.session.rollback()
            logger.warning(f"{operation} conflict on bed {bed_id}: {e.orig}")
            raise BedUnavailableError(bed_id, operation=operation) from e
        except DBAPIError as e:
            self.session.rollback()
            logger.error(f"{operation} failed, store unavailable: {e}")
            raise StoreUnavailableError() from e
        except Exception:
            self.session.rollback()
            raise

    def _publish(self, hospital_id: str, events: List[OccupancyChangedEvent]) -> None:
        """Fire-and-forget publication. Never fails the operation."""
        if not events or self.notifier is None:
            return
        try:
            self.notifier.publish(hospital_id, events)
        except Exception as e:
            logger.error(f"Could not publish {len(events)} event(s) for hospital {hospital_id}: {e}")

    def _event(
        self,
        department: Department,
        bed_id: str,
        status: BedStatusEnum,
        action: OccupancyActionEnum,
        patient_id: Optional[str] = None
    ) -> OccupancyChangedEvent:
        return OccupancyChangedEvent(
            hospital_id=department.hospital_id,
            department_id=department.id,
            bed_id=bed_id,
            status=status,
            patient_id=patient_id,
            action=action,
        )

    # ============================================
    # LOOKUPS
    # ============================================

    def _require_department(self, department_id: str) -> Department:
        department = self.department_repo.get_by_id(department_id)
        if not department:
            raise DepartmentNotFoundError(department_id)
        return department

    def _require_bed_in_department(self, bed_id: str, department: Department) -> Bed:
        """Returns the latest state of a bed, checking it belongs to the department."""
        bed = self.bed_repo.get_fresh(bed_id)
        if not bed:
            raise BedNotFoundError(bed_id)
        if bed.department_id != department.id:
            raise BedNotFoundError(bed_id, department.id)
        return bed

    def _require_patient(self, patient_id: str) -> Patient:
        patient = self.patient_repo.get_fresh(patient_id)
        if not patient:
            raise PatientNotFoundError(patient_id)
        return patient

    def _require_active_admission(self, patient: Patient) -> Admission:
        if not patient.active_admission_id:
            raise NoActiveAdmissionError(patient.id)
        admission = self.admission_repo.get_fresh(patient.active_admission_id)
        if not admission or not admission.is_active:
            raise NoActiveAdmissionError(patient.id)
        return admission

    # ============================================
    # VALIDATION
    # ============================================

    def _validate_ids(self, **ids: Optional[str]) -> None:
        missing = missing_fields(ids, ids.keys())
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    def _validate_new_patient(self, patient_data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Checks the demographics of a new patient and returns the column values.

        Raises:
            ValidationError: If a required field is missing or malformed
        """
        missing = missing_fields(patient_data, DEMOGRAPHIC_FIELDS)

        contact = patient_data.get("emergency_contact") or {}
        if hasattr(contact, "model_dump"):
            contact = contact.model_dump()
        missing += [
            f"emergency_contact.{name}"
            for name in missing_fields(contact, EMERGENCY_CONTACT_FIELDS)
        ]

        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

        invalid = [
            name for name, number in (
                ("contact_number", patient_data["contact_number"]),
                ("emergency_contact.contact_number", contact["contact_number"]),
            )
            if not is_valid_phone(number)
        ]
        if invalid:
            raise ValidationError(f"Invalid phone number: {', '.join(invalid)}")

        try:
            gender = GenderEnum(patient_data["gender"])
        except ValueError:
            raise ValidationError(
                f"Invalid gender '{patient_data['gender']}'. "
                f"Allowed: {', '.join(g.value for g in GenderEnum)}"
            )

        date_of_birth = patient_data["date_of_birth"]
        if isinstance(date_of_birth, str):
            try:
                date_of_birth = date.fromisoformat(date_of_birth)
            except ValueError:
                raise ValidationError(f"Invalid date of birth '{date_of_birth}'")
        if not is_valid_birth_date(date_of_birth):
            raise ValidationError("Date of birth cannot be in the future")

        return {
            "first_name": patient_data["first_name"].strip(),
            "last_name": patient_data["last_name"].strip(),
            "date_of_birth": date_of_birth,
            "gender": gender,
            "contact_number": patient_data["contact_number"].strip(),
            "emergency_contact_name": contact["name"].strip(),
            "emergency_contact_relationship": contact["relationship"].strip(),
            "emergency_contact_number": contact["contact_number"].strip(),
        }

    # ============================================
    # ADMIT
    # ============================================

    def admit(
        self,
        patient_data: Dict[str, Any],
        department_id: str,
        bed_id: str,
        reason: str,
        bill_status: BillStatusEnum = BillStatusEnum.DRAFT,
        admitted_by: Optional[str] = None
    ) -> OccupancyResult:
        """
        Admits a patient into an available bed.

        Args:
            patient_data: {"patient_id": ...} for a returning patient, or the
                demographics of a new one (with an "emergency_contact" dict)
            department_id: Department ID
            bed_id: Bed ID, must belong to the department
            reason: Reason for admission
            bill_status: Status of the bill opened with the admission
            admitted_by: ID of the staff user

        Returns:
            Result with the patient, the new admission and the bill

        Raises:
            ValidationError: Missing or malformed input
            NotFoundError: Unknown department, bed, bed not in department or
                unknown returning patient
            PatientAlreadyAdmittedError: The patient already has an active stay
            BedUnavailableError: The bed is not available at commit time
        """
        self._validate_ids(department_id=department_id, bed_id=bed_id, reason_for_admission=reason)

        patient_id = patient_data.get("patient_id")
        new_patient_values = None if patient_id else self._validate_new_patient(patient_data)

        department = self._require_department(department_id)
        bed = self._require_bed_in_department(bed_id, department)
        observed_status = bed.status.value

        bill_status = BillStatusEnum(bill_status)

        with self._unit_of_work("admission", bed_id):
            if patient_id:
                patient = self._require_patient(patient_id)
            else:
                patient = self.patient_repo.add(Patient(**new_patient_values))

            admission = self.admission_repo.add(Admission(
                patient_id=patient.id,
                department_id=department.id,
                bed_id=bed_id,
                reason=reason.strip(),
                admitted_by=admitted_by,
            ))

            if not self.patient_repo.bind_admission(patient.id, admission.id, bill_status):
                raise PatientAlreadyAdmittedError(patient.id)

            if not self.bed_repo.claim(bed_id, patient.id):
                raise BedUnavailableError(bed_id, observed_status)

            bill = self.bill_repo.add(Bill(
                patient_id=patient.id,
                admission_id=admission.id,
                status=bill_status,
            ))

        events = [self._event(
            department, bed_id, BedStatusEnum.OCCUPIED, OccupancyActionEnum.ADMIT, patient.id
        )]
        self._publish(department.hospital_id, events)

        logger.info(f"Patient {patient.id} admitted to bed {bed_id} ({department.name})")

        return OccupancyResult(
            success=True,
            message=f"Patient admitted to bed {bed.label}",
            patient=patient,
            admission=admission,
            bill=bill,
            events=events,
        )

    # ============================================
    # DISCHARGE
    # ============================================

    def discharge(self, patient_id: str, discharged_by: Optional[str] = None) -> OccupancyResult:
        """
        Closes the active admission and frees its bed.

        Args:
            patient_id: Patient ID
            discharged_by: ID of the staff user

        Returns:
            Result with the patient and the closed admission

        Raises:
            PatientNotFoundError: Unknown patient
            NoActiveAdmissionError: No active stay, or a concurrent discharge won
        """
        patient = self._require_patient(patient_id)
        admission = self._require_active_admission(patient)
        bed_id = admission.bed_id
        department = self._require_department(admission.department_id)

        with self._unit_of_work("discharge", bed_id):
            if not self.admission_repo.close(admission.id, discharged_by):
                raise NoActiveAdmissionError(patient_id)

            if not self.patient_repo.unbind_admission(patient_id, admission.id):
                raise NoActiveAdmissionError(patient_id)

            if not self.bed_repo.release(bed_id, patient_id):
                raise InvalidStateError(
                    f"Bed {bed_id} is not held by patient {patient_id}"
                )

        events = [self._event(
            department, bed_id, BedStatusEnum.AVAILABLE, OccupancyActionEnum.DISCHARGE
        )]
        self._publish(department.hospital_id, events)

        logger.info(f"Patient {patient_id} discharged, bed {bed_id} released")

        return OccupancyResult(
            success=True,
            message="Patient discharged",
            patient=patient,
            admission=admission,
            events=events,
        )

    # ============================================
    # TRANSFER
    # ============================================

    def transfer(
        self,
        patient_id: str,
        new_department_id: str,
        new_bed_id: str
    ) -> OccupancyResult:
        """
        Moves an admitted patient to another bed.

        The old bed is released, the new bed claimed and the admission moved
        in one transaction. Moving to the current bed is a no-op.

        Args:
            patient_id: Patient ID
            new_department_id: Target department ID
            new_bed_id: Target bed ID

        Returns:
            Result with the patient and the moved admission

        Raises:
            ValidationError: Missing ids or a target in another hospital
            NotFoundError: Unknown patient, department, bed or bed not in department
            NoActiveAdmissionError: No active stay
            BedUnavailableError: Target bed not available at commit time
        """
        self._validate_ids(department_id=new_department_id, bed_id=new_bed_id)

        patient = self._require_patient(patient_id)
        admission = self._require_active_admission(patient)

        new_department = self._require_department(new_department_id)
        new_bed = self._require_bed_in_department(new_bed_id, new_department)

        if new_bed_id == admission.bed_id:
            return OccupancyResult(
                success=True,
                message="Patient is already in this bed",
                patient=patient,
                admission=admission,
            )

        old_bed_id = admission.bed_id
        old_department = self._require_department(admission.department_id)

        if old_department.hospital_id != new_department.hospital_id:
            raise ValidationError("Transfers between hospitals are not supported")

        observed_status = new_bed.status.value

        with self._unit_of_work("transfer", new_bed_id):
            if not self.admission_repo.move(
                admission.id, old_bed_id, new_bed_id, new_department.id
            ):
                current = self.admission_repo.get_fresh(admission.id)
                if current is None or not current.is_active:
                    raise NoActiveAdmissionError(patient_id)
                raise InvalidStateError(
                    f"Admission {admission.id} was modified concurrently, retry"
                )

            # Release first: current_patient_id is unique
            if not self.bed_repo.release(old_bed_id, patient_id):
                raise InvalidStateError(
                    f"Bed {old_bed_id} is not held by patient {patient_id}"
                )

            if not self.bed_repo.claim(new_bed_id, patient_id):
                raise BedUnavailableError(new_bed_id, observed_status, "transfer")

        events = [
            self._event(
                old_department, old_bed_id, BedStatusEnum.AVAILABLE,
                OccupancyActionEnum.TRANSFER
            ),
            self._event(
                new_department, new_bed_id, BedStatusEnum.OCCUPIED,
                OccupancyActionEnum.TRANSFER, patient_id
            ),
        ]
        self._publish(new_department.hospital_id, events)

        logger.info(f"Patient {patient_id} transferred from bed {old_bed_id} to {new_bed_id}")

        return OccupancyResult(
            success=True,
            message=f"Patient transferred to bed {new_bed.label}",
            patient=patient,
            admission=admission,
            events=events,
        )

    # ============================================
    # MAINTENANCE
    # ============================================

    def set_maintenance(self, bed_id: str, maintenance: bool) -> Bed:
        """
        Puts an unoccupied bed into maintenance, or back into service.

        Args:
            bed_id: Bed ID
            maintenance: True to block the bed, False to make it available

        Returns:
            The bed with its new status

        Raises:
            BedNotFoundError: Unknown bed
            BedUnavailableError: The bed is occupied
        """
        bed = self.bed_repo.get_fresh(bed_id)
        if not bed:
            raise BedNotFoundError(bed_id)

        if maintenance:
            from_status, to_status = BedStatusEnum.AVAILABLE, BedStatusEnum.MAINTENANCE
        else:
            from_status, to_status = BedStatusEnum.MAINTENANCE, BedStatusEnum.AVAILABLE

        if bed.status == to_status:
            return bed

        department = self._require_department(bed.department_id)
        observed_status = bed.status.value

        with self._unit_of_work("maintenance", bed_id):
            if not self.bed_repo.change_status(bed_id, from_status, to_status):
                raise BedUnavailableError(bed_id, observed_status, "maintenance")

        self._publish(department.hospital_id, [self._event(
            department, bed_id, to_status, OccupancyActionEnum.MAINTENANCE
        )])

        logger.info(f"Bed {bed_id}: {from_status.value} -> {to_status.value}")

        return self.bed_repo.get_fresh(bed_id)

    # ============================================
    # QUERIES
    # ============================================

    def available_beds(
        self,
        department_id: str,
        status: Optional[BedStatusEnum] = BedStatusEnum.AVAILABLE
    ) -> List[Bed]:
        """
        Returns the beds of a department matching a status, read from the
        latest committed state.

        Args:
            department_id: Department ID
            status: Status filter (None = every bed)

        Returns:
            List of beds ordered by label
        """
        self._require_department(department_id)

        if status is not None:
            try:
                status = BedStatusEnum(status)
            except ValueError:
                raise ValidationError(
                    f"Invalid bed status '{status}'. "
                    f"Allowed: {', '.join(s.value for s in BedStatusEnum)}"
                )

        return self.bed_repo.get_by_department(department_id, status)

    def get_bed(self, bed_id: str) -> Bed:
        bed = self.bed_repo.get_fresh(bed_id)
        if not bed:
            raise BedNotFoundError(bed_id)
        return bed

    def get_patient(self, patient_id: str) -> Patient:
        return self._require_patient(patient_id)

    def get_patient_hospital_id(self, patient_id: str) -> Optional[str]:
        """
        Hospital a patient belongs to: the one of the active stay, else of
        the latest closed one. None for a patient never admitted.
        """
        admission = self.admission_repo.get_latest(patient_id)
        if admission is None:
            return None
        return self._require_department(admission.department_id).hospital_id

    def get_history(self, patient_id: str) -> List[Admission]:
        """Admission history of a patient, newest first."""
        self._require_patient(patient_id)
        return self.admission_repo.get_history(patient_id)

    def department_occupancy(self, department: Department) -> Dict[str, Any]:
        """
        Derived capacity of a department.

        Returns:
            Dictionary with capacity, per-status counts and occupancy percentage
        """
        counts = self.bed_repo.count_by_status(department.id)
        capacity = sum(counts.values())
        occupied = counts[BedStatusEnum.OCCUPIED.value]

        return {
            "capacity": capacity,
            "available_beds": counts[BedStatusEnum.AVAILABLE.value],
            "occupied_beds": occupied,
            "maintenance_beds": counts[BedStatusEnum.MAINTENANCE.value],
            "occupancy_percentage": round(occupied / capacity * 100, 1) if capacity else 0.0,
        }
