"""
Demo data initialization.
Creates a hospital with departments, beds and the default staff users.

DEMO HOSPITAL:
==============

MedGrid General Hospital (MGH) - 20 beds:
- Emergency (ER): 6 beds (ER-01 ... ER-06)
- Intensive Care (ICU): 4 beds (ICU-01 ... ICU-04)
- General Medicine (MED): 10 beds (MED-01 ... MED-10)
"""
from sqlmodel import Session
import logging

from medgrid.models.hospital import Hospital
from medgrid.models.department import Department
from medgrid.models.bed import Bed
from medgrid.models.user import User, RoleEnum
from medgrid.repositories.hospital_repo import HospitalRepository
from medgrid.services.auth_service import auth_service

logger = logging.getLogger("medgrid.init_data")


DEMO_HOSPITAL_CODE = "MGH"

DEMO_DEPARTMENTS = [
    # (code, name, description, beds)
    ("ER", "Emergency", "Emergency department", 6),
    ("ICU", "Intensive Care", "Intensive care unit", 4),
    ("MED", "General Medicine", "Internal medicine ward", 10),
]

DEMO_USERS = [
    # (username, password, full name, role)
    ("admin", "Admin123!", "System Administrator", RoleEnum.ADMIN),
    ("doctor", "Doctor123!", "Demo Doctor", RoleEnum.DOCTOR),
    ("nurse", "Nurse123!", "Demo Nurse", RoleEnum.NURSE),
    ("reception", "Reception123!", "Demo Receptionist", RoleEnum.RECEPTIONIST),
    ("billing", "Billing123!", "Demo Billing Clerk", RoleEnum.BILLING),
]


def initialize_data(session: Session) -> bool:
    """
    Creates the demo data unless the demo hospital already exists.

    Args:
        session: Database session

    Returns:
        True if data was created, False if it already existed
    """
    if HospitalRepository(session).get_by_code(DEMO_HOSPITAL_CODE):
        logger.info("Demo data already present, skipping")
        return False

    # ========================================
    # HOSPITAL
    # ========================================
    hospital = Hospital(name="MedGrid General Hospital", code=DEMO_HOSPITAL_CODE)
    session.add(hospital)
    session.flush()

    # ========================================
    # DEPARTMENTS AND BEDS
    # ========================================
    total_beds = 0
    for code, name, description, bed_count in DEMO_DEPARTMENTS:
        department = Department(
            name=name,
            code=code,
            description=description,
            hospital_id=hospital.id,
        )
        session.add(department)
        session.flush()

        for number in range(1, bed_count + 1):
            session.add(Bed(label=f"{code}-{number:02d}", department_id=department.id))
        total_beds += bed_count

    # ========================================
    # STAFF USERS
    # ========================================
    for username, password, full_name, role in DEMO_USERS:
        session.add(User(
            username=username,
            email=f"{username}@medgrid.example.com",
            full_name=full_name,
            hashed_password=auth_service.hash_password(password),
            role=role,
            hospital_id=None if role == RoleEnum.ADMIN else hospital.id,
        ))

    session.commit()

    logger.info(
        f"Demo data created: 1 hospital, {len(DEMO_DEPARTMENTS)} departments, "
        f"{total_beds} beds, {len(DEMO_USERS)} users"
    )
    return True
