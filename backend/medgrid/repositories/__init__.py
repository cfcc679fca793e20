"""
Data access repositories.
Hide the SQL queries behind a small interface.
"""
from medgrid.repositories.base import BaseRepository
from medgrid.repositories.hospital_repo import HospitalRepository, DepartmentRepository
from medgrid.repositories.bed_repo import BedRepository
from medgrid.repositories.patient_repo import PatientRepository, AdmissionRepository
from medgrid.repositories.bill_repo import BillRepository

__all__ = [
    "BaseRepository",
    "HospitalRepository",
    "DepartmentRepository",
    "BedRepository",
    "PatientRepository",
    "AdmissionRepository",
    "BillRepository",
]
