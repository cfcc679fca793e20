"""
pytest fixtures.
"""
import os

# The application engine must never touch a real database during tests
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SEED_DEMO_DATA", "False")

import pytest
from datetime import date
from fastapi.testclient import TestClient
from sqlmodel import SQLModel, Session, create_engine
from sqlmodel.pool import StaticPool

from medgrid.core.database import get_session
from medgrid.core.notification_channel import NotificationChannel
from medgrid.models.enums import BedStatusEnum, GenderEnum
from medgrid.models.user import RoleEnum
from medgrid.services.auth_service import auth_service
from medgrid.services.occupancy_service import OccupancyService
from main import app


TEST_PASSWORD = "Test1234!"
# Hashed once: bcrypt is slow on purpose
TEST_PASSWORD_HASH = auth_service.hash_password(TEST_PASSWORD)


# Test engine (in-memory SQLite)
@pytest.fixture(name="engine")
def engine_fixture():
    """In-memory engine shared by every connection of a test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="session")
def session_fixture(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture(name="client")
def client_fixture(session):
    """Test client with the test session injected."""
    def get_session_override():
        yield session

    app.dependency_overrides[get_session] = get_session_override

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()


# ============================================
# NOTIFICATIONS
# ============================================

@pytest.fixture
def notifier():
    """Private channel so service tests can inspect published events."""
    return NotificationChannel(max_pending=100)


@pytest.fixture
def service(session, notifier):
    return OccupancyService(session, notifier=notifier)


@pytest.fixture
def drain():
    """Returns a function that empties a session outbox into a list."""
    def _drain(subscriber):
        messages = []
        while not subscriber.outbox.empty():
            messages.append(subscriber.outbox.get_nowait())
        return messages

    return _drain


# ============================================
# DATA FACTORIES
# ============================================

@pytest.fixture
def create_hospital(session):
    """Factory fixture for hospitals."""
    from medgrid.models.hospital import Hospital

    def _create_hospital(name="Test Hospital", code="TST"):
        hospital = Hospital(name=name, code=code)
        session.add(hospital)
        session.commit()
        session.refresh(hospital)
        return hospital

    return _create_hospital


@pytest.fixture
def create_department(session):
    """Factory fixture for departments."""
    from medgrid.models.department import Department

    def _create_department(hospital_id, name="General Medicine", code="MED"):
        department = Department(name=name, code=code, hospital_id=hospital_id)
        session.add(department)
        session.commit()
        session.refresh(department)
        return department

    return _create_department


@pytest.fixture
def create_bed(session):
    """Factory fixture for beds."""
    from medgrid.models.bed import Bed

    def _create_bed(department_id, label="MED-01", status=BedStatusEnum.AVAILABLE):
        bed = Bed(label=label, department_id=department_id, status=status)
        session.add(bed)
        session.commit()
        session.refresh(bed)
        return bed

    return _create_bed


@pytest.fixture
def patient_data():
    """Demographics of a new patient, as sent by the admission form."""
    return {
        "first_name": "Jane",
        "last_name": "Doe",
        "date_of_birth": date(1980, 5, 17),
        "gender": GenderEnum.FEMALE,
        "contact_number": "+1 555 0100",
        "emergency_contact": {
            "name": "John Doe",
            "relationship": "Spouse",
            "contact_number": "+1 555 0101",
        },
    }


@pytest.fixture
def make_patient_data(patient_data):
    """Factory for distinct patients."""
    def _make(first_name="Jane", last_name="Doe"):
        data = dict(patient_data)
        data["first_name"] = first_name
        data["last_name"] = last_name
        return data

    return _make


@pytest.fixture
def ward(create_hospital, create_department, create_bed):
    """
    A hospital with two departments:
    - General Medicine: MED-01, MED-02, MED-03
    - Intensive Care: ICU-01, ICU-02
    """
    hospital = create_hospital(name="MedGrid General", code="MGH")
    medicine = create_department(hospital.id)
    icu = create_department(hospital.id, name="Intensive Care", code="ICU")

    medicine_beds = [create_bed(medicine.id, label=f"MED-0{i}") for i in range(1, 4)]
    icu_beds = [create_bed(icu.id, label=f"ICU-0{i}") for i in range(1, 3)]

    return {
        "hospital": hospital,
        "medicine": medicine,
        "icu": icu,
        "medicine_beds": medicine_beds,
        "icu_beds": icu_beds,
    }


# ============================================
# USERS & TOKENS
# ============================================

@pytest.fixture
def create_user(session):
    """Factory fixture for staff users."""
    from medgrid.models.user import User

    def _create_user(username="admin", role=RoleEnum.ADMIN, hospital_id=None, is_active=True):
        user = User(
            username=username,
            email=f"{username}@example.com",
            full_name=username.capitalize(),
            hashed_password=TEST_PASSWORD_HASH,
            role=role,
            hospital_id=hospital_id,
            is_active=is_active,
        )
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    return _create_user


@pytest.fixture
def auth_headers(create_user):
    """Factory returning bearer headers for a new user with the given role."""
    def _auth_headers(role=RoleEnum.ADMIN, username=None, hospital_id=None):
        user = create_user(
            username=username or role.value,
            role=role,
            hospital_id=hospital_id,
        )
        token = auth_service.create_access_token(user)
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers


@pytest.fixture
def admin_headers(auth_headers):
    return auth_headers(RoleEnum.ADMIN)
