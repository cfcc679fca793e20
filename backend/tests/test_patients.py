"""
Tests for the patient endpoints.
"""
import pytest
from fastapi import status
from sqlalchemy.exc import OperationalError

from medgrid.models.user import RoleEnum
from medgrid.repositories.bed_repo import BedRepository
from medgrid.services.occupancy_service import OccupancyService


def admit_payload(ward, bed_index=0, **overrides):
    data = {
        "first_name": "Jane",
        "last_name": "Doe",
        "date_of_birth": "1980-05-17",
        "gender": "female",
        "contact_number": "+1 555 0100",
        "emergency_contact": {
            "name": "John Doe",
            "relationship": "Spouse",
            "contact_number": "+1 555 0101",
        },
        "department_id": ward["medicine"].id,
        "bed_id": ward["medicine_beds"][bed_index].id,
        "reason_for_admission": "Community-acquired pneumonia",
    }
    data.update(overrides)
    return data


class TestAdmitEndpoint:
    """Tests for POST /api/patients/admit."""

    def test_admit_new_patient(self, client, ward, admin_headers):
        response = client.post("/api/patients/admit", json=admit_payload(ward), headers=admin_headers)
        assert response.status_code == status.HTTP_201_CREATED

        result = response.json()
        assert result["full_name"] == "Jane Doe"
        assert result["bill_status"] == "draft"
        assert result["emergency_contact"]["relationship"] == "Spouse"
        assert result["active_admission"]["bed_id"] == ward["medicine_beds"][0].id
        assert result["active_admission"]["bed_label"] == "MED-01"
        assert result["active_admission"]["department_name"] == "General Medicine"
        assert len(result["admissions"]) == 1

        bed = client.get(f"/api/beds/{ward['medicine_beds'][0].id}", headers=admin_headers).json()
        assert bed["status"] == "occupied"
        assert bed["current_patient_id"] == result["id"]
        assert bed["patient_name"] == "Jane Doe"

    def test_admit_occupied_bed(self, client, ward, admin_headers):
        client.post("/api/patients/admit", json=admit_payload(ward), headers=admin_headers)

        response = client.post(
            "/api/patients/admit",
            json=admit_payload(ward, first_name="Other"),
            headers=admin_headers,
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "BED_UNAVAILABLE"

    def test_admit_missing_emergency_contact(self, client, ward, admin_headers):
        data = admit_payload(ward)
        del data["emergency_contact"]

        response = client.post("/api/patients/admit", json=data, headers=admin_headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"] == "VALIDATION_ERROR"
        assert "emergency_contact.name" in response.json()["message"]

    def test_admit_missing_bed(self, client, ward, admin_headers):
        data = admit_payload(ward)
        del data["bed_id"]

        response = client.post("/api/patients/admit", json=data, headers=admin_headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "bed_id" in response.json()["message"]

    def test_admit_unknown_field(self, client, ward, admin_headers):
        response = client.post(
            "/api/patients/admit",
            json=admit_payload(ward, insurance="gold"),
            headers=admin_headers,
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_admit_invalid_gender(self, client, ward, admin_headers):
        response = client.post(
            "/api/patients/admit",
            json=admit_payload(ward, gender="unknown"),
            headers=admin_headers,
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_admit_bed_of_other_department(self, client, ward, admin_headers):
        response = client.post(
            "/api/patients/admit",
            json=admit_payload(ward, bed_id=ward["icu_beds"][0].id),
            headers=admin_headers,
        )
        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["error"] == "NOT_FOUND"

    def test_admit_unknown_department(self, client, ward, admin_headers):
        response = client.post(
            "/api/patients/admit",
            json=admit_payload(ward, department_id="missing"),
            headers=admin_headers,
        )
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_readmit_known_patient(self, client, ward, admin_headers):
        first = client.post("/api/patients/admit", json=admit_payload(ward), headers=admin_headers).json()
        client.post(f"/api/patients/{first['id']}/discharge", headers=admin_headers)

        response = client.post(
            "/api/patients/admit",
            json={
                "patient_id": first["id"],
                "department_id": ward["icu"].id,
                "bed_id": ward["icu_beds"][0].id,
                "reason_for_admission": "Deterioration",
            },
            headers=admin_headers,
        )

        assert response.status_code == status.HTTP_201_CREATED
        result = response.json()
        assert result["id"] == first["id"]
        assert len(result["admissions"]) == 2
        assert result["admissions"][0]["is_active"] is True
        assert result["admissions"][1]["is_active"] is False

    def test_admit_already_admitted(self, client, ward, admin_headers):
        first = client.post("/api/patients/admit", json=admit_payload(ward), headers=admin_headers).json()

        response = client.post(
            "/api/patients/admit",
            json={
                "patient_id": first["id"],
                "department_id": ward["medicine"].id,
                "bed_id": ward["medicine_beds"][1].id,
                "reason_for_admission": "Duplicate",
            },
            headers=admin_headers,
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["error"] == "PATIENT_ALREADY_ADMITTED"


class TestDischargeEndpoint:
    """Tests for POST /api/patients/{id}/discharge."""

    def test_discharge(self, client, ward, admin_headers):
        patient = client.post("/api/patients/admit", json=admit_payload(ward), headers=admin_headers).json()

        response = client.post(f"/api/patients/{patient['id']}/discharge", headers=admin_headers)

        assert response.status_code == status.HTTP_200_OK
        result = response.json()
        assert result["success"] is True
        assert result["data"]["bed_id"] == ward["medicine_beds"][0].id
        assert result["data"]["discharged_at"]

        bed = client.get(f"/api/beds/{ward['medicine_beds'][0].id}", headers=admin_headers).json()
        assert bed["status"] == "available"
        assert bed["current_patient_id"] is None

    def test_discharge_twice(self, client, ward, admin_headers):
        patient = client.post("/api/patients/admit", json=admit_payload(ward), headers=admin_headers).json()
        client.post(f"/api/patients/{patient['id']}/discharge", headers=admin_headers)

        response = client.post(f"/api/patients/{patient['id']}/discharge", headers=admin_headers)

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["error"] == "NO_ACTIVE_ADMISSION"

    def test_discharge_unknown_patient(self, client, admin_headers):
        response = client.post("/api/patients/missing/discharge", headers=admin_headers)
        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestTransferEndpoint:
    """Tests for POST /api/patients/{id}/transfer."""

    def test_transfer(self, client, ward, admin_headers):
        patient = client.post("/api/patients/admit", json=admit_payload(ward), headers=admin_headers).json()
        target = ward["icu_beds"][0]

        response = client.post(
            f"/api/patients/{patient['id']}/transfer",
            json={"department_id": ward["icu"].id, "bed_id": target.id},
            headers=admin_headers,
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()["data"]
        assert data["bed_id"] == target.id
        assert data["department_id"] == ward["icu"].id
        assert data["transfer_count"] == 1

        old_bed = client.get(f"/api/beds/{ward['medicine_beds'][0].id}", headers=admin_headers).json()
        new_bed = client.get(f"/api/beds/{target.id}", headers=admin_headers).json()
        assert old_bed["status"] == "available"
        assert new_bed["current_patient_id"] == patient["id"]

        history = client.get(f"/api/patients/{patient['id']}", headers=admin_headers).json()
        assert history["active_admission"]["bed_label"] == "ICU-01"
        assert history["active_admission"]["admitted_at"] == patient["active_admission"]["admitted_at"]

    def test_transfer_to_occupied_bed(self, client, ward, admin_headers):
        ann = client.post("/api/patients/admit", json=admit_payload(ward), headers=admin_headers).json()
        client.post(
            "/api/patients/admit",
            json=admit_payload(ward, bed_index=1, first_name="Bob"),
            headers=admin_headers,
        )

        response = client.post(
            f"/api/patients/{ann['id']}/transfer",
            json={"department_id": ward["medicine"].id, "bed_id": ward["medicine_beds"][1].id},
            headers=admin_headers,
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["error"] == "BED_UNAVAILABLE"

    def test_transfer_without_admission(self, client, ward, admin_headers):
        patient = client.post("/api/patients/admit", json=admit_payload(ward), headers=admin_headers).json()
        client.post(f"/api/patients/{patient['id']}/discharge", headers=admin_headers)

        response = client.post(
            f"/api/patients/{patient['id']}/transfer",
            json={"department_id": ward["icu"].id, "bed_id": ward["icu_beds"][0].id},
            headers=admin_headers,
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["error"] == "NO_ACTIVE_ADMISSION"


class TestPatientAccess:
    """Authentication and permission checks."""

    def test_requires_token(self, client, ward):
        response = client.post("/api/patients/admit", json=admit_payload(ward))
        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["error"] == "UNAUTHORIZED"

    def test_invalid_token(self, client, ward):
        response = client.post(
            "/api/patients/admit",
            json=admit_payload(ward),
            headers={"Authorization": "Bearer not-a-token"},
        )
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    @pytest.mark.parametrize("role", [RoleEnum.DOCTOR, RoleEnum.NURSE, RoleEnum.RECEPTIONIST])
    def test_clinical_roles_can_admit(self, client, ward, auth_headers, role):
        response = client.post("/api/patients/admit", json=admit_payload(ward), headers=auth_headers(role))
        assert response.status_code == status.HTTP_201_CREATED

    def test_billing_cannot_admit(self, client, ward, auth_headers):
        response = client.post(
            "/api/patients/admit",
            json=admit_payload(ward),
            headers=auth_headers(RoleEnum.BILLING),
        )
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_receptionist_cannot_discharge(self, client, ward, admin_headers, auth_headers):
        patient = client.post("/api/patients/admit", json=admit_payload(ward), headers=admin_headers).json()

        response = client.post(
            f"/api/patients/{patient['id']}/discharge",
            headers=auth_headers(RoleEnum.RECEPTIONIST),
        )
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_user_of_other_hospital(self, client, ward, admin_headers, auth_headers, create_hospital):
        other = create_hospital(name="Elsewhere", code="ELS")
        headers = auth_headers(RoleEnum.NURSE, hospital_id=other.id)

        response = client.post("/api/patients/admit", json=admit_payload(ward), headers=headers)

        assert response.status_code == status.HTTP_403_FORBIDDEN
        bed = client.get(f"/api/beds/{ward['medicine_beds'][0].id}", headers=admin_headers).json()
        assert bed["status"] == "available"

    def test_other_hospital_cannot_read_patient(self, client, ward, admin_headers, auth_headers, create_hospital):
        patient = client.post("/api/patients/admit", json=admit_payload(ward), headers=admin_headers).json()
        other = create_hospital(name="Elsewhere", code="ELS")

        response = client.get(
            f"/api/patients/{patient['id']}",
            headers=auth_headers(RoleEnum.NURSE, hospital_id=other.id),
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["error"] == "FORBIDDEN"

    def test_discharged_patient_stays_in_hospital(self, client, ward, admin_headers, auth_headers, create_hospital):
        patient = client.post("/api/patients/admit", json=admit_payload(ward), headers=admin_headers).json()
        client.post(f"/api/patients/{patient['id']}/discharge", headers=admin_headers)
        other = create_hospital(name="Elsewhere", code="ELS")

        outsider = client.get(
            f"/api/patients/{patient['id']}",
            headers=auth_headers(RoleEnum.NURSE, hospital_id=other.id),
        )
        insider = client.get(
            f"/api/patients/{patient['id']}",
            headers=auth_headers(RoleEnum.DOCTOR, hospital_id=ward["hospital"].id),
        )

        assert outsider.status_code == status.HTTP_403_FORBIDDEN
        assert insider.status_code == status.HTTP_200_OK


class TestStoreUnavailable:
    """Transient persistence errors surface as 503 STORE_UNAVAILABLE."""

    @staticmethod
    def store_down(*args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("database is locked"))

    def test_admit_while_store_down(self, client, ward, admin_headers, monkeypatch):
        monkeypatch.setattr(BedRepository, "claim", self.store_down)

        response = client.post("/api/patients/admit", json=admit_payload(ward), headers=admin_headers)

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert response.json()["error"] == "STORE_UNAVAILABLE"

        monkeypatch.undo()
        bed = client.get(f"/api/beds/{ward['medicine_beds'][0].id}", headers=admin_headers).json()
        assert bed["status"] == "available"
        assert bed["current_patient_id"] is None

    def test_read_while_store_down(self, client, admin_headers, monkeypatch):
        monkeypatch.setattr(OccupancyService, "get_patient", self.store_down)

        response = client.get("/api/patients/anyone", headers=admin_headers)

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert response.json()["error"] == "STORE_UNAVAILABLE"
