"""
Tests for bills and their status lifecycle.
"""
import pytest
from fastapi import status

from medgrid.core.exceptions import InvalidBillTransitionError, BillNotFoundError
from medgrid.models.enums import BillStatusEnum
from medgrid.models.user import RoleEnum
from medgrid.services.billing_service import BillingService


@pytest.fixture
def admitted(service, ward, patient_data):
    return service.admit(patient_data, ward["medicine"].id, ward["medicine_beds"][0].id, "Fever")


class TestBillingService:
    """Status transitions."""

    def test_full_lifecycle(self, session, admitted):
        billing = BillingService(session)
        bill_id = admitted.bill.id

        for new_status in (BillStatusEnum.GENERATED, BillStatusEnum.SENT, BillStatusEnum.PAID):
            bill = billing.change_status(bill_id, new_status)
            assert bill.status == new_status

        assert billing.patient_repo.get_fresh(admitted.patient.id).bill_status == BillStatusEnum.PAID

    def test_terminal_status(self, session, admitted):
        billing = BillingService(session)
        billing.change_status(admitted.bill.id, BillStatusEnum.CANCELLED)

        with pytest.raises(InvalidBillTransitionError):
            billing.change_status(admitted.bill.id, BillStatusEnum.GENERATED)

    def test_skip_is_rejected(self, session, admitted):
        with pytest.raises(InvalidBillTransitionError):
            BillingService(session).change_status(admitted.bill.id, BillStatusEnum.PAID)

    def test_unknown_bill(self, session):
        with pytest.raises(BillNotFoundError):
            BillingService(session).change_status("missing", BillStatusEnum.GENERATED)

    def test_bills_follow_admissions(self, session, service, ward, admitted):
        service.discharge(admitted.patient.id)
        service.admit({"patient_id": admitted.patient.id}, ward["icu"].id, ward["icu_beds"][0].id, "Relapse")

        bills = BillingService(session).get_patient_bills(admitted.patient.id)

        assert len(bills) == 2
        assert {b.admission_id for b in bills} == {
            a.id for a in service.get_history(admitted.patient.id)
        }

    def test_earlier_bill_does_not_touch_patient_status(self, session, service, ward, admitted):
        service.discharge(admitted.patient.id)
        readmitted = service.admit(
            {"patient_id": admitted.patient.id}, ward["icu"].id, ward["icu_beds"][0].id, "Relapse"
        )
        billing = BillingService(session)

        billing.change_status(admitted.bill.id, BillStatusEnum.GENERATED)
        assert billing.patient_repo.get_fresh(admitted.patient.id).bill_status == BillStatusEnum.DRAFT

        billing.change_status(readmitted.bill.id, BillStatusEnum.CANCELLED)
        assert billing.patient_repo.get_fresh(admitted.patient.id).bill_status == BillStatusEnum.CANCELLED


class TestBillingEndpoints:
    """Tests for /api/billing."""

    def test_list_bills(self, client, admitted, auth_headers):
        response = client.get(
            f"/api/billing/patient/{admitted.patient.id}",
            headers=auth_headers(RoleEnum.BILLING),
        )

        assert response.status_code == status.HTTP_200_OK
        [bill] = response.json()
        assert bill["status"] == "draft"
        assert bill["admission_id"] == admitted.admission.id

    def test_update_status(self, client, admitted, auth_headers):
        response = client.patch(
            f"/api/billing/{admitted.bill.id}/status",
            json={"status": "generated"},
            headers=auth_headers(RoleEnum.BILLING),
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["status"] == "generated"

    def test_invalid_transition(self, client, admitted, admin_headers):
        response = client.patch(
            f"/api/billing/{admitted.bill.id}/status",
            json={"status": "paid"},
            headers=admin_headers,
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["error"] == "INVALID_BILL_TRANSITION"

    def test_unknown_patient(self, client, admin_headers):
        response = client.get("/api/billing/patient/missing", headers=admin_headers)
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_nurse_cannot_update(self, client, admitted, auth_headers):
        response = client.patch(
            f"/api/billing/{admitted.bill.id}/status",
            json={"status": "generated"},
            headers=auth_headers(RoleEnum.NURSE),
        )
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_other_hospital_cannot_list(self, client, admitted, auth_headers, create_hospital):
        other = create_hospital(name="Elsewhere", code="ELS")

        response = client.get(
            f"/api/billing/patient/{admitted.patient.id}",
            headers=auth_headers(RoleEnum.BILLING, hospital_id=other.id),
        )
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_other_hospital_cannot_update(self, client, session, admitted, auth_headers, create_hospital):
        other = create_hospital(name="Elsewhere", code="ELS")

        response = client.patch(
            f"/api/billing/{admitted.bill.id}/status",
            json={"status": "generated"},
            headers=auth_headers(RoleEnum.BILLING, hospital_id=other.id),
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert BillingService(session).get_bill(admitted.bill.id).status == BillStatusEnum.DRAFT

    def test_own_hospital_can_update(self, client, ward, admitted, auth_headers):
        response = client.patch(
            f"/api/billing/{admitted.bill.id}/status",
            json={"status": "generated"},
            headers=auth_headers(RoleEnum.BILLING, hospital_id=ward["hospital"].id),
        )
        assert response.status_code == status.HTTP_200_OK
