"""
Tests for the occupancy WebSocket stream.
"""
import pytest
from starlette.websockets import WebSocketDisconnect

from medgrid.config import settings
from medgrid.core.notification_channel import channel
from medgrid.models.user import RoleEnum
from medgrid.services.auth_service import auth_service
from test_patients import admit_payload


@pytest.fixture
def ws_token(create_user):
    """Factory returning an access token for a new user."""
    def _ws_token(username="dashboard", role=RoleEnum.NURSE, hospital_id=None):
        return auth_service.create_access_token(
            create_user(username=username, role=role, hospital_id=hospital_id)
        )

    return _ws_token


class TestWebSocketStream:
    """Events pushed to connected dashboards."""

    def test_receives_admission(self, client, ward, admin_headers, ws_token):
        hospital_id = ward["hospital"].id

        with client.websocket_connect(f"/api/ws/{hospital_id}?token={ws_token()}") as websocket:
            ack = websocket.receive_json()
            assert ack == {"type": "subscribed", "hospitalId": hospital_id, "departmentId": None}

            patient = client.post("/api/patients/admit", json=admit_payload(ward), headers=admin_headers).json()

            event = websocket.receive_json()
            assert event["type"] == "occupancy-changed"
            assert event["bedId"] == ward["medicine_beds"][0].id
            assert event["departmentId"] == ward["medicine"].id
            assert event["status"] == "occupied"
            assert event["patientId"] == patient["id"]

    def test_transfer_arrives_as_pair(self, client, ward, admin_headers, ws_token):
        patient = client.post("/api/patients/admit", json=admit_payload(ward), headers=admin_headers).json()

        with client.websocket_connect(f"/api/ws/{ward['hospital'].id}?token={ws_token()}") as websocket:
            websocket.receive_json()

            client.post(
                f"/api/patients/{patient['id']}/transfer",
                json={"department_id": ward["icu"].id, "bed_id": ward["icu_beds"][0].id},
                headers=admin_headers,
            )

            freed, occupied = websocket.receive_json(), websocket.receive_json()
            assert (freed["bedId"], freed["status"]) == (ward["medicine_beds"][0].id, "available")
            assert (occupied["bedId"], occupied["status"]) == (ward["icu_beds"][0].id, "occupied")

    def test_department_scope(self, client, ward, admin_headers, ws_token):
        url = f"/api/ws/{ward['hospital'].id}?department_id={ward['icu'].id}&token={ws_token()}"

        with client.websocket_connect(url) as websocket:
            assert websocket.receive_json()["departmentId"] == ward["icu"].id

            client.post("/api/patients/admit", json=admit_payload(ward), headers=admin_headers)
            client.post(
                "/api/patients/admit",
                json=admit_payload(
                    ward,
                    first_name="Bob",
                    department_id=ward["icu"].id,
                    bed_id=ward["icu_beds"][0].id,
                ),
                headers=admin_headers,
            )

            # The medicine admission never reaches this session
            assert websocket.receive_json()["bedId"] == ward["icu_beds"][0].id

    def test_ping(self, client, ward, ws_token):
        with client.websocket_connect(f"/api/ws/{ward['hospital'].id}?token={ws_token()}") as websocket:
            websocket.receive_json()

            websocket.send_json({"action": "ping"})
            assert websocket.receive_json() == {"type": "pong"}

            websocket.send_json({"action": "dance"})
            assert websocket.receive_json()["type"] == "error"

            websocket.send_text("not json")
            assert websocket.receive_json() == {"type": "error", "message": "Invalid JSON"}

    def test_join_other_hospital(self, client, ward, create_hospital, ws_token):
        other = create_hospital(name="Elsewhere", code="ELS")

        with client.websocket_connect(f"/api/ws/{ward['hospital'].id}?token={ws_token()}") as websocket:
            websocket.receive_json()

            websocket.send_json({"action": "join-hospital", "hospital_id": other.id})
            assert websocket.receive_json() == {
                "type": "subscribed",
                "hospitalId": other.id,
                "departmentId": None,
            }

            websocket.send_json({"action": "unsubscribe", "hospital_id": other.id})
            assert websocket.receive_json()["type"] == "unsubscribed"

    def test_disconnect_cleans_up(self, client, ward, ws_token):
        before = channel.session_count

        with client.websocket_connect(f"/api/ws/{ward['hospital'].id}?token={ws_token()}") as websocket:
            websocket.receive_json()
            assert channel.session_count == before + 1

        assert channel.session_count == before


class TestWebSocketAccess:
    """Connections that must be refused."""

    def test_missing_token(self, client, ward):
        with pytest.raises(WebSocketDisconnect) as exc:
            with client.websocket_connect(f"/api/ws/{ward['hospital'].id}") as websocket:
                websocket.receive_json()

        assert exc.value.code == 1008

    def test_invalid_token(self, client, ward):
        with pytest.raises(WebSocketDisconnect) as exc:
            with client.websocket_connect(f"/api/ws/{ward['hospital'].id}?token=garbage") as websocket:
                websocket.receive_json()

        assert exc.value.code == 1008

    def test_other_hospital_user(self, client, ward, create_hospital, ws_token):
        other = create_hospital(name="Elsewhere", code="ELS")
        token = ws_token(hospital_id=other.id)

        with pytest.raises(WebSocketDisconnect) as exc:
            with client.websocket_connect(f"/api/ws/{ward['hospital'].id}?token={token}") as websocket:
                websocket.receive_json()

        assert exc.value.code == 1008

    def test_other_hospital_join_refused(self, client, ward, create_hospital, ws_token):
        other = create_hospital(name="Elsewhere", code="ELS")
        token = ws_token(hospital_id=ward["hospital"].id)

        with client.websocket_connect(f"/api/ws/{ward['hospital'].id}?token={token}") as websocket:
            websocket.receive_json()

            websocket.send_json({"action": "subscribe", "hospital_id": other.id})
            assert websocket.receive_json() == {"type": "error", "message": "No access to this hospital"}

    def test_anonymous_when_auth_disabled(self, client, ward, monkeypatch):
        monkeypatch.setattr(settings, "WS_REQUIRE_AUTH", False)

        with client.websocket_connect(f"/api/ws/{ward['hospital'].id}") as websocket:
            assert websocket.receive_json()["type"] == "subscribed"
