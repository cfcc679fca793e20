"""
WebSocket endpoint.
Bridges dashboard connections to the notification channel.
"""
from typing import Optional
from fastapi import APIRouter, WebSocket, WebSocketDisconnect, Query, status
import asyncio
import json
import logging

from medgrid.config import settings
from medgrid.core.notification_channel import channel, SubscriberSession
from medgrid.models.user import RoleEnum
from medgrid.schemas.auth_schemas import TokenPayload
from medgrid.services.auth_service import auth_service

router = APIRouter()
logger = logging.getLogger("medgrid.websocket")


def _authenticate(token: Optional[str]) -> Optional[TokenPayload]:
    """Decodes the access token passed in the query string."""
    if not token:
        return None
    payload = auth_service.decode_token(token)
    if not payload or payload.type != "access":
        return None
    return payload


def _can_access(payload: Optional[TokenPayload], hospital_id: str) -> bool:
    if payload is None:
        return not settings.WS_REQUIRE_AUTH
    if payload.role == RoleEnum.ADMIN.value or not payload.hospital_id:
        return True
    return payload.hospital_id == hospital_id


async def _pump(websocket: WebSocket, session: SubscriberSession) -> None:
    """Drains the session outbox into the socket."""
    while True:
        message = await session.outbox.get()
        await websocket.send_json(message)


async def _listen(
    websocket: WebSocket,
    session: SubscriberSession,
    payload: Optional[TokenPayload]
) -> None:
    """
    Handles client actions:
    - {"action": "subscribe", "hospital_id": "...", "department_id": "..."}
    - {"action": "join-hospital", "hospital_id": "..."}
    - {"action": "unsubscribe", "hospital_id": "...", "department_id": "..."}
    - {"action": "ping"}
    """
    while True:
        raw = await websocket.receive_text()
        try:
            data = json.loads(raw)
        except ValueError:
            session.send({"type": "error", "message": "Invalid JSON"})
            continue
        if not isinstance(data, dict):
            session.send({"type": "error", "message": "Expected a JSON object"})
            continue

        action = data.get("action")
        hospital_id = data.get("hospital_id")
        department_id = data.get("department_id")

        if action in ("subscribe", "join-hospital"):
            if not hospital_id:
                session.send({"type": "error", "message": "hospital_id is required"})
            elif not _can_access(payload, hospital_id):
                session.send({"type": "error", "message": "No access to this hospital"})
            else:
                channel.subscribe(session, hospital_id, department_id)
                session.send({
                    "type": "subscribed",
                    "hospitalId": hospital_id,
                    "departmentId": department_id,
                })

        elif action == "unsubscribe":
            if hospital_id and channel.unsubscribe(session, hospital_id, department_id):
                session.send({
                    "type": "unsubscribed",
                    "hospitalId": hospital_id,
                    "departmentId": department_id,
                })

        elif action == "ping":
            session.send({"type": "pong"})

        else:
            session.send({"type": "error", "message": f"Unknown action '{action}'"})


@router.websocket("/ws/{hospital_id}")
async def websocket_hospital_endpoint(
    websocket: WebSocket,
    hospital_id: str,
    department_id: Optional[str] = Query(None),
    token: Optional[str] = Query(None)
):
    """
    Occupancy stream of a hospital (optionally a single department).

    The client authenticates with ?token=<access token>. After the
    "subscribed" acknowledgement it receives occupancy-changed events; a
    "resync-required" message means events were dropped and the current
    state must be re-fetched over HTTP.
    """
    payload = _authenticate(token)
    if not _can_access(payload, hospital_id):
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()

    session = channel.connect(user_id=payload.sub if payload else None)
    channel.subscribe(session, hospital_id, department_id)
    session.send({
        "type": "subscribed",
        "hospitalId": hospital_id,
        "departmentId": department_id,
    })

    pump = asyncio.create_task(_pump(websocket, session))
    listen = asyncio.create_task(_listen(websocket, session, payload))

    try:
        done, _ = await asyncio.wait({pump, listen}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        for task in (pump, listen):
            task.cancel()
        # Always clean up the session
        channel.disconnect(session)

    for task in done:
        if task.cancelled():
            continue
        error = task.exception()
        if error and not isinstance(error, WebSocketDisconnect):
            logger.warning(f"WebSocket session {session.id} closed with error: {error}")
