"""
Notification channel.
Publish/subscribe of occupancy events scoped per hospital (and optionally
per department), independent of the transport that drains each session.
"""
from typing import Dict, List, Optional, Set, Tuple, Iterable, Union
from datetime import datetime
import asyncio
import logging
import uuid

from medgrid.config import settings
from medgrid.schemas.events import OccupancyChangedEvent, RESYNC_REQUIRED

logger = logging.getLogger("medgrid.notifications")

# (hospital_id, department_id); department None = whole hospital
Scope = Tuple[str, Optional[str]]


class SubscriberSession:
    """
    A connected dashboard session.

    Messages are queued in a bounded outbox that the transport drains
    (see medgrid.api.websocket). Publishing never waits on the transport.
    """

    def __init__(self, user_id: Optional[str] = None, max_pending: int = None):
        self.id = str(uuid.uuid4())
        self.user_id = user_id
        self.connected_at = datetime.utcnow()
        if max_pending is None:
            max_pending = settings.WS_MAX_PENDING_EVENTS
        self.outbox: asyncio.Queue = asyncio.Queue(maxsize=max_pending)
        # Loop that drains the outbox, None when created outside a loop
        try:
            self.loop: Optional[asyncio.AbstractEventLoop] = asyncio.get_running_loop()
        except RuntimeError:
            self.loop = None

    def __repr__(self) -> str:
        return f"SubscriberSession(id={self.id}, pending={self.outbox.qsize()})"

    @property
    def free_slots(self) -> Optional[int]:
        """Room left in the outbox, None when unbounded."""
        if self.outbox.maxsize <= 0:
            return None
        return self.outbox.maxsize - self.outbox.qsize()

    def offer(self, messages: List[dict]) -> bool:
        """
        Enqueues a batch of messages all together or not at all.

        When the batch does not fit, the pending backlog is dropped and a
        single resync-required message is queued instead: the client must
        re-fetch current state.

        Returns:
            True if the batch was queued (or handed to the session's loop),
            False if the session was told to resync
        """
        if self.loop is not None and self.loop.is_running() and not self._on_own_loop():
            # asyncio.Queue is not thread-safe: enqueue from the owning loop
            self.loop.call_soon_threadsafe(self._enqueue, messages)
            return True
        return self._enqueue(messages)

    def _on_own_loop(self) -> bool:
        try:
            return asyncio.get_running_loop() is self.loop
        except RuntimeError:
            return False

    def _enqueue(self, messages: List[dict]) -> bool:
        free = self.free_slots
        if free is None or free >= len(messages):
            for message in messages:
                self.outbox.put_nowait(message)
            return True

        self.clear()
        self.outbox.put_nowait({
            "type": RESYNC_REQUIRED,
            "timestamp": datetime.utcnow().isoformat(),
        })
        logger.warning(f"Session {self.id} fell behind, resync required")
        return False

    def send(self, message: dict) -> bool:
        """Queues a single control message (ack, pong, ...)."""
        return self.offer([message])

    def clear(self) -> int:
        """Drops every pending message. Returns how many were dropped."""
        dropped = 0
        while not self.outbox.empty():
            self.outbox.get_nowait()
            dropped += 1
        return dropped


class SubscriptionRegistry:
    """
    Who is subscribed to which scope.

    Owns the session <-> scope membership. A session is registered when it
    connects and removed from every scope when it disconnects.
    """

    def __init__(self):
        self.sessions: Dict[str, SubscriberSession] = {}
        self.scope_members: Dict[Scope, Set[str]] = {}
        self.session_scopes: Dict[str, Set[Scope]] = {}

    def register(self, session: SubscriberSession) -> None:
        self.sessions[session.id] = session
        self.session_scopes.setdefault(session.id, set())

    def subscribe(
        self,
        session: SubscriberSession,
        hospital_id: str,
        department_id: Optional[str] = None
    ) -> Scope:
        """
        Joins a session to a hospital scope, or to one department of it.

        Args:
            session: Registered session
            hospital_id: Hospital ID
            department_id: Optional department ID (None = every department)

        Returns:
            The joined scope
        """
        if session.id not in self.sessions:
            self.register(session)

        scope: Scope = (hospital_id, department_id)
        self.scope_members.setdefault(scope, set()).add(session.id)
        self.session_scopes[session.id].add(scope)
        return scope

    def unsubscribe(
        self,
        session: SubscriberSession,
        hospital_id: str,
        department_id: Optional[str] = None
    ) -> bool:
        """Leaves one scope. Returns False if the session was not in it."""
        scope: Scope = (hospital_id, department_id)
        members = self.scope_members.get(scope)
        if not members or session.id not in members:
            return False

        members.discard(session.id)
        if not members:
            del self.scope_members[scope]
        self.session_scopes.get(session.id, set()).discard(scope)
        return True

    def remove(self, session: SubscriberSession) -> None:
        """Removes a session from every scope."""
        for scope in self.session_scopes.pop(session.id, set()):
            members = self.scope_members.get(scope)
            if members is None:
                continue
            members.discard(session.id)
            # Drop empty scopes
            if not members:
                del self.scope_members[scope]
        self.sessions.pop(session.id, None)

    def scopes_of(self, session: SubscriberSession) -> Set[Scope]:
        return set(self.session_scopes.get(session.id, set()))

    def subscribers_for(
        self,
        hospital_id: str,
        department_id: Optional[str] = None
    ) -> List[SubscriberSession]:
        """
        Sessions that must receive an event of a hospital/department:
        hospital-wide subscribers plus that department's subscribers.
        """
        ids: Set[str] = set(self.scope_members.get((hospital_id, None), set()))
        if department_id is not None:
            ids |= self.scope_members.get((hospital_id, department_id), set())
        return [self.sessions[i] for i in ids if i in self.sessions]

    @property
    def session_count(self) -> int:
        return len(self.sessions)

    def hospital_session_count(self, hospital_id: str) -> int:
        """Number of sessions subscribed to any scope of a hospital."""
        ids: Set[str] = set()
        for (hospital, _), members in self.scope_members.items():
            if hospital == hospital_id:
                ids |= members
        return len(ids)


class NotificationChannel:
    """
    Publish/subscribe channel for occupancy events.

    Characteristics:
    - Best effort: no durable queue, no replay on reconnect
    - publish() is synchronous and never blocks on slow sessions
    - A batch of events reaches each session in a single step
    """

    def __init__(self, registry: SubscriptionRegistry = None, max_pending: int = None):
        self.registry = registry or SubscriptionRegistry()
        self.max_pending = max_pending

    def connect(self, user_id: Optional[str] = None) -> SubscriberSession:
        """Creates and registers a new session."""
        session = SubscriberSession(user_id=user_id, max_pending=self.max_pending)
        self.registry.register(session)
        logger.info(f"Session connected. Total sessions: {self.registry.session_count}")
        return session

    def subscribe(
        self,
        session: SubscriberSession,
        hospital_id: str,
        department_id: Optional[str] = None
    ) -> Scope:
        scope = self.registry.subscribe(session, hospital_id, department_id)
        logger.debug(f"Session {session.id} subscribed to {scope}")
        return scope

    def unsubscribe(
        self,
        session: SubscriberSession,
        hospital_id: str,
        department_id: Optional[str] = None
    ) -> bool:
        return self.registry.unsubscribe(session, hospital_id, department_id)

    def disconnect(self, session: SubscriberSession) -> None:
        """Removes the session from every scope and drops its backlog."""
        self.registry.remove(session)
        session.clear()
        logger.info(f"Session disconnected. Total sessions: {self.registry.session_count}")

    def publish(
        self,
        hospital_id: str,
        events: Iterable[Union[OccupancyChangedEvent, dict]]
    ) -> int:
        """
        Delivers a batch of events to the sessions subscribed to a hospital.

        Every session gets, in one step, the events of the batch that fall
        in its scopes. Zero subscribers is a normal no-op.

        Args:
            hospital_id: Hospital ID
            events: Events in publication order

        Returns:
            Number of sessions that received the batch
        """
        messages = [
            event.to_message() if isinstance(event, OccupancyChangedEvent) else event
            for event in events
        ]
        if not messages:
            return 0

        department_ids = {m.get("departmentId") for m in messages}
        recipients: Dict[str, SubscriberSession] = {}
        for department_id in department_ids:
            for session in self.registry.subscribers_for(hospital_id, department_id):
                recipients[session.id] = session

        delivered = 0
        for session in recipients.values():
            scopes = self.registry.scopes_of(session)
            batch = [
                m for m in messages
                if (hospital_id, None) in scopes
                or (hospital_id, m.get("departmentId")) in scopes
            ]
            if batch and session.offer(batch):
                delivered += 1

        logger.debug(
            f"Published {len(messages)} event(s) to hospital {hospital_id}: "
            f"{delivered}/{len(recipients)} session(s)"
        )
        return delivered

    @property
    def session_count(self) -> int:
        return self.registry.session_count


# Global channel instance
channel = NotificationChannel()
