"""
Core module: database, errors and the notification channel.
"""
from medgrid.core.database import create_db_and_tables, get_session, get_session_direct, engine
from medgrid.core.notification_channel import (
    channel,
    NotificationChannel,
    SubscriptionRegistry,
    SubscriberSession,
)
from medgrid.core.exceptions import (
    BaseAppException,
    ValidationError,
    NotFoundError,
    BedUnavailableError,
    NoActiveAdmissionError,
    StoreUnavailableError,
)

__all__ = [
    "create_db_and_tables",
    "get_session",
    "get_session_direct",
    "engine",
    "channel",
    "NotificationChannel",
    "SubscriptionRegistry",
    "SubscriberSession",
    "BaseAppException",
    "ValidationError",
    "NotFoundError",
    "BedUnavailableError",
    "NoActiveAdmissionError",
    "StoreUnavailableError",
]
