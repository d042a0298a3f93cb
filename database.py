"""
MongoDB access for the form backend.

The client is created lazily on first use and shared by every request of the
process. `ensure_connected()` is safe to call from concurrent threads: only
one of them opens the client, the rest wait for it.
"""

import logging
import threading
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel
from pymongo import ASCENDING, MongoClient
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from config import get_settings

logger = logging.getLogger(__name__)

BOOKING_UNIQUE_INDEX = "email_1_date_1"

_lock = threading.Lock()
_client: Optional[MongoClient] = None
db: Optional[Database] = None


def ensure_connected() -> Database:
    """Return the process database handle, connecting on the first call."""
    global _client, db
    if db is not None:
        return db
    with _lock:
        if db is None:
            settings = get_settings()
            client = MongoClient(settings.mongo_url)
            database = client[settings.database_name]
            database["bookings"].create_index(
                [("email", ASCENDING), ("date", ASCENDING)],
                unique=True,
                name=BOOKING_UNIQUE_INDEX,
            )
            _client = client
            db = database
            logger.info("Connected to MongoDB database %s", settings.database_name)
    return db


def reset_connection() -> None:
    """Close the shared client so the next call reconnects."""
    global _client, db
    with _lock:
        if _client is not None:
            _client.close()
        _client = None
        db = None


def create_document(collection_name: str, data: Union[BaseModel, Dict[str, Any]]) -> str:
    """Insert a document with createdAt/updatedAt timestamps and return its id.

    Raises pymongo.errors.DuplicateKeyError when a unique index rejects it.
    """
    database = ensure_connected()
    if isinstance(data, BaseModel):
        document = data.model_dump()
    else:
        document = dict(data)
    now = datetime.now(timezone.utc)
    document["createdAt"] = now
    document["updatedAt"] = now

    result = database[collection_name].insert_one(document)
    return str(result.inserted_id)


def is_duplicate_key(exc: Exception) -> bool:
    return isinstance(exc, DuplicateKeyError) or getattr(exc, "code", None) == 11000
