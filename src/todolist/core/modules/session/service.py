from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from todolist.core.core import Service
from todolist.core.db import store_operation
from todolist.core.modules.session.models import Session
from todolist.core.modules.session.token import issue_token
from todolist.errors import NotFoundError

logger = structlog.get_logger(__name__)


class SessionService(Service):
    """Stores sessions. The sessions collection is the only authority on whether a token is valid."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("sessions")

    async def on_start(self) -> None:
        """Create indexes on startup."""
        with store_operation("sessions.create_indexes"):
            # Unique index for token (for authentication lookups)
            await self._collection.create_index([("token", 1)], unique=True)
            # Compound index for finding the newest session of a user
            await self._collection.create_index([("user_id", 1), ("created_at", -1), ("_id", -1)])

    async def create_session(self, user_id: UUID) -> Session:
        """Issue a signed token for the user and persist it as a new session."""
        config = self.core.config
        issued = issue_token(user_id, config.token_ttl, config.jwt_secret)
        session = Session(
            id=issued.token_id,
            user_id=user_id,
            token=issued.token,
            expires_at=issued.expires_at,
            created_at=issued.issued_at,
        )
        with store_operation("sessions.create_session"):
            await self._collection.insert_one(session.to_mongo())
        logger.debug("session_created", session_id=str(session.id), user_id=str(user_id))
        return session

    async def find_by_token(self, token: str) -> Session:
        with store_operation("sessions.find_by_token"):
            session = await self._collection.find_one({"token": token})
        if session is None:
            raise NotFoundError("Session not found")
        return Session.model_validate(session)

    async def find_user_session(self, user_id: UUID) -> Session:
        """Get the most recently created session of a user, live or not.

        `created_at` has whole-second precision; ties are broken by the time-ordered id.
        """
        with store_operation("sessions.find_user_session"):
            session = await self._collection.find_one({"user_id": user_id}, sort=[("created_at", -1), ("_id", -1)])
        if session is None:
            raise NotFoundError(f"No session for user '{user_id}'")
        return Session.model_validate(session)

    async def delete_session(self, session_id: UUID) -> None:
        """Delete a session by id. Deleting a missing session is not an error."""
        with store_operation("sessions.delete_session"):
            result = await self._collection.delete_one({"_id": session_id})
        logger.debug("session_deleted", session_id=str(session_id), deleted=result.deleted_count)

    async def delete_session_by_token(self, token: str) -> None:
        """Delete the session holding `token`. Deleting a missing session is not an error."""
        with store_operation("sessions.delete_session_by_token"):
            await self._collection.delete_one({"token": token})
