"""Session management models."""

from datetime import datetime
from enum import StrEnum
from typing import NewType
from uuid import UUID

from pydantic import Field

from todolist.core.db import MongoModel
from todolist.utils import now

AuthToken = NewType("AuthToken", str)


class Session(MongoModel):
    """User authentication session.

    The id equals the `jti` claim of the token. Indexed on token - unique, user_id.
    Expired sessions are removed when a request presents them, there is no TTL index.
    """

    user_id: UUID
    token: str
    expires_at: datetime
    created_at: datetime = Field(default_factory=now)

    def is_expired(self, at: datetime) -> bool:
        """A session is live strictly before `expires_at`; at that instant it is expired."""
        return not at < self.expires_at


class SessionState(StrEnum):
    """Outcome of validating a presented credential."""

    NO_CREDENTIAL = "no_credential"
    MALFORMED_HEADER = "malformed_header"
    UNRESOLVED = "unresolved"
    LIVE = "live"
    EXPIRED = "expired"
