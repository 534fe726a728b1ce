from datetime import datetime

from pydantic import BaseModel, Field

from todolist.core.modules.session.models import Session
from todolist.core.modules.user.models import User, UserView


class Identity(BaseModel):
    """Authenticated caller of a request: the live session and the user who owns it."""

    user: User
    session: Session

    model_config = {"frozen": True}


class AuthView(UserView):
    """User profile with the bearer token issued at registration or login."""

    token: str = Field(..., description="Bearer token for subsequent requests")
    expires_at: datetime = Field(..., description="Token expiry (RFC 3339)")

    @classmethod
    def from_session(cls, user: User, session: Session) -> "AuthView":
        return cls(**UserView.from_domain(user).model_dump(), token=session.token, expires_at=session.expires_at)
