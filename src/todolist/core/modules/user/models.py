from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from todolist.core.db import MongoModel
from todolist.utils import now


class User(MongoModel):
    """User domain model with credentials.

    Indexed on email - unique.
    """

    name: str
    email: str
    password_hash: str  # bcrypt hash
    image: str | None = None
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime = Field(default_factory=now)


class UserView(BaseModel):
    """User profile (API representation)."""

    id: UUID = Field(..., description="User ID")
    name: str = Field(..., description="Display name")
    email: str = Field(..., description="Email address")
    image: str | None = Field(None, description="Profile image reference")
    created_at: datetime = Field(..., description="Account creation time")
    updated_at: datetime = Field(..., description="Last profile update time")

    @classmethod
    def from_domain(cls, user: User) -> "UserView":
        """Create view model from domain model."""
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            image=user.image,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )
