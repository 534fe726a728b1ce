from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import DuplicateKeyError

from todolist.core.core import Service
from todolist.core.db import store_operation
from todolist.core.modules.user.models import User
from todolist.core.modules.user.password import hash_password
from todolist.errors import ConflictError, NotFoundError

logger = structlog.get_logger(__name__)


class UserService(Service):
    """Manages user accounts. Every lookup reads the database, nothing is cached."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("users")

    async def on_start(self) -> None:
        """Create indexes on startup."""
        # The unique index is what actually guarantees one account per email
        with store_operation("users.create_indexes"):
            await self._collection.create_index([("email", 1)], unique=True)
        logger.debug("user_service_started")

    async def get_user(self, user_id: UUID) -> User:
        """Get user by ID."""
        with store_operation("users.get_user"):
            user = await self._collection.find_one({"_id": user_id})
        if user is None:
            raise NotFoundError(f"User '{user_id}' not found")
        return User.model_validate(user)

    async def get_user_by_email(self, email: str) -> User:
        """Get user by email, compared case-sensitively."""
        with store_operation("users.get_user_by_email"):
            user = await self._collection.find_one({"email": email})
        if user is None:
            raise NotFoundError("User not found")
        return User.model_validate(user)

    async def has_email(self, email: str) -> bool:
        """Check if an account with this email exists."""
        with store_operation("users.count_by_email"):
            count = await self._collection.count_documents({"email": email}, limit=1)
        return count > 0

    async def create_user(self, name: str, email: str, password: str, image: str | None = None) -> User:
        """Create user with hashed password.

        The caller validates input first; `has_email` is only a fast pre-check,
        a concurrent insert of the same email is still rejected by the unique index.
        """
        if await self.has_email(email):
            raise ConflictError("This email is already in use")

        password_hash = hash_password(password, self.core.config.bcrypt_rounds)
        user = User(name=name, email=email, password_hash=password_hash, image=image)
        with store_operation("users.create_user"):
            try:
                await self._collection.insert_one(user.to_mongo())
            except DuplicateKeyError:
                raise ConflictError("This email is already in use") from None
        logger.info("user_created", user_id=str(user.id))
        return user

    async def delete_user(self, user_id: UUID) -> None:
        """Delete a user by ID. Deleting a missing user is not an error."""
        with store_operation("users.delete_user"):
            await self._collection.delete_one({"_id": user_id})
        logger.info("user_deleted", user_id=str(user_id))
