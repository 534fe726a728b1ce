from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from todolist.config import Config
from todolist.core.core import Core
from todolist.core.modules.access.models import AuthView, Identity
from todolist.core.modules.session.models import Session
from todolist.core.modules.todo.models import Todo
from todolist.core.modules.user.models import User, UserView
from todolist.core.modules.user.password import verify_password
from todolist.core.modules.user.validators import validate_email, validate_name, validate_password
from todolist.core.pagination import Page, PageRequest
from todolist.errors import InvalidCredentialsError, NotFoundError, SigningError, StoreError, ValidationError
from todolist.utils import now

logger = structlog.get_logger(__name__)


class App:
    """Facade for all application operations.

    Operations taking an `Identity` expect an already authenticated caller and never re-check the token.
    """

    def __init__(self, config: Config, database: AsyncDatabase[dict[str, Any]] | None = None) -> None:
        self._core = Core(config, database)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan management - delegates to Core."""
        async with self._core.lifespan():
            yield

    async def authenticate(self, authorization: str | None) -> Identity:
        """Resolve the caller of a request from its Authorization header value."""
        return await self._core.services.access.authenticate(authorization)

    async def register(self, name: str, email: str, password: str, image: str | None = None) -> AuthView:
        """Create an account and its first session.

        If the session cannot be issued the new account is deleted again, so the
        client can retry the registration with the same email.
        """
        if not name or not email or not password:
            raise ValidationError("All fields are required")
        validate_name(name)
        validate_email(email)
        validate_password(password)

        user = await self._core.services.user.create_user(name.strip(), email, password, image or None)
        try:
            session = await self._core.services.session.create_session(user.id)
        except (StoreError, SigningError):
            logger.warning("registration_rolled_back", user_id=str(user.id))
            await self._core.services.user.delete_user(user.id)
            raise
        logger.info("user_registered", user_id=str(user.id))
        return AuthView.from_session(user, session)

    async def login(self, email: str, password: str) -> AuthView:
        """Authenticate by email and password and return a session token.

        Unknown email and wrong password fail identically for the client.
        """
        if not email or not password:
            raise ValidationError("All fields are required")

        try:
            user = await self._core.services.user.get_user_by_email(email)
        except NotFoundError:
            logger.info("login_failed", reason="unknown_email")
            raise InvalidCredentialsError from None

        if not verify_password(user.password_hash, password):
            logger.info("login_failed", reason="wrong_password", user_id=str(user.id))
            raise InvalidCredentialsError

        session = await self._login_session(user)
        logger.info("user_logged_in", user_id=str(user.id), session_id=str(session.id))
        return AuthView.from_session(user, session)

    async def logout(self, identity: Identity) -> None:
        """Revoke the session the caller authenticated with."""
        await self._core.services.session.delete_session_by_token(identity.session.token)
        logger.info("user_logged_out", user_id=str(identity.user.id), session_id=str(identity.session.id))

    async def get_profile(self, identity: Identity) -> UserView:
        return UserView.from_domain(identity.user)

    # === Todos ===
    async def list_todos(self, identity: Identity, page: int, limit: int, completed: bool | None = None) -> Page[Todo]:
        request = PageRequest.create(page, limit)
        return await self._core.services.todo.list_todos(identity.user.id, request, completed)

    async def create_todo(self, identity: Identity, title: str) -> Todo:
        return await self._core.services.todo.create_todo(identity.user.id, title)

    async def update_todo(self, identity: Identity, todo_id: UUID, title: str) -> Todo:
        return await self._core.services.todo.update_title(identity.user.id, todo_id, title)

    async def complete_todo(self, identity: Identity, todo_id: UUID, completed: bool) -> Todo:
        return await self._core.services.todo.set_completed(identity.user.id, todo_id, completed)

    async def delete_todo(self, identity: Identity, todo_id: UUID) -> None:
        await self._core.services.todo.delete_todo(identity.user.id, todo_id)

    # === Private helpers ===
    async def _login_session(self, user: User) -> Session:
        """Pick the session a successful login returns.

        By default every login gets a fresh session. With `reuse_live_session` the
        user's newest session is returned while live, or replaced once expired.
        """
        sessions = self._core.services.session
        if not self._core.config.reuse_live_session:
            return await sessions.create_session(user.id)

        try:
            current = await sessions.find_user_session(user.id)
        except NotFoundError:
            return await sessions.create_session(user.id)

        if current.is_expired(now()):
            await sessions.delete_session(current.id)
            return await sessions.create_session(user.id)
        return current
