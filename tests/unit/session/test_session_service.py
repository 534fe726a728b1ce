"""Tests for SessionService."""

from datetime import timedelta
from uuid import UUID, uuid4

import pytest

from todolist.core.modules.session.models import Session
from todolist.core.modules.session.token import decode_token
from todolist.errors import NotFoundError, StoreError
from todolist.utils import now


class TestCreateSession:
    """Tests for session creation."""

    @pytest.mark.asyncio
    async def test_session_is_persisted_with_token_claims(self, core, config, database):
        user_id = uuid4()
        session = await core.services.session.create_session(user_id)

        stored = database.get_collection("sessions").documents
        assert [d["_id"] for d in stored] == [session.id]
        assert stored[0]["user_id"] == user_id

        claims = decode_token(session.token, config.jwt_secret)
        assert claims.subject_id == user_id
        assert claims.token_id == session.id
        assert claims.expires_at == session.expires_at
        assert session.expires_at - session.created_at == config.token_ttl

    @pytest.mark.asyncio
    async def test_issued_token_resolves_to_same_session(self, core):
        user_id = uuid4()
        session = await core.services.session.create_session(user_id)

        found = await core.services.session.find_by_token(session.token)
        assert found.id == session.id
        assert found.user_id == user_id
        assert found.is_expired(now()) is False

    @pytest.mark.asyncio
    async def test_insert_failure_raises_store_error(self, core, database):
        database.get_collection("sessions").fail("insert_one")

        with pytest.raises(StoreError):
            await core.services.session.create_session(uuid4())


class TestFindSession:
    """Tests for session lookups."""

    @pytest.mark.asyncio
    async def test_unknown_token_raises_not_found(self, core):
        with pytest.raises(NotFoundError):
            await core.services.session.find_by_token("unknown")

    @pytest.mark.asyncio
    async def test_find_user_session_returns_newest(self, core, database):
        user_id = uuid4()
        created = now()
        sessions = database.get_collection("sessions")
        for age_hours, token in [(2, "older"), (1, "newer"), (3, "oldest")]:
            session = Session(
                user_id=user_id,
                token=token,
                created_at=created - timedelta(hours=age_hours),
                expires_at=created + timedelta(hours=1),
            )
            await sessions.insert_one(session.to_mongo())

        assert (await core.services.session.find_user_session(user_id)).token == "newer"

    @pytest.mark.asyncio
    async def test_find_user_session_without_sessions_raises_not_found(self, core):
        with pytest.raises(NotFoundError):
            await core.services.session.find_user_session(uuid4())

    @pytest.mark.asyncio
    async def test_lookup_failure_raises_store_error_not_not_found(self, core, database):
        """Test that a store outage is never reported as a missing session."""
        database.get_collection("sessions").fail("find_one")

        with pytest.raises(StoreError) as exc_info:
            await core.services.session.find_by_token("token")
        assert exc_info.value.operation == "sessions.find_by_token"


class TestDeleteSession:
    """Tests for session deletion."""

    @pytest.mark.asyncio
    async def test_delete_is_idempotent(self, core, database):
        session = await core.services.session.create_session(uuid4())

        await core.services.session.delete_session(session.id)
        await core.services.session.delete_session(session.id)

        assert database.get_collection("sessions").documents == []
        with pytest.raises(NotFoundError):
            await core.services.session.find_by_token(session.token)

    @pytest.mark.asyncio
    async def test_delete_by_token_leaves_other_sessions(self, core, database):
        user_id = uuid4()
        first = await core.services.session.create_session(user_id)
        second = await core.services.session.create_session(user_id)

        await core.services.session.delete_session_by_token(first.token)
        await core.services.session.delete_session_by_token(first.token)

        assert [d["_id"] for d in database.get_collection("sessions").documents] == [second.id]


class TestSessionOrdering:
    """Tests for picking the newest session of a user."""

    @pytest.mark.asyncio
    async def test_find_user_session_breaks_same_second_tie_by_id(self, core, database):
        """Test that sessions created within the same second resolve to the later id."""
        user_id = uuid4()
        created = now().replace(microsecond=0)
        sessions = database.get_collection("sessions")
        for id_, token in [(UUID(int=2), "later"), (UUID(int=1), "earlier")]:
            session = Session(
                id=id_, user_id=user_id, token=token, created_at=created, expires_at=created + timedelta(hours=1)
            )
            await sessions.insert_one(session.to_mongo())

        assert (await core.services.session.find_user_session(user_id)).token == "later"
