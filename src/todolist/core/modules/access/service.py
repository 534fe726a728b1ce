import structlog

from todolist.core.core import Service
from todolist.core.modules.access.models import Identity
from todolist.core.modules.session.models import AuthToken, Session, SessionState
from todolist.core.modules.session.token import decode_token
from todolist.core.modules.user.models import User
from todolist.errors import (
    DataConsistencyError,
    InvalidFormatError,
    InvalidTokenError,
    MissingCredentialError,
    NotFoundError,
    StoreError,
    TokenExpiredError,
)
from todolist.utils import now

logger = structlog.get_logger(__name__)

BEARER_SCHEME = "Bearer"


def parse_bearer_header(authorization: str | None) -> AuthToken:
    """Extract the token from an `Authorization: Bearer <token>` header value.

    The scheme name is case-sensitive and the value must split into exactly two
    whitespace-separated parts.

    Raises:
        MissingCredentialError: If the header is absent or empty
        InvalidFormatError: If the header is not `Bearer <token>`
    """
    if not authorization:
        raise MissingCredentialError
    parts = authorization.split()
    if len(parts) != 2 or parts[0] != BEARER_SCHEME:
        raise InvalidFormatError
    return AuthToken(parts[1])


class AccessService(Service):
    """Gates protected requests: validates the presented credential and resolves its owner."""

    async def validate_credential(self, authorization: str | None) -> Session:
        """Return the live session for an Authorization header value.

        Checks run in a fixed order and stop at the first failure. Presenting an
        expired token deletes its session; that is the only write made here.

        Raises:
            MissingCredentialError, InvalidFormatError: Header problems
            InvalidTokenError: No session holds the token
            TokenExpiredError: The session has expired (and has been removed)
            StoreError: The sessions collection could not be queried
        """
        try:
            token = parse_bearer_header(authorization)
        except MissingCredentialError:
            logger.debug("credential_rejected", state=SessionState.NO_CREDENTIAL)
            raise
        except InvalidFormatError:
            logger.debug("credential_rejected", state=SessionState.MALFORMED_HEADER)
            raise

        try:
            session = await self.core.services.session.find_by_token(token)
        except NotFoundError:
            logger.debug("credential_rejected", state=SessionState.UNRESOLVED)
            raise InvalidTokenError from None

        if session.is_expired(now()):
            logger.debug("credential_rejected", state=SessionState.EXPIRED, session_id=str(session.id))
            await self._discard_expired_session(session)
            raise TokenExpiredError

        if self.core.config.verify_token_signature:
            self._verify_token_binding(token, session)

        logger.debug("credential_accepted", state=SessionState.LIVE, session_id=str(session.id))
        return session

    async def resolve_identity(self, session: Session) -> User:
        """Load the owner of a live session.

        Raises:
            DataConsistencyError: If the owner does not exist
        """
        try:
            return await self.core.services.user.get_user(session.user_id)
        except NotFoundError:
            logger.error("orphaned_session", session_id=str(session.id), user_id=str(session.user_id))
            raise DataConsistencyError(f"Session '{session.id}' references missing user '{session.user_id}'") from None

    async def authenticate(self, authorization: str | None) -> Identity:
        """Validate the credential and resolve the user it belongs to."""
        session = await self.validate_credential(authorization)
        user = await self.resolve_identity(session)
        return Identity(user=user, session=session)

    async def _discard_expired_session(self, session: Session) -> None:
        # Best effort: the request is rejected as expired whether or not the delete succeeds
        try:
            await self.core.services.session.delete_session(session.id)
        except StoreError:
            logger.warning("expired_session_cleanup_failed", session_id=str(session.id))

    def _verify_token_binding(self, token: str, session: Session) -> None:
        """Check the token was signed with the current key for this session and its owner."""
        claims = decode_token(token, self.core.config.jwt_secret, verify_expiry=False)
        if claims.subject_id != session.user_id or claims.token_id != session.id:
            logger.warning("token_binding_mismatch", session_id=str(session.id))
            raise InvalidTokenError
