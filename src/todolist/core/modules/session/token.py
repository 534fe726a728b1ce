"""Signed bearer tokens.

Tokens are HS256 JWTs carrying the subject, issue and expiry instants and a
unique id. Request authentication trusts the sessions collection, decoding here
is an additional check that the token was signed by this server for its owner.
"""

from datetime import UTC, datetime, timedelta
from uuid import UUID

import jwt
from pydantic import BaseModel

from todolist.core.modules.session.models import AuthToken
from todolist.errors import InvalidTokenError, SigningError, TokenExpiredError
from todolist.utils import now, uuid7

ALGORITHM = "HS256"
REQUIRED_CLAIMS = ["sub", "iat", "exp", "jti"]


class IssuedToken(BaseModel):
    token: AuthToken
    token_id: UUID
    issued_at: datetime
    expires_at: datetime


class TokenClaims(BaseModel):
    subject_id: UUID
    token_id: UUID
    issued_at: datetime
    expires_at: datetime


def issue_token(
    subject_id: UUID,
    ttl: timedelta,
    secret_key: str,
    token_id: UUID | None = None,
    issued_at: datetime | None = None,
) -> IssuedToken:
    """Sign a token for `subject_id` valid for `ttl` from `issued_at` (default: now).

    Instants are truncated to whole seconds so the stored expiry matches the `exp` claim.

    Raises:
        SigningError: If the key is empty or the token cannot be encoded
    """
    if not secret_key:
        raise SigningError("Signing key is not configured")

    token_id = token_id or uuid7()
    issued_at = (issued_at or now()).replace(microsecond=0)
    expires_at = issued_at + ttl
    payload = {
        "sub": str(subject_id),
        "iat": int(issued_at.timestamp()),
        "exp": int(expires_at.timestamp()),
        "jti": str(token_id),
    }
    try:
        token = jwt.encode(payload, secret_key, algorithm=ALGORITHM)
    except (jwt.PyJWTError, TypeError, ValueError) as e:
        raise SigningError(f"Token signing failed: {e}") from e
    return IssuedToken(token=AuthToken(token), token_id=token_id, issued_at=issued_at, expires_at=expires_at)


def decode_token(token: str, secret_key: str, verify_expiry: bool = True) -> TokenClaims:
    """Verify the signature of `token` and return its claims.

    Raises:
        TokenExpiredError: If `verify_expiry` is set and the `exp` claim has passed
        InvalidTokenError: If the token is malformed, tampered with or signed with another key
    """
    try:
        payload = jwt.decode(
            token,
            secret_key,
            algorithms=[ALGORITHM],
            options={"require": REQUIRED_CLAIMS, "verify_exp": verify_expiry},
        )
    except jwt.ExpiredSignatureError:
        raise TokenExpiredError from None
    except jwt.InvalidTokenError:
        raise InvalidTokenError from None

    try:
        return TokenClaims(
            subject_id=UUID(str(payload["sub"])),
            token_id=UUID(str(payload["jti"])),
            issued_at=datetime.fromtimestamp(payload["iat"], tz=UTC),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=UTC),
        )
    except (ValueError, OverflowError, OSError):
        raise InvalidTokenError from None
