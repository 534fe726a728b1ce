from datetime import timedelta

from pydantic import Field
from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str  # MongoDB URL, database name is the path, e.g. mongodb://localhost:27017/todolist
    host: str
    port: int
    debug: bool
    jwt_secret: str = Field(..., min_length=1)  # HS256 signing key for issued tokens
    token_ttl_hours: int = Field(24, ge=1)
    bcrypt_rounds: int = Field(10, ge=4, le=31)
    store_timeout_ms: int = Field(5000, ge=1)  # Upper bound for every database round-trip
    reuse_live_session: bool = False  # Login returns the user's live session instead of issuing a new one
    verify_token_signature: bool = False  # Re-check token signature and subject on every request
    cors_origins: list[str] = []

    model_config = {
        "env_file": [".env"],
        "env_prefix": "TODOLIST_",
        "extra": "ignore",
        "frozen": True,
    }

    @property
    def token_ttl(self) -> timedelta:
        return timedelta(hours=self.token_ttl_hours)
