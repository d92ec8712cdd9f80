"""Users and their bearer sessions."""

from typing import Optional
from datetime import datetime, timedelta
import hashlib
import secrets
from sqlmodel import Field, SQLModel

from models.timestamps import as_utc, timestamp_field, utc_now

SESSION_LIFETIME = timedelta(days=7)


def hash_token(token: str) -> str:
    """Only the SHA-256 of a session token is stored."""
    return hashlib.sha256(token.encode()).hexdigest()


def generate_session_token() -> str:
    return secrets.token_urlsafe(32)


class User(SQLModel, table=True):
    """A list owner. Each user has at most one ReWa list."""
    __tablename__ = "user"

    id: Optional[int] = Field(default=None, primary_key=True)
    email: Optional[str] = Field(default=None, index=True, unique=True)
    created_at: datetime = timestamp_field()


class AuthSession(SQLModel, table=True):
    __tablename__ = "auth_session"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: Optional[int] = Field(default=None, foreign_key="user.id", index=True)
    email: Optional[str] = None
    session_token_hash: str = Field(index=True, unique=True)
    created_at: datetime = timestamp_field()
    expires_at: datetime = timestamp_field(lambda: utc_now() + SESSION_LIFETIME)
    revoked_at: Optional[datetime] = timestamp_field(None, nullable=True)

    def is_active(self, now: Optional[datetime] = None) -> bool:
        now = now or utc_now()
        return self.revoked_at is None and as_utc(self.expires_at) > now
