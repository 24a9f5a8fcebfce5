"""Admin authentication with session tokens."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from urllib.parse import quote_plus

ADMIN_USER = "admin"
SESSION_TOKEN_COOKIE = "session_token"


class AuthError(Exception):
    """Raised when login credentials are rejected."""


@dataclass
class UserSession:
    token: str
    username: str
    created_at: datetime = field(default_factory=datetime.now)


def login_redirect(path: str, raw_query: str) -> str:
    """URL of the login page that returns to the given path and query afterwards."""
    redirect = f"{path}?{raw_query}" if raw_query else path
    return "/login?redirect=" + quote_plus(redirect)


class Authenticator:
    """Checks admin credentials and keeps the sessions created by logging in."""

    def __init__(self, admin_password: str = "") -> None:
        self.admin_password = admin_password
        self.sessions: dict[str, UserSession] = {}

    def check_password(self, user: str, password: str) -> None:
        """Raises AuthError unless the credentials are the admin's."""
        if user != ADMIN_USER or password != self.admin_password:
            raise AuthError("Invalid login credentials.")

    def login(self, user: str, password: str) -> UserSession:
        """Checks the credentials and opens a new session for the user."""
        self.check_password(user, password)
        session = UserSession(token=str(uuid.uuid4()), username=user)
        self.sessions[session.token] = session
        return session

    def user_is_admin(self, token: str | None) -> bool:
        """True if no admin password is set or the token belongs to an admin session."""
        if not self.admin_password:
            return True
        session = self.sessions.get(token) if token else None
        return session is not None and session.username == ADMIN_USER