"""
Battery Charging Log - Session Guard
Version: 1.0.0

Session/authorization collaborator: verifies the bearer token issued by
the login service, exposes the caller as a SessionContext and keeps one
in-flight flag per (session, action) so a second click on the same
action is refused while the first is still running.
"""

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Optional, Set, Tuple

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from config import settings
from services.errors import AuthorizationError, ForbiddenError, OperationInProgressError

logger = logging.getLogger(__name__)

_bearer = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class SessionContext:
    """Caller identity for the lifetime of one login session"""
    user: str
    role: str
    session_key: str

    @property
    def is_admin(self) -> bool:
        return self.role == settings.ADMIN_ROLE


def decode_session(token: str) -> SessionContext:
    """
    Verify a bearer token and build the session from its claims.

    Raises:
        AuthorizationError: token missing, expired, tampered or incomplete
    """
    if not settings.JWT_SECRET_KEY:
        logger.error("JWT_SECRET_KEY is not set; rejecting all sessions")
        raise AuthorizationError("Authentication is not configured")
    try:
        claims = jwt.decode(token, settings.JWT_SECRET_KEY,
                            algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise AuthorizationError()
    except jwt.InvalidTokenError as e:
        logger.warning(f"Rejected bearer token: {e}")
        raise AuthorizationError()

    user = claims.get("sub")
    role = claims.get("role")
    if not user or not role:
        raise AuthorizationError()
    return SessionContext(user=user, role=role, session_key=claims.get("sid") or user)


async def get_session(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
) -> SessionContext:
    """FastAPI dependency: current session or AuthorizationError"""
    if credentials is None or not credentials.credentials:
        raise AuthorizationError()
    return decode_session(credentials.credentials)


async def require_admin(session: SessionContext = Depends(get_session)) -> SessionContext:
    """FastAPI dependency: refuse non-administrators"""
    if not session.is_admin:
        logger.warning(f"User {session.user} ({session.role}) attempted an admin operation")
        raise ForbiddenError()
    return session


class InFlightGuard:
    """One running operation per (session, action); single event loop, no locks"""

    def __init__(self):
        self._active: Set[Tuple[str, str]] = set()

    def is_active(self, session_key: str, action: str) -> bool:
        return (session_key, action) in self._active

    @asynccontextmanager
    async def hold(self, session_key: str, action: str):
        key = (session_key, action)
        if key in self._active:
            raise OperationInProgressError(f"{action.capitalize()} already in progress")
        self._active.add(key)
        try:
            yield
        finally:
            self._active.discard(key)


# Singleton
in_flight = InFlightGuard()
