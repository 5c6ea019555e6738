"""
Stateless bearer credentials.

Tokens are HS256 JWTs carrying the user id (``sub``) and an expiry. There is
no session table and no revocation list; expiry is the only way a token stops
working. The signing secret is injected, never read from module state.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from tripai.errors import Unauthenticated

logger = logging.getLogger(__name__)

DEFAULT_TTL = timedelta(days=7)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def issue_token(
    user_id: int,
    secret: str,
    now: Optional[datetime] = None,
    ttl: timedelta = DEFAULT_TTL,
    algorithm: str = "HS256",
) -> str:
    now = now or _utcnow()
    payload = {
        "sub": str(user_id),
        "iat": int(now.timestamp()),
        "exp": int((now + ttl).timestamp()),
    }
    return jwt.encode(payload, secret, algorithm=algorithm)


def verify_token(
    token: Optional[str],
    secret: str,
    now: Optional[datetime] = None,
    algorithm: str = "HS256",
) -> int:
    """Return the user id bound to ``token`` or raise Unauthenticated.

    Expiry is checked against ``now`` rather than the wall clock so callers
    can verify deterministically.
    """
    if not token:
        raise Unauthenticated("Missing credential.")

    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[algorithm],
            options={"verify_exp": False, "verify_iat": False, "require": ["sub", "exp"]},
        )
    except jwt.InvalidTokenError as e:
        logger.info(f"Rejected credential: {type(e).__name__}")
        raise Unauthenticated("Invalid credential.")

    now = now or _utcnow()
    try:
        expires_at = int(payload["exp"])
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        logger.info("Rejected credential: malformed claims")
        raise Unauthenticated("Invalid credential.")

    if now.timestamp() >= expires_at:
        logger.info(f"Rejected credential: expired for user {user_id}")
        raise Unauthenticated("Credential expired.")

    return user_id


class SessionManager:
    def __init__(self, secret: str, ttl: timedelta = DEFAULT_TTL, algorithm: str = "HS256"):
        if not secret:
            raise ValueError("SessionManager requires a signing secret")
        self._secret = secret
        self.ttl = ttl
        self.algorithm = algorithm

    def issue(self, user_id: int, now: Optional[datetime] = None) -> str:
        return issue_token(user_id, self._secret, now=now, ttl=self.ttl, algorithm=self.algorithm)

    def verify(self, token: Optional[str], now: Optional[datetime] = None) -> int:
        return verify_token(token, self._secret, now=now, algorithm=self.algorithm)


def session_manager_from_settings(settings) -> SessionManager:
    return SessionManager(
        secret=settings.jwt_secret,
        ttl=timedelta(days=settings.token_ttl_days),
        algorithm=settings.jwt_algorithm,
    )
