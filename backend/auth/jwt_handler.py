import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from functools import lru_cache

import jwt

from backend.core import config

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenClaims:
    user_id: int
    prn: str
    issued_at: datetime
    expires_at: datetime


class TokenService:
    """Issues and verifies the signed bearer tokens handed out at login."""

    def __init__(self, secret_key: str, algorithm: str = "HS256", expires_minutes: int = 60):
        if not secret_key:
            raise ValueError("A signing secret is required.")
        self._secret_key = secret_key
        self._algorithm = algorithm
        self.expires_minutes = expires_minutes

    def issue(self, user_id: int, prn: str, issued_at: datetime | None = None) -> str:
        issued_at = issued_at or datetime.now(timezone.utc)
        payload = {
            "id": user_id,
            "prn": prn,
            "iat": issued_at,
            "exp": issued_at + timedelta(minutes=self.expires_minutes),
        }
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def verify(self, token: str) -> TokenClaims | None:
        """Return the claims of a valid token, or None.

        Expired, tampered and malformed tokens are all reported the same way.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"require": ["exp", "iat"]},
            )
        except jwt.InvalidTokenError as exc:
            logger.debug("Rejected token: %s", exc)
            return None

        user_id = payload.get("id")
        prn = payload.get("prn")
        if not isinstance(user_id, int) or isinstance(user_id, bool) or not isinstance(prn, str):
            logger.debug("Rejected token with unexpected claims")
            return None

        return TokenClaims(
            user_id=user_id,
            prn=prn,
            issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )


@lru_cache
def get_token_service() -> TokenService:
    return TokenService(
        secret_key=config.get_jwt_secret_key(),
        algorithm=config.JWT_ALGORITHM,
        expires_minutes=config.JWT_EXPIRES_MINUTES,
    )
