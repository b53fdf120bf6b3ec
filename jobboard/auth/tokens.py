"""
Session token issuing and verification
Signed HS256 bearer tokens carrying only the username as subject
"""

import secrets
from datetime import datetime, timedelta, timezone

import jwt

from jobboard.exceptions import TokenExpired, TokenInvalid
from jobboard.simple_logger import get_logger

logger = get_logger("auth")

DEFAULT_TOKEN_TTL = timedelta(hours=10)


class TokenIssuer:
    """Issues and verifies bearer tokens signed with one symmetric key.

    The key is construction state: two issuers built from the same key accept
    each other's tokens, an issuer built from a fresh key accepts none of them.
    """

    def __init__(self, secret_key, ttl: timedelta = DEFAULT_TOKEN_TTL, algorithm: str = "HS256"):
        if not secret_key:
            raise ValueError("secret_key is required")
        self._secret_key = secret_key
        self.ttl = ttl
        self.algorithm = algorithm

    @classmethod
    def with_random_key(cls, ttl: timedelta = DEFAULT_TOKEN_TTL) -> "TokenIssuer":
        """Issuer whose tokens stop verifying once the process exits"""
        return cls(secrets.token_hex(32), ttl=ttl)

    def issue(self, username: str) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "sub": username,
            "iat": now,
            "exp": now + self.ttl,
        }
        return jwt.encode(payload, self._secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> str:
        """Return the token's subject or raise TokenExpired / TokenInvalid"""
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self.algorithm],
                options={"require": ["sub", "iat", "exp"]},
            )
        except jwt.ExpiredSignatureError:
            logger.info("[AUTH] Rejected expired token")
            raise TokenExpired("Token has expired")
        except jwt.InvalidTokenError as e:
            logger.warning(f"[AUTH] Rejected invalid token: {e}")
            raise TokenInvalid("Token is invalid")
        return payload["sub"]
