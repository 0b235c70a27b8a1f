"""JWT token creation and verification.

Learn: JWT (JSON Web Token) provides stateless authentication. The token
carries the claim set {user id, email, role} plus an expiry; nothing is
stored server-side. Verification re-derives validity from the signature
and the "exp" claim alone, so changing the secret invalidates every
outstanding token and there is no way to revoke a single one.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from publisher.config import Settings


class TokenError(Exception):
    """Raised when token verification fails."""


class TokenExpired(TokenError):
    """Signature is valid but the expiry is in the past."""


class TokenInvalid(TokenError):
    """Bad signature, wrong secret, or not a token we issued."""


@dataclass(frozen=True)
class Claims:
    """Identity embedded in a session token.

    role is None for an account with no active role assignment.
    """

    user_id: str
    email: str
    role: Optional[str] = None


class TokenService:
    """Issues and verifies signed, time-bound session tokens.

    Pure function of its secret and the input claims — holds no state
    besides configuration, so one instance is shared by all requests.
    """

    def __init__(self, secret: str, algorithm: str = "HS256", expire_days: int = 7):
        self.secret = secret
        self.algorithm = algorithm
        self.expire_days = expire_days

    @classmethod
    def from_settings(cls, config: Settings) -> "TokenService":
        return cls(
            secret=config.jwt_secret,
            algorithm=config.jwt_algorithm,
            expire_days=config.token_expire_days,
        )

    def issue(self, claims: Claims, expires_delta: Optional[timedelta] = None) -> str:
        """Create a signed token for the given identity."""
        now = datetime.now(timezone.utc)
        payload = {
            "sub": claims.user_id,
            "email": claims.email,
            "role": claims.role,
            "iat": now,
            "exp": now + (expires_delta or timedelta(days=self.expire_days)),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> Claims:
        """Verify and decode a token.

        Returns the embedded claims unchanged.
        Raises TokenExpired or TokenInvalid on failure.
        """
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["sub", "exp"]},
            )
        except jwt.ExpiredSignatureError:
            raise TokenExpired("Token has expired")
        except jwt.InvalidTokenError as e:
            raise TokenInvalid(f"Invalid token: {e}")

        if "email" not in payload or "role" not in payload:
            raise TokenInvalid("Invalid token: missing identity claims")
        return Claims(
            user_id=payload["sub"],
            email=payload["email"],
            role=payload["role"],
        )
