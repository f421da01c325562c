"""Bearer token signing and verification (PyJWT, HMAC).

End-user tokens are issued by the account service that shares
``JWT_SECRET_KEY`` with this API. Those tokens carry ``id`` and ``role``.
``create_access_token`` mints tokens of the same shape (with ``sub``) for
operators and tests.
"""

from datetime import UTC, datetime, timedelta
from typing import Any

import jwt

ACCESS_TOKEN_TYPE = "access"


def create_access_token(
    subject: str,
    role: str,
    secret_key: str,
    algorithm: str = "HS256",
    expires_minutes: int = 30,
) -> str:
    """Sign a token for ``subject`` with the given role, valid for ``expires_minutes``."""
    issued_at = datetime.now(UTC)
    claims = {
        "sub": subject,
        "role": role,
        "type": ACCESS_TOKEN_TYPE,
        "iat": issued_at,
        "exp": issued_at + timedelta(minutes=expires_minutes),
    }
    return jwt.encode(claims, secret_key, algorithm=algorithm)


def decode_token(token: str, secret_key: str, algorithm: str = "HS256") -> dict[str, Any]:
    """Verify the signature and expiry of ``token`` and return its claims.

    Raises:
        jwt.InvalidTokenError: If the token is malformed, expired or signed
            with another key (``ExpiredSignatureError`` is a subclass).
    """
    return jwt.decode(token, secret_key, algorithms=[algorithm])
