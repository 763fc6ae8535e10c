# bookstore/core/security.py
"""
Security module for authentication.
Handles password hashing and JWT token creation/validation.
"""
import datetime as dt
import secrets

import jwt  # PyJWT
from passlib.context import CryptContext

# Password hashing context
# Argon2 is a modern, salted, deliberately slow password hashing algorithm
pwd_context = CryptContext(
    schemes=["argon2"],  # Use Argon2 for password hashing
    deprecated="auto",   # Automatically handle deprecated schemes
)

def hash_password(plain: str) -> str:
    """
    Hash a plain text password using Argon2.

    Args:
        plain: Plain text password to hash

    Returns:
        Hashed password string (safe to store in database)

    Note: Never store plain text passwords. Always use this function before saving.
    """
    return pwd_context.hash(plain)

def verify_password(plain: str, hashed: str) -> bool:
    """
    Verify a plain text password against a hashed password.

    The comparison is constant-time. An empty or malformed stored hash never
    matches.

    Args:
        plain: Plain text password to verify
        hashed: Hashed password from database

    Returns:
        True if password matches, False otherwise
    """
    if not hashed:
        return False
    try:
        return pwd_context.verify(plain, hashed)
    except ValueError:
        return False

def dummy_verify() -> None:
    """Spend the time of one verification; used when the user does not exist."""
    pwd_context.dummy_verify()


class TokenIssuer:
    """
    Issues and decodes the JWT access tokens.

    One instance is built from the settings when the application is created
    and stored on `app.state`; the signing key is never a module global.

    Token payload:
        - sub: Subject (username)
        - iss: Issuer
        - iat / nbf: Issued at / not before
        - exp: Expiration timestamp
    """

    def __init__(
        self,
        secret: str | bytes | None = None,
        algorithm: str = "HS512",
        expire_minutes: int = 15,
        issuer: str = "bookstore",
    ):
        # No configured secret: 64 random bytes, valid for this instance only
        self._secret = secret or secrets.token_bytes(64)
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes
        self.issuer = issuer

    @classmethod
    def from_settings(cls, settings) -> "TokenIssuer":
        return cls(
            secret=settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            expire_minutes=settings.access_token_expire_minutes,
            issuer=settings.jwt_issuer,
        )

    def issue(self, username: str) -> str:
        """
        Create a signed access token for `username`.

        Returns:
            Encoded JWT token string
        """
        now = dt.datetime.now(dt.timezone.utc)
        payload = {
            "sub": username,
            "iss": self.issuer,
            "iat": now,
            "nbf": now,
            "exp": now + dt.timedelta(minutes=self.expire_minutes),
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def decode(self, token: str) -> dict:
        """
        Decode and validate an access token.

        Raises:
            jwt.ExpiredSignatureError: If token has expired
            jwt.InvalidTokenError: If token is invalid, malformed, or from another issuer
        """
        return jwt.decode(
            token,
            self._secret,
            algorithms=[self.algorithm],
            issuer=self.issuer,
        )
