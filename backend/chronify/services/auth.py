"""
Password hashing and bearer token issuance.
"""

from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from passlib.context import CryptContext

from chronify.config import settings
from chronify.logging import get_logger
from chronify.services.errors import AuthenticationError

logger = get_logger('services.auth')


class AuthService:
    """Hashes passwords and signs/verifies HS256 access tokens."""

    def __init__(
        self,
        secret_key: str | None = None,
        algorithm: str | None = None,
        expire_minutes: int | None = None,
    ):
        self.secret_key = secret_key or settings.JWT_SECRET_KEY
        self.algorithm = algorithm or settings.JWT_ALGORITHM
        self.expire_minutes = expire_minutes if expire_minutes is not None else settings.ACCESS_TOKEN_EXPIRE_MINUTES
        self.pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

    def hash_password(self, password: str) -> str:
        return self.pwd_context.hash(password)

    def verify_password(self, password: str, password_hash: str) -> bool:
        try:
            return self.pwd_context.verify(password, password_hash)
        except ValueError as e:
            logger.warning(f"Unreadable password hash: {e}")
            return False

    def create_access_token(self, user_id: str) -> str:
        now = datetime.now(timezone.utc)
        claims = {
            "sub": user_id,
            "iat": now,
            "exp": now + timedelta(minutes=self.expire_minutes),
        }
        return jwt.encode(claims, self.secret_key, algorithm=self.algorithm)

    def decode_access_token(self, token: str) -> str:
        """
        Verify a bearer token and return the user id it was issued for.

        :param token: Encoded JWT
        :type token: str
        :return: The ``sub`` claim
        :rtype: str
        :raises AuthenticationError: If the token is malformed, expired or forged
        """
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError as e:
            raise AuthenticationError("Invalid or expired token") from e

        user_id = payload.get("sub")
        if not user_id:
            raise AuthenticationError("Invalid or expired token")
        return str(user_id)
