"""
Account registration and login.
"""

import re
import sqlite3
from datetime import datetime, timezone
from uuid import uuid4

import aiosqlite
from starlette.concurrency import run_in_threadpool

from chronify.database.db import connect, violated_constraint
from chronify.logging import get_logger
from chronify.models import LoginRequest, LoginResult, RegisterRequest, User, UserPublic
from chronify.services.auth import AuthService
from chronify.services.errors import AuthenticationError, ConflictError, StorageError

logger = get_logger('services.users')

EMAIL_RE = re.compile(
    r"^[a-zA-Z][a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]*@[a-zA-Z]+(?:\.[a-zA-Z]+)*$"
)
MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 8

CONFLICT_MESSAGES = {
    "users_email_key": "Email already exists",
    "users_username_key": "Username already exists",
}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def is_valid_email(email: str) -> bool:
    return EMAIL_RE.match(email) is not None


def _row_to_user(row: dict) -> User:
    return User(
        id=row["id"],
        username=row["username"],
        email=row["email"],
        password_hash=row["password_hash"],
        created_at=row["created_at"],
    )


class UserService:
    """Service for the identity store."""

    def __init__(self, db_path: str, auth: AuthService):
        self.db_path = db_path
        self.auth = auth

    async def _get_db(self) -> aiosqlite.Connection:
        return await connect(self.db_path)

    async def get_user_by_email(self, email: str) -> User | None:
        db = await self._get_db()
        try:
            cursor = await db.execute("SELECT * FROM users WHERE email = ?", (email,))
            row = await cursor.fetchone()
            return _row_to_user(dict(row)) if row else None
        finally:
            await db.close()

    async def get_user(self, user_id: str) -> User | None:
        db = await self._get_db()
        try:
            cursor = await db.execute("SELECT * FROM users WHERE id = ?", (user_id,))
            row = await cursor.fetchone()
            return _row_to_user(dict(row)) if row else None
        finally:
            await db.close()

    async def register(self, data: RegisterRequest) -> UserPublic:
        """
        Validate and persist a new account.

        :param data: Registration payload
        :type data: RegisterRequest
        :return: The created account without its password hash
        :rtype: UserPublic
        :raises ValueError: On missing fields, bad email format or short username/password
        :raises ConflictError: If the email or username is taken
        """
        if not data.email or not data.password or not data.username:
            raise ValueError("Email, username and password are required")
        if not is_valid_email(data.email):
            raise ValueError("Invalid email format")
        if len(data.username) < MIN_USERNAME_LENGTH:
            raise ValueError(f"Username must be at least {MIN_USERNAME_LENGTH} characters")
        if len(data.password) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

        user = User(
            id=str(uuid4()),
            username=data.username,
            email=data.email,
            password_hash=await run_in_threadpool(self.auth.hash_password, data.password),
            created_at=_now(),
        )

        db = await self._get_db()
        try:
            await db.execute(
                """INSERT INTO users (id, username, email, password_hash, created_at)
                   VALUES (?, ?, ?, ?, ?)""",
                (user.id, user.username, user.email, user.password_hash, user.created_at.isoformat()),
            )
            await db.commit()
        except sqlite3.IntegrityError as e:
            logger.error(f"Failed to create user {data.email}: {e}")
            constraint = violated_constraint(e)
            if constraint in CONFLICT_MESSAGES:
                raise ConflictError(CONFLICT_MESSAGES[constraint], constraint) from e
            raise StorageError("Failed to create user") from e
        except sqlite3.Error as e:
            logger.error(f"Failed to create user {data.email}: {e}")
            raise StorageError("Failed to create user") from e
        finally:
            await db.close()

        logger.info(f"Registered user {user.username} ({user.id[:8]})")
        return user.public()

    async def login(self, data: LoginRequest) -> LoginResult:
        """
        Exchange email and password for a bearer token.

        Unknown emails and wrong passwords fail the same way.
        """
        if not data.email or not data.password:
            raise ValueError("Email and password are required")
        if not is_valid_email(data.email):
            raise ValueError("Invalid email format")

        user = await self.get_user_by_email(data.email)
        if not user:
            logger.info(f"Login failed for unknown email {data.email}")
            raise AuthenticationError("Invalid credentials")
        if not await run_in_threadpool(self.auth.verify_password, data.password, user.password_hash):
            logger.info(f"Login failed for user {user.id[:8]}: wrong password")
            raise AuthenticationError("Invalid credentials")

        token = self.auth.create_access_token(user.id)
        return LoginResult(token=token, user=user.public())
