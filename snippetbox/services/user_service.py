"""
Snippetbox — User Service
==========================

What:  Account persistence and credential checks: insert, authenticate, exists.
Who:   Called by the user route handlers and the authentication gate.

Password Storage:
    bcrypt with a work factor of 12. bcrypt only considers the first 72 bytes
    of a password, so longer passwords are cut to 72 bytes on both the hash and
    the check path. Hashing runs in the threadpool because a cost-12 hash takes
    a few hundred milliseconds of CPU.
"""

import logging

import bcrypt
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from snippetbox.exceptions import (
    DatabaseError,
    DuplicateEmailError,
    InvalidCredentialsError,
)
from snippetbox.models.user import User

logger = logging.getLogger(__name__)

BCRYPT_MAX_BYTES = 72

# Substrings identifying a violation of the unique email constraint, across
# PostgreSQL/MySQL (constraint name) and SQLite (column name)
_EMAIL_CONSTRAINT_MARKERS = ("users_uc_email", "users.email")


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


class UserService:
    """Business logic layer for user accounts."""

    def __init__(self, bcrypt_cost: int = 12):
        self.bcrypt_cost = bcrypt_cost

    def hash_password(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self.bcrypt_cost)
        return bcrypt.hashpw(_password_bytes(password), salt).decode("ascii")

    @staticmethod
    def check_password(password: str, hashed_password: str) -> bool:
        return bcrypt.checkpw(_password_bytes(password), hashed_password.encode("ascii"))

    async def insert(self, db: AsyncSession, name: str, email: str, password: str) -> None:
        """
        Create an account.

        Raises:
            DuplicateEmailError: the email is already registered.
            DatabaseError: any other database failure.
        """
        hashed = await run_in_threadpool(self.hash_password, password)
        user = User(name=name, email=email, hashed_password=hashed)

        try:
            db.add(user)
            await db.flush()
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            if any(marker in str(e.orig) for marker in _EMAIL_CONSTRAINT_MARKERS):
                logger.info("Signup rejected: email already registered")
                raise DuplicateEmailError(email=email) from e
            logger.error("Integrity error inserting user: %s", str(e))
            raise DatabaseError(
                message="Could not create the account.",
                context={"error_type": type(e).__name__, "error": str(e.orig)},
            ) from e
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Database error inserting user: %s", str(e))
            raise DatabaseError(
                message="Could not create the account.",
                context={"error_type": type(e).__name__},
            ) from e

        logger.info("User %s created", user.id)

    async def authenticate(self, db: AsyncSession, email: str, password: str) -> int:
        """
        Check an email/password pair.

        Returns:
            The user's id.

        Raises:
            InvalidCredentialsError: unknown email or wrong password. Both cases
                raise the same error so the response does not reveal which
                emails are registered.
            DatabaseError: the query failed.
        """
        try:
            result = await db.execute(
                select(User.id, User.hashed_password).where(User.email == email)
            )
            row = result.one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error authenticating user: %s", str(e))
            raise DatabaseError(
                message="Could not check credentials.",
                context={"error_type": type(e).__name__},
            ) from e

        if row is None:
            raise InvalidCredentialsError()

        user_id, hashed_password = row
        if not await run_in_threadpool(self.check_password, password, hashed_password):
            raise InvalidCredentialsError(context={"user_id": user_id})
        return user_id

    async def exists(self, db: AsyncSession, user_id: int) -> bool:
        """True iff an account with this id exists."""
        try:
            result = await db.execute(select(User.id).where(User.id == user_id))
            return result.scalar_one_or_none() is not None
        except SQLAlchemyError as e:
            logger.error("Database error checking user %s: %s", user_id, str(e))
            raise DatabaseError(
                message="Could not check the account.",
                context={"user_id": user_id, "error_type": type(e).__name__},
            ) from e
