"""
Snippetbox — User Service Unit Tests
=====================================

What:  Tests for UserService (insert, authenticate, exists).
How:   Mock DB sessions; bcrypt cost lowered to 4 so hashing stays fast.

What we test:
    ✅ Passwords are stored as bcrypt hashes, never in plain text
    ✅ Unique email violation → DuplicateEmailError, other integrity errors → DatabaseError
    ✅ Unknown email and wrong password raise the same InvalidCredentialsError
    ✅ Passwords longer than 72 bytes hash and verify
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import IntegrityError

from snippetbox.exceptions import DatabaseError, DuplicateEmailError, InvalidCredentialsError
from snippetbox.services.user_service import UserService


def _integrity_error(message: str) -> IntegrityError:
    return IntegrityError("INSERT INTO users ...", {}, Exception(message))


class TestUserServiceInsert:
    def setup_method(self):
        self.service = UserService(bcrypt_cost=4)

    @pytest.mark.asyncio
    async def test_insert_hashes_password(self, mock_db_session):
        added = []
        mock_db_session.add = MagicMock(side_effect=added.append)

        await self.service.insert(mock_db_session, "Alice", "alice@example.com", "pa55word!")

        user = added[0]
        assert user.email == "alice@example.com"
        assert user.hashed_password != "pa55word!"
        assert len(user.hashed_password) == 60
        assert UserService.check_password("pa55word!", user.hashed_password)
        mock_db_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_duplicate_email_postgres(self, mock_db_session):
        mock_db_session.flush = AsyncMock(
            side_effect=_integrity_error(
                'duplicate key value violates unique constraint "users_uc_email"'
            )
        )

        with pytest.raises(DuplicateEmailError):
            await self.service.insert(mock_db_session, "Bob", "bob@example.com", "pa55word!")

        mock_db_session.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_duplicate_email_sqlite(self, mock_db_session):
        mock_db_session.flush = AsyncMock(
            side_effect=_integrity_error("UNIQUE constraint failed: users.email")
        )

        with pytest.raises(DuplicateEmailError):
            await self.service.insert(mock_db_session, "Bob", "bob@example.com", "pa55word!")

    @pytest.mark.asyncio
    async def test_other_integrity_error_is_database_error(self, mock_db_session):
        mock_db_session.flush = AsyncMock(
            side_effect=_integrity_error("NOT NULL constraint failed: users.name")
        )

        with pytest.raises(DatabaseError):
            await self.service.insert(mock_db_session, "", "bob@example.com", "pa55word!")


class TestUserServiceAuthenticate:
    def setup_method(self):
        self.service = UserService(bcrypt_cost=4)

    def _row(self, mock_db_session, row):
        mock_result = MagicMock()
        mock_result.one_or_none.return_value = row
        mock_db_session.execute.return_value = mock_result

    @pytest.mark.asyncio
    async def test_correct_password_returns_id(self, mock_db_session):
        self._row(mock_db_session, (3, self.service.hash_password("pa55word!")))

        assert await self.service.authenticate(mock_db_session, "a@b.com", "pa55word!") == 3

    @pytest.mark.asyncio
    async def test_wrong_password(self, mock_db_session):
        self._row(mock_db_session, (3, self.service.hash_password("pa55word!")))

        with pytest.raises(InvalidCredentialsError):
            await self.service.authenticate(mock_db_session, "a@b.com", "wrong-password")

    @pytest.mark.asyncio
    async def test_unknown_email(self, mock_db_session):
        self._row(mock_db_session, None)

        with pytest.raises(InvalidCredentialsError):
            await self.service.authenticate(mock_db_session, "nobody@b.com", "pa55word!")

    @pytest.mark.asyncio
    async def test_long_password_round_trips(self, mock_db_session):
        password = "x" * 100
        self._row(mock_db_session, (9, self.service.hash_password(password)))

        assert await self.service.authenticate(mock_db_session, "a@b.com", password) == 9


class TestUserServiceExists:
    def setup_method(self):
        self.service = UserService(bcrypt_cost=4)

    @pytest.mark.asyncio
    async def test_exists(self, mock_db_session):
        mock_result = MagicMock()
        mock_result.scalar_one_or_none.return_value = 7
        mock_db_session.execute.return_value = mock_result

        assert await self.service.exists(mock_db_session, 7) is True

    @pytest.mark.asyncio
    async def test_does_not_exist(self, mock_db_session):
        mock_result = MagicMock()
        mock_result.scalar_one_or_none.return_value = None
        mock_db_session.execute.return_value = mock_result

        assert await self.service.exists(mock_db_session, 8) is False
