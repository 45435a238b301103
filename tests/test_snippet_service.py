"""
Snippetbox — Snippet Service Unit Tests
========================================

What:  Tests for SnippetService persistence logic (insert, get, latest).
How:   Uses mock DB sessions (no real DB).

What we test:
    ✅ Insert computes the expiry and returns the new id
    ✅ Missing or expired snippet raises NotFoundError
    ✅ SQLAlchemy failures become DatabaseError
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from snippetbox.exceptions import DatabaseError, NotFoundError
from snippetbox.services.snippet_service import SnippetService


class TestSnippetServiceInsert:
    def setup_method(self):
        self.service = SnippetService()

    @pytest.mark.asyncio
    async def test_insert_returns_new_id(self, mock_db_session):
        added = []
        mock_db_session.add = MagicMock(side_effect=added.append)

        async def assign_id():
            added[0].id = 42

        mock_db_session.flush = AsyncMock(side_effect=assign_id)

        snippet_id = await self.service.insert(mock_db_session, "A", "B", 7)

        assert snippet_id == 42
        mock_db_session.commit.assert_awaited_once()

        snippet = added[0]
        assert snippet.title == "A"
        assert snippet.content == "B"
        assert snippet.expires - snippet.created == timedelta(days=7)

    @pytest.mark.asyncio
    async def test_insert_failure_raises_database_error(self, mock_db_session):
        mock_db_session.flush = AsyncMock(
            side_effect=OperationalError("INSERT", {}, Exception("connection lost"))
        )

        with pytest.raises(DatabaseError):
            await self.service.insert(mock_db_session, "A", "B", 1)

        mock_db_session.commit.assert_not_awaited()


class TestSnippetServiceGet:
    def setup_method(self):
        self.service = SnippetService()

    @pytest.mark.asyncio
    async def test_get_found(self, mock_db_session, sample_snippet):
        mock_result = MagicMock()
        mock_result.scalar_one_or_none.return_value = sample_snippet
        mock_db_session.execute.return_value = mock_result

        result = await self.service.get(mock_db_session, 5)

        assert result is sample_snippet

    @pytest.mark.asyncio
    async def test_get_missing_raises_not_found(self, mock_db_session):
        """No row, whether absent or expired, is a NotFoundError."""
        mock_result = MagicMock()
        mock_result.scalar_one_or_none.return_value = None
        mock_db_session.execute.return_value = mock_result

        with pytest.raises(NotFoundError):
            await self.service.get(mock_db_session, 999)

    @pytest.mark.asyncio
    async def test_get_query_filters_expired(self, mock_db_session, sample_snippet):
        mock_result = MagicMock()
        mock_result.scalar_one_or_none.return_value = sample_snippet
        mock_db_session.execute.return_value = mock_result

        await self.service.get(mock_db_session, 5)

        statement = mock_db_session.execute.await_args.args[0]
        assert "snippets.expires >" in str(statement)

    @pytest.mark.asyncio
    async def test_get_failure_raises_database_error(self, mock_db_session):
        mock_db_session.execute = AsyncMock(
            side_effect=OperationalError("SELECT", {}, Exception("timeout"))
        )

        with pytest.raises(DatabaseError) as exc_info:
            await self.service.get(mock_db_session, 1)

        assert exc_info.value.context["snippet_id"] == 1


class TestSnippetServiceLatest:
    def setup_method(self):
        self.service = SnippetService()

    @pytest.mark.asyncio
    async def test_latest_empty(self, mock_db_session):
        mock_result = MagicMock()
        mock_result.scalars.return_value.all.return_value = []
        mock_db_session.execute.return_value = mock_result

        assert await self.service.latest(mock_db_session) == []

    @pytest.mark.asyncio
    async def test_latest_returns_rows(self, mock_db_session, sample_snippet):
        mock_result = MagicMock()
        mock_result.scalars.return_value.all.return_value = [sample_snippet]
        mock_db_session.execute.return_value = mock_result

        result = await self.service.latest(mock_db_session)

        assert result == [sample_snippet]
        statement = mock_db_session.execute.await_args.args[0]
        sql = str(statement)
        assert "ORDER BY snippets.id DESC" in sql
        assert "LIMIT" in sql
