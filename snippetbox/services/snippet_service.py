"""
Snippetbox — Snippet Service
=============================

What:  Persistence operations for snippets: insert, fetch one, list latest.
Who:   Called by the snippet route handlers through the Application context.

Design Decision:
    SnippetService is stateless: it receives the request's AsyncSession for
    each call. Expiry is enforced here, on every read, so no handler can show
    an expired snippet by accident.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from snippetbox.exceptions import DatabaseError, NotFoundError
from snippetbox.models.snippet import Snippet

logger = logging.getLogger(__name__)


class SnippetService:
    """
    Business logic layer for snippet operations.

    Error Handling Strategy:
        A missing or expired snippet is NotFoundError (→ 404). Any SQLAlchemy
        failure is wrapped in DatabaseError (→ 500) with the driver error kept
        in the context for the log.
    """

    LATEST_LIMIT = 10

    async def insert(
        self, db: AsyncSession, title: str, content: str, expires: int
    ) -> int:
        """
        Store a new snippet that expires `expires` days from now.

        Returns:
            The id of the new snippet.

        Raises:
            DatabaseError: the insert failed.
        """
        now = datetime.now(timezone.utc)
        snippet = Snippet(
            title=title,
            content=content,
            created=now,
            expires=now + timedelta(days=expires),
        )
        try:
            db.add(snippet)
            await db.flush()  # Assigns the id
            await db.commit()
        except SQLAlchemyError as e:
            logger.error("Database error inserting snippet: %s", str(e))
            raise DatabaseError(
                message="Could not save the snippet.",
                context={"error_type": type(e).__name__, "error": str(e)},
            ) from e

        logger.info("Snippet %s created (expires in %d days)", snippet.id, expires)
        return snippet.id

    async def get(self, db: AsyncSession, snippet_id: int) -> Snippet:
        """
        Fetch one unexpired snippet.

        Raises:
            NotFoundError: no snippet with this id, or it has expired.
            DatabaseError: the query failed.
        """
        try:
            result = await db.execute(
                select(Snippet).where(
                    Snippet.id == snippet_id,
                    Snippet.expires > datetime.now(timezone.utc),
                )
            )
            snippet = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching snippet %s: %s", snippet_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the snippet.",
                context={"snippet_id": snippet_id, "error_type": type(e).__name__},
            ) from e

        if snippet is None:
            raise NotFoundError(resource="snippet", resource_id=str(snippet_id))
        return snippet

    async def latest(self, db: AsyncSession, limit: int = LATEST_LIMIT) -> List[Snippet]:
        """
        The most recently created unexpired snippets, newest first.

        Raises:
            DatabaseError: the query failed.
        """
        try:
            result = await db.execute(
                select(Snippet)
                .where(Snippet.expires > datetime.now(timezone.utc))
                .order_by(Snippet.id.desc())
                .limit(limit)
            )
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing snippets: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve snippets.",
                context={"error_type": type(e).__name__},
            ) from e
