"""
Snippetbox — Snippet SQLAlchemy Model
======================================

What:  ORM model representing the `snippets` table.
Who:   Used by SnippetService for inserts and reads, and by Alembic.

Table Design Rationale:
    - Integer primary key: snippet URLs are /snippet/view/<id>, short and readable
    - title VARCHAR(100): matches the form rule, enforced again by the database
    - expires: computed at insert time (created + N days); reads filter on it,
      so an expired row simply stops being visible

    Index on created DESC:
        The home page lists the latest snippets; without it every page load
        sorts the whole table.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from snippetbox.database import Base


class Snippet(Base):
    """
    A short piece of text with a fixed lifetime.

    Lifecycle:
        1. Created by the create-snippet form with an expiry of 1, 7 or 365 days
        2. Never updated
        3. Hidden from every read once `expires` has passed
    """

    __tablename__ = "snippets"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    title: Mapped[str] = mapped_column(String(100), nullable=False)

    content: Mapped[str] = mapped_column(Text, nullable=False)

    # Timestamps are stored in UTC; templates format them for display
    created: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    expires: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        Index("idx_snippets_created", created.desc()),
    )

    def __repr__(self) -> str:
        return f"<Snippet(id={self.id}, title='{self.title}', expires='{self.expires}')>"
