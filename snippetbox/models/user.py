"""
Snippetbox — User SQLAlchemy Model
===================================

What:  ORM model representing the `users` table.
Why unique email: signup relies on the database to reject a second account
    with the same address; UserService turns the IntegrityError into
    DuplicateEmailError. Checking first and inserting second would race.
"""

from datetime import datetime, timezone

from sqlalchemy import CHAR, DateTime, Integer, String, UniqueConstraint, text
from sqlalchemy.orm import Mapped, mapped_column

from snippetbox.database import Base


class User(Base):
    """A registered account. Created by signup; passwords are stored as bcrypt hashes."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    email: Mapped[str] = mapped_column(String(255), nullable=False)

    # bcrypt hashes are always 60 characters
    hashed_password: Mapped[str] = mapped_column(CHAR(60), nullable=False)

    created: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        UniqueConstraint("email", name="users_uc_email"),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"
