from sqlalchemy import String, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime, timezone

from hackorsnooze.core.db.tables.base import Base


class User(Base):
    """
    Registered account.

    - username: immutable identifier
    - name: display name, copied into stories.author
    - password: bcrypt hash, never returned by the API
    - phone: E.164 number used for SMS recovery
    """

    __tablename__ = "users"

    username: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(256))
    password: Mapped[str] = mapped_column(String(256))
    phone: Mapped[str | None] = mapped_column(String(32), nullable=True, default=None)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc)
    )
