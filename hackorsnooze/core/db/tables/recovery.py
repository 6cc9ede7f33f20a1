from sqlalchemy import String, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from hackorsnooze.core.db.tables.base import Base
from datetime import datetime, timezone


class Recovery(Base):
    """
    Live SMS recovery code for an account.

    Security design:
    - username: primary key, so an account has at most one live code
    - code: bcrypt hash of the 6-digit code; the plaintext is only sent by SMS
    - created_at: start of the expiry window, checked when the code is redeemed
    """
    __tablename__ = "recovery"

    username: Mapped[str] = mapped_column(
        String(64), ForeignKey("users.username", ondelete="CASCADE"), primary_key=True
    )
    code: Mapped[str] = mapped_column(String(256))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc)
    )
