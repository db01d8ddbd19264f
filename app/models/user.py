"""
app/models/user.py

Purpose: User table model

- Phone number (E.164) is the identity
- Display name chosen with the "name" command
- Deleting a user cascades to everything they own
"""

from datetime import datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base
from utils.time_utils import utcnow


class User(Base):
    __tablename__ = "users"

    number: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)

    def __repr__(self):
        return f"<User {self.number} {self.name!r}>"
