"""
app/models/contact.py

Purpose: Contact table model

- Owned by the submitting user
- Several contacts may share a number
- (submitter, name) duplicates are avoided at import time
"""

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base


class Contact(Base):
    __tablename__ = "contacts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    submitter_number: Mapped[str] = mapped_column(
        String,
        ForeignKey("users.number", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    contact_name: Mapped[str] = mapped_column(String, nullable=False)
    contact_user_number: Mapped[str] = mapped_column(String, nullable=False)

    def __repr__(self):
        return f"<Contact {self.id} {self.contact_name!r} {self.contact_user_number}>"
