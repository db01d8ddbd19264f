"""
app/models/pending_action.py

Purpose: Pending action tables

- One pending action per submitter, keyed by phone number
- Candidate rows for each action kind hang off the pending action
  and are cascaded away with it
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base
from utils.time_utils import utcnow


class PendingAction(Base):
    __tablename__ = "pending_actions"

    submitter_number: Mapped[str] = mapped_column(
        String,
        ForeignKey("users.number", ondelete="CASCADE"),
        primary_key=True,
    )
    action_type: Mapped[str] = mapped_column(String, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow, index=True)

    def __repr__(self):
        return f"<PendingAction {self.submitter_number} {self.action_type}>"


class PendingDeletion(Base):
    __tablename__ = "pending_deletions"
    __table_args__ = (
        CheckConstraint(
            "(group_id IS NULL) <> (contact_id IS NULL)",
            name="pending_deletion_one_target",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    pending_action_submitter: Mapped[str] = mapped_column(
        String,
        ForeignKey("pending_actions.submitter_number", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    group_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("groups.id", ondelete="CASCADE"),
        nullable=True,
    )
    contact_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("contacts.id", ondelete="CASCADE"),
        nullable=True,
    )


class PendingGroupMember(Base):
    __tablename__ = "pending_group_members"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    pending_action_submitter: Mapped[str] = mapped_column(
        String,
        ForeignKey("pending_actions.submitter_number", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    contact_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("contacts.id", ondelete="CASCADE"),
        nullable=False,
    )


class DeferredContact(Base):
    __tablename__ = "deferred_contacts"

    # id preserves insertion order, which the option letters depend on
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    submitter_number: Mapped[str] = mapped_column(
        String,
        ForeignKey("pending_actions.submitter_number", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    contact_name: Mapped[str] = mapped_column(String, nullable=False)
    phone_number: Mapped[str] = mapped_column(String, nullable=False)
    phone_description: Mapped[Optional[str]] = mapped_column(String, nullable=True)
