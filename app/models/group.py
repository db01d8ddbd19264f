"""
app/models/group.py

Purpose: Group and GroupMember table models

- Groups are auto-named per creator (group0, group1, ...)
- Members are plain phone numbers, not contact references
- Member rows are removed with their group by the database
"""

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base


class Group(Base):
    __tablename__ = "groups"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    creator_number: Mapped[str] = mapped_column(
        String,
        ForeignKey("users.number", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String, nullable=False)

    def __repr__(self):
        return f"<Group {self.id} {self.name!r}>"


class GroupMember(Base):
    __tablename__ = "group_members"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    group_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("groups.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    member_number: Mapped[str] = mapped_column(String, nullable=False)
