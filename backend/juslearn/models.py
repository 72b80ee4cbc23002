"""SQLModel data models.

This module defines the application's database tables using SQLModel.
Table names match the historical schema (`users`, `topics`,
`assignments`) so existing database files remain readable.
"""

from typing import Optional
from sqlalchemy import Column, ForeignKey, Integer, UniqueConstraint
from sqlmodel import SQLModel, Field


class User(SQLModel, table=True):
    """A registered user.

    Fields:
    - `username`: display name
    - `email`: unique login identifier
    - `password_hash`: salted hash string (never store plaintext)
    """
    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(nullable=False)
    email: str = Field(index=True, nullable=False, unique=True)
    password_hash: str = Field(nullable=False)


class Topic(SQLModel, table=True):
    """A catalog entry. Ids are pre-assigned by the seed list."""
    __tablename__ = "topics"

    id: int = Field(sa_column=Column(Integer, primary_key=True, autoincrement=False))
    module_name: str = Field(index=True)
    topic_name: str


class Assignment(SQLModel, table=True):
    """A user's uploaded work for one topic.

    `(user_id, topic_id)` is unique: uploads replace the existing row.
    `marks` is never written by the API and stays at its default.
    """
    __tablename__ = "assignments"
    __table_args__ = (
        UniqueConstraint("user_id", "topic_id", name="uq_assignments_user_topic"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(
        sa_column=Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    )
    topic_id: int = Field(
        sa_column=Column(Integer, ForeignKey("topics.id", ondelete="CASCADE"), nullable=False)
    )
    file_path: str
    marks: int = Field(default=0)
    completed: bool = Field(default=False)
