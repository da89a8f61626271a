"""
Task model: a card on a user's board with a per-category rank.
"""
import uuid

from sqlalchemy import Column, Integer, String, Text, DateTime, JSON, Index
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func

from taskboard.core.database import Base


def new_task_id() -> str:
    return str(uuid.uuid4())


def normalize_task_id(value) -> str:
    """
    Canonical form of a task identifier.

    Any spelling of a UUID (upper case, braces, urn:uuid:, no hyphens) maps to
    the lowercase hyphenated string stored in `Task.id`. Raises ValueError
    when value is not a UUID.
    """
    if not isinstance(value, str):
        raise ValueError(f"task id must be a string, got {type(value).__name__}")
    return str(uuid.UUID(value))


class Task(Base):
    """Task owned by a user and ranked inside one of their categories."""

    __tablename__ = "tasks"
    __table_args__ = (
        Index("ix_tasks_owner_category_order", "owner_email", "category", "order"),
    )
    __mapper_args__ = {"eager_defaults": True}

    # Primary Key
    id = Column(String(36), primary_key=True, default=new_task_id)

    # Ownership (immutable after creation)
    owner_email = Column(String(255), nullable=False, index=True)

    # Ranking
    category = Column(String(255), nullable=False)
    order = Column(Integer, nullable=False, default=0)  # dense rank within (owner_email, category)

    # Opaque payload
    title = Column(String(500), nullable=True)
    description = Column(Text, nullable=True)
    due_date = Column(DateTime(timezone=True), nullable=True)
    extra = Column(JSON().with_variant(JSONB, "postgresql"), nullable=True)

    # Timestamps
    timestamp = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<Task(id={self.id}, category='{self.category}', order={self.order})>"
