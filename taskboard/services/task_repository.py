"""
Task storage over an async SQLAlchemy session.

This is the only module that talks to the tasks table. It knows nothing
about ranks: it inserts, finds, counts, updates and deletes rows, and
translates driver failures into StorageError.
"""
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from sqlalchemy import select, func, delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.errors import StorageError
from taskboard.models.task import Task

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BulkWriteResult:
    """Outcome of a bulk write: rows found by id, and rows actually changed."""
    matched_count: int
    modified_count: int


class TaskRepository:
    """CRUD access to Task rows. Every write commits its own transaction."""

    def __init__(self, db: AsyncSession):
        self.db = db

    @asynccontextmanager
    async def _storage_errors(self, operation: str):
        try:
            yield
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Task storage failed to {operation}: {e}")
            raise StorageError(f"Failed to {operation}", details={"operation": operation}) from e

    async def insert(self, values: dict[str, Any]) -> Task:
        async with self._storage_errors("insert task"):
            task = Task(**values)
            self.db.add(task)
            await self.db.commit()
            await self.db.refresh(task)
        return task

    async def find_one(self, task_id: str) -> Optional[Task]:
        async with self._storage_errors("find task"):
            result = await self.db.execute(select(Task).where(Task.id == task_id))
            return result.scalar_one_or_none()

    async def find_many(self, *criteria, order_by: Sequence = ()) -> list[Task]:
        async with self._storage_errors("find tasks"):
            query = select(Task).where(*criteria).order_by(*order_by)
            result = await self.db.execute(query)
            return list(result.scalars().all())

    async def count(self, *criteria) -> int:
        async with self._storage_errors("count tasks"):
            result = await self.db.execute(
                select(func.count()).select_from(Task).where(*criteria)
            )
            return result.scalar_one()

    async def find_scopes(self) -> list[tuple[str, str]]:
        """Distinct (owner_email, category) pairs that hold at least one task."""
        async with self._storage_errors("list task scopes"):
            result = await self.db.execute(
                select(Task.owner_email, Task.category)
                .distinct()
                .order_by(Task.owner_email, Task.category)
            )
            return [(row.owner_email, row.category) for row in result.all()]

    async def update_one(self, task_id: str, values: dict[str, Any]) -> Optional[Task]:
        """Set exactly the given fields and return the updated row, or None if absent."""
        async with self._storage_errors("update task"):
            result = await self.db.execute(select(Task).where(Task.id == task_id))
            task = result.scalar_one_or_none()
            if task is None:
                return None

            for field, value in values.items():
                setattr(task, field, value)

            await self.db.commit()
            await self.db.refresh(task)
        return task

    async def delete_one(self, task_id: str) -> int:
        async with self._storage_errors("delete task"):
            result = await self.db.execute(delete(Task).where(Task.id == task_id))
            await self.db.commit()
        return result.rowcount

    async def bulk_write(self, updates: Sequence[dict[str, Any]]) -> BulkWriteResult:
        """
        Apply `{"id", "order", "category"}` updates in a single transaction.

        Ids with no row are skipped and only reduce matched_count. A failure
        rolls the whole batch back.
        """
        ids = {update["id"] for update in updates}

        async with self._storage_errors("bulk update tasks"):
            result = await self.db.execute(select(Task).where(Task.id.in_(ids)))
            existing = {task.id: task for task in result.scalars().all()}

            matched = 0
            modified = 0
            for update in updates:
                task = existing.get(update["id"])
                if task is None:
                    continue
                matched += 1

                changed = False
                for field in ("order", "category"):
                    if getattr(task, field) != update[field]:
                        setattr(task, field, update[field])
                        changed = True
                if changed:
                    modified += 1

            await self.db.commit()

        return BulkWriteResult(matched_count=matched, modified_count=modified)
