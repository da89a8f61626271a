"""
Ordering core for the task board.

OrderedTaskStore is the only writer of `Task.order`. Ranks are dense and
zero-based within one (owner_email, category) scope:

- create_task appends: the new rank is the current size of the scope.
- reorder_batch applies a complete client-computed assignment as given.
- move_task patches fields without touching anything it was not given.
- delete_task removes a row and leaves the gap for a later reorder.
- compact_category rewrites a scope to 0..N-1 on explicit request.

The store keeps no state between calls. The count in create_task is a
read-then-write: two concurrent creates into the same scope can receive the
same rank, which compact_category repairs.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Optional, Sequence, Union

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.errors import ValidationError, NotFoundError
from taskboard.models.task import Task, normalize_task_id
from taskboard.schemas.task import TaskCreate, TaskPatch, ReorderItem
from taskboard.services.task_repository import TaskRepository, BulkWriteResult

logger = logging.getLogger(__name__)

# Display order of one owner's board
LIST_ORDER = (Task.order.asc(), Task.timestamp.asc(), Task.id.asc())


def _require_text(value: Any, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field} is required", details={"field": field})
    return value


def _validate(model, data: dict):
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(
            "Invalid task fields", details={"errors": e.errors(include_url=False, include_context=False)}
        ) from e


def _require_task_id(task_id: Any) -> str:
    try:
        return normalize_task_id(task_id)
    except ValueError as e:
        raise ValidationError("Invalid task ID", details={"id": str(task_id)}) from e


class OrderedTaskStore:
    """Rank-aware task operations on top of TaskRepository."""

    def __init__(self, db: AsyncSession, repository: Optional[TaskRepository] = None):
        self.repository = repository if repository is not None else TaskRepository(db)

    async def create_task(self, payload: Union[TaskCreate, dict]) -> Task:
        """Persist a new task at the end of its category."""
        if isinstance(payload, dict):
            payload = _validate(TaskCreate, payload)

        category = _require_text(payload.category, "category")
        owner_email = _require_text(payload.owner_email, "owner_email")

        order = await self.repository.count(
            Task.owner_email == owner_email,
            Task.category == category,
        )

        task = await self.repository.insert({
            "owner_email": owner_email,
            "category": category,
            "order": order,
            "title": payload.title,
            "description": payload.description,
            "due_date": payload.due_date,
            "extra": payload.payload_extra(),
            "timestamp": datetime.now(timezone.utc),
        })

        logger.info(f"Created task {task.id} in '{category}' for {owner_email} at order {order}")
        return task

    async def list_for_owner(self, owner_email: str, category: Optional[str] = None) -> list[Task]:
        """
        All tasks of an owner, ascending by order.

        Read-only: gaps or duplicate ranks left by earlier operations are
        returned as stored.
        """
        criteria = [Task.owner_email == owner_email]
        if category is not None:
            criteria.append(Task.category == category)

        return await self.repository.find_many(*criteria, order_by=LIST_ORDER)

    async def reorder_batch(
        self,
        updates: Optional[Sequence[Union[ReorderItem, dict, tuple]]],
    ) -> BulkWriteResult:
        """
        Set order and category for every listed task in one bulk write.

        The whole batch is validated before anything is written. The ranks are
        applied as given; callers send a dense assignment for every category
        they touched and compare matched_count with the batch size.
        """
        entries = [self._reorder_entry(item, index) for index, item in enumerate(updates or ())]
        if not entries:
            raise ValidationError("Invalid tasks array")

        result = await self.repository.bulk_write(entries)

        if result.matched_count != len(entries):
            logger.warning(
                f"Reorder matched {result.matched_count} of {len(entries)} tasks"
            )
        logger.info(
            f"Reordered {result.modified_count} tasks "
            f"({result.matched_count} matched, {len(entries)} requested)"
        )
        return result

    async def move_task(self, task_id: str, patch: Union[TaskPatch, dict]) -> Task:
        """Apply a partial update and return the full updated task."""
        task_id = _require_task_id(task_id)

        if isinstance(patch, dict):
            patch = _validate(TaskPatch, patch)

        values = patch.model_dump(exclude_unset=True)

        task = await self.repository.update_one(task_id, values)
        if task is None:
            raise NotFoundError(f"Task {task_id} not found")

        logger.info(f"Updated task {task_id}: {sorted(values)}")
        return task

    async def delete_task(self, task_id: str) -> None:
        """Remove a task. Ranks of the remaining tasks are left as they are."""
        task_id = _require_task_id(task_id)

        deleted = await self.repository.delete_one(task_id)
        if deleted == 0:
            raise NotFoundError(f"Task {task_id} not found")

        logger.info(f"Deleted task {task_id}")

    async def compact_category(self, owner_email: str, category: str) -> BulkWriteResult:
        """Rewrite one scope's ranks to 0..N-1, keeping the listed order."""
        owner_email = _require_text(owner_email, "owner_email")
        category = _require_text(category, "category")

        tasks = await self.list_for_owner(owner_email, category=category)
        if not tasks:
            return BulkWriteResult(matched_count=0, modified_count=0)

        result = await self.repository.bulk_write([
            {"id": task.id, "order": index, "category": task.category}
            for index, task in enumerate(tasks)
        ])

        if result.modified_count:
            logger.info(
                f"Compacted '{category}' for {owner_email}: "
                f"{result.modified_count} of {len(tasks)} ranks rewritten"
            )
        return result

    @staticmethod
    def _reorder_entry(item: Union[ReorderItem, dict, tuple], index: int) -> dict[str, Any]:
        if isinstance(item, ReorderItem):
            task_id, order, category = item.id, item.order, item.category
        elif isinstance(item, dict):
            task_id = item.get("_id", item.get("id"))
            order, category = item.get("order"), item.get("category")
        elif isinstance(item, (tuple, list)) and len(item) == 3:
            task_id, order, category = item
        else:
            raise ValidationError("Invalid reorder entry", details={"index": index})

        try:
            task_id = normalize_task_id(task_id)
        except ValueError as e:
            raise ValidationError(f"Invalid _id: {task_id}", details={"index": index}) from e
        # bool is an int subclass
        if not isinstance(order, int) or isinstance(order, bool) or order < 0:
            raise ValidationError(f"Invalid order: {order}", details={"index": index})
        if not isinstance(category, str) or not category.strip():
            raise ValidationError(f"Invalid category: {category}", details={"index": index})

        return {"id": task_id, "order": order, "category": category}
