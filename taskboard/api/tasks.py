"""
Task API endpoints.

Thin translation from HTTP requests to OrderedTaskStore operations. Domain
errors raised by the store are rendered by the handlers in core.errors.
"""
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.database import get_db
from taskboard.schemas.task import (
    TaskCreate,
    TaskPatch,
    ReorderRequest,
    TaskResponse,
    ReorderResponse,
    MessageResponse,
)
from taskboard.services.ordered_task_store import OrderedTaskStore

router = APIRouter(prefix="/tasks", tags=["tasks"])


async def get_task_store(db: AsyncSession = Depends(get_db)) -> OrderedTaskStore:
    return OrderedTaskStore(db)


@router.post("", response_model=TaskResponse, status_code=201)
async def create_task(
    task_data: TaskCreate,
    store: OrderedTaskStore = Depends(get_task_store)
):
    """
    Create a task at the end of its category.

    The server assigns `order` (the number of tasks the owner already has in
    that category) and `timestamp`; values sent for them are ignored.
    """
    return await store.create_task(task_data)


@router.put("/reorder-tasks", response_model=ReorderResponse)
async def reorder_tasks(
    payload: ReorderRequest,
    store: OrderedTaskStore = Depends(get_task_store)
):
    """
    Apply a complete rank/category assignment for the listed tasks.

    - `tasks` must be non-empty and every `_id` well formed, otherwise nothing is written.
    - Ranks are stored exactly as sent.
    - `matched_count` lower than the number of entries means some ids were unknown.
    """
    result = await store.reorder_batch(payload.tasks)
    return ReorderResponse(
        message="Tasks reordered successfully",
        matched_count=result.matched_count,
        modified_count=result.modified_count,
    )


@router.get("/{email}", response_model=List[TaskResponse])
async def list_tasks(
    email: str,
    store: OrderedTaskStore = Depends(get_task_store)
):
    """Get all tasks of a user, ascending by order."""
    return await store.list_for_owner(email)


@router.put("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: str,
    task_update: TaskPatch,
    store: OrderedTaskStore = Depends(get_task_store)
):
    """
    Update a task (commonly its category and order).

    Only fields provided in the request are changed. `_id` and the owner are
    immutable and ignored when sent. Returns 404 if the task does not exist.
    """
    return await store.move_task(task_id, task_update)


@router.delete("/{task_id}", response_model=MessageResponse)
async def delete_task(
    task_id: str,
    store: OrderedTaskStore = Depends(get_task_store)
):
    """
    Delete a task.

    Remaining tasks keep their ranks; the client follows up with a reorder
    (or a compact) to close the gap.
    """
    await store.delete_task(task_id)
    return MessageResponse(message="Task deleted successfully")


@router.post("/{email}/compact/{category}", response_model=ReorderResponse)
async def compact_category(
    email: str,
    category: str,
    store: OrderedTaskStore = Depends(get_task_store)
):
    """Renumber one category of a user to 0..N-1, keeping the current order."""
    result = await store.compact_category(email, category)
    return ReorderResponse(
        message="Category compacted",
        matched_count=result.matched_count,
        modified_count=result.modified_count,
    )
