"""
Pydantic schemas for task requests and responses.
"""
from datetime import datetime
from typing import Any, List, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator, model_validator

# Fields the client may send but the server always owns
RESERVED_TASK_FIELDS = {"_id", "id", "order", "timestamp", "updated_at", "owner_email", "ownerEmail"}


class TaskCreate(BaseModel):
    """Request schema for creating a task.

    Unknown fields are accepted and kept in the task's `extra` payload.
    `category` and `owner_email` are optional here so the store can report
    their absence as a domain validation error.
    """
    owner_email: Optional[str] = Field(
        None, validation_alias=AliasChoices("owner_email", "ownerEmail")
    )
    category: Optional[str] = None
    title: Optional[str] = Field(None, max_length=500)
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    extra: Optional[dict[str, Any]] = None

    class Config:
        extra = "allow"
        json_schema_extra = {
            "example": {
                "owner_email": "sam@example.com",
                "category": "todo",
                "title": "Write release notes",
                "description": "Summarize the changes since the last tag",
            }
        }

    @model_validator(mode="before")
    @classmethod
    def owner_from_user_data(cls, data: Any) -> Any:
        """Accept the owner embedded as `userData.email`."""
        if isinstance(data, dict) and not (data.get("owner_email") or data.get("ownerEmail")):
            user_data = data.get("userData")
            if isinstance(user_data, dict) and user_data.get("email"):
                data = {**data, "owner_email": user_data["email"]}
        return data

    def payload_extra(self) -> Optional[dict[str, Any]]:
        """Opaque fields to persist: explicit `extra` merged with unknown fields."""
        merged = dict(self.extra or {})
        for key, value in (self.model_extra or {}).items():
            if key not in RESERVED_TASK_FIELDS:
                merged[key] = value
        return merged or None


class TaskPatch(BaseModel):
    """Partial update of a task. `id` and `owner_email` are immutable and never patched."""
    title: Optional[str] = Field(None, max_length=500)
    description: Optional[str] = None
    category: Optional[str] = None
    order: Optional[int] = Field(None, ge=0)
    due_date: Optional[datetime] = None
    extra: Optional[dict[str, Any]] = None

    class Config:
        extra = "ignore"
        json_schema_extra = {
            "example": {
                "category": "done",
                "order": 0,
            }
        }

    @field_validator("category", "order")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("may be omitted but not set to null")
        return value

    @field_validator("category")
    @classmethod
    def category_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("category must not be blank")
        return value


class ReorderItem(BaseModel):
    """Desired rank and category for one task."""
    id: Any = Field(..., validation_alias=AliasChoices("_id", "id"))
    order: Any
    category: Any


class ReorderRequest(BaseModel):
    """Complete desired state for the tasks of one or more rearranged categories."""
    tasks: Optional[List[ReorderItem]] = None

    class Config:
        json_schema_extra = {
            "example": {
                "tasks": [
                    {"_id": "0b6f8f7e-1a52-4a43-9d0e-3f1b2a7c9e10", "order": 0, "category": "todo"},
                    {"_id": "5c2d1e4f-7a8b-4c9d-8e0f-1a2b3c4d5e6f", "order": 1, "category": "todo"},
                ]
            }
        }


class TaskResponse(BaseModel):
    """Response schema for task data."""
    id: str
    owner_email: str
    category: str
    order: int
    title: Optional[str]
    description: Optional[str]
    due_date: Optional[datetime]
    extra: Optional[dict[str, Any]]
    timestamp: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ReorderResponse(BaseModel):
    message: str
    matched_count: int
    modified_count: int


class MessageResponse(BaseModel):
    message: str
