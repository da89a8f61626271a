"""
Pydantic schemas for user requests and responses.
"""
from datetime import datetime
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, Field


class UserCreate(BaseModel):
    """Profile payload sent on login. Unknown fields are kept in `extra`."""
    name: Optional[str] = Field(None, max_length=255)
    photo_url: Optional[str] = Field(
        None, max_length=1000, validation_alias=AliasChoices("photo_url", "photoURL", "photo")
    )

    class Config:
        extra = "allow"
        json_schema_extra = {
            "example": {
                "name": "Sam Doe",
                "photo_url": "https://example.com/sam.png",
            }
        }

    def payload_extra(self) -> Optional[dict[str, Any]]:
        extra = {
            key: value for key, value in (self.model_extra or {}).items()
            if key not in {"email", "timestamp", "_id", "id"}
        }
        return extra or None


class UserResponse(BaseModel):
    id: int
    email: str
    name: Optional[str]
    photo_url: Optional[str]
    extra: Optional[dict[str, Any]]
    timestamp: datetime

    class Config:
        from_attributes = True
