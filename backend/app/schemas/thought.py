# backend/app/schemas/thought.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from backend.app.schemas.base import ApiSchema

MESSAGE_MAX_LENGTH = 140
CATEGORY_MAX_LENGTH = 30


class _ThoughtBody(BaseModel):
    @field_validator("message", mode="before", check_fields=False)
    @classmethod
    def strip_message(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("category", mode="before", check_fields=False)
    @classmethod
    def normalize_category(cls, v):
        # "" and whitespace mean "no category"
        if isinstance(v, str):
            return v.strip().lower() or None
        return v


class ThoughtCreate(_ThoughtBody):
    message: str = Field(..., min_length=1, max_length=MESSAGE_MAX_LENGTH)
    category: Optional[str] = Field(default=None, max_length=CATEGORY_MAX_LENGTH)


class ThoughtUpdate(_ThoughtBody):
    """
    Partial update. Only fields present in the body are applied;
    `category: null` clears the category, `message` can never be null.
    """
    message: Optional[str] = Field(default=None, min_length=1, max_length=MESSAGE_MAX_LENGTH)
    category: Optional[str] = Field(default=None, max_length=CATEGORY_MAX_LENGTH)

    @model_validator(mode="after")
    def check_has_changes(self):
        if not self.model_fields_set:
            raise ValueError("Provide at least one of: message, category")
        if "message" in self.model_fields_set and self.message is None:
            raise ValueError("message cannot be null")
        return self


class ThoughtResponse(ApiSchema):
    id: str
    message: str
    category: Optional[str] = None
    hearts: int
    # ORM column is user_id, the wire name is "user"
    user_id: Optional[str] = Field(default=None, alias="user")
    username: Optional[str] = None
    created_at: datetime


class ThoughtPage(ApiSchema):
    total: int
    page: int
    limit: int
    total_pages: int
    results: List[ThoughtResponse]


class ThoughtDeleteResponse(ApiSchema):
    success: bool = True
    message: str
    deleted: ThoughtResponse
