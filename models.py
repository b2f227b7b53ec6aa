from datetime import datetime
from typing import Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class TodoCreate(BaseModel):
    title: str = Field(description="Required, must not be blank")
    description: Optional[str] = Field(
        default=None,
        description="Omitted means never set (null); an empty string means cleared",
    )


class TodoUpdate(BaseModel):
    """Partial update: only fields present in the request body are applied."""

    title: Optional[str] = None
    description: Optional[str] = None
    completed: Optional[bool] = None


class Todo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: Optional[str] = None
    completed: bool = False
    created_at: datetime
    updated_at: datetime


class SummarizeRequest(BaseModel):
    webhook_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("webhookUrl", "slackWebhookUrl", "webhook_url"),
    )


class SummarizeResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    todo_count: int = Field(alias="todoCount")
    status: Literal["success"] = "success"


class ErrorResponse(BaseModel):
    error: str
    code: str
