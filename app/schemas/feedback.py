from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator
from app.core.config import settings
from app.models.enums import (
    AuthorType,
    FeedbackPriority,
    FeedbackSeverity,
    FeedbackStatus,
    FeedbackType,
)


def _require_text(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError('must not be blank')
    return value


class FeedbackCreate(BaseModel):
    type: FeedbackType
    severity: FeedbackSeverity
    title: str = Field(..., max_length=200)
    message: str
    screenshot: Optional[str] = None
    is_anonymous: bool = False
    page_url: Optional[str] = None
    page_title: Optional[str] = None
    user_agent: Optional[str] = None
    screen_size: Optional[str] = None
    device_type: Optional[str] = None

    @field_validator('title', 'message')
    @classmethod
    def not_blank(cls, value: str) -> str:
        return _require_text(value)


class FeedbackUpdate(BaseModel):
    status: Optional[FeedbackStatus] = None
    priority: Optional[FeedbackPriority] = None
    admin_note: Optional[str] = None
    linked_issue: Optional[str] = None


class FeedbackMessageCreate(BaseModel):
    message: str

    @field_validator('message')
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = _require_text(value)
        if len(value) > settings.FEEDBACK_MESSAGE_MAX_LEN:
            raise ValueError('message is too long')
        return value


class FeedbackMessageOut(BaseModel):
    id: str
    feedback_id: str
    author_id: str
    author_type: AuthorType
    message: str
    created_at: datetime


class FeedbackOut(BaseModel):
    id: str
    user_id: Optional[str] = None
    type: FeedbackType
    severity: FeedbackSeverity
    title: str
    message: str
    status: FeedbackStatus
    priority: Optional[FeedbackPriority] = None
    admin_note: Optional[str] = None
    linked_issue: Optional[str] = None
    screenshot: Optional[str] = None
    is_anonymous: bool
    page_url: str
    page_title: Optional[str] = None
    device_type: Optional[str] = None
    viewed_at: Optional[datetime] = None
    last_user_read_at: Optional[datetime] = None
    last_admin_read_at: Optional[datetime] = None
    resolved_at: Optional[datetime] = None
    created_at: datetime
    message_count: int = 0


class FeedbackDetailOut(FeedbackOut):
    messages: list[FeedbackMessageOut] = []
