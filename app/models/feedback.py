from datetime import datetime
from typing import Optional
from sqlalchemy import Column, Text
from sqlmodel import Field, SQLModel
from app.models.base import IDModel, TimestampModel, optional_timestamp_field
from app.models.enums import (
    FeedbackPriority,
    FeedbackSeverity,
    FeedbackStatus,
    FeedbackType,
    enum_column,
)


class Feedback(IDModel, TimestampModel, SQLModel, table=True):
    """A feedback case: one thread between its owner and the admin party.

    ``last_user_read_at`` and ``last_admin_read_at`` are the two watermarks.
    They only move when the respective party opens the thread, never when a
    message is posted.
    """

    __tablename__ = 'feedbacks'

    # None for anonymous feedback
    user_id: Optional[str] = Field(default=None, index=True)
    type: FeedbackType = Field(sa_column=enum_column(FeedbackType, 'feedback_type'))
    severity: FeedbackSeverity = Field(sa_column=enum_column(FeedbackSeverity, 'feedback_severity'))
    title: str
    message: str = Field(sa_column=Column(Text, nullable=False))
    status: FeedbackStatus = Field(
        default=FeedbackStatus.NEW,
        sa_column=enum_column(FeedbackStatus, 'feedback_status'),
    )
    priority: Optional[FeedbackPriority] = Field(
        default=None,
        sa_column=enum_column(FeedbackPriority, 'feedback_priority', nullable=True),
    )
    admin_note: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    linked_issue: Optional[str] = None
    screenshot: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    is_anonymous: bool = False

    page_url: str = ''
    page_title: Optional[str] = None
    user_agent: Optional[str] = None
    screen_size: Optional[str] = None
    device_type: Optional[str] = None

    viewed_at: Optional[datetime] = optional_timestamp_field(index=True)
    last_user_read_at: Optional[datetime] = optional_timestamp_field()
    last_admin_read_at: Optional[datetime] = optional_timestamp_field()
    resolved_at: Optional[datetime] = optional_timestamp_field()
