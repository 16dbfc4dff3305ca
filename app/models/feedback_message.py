from sqlalchemy import Column, Index, Text
from sqlmodel import Field, SQLModel
from app.models.base import IDModel, TimestampModel
from app.models.enums import AuthorType, enum_column


class FeedbackMessage(IDModel, TimestampModel, SQLModel, table=True):
    __tablename__ = 'feedback_messages'
    __table_args__ = (
        Index('ix_feedback_messages_thread_author_created', 'feedback_id', 'author_type', 'created_at'),
    )

    feedback_id: str = Field(index=True)
    author_id: str = Field(index=True)
    author_type: AuthorType = Field(sa_column=enum_column(AuthorType, 'author_type'))
    message: str = Field(sa_column=Column(Text, nullable=False))
