from typing import Optional
from sqlmodel import Field, SQLModel
from app.models.base import IDModel, TimestampModel


class Notification(IDModel, TimestampModel, SQLModel, table=True):
    __tablename__ = 'notifications'

    user_id: str = Field(index=True)
    type: str
    title: str
    message: str
    link: Optional[str] = None
    read: bool = Field(default=False, index=True)
