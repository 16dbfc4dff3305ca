from datetime import datetime
from typing import Optional
from sqlmodel import Field, SQLModel
from app.models.base import IDModel, TimestampModel, optional_timestamp_field


class SystemSettings(IDModel, TimestampModel, SQLModel, table=True):
    __tablename__ = 'system_settings'

    feedback_system_enabled: bool = True
    beta_enabled: bool = False
    beta_end_date: Optional[datetime] = optional_timestamp_field()
    max_beta_users: int = 10
    updated_by: Optional[str] = None
