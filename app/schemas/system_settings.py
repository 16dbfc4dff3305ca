from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class SystemSettingsUpdate(BaseModel):
    feedback_system_enabled: Optional[bool] = None
    beta_enabled: Optional[bool] = None
    beta_end_date: Optional[datetime] = None
    max_beta_users: Optional[int] = Field(default=None, ge=0)


class SystemSettingsOut(BaseModel):
    id: str
    feedback_system_enabled: bool
    beta_enabled: bool
    beta_end_date: Optional[datetime] = None
    max_beta_users: int
    updated_by: Optional[str] = None
    updated_at: datetime
