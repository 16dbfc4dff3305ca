from pydantic import BaseModel, Field


class CountOut(BaseModel):
    count: int = Field(..., ge=0)


class UnreadSummaryOut(BaseModel):
    notifications: int = Field(..., ge=0)
    feedback_threads: int = Field(..., ge=0)
