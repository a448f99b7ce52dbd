from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class TaskAssigneeSet(BaseModel):
    assignee: str


class TaskAssigneeInfo(BaseModel):
    task_id: UUID
    assignee: Optional[str] = None


class TaskAssigneeRecord(BaseModel):
    task_id: UUID
    assignee: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class HelloOut(BaseModel):
    message: str
    feature_enabled: bool
