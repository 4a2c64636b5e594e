"""Pydantic schemas for tasks.

- TaskCreate: what you POST to create a task
- TaskUpdate: what you PUT to modify a task (all optional)
- TaskRead: what the API returns; camelCase keys on the wire
- TaskList: one page of tasks plus pagination totals

owner_id appears only on TaskRead. No request schema accepts it.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class TaskCreate(BaseModel):
    title: Optional[str] = None


class TaskUpdate(BaseModel):
    """Partial update — only non-None fields are applied."""
    title: Optional[str] = None
    completed: Optional[bool] = None


class TaskRead(BaseModel):
    id: uuid.UUID
    title: str
    completed: bool
    owner_id: uuid.UUID
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(
        from_attributes=True, alias_generator=to_camel, populate_by_name=True
    )


class TaskEnvelope(BaseModel):
    task: TaskRead


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class TaskList(BaseModel):
    tasks: list[TaskRead]
    pagination: Pagination
