"""Task API routes.

Every route takes the caller's identity from get_current_user and hands
identity.user_id to the service as the owner scope. Routes just translate
HTTP to service calls and domain errors to responses.

- GET for the caller's list (filter + pagination) and single fetch
- POST to create, PUT for partial updates, PATCH .../toggle to flip done
"""

import math
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from todoserver.api.errors import not_found, validation_error
from todoserver.auth.dependencies import CurrentIdentity, get_current_user
from todoserver.db.engine import get_db
from todoserver.schemas.auth import MessageResponse
from todoserver.schemas.task import (
    Pagination,
    TaskCreate,
    TaskEnvelope,
    TaskList,
    TaskRead,
    TaskUpdate,
)
from todoserver.services.task_service import TaskNotFound, TaskService
from todoserver.services.validation import ValidationError

router = APIRouter(prefix="/tasks")

MAX_LIMIT = 100
# Keeps (page - 1) * MAX_LIMIT well inside a 64-bit OFFSET
MAX_PAGE = 1_000_000


def _task_svc(db: AsyncSession = Depends(get_db)) -> TaskService:
    return TaskService(db)


def _envelope(task) -> TaskEnvelope:
    return TaskEnvelope(task=TaskRead.model_validate(task))


@router.get("", response_model=TaskList)
async def list_tasks(
    completed: Optional[bool] = Query(None, description="Filter by completion"),
    page: int = Query(1, ge=1, le=MAX_PAGE),
    limit: int = Query(10, ge=1, le=MAX_LIMIT),
    identity: CurrentIdentity = Depends(get_current_user),
    svc: TaskService = Depends(_task_svc),
):
    """List the caller's tasks, newest first."""
    tasks = await svc.list_tasks(
        owner_id=identity.user_id,
        completed=completed,
        limit=limit,
        offset=(page - 1) * limit,
    )
    total = await svc.count_tasks(identity.user_id, completed=completed)
    return TaskList(
        tasks=[TaskRead.model_validate(t) for t in tasks],
        pagination=Pagination(
            page=page, limit=limit, total=total, pages=math.ceil(total / limit)
        ),
    )


@router.post("", response_model=TaskEnvelope, status_code=201)
async def create_task(
    body: TaskCreate,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: TaskService = Depends(_task_svc),
):
    """Create a task owned by the caller."""
    try:
        task = await svc.create_task(identity.user_id, body.title)
    except ValidationError as e:
        raise validation_error(e)
    return _envelope(task)


@router.get("/{task_id}", response_model=TaskEnvelope)
async def get_task(
    task_id: uuid.UUID,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: TaskService = Depends(_task_svc),
):
    try:
        task = await svc.get_task(identity.user_id, task_id)
    except TaskNotFound:
        raise not_found()
    return _envelope(task)


@router.put("/{task_id}", response_model=TaskEnvelope)
async def update_task(
    task_id: uuid.UUID,
    body: TaskUpdate,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: TaskService = Depends(_task_svc),
):
    """Partially update a task (title, completed)."""
    try:
        task = await svc.update_task(
            identity.user_id,
            task_id,
            title=body.title,
            completed=body.completed,
        )
    except ValidationError as e:
        raise validation_error(e)
    except TaskNotFound:
        raise not_found()
    return _envelope(task)


@router.patch("/{task_id}/toggle", response_model=TaskEnvelope)
async def toggle_task(
    task_id: uuid.UUID,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: TaskService = Depends(_task_svc),
):
    """Flip a task between done and not done."""
    try:
        task = await svc.toggle_task(identity.user_id, task_id)
    except TaskNotFound:
        raise not_found()
    return _envelope(task)


@router.delete("/{task_id}", response_model=MessageResponse)
async def delete_task(
    task_id: uuid.UUID,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: TaskService = Depends(_task_svc),
):
    try:
        await svc.delete_task(identity.user_id, task_id)
    except TaskNotFound:
        raise not_found()
    return MessageResponse(message="Task deleted")
