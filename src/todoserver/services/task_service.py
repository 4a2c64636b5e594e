"""Task service — owner-scoped task CRUD.

Every query carries `Task.owner_id == owner_id`. There is no lookup by id
alone anywhere in this module, so a task that belongs to another user is
exactly as invisible as one that never existed: both raise TaskNotFound.

owner_id always comes from the authenticated identity, never from the
request body.
"""

import uuid
from typing import Optional

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from todoserver.db.models import Task, utcnow
from todoserver.services.validation import check_title, raise_for

logger = structlog.get_logger()


class TaskNotFound(Exception):
    """No task with this id is owned by the caller."""


class TaskService:
    """Business logic for a single user's tasks."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Create ──────────────────────────────────────────

    async def create_task(self, owner_id: uuid.UUID, title: str) -> Task:
        """Create a new, not-yet-completed task owned by owner_id."""
        raise_for(title=check_title(title))
        task = Task(title=title.strip(), completed=False, owner_id=owner_id)
        self.db.add(task)
        await self.db.commit()
        logger.info("tasks.created", task_id=str(task.id), owner_id=str(owner_id))
        return task

    # ─── Read ────────────────────────────────────────────

    async def get_task(self, owner_id: uuid.UUID, task_id: uuid.UUID) -> Task:
        result = await self.db.execute(
            select(Task).where(Task.id == task_id, Task.owner_id == owner_id)
        )
        task = result.scalars().first()
        if not task:
            raise TaskNotFound(str(task_id))
        return task

    async def list_tasks(
        self,
        owner_id: uuid.UUID,
        completed: Optional[bool] = None,
        limit: int = 10,
        offset: int = 0,
    ) -> list[Task]:
        """List the owner's tasks, newest first, optionally by completion."""
        query = (
            select(Task)
            .where(Task.owner_id == owner_id)
            .order_by(Task.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        if completed is not None:
            query = query.where(Task.completed == completed)

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def count_tasks(
        self, owner_id: uuid.UUID, completed: Optional[bool] = None
    ) -> int:
        query = select(func.count()).select_from(Task).where(Task.owner_id == owner_id)
        if completed is not None:
            query = query.where(Task.completed == completed)
        result = await self.db.execute(query)
        return result.scalar_one()

    # ─── Update ──────────────────────────────────────────

    async def update_task(
        self,
        owner_id: uuid.UUID,
        task_id: uuid.UUID,
        title: Optional[str] = None,
        completed: Optional[bool] = None,
    ) -> Task:
        """Apply a partial update (title and/or completed)."""
        if title is not None:
            raise_for(title=check_title(title))

        task = await self.get_task(owner_id, task_id)
        if title is not None:
            task.title = title.strip()
        if completed is not None:
            task.completed = completed
        task.updated_at = utcnow()

        await self.db.commit()
        logger.info("tasks.updated", task_id=str(task_id), owner_id=str(owner_id))
        return task

    async def toggle_task(self, owner_id: uuid.UUID, task_id: uuid.UUID) -> Task:
        """Flip the completed flag."""
        task = await self.get_task(owner_id, task_id)
        task.completed = not task.completed
        task.updated_at = utcnow()
        await self.db.commit()
        return task

    # ─── Delete ──────────────────────────────────────────

    async def delete_task(self, owner_id: uuid.UUID, task_id: uuid.UUID) -> None:
        task = await self.get_task(owner_id, task_id)
        await self.db.delete(task)
        await self.db.commit()
        logger.info("tasks.deleted", task_id=str(task_id), owner_id=str(owner_id))
