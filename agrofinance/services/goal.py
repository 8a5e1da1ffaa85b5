"""
Service layer for savings goals.
"""

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from agrofinance.core.exceptions import NotFoundError
from agrofinance.core.logging import get_logger
from agrofinance.models.goal import Goal
from agrofinance.schemas.goal import GoalCreate, GoalUpdate

logger = get_logger(__name__)


class GoalService:
    """Service for managing savings goals."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_goal(self, data: GoalCreate, created_by: Optional[int] = None) -> Goal:
        goal = Goal(created_by=created_by, **data.model_dump())
        self.db.add(goal)
        await self.db.commit()
        await self.db.refresh(goal)
        logger.info("goal_created", goal_id=goal.id)
        return goal

    async def get_goal(self, goal_id: int) -> Goal:
        goal = await self.db.get(Goal, goal_id)
        if goal is None:
            raise NotFoundError("Goal")
        return goal

    async def list_goals(self) -> List[Goal]:
        result = await self.db.execute(select(Goal).order_by(Goal.created_at.desc(), Goal.id.desc()))
        return list(result.scalars().all())

    async def update_goal(self, goal_id: int, data: GoalUpdate) -> Goal:
        goal = await self.get_goal(goal_id)
        goal.apply_changes(data.model_dump(exclude_unset=True))
        await self.db.commit()
        await self.db.refresh(goal)
        return goal

    async def delete_goal(self, goal_id: int) -> None:
        goal = await self.get_goal(goal_id)
        await self.db.delete(goal)
        await self.db.commit()
        logger.info("goal_deleted", goal_id=goal_id)
