"""
目标服务层
"""

from typing import Optional

from jura.db.init_db import SessionFactory
from jura.errors import ValidationFailed
from jura.models.goal import GoalStatus, UserGoal
from jura.repositories.goal_repository import GoalRepository


class GoalService:

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def get(self, user_id: str) -> Optional[UserGoal]:
        """返回用户当前 active 目标，没有则返回 None"""
        with self.session_factory() as session:
            goal = GoalRepository(session).get_by_user(user_id)
        if goal is None or goal.status != GoalStatus.ACTIVE:
            return None
        return goal

    def set(self, user_id: str, objective: str) -> UserGoal:
        objective = (objective or "").strip()
        if not objective:
            raise ValidationFailed(errors=[{"field": "objective", "message": "Objective is required"}])
        with self.session_factory() as session:
            return GoalRepository(session).upsert(user_id, objective)
