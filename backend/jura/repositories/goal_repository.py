"""
用户目标 Repository
"""

from typing import Optional

from sqlmodel import Session, select

from jura.models.base import utc_now
from jura.models.goal import GoalStatus, UserGoal


class GoalRepository:

    def __init__(self, session: Session):
        self.session = session

    def get_by_user(self, user_id: str) -> Optional[UserGoal]:
        statement = select(UserGoal).where(UserGoal.user_id == user_id)
        return self.session.exec(statement).first()

    def upsert(self, user_id: str, objective: str) -> UserGoal:
        """
        设置用户当前目标（不存在则创建），并重置为 active

        Args:
            user_id: 用户 ID
            objective: 目标描述

        Returns:
            UserGoal 对象
        """
        goal = self.get_by_user(user_id)
        if goal:
            goal.objective = objective
            goal.status = GoalStatus.ACTIVE
            goal.started_at = utc_now()
        else:
            goal = UserGoal(user_id=user_id, objective=objective)
        self.session.add(goal)
        self.session.commit()
        self.session.refresh(goal)
        return goal
