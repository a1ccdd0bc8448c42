"""
目标域模型 - 用户职业目标表
"""

from datetime import datetime
from enum import Enum

from sqlmodel import Field

from .base import TimestampModel, new_id, utc_now


class GoalStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"


class UserGoal(TimestampModel, table=True):
    """每个用户一条当前目标，注入到对话的系统提示词中"""
    __tablename__ = "user_goals"

    id: str = Field(default_factory=new_id, primary_key=True)

    user_id: str = Field(foreign_key="users.id", unique=True, index=True, nullable=False)

    objective: str = Field(nullable=False)

    status: GoalStatus = Field(default=GoalStatus.ACTIVE, nullable=False)

    started_at: datetime = Field(default_factory=utc_now, nullable=False)
