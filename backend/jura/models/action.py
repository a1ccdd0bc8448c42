"""
Agent 动作模型
需要用户确认后才执行的副作用操作，存放在动作存储中而非数据库
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from .base import new_id, utc_now


class ActionType(str, Enum):
    REWRITE = "rewrite"
    GENERATE = "generate"
    EXECUTE_TOOL = "execute_tool"


class ActionStatus(str, Enum):
    """
    状态机:
        proposed -> executing -> completed | failed
        proposed -> cancelled
    只有 proposed 状态可以迁出
    """
    PROPOSED = "proposed"
    CONFIRMED = "confirmed"
    EXECUTING = "executing"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


class AgentAction(BaseModel):
    id: str = Field(default_factory=new_id)
    conversation_id: str
    message_id: str
    type: ActionType
    label: str = ""
    preview: str = ""
    requires_confirmation: bool = True
    parameters: Dict[str, Any] = Field(default_factory=dict)
    status: ActionStatus = ActionStatus.PROPOSED
    result: Optional[Any] = None
    error: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    def transition(self, status: ActionStatus) -> None:
        self.status = status
        self.updated_at = utc_now()
