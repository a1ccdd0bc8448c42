"""
Agent 域模型 - 对话角色配置表
"""

from enum import Enum
from typing import Any, Dict

from sqlmodel import Field, Column, JSON

from .base import TimestampModel, new_id

DEFAULT_AGENT_NAME = "Career Assistant"


class AgentType(str, Enum):
    """可见性：PRIVATE 仅所有者可用，PUBLIC 所有用户可用"""
    PRIVATE = "private"
    PUBLIC = "public"


class AgentStatus(str, Enum):
    ACTIVE = "active"
    ARCHIVED = "archived"


class Agent(TimestampModel, table=True):
    """
    Agent 配置表
    configuration 结构: {system_prompt, tone, enable_threads, version}
    """
    __tablename__ = "agents"

    id: str = Field(default_factory=new_id, primary_key=True)

    user_id: str = Field(foreign_key="users.id", index=True, nullable=False)

    name: str = Field(nullable=False)

    type: AgentType = Field(default=AgentType.PRIVATE, nullable=False)

    status: AgentStatus = Field(default=AgentStatus.ACTIVE, nullable=False)

    configuration: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))

    is_default: bool = Field(default=False, nullable=False)

    @property
    def system_prompt(self) -> str:
        return (self.configuration or {}).get("system_prompt", "")

    @property
    def tone(self) -> str:
        return (self.configuration or {}).get("tone", "")

    @property
    def enable_threads(self) -> bool:
        return bool((self.configuration or {}).get("enable_threads", False))

    def is_accessible_by(self, user_id: str) -> bool:
        """PUBLIC 对所有人开放，PRIVATE 要求所有者匹配"""
        return self.type == AgentType.PUBLIC or self.user_id == user_id
