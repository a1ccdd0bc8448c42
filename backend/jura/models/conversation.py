"""
会话域模型 - 会话表
"""

from typing import Any, Dict, Optional

from sqlmodel import Field, Column, JSON

from .base import TimestampModel, new_id

DEFAULT_CONVERSATION_TITLE = "New Conversation"

# memory: on | off | ephemeral; summarization: auto | manual
DEFAULT_CONTEXT_POLICY: Dict[str, Any] = {
    "memory": "on",
    "max_tokens": 8000,
    "summarization": "auto",
}


class Conversation(TimestampModel, table=True):
    """
    会话表
    用户与某个 Agent 之间的一段对话容器
    """
    __tablename__ = "conversations"

    id: str = Field(default_factory=new_id, primary_key=True)

    title: Optional[str] = Field(default=DEFAULT_CONVERSATION_TITLE)

    agent_id: str = Field(foreign_key="agents.id", index=True, nullable=False)

    # 索引优化：按 (用户, Agent) 列出会话
    user_id: str = Field(foreign_key="users.id", index=True, nullable=False)

    context_policy: Dict[str, Any] = Field(
        default_factory=lambda: dict(DEFAULT_CONTEXT_POLICY),
        sa_column=Column(JSON)
    )
