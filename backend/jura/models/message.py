"""
会话域模型 - 消息流水表
"""

from enum import Enum
from typing import Any, Dict, Optional

from sqlmodel import Field, Column, JSON

from .base import TimestampModel, new_id


class MessageRole(str, Enum):
    """消息角色枚举"""
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class MessageStatus(str, Enum):
    """消息状态，只允许从 streaming 迁移到其它状态"""
    STREAMING = "streaming"
    COMPLETE = "complete"
    FAILED = "failed"
    INTERRUPTED = "interrupted"


class ChatMessage(TimestampModel, table=True):
    """
    消息流水表
    只追加，除状态迁移外不修改
    """
    __tablename__ = "chat_messages"

    id: str = Field(default_factory=new_id, primary_key=True)

    # 索引优化：按会话加载历史消息
    conversation_id: str = Field(foreign_key="conversations.id", index=True, nullable=False)

    role: MessageRole = Field(nullable=False)

    content: str = Field(default="", nullable=False)

    status: MessageStatus = Field(default=MessageStatus.COMPLETE, nullable=False)

    # 例如 {"latency_ms": 1234}
    message_metadata: Optional[Dict[str, Any]] = Field(
        default=None,
        sa_column=Column(JSON)
    )
