"""
数据模型模块
导出所有表模型、枚举类型和非表结构
"""

# 用户域模型
from .user import User
from .profile import Profile
from .goal import UserGoal, GoalStatus

# 文档域模型
from .document import Document, DocumentCategory, ProcessingStatus
from .chunk import DocumentChunk

# 对话域模型
from .agent import Agent, AgentType, AgentStatus, DEFAULT_AGENT_NAME
from .conversation import Conversation, DEFAULT_CONTEXT_POLICY, DEFAULT_CONVERSATION_TITLE
from .message import ChatMessage, MessageRole, MessageStatus
from .action import AgentAction, ActionType, ActionStatus

# 基础模型
from .base import TimestampModel, new_id

__all__ = [
    # 用户域
    "User",
    "Profile",
    "UserGoal", "GoalStatus",
    # 文档域
    "Document", "DocumentCategory", "ProcessingStatus",
    "DocumentChunk",
    # 对话域
    "Agent", "AgentType", "AgentStatus", "DEFAULT_AGENT_NAME",
    "Conversation", "DEFAULT_CONTEXT_POLICY", "DEFAULT_CONVERSATION_TITLE",
    "ChatMessage", "MessageRole", "MessageStatus",
    "AgentAction", "ActionType", "ActionStatus",
    # 基础模型
    "TimestampModel", "new_id",
]
