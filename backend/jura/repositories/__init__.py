"""
Repository (DAO) 模块
提供数据库操作的抽象层，封装 CRUD 逻辑
"""

from .user_repository import UserRepository
from .profile_repository import ProfileRepository
from .document_repository import DocumentRepository
from .agent_repository import AgentRepository
from .conversation_repository import ConversationRepository
from .goal_repository import GoalRepository

__all__ = [
    "UserRepository",
    "ProfileRepository",
    "DocumentRepository",
    "AgentRepository",
    "ConversationRepository",
    "GoalRepository",
]
