"""
服务层模块
提供业务逻辑的抽象层，每个服务通过构造函数注入依赖
"""

from .profile_completeness import ProfileCompletenessService, CompletenessResult
from .retrieval_service import RetrievalService
from .document_service import DocumentService
from .profile_service import ProfileService
from .goal_service import GoalService
from .agent_service import AgentService, ChatTurnResult
from .conversation_service import ConversationService
from .chat_service import ChatService
from .action_service import ActionService
from .auth_service import AuthService

__all__ = [
    "ProfileCompletenessService", "CompletenessResult",
    "RetrievalService",
    "DocumentService",
    "ProfileService",
    "GoalService",
    "AgentService", "ChatTurnResult",
    "ConversationService",
    "ChatService",
    "ActionService",
    "AuthService",
]
