"""
会话服务层
会话的创建、列表、历史读取和清空
"""

import logging
from typing import List, Optional

from jura.db.init_db import SessionFactory
from jura.errors import Forbidden, ValidationFailed
from jura.models.conversation import Conversation
from jura.models.message import ChatMessage
from jura.repositories.conversation_repository import ConversationRepository
from jura.services.access import load_accessible_agent, load_owned_conversation

logger = logging.getLogger(__name__)


class ConversationService:

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def create(self, user_id: str, agent_id: str, title: Optional[str] = None) -> Conversation:
        """
        为用户和 Agent 创建会话

        Raises:
            NotFound: Agent 不存在
            Forbidden: 无权访问 Agent，或 Agent 未开启多会话
        """
        with self.session_factory() as session:
            agent = load_accessible_agent(session, agent_id, user_id)
            if not agent.enable_threads:
                raise Forbidden("Conversations are disabled for this agent")
            conversation = ConversationRepository(session).create_conversation(user_id, agent_id, title=title)
        logger.info("[ConversationService] created conversation=%s agent=%s user=%s", conversation.id, agent_id, user_id)
        return conversation

    def list(self, user_id: str, agent_id: str) -> List[Conversation]:
        with self.session_factory() as session:
            load_accessible_agent(session, agent_id, user_id)
            return ConversationRepository(session).list_conversations(user_id, agent_id)

    def history(self, user_id: str, conversation_id: str, agent_id: Optional[str] = None) -> List[ChatMessage]:
        """
        读取会话消息（按时间正序）

        Args:
            agent_id: 指定时同时校验会话属于该 Agent
        """
        with self.session_factory() as session:
            conversation = load_owned_conversation(session, conversation_id, user_id)
            if agent_id is not None and conversation.agent_id != agent_id:
                raise Forbidden("Conversation does not belong to this agent")
            return ConversationRepository(session).get_messages(conversation_id)

    def clear(self, user_id: str, conversation_id: str) -> int:
        """
        删除会话中的全部消息

        Returns:
            删除的消息数量
        """
        if not conversation_id:
            raise ValidationFailed("Conversation ID is required")
        with self.session_factory() as session:
            load_owned_conversation(session, conversation_id, user_id)
            deleted = ConversationRepository(session).delete_messages(conversation_id)
        logger.info("[ConversationService] cleared %d messages from conversation=%s", deleted, conversation_id)
        return deleted
