"""
会话与消息 Repository
提供 conversations 和 chat_messages 表的增删改查操作
"""

from typing import Any, Dict, List, Optional

from sqlmodel import Session, select, col

from jura.models.base import utc_now
from jura.models.conversation import (
    Conversation,
    DEFAULT_CONTEXT_POLICY,
    DEFAULT_CONVERSATION_TITLE,
)
from jura.models.message import ChatMessage, MessageRole, MessageStatus


class ConversationRepository:
    """
    会话数据访问对象
    封装所有与 conversations、chat_messages 表相关的数据库操作
    """

    def __init__(self, session: Session):
        """
        初始化 Repository

        Args:
            session: SQLModel 数据库会话
        """
        self.session = session

    # ==================== 会话操作 ====================

    def create_conversation(
        self,
        user_id: str,
        agent_id: str,
        title: Optional[str] = None,
        context_policy: Optional[Dict[str, Any]] = None
    ) -> Conversation:
        """
        创建新会话

        Args:
            user_id: 用户 ID
            agent_id: Agent ID
            title: 会话标题，默认 "New Conversation"
            context_policy: 上下文策略，默认 memory=on / max_tokens=8000 / summarization=auto

        Returns:
            创建的 Conversation 对象
        """
        conversation = Conversation(
            user_id=user_id,
            agent_id=agent_id,
            title=title or DEFAULT_CONVERSATION_TITLE,
            context_policy=dict(context_policy or DEFAULT_CONTEXT_POLICY)
        )
        self.session.add(conversation)
        self.session.commit()
        self.session.refresh(conversation)
        return conversation

    def get_conversation(self, conversation_id: str) -> Optional[Conversation]:
        return self.session.get(Conversation, conversation_id)

    def list_conversations(self, user_id: str, agent_id: str) -> List[Conversation]:
        """
        获取用户与某个 Agent 的所有会话（按更新时间倒序）

        Args:
            user_id: 用户 ID
            agent_id: Agent ID

        Returns:
            Conversation 对象列表
        """
        statement = select(Conversation).where(
            Conversation.user_id == user_id,
            Conversation.agent_id == agent_id
        ).order_by(col(Conversation.updated_at).desc())
        return list(self.session.exec(statement).all())

    def touch_conversation(self, conversation_id: str) -> None:
        """
        更新会话的 updated_at 时间戳

        每次有新消息时调用，确保会话列表按最新活动时间排序正确
        """
        conversation = self.get_conversation(conversation_id)
        if conversation:
            conversation.updated_at = utc_now()
            self.session.add(conversation)
            self.session.commit()

    # ==================== 消息操作 ====================

    def create_message(
        self,
        conversation_id: str,
        role: MessageRole,
        content: str,
        status: MessageStatus = MessageStatus.COMPLETE,
        message_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None
    ) -> ChatMessage:
        """
        创建新消息

        Args:
            conversation_id: 会话 ID
            role: 消息角色
            content: 消息文本
            status: 消息状态
            message_id: 预先生成的消息 ID（流式对话在开始时就对外暴露该 ID）
            metadata: 附加信息，例如 {"latency_ms": 1200}

        Returns:
            创建的 ChatMessage 对象
        """
        message = ChatMessage(
            conversation_id=conversation_id,
            role=role,
            content=content,
            status=status,
            message_metadata=metadata
        )
        if message_id:
            message.id = message_id
        self.session.add(message)
        self.session.commit()
        self.session.refresh(message)
        return message

    def get_message(self, message_id: str) -> Optional[ChatMessage]:
        return self.session.get(ChatMessage, message_id)

    def get_messages(self, conversation_id: str) -> List[ChatMessage]:
        """
        获取会话的所有消息（按创建时间正序）

        Args:
            conversation_id: 会话 ID

        Returns:
            ChatMessage 对象列表
        """
        statement = select(ChatMessage).where(
            ChatMessage.conversation_id == conversation_id
        ).order_by(col(ChatMessage.created_at).asc())
        return list(self.session.exec(statement).all())

    def update_message_status(self, message_id: str, status: MessageStatus) -> Optional[ChatMessage]:
        """
        迁移消息状态

        Returns:
            更新后的 ChatMessage，不存在则返回 None
        """
        message = self.get_message(message_id)
        if message:
            message.status = status
            self.session.add(message)
            self.session.commit()
            self.session.refresh(message)
        return message

    def delete_messages(self, conversation_id: str) -> int:
        """
        删除会话的所有消息

        Returns:
            删除的消息数量
        """
        messages = self.get_messages(conversation_id)
        for message in messages:
            self.session.delete(message)
        self.session.commit()
        return len(messages)
