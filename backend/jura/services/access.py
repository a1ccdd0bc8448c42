"""
访问控制辅助函数
每个用例在读写用户数据前按相同规则校验归属
"""

from sqlmodel import Session

from jura.errors import Forbidden, NotFound
from jura.models.agent import Agent
from jura.models.conversation import Conversation
from jura.repositories.agent_repository import AgentRepository
from jura.repositories.conversation_repository import ConversationRepository


def load_accessible_agent(session: Session, agent_id: str, user_id: str) -> Agent:
    """
    Raises:
        NotFound: Agent 不存在
        Forbidden: PRIVATE Agent 且调用者不是所有者
    """
    agent = AgentRepository(session).get_by_id(agent_id)
    if agent is None:
        raise NotFound("Agent not found")
    if not agent.is_accessible_by(user_id):
        raise Forbidden("Unauthorized access to private agent")
    return agent


def load_owned_conversation(session: Session, conversation_id: str, user_id: str) -> Conversation:
    """
    Raises:
        NotFound: 会话不存在
        Forbidden: 会话不属于调用者
    """
    conversation = ConversationRepository(session).get_conversation(conversation_id)
    if conversation is None:
        raise NotFound("Conversation not found")
    if conversation.user_id != user_id:
        raise Forbidden("Unauthorized access to conversation")
    return conversation
