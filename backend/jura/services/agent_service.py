"""
Agent 服务层

Agent 的创建、查询，以及单轮工具增强对话：
1. 校验 Agent 存在且调用者有权访问
2. 如指定会话，校验 Agent 开启了多会话且调用者拥有该会话
3. 构造系统消息并回放历史
4. 执行绑定了 retrieve_context 的工具调用循环
5. 如指定会话，保存用户消息和回复
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from jura.agent.llm_factory import LLMFactory
from jura.agent.prompts import (
    DEFAULT_AGENT_SYSTEM_PROMPT,
    DEFAULT_AGENT_TONE,
    build_agent_system_prompt,
)
from jura.agent.tool_loop import ToolCallingAgent, message_text
from jura.agent.tools import create_retrieve_context_tool
from jura.db.init_db import SessionFactory
from jura.errors import Forbidden, NotFound
from jura.models.agent import Agent, AgentType, DEFAULT_AGENT_NAME
from jura.models.message import ChatMessage, MessageRole
from jura.repositories.agent_repository import AgentRepository
from jura.repositories.conversation_repository import ConversationRepository
from jura.services.access import load_accessible_agent, load_owned_conversation
from jura.services.retrieval_service import RetrievalService

logger = logging.getLogger(__name__)

AGENT_CONFIG_VERSION = 1


@dataclass
class ChatTurnResult:
    reply: str
    conversation_id: Optional[str] = None


def history_to_messages(messages: List[ChatMessage]) -> List[BaseMessage]:
    """把持久化的消息回放为 LangChain 消息，system 消息不回放"""
    history: List[BaseMessage] = []
    for message in messages:
        if message.role == MessageRole.USER:
            history.append(HumanMessage(content=message.content))
        elif message.role == MessageRole.ASSISTANT:
            history.append(AIMessage(content=message.content))
    return history


class AgentService:
    """
    Agent 服务类

    使用示例：
        service = AgentService(session_factory, llm_factory, retrieval)
        result = service.chat(user_id, agent_id, "总结一下我的简历")
        print(result.reply)
    """

    def __init__(
        self,
        session_factory: SessionFactory,
        llm_factory: LLMFactory,
        retrieval: RetrievalService,
        max_tool_rounds: int = 3
    ):
        self.session_factory = session_factory
        self.llm_factory = llm_factory
        self.retrieval = retrieval
        self.max_tool_rounds = max_tool_rounds

    # ==================== Agent 管理 ====================

    def create(
        self,
        user_id: str,
        name: str,
        agent_type: AgentType = AgentType.PRIVATE,
        instructions: str = "",
        tone: str = "",
        enable_threads: bool = False,
        is_default: bool = False
    ) -> Agent:
        """
        创建 Agent

        Args:
            user_id: 所有者 ID
            name: 名称
            agent_type: 可见性
            instructions: 系统提示词
            tone: 语气
            enable_threads: 是否允许多会话
            is_default: 是否为默认 Agent

        Returns:
            创建的 Agent
        """
        configuration = {
            "system_prompt": instructions,
            "tone": tone,
            "enable_threads": enable_threads,
            "version": AGENT_CONFIG_VERSION,
        }
        with self.session_factory() as session:
            agent = AgentRepository(session).create(
                user_id=user_id,
                name=name,
                configuration=configuration,
                agent_type=agent_type,
                is_default=is_default
            )
        logger.info("[AgentService] created agent=%s user=%s default=%s", agent.id, user_id, is_default)
        return agent

    def create_default(self, user_id: str) -> Agent:
        """注册时为用户创建默认的职业助手"""
        return self.create(
            user_id=user_id,
            name=DEFAULT_AGENT_NAME,
            agent_type=AgentType.PRIVATE,
            instructions=DEFAULT_AGENT_SYSTEM_PROMPT,
            tone=DEFAULT_AGENT_TONE,
            enable_threads=True,
            is_default=True
        )

    def get(self, user_id: str, agent_id: str) -> Agent:
        with self.session_factory() as session:
            return load_accessible_agent(session, agent_id, user_id)

    def list(self, user_id: str) -> List[Agent]:
        """用户自己的 Agent 加上所有 PUBLIC Agent"""
        with self.session_factory() as session:
            return AgentRepository(session).list_accessible(user_id)

    def get_default(self, user_id: str) -> Agent:
        """
        获取用户默认 Agent：优先 is_default，其次名为 Career Assistant 的 Agent

        Raises:
            NotFound: 两者都不存在（code=DEFAULT_AGENT_MISSING）
        """
        with self.session_factory() as session:
            agents = AgentRepository(session).list_by_user(user_id)
        for agent in agents:
            if agent.is_default:
                return agent
        for agent in agents:
            if agent.name == DEFAULT_AGENT_NAME:
                return agent
        raise NotFound("Default agent not found", code="DEFAULT_AGENT_MISSING")

    # ==================== 单轮对话 ====================

    def chat(
        self,
        user_id: str,
        agent_id: str,
        message: str,
        conversation_id: Optional[str] = None
    ) -> ChatTurnResult:
        """
        与 Agent 进行一轮对话

        Args:
            user_id: 调用者 ID
            agent_id: Agent ID
            message: 用户消息
            conversation_id: 可选会话 ID，提供时加载历史并保存本轮消息

        Returns:
            ChatTurnResult

        Raises:
            NotFound: Agent 或会话不存在
            Forbidden: 无权访问 Agent / 会话，Agent 未开启多会话，或会话属于其他 Agent
        """
        history: List[BaseMessage] = []
        with self.session_factory() as session:
            agent = load_accessible_agent(session, agent_id, user_id)
            if conversation_id:
                if not agent.enable_threads:
                    raise Forbidden("Conversations are disabled for this agent")
                conversation = load_owned_conversation(session, conversation_id, user_id)
                if conversation.agent_id != agent.id:
                    raise Forbidden("Conversation belongs to a different agent")
                history = history_to_messages(
                    ConversationRepository(session).get_messages(conversation_id)
                )

        messages = [
            SystemMessage(content=build_agent_system_prompt(agent)),
            *history,
            HumanMessage(content=message),
        ]
        runner = ToolCallingAgent(
            self.llm_factory.create_llm(),
            tools=[create_retrieve_context_tool(self.retrieval, user_id)],
            max_tool_rounds=self.max_tool_rounds
        )
        logger.info(
            "[ChatWithAgent] agent=%s user=%s conversation=%s history=%d",
            agent.id, user_id, conversation_id, len(history)
        )
        result_messages = runner.invoke(messages)
        reply = message_text(result_messages[-1].content)

        if conversation_id:
            with self.session_factory() as session:
                repo = ConversationRepository(session)
                repo.create_message(conversation_id, MessageRole.USER, message)
                repo.create_message(conversation_id, MessageRole.ASSISTANT, reply)
                repo.touch_conversation(conversation_id)

        return ChatTurnResult(reply=reply, conversation_id=conversation_id)
