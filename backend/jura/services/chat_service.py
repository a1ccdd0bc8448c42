"""
聊天服务层

封装流式对话业务逻辑，包括：
1. 会话归属和 Agent 访问校验
2. 用户消息存储、历史回放、目标块注入
3. 工具调用循环的流式输出，转换为 SSE 事件
4. 中断：登记表中的标志位在两次事件之间检查
"""

import logging
import time
from typing import TYPE_CHECKING, Any, Dict, Generator, List, Optional

from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage

from jura.agent.interrupts import InterruptRegistry
from jura.agent.llm_factory import LLMFactory
from jura.agent.prompts import build_stream_system_prompt
from jura.agent.tool_loop import ToolCallingAgent
from jura.agent.tools import (
    create_profile_tools,
    create_propose_action_tool,
    create_retrieve_context_tool,
)
from jura.db.init_db import SessionFactory
from jura.errors import AppError
from jura.models.base import new_id
from jura.models.message import ChatMessage, MessageRole, MessageStatus
from jura.repositories.conversation_repository import ConversationRepository
from jura.services.access import load_accessible_agent, load_owned_conversation
from jura.services.agent_service import history_to_messages
from jura.services.events import Event, error_payload, make_event
from jura.services.goal_service import GoalService
from jura.services.profile_service import ProfileService
from jura.services.retrieval_service import RetrievalService

if TYPE_CHECKING:
    from jura.services.action_service import ActionService

logger = logging.getLogger(__name__)

RATE_LIMIT_MARKERS = ("rate limit", "429", "quota")


def classify_error(error: Exception) -> str:
    """把异常映射为对外的错误码"""
    if isinstance(error, AppError):
        return "PERMISSION_DENIED"
    text = str(error).lower()
    if any(marker in text for marker in RATE_LIMIT_MARKERS):
        return "RATE_LIMITED"
    return "INTERNAL_ERROR"


def serialize_message(message: ChatMessage) -> Dict[str, Any]:
    """消息的对外表示，assistant 对外显示为 agent"""
    role = "agent" if message.role == MessageRole.ASSISTANT else message.role.value
    body = {
        "id": message.id,
        "role": role,
        "content": [{"type": "text", "value": message.content}],
        "status": message.status.value,
        "created_at": message.created_at.isoformat() if message.created_at else None,
    }
    if message.message_metadata:
        body["metadata"] = message.message_metadata
    return body


class ChatService:
    """
    聊天服务类

    使用示例：
        for event in service.stream(user_id, conversation_id, "帮我准备面试"):
            print(event["event"])
    """

    def __init__(
        self,
        session_factory: SessionFactory,
        llm_factory: LLMFactory,
        retrieval: RetrievalService,
        profiles: ProfileService,
        goals: GoalService,
        interrupts: InterruptRegistry,
        timeout_seconds: float = 60.0,
        max_tool_rounds: int = 3,
        actions: Optional["ActionService"] = None
    ):
        self.session_factory = session_factory
        self.llm_factory = llm_factory
        self.retrieval = retrieval
        self.profiles = profiles
        self.goals = goals
        self.interrupts = interrupts
        self.timeout_seconds = timeout_seconds
        self.max_tool_rounds = max_tool_rounds
        self.actions = actions

    def stream(self, user_id: str, conversation_id: str, text: str) -> Generator[Event, None, None]:
        """
        发送消息并流式获取 AI 回复

        流程：
        1. 校验会话归属和 Agent 访问权限
        2. chat.started，保存用户消息
        3. agent.thinking (retrieving_context)，加载历史和用户目标
        4. agent.thinking (planning)，运行工具调用循环
        5. message.delta / agent.thinking (tool_selection)
        6. 保存回复，message.completed，chat.completed

        任何异常都转换为 chat.failed 事件，不向调用方抛出

        Args:
            user_id: 调用者 ID
            conversation_id: 会话 ID
            text: 用户消息文本

        Yields:
            SSE 事件字典
        """
        message_id = new_id()
        started_at = time.monotonic()
        registered = False
        logger.info("[chat] stream start conversation=%s user=%s message=%s", conversation_id, user_id, message_id)

        try:
            with self.session_factory() as session:
                load_owned_conversation(session, conversation_id, user_id)
                conversation = ConversationRepository(session).get_conversation(conversation_id)
                agent = load_accessible_agent(session, conversation.agent_id, user_id)
                history = history_to_messages(ConversationRepository(session).get_messages(conversation_id))

            # 校验通过后才登记，非归属者不能覆盖正在进行的流
            self.interrupts.register(conversation_id, message_id)
            registered = True

            user_message_id = new_id()
            yield make_event("chat.started", conversation_id, message_id, {"user_message_id": user_message_id})

            with self.session_factory() as session:
                ConversationRepository(session).create_message(
                    conversation_id, MessageRole.USER, text, message_id=user_message_id
                )

            yield make_event("agent.thinking", conversation_id, message_id, {"reason": "retrieving_context"})

            if self.interrupts.is_interrupted(conversation_id):
                yield make_event("chat.interrupted", conversation_id, message_id)
                return

            goal = self.goals.get(user_id)
            messages: List[BaseMessage] = [
                SystemMessage(content=build_stream_system_prompt(agent, goal)),
                *history,
                HumanMessage(content=text),
            ]
            proposed: List[Event] = []
            tools = [
                create_retrieve_context_tool(self.retrieval, user_id),
                *create_profile_tools(self.profiles, user_id),
            ]
            if self.actions is not None:
                tools.append(create_propose_action_tool(self.actions, conversation_id, message_id, proposed))
            runner = ToolCallingAgent(
                self.llm_factory.create_llm(),
                tools=tools,
                max_tool_rounds=self.max_tool_rounds
            )

            yield make_event("agent.thinking", conversation_id, message_id, {"reason": "planning"})

            reply = ""
            deadline = started_at + self.timeout_seconds
            for step in runner.stream(messages):
                if self.interrupts.is_interrupted(conversation_id):
                    self._save_reply(conversation_id, message_id, reply, MessageStatus.INTERRUPTED, started_at)
                    yield make_event("chat.interrupted", conversation_id, message_id)
                    return
                if time.monotonic() > deadline:
                    raise TimeoutError(f"Agent stream timed out after {self.timeout_seconds:g}s")

                if step["type"] == "token":
                    reply += step["content"]
                    yield make_event(
                        "message.delta", conversation_id, message_id,
                        {"type": "text", "value": step["content"]}
                    )
                elif step["type"] == "tool_start":
                    yield make_event("agent.thinking", conversation_id, message_id, {"reason": "tool_selection"})
                elif step["type"] == "tool_end":
                    logger.info("[chat] tool completed conversation=%s tool=%s", conversation_id, step["name"])
                    while proposed:
                        yield proposed.pop(0)

            assistant_message = self._save_reply(
                conversation_id, message_id, reply, MessageStatus.COMPLETE, started_at
            )
            yield make_event(
                "message.completed", conversation_id, message_id,
                {"message": serialize_message(assistant_message)}
            )
            yield make_event("chat.completed", conversation_id, message_id)

        except Exception as e:
            logger.exception("[chat] stream error conversation=%s message=%s", conversation_id, message_id)
            yield make_event(
                "chat.failed", conversation_id, message_id,
                error_payload(classify_error(e), str(e))
            )
        finally:
            if registered:
                self.interrupts.unregister(conversation_id, message_id)
            logger.info("[chat] stream end conversation=%s message=%s", conversation_id, message_id)

    def _save_reply(
        self,
        conversation_id: str,
        message_id: str,
        content: str,
        status: MessageStatus,
        started_at: float
    ) -> ChatMessage:
        latency_ms = int((time.monotonic() - started_at) * 1000)
        with self.session_factory() as session:
            repo = ConversationRepository(session)
            message = repo.create_message(
                conversation_id, MessageRole.ASSISTANT, content,
                status=status, message_id=message_id, metadata={"latency_ms": latency_ms}
            )
            repo.touch_conversation(conversation_id)
        return message

    def complete(self, user_id: str, conversation_id: str, text: str) -> Dict[str, Any]:
        """
        非流式对话：消费整个事件流

        Returns:
            {"message": ...} 或 {"error": ...}
        """
        final_message = None
        for event in self.stream(user_id, conversation_id, text):
            if event["event"] == "message.completed":
                final_message = event["payload"]["message"]
            elif event["event"] == "chat.failed":
                return {"error": event["payload"]["error"]}
            elif event["event"] == "chat.interrupted":
                return {"error": {"code": "INTERRUPTED", "message": "Chat was interrupted", "recoverable": True}}
        return {"message": final_message}

    def interrupt(self, user_id: str, conversation_id: str, message_id: str) -> Event:
        """
        中断正在进行的流式回复

        无论是否找到活跃的流，都会把消息标记为 interrupted（消息存在时）

        Raises:
            NotFound: 会话不存在
            Forbidden: 会话不属于调用者
        """
        with self.session_factory() as session:
            load_owned_conversation(session, conversation_id, user_id)
            active = self.interrupts.interrupt(conversation_id)
            message = ConversationRepository(session).get_message(message_id)
            if message is not None and message.conversation_id == conversation_id:
                ConversationRepository(session).update_message_status(message_id, MessageStatus.INTERRUPTED)

        logger.info("[chat] interrupt conversation=%s message=%s active=%s", conversation_id, message_id, active)
        event = make_event("chat.interrupted", conversation_id, message_id)
        event["active"] = active
        return event
