"""
动作确认服务

Agent 提出的副作用操作先以 proposed 状态放入动作存储，
用户确认（或修改参数后确认）才执行，取消则直接丢弃。
"""

import logging
import threading
from typing import Any, Dict, Generator, Mapping, Optional

from jura.agent.action_executor import ActionHandler
from jura.agent.action_store import ActionStore
from jura.db.init_db import SessionFactory
from jura.errors import Conflict, Forbidden, NotFound, ValidationFailed
from jura.models.action import ActionStatus, ActionType, AgentAction
from jura.services.access import load_owned_conversation
from jura.services.events import Event, error_payload, make_event

logger = logging.getLogger(__name__)

DECISIONS = ("confirm", "cancel", "modify")


def serialize_action(action: AgentAction) -> Dict[str, Any]:
    return {
        "id": action.id,
        "type": action.type.value,
        "label": action.label,
        "preview": action.preview,
        "requires_confirmation": action.requires_confirmation,
        "parameters": action.parameters,
        "status": action.status.value,
    }


class ActionService:
    """
    动作确认服务类

    使用示例：
        event = service.register(conversation_id, message_id, ActionType.REWRITE, "Rewrite summary", preview, params)
        for event in service.confirm(user_id, conversation_id, action_id, "confirm"):
            ...
    """

    def __init__(
        self,
        session_factory: SessionFactory,
        store: ActionStore,
        handlers: Mapping[ActionType, ActionHandler]
    ):
        self.session_factory = session_factory
        self.store = store
        self.handlers = dict(handlers)
        self._lock = threading.Lock()

    def register(
        self,
        conversation_id: str,
        message_id: str,
        action_type: ActionType,
        label: str = "",
        preview: str = "",
        parameters: Optional[Dict[str, Any]] = None,
        requires_confirmation: bool = True
    ) -> Event:
        """
        登记一个待确认动作

        Returns:
            agent.action.proposed 事件
        """
        action = AgentAction(
            conversation_id=conversation_id,
            message_id=message_id,
            type=action_type,
            label=label,
            preview=preview,
            parameters=dict(parameters or {}),
            requires_confirmation=requires_confirmation
        )
        self.store.put(action)
        logger.info("[ActionService] proposed action=%s type=%s conversation=%s", action.id, action_type.value, conversation_id)
        return make_event(
            "agent.action.proposed", conversation_id, message_id,
            {"action": serialize_action(action)}
        )

    def _load(self, user_id: str, conversation_id: str, action_id: str) -> AgentAction:
        with self.session_factory() as session:
            load_owned_conversation(session, conversation_id, user_id)

        action = self.store.get(action_id)
        if action is None:
            raise NotFound("Action not found")
        if action.conversation_id != conversation_id:
            raise Forbidden("Action does not belong to this conversation")
        if action.status != ActionStatus.PROPOSED:
            raise Conflict(f"Action is already {action.status.value}")
        return action

    def confirm(
        self,
        user_id: str,
        conversation_id: str,
        action_id: str,
        decision: str,
        parameters_override: Optional[Dict[str, Any]] = None
    ) -> Generator[Event, None, None]:
        """
        处理用户对动作的决定

        校验在第一次迭代时执行，校验失败直接抛出；执行失败转换为 agent.action.failed 事件

        Args:
            user_id: 调用者 ID
            conversation_id: 会话 ID
            action_id: 动作 ID
            decision: confirm / cancel / modify
            parameters_override: 浅合并到动作参数上

        Yields:
            agent.action.executing，随后 agent.action.completed 或 agent.action.failed；cancel 不产生事件

        Raises:
            ValidationFailed: decision 非法
            NotFound: 会话或动作不存在
            Forbidden: 会话不属于调用者，或动作不属于该会话
            Conflict: 动作已不是 proposed 状态
        """
        if decision not in DECISIONS:
            raise ValidationFailed(f"Unknown decision: {decision}")

        # 检查状态和迁出 proposed 必须是原子的，同一动作只能被确认一次
        with self._lock:
            action = self._load(user_id, conversation_id, action_id)
            if decision == "cancel":
                action.transition(ActionStatus.CANCELLED)
                self.store.delete(action_id)
            else:
                action.transition(ActionStatus.EXECUTING)

        if decision == "cancel":
            logger.info("[ActionService] cancelled action=%s", action_id)
            return

        if parameters_override:
            action.parameters = {**action.parameters, **parameters_override}

        try:
            yield make_event("agent.action.executing", conversation_id, action_id, {"action_id": action_id})

            handler = self.handlers.get(action.type)
            if handler is None:
                raise ValueError(f"Unknown action type: {action.type.value}")
            action.result = handler(user_id, action)
            action.transition(ActionStatus.COMPLETED)
            logger.info("[ActionService] completed action=%s", action_id)
            yield make_event(
                "agent.action.completed", conversation_id, action_id,
                {"action_id": action_id, "result": action.result}
            )
        except Exception as e:
            action.error = str(e)
            action.transition(ActionStatus.FAILED)
            logger.warning("[ActionService] action=%s failed: %s", action_id, e)
            yield make_event(
                "agent.action.failed", conversation_id, action_id,
                {"action_id": action_id, **error_payload("TOOL_FAILED", str(e))}
            )
        finally:
            self.store.delete(action_id)
