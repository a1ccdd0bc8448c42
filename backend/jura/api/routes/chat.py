"""
会话与流式对话路由

/chat/stream 以 SSE 输出事件，每个事件一行 `data: <json>`；
客户端断开时生成器被关闭，中断登记在 finally 中移除。
"""

import json
import logging
from typing import Iterator, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, StreamingResponse

from jura.api.deps import get_container, get_current_user
from jura.api.schemas import ChatRequest, ControlRequest, CreateConversationRequest
from jura.container import Container
from jura.errors import ValidationFailed
from jura.models.user import User
from jura.services.chat_service import serialize_message

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["Chat"])

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


def sse_lines(events: Iterator[dict]) -> Iterator[str]:
    for event in events:
        yield f"data: {json.dumps(event, ensure_ascii=False, default=str)}\n\n"


# ── 会话 ──────────────────────────────────────────────────────────────

@router.post("/conversations", status_code=201)
def create_conversation(
    body: CreateConversationRequest,
    user: User = Depends(get_current_user),
    container: Container = Depends(get_container),
):
    return container.conversations.create(user.id, body.agent_id, title=body.title).model_dump(mode="json")


@router.get("/conversations")
def list_conversations(
    agent_id: Optional[str] = None,
    user: User = Depends(get_current_user),
    container: Container = Depends(get_container),
):
    if not agent_id:
        raise ValidationFailed("agent_id query parameter is required")
    return [conversation.model_dump(mode="json") for conversation in container.conversations.list(user.id, agent_id)]


@router.get("/conversations/{conversation_id}/messages")
def get_conversation_history(
    conversation_id: str,
    user: User = Depends(get_current_user),
    container: Container = Depends(get_container),
):
    return [serialize_message(message) for message in container.conversations.history(user.id, conversation_id)]


@router.delete("/conversations/{conversation_id}/messages")
def clear_conversation(
    conversation_id: str,
    user: User = Depends(get_current_user),
    container: Container = Depends(get_container),
):
    deleted = container.conversations.clear(user.id, conversation_id)
    return {"message": "Conversation history cleared", "deleted_count": deleted}


# ── 对话 ──────────────────────────────────────────────────────────────

@router.post("/chat")
def chat(
    body: ChatRequest,
    user: User = Depends(get_current_user),
    container: Container = Depends(get_container),
):
    result = container.chat.complete(user.id, body.conversation_id, body.text())
    if "error" in result:
        return JSONResponse(status_code=500, content={"error": result["error"]})
    return result


@router.post("/chat/stream")
def chat_stream(
    body: ChatRequest,
    user: User = Depends(get_current_user),
    container: Container = Depends(get_container),
):
    events = container.chat.stream(user.id, body.conversation_id, body.text())
    return StreamingResponse(sse_lines(events), media_type="text/event-stream", headers=SSE_HEADERS)


@router.post("/chat/control")
def chat_control(
    body: ControlRequest,
    user: User = Depends(get_current_user),
    container: Container = Depends(get_container),
):
    if body.command == "interrupt" and body.message_id:
        return container.chat.interrupt(user.id, body.conversation_id, body.message_id)

    if body.action_id and body.decision:
        events = list(container.actions.confirm(
            user.id,
            body.conversation_id,
            body.action_id,
            body.decision,
            parameters_override=body.parameters_override,
        ))
        return {"events": events}

    raise ValidationFailed("Invalid control request: must specify either command or action_id with decision")
