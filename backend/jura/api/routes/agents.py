"""
Agent 路由
Agent 管理、单轮对话和 Agent 维度的会话
"""

from fastapi import APIRouter, Depends

from jura.api.deps import get_container, get_current_user
from jura.api.schemas import AgentChatRequest, AgentConversationRequest, CreateAgentRequest
from jura.container import Container
from jura.models.user import User
from jura.services.chat_service import serialize_message

router = APIRouter(prefix="/api/v1/agents", tags=["Agents"])


@router.post("", status_code=201)
def create_agent(
    body: CreateAgentRequest,
    user: User = Depends(get_current_user),
    container: Container = Depends(get_container),
):
    agent = container.agents.create(
        user.id,
        body.name,
        agent_type=body.type,
        instructions=body.instructions,
        tone=body.tone,
        enable_threads=body.enable_threads,
    )
    return agent.model_dump(mode="json")


@router.get("")
def list_agents(user: User = Depends(get_current_user), container: Container = Depends(get_container)):
    return [agent.model_dump(mode="json") for agent in container.agents.list(user.id)]


@router.get("/default")
def get_default_agent(user: User = Depends(get_current_user), container: Container = Depends(get_container)):
    return container.agents.get_default(user.id).model_dump(mode="json")


@router.get("/{agent_id}")
def get_agent(agent_id: str, user: User = Depends(get_current_user), container: Container = Depends(get_container)):
    return container.agents.get(user.id, agent_id).model_dump(mode="json")


@router.post("/{agent_id}/chat")
def chat_with_agent(
    agent_id: str,
    body: AgentChatRequest,
    user: User = Depends(get_current_user),
    container: Container = Depends(get_container),
):
    result = container.agents.chat(user.id, agent_id, body.message, conversation_id=body.conversation_id)
    return {"message": result.reply, "conversation_id": result.conversation_id}


@router.post("/{agent_id}/conversations", status_code=201)
def create_agent_conversation(
    agent_id: str,
    body: AgentConversationRequest,
    user: User = Depends(get_current_user),
    container: Container = Depends(get_container),
):
    return container.conversations.create(user.id, agent_id, title=body.title).model_dump(mode="json")


@router.get("/{agent_id}/conversations")
def list_agent_conversations(
    agent_id: str,
    user: User = Depends(get_current_user),
    container: Container = Depends(get_container),
):
    return [conversation.model_dump(mode="json") for conversation in container.conversations.list(user.id, agent_id)]


@router.get("/{agent_id}/conversations/{conversation_id}")
def get_agent_conversation_history(
    agent_id: str,
    conversation_id: str,
    user: User = Depends(get_current_user),
    container: Container = Depends(get_container),
):
    messages = container.conversations.history(user.id, conversation_id, agent_id=agent_id)
    return [serialize_message(message) for message in messages]
