"""
请求模型
字段校验失败由全局处理器转换为 400 + errors 列表
"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from jura.models.agent import AgentType


# ── 认证 ──────────────────────────────────────────────────────────────

class SignupRequest(BaseModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class SigninRequest(BaseModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


# ── Agent ─────────────────────────────────────────────────────────────

class CreateAgentRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    type: AgentType = AgentType.PRIVATE
    instructions: str = ""
    tone: str = ""
    enable_threads: bool = Field(default=False, alias="enableThreads")

    model_config = {"populate_by_name": True}


class AgentChatRequest(BaseModel):
    message: str = Field(min_length=1)
    conversation_id: Optional[str] = Field(default=None, alias="conversationId")

    model_config = {"populate_by_name": True}


class AgentConversationRequest(BaseModel):
    title: Optional[str] = None


# ── 会话与流式对话 ────────────────────────────────────────────────────

class CreateConversationRequest(BaseModel):
    agent_id: str = Field(min_length=1)
    title: Optional[str] = None


class MessageContent(BaseModel):
    type: Literal["text"] = "text"
    value: str = Field(min_length=1)


class ChatMessageBody(BaseModel):
    role: Literal["user"] = "user"
    content: List[MessageContent] = Field(min_length=1)


class ChatRequest(BaseModel):
    conversation_id: str = Field(min_length=1)
    message: ChatMessageBody

    def text(self) -> str:
        return "\n".join(part.value for part in self.message.content)


class ControlRequest(BaseModel):
    conversation_id: str = Field(min_length=1)
    command: Optional[Literal["interrupt"]] = None
    message_id: Optional[str] = None
    action_id: Optional[str] = None
    decision: Optional[Literal["confirm", "cancel", "modify"]] = None
    parameters_override: Optional[Dict[str, Any]] = None


# ── 画像与目标 ────────────────────────────────────────────────────────

class ProfileUpdateRequest(BaseModel):
    basics: Optional[Dict[str, Any]] = None
    summary: Optional[str] = None
    preferences: Optional[Dict[str, Any]] = None
    roles: Optional[List[Dict[str, Any]]] = None
    projects: Optional[List[Dict[str, Any]]] = None
    education: Optional[List[Dict[str, Any]]] = None
    certifications: Optional[List[Dict[str, Any]]] = None
    achievements: Optional[List[Dict[str, Any]]] = None
    skills: Optional[List[str]] = None
    languages: Optional[List[Dict[str, Any]]] = None
    evidence: Optional[List[Dict[str, Any]]] = None


class RoleRequest(BaseModel):
    title: str = Field(min_length=1)
    company: Optional[str] = None
    location: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    current: Optional[bool] = None
    description: Optional[str] = None
    highlights: List[str] = Field(default_factory=list)


class RoleUpdateRequest(BaseModel):
    title: Optional[str] = None
    company: Optional[str] = None
    location: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    current: Optional[bool] = None
    description: Optional[str] = None
    highlights: Optional[List[str]] = None


class GoalRequest(BaseModel):
    objective: str = Field(min_length=1)
