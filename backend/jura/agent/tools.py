"""
Agent 工具

每个工具都绑定到当前用户，模型只能读写该用户的数据
"""

import json
from typing import TYPE_CHECKING, Any, Dict, List, Literal, Optional

from langchain_core.tools import BaseTool, StructuredTool
from pydantic import BaseModel, Field

from jura.models.action import ActionType

if TYPE_CHECKING:
    from jura.services.action_service import ActionService
    from jura.services.profile_service import ProfileService
    from jura.services.retrieval_service import RetrievalService

RETRIEVE_CONTEXT_TOOL = "retrieve_context"
PROPOSE_ACTION_TOOL = "propose_action"


# ============================================================
# retrieve_context
# ============================================================

class RetrieveContextInput(BaseModel):
    query: str = Field(min_length=1, description="What to look for in the user's documents")
    k: Optional[int] = Field(default=None, ge=1, le=10, description="Number of snippets to return (1-10)")


def create_retrieve_context_tool(retrieval: "RetrievalService", user_id: str) -> BaseTool:
    """
    创建检索工具

    返回 JSON 数组 [{content, metadata, document_id, chunk_index}]
    """

    def retrieve_context(query: str, k: Optional[int] = None) -> str:
        chunks = retrieval.retrieve(user_id, query, k or 5)
        return json.dumps([
            {
                "content": chunk.content,
                "metadata": chunk.metadata,
                "document_id": chunk.document_id,
                "chunk_index": chunk.chunk_index,
            }
            for chunk in chunks
        ], ensure_ascii=False)

    return StructuredTool.from_function(
        func=retrieve_context,
        name=RETRIEVE_CONTEXT_TOOL,
        description=(
            "Search the user's uploaded documents (resume, cover letters, certificates...) "
            "and return the most relevant snippets as JSON."
        ),
        args_schema=RetrieveContextInput,
    )


# ============================================================
# profile_* 工具
# ============================================================

class EmptyInput(BaseModel):
    pass


class UpdateBasicsInput(BaseModel):
    email: Optional[str] = None
    phone: Optional[str] = None
    name: Optional[str] = None
    location: Optional[str] = None
    linkedin: Optional[str] = None
    github: Optional[str] = None
    website: Optional[str] = None


class SetSummaryInput(BaseModel):
    summary: str = Field(description="Professional summary, 2-4 sentences")


class SetSkillsInput(BaseModel):
    skills: List[str] = Field(description="Complete list of skills, replaces the existing list")


class RoleInput(BaseModel):
    title: str
    company: Optional[str] = None
    location: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    current: Optional[bool] = None
    description: Optional[str] = None
    highlights: List[str] = Field(default_factory=list)


class UpdateRoleInput(BaseModel):
    role_id: str
    title: Optional[str] = None
    company: Optional[str] = None
    location: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    current: Optional[bool] = None
    description: Optional[str] = None
    highlights: Optional[List[str]] = None


class DeleteRoleInput(BaseModel):
    role_id: str


def _dump(profile) -> str:
    return json.dumps(profile.to_dict(), ensure_ascii=False)


def _given(values: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in values.items() if value is not None}


def create_profile_tools(profiles: "ProfileService", user_id: str) -> List[BaseTool]:
    """创建读写当前用户画像的工具集合"""

    def get_my_profile() -> str:
        return _dump(profiles.get(user_id))

    def update_basics(**fields) -> str:
        return _dump(profiles.update(user_id, {"basics": _given(fields)}))

    def set_summary(summary: str) -> str:
        return _dump(profiles.update(user_id, {"summary": summary}))

    def set_skills(skills: List[str]) -> str:
        return _dump(profiles.update(user_id, {"skills": skills}))

    def add_role(**fields) -> str:
        return _dump(profiles.add_role(user_id, _given(fields)))

    def update_role(role_id: str, **fields) -> str:
        return _dump(profiles.update_role(user_id, role_id, _given(fields)))

    def delete_role(role_id: str) -> str:
        return _dump(profiles.delete_role(user_id, role_id))

    return [
        StructuredTool.from_function(
            func=get_my_profile,
            name="profile_get_my_profile",
            description="Return the user's full career profile as JSON.",
            args_schema=EmptyInput,
        ),
        StructuredTool.from_function(
            func=update_basics,
            name="profile_update_basics",
            description="Update contact details (email, phone, name, location, linkedin, github, website).",
            args_schema=UpdateBasicsInput,
        ),
        StructuredTool.from_function(
            func=set_summary,
            name="profile_set_summary",
            description="Replace the professional summary.",
            args_schema=SetSummaryInput,
        ),
        StructuredTool.from_function(
            func=set_skills,
            name="profile_set_skills",
            description="Replace the list of skills.",
            args_schema=SetSkillsInput,
        ),
        StructuredTool.from_function(
            func=add_role,
            name="profile_add_role",
            description="Add a work experience entry.",
            args_schema=RoleInput,
        ),
        StructuredTool.from_function(
            func=update_role,
            name="profile_update_role",
            description="Update fields of an existing work experience entry by role_id.",
            args_schema=UpdateRoleInput,
        ),
        StructuredTool.from_function(
            func=delete_role,
            name="profile_delete_role",
            description="Delete a work experience entry by role_id.",
            args_schema=DeleteRoleInput,
        ),
    ]


# ============================================================
# propose_action：提出需要用户确认的动作
# ============================================================

class ProposeActionInput(BaseModel):
    type: Literal["rewrite", "generate", "execute_tool"] = Field(description="Kind of action")
    label: str = Field(description="Short button label shown to the user")
    preview: str = Field(default="", description="What will happen if the user confirms")
    parameters: Dict[str, Any] = Field(
        default_factory=dict,
        description=(
            "rewrite: {text, instructions}; generate: {instructions, context}; "
            "execute_tool: {tool, arguments}"
        ),
    )


def create_propose_action_tool(
    actions: "ActionService",
    conversation_id: str,
    message_id: str,
    proposed: List[Dict[str, Any]]
) -> BaseTool:
    """
    创建 propose_action 工具

    登记的动作事件追加到 proposed 列表，由流式循环取出并发给客户端
    """

    def propose_action(type: str, label: str, preview: str = "", parameters: Optional[Dict[str, Any]] = None) -> str:
        event = actions.register(
            conversation_id, message_id, ActionType(type),
            label=label, preview=preview, parameters=parameters
        )
        proposed.append(event)
        return json.dumps({
            "action_id": event["payload"]["action"]["id"],
            "status": "proposed",
            "note": "Waiting for the user to confirm.",
        })

    return StructuredTool.from_function(
        func=propose_action,
        name=PROPOSE_ACTION_TOOL,
        description=(
            "Propose an action (rewrite a text, generate a document, or change the profile) "
            "that runs only after the user confirms it."
        ),
        args_schema=ProposeActionInput,
    )
