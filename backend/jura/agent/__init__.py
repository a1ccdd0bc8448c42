"""
Agent 模块 - LLM 提供方、工具调用循环、工具和动作/中断登记
"""

from .llm_factory import LLMFactory, ChatProvider, GeminiProvider, OpenAICompatibleProvider, PROVIDER_KINDS
from .tool_loop import ToolCallingAgent, message_text, DEFAULT_MAX_TOOL_ROUNDS
from .action_store import ActionStore, InMemoryActionStore
from .interrupts import InterruptRegistry
from .tools import (
    create_retrieve_context_tool,
    create_profile_tools,
    create_propose_action_tool,
    RETRIEVE_CONTEXT_TOOL,
    PROPOSE_ACTION_TOOL,
)
from .action_executor import ActionExecutor, ActionHandler

__all__ = [
    "LLMFactory", "ChatProvider", "GeminiProvider", "OpenAICompatibleProvider", "PROVIDER_KINDS",
    "ToolCallingAgent", "message_text", "DEFAULT_MAX_TOOL_ROUNDS",
    "ActionStore", "InMemoryActionStore",
    "InterruptRegistry",
    "create_retrieve_context_tool", "create_profile_tools", "create_propose_action_tool",
    "RETRIEVE_CONTEXT_TOOL", "PROPOSE_ACTION_TOOL",
    "ActionExecutor", "ActionHandler",
]
