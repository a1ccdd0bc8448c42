"""
Agent 动作执行器

按动作类型分发：
- rewrite: 按指令改写一段文本
- generate: 按指令生成新内容（求职信、总结等）
- execute_tool: 以当前用户身份调用 profile_* 工具
"""

import json
import logging
from typing import TYPE_CHECKING, Any, Callable, Dict

from langchain_core.messages import HumanMessage, SystemMessage

from jura.agent.llm_factory import LLMFactory
from jura.agent.tool_loop import message_text
from jura.agent.tools import create_profile_tools
from jura.models.action import ActionType, AgentAction

if TYPE_CHECKING:
    from jura.services.profile_service import ProfileService

logger = logging.getLogger(__name__)

ActionHandler = Callable[[str, AgentAction], Any]

REWRITE_PROMPT = """You rewrite career documents.
Follow the instructions exactly and return only the rewritten text.

Instructions: {instructions}
"""

GENERATE_PROMPT = """You write career documents such as cover letters, summaries and outreach messages.
Return only the generated text.

Instructions: {instructions}
"""


class ActionExecutor:
    """
    动作执行器

    使用示例：
        executor = ActionExecutor(llm_factory, profile_service)
        handlers = executor.handlers()
        result = handlers[ActionType.REWRITE](user_id, action)
    """

    def __init__(self, llm_factory: LLMFactory, profiles: "ProfileService"):
        self.llm_factory = llm_factory
        self.profiles = profiles

    def handlers(self) -> Dict[ActionType, ActionHandler]:
        return {
            ActionType.REWRITE: self.rewrite,
            ActionType.GENERATE: self.generate,
            ActionType.EXECUTE_TOOL: self.execute_tool,
        }

    def _complete(self, system_prompt: str, content: str) -> str:
        llm = self.llm_factory.create_llm()
        response = llm.invoke([SystemMessage(content=system_prompt), HumanMessage(content=content)])
        return message_text(response.content)

    def rewrite(self, user_id: str, action: AgentAction) -> Dict[str, Any]:
        """
        parameters: {"text": 原文, "instructions": 改写要求}
        """
        text = action.parameters.get("text")
        if not text:
            raise ValueError("Rewrite action requires 'text'")
        instructions = action.parameters.get("instructions") or "Improve clarity and impact."
        logger.info("[ActionExecutor] rewrite action=%s user=%s", action.id, user_id)
        return {"text": self._complete(REWRITE_PROMPT.format(instructions=instructions), text)}

    def generate(self, user_id: str, action: AgentAction) -> Dict[str, Any]:
        """
        parameters: {"instructions": 生成要求, "context": 可选补充材料}
        """
        instructions = action.parameters.get("instructions")
        if not instructions:
            raise ValueError("Generate action requires 'instructions'")
        profile = self.profiles.get(user_id)
        context = {
            "profile": profile.to_dict(),
            "context": action.parameters.get("context", ""),
        }
        logger.info("[ActionExecutor] generate action=%s user=%s", action.id, user_id)
        content = json.dumps(context, ensure_ascii=False)
        return {"text": self._complete(GENERATE_PROMPT.format(instructions=instructions), content)}

    def execute_tool(self, user_id: str, action: AgentAction) -> Dict[str, Any]:
        """
        parameters: {"tool": 工具名, "arguments": 工具参数}

        Raises:
            ValueError: 工具不存在
        """
        tool_name = action.parameters.get("tool")
        tools = {tool.name: tool for tool in create_profile_tools(self.profiles, user_id)}
        tool = tools.get(tool_name)
        if tool is None:
            raise ValueError(f"Unknown tool: {tool_name}")
        logger.info("[ActionExecutor] execute_tool action=%s tool=%s user=%s", action.id, tool_name, user_id)
        result = tool.invoke(action.parameters.get("arguments") or {})
        return {"tool": tool_name, "output": json.loads(result)}
