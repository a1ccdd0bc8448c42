"""
工具调用循环

用 LangGraph 状态图实现有界的“模型调用 -> 工具调用 -> 结果回灌”循环：

    agent_node -> route_after_agent (条件边)
        -> tools_node -> route_after_tools (条件边)
            -> agent_node (循环)
            -> final_node (达到最大轮数，不绑定工具做最后一次调用)
            -> END (没有可解析的工具调用)
        -> END (模型不再请求工具)

流式模式下节点通过 stream writer 输出 token / tool_start / tool_end 事件。
"""

import logging
from typing import Annotated, Any, Dict, Generator, List, Optional, Sequence, TypedDict

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, ToolMessage
from langchain_core.tools import BaseTool
from langgraph.config import get_stream_writer
from langgraph.graph import END, StateGraph, add_messages

logger = logging.getLogger(__name__)

DEFAULT_MAX_TOOL_ROUNDS = 3


def message_text(content: Any) -> str:
    """
    提取消息文本

    Gemini 可能返回分块列表 [{"type": "text", "text": ...}]，其它提供方返回字符串
    """
    if content is None:
        return ""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and part.get("type") == "text":
                parts.append(part.get("text", ""))
        return "".join(parts)
    return str(content)


class ToolLoopState(TypedDict, total=False):
    """工具调用循环的状态"""

    # 系统消息 + 历史 + 本轮产生的 AI / Tool 消息
    messages: Annotated[List[BaseMessage], add_messages]

    # 已完成的带工具模型调用次数
    rounds: int

    # 最近一次工具节点是否至少解析出一个工具调用
    resolved: bool

    # True 时模型以流式调用，token 通过 stream writer 输出
    streaming: bool


class ToolCallingAgent:
    """
    有界工具调用循环

    使用示例：
        agent = ToolCallingAgent(provider.chat_model(), tools=[retrieve_tool])
        messages = agent.invoke([SystemMessage(...), HumanMessage("...")])
        reply = message_text(messages[-1].content)
    """

    def __init__(
        self,
        model: BaseChatModel,
        tools: Sequence[BaseTool],
        max_tool_rounds: int = DEFAULT_MAX_TOOL_ROUNDS
    ):
        self.model = model
        self.tools = list(tools)
        self.max_tool_rounds = max_tool_rounds
        self._tools_by_name = {tool.name: tool for tool in self.tools}
        self._model_with_tools = model.bind_tools(self.tools) if self.tools else model
        self.graph = self._build_graph()

    # ==================== 节点 ====================

    def _call_model(self, model: Any, state: ToolLoopState) -> AIMessage:
        if not state.get("streaming"):
            return model.invoke(state["messages"])

        writer = get_stream_writer()
        gathered = None
        accumulated = ""
        for chunk in model.stream(state["messages"]):
            text = message_text(chunk.content)
            if text:
                accumulated += text
                writer({"type": "token", "content": text})
            gathered = chunk if gathered is None else gathered + chunk
        tool_calls = list(getattr(gathered, "tool_calls", None) or [])
        return AIMessage(content=accumulated, tool_calls=tool_calls)

    def agent_node(self, state: ToolLoopState) -> Dict[str, Any]:
        rounds = state.get("rounds", 0)
        logger.debug("[ToolCallingAgent] round=%d messages=%d", rounds, len(state["messages"]))
        response = self._call_model(self._model_with_tools, state)
        return {"messages": [response], "rounds": rounds + 1}

    def tools_node(self, state: ToolLoopState) -> Dict[str, Any]:
        writer = get_stream_writer() if state.get("streaming") else None
        tool_calls = state["messages"][-1].tool_calls
        logger.info(
            "[ToolCallingAgent] round=%d tool_calls=%s",
            state.get("rounds", 0), [call.get("name") for call in tool_calls]
        )

        if writer:
            for tool_call in tool_calls:
                writer({"type": "tool_start", "name": tool_call.get("name")})

        results = []
        for tool_call in tool_calls:
            result = self._execute_tool_call(tool_call)
            if result is not None:
                results.append(result)
                if writer:
                    writer({"type": "tool_end", "name": tool_call.get("name"), "result": result.content})

        return {"messages": results, "resolved": bool(results)}

    def final_node(self, state: ToolLoopState) -> Dict[str, Any]:
        """达到最大轮数，不绑定工具做最后一次调用"""
        return {"messages": [self._call_model(self.model, state)]}

    # ==================== 条件边 ====================

    def route_after_agent(self, state: ToolLoopState) -> str:
        last = state["messages"][-1]
        if getattr(last, "tool_calls", None):
            return "tools_node"
        return "__end__"

    def route_after_tools(self, state: ToolLoopState) -> str:
        # 没有可解析的工具调用，停止以避免死循环
        if not state.get("resolved"):
            return "__end__"
        if state.get("rounds", 0) >= self.max_tool_rounds:
            return "final_node"
        return "agent_node"

    def _build_graph(self):
        workflow = StateGraph(ToolLoopState)

        workflow.add_node("agent_node", self.agent_node)
        workflow.add_node("tools_node", self.tools_node)
        workflow.add_node("final_node", self.final_node)

        workflow.set_entry_point("agent_node")
        workflow.add_conditional_edges(
            "agent_node",
            self.route_after_agent,
            {
                "tools_node": "tools_node",
                "__end__": END,
            }
        )
        workflow.add_conditional_edges(
            "tools_node",
            self.route_after_tools,
            {
                "agent_node": "agent_node",
                "final_node": "final_node",
                "__end__": END,
            }
        )
        workflow.add_edge("final_node", END)
        return workflow.compile()

    # ==================== 工具执行 ====================

    def _execute_tool_call(self, tool_call: Dict[str, Any]) -> Optional[ToolMessage]:
        """
        执行单个工具调用

        Returns:
            ToolMessage；找不到工具时返回 None。工具抛出的异常转换为 "Error: ..." 文本回灌给模型
        """
        tool = self._tools_by_name.get(tool_call.get("name"))
        if tool is None:
            logger.warning("[ToolCallingAgent] unknown tool requested: %s", tool_call.get("name"))
            return None

        tool_call_id = tool_call.get("id") or ""
        try:
            result = tool.invoke(tool_call.get("args") or {})
            return ToolMessage(content=str(result), tool_call_id=tool_call_id)
        except Exception as e:
            logger.warning("[ToolCallingAgent] tool %s failed: %s", tool.name, e)
            return ToolMessage(content=f"Error: {e}", tool_call_id=tool_call_id)

    # ==================== 入口 ====================

    def _config(self) -> Dict[str, Any]:
        # agent/tools 每轮两步，加上 final_node
        return {"recursion_limit": 2 * self.max_tool_rounds + 5}

    def invoke(self, messages: List[BaseMessage]) -> List[BaseMessage]:
        """
        执行完整的工具调用循环

        Args:
            messages: 系统消息 + 历史 + 当前用户消息

        Returns:
            完整消息列表，最后一条是模型的最终回复
        """
        initial: ToolLoopState = {"messages": list(messages), "rounds": 0, "streaming": False}
        result = self.graph.invoke(initial, self._config())
        return result["messages"]

    def stream(self, messages: List[BaseMessage]) -> Generator[Dict[str, Any], None, None]:
        """
        流式执行工具调用循环

        Yields:
            {"type": "token", "content": str}
            {"type": "tool_start", "name": str}
            {"type": "tool_end", "name": str, "result": str}
            {"type": "done", "messages": List[BaseMessage]}
        """
        initial: ToolLoopState = {"messages": list(messages), "rounds": 0, "streaming": True}
        final_messages: List[BaseMessage] = list(messages)

        for mode, chunk in self.graph.stream(initial, self._config(), stream_mode=["custom", "values"]):
            if mode == "custom":
                yield chunk
            else:
                final_messages = chunk.get("messages", final_messages)

        yield {"type": "done", "messages": final_messages}
