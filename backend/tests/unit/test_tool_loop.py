"""
测试工具调用循环 (LangGraph 状态图)
"""

from langchain_core.messages import AIMessage, HumanMessage, SystemMessage, ToolMessage
from langchain_core.tools import tool

from jura.agent.tool_loop import ToolCallingAgent, message_text
from tests.fakes import ScriptedChatModel, tool_call_message


@tool
def lookup_skill(name: str) -> str:
    """Look up a skill."""
    return f"{name}: 5 years"


@tool
def broken_tool(query: str) -> str:
    """Always fails."""
    raise RuntimeError("vector store offline")


def prompt():
    return [SystemMessage(content="You are helpful."), HumanMessage(content="What do I know?")]


class TestMessageText:

    def test_plain_string(self):
        assert message_text("hi") == "hi"

    def test_block_list(self):
        content = [{"type": "text", "text": "Hello "}, {"type": "image"}, "world"]
        assert message_text(content) == "Hello world"

    def test_none(self):
        assert message_text(None) == ""


class TestToolCallingAgentInvoke:

    def test_answer_without_tools(self):
        model = ScriptedChatModel([AIMessage(content="Plain answer")])
        agent = ToolCallingAgent(model, tools=[])

        messages = agent.invoke(prompt())

        assert message_text(messages[-1].content) == "Plain answer"
        assert len(model.calls) == 1
        assert model.bound_tools == []

    def test_tool_result_fed_back_to_model(self):
        model = ScriptedChatModel([
            tool_call_message("lookup_skill", {"name": "Python"}),
            AIMessage(content="You know Python well."),
        ])
        agent = ToolCallingAgent(model, tools=[lookup_skill])

        messages = agent.invoke(prompt())

        assert model.bound_tools == ["lookup_skill"]
        tool_messages = [m for m in messages if isinstance(m, ToolMessage)]
        assert tool_messages[0].content == "Python: 5 years"
        assert tool_messages[0].tool_call_id == "call_1"
        assert message_text(messages[-1].content) == "You know Python well."
        # 第二次调用能看到工具结果
        assert isinstance(model.calls[1][-1], ToolMessage)

    def test_tool_error_becomes_error_text(self):
        model = ScriptedChatModel([
            tool_call_message("broken_tool", {"query": "x"}),
            AIMessage(content="Sorry, search is down."),
        ])
        agent = ToolCallingAgent(model, tools=[broken_tool])

        messages = agent.invoke(prompt())

        tool_message = [m for m in messages if isinstance(m, ToolMessage)][0]
        assert tool_message.content.startswith("Error: ")
        assert "vector store offline" in tool_message.content
        assert message_text(messages[-1].content) == "Sorry, search is down."

    def test_unknown_tool_stops_loop(self):
        model = ScriptedChatModel([tool_call_message("delete_everything", {})])
        agent = ToolCallingAgent(model, tools=[lookup_skill])

        messages = agent.invoke(prompt())

        assert len(model.calls) == 1
        assert not any(isinstance(m, ToolMessage) for m in messages)

    def test_max_rounds_forces_final_answer(self):
        model = ScriptedChatModel([
            tool_call_message("lookup_skill", {"name": "Go"}, call_id="call_1"),
            tool_call_message("lookup_skill", {"name": "Rust"}, call_id="call_2"),
            AIMessage(content="Final summary."),
        ])
        agent = ToolCallingAgent(model, tools=[lookup_skill], max_tool_rounds=2)

        messages = agent.invoke(prompt())

        assert len(model.calls) == 3
        assert message_text(messages[-1].content) == "Final summary."
        assert len([m for m in messages if isinstance(m, ToolMessage)]) == 2


class TestToolCallingAgentStream:

    def test_tokens_then_done(self):
        model = ScriptedChatModel([AIMessage(content="Hello there friend")])
        agent = ToolCallingAgent(model, tools=[])

        events = list(agent.stream(prompt()))

        tokens = [e["content"] for e in events if e["type"] == "token"]
        assert "".join(tokens) == "Hello there friend"
        assert len(tokens) == 3
        assert events[-1]["type"] == "done"
        assert message_text(events[-1]["messages"][-1].content) == "Hello there friend"

    def test_tool_events_emitted(self):
        model = ScriptedChatModel([
            tool_call_message("lookup_skill", {"name": "SQL"}),
            AIMessage(content="SQL it is."),
        ])
        agent = ToolCallingAgent(model, tools=[lookup_skill])

        events = list(agent.stream(prompt()))
        types = [e["type"] for e in events]

        assert types.index("tool_start") < types.index("tool_end") < types.index("token")
        tool_end = next(e for e in events if e["type"] == "tool_end")
        assert tool_end == {"type": "tool_end", "name": "lookup_skill", "result": "SQL: 5 years"}
        assert types[-1] == "done"
