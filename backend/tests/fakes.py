"""
测试替身
按脚本返回消息的聊天模型，供 Agent 循环和对话服务测试使用
"""

import json
from typing import List

from langchain_core.messages import AIMessage, AIMessageChunk
from langchain_core.messages.tool import tool_call_chunk


class ScriptedChatModel:
    """
    按顺序返回预设 AIMessage 的聊天模型

    bind_tools 返回自身并记录工具名；stream 把文本按空格切成多个 chunk，
    工具调用放在最后一个 chunk 中
    """

    def __init__(self, responses: List[AIMessage]):
        self.responses = list(responses)
        self.calls = []
        self.bound_tools = []

    def bind_tools(self, tools):
        self.bound_tools = [tool.name for tool in tools]
        return self

    def invoke(self, messages):
        self.calls.append(list(messages))
        if not self.responses:
            raise AssertionError("ScriptedChatModel ran out of responses")
        return self.responses.pop(0)

    def stream(self, messages):
        message = self.invoke(messages)
        text = message.content if isinstance(message.content, str) else ""
        if text:
            words = text.split(" ")
            for index, word in enumerate(words):
                yield AIMessageChunk(content=word if index == len(words) - 1 else word + " ")
        if message.tool_calls:
            yield AIMessageChunk(
                content="",
                tool_call_chunks=[
                    tool_call_chunk(
                        name=call["name"],
                        args=json.dumps(call["args"]),
                        id=call["id"],
                        index=index,
                    )
                    for index, call in enumerate(message.tool_calls)
                ],
            )


def tool_call_message(name: str, args: dict, call_id: str = "call_1", content: str = "") -> AIMessage:
    return AIMessage(content=content, tool_calls=[{"name": name, "args": args, "id": call_id}])
