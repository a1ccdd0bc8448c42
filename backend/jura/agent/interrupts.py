"""
流式对话中断登记表

以会话 ID 为键记录正在进行的流，中断只是设置标志位，
由流式循环在两次事件之间检查；不会取消已经发出的模型请求。
"""

import threading
from dataclasses import dataclass, field
from typing import Dict


@dataclass
class ActiveStream:
    message_id: str
    cancelled: threading.Event = field(default_factory=threading.Event)


class InterruptRegistry:

    def __init__(self):
        self._streams: Dict[str, ActiveStream] = {}
        self._lock = threading.Lock()

    def register(self, conversation_id: str, message_id: str) -> ActiveStream:
        """登记新流；同一会话的旧流被替换"""
        stream = ActiveStream(message_id=message_id)
        with self._lock:
            self._streams[conversation_id] = stream
        return stream

    def unregister(self, conversation_id: str, message_id: str) -> None:
        """只移除 message_id 匹配的流，避免误删同一会话中后来登记的流"""
        with self._lock:
            stream = self._streams.get(conversation_id)
            if stream is not None and stream.message_id == message_id:
                del self._streams[conversation_id]

    def interrupt(self, conversation_id: str) -> bool:
        """
        请求中断

        Returns:
            找到正在进行的流返回 True，否则 False（无操作）
        """
        with self._lock:
            stream = self._streams.get(conversation_id)
        if stream is None:
            return False
        stream.cancelled.set()
        return True

    def is_interrupted(self, conversation_id: str) -> bool:
        with self._lock:
            stream = self._streams.get(conversation_id)
        return stream is not None and stream.cancelled.is_set()

    def is_active(self, conversation_id: str) -> bool:
        with self._lock:
            return conversation_id in self._streams
