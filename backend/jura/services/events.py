"""
SSE 事件信封

流式对话和动作确认共用的事件格式：
{"event": 名称, "conversation_id": ..., "message_id": ..., "payload": {...}}
"""

from typing import Any, Dict, Optional

Event = Dict[str, Any]


def make_event(name: str, conversation_id: str, message_id: str, payload: Optional[Dict[str, Any]] = None) -> Event:
    event: Event = {"event": name, "conversation_id": conversation_id, "message_id": message_id}
    if payload is not None:
        event["payload"] = payload
    return event


def error_payload(code: str, message: str, recoverable: bool = True) -> Dict[str, Any]:
    return {"error": {"code": code, "message": message, "recoverable": recoverable}}
