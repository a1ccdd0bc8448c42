"""
Agent 动作存储

待确认动作按 action_id 存放。内存实现带 TTL 和容量上限，
过期或超出容量的条目会被淘汰；持久化实现只需满足 ActionStore 接口。
"""

import logging
import threading
import time
from collections import OrderedDict
from typing import Callable, Optional, Protocol

from jura.models.action import AgentAction

logger = logging.getLogger(__name__)


class ActionStore(Protocol):
    def put(self, action: AgentAction) -> None:
        ...

    def get(self, action_id: str) -> Optional[AgentAction]:
        ...

    def delete(self, action_id: str) -> bool:
        ...

    def __len__(self) -> int:
        ...


class InMemoryActionStore:
    """
    进程内动作存储

    Args:
        ttl_seconds: 条目自写入起的存活时间
        max_entries: 最大条目数，超出时淘汰最早写入的条目
        clock: 单调时钟，测试中可替换
    """

    def __init__(
        self,
        ttl_seconds: float = 900.0,
        max_entries: int = 1000,
        clock: Callable[[], float] = time.monotonic
    ):
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: "OrderedDict[str, tuple[float, AgentAction]]" = OrderedDict()
        self._lock = threading.Lock()

    def _evict_expired(self, now: float) -> None:
        # 按写入顺序排列，遇到第一个未过期条目即可停止
        while self._entries:
            action_id, (stored_at, _) = next(iter(self._entries.items()))
            if now - stored_at < self.ttl_seconds:
                break
            self._entries.popitem(last=False)
            logger.info("[InMemoryActionStore] expired action %s", action_id)

    def put(self, action: AgentAction) -> None:
        with self._lock:
            now = self._clock()
            self._evict_expired(now)
            # 覆盖写入视为新条目，重新计时
            self._entries.pop(action.id, None)
            self._entries[action.id] = (now, action)
            while len(self._entries) > self.max_entries:
                evicted_id, _ = self._entries.popitem(last=False)
                logger.warning("[InMemoryActionStore] capacity reached, evicted action %s", evicted_id)

    def get(self, action_id: str) -> Optional[AgentAction]:
        with self._lock:
            self._evict_expired(self._clock())
            entry = self._entries.get(action_id)
            return entry[1] if entry else None

    def delete(self, action_id: str) -> bool:
        with self._lock:
            return self._entries.pop(action_id, None) is not None

    def __len__(self) -> int:
        with self._lock:
            self._evict_expired(self._clock())
            return len(self._entries)
