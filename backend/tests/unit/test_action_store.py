"""测试内存动作存储"""

import pytest

from jura.agent.action_store import InMemoryActionStore
from jura.models.action import ActionType, AgentAction


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def make_action(**fields) -> AgentAction:
    return AgentAction(conversation_id="conv-1", message_id="msg-1", type=ActionType.REWRITE, **fields)


class TestInMemoryActionStore:

    def setup_method(self):
        self.clock = FakeClock()
        self.store = InMemoryActionStore(ttl_seconds=10, max_entries=2, clock=self.clock)

    def test_put_and_get(self):
        action = make_action()
        self.store.put(action)
        assert self.store.get(action.id) is action
        assert len(self.store) == 1

    def test_get_unknown_returns_none(self):
        assert self.store.get("missing") is None

    def test_delete(self):
        action = make_action()
        self.store.put(action)
        assert self.store.delete(action.id) is True
        assert self.store.delete(action.id) is False
        assert self.store.get(action.id) is None

    def test_entries_expire_after_ttl(self):
        action = make_action()
        self.store.put(action)

        self.clock.now = 9.9
        assert self.store.get(action.id) is action

        self.clock.now = 10.0
        assert self.store.get(action.id) is None
        assert len(self.store) == 0

    def test_oldest_entry_evicted_at_capacity(self):
        first, second, third = make_action(), make_action(), make_action()
        for action in (first, second, third):
            self.store.put(action)

        assert self.store.get(first.id) is None
        assert self.store.get(second.id) is second
        assert self.store.get(third.id) is third

    def test_rewrite_restarts_ttl(self):
        action = make_action()
        self.store.put(action)
        self.clock.now = 8
        self.store.put(action)
        self.clock.now = 15
        assert self.store.get(action.id) is action

    def test_invalid_capacity_rejected(self):
        with pytest.raises(ValueError):
            InMemoryActionStore(max_entries=0)
