"""
测试会话服务层
"""

import pytest

from jura.errors import Forbidden, NotFound, ValidationFailed
from jura.models import DEFAULT_CONVERSATION_TITLE, MessageRole
from jura.repositories import ConversationRepository


class TestConversationService:

    @pytest.fixture(autouse=True)
    def setup(self, container, session_factory, test_user, test_agent):
        self.service = container.conversations
        self.agents = container.agents
        self.session_factory = session_factory
        self.user = test_user
        self.agent = test_agent

    def add_messages(self, conversation_id, *contents):
        with self.session_factory() as session:
            repo = ConversationRepository(session)
            for content in contents:
                repo.create_message(conversation_id, MessageRole.USER, content)

    def test_create_with_default_title_and_policy(self):
        conversation = self.service.create(self.user.id, self.agent.id)

        assert conversation.title == DEFAULT_CONVERSATION_TITLE
        assert conversation.context_policy == {"memory": "on", "max_tokens": 8000, "summarization": "auto"}
        assert conversation.user_id == self.user.id

    def test_create_requires_threads(self):
        agent = self.agents.create(self.user.id, "Single", enable_threads=False)
        with pytest.raises(Forbidden):
            self.service.create(self.user.id, agent.id)

    def test_create_for_unknown_agent(self):
        with pytest.raises(NotFound):
            self.service.create(self.user.id, "missing")

    def test_list_only_callers_conversations(self, other_user):
        mine = self.service.create(self.user.id, self.agent.id, title="Mine")

        assert [c.id for c in self.service.list(self.user.id, self.agent.id)] == [mine.id]
        with pytest.raises(Forbidden):
            self.service.list(other_user.id, self.agent.id)

    def test_history_in_order(self, test_conversation):
        self.add_messages(test_conversation.id, "a", "b", "c")

        history = self.service.history(self.user.id, test_conversation.id)

        assert [m.content for m in history] == ["a", "b", "c"]

    def test_history_checks_agent(self, test_conversation):
        other_agent = self.agents.create(self.user.id, "Other", enable_threads=True)
        with pytest.raises(Forbidden):
            self.service.history(self.user.id, test_conversation.id, agent_id=other_agent.id)

    def test_history_of_other_user(self, other_user, test_conversation):
        with pytest.raises(Forbidden):
            self.service.history(other_user.id, test_conversation.id)

    def test_clear_returns_deleted_count(self, test_conversation):
        self.add_messages(test_conversation.id, "a", "b")

        assert self.service.clear(self.user.id, test_conversation.id) == 2
        assert self.service.history(self.user.id, test_conversation.id) == []

    def test_clear_requires_id(self):
        with pytest.raises(ValidationFailed):
            self.service.clear(self.user.id, "")
