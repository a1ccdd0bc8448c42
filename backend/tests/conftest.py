"""
Pytest 测试配置
提供内存数据库、脚本化聊天模型、Mock 适配器和服务容器等测试基础设施
"""

from typing import Generator

import pytest
from langchain_core.messages import AIMessage
from sqlmodel import Session
from unittest.mock import Mock

from jura.adapters.auth_provider import AuthIdentity
from jura.agent.action_store import InMemoryActionStore
from jura.agent.interrupts import InterruptRegistry
from jura.config import Settings
from jura.container import Container, build_container
from jura.db.init_db import create_tables, get_engine, make_session_factory
from jura.models import Agent, AgentType, Conversation, User
from jura.models.chunk import DocumentChunk
from jura.repositories import AgentRepository, ConversationRepository, UserRepository
from tests.fakes import ScriptedChatModel


# ==================== 数据库 Fixtures ====================

@pytest.fixture(scope="function")
def test_db_engine():
    """
    创建测试用的内存数据库引擎
    每个测试函数都会获得一个全新的数据库
    """
    engine = get_engine(":memory:")
    create_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(test_db_engine):
    return make_session_factory(test_db_engine)


@pytest.fixture(scope="function")
def test_db_session(session_factory) -> Generator[Session, None, None]:
    with session_factory() as session:
        yield session


# ==================== 脚本化聊天模型 ====================

@pytest.fixture(scope="function")
def scripted_model():
    """返回一个工厂：scripted_model([AIMessage(...), ...])"""
    return ScriptedChatModel


@pytest.fixture(scope="function")
def mock_llm_factory():
    """
    Mock LLMFactory
    测试中通过 mock_llm_factory.create_llm.return_value 指定模型
    """
    factory = Mock()
    factory.create_llm.return_value = ScriptedChatModel([AIMessage(content="Mock LLM response")])
    return factory


# ==================== Mock 适配器 ====================

@pytest.fixture(scope="function")
def mock_storage():
    storage = Mock()
    storage.upload.side_effect = lambda data, filename, content_type, prefix="": (
        f"{prefix}/1700000000000-{filename}",
        f"https://storage.example.com/documents/{prefix}/1700000000000-{filename}",
    )
    return storage


@pytest.fixture(scope="function")
def mock_parser():
    parser = Mock()
    parser.parse.return_value = "Experienced Python engineer."
    return parser


@pytest.fixture(scope="function")
def mock_embeddings():
    embeddings = Mock()
    embeddings.embed_query.return_value = [0.1, 0.2, 0.3]
    embeddings.embed_documents.side_effect = lambda texts: [[float(len(text)), 0.0, 1.0] for text in texts]
    return embeddings


@pytest.fixture(scope="function")
def mock_vector_store():
    store = Mock()
    store.similarity_search.return_value = [
        DocumentChunk(
            document_id="doc-1",
            user_id="user-1",
            content="Led the migration of a payments platform to Python 3.",
            metadata={"source": "cv.pdf", "page": 0},
            chunk_index=0,
        )
    ]
    return store


@pytest.fixture(scope="function")
def mock_auth_provider():
    """
    Mock 身份提供方
    sign_up / sign_in 返回 auth_id = "auth-<email>"；token "token-<auth_id>" 视为有效
    """
    provider = Mock()
    provider.sign_up.side_effect = lambda email, password: AuthIdentity(
        auth_id=f"auth-{email}", email=email, access_token=f"token-auth-{email}"
    )
    provider.sign_in.side_effect = lambda email, password: AuthIdentity(
        auth_id=f"auth-{email}", email=email, access_token=f"token-auth-{email}"
    )

    def get_user(token):
        if token and token.startswith("token-"):
            auth_id = token[len("token-"):]
            return AuthIdentity(auth_id=auth_id, email=auth_id[len("auth-"):])
        return None

    provider.get_user.side_effect = get_user
    return provider


# ==================== 容器 ====================

@pytest.fixture(scope="function")
def test_settings() -> Settings:
    return Settings(
        database_path=":memory:",
        supabase_url="https://example.supabase.co",
        supabase_anon_key="anon",
        chat_timeout_seconds=30.0,
        max_upload_bytes=1024 * 1024,
    )


@pytest.fixture(scope="function")
def container(
    test_settings,
    test_db_engine,
    mock_storage,
    mock_parser,
    mock_embeddings,
    mock_vector_store,
    mock_auth_provider,
    mock_llm_factory,
) -> Container:
    return build_container(
        test_settings,
        test_db_engine,
        supabase_client=Mock(),
        auth_provider=mock_auth_provider,
        storage=mock_storage,
        parser=mock_parser,
        embeddings=mock_embeddings,
        vector_store=mock_vector_store,
        llm_factory=mock_llm_factory,
        action_store=InMemoryActionStore(ttl_seconds=60, max_entries=10),
        interrupts=InterruptRegistry(),
    )


# ==================== 测试数据 Fixtures ====================

@pytest.fixture(scope="function")
def test_user(session_factory) -> User:
    with session_factory() as session:
        return UserRepository(session).create(email="ada@example.com", auth_id="auth-ada@example.com")


@pytest.fixture(scope="function")
def other_user(session_factory) -> User:
    with session_factory() as session:
        return UserRepository(session).create(email="bob@example.com", auth_id="auth-bob@example.com")


@pytest.fixture(scope="function")
def test_agent(session_factory, test_user) -> Agent:
    with session_factory() as session:
        return AgentRepository(session).create(
            user_id=test_user.id,
            name="Career Assistant",
            configuration={"system_prompt": "Help with careers.", "tone": "friendly", "enable_threads": True, "version": 1},
            agent_type=AgentType.PRIVATE,
            is_default=True,
        )


@pytest.fixture(scope="function")
def test_conversation(session_factory, test_user, test_agent) -> Conversation:
    with session_factory() as session:
        return ConversationRepository(session).create_conversation(test_user.id, test_agent.id)


# ==================== Pytest 配置 ====================

def pytest_configure(config):
    """
    Pytest 初始化配置
    """
    config.addinivalue_line(
        "markers", "unit: Unit tests"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests"
    )
