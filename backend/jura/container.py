"""
组合根

在进程启动时一次性构造所有适配器和服务，通过构造函数注入依赖；
测试通过关键字参数替换任意适配器。
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from jura.adapters.auth_provider import AuthProvider, SupabaseAuthProvider
from jura.adapters.pdf_parser import DocumentParser, PdfParser
from jura.adapters.storage import BlobStorage, SupabaseStorage
from jura.adapters.supabase_client import create_supabase_client
from jura.agent.action_executor import ActionExecutor
from jura.agent.action_store import ActionStore, InMemoryActionStore
from jura.agent.interrupts import InterruptRegistry
from jura.agent.llm_factory import LLMFactory
from jura.config import Settings
from jura.db.init_db import SessionFactory, create_tables, get_engine, make_session_factory
from jura.rag.embeddings import EmbeddingService, GeminiEmbeddingService
from jura.rag.text_chunker import TextChunker
from jura.rag.vector_store import SupabaseVectorStore, VectorStore
from jura.services.action_service import ActionService
from jura.services.agent_service import AgentService
from jura.services.auth_service import AuthService
from jura.services.chat_service import ChatService
from jura.services.conversation_service import ConversationService
from jura.services.document_service import DocumentService
from jura.services.goal_service import GoalService
from jura.services.profile_completeness import ProfileCompletenessService
from jura.services.profile_service import ProfileService
from jura.services.retrieval_service import RetrievalService

logger = logging.getLogger(__name__)


@dataclass
class Container:
    settings: Settings
    session_factory: SessionFactory
    auth: AuthService
    documents: DocumentService
    retrieval: RetrievalService
    agents: AgentService
    conversations: ConversationService
    chat: ChatService
    actions: ActionService
    profiles: ProfileService
    goals: GoalService


def build_container(
    settings: Settings,
    engine: Any = None,
    *,
    supabase_client: Any = None,
    auth_provider: Optional[AuthProvider] = None,
    storage: Optional[BlobStorage] = None,
    parser: Optional[DocumentParser] = None,
    embeddings: Optional[EmbeddingService] = None,
    vector_store: Optional[VectorStore] = None,
    llm_factory: Optional[LLMFactory] = None,
    action_store: Optional[ActionStore] = None,
    interrupts: Optional[InterruptRegistry] = None
) -> Container:
    """
    构造应用容器

    Args:
        settings: 应用配置
        engine: 数据库引擎，None 时按 settings.database_path 创建
        其余参数: 替换默认适配器；未提供时使用 Supabase / Gemini / PyMuPDF 实现

    Returns:
        Container
    """
    if engine is None:
        engine = get_engine(settings.database_path)
    create_tables(engine)
    session_factory = make_session_factory(engine)

    needs_supabase = auth_provider is None or storage is None or vector_store is None
    if supabase_client is None and needs_supabase:
        key = settings.supabase_service_role_key or settings.supabase_anon_key
        supabase_client = create_supabase_client(settings.supabase_url, key)
        logger.info("[Container] Supabase client created for %s", settings.supabase_url)

    if auth_provider is None:
        auth_provider = SupabaseAuthProvider(supabase_client)
    if storage is None:
        storage = SupabaseStorage(supabase_client, settings.supabase_storage_bucket)
    if vector_store is None:
        vector_store = SupabaseVectorStore(supabase_client)
    if parser is None:
        parser = PdfParser()
    if embeddings is None:
        embeddings = GeminiEmbeddingService(settings.gemini_api_key or "", settings.embedding_model)
    if llm_factory is None:
        llm_factory = LLMFactory(settings.llm_config_path, provider_override=settings.llm_provider)
    if action_store is None:
        action_store = InMemoryActionStore(settings.action_ttl_seconds, settings.action_max_entries)
    if interrupts is None:
        interrupts = InterruptRegistry()

    retrieval = RetrievalService(embeddings, vector_store)
    profiles = ProfileService(session_factory, ProfileCompletenessService())
    goals = GoalService(session_factory)
    agents = AgentService(session_factory, llm_factory, retrieval, max_tool_rounds=settings.max_tool_rounds)
    actions = ActionService(session_factory, action_store, ActionExecutor(llm_factory, profiles).handlers())

    container = Container(
        settings=settings,
        session_factory=session_factory,
        auth=AuthService(session_factory, auth_provider, agents, profiles),
        documents=DocumentService(
            session_factory, storage, parser, TextChunker(), embeddings, vector_store
        ),
        retrieval=retrieval,
        agents=agents,
        conversations=ConversationService(session_factory),
        chat=ChatService(
            session_factory, llm_factory, retrieval, profiles, goals, interrupts,
            timeout_seconds=settings.chat_timeout_seconds,
            max_tool_rounds=settings.max_tool_rounds,
            actions=actions
        ),
        actions=actions,
        profiles=profiles,
        goals=goals,
    )
    logger.info("[Container] services ready")
    return container
