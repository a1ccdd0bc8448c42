"""
上下文检索用例
向量化查询并在用户范围内做相似度检索，为 RAG 提供依据
"""

import logging
from typing import List

from jura.models.chunk import DocumentChunk
from jura.rag.embeddings import EmbeddingService
from jura.rag.vector_store import VectorStore

logger = logging.getLogger(__name__)

DEFAULT_TOP_K = 5


class RetrievalService:
    """不做缓存，每次调用都重新向量化查询"""

    def __init__(self, embeddings: EmbeddingService, vector_store: VectorStore):
        self.embeddings = embeddings
        self.vector_store = vector_store

    def retrieve(self, user_id: str, query: str, k: int = DEFAULT_TOP_K) -> List[DocumentChunk]:
        """
        检索与查询最相关的切片

        Args:
            user_id: 只检索该用户的文档
            query: 查询文本，为空时直接返回空列表
            k: 最多返回的切片数

        Returns:
            DocumentChunk 列表，顺序由向量库决定
        """
        if not query:
            return []

        embedding = self.embeddings.embed_query(query)
        chunks = self.vector_store.similarity_search(embedding, k, user_id)
        logger.info("[RetrieveContext] user=%s k=%d hits=%d", user_id, k, len(chunks))
        return chunks[:k]
