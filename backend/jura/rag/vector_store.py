"""
向量库
持久化带向量的切片，并按用户范围执行相似度检索
"""

import logging
from typing import Any, Dict, List, Protocol

from jura.models.chunk import DocumentChunk

logger = logging.getLogger(__name__)

CHUNKS_TABLE = "document_chunks"
MATCH_FUNCTION = "match_documents"
# 服务端相似度阈值，不可配置
MATCH_THRESHOLD = 0.5


class VectorStore(Protocol):
    """向量库端口"""

    def add_documents(self, chunks: List[DocumentChunk]) -> None:
        ...

    def similarity_search(self, embedding: List[float], k: int, user_id: str) -> List[DocumentChunk]:
        ...

    def delete_by_document(self, document_id: str) -> None:
        ...


class SupabaseVectorStore:
    """
    基于 Supabase (pgvector) 的向量库

    写入 document_chunks 表，检索调用服务端函数 match_documents，
    排序完全由服务端决定
    """

    def __init__(self, client: Any):
        """
        Args:
            client: supabase.Client 实例
        """
        self.client = client

    def add_documents(self, chunks: List[DocumentChunk]) -> None:
        """
        批量插入切片

        Raises:
            RuntimeError: 插入失败
        """
        if not chunks:
            return
        rows = [self._to_row(chunk) for chunk in chunks]
        try:
            self.client.table(CHUNKS_TABLE).insert(rows).execute()
        except Exception as e:
            raise RuntimeError(f"Failed to insert document chunks: {e}") from e
        logger.info("[SupabaseVectorStore] inserted %d chunks", len(rows))

    def similarity_search(self, embedding: List[float], k: int, user_id: str) -> List[DocumentChunk]:
        """
        用户范围内的相似度检索

        Args:
            embedding: 查询向量
            k: 最多返回的切片数
            user_id: 只检索该用户的切片

        Returns:
            切片列表，远端无结果时为空列表

        Raises:
            RuntimeError: 远端调用失败
        """
        params = {
            "query_embedding": embedding,
            "match_threshold": MATCH_THRESHOLD,
            "match_count": k,
            "filter_user_id": user_id,
        }
        try:
            response = self.client.rpc(MATCH_FUNCTION, params).execute()
        except Exception as e:
            raise RuntimeError(f"Vector search failed: {e}") from e

        rows = response.data or []
        return [self._from_row(row) for row in rows]

    def delete_by_document(self, document_id: str) -> None:
        try:
            self.client.table(CHUNKS_TABLE).delete().eq("document_id", document_id).execute()
        except Exception as e:
            raise RuntimeError(f"Failed to delete document chunks: {e}") from e

    @staticmethod
    def _to_row(chunk: DocumentChunk) -> Dict[str, Any]:
        return {
            "id": chunk.id,
            "document_id": chunk.document_id,
            "user_id": chunk.user_id,
            "content": chunk.content,
            "embedding": chunk.embedding,
            "metadata": chunk.metadata,
            "chunk_index": chunk.chunk_index,
        }

    @staticmethod
    def _from_row(row: Dict[str, Any]) -> DocumentChunk:
        return DocumentChunk(
            id=str(row.get("id", "")),
            document_id=str(row.get("document_id", "")),
            user_id=str(row.get("user_id", "")),
            content=row.get("content", ""),
            metadata=row.get("metadata") or {},
            chunk_index=row.get("chunk_index", 0),
        )
