"""
检索增强生成 (RAG) 模块
文本切片、向量化和向量检索
"""

from .text_chunker import TextChunker, CHUNK_SIZE, CHUNK_OVERLAP
from .embeddings import EmbeddingService, GeminiEmbeddingService
from .vector_store import VectorStore, SupabaseVectorStore, MATCH_THRESHOLD

__all__ = [
    "TextChunker", "CHUNK_SIZE", "CHUNK_OVERLAP",
    "EmbeddingService", "GeminiEmbeddingService",
    "VectorStore", "SupabaseVectorStore", "MATCH_THRESHOLD",
]
