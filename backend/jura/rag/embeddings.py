"""
Embedding 服务
把文本转换为定长向量，具体实现委托给第三方 Embedding API
"""

import logging
from typing import List, Protocol

from langchain_google_genai import GoogleGenerativeAIEmbeddings

logger = logging.getLogger(__name__)


class EmbeddingService(Protocol):
    """Embedding 端口，提供方错误原样向上抛出，不做重试"""

    def embed_query(self, text: str) -> List[float]:
        ...

    def embed_documents(self, texts: List[str]) -> List[List[float]]:
        ...


class GeminiEmbeddingService:
    """基于 Google Generative AI Embeddings 的实现"""

    def __init__(self, api_key: str, model: str = "models/text-embedding-004"):
        if not api_key:
            raise ValueError("GEMINI_API_KEY 未设置，无法初始化 Embedding 服务")
        self.model = model
        self._client = GoogleGenerativeAIEmbeddings(model=model, google_api_key=api_key)

    def embed_query(self, text: str) -> List[float]:
        return self._client.embed_query(text)

    def embed_documents(self, texts: List[str]) -> List[List[float]]:
        logger.debug("[GeminiEmbeddingService] embedding %d texts with %s", len(texts), self.model)
        return self._client.embed_documents(texts)
