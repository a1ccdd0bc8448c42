"""
文档切片模型
切片存放在向量库 (Supabase document_chunks 表) 中，不是本地表
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from .base import new_id


class DocumentChunk(BaseModel):
    """解析后文本的一个切片，chunk_index 从 0 开始且保持原文顺序"""

    id: str = Field(default_factory=new_id)
    document_id: str
    user_id: str
    content: str
    embedding: Optional[List[float]] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)
    chunk_index: int = 0
