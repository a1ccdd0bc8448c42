"""
文档域模型 - 上传文档元数据表
原始文件存放在对象存储中，切片和向量存放在向量库中
"""

from enum import Enum
from typing import Optional

from sqlmodel import Field

from .base import TimestampModel, new_id


class DocumentCategory(str, Enum):
    """文档分类枚举"""
    RESUME = "resume"
    COVER_LETTER = "cover_letter"
    PORTFOLIO = "portfolio"
    CERTIFICATION = "certification"
    TRANSCRIPT = "transcript"
    REFERENCE = "reference"
    OTHER = "other"


class ProcessingStatus(str, Enum):
    """解析/切片/向量化流水线状态"""
    PENDING = "pending"
    PROCESSED = "processed"
    FAILED = "failed"
    # 非 PDF 文件不进入切片流程
    SKIPPED = "skipped"


class Document(TimestampModel, table=True):
    """
    文档元数据表
    上传后只读，仅 processing_status / chunk_count 会在入库流水线中更新
    """
    __tablename__ = "documents"

    id: str = Field(default_factory=new_id, primary_key=True)

    # 索引优化：按用户列出文档
    user_id: str = Field(foreign_key="users.id", index=True, nullable=False)

    category: DocumentCategory = Field(nullable=False)

    original_name: str = Field(nullable=False)
    mime_type: str = Field(nullable=False)
    size: int = Field(default=0, nullable=False)

    storage_provider: str = Field(default="supabase", nullable=False)
    storage_path: str = Field(nullable=False)
    url: str = Field(default="", nullable=False)

    processing_status: ProcessingStatus = Field(default=ProcessingStatus.PENDING, nullable=False)
    chunk_count: int = Field(default=0, nullable=False)
    processing_error: Optional[str] = Field(default=None)
