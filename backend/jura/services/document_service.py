"""
文档服务层

封装文档入库流水线：
1. 原始文件上传到对象存储
2. 写入文档元数据
3. PDF 解析 -> 切片 -> 批量向量化 -> 写入向量库

第 3 步失败只记录日志并把文档标记为 failed，不回滚前两步。
"""

import logging
from typing import List, Optional

from jura.adapters.pdf_parser import DocumentParser, PDF_MIME_TYPE
from jura.adapters.storage import BlobStorage
from jura.db.init_db import SessionFactory
from jura.errors import Forbidden, NotFound
from jura.models.chunk import DocumentChunk
from jura.models.document import Document, DocumentCategory, ProcessingStatus
from jura.rag.embeddings import EmbeddingService
from jura.rag.text_chunker import TextChunker
from jura.rag.vector_store import VectorStore
from jura.repositories.document_repository import DocumentRepository

logger = logging.getLogger(__name__)


class DocumentService:
    """
    文档服务类

    使用示例：
        service = DocumentService(session_factory, storage, parser, chunker, embeddings, vector_store)
        document = service.upload(user_id, data, "cv.pdf", "application/pdf", DocumentCategory.RESUME)
    """

    def __init__(
        self,
        session_factory: SessionFactory,
        storage: BlobStorage,
        parser: DocumentParser,
        chunker: TextChunker,
        embeddings: EmbeddingService,
        vector_store: VectorStore,
        storage_provider: str = "supabase"
    ):
        self.session_factory = session_factory
        self.storage = storage
        self.parser = parser
        self.chunker = chunker
        self.embeddings = embeddings
        self.vector_store = vector_store
        self.storage_provider = storage_provider

    def upload(
        self,
        user_id: str,
        data: bytes,
        filename: str,
        mime_type: str,
        category: DocumentCategory
    ) -> Document:
        """
        上传并处理文档

        Args:
            user_id: 上传者 ID
            data: 文件字节
            filename: 原始文件名
            mime_type: MIME 类型
            category: 文档分类

        Returns:
            Document 对象，processing_status 反映第 3 步的结果
        """
        # 1. 上传原始文件
        path, public_url = self.storage.upload(data, filename, mime_type, prefix=user_id)

        # 2. 写入元数据
        with self.session_factory() as session:
            document = DocumentRepository(session).create(Document(
                user_id=user_id,
                category=category,
                original_name=filename,
                mime_type=mime_type,
                size=len(data),
                storage_provider=self.storage_provider,
                storage_path=path,
                url=public_url
            ))
        logger.info("[UploadDocument] stored document=%s user=%s path=%s", document.id, user_id, path)

        # 3. 切片与向量化（仅 PDF）
        if mime_type != PDF_MIME_TYPE:
            return self._mark(document.id, ProcessingStatus.SKIPPED)

        try:
            chunk_count = self._process(document, data)
        except Exception as e:
            logger.exception("[UploadDocument] processing failed for document=%s", document.id)
            return self._mark(document.id, ProcessingStatus.FAILED, error=str(e))

        return self._mark(document.id, ProcessingStatus.PROCESSED, chunk_count=chunk_count)

    def _process(self, document: Document, data: bytes) -> int:
        text = self.parser.parse(data, document.mime_type)
        pieces = self.chunker.split(text)
        vectors = self.embeddings.embed_documents(pieces)
        if len(vectors) != len(pieces):
            raise ValueError(
                f"Embedding provider returned {len(vectors)} vectors for {len(pieces)} chunks"
            )

        chunks = [
            DocumentChunk(
                document_id=document.id,
                user_id=document.user_id,
                content=piece,
                embedding=vector,
                metadata={"source": document.original_name, "page": 0},
                chunk_index=index
            )
            for index, (piece, vector) in enumerate(zip(pieces, vectors))
        ]
        self.vector_store.add_documents(chunks)
        logger.info("[UploadDocument] indexed %d chunks for document=%s", len(chunks), document.id)
        return len(chunks)

    def _mark(self, document_id: str, status: ProcessingStatus, chunk_count: int = 0, error: Optional[str] = None) -> Document:
        with self.session_factory() as session:
            return DocumentRepository(session).update_processing(
                document_id, status, chunk_count=chunk_count, error=error
            )

    def list(self, user_id: str) -> List[Document]:
        """列出用户的文档"""
        with self.session_factory() as session:
            return DocumentRepository(session).list_by_user(user_id)

    def delete(self, user_id: str, document_id: str) -> None:
        """
        删除文档：切片、原始文件、元数据

        Raises:
            NotFound: 文档不存在
            Forbidden: 文档不属于当前用户
        """
        with self.session_factory() as session:
            repo = DocumentRepository(session)
            document = repo.get_by_id(document_id)
            if document is None:
                raise NotFound("Document not found")
            if document.user_id != user_id:
                raise Forbidden("Unauthorized to delete this document")

            self.vector_store.delete_by_document(document.id)
            self.storage.delete(document.storage_path)
            repo.delete(document.id)
        logger.info("[DeleteDocument] deleted document=%s user=%s", document_id, user_id)
