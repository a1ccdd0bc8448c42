"""
文档元数据 Repository
"""

from typing import List, Optional

from sqlmodel import Session, select, col

from jura.models.document import Document, ProcessingStatus


class DocumentRepository:
    """封装 documents 表的读写，列表查询始终按用户过滤"""

    def __init__(self, session: Session):
        self.session = session

    def create(self, document: Document) -> Document:
        self.session.add(document)
        self.session.commit()
        self.session.refresh(document)
        return document

    def get_by_id(self, document_id: str) -> Optional[Document]:
        return self.session.get(Document, document_id)

    def list_by_user(self, user_id: str) -> List[Document]:
        """按上传时间倒序返回用户的文档"""
        statement = select(Document).where(
            Document.user_id == user_id
        ).order_by(col(Document.created_at).desc())
        return list(self.session.exec(statement).all())

    def update_processing(
        self,
        document_id: str,
        status: ProcessingStatus,
        chunk_count: int = 0,
        error: Optional[str] = None
    ) -> Optional[Document]:
        """
        更新入库流水线状态

        Returns:
            更新后的 Document，不存在则返回 None
        """
        document = self.get_by_id(document_id)
        if document:
            document.processing_status = status
            document.chunk_count = chunk_count
            document.processing_error = error
            self.session.add(document)
            self.session.commit()
            self.session.refresh(document)
        return document

    def delete(self, document_id: str) -> bool:
        document = self.get_by_id(document_id)
        if document:
            self.session.delete(document)
            self.session.commit()
            return True
        return False
