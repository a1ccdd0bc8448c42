"""
文档入库路由
只接受 PDF，大小受 MAX_UPLOAD_BYTES 限制
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from jura.adapters.pdf_parser import PDF_MIME_TYPE
from jura.api.deps import get_container, get_current_user
from jura.container import Container
from jura.errors import ValidationFailed
from jura.models.document import DocumentCategory
from jura.models.user import User

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/ingest", tags=["Documents"])

CATEGORIES = [category.value for category in DocumentCategory]


@router.post("")
def upload_document(
    file: Optional[UploadFile] = File(default=None),
    category: Optional[str] = Form(default=None),
    user: User = Depends(get_current_user),
    container: Container = Depends(get_container),
):
    if file is None:
        raise ValidationFailed("No file provided")
    if category not in CATEGORIES:
        raise ValidationFailed(errors=[{
            "field": "category",
            "message": f"Category must be one of: {', '.join(CATEGORIES)}",
        }])
    if file.content_type != PDF_MIME_TYPE:
        raise ValidationFailed("Only PDF files are allowed")

    data = file.file.read(container.settings.max_upload_bytes + 1)
    if len(data) > container.settings.max_upload_bytes:
        raise ValidationFailed("File too large")

    document = container.documents.upload(
        user.id, data, file.filename or "document.pdf", file.content_type, DocumentCategory(category)
    )
    return {"message": "File uploaded successfully", "document": document.model_dump(mode="json")}


@router.get("")
def list_documents(user: User = Depends(get_current_user), container: Container = Depends(get_container)):
    documents = container.documents.list(user.id)
    return {"documents": [document.model_dump(mode="json") for document in documents]}


@router.delete("/{document_id}")
def delete_document(
    document_id: str,
    user: User = Depends(get_current_user),
    container: Container = Depends(get_container),
):
    container.documents.delete(user.id, document_id)
    return {"message": "Document deleted successfully"}
