"""
外部服务适配器
Supabase 客户端、对象存储、PDF 解析和身份认证
"""

from .supabase_client import create_supabase_client
from .storage import BlobStorage, SupabaseStorage
from .pdf_parser import DocumentParser, PdfParser, PDF_MIME_TYPE
from .auth_provider import AuthProvider, AuthProviderError, AuthIdentity, SupabaseAuthProvider

__all__ = [
    "create_supabase_client",
    "BlobStorage", "SupabaseStorage",
    "DocumentParser", "PdfParser", "PDF_MIME_TYPE",
    "AuthProvider", "AuthProviderError", "AuthIdentity", "SupabaseAuthProvider",
]
