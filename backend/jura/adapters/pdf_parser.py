"""
PDF 文本提取
"""

from typing import Protocol

import fitz  # PyMuPDF

PDF_MIME_TYPE = "application/pdf"


class DocumentParser(Protocol):
    def parse(self, data: bytes, mime_type: str) -> str:
        ...


class PdfParser:
    """基于 PyMuPDF 的 PDF 解析器，逐页提取纯文本"""

    def parse(self, data: bytes, mime_type: str) -> str:
        """
        Args:
            data: 文件字节
            mime_type: MIME 类型，只接受 application/pdf

        Returns:
            各页文本按换行拼接

        Raises:
            ValueError: 不支持的 MIME 类型
            RuntimeError: PDF 解析失败
        """
        if mime_type != PDF_MIME_TYPE:
            raise ValueError(f"Unsupported mime type: {mime_type}")
        try:
            with fitz.open(stream=data, filetype="pdf") as doc:
                return "\n".join(page.get_text("text") for page in doc)
        except Exception as e:
            raise RuntimeError(f"Failed to parse PDF: {e}") from e
