"""
文本切片器
按固定字符窗口切分解析后的文档文本，相邻窗口有固定重叠
"""

from typing import List

CHUNK_SIZE = 1000
CHUNK_OVERLAP = 200


class TextChunker:
    """
    基于字符偏移的切片器，不感知句子和 token

    切片覆盖全部输入且无空隙，相邻切片共享 overlap 个字符
    （最后一片可能更短）
    """

    def __init__(self, chunk_size: int = CHUNK_SIZE, overlap: int = CHUNK_OVERLAP):
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        if not 0 <= overlap < chunk_size:
            raise ValueError("overlap must be in [0, chunk_size)")
        self.chunk_size = chunk_size
        self.overlap = overlap

    def split(self, text: str) -> List[str]:
        """
        切分文本

        Args:
            text: 原始文本

        Returns:
            切片列表；长度不超过 chunk_size 时返回只含原文的单元素列表
        """
        if len(text) <= self.chunk_size:
            return [text]

        step = self.chunk_size - self.overlap
        chunks = []
        start = 0
        while start < len(text):
            chunks.append(text[start:start + self.chunk_size])
            start += step
        return chunks
