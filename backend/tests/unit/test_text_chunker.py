"""测试文本切片器"""

import pytest

from jura.rag.text_chunker import TextChunker


class TestTextChunker:

    def setup_method(self):
        self.chunker = TextChunker()

    def test_short_text_returns_single_chunk(self):
        assert self.chunker.split("hello") == ["hello"]

    def test_text_of_exactly_chunk_size_is_not_split(self):
        text = "a" * 1000
        assert self.chunker.split(text) == [text]

    def test_empty_text_returns_single_empty_chunk(self):
        assert self.chunker.split("") == [""]

    def test_long_text_windows_overlap_by_200(self):
        text = "".join(chr(ord("a") + i % 26) for i in range(1500))
        chunks = self.chunker.split(text)

        assert chunks == [text[0:1000], text[800:1500]]
        assert chunks[0][-200:] == chunks[1][:200]

    def test_windows_advance_by_800_until_end(self):
        text = "x" * 2500
        chunks = self.chunker.split(text)

        # 起点 0, 800, 1600, 2400
        assert [len(chunk) for chunk in chunks] == [1000, 1000, 900, 100]

    def test_split_is_deterministic(self):
        text = "lorem ipsum " * 300
        assert self.chunker.split(text) == self.chunker.split(text)

    def test_invalid_overlap_rejected(self):
        with pytest.raises(ValueError):
            TextChunker(chunk_size=100, overlap=100)
