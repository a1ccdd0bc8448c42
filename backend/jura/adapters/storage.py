"""
对象存储适配器
上传原始文件并返回存储路径和公开 URL
"""

import logging
import time
from typing import Any, Protocol, Tuple

logger = logging.getLogger(__name__)


class BlobStorage(Protocol):
    """对象存储端口"""

    def upload(self, data: bytes, filename: str, content_type: str, prefix: str = "") -> Tuple[str, str]:
        """返回 (path, public_url)"""
        ...

    def delete(self, path: str) -> None:
        ...


class SupabaseStorage:
    """Supabase Storage 实现，bucket 在构造时固定"""

    provider_name = "supabase"

    def __init__(self, client: Any, bucket: str):
        self.client = client
        self.bucket = bucket

    def upload(self, data: bytes, filename: str, content_type: str, prefix: str = "") -> Tuple[str, str]:
        """
        上传文件，文件名加毫秒时间戳前缀避免覆盖

        Raises:
            RuntimeError: 上传失败
        """
        path = f"{int(time.time() * 1000)}-{filename}"
        if prefix:
            path = f"{prefix}/{path}"
        bucket = self.client.storage.from_(self.bucket)
        try:
            bucket.upload(path, data, {"content-type": content_type, "upsert": "false"})
        except Exception as e:
            raise RuntimeError(f"Failed to upload file to Supabase: {e}") from e
        public_url = bucket.get_public_url(path)
        logger.info("[SupabaseStorage] uploaded %s (%d bytes)", path, len(data))
        return path, public_url

    def delete(self, path: str) -> None:
        try:
            self.client.storage.from_(self.bucket).remove([path])
        except Exception as e:
            raise RuntimeError(f"Failed to delete file from Supabase: {e}") from e
