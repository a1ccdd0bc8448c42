"""
Supabase 客户端构造
"""

from supabase import Client, create_client


def create_supabase_client(url: str, key: str) -> Client:
    """
    创建 Supabase 客户端

    Raises:
        ValueError: URL 或密钥未配置
    """
    if not url or not key:
        raise ValueError("SUPABASE_URL 和 Supabase 密钥必须配置")
    return create_client(url, key)
