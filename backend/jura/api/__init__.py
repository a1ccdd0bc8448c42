"""
HTTP 接口层
FastAPI 应用、鉴权依赖、请求模型和路由
"""

from .app import create_app

__all__ = ["create_app"]
