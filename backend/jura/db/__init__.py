"""
数据库模块
提供数据库连接、初始化和会话工厂
"""

from .init_db import init_db, get_engine, create_tables, make_session_factory, SessionFactory

__all__ = [
    "init_db",
    "get_engine",
    "create_tables",
    "make_session_factory",
    "SessionFactory",
]
