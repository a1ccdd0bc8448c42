"""
数据库初始化脚本
负责创建数据库引擎、表结构和会话工厂
"""

import logging
import os
from pathlib import Path
from typing import Callable, Optional

from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

# 导入模型以注册到 SQLModel.metadata
from jura import models  # noqa: F401

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], Session]


def get_database_url(db_path: Optional[str] = None) -> str:
    """
    获取数据库连接 URL
    优先使用参数，其次环境变量 DATABASE_PATH，否则使用默认的 SQLite 文件
    """
    if db_path is None:
        db_path = os.environ.get("DATABASE_PATH", "database.db")
    if db_path == ":memory:":
        return "sqlite://"
    # 确保路径是绝对路径
    if not os.path.isabs(db_path):
        # 从 backend 目录解析
        project_root = Path(__file__).parent.parent.parent
        db_path = str(project_root / db_path)
    return f"sqlite:///{db_path}"


def get_engine(db_path: Optional[str] = None):
    """
    创建并返回数据库引擎
    """
    database_url = get_database_url(db_path)
    options = {}
    if database_url == "sqlite://":
        # 内存库只有一个连接，所有线程共享
        options["poolclass"] = StaticPool
    # SQLite 配置
    engine = create_engine(
        database_url,
        echo=False,  # 设置为 True 可查看 SQL 语句
        connect_args={"check_same_thread": False},  # SQLite 特有配置
        **options
    )
    return engine


def create_tables(engine) -> None:
    """
    创建所有数据库表
    SQLModel 会自动根据模型创建表结构
    """
    SQLModel.metadata.create_all(engine)
    logger.info("Database tables created at %s", engine.url)


def make_session_factory(engine) -> SessionFactory:
    """
    创建会话工厂

    expire_on_commit=False：用例在会话关闭后仍会读取返回对象的属性
    """
    def factory() -> Session:
        return Session(engine, expire_on_commit=False)

    return factory


def init_db(db_path: Optional[str] = None):
    """
    完整的数据库初始化流程
    1. 创建数据库引擎
    2. 创建所有表结构

    Returns:
        数据库引擎
    """
    engine = get_engine(db_path)
    create_tables(engine)
    return engine


if __name__ == "__main__":
    # 直接运行此脚本时，执行数据库初始化
    logging.basicConfig(level=logging.INFO)
    init_db()
