"""
数据库初始化单元测试
验证连接 URL 解析、表创建和会话工厂
"""

import threading

from sqlmodel import select

from jura.db.init_db import create_tables, get_database_url, get_engine, init_db, make_session_factory
from jura.models import Agent, ChatMessage, Conversation, Document, Profile, User, UserGoal


class TestDatabaseInit:
    """测试数据库初始化"""

    def test_memory_url(self):
        assert get_database_url(":memory:") == "sqlite://"

    def test_relative_path_resolved_from_backend(self):
        url = get_database_url("data/test.db")
        assert url.startswith("sqlite:///")
        assert url.endswith("data/test.db")
        assert url != "sqlite:///data/test.db"

    def test_absolute_path_kept(self, tmp_path):
        path = str(tmp_path / "jura.db")
        assert get_database_url(path) == f"sqlite:///{path}"

    def test_env_var_fallback(self, monkeypatch, tmp_path):
        path = str(tmp_path / "env.db")
        monkeypatch.setenv("DATABASE_PATH", path)
        assert get_database_url() == f"sqlite:///{path}"

    def test_create_tables(self):
        """测试创建所有表（查询不报错）"""
        engine = get_engine(":memory:")
        create_tables(engine)

        factory = make_session_factory(engine)
        with factory() as session:
            for model in (User, Profile, UserGoal, Document, Agent, Conversation, ChatMessage):
                assert session.exec(select(model)).all() == []

    def test_init_db_file(self, tmp_path):
        engine = init_db(str(tmp_path / "jura.db"))
        assert (tmp_path / "jura.db").exists()
        engine.dispose()

    def test_memory_database_shared_across_threads(self):
        """内存库在请求线程之间共享同一连接"""
        engine = get_engine(":memory:")
        create_tables(engine)
        factory = make_session_factory(engine)

        def create_user():
            with factory() as session:
                session.add(User(email="thread@example.com", auth_id="auth-thread"))
                session.commit()

        worker = threading.Thread(target=create_user)
        worker.start()
        worker.join()

        with factory() as session:
            assert session.exec(select(User)).first().email == "thread@example.com"

    def test_objects_readable_after_session_closes(self, session_factory):
        with session_factory() as session:
            user = User(email="closed@example.com", auth_id="auth-closed")
            session.add(user)
            session.commit()
        assert user.email == "closed@example.com"
