"""
用户管理 Repository
提供 users 表的增删改查操作
"""

from typing import Optional

from sqlmodel import Session, select

from jura.models.user import User


class UserRepository:
    """
    用户数据访问对象
    封装所有与 users 表相关的数据库操作
    """

    def __init__(self, session: Session):
        """
        初始化 Repository

        Args:
            session: SQLModel 数据库会话
        """
        self.session = session

    def get_by_id(self, user_id: str) -> Optional[User]:
        """
        根据 ID 获取用户

        Args:
            user_id: 用户 ID

        Returns:
            User 对象，不存在则返回 None
        """
        return self.session.get(User, user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        """
        根据邮箱获取用户

        Args:
            email: 登录邮箱

        Returns:
            User 对象，不存在则返回 None
        """
        statement = select(User).where(User.email == email)
        return self.session.exec(statement).first()

    def get_by_auth_id(self, auth_id: str) -> Optional[User]:
        """
        根据身份提供方用户 ID 获取用户

        Args:
            auth_id: 身份提供方返回的用户 ID

        Returns:
            User 对象，不存在则返回 None
        """
        statement = select(User).where(User.auth_id == auth_id)
        return self.session.exec(statement).first()

    def create(self, email: str, auth_id: str) -> User:
        """
        创建新用户，并分配新的组织 ID

        Args:
            email: 登录邮箱（必须唯一）
            auth_id: 身份提供方用户 ID

        Returns:
            创建的 User 对象
        """
        user = User(email=email, auth_id=auth_id)
        self.session.add(user)
        self.session.commit()
        self.session.refresh(user)
        return user
