"""
职业画像 Repository
提供 profiles 表的读写操作
"""

from typing import Optional

from sqlmodel import Session, select

from jura.models.profile import Profile


class ProfileRepository:
    """
    画像数据访问对象
    每个用户一份画像，嵌套字段整体读写
    """

    def __init__(self, session: Session):
        """
        初始化 Repository

        Args:
            session: SQLModel 数据库会话
        """
        self.session = session

    def get_by_user(self, user_id: str) -> Optional[Profile]:
        """
        获取用户画像

        Args:
            user_id: 用户 ID

        Returns:
            Profile 对象，不存在则返回 None
        """
        statement = select(Profile).where(Profile.user_id == user_id)
        return self.session.exec(statement).first()

    def create(self, user_id: str, email: str = "") -> Profile:
        """
        创建空画像，basics.email 取自用户账号

        Args:
            user_id: 用户 ID
            email: 用户邮箱，可为空字符串

        Returns:
            创建的 Profile 对象
        """
        profile = Profile(user_id=user_id, basics={"email": email})
        self.session.add(profile)
        self.session.commit()
        self.session.refresh(profile)
        return profile

    def save(self, profile: Profile) -> Profile:
        """
        保存画像

        JSON 列需要赋值新对象才能被识别为已修改，调用方应替换而不是原地修改嵌套结构
        """
        self.session.add(profile)
        self.session.commit()
        self.session.refresh(profile)
        return profile
