"""
用户域模型 - 用户表
外部身份提供方 (Supabase Auth) 的用户在本地的锚点
"""

from sqlmodel import Field

from .base import TimestampModel, new_id


class User(TimestampModel, table=True):
    """
    用户表
    auth_id 对应身份提供方的用户 ID，token 校验后据此查找本地用户
    """
    __tablename__ = "users"

    id: str = Field(default_factory=new_id, primary_key=True)

    # 登录邮箱，注册时检查唯一
    email: str = Field(unique=True, index=True, nullable=False)

    # 身份提供方用户 ID
    auth_id: str = Field(unique=True, index=True, nullable=False)

    organization_id: str = Field(default_factory=new_id, nullable=False)
