"""
Agent 配置 Repository
提供 agents 表的增删改查操作
"""

from typing import Any, Dict, List, Optional

from sqlmodel import Session, select, col, or_

from jura.models.agent import Agent, AgentStatus, AgentType


class AgentRepository:
    """
    Agent 数据访问对象
    """

    def __init__(self, session: Session):
        """
        初始化 Repository

        Args:
            session: SQLModel 数据库会话
        """
        self.session = session

    def create(
        self,
        user_id: str,
        name: str,
        configuration: Dict[str, Any],
        agent_type: AgentType = AgentType.PRIVATE,
        is_default: bool = False
    ) -> Agent:
        """
        创建 Agent

        Args:
            user_id: 所有者 ID
            name: Agent 名称
            configuration: {system_prompt, tone, enable_threads, version}
            agent_type: 可见性
            is_default: 是否为用户的默认 Agent

        Returns:
            创建的 Agent 对象
        """
        agent = Agent(
            user_id=user_id,
            name=name,
            type=agent_type,
            status=AgentStatus.ACTIVE,
            configuration=configuration,
            is_default=is_default
        )
        self.session.add(agent)
        self.session.commit()
        self.session.refresh(agent)
        return agent

    def get_by_id(self, agent_id: str) -> Optional[Agent]:
        return self.session.get(Agent, agent_id)

    def list_accessible(self, user_id: str) -> List[Agent]:
        """
        获取用户可用的 Agent：自己的全部 Agent 加上所有 PUBLIC Agent

        Args:
            user_id: 用户 ID

        Returns:
            按创建时间排序的 Agent 列表
        """
        statement = select(Agent).where(
            or_(Agent.user_id == user_id, Agent.type == AgentType.PUBLIC)
        ).order_by(col(Agent.created_at).asc())
        return list(self.session.exec(statement).all())

    def list_by_user(self, user_id: str) -> List[Agent]:
        statement = select(Agent).where(
            Agent.user_id == user_id
        ).order_by(col(Agent.created_at).asc())
        return list(self.session.exec(statement).all())
