"""目标路由"""

from fastapi import APIRouter, Depends

from jura.api.deps import get_container, get_current_user
from jura.api.schemas import GoalRequest
from jura.container import Container
from jura.errors import NotFound
from jura.models.user import User

router = APIRouter(prefix="/api/v1/goals/me", tags=["Goals"])


@router.get("")
def get_my_goal(user: User = Depends(get_current_user), container: Container = Depends(get_container)):
    goal = container.goals.get(user.id)
    if goal is None:
        raise NotFound("No active goal found")
    return goal.model_dump(mode="json")


@router.post("", status_code=201)
def set_my_goal(
    body: GoalRequest,
    user: User = Depends(get_current_user),
    container: Container = Depends(get_container),
):
    return container.goals.set(user.id, body.objective).model_dump(mode="json")
