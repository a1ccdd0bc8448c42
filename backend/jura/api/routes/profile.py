"""
画像路由
当前用户的职业画像读写，以及工作经历的增删改
"""

from fastapi import APIRouter, Depends

from jura.api.deps import get_container, get_current_user
from jura.api.schemas import ProfileUpdateRequest, RoleRequest, RoleUpdateRequest
from jura.container import Container
from jura.models.user import User

router = APIRouter(prefix="/api/v1/profile/me", tags=["Profile"])


@router.get("")
def get_my_profile(user: User = Depends(get_current_user), container: Container = Depends(get_container)):
    return container.profiles.get(user.id).to_dict()


@router.patch("")
def update_my_profile(
    body: ProfileUpdateRequest,
    user: User = Depends(get_current_user),
    container: Container = Depends(get_container),
):
    return container.profiles.update(user.id, body.model_dump(exclude_unset=True)).to_dict()


@router.post("/roles", status_code=201)
def add_role(
    body: RoleRequest,
    user: User = Depends(get_current_user),
    container: Container = Depends(get_container),
):
    return container.profiles.add_role(user.id, body.model_dump(exclude_none=True)).to_dict()


@router.patch("/roles/{role_id}")
def update_role(
    role_id: str,
    body: RoleUpdateRequest,
    user: User = Depends(get_current_user),
    container: Container = Depends(get_container),
):
    return container.profiles.update_role(user.id, role_id, body.model_dump(exclude_unset=True)).to_dict()


@router.delete("/roles/{role_id}")
def delete_role(
    role_id: str,
    user: User = Depends(get_current_user),
    container: Container = Depends(get_container),
):
    return container.profiles.delete_role(user.id, role_id).to_dict()
