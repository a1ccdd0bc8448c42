"""
认证路由
/auth/signup、/auth/signin 不需要 token
"""

from fastapi import APIRouter, Depends

from jura.api.deps import get_container, get_current_user
from jura.api.schemas import SigninRequest, SignupRequest
from jura.container import Container
from jura.models.user import User
from jura.services.auth_service import serialize_user

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/signup", status_code=201)
def signup(body: SignupRequest, container: Container = Depends(get_container)):
    user = container.auth.sign_up(body.email, body.password)
    return serialize_user(user)


@router.post("/signin")
def signin(body: SigninRequest, container: Container = Depends(get_container)):
    result = container.auth.sign_in(body.email, body.password)
    return {"token": result["token"], "user": serialize_user(result["user"])}


@router.get("/me")
def me(user: User = Depends(get_current_user)):
    return serialize_user(user)
