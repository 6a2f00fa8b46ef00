"""会话路由

POST /api/session: 以成员 ID + 口令登录，签发本客户端的会话令牌。
GET /api/session: 当前客户端的登录用户。
DELETE /api/session: 登出并作废令牌。
"""

from eventdesk.core.coordinator import EventCoordinator
from eventdesk.core.session import SessionContext
from fastapi import APIRouter, Depends, Request, Response
from pydantic import BaseModel, Field

from ..deps import get_coordinator, get_session, get_session_registry
from ..services.session_registry import SESSION_COOKIE, SessionRegistry, session_token

router = APIRouter()


class LoginRequest(BaseModel):
    """登录请求体"""

    user_id: str = Field(min_length=1, description="成员 ID")
    password: str = Field(description="登录口令")


@router.post("/api/session")
async def login(
    body: LoginRequest,
    request: Request,
    response: Response,
    coordinator: EventCoordinator = Depends(get_coordinator),
    registry: SessionRegistry = Depends(get_session_registry),
):
    session = SessionContext()
    user = coordinator.login(body.user_id, body.password, session)

    # 同一客户端重复登录时替换旧会话
    registry.close(session_token(request))
    token = registry.open(session)
    response.set_cookie(SESSION_COOKIE, token, httponly=True, samesite="lax")
    return {"user": user.public_view(), "token": token}


@router.get("/api/session")
async def current_session(session: SessionContext = Depends(get_session)):
    user = session.current_user
    return {
        "authenticated": user is not None,
        "user": user.public_view() if user is not None else None,
    }


@router.delete("/api/session", status_code=204)
async def logout(
    request: Request,
    coordinator: EventCoordinator = Depends(get_coordinator),
    session: SessionContext = Depends(get_session),
    registry: SessionRegistry = Depends(get_session_registry),
):
    coordinator.logout(session)
    registry.close(session_token(request))
    response = Response(status_code=204)
    response.delete_cookie(SESSION_COOKIE)
    return response
