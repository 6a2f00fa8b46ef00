"""团队成员路由

GET /api/team: 成员列表（不含口令）。
POST /api/team: 邀请成员。
DELETE /api/team/{user_id}: 移除成员（super-admin）。
"""

from eventdesk.core.coordinator import EventCoordinator
from eventdesk.core.models import UserRole
from eventdesk.core.session import SessionContext
from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel

from ..deps import get_coordinator, get_session, get_session_registry
from ..services.session_registry import SessionRegistry

router = APIRouter()


class InviteRequest(BaseModel):
    """邀请成员请求体 -- 必填项的空值校验由协调器完成"""

    name: str = ""
    email: str = ""
    department: str = ""
    role: UserRole = UserRole.TEAM_MEMBER
    password: str | None = None


@router.get("/api/team")
async def list_team(coordinator: EventCoordinator = Depends(get_coordinator)):
    return {"members": [u.public_view() for u in coordinator.list_users()]}


@router.post("/api/team", status_code=201)
async def invite_member(
    body: InviteRequest,
    coordinator: EventCoordinator = Depends(get_coordinator),
    session: SessionContext = Depends(get_session),
):
    member = coordinator.invite_member(
        body.name,
        body.email,
        body.department,
        session,
        role=body.role,
        password=body.password,
    )
    return {"member": member.public_view()}


@router.delete("/api/team/{user_id}", status_code=204)
async def remove_member(
    user_id: str,
    coordinator: EventCoordinator = Depends(get_coordinator),
    session: SessionContext = Depends(get_session),
    registry: SessionRegistry = Depends(get_session_registry),
):
    coordinator.remove_member(user_id, session)
    registry.drop_user(user_id)
    return Response(status_code=204)
