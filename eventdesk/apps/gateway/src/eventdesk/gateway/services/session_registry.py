"""SessionRegistry -- 每个客户端各自持有的登录会话

登录时签发随机令牌（Cookie 或 Authorization: Bearer 携带），
令牌映射到独立的 SessionContext；未携带有效令牌的请求一律视为未登录。
"""

import secrets

import structlog
from eventdesk.core.models.user import User
from eventdesk.core.session import SessionContext
from starlette.requests import Request

log = structlog.get_logger()

SESSION_COOKIE = "eventdesk_session"


def session_token(request: Request) -> str | None:
    """从 Cookie 或 Bearer 头中取会话令牌，Bearer 优先"""
    auth = request.headers.get("authorization", "")
    scheme, _, credentials = auth.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return request.cookies.get(SESSION_COOKIE) or None


class SessionRegistry:
    """进程内会话表：token -> SessionContext"""

    def __init__(self) -> None:
        self._sessions: dict[str, SessionContext] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def open(self, session: SessionContext) -> str:
        """登记一个已登录的会话，返回新令牌"""
        token = secrets.token_urlsafe(32)
        self._sessions[token] = session
        return token

    def get(self, token: str | None) -> SessionContext | None:
        if not token:
            return None
        return self._sessions.get(token)

    def resolve(self, request: Request) -> SessionContext:
        """按请求携带的令牌取会话；无令牌或令牌失效时返回一个不登记的匿名会话"""
        session = self.get(session_token(request))
        return session if session is not None else SessionContext()

    def current_user(self, request: Request) -> User | None:
        session = self.get(session_token(request))
        return session.current_user if session is not None else None

    def close(self, token: str | None) -> None:
        if token:
            self._sessions.pop(token, None)

    def drop_user(self, user_id: str) -> int:
        """成员被移除后作废其全部会话，返回作废数量"""
        tokens = [
            token
            for token, session in self._sessions.items()
            if session.current_user is not None and session.current_user.id == user_id
        ]
        for token in tokens:
            session = self._sessions.pop(token)
            session.logout()
        if tokens:
            log.info("sessions_revoked", user_id=user_id, count=len(tokens))
        return len(tokens)
