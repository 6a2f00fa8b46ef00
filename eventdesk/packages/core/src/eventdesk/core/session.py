"""会话上下文 -- 显式传递的"当前用户"

SessionContext 在进程启动时创建，登录时填充，登出时清空；
SessionFile 把当前用户（不含口令）写入本地 JSON 文件，仅用于重新进入时免登录，
不作为权威数据。
"""

import json
import secrets
from pathlib import Path

import structlog
from pydantic import ValidationError as PydanticValidationError

from .config import SESSION_KEY
from .exceptions import AuthenticationError
from .models.user import User

log = structlog.get_logger()


class SessionFile:
    """本地会话文件：固定键下保存一条序列化的 User"""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def store(self, user: User) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(
            json.dumps({SESSION_KEY: user.public_view()}, ensure_ascii=False),
            encoding="utf-8",
        )

    def load(self) -> User | None:
        """读取会话文件；内容损坏时清除文件并视为未登录"""
        if not self._path.exists():
            return None
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
            return User.model_validate(data[SESSION_KEY])
        except (OSError, ValueError, KeyError, TypeError, PydanticValidationError) as e:
            log.warning("session_file_corrupt", path=str(self._path), error=str(e))
            self.clear()
            return None

    def clear(self) -> None:
        self._path.unlink(missing_ok=True)


class SessionContext:
    """当前会话 -- 由调用方显式持有，不存在模块级单例"""

    def __init__(self, session_file: SessionFile | None = None) -> None:
        self._session_file = session_file
        self._current_user: User | None = None

    @property
    def current_user(self) -> User | None:
        return self._current_user

    @property
    def is_authenticated(self) -> bool:
        return self._current_user is not None

    def login(self, user: User) -> None:
        self._current_user = user
        if self._session_file is not None:
            self._session_file.store(user)

    def logout(self) -> None:
        self._current_user = None
        if self._session_file is not None:
            self._session_file.clear()

    def restore(self) -> User | None:
        """从会话文件恢复当前用户"""
        if self._session_file is None:
            return None
        user = self._session_file.load()
        if user is not None:
            self._current_user = user
        return user

    def require_user(self) -> User:
        """获取当前用户

        Raises:
            AuthenticationError: 未登录
        """
        if self._current_user is None:
            raise AuthenticationError("sign in required")
        return self._current_user


def authenticate(users: list[User], user_id: str, password: str) -> User:
    """按成员 ID + 口令登录

    Raises:
        AuthenticationError: 成员不存在或口令错误
    """
    user = next((u for u in users if u.id == user_id), None)
    if user is None or not secrets.compare_digest(user.password.encode(), password.encode()):
        raise AuthenticationError("Incorrect password. Please try again.")
    return user
