"""EventDesk 核心异常体系

ValidationError / AuthorizationError 在状态变更前同步抛出，保证全有或全无；
PersistenceError / UpstreamServiceError 在边界处捕获并降级为 warning 日志。
"""


class EventDeskError(Exception):
    """EventDesk 基础异常"""

    code: str = "EVENTDESK_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(EventDeskError):
    """变更请求的输入缺失或非法"""

    code = "VALIDATION_ERROR"


class NotFoundError(ValidationError):
    """引用了不存在的任务、分类或成员"""

    code = "NOT_FOUND"

    def __init__(self, kind: str, item_id: str) -> None:
        super().__init__(f"{kind} with id {item_id} does not exist")
        self.kind = kind
        self.item_id = item_id


class AuthorizationError(EventDeskError):
    """当前用户角色不足以执行该操作"""

    code = "FORBIDDEN"


class AuthenticationError(EventDeskError):
    """未登录或凭据错误"""

    code = "UNAUTHENTICATED"


class PersistenceError(EventDeskError):
    """持久化协作方写入或读取失败

    协调层捕获后仅记录日志，内存状态仍视为本次会话的事实来源。
    """

    code = "PERSISTENCE_UNAVAILABLE"

    def __init__(self, operation: str, collection: str, original_error: Exception) -> None:
        super().__init__(f"{collection}.{operation} 失败: {original_error}")
        self.operation = operation
        self.collection = collection
        self.original_error = original_error


class UpstreamServiceError(EventDeskError):
    """AI 文本生成服务失败或返回空内容"""

    code = "UPSTREAM_UNAVAILABLE"
