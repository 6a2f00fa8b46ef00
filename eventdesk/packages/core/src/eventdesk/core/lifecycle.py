"""任务生命周期引擎 -- 计算变更后的任务新值

所有函数只构造新值，不写存储；持久化由协调层负责。
审计条目只在 updates 头部追加，历史条目保持不变。
"""

from datetime import date, datetime

from pydantic import ValidationError as PydanticValidationError
from ulid import ULID

from .config import DEFAULT_TASK_TITLE, QUICK_UPDATE_STEP
from .exceptions import AuthorizationError, ValidationError
from .models.enums import Status
from .models.task import Task, TaskUpdate
from .models.user import User

# apply_task_edit 允许修改的字段
EDITABLE_TASK_FIELDS: frozenset[str] = frozenset(
    {
        "title",
        "description",
        "assigned_to",
        "due_date",
        "category_id",
        "schedule_item_id",
    }
)


def generate_id(prefix: str) -> str:
    """生成 <prefix>-<ULID> 形式的唯一 ID（时间有序 + 随机后缀）"""
    return f"{prefix}-{ULID()}"


def _prepend_update(
    task: Task,
    *,
    acting_user: str,
    now: datetime,
    message: str,
    new_progress: int,
    new_status: Status,
) -> Task:
    entry = TaskUpdate(
        timestamp=now,
        user=acting_user,
        message=message,
        progress_before=task.progress,
        progress_after=new_progress,
    )
    return task.model_copy(
        update={
            "progress": new_progress,
            "status": new_status,
            "updates": [entry, *task.updates],
        }
    )


def apply_quick_progress_update(task: Task, acting_user: str, now: datetime) -> Task:
    """快捷进度更新：+10%，封顶 100

    blocked / not-started 一律转为 in-progress（或 completed）。
    已经是 100% 时仍追加一条 100 -> 100 的审计条目。
    """
    new_progress = min(task.progress + QUICK_UPDATE_STEP, 100)
    new_status = Status.COMPLETED if new_progress == 100 else Status.IN_PROGRESS
    return _prepend_update(
        task,
        acting_user=acting_user,
        now=now,
        message=f"Progress updated from {task.progress}% to {new_progress}%.",
        new_progress=new_progress,
        new_status=new_status,
    )


def apply_manual_progress_update(
    task: Task,
    progress: int,
    acting_user: str,
    now: datetime,
    message: str | None = None,
) -> Task:
    """手动设定进度

    Raises:
        ValidationError: progress 不是 0..100 的整数
    """
    if isinstance(progress, bool) or not isinstance(progress, int) or not 0 <= progress <= 100:
        raise ValidationError(f"progress must be an integer in [0, 100], got {progress!r}")

    if progress == 100:
        new_status = Status.COMPLETED
    elif progress == 0:
        new_status = Status.NOT_STARTED
    else:
        new_status = Status.IN_PROGRESS

    return _prepend_update(
        task,
        acting_user=acting_user,
        now=now,
        message=(message or "").strip() or f"Progress updated manually to {progress}%.",
        new_progress=progress,
        new_status=new_status,
    )


def create_task(
    category_id: str,
    fields: dict,
    acting_user: str,
    today: date,
) -> Task:
    """创建新任务

    category_id 是否存在由协调层校验；这里只拒绝空值。
    标题为空时使用占位标题，负责人为空时默认为操作者，截止日期默认为今天。
    """
    if not category_id or not category_id.strip():
        raise ValidationError("category_id is required")

    title = (fields.get("title") or "").strip() or DEFAULT_TASK_TITLE
    assigned_to = [name for name in fields.get("assigned_to") or [] if name.strip()]

    return Task(
        id=generate_id("task"),
        category_id=category_id,
        title=title,
        description=fields.get("description") or "",
        assigned_to=assigned_to or [acting_user],
        status=Status.NOT_STARTED,
        progress=0,
        due_date=fields.get("due_date") or today,
        updates=[],
        schedule_item_id=fields.get("schedule_item_id") or None,
    )


def apply_task_edit(task: Task, changes: dict) -> Task:
    """编辑任务的描述性字段，不触碰进度、状态与审计记录

    Raises:
        ValidationError: 包含不可编辑字段，或字段值不合法（如把非空字段置为 null）
    """
    unknown = set(changes) - EDITABLE_TASK_FIELDS
    if unknown:
        raise ValidationError(f"fields not editable: {', '.join(sorted(unknown))}")

    update = dict(changes)
    if "title" in update:
        update["title"] = (update["title"] or "").strip() or DEFAULT_TASK_TITLE
    if "category_id" in update and not (update["category_id"] or "").strip():
        raise ValidationError("category_id is required")

    # 审计条目原样沿用，不重新构造
    try:
        return Task.model_validate(
            {**task.model_dump(exclude={"updates"}), **update, "updates": task.updates}
        )
    except PydanticValidationError as e:
        fields = sorted({str(err["loc"][0]) for err in e.errors() if err["loc"]})
        raise ValidationError(f"invalid values for: {', '.join(fields)}") from e


def attach_photo(task: Task, photo_ref: str) -> Task:
    """在任务附件末尾追加一张照片引用"""
    return task.model_copy(update={"attachments": [*task.attachments, photo_ref]})


def detach_photo(task: Task, photo_ref: str) -> Task:
    """移除一张照片引用（同一引用出现多次时只移除第一处）"""
    attachments = list(task.attachments)
    if photo_ref in attachments:
        attachments.remove(photo_ref)
    return task.model_copy(update={"attachments": attachments})


def ensure_super_admin(user: User) -> None:
    """删除类操作的唯一角色检查

    Raises:
        AuthorizationError: 非 super-admin
    """
    if not user.is_super_admin:
        raise AuthorizationError(f"user {user.name} is not allowed to perform this action")
