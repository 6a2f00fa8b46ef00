"""EventCoordinator -- 编排层

持有任务、分类与成员的内存存储，是唯一的写入方：
- 读：每次都经聚合引擎从当前存储重新推导，不缓存派生结果
- 写：先校验前置条件（失败则不改动任何状态），再经生命周期引擎计算新值写入内存，
  最后以 fire-and-forget 方式转发给持久化协作方；持久化失败只记 warning，不回滚内存
"""

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from datetime import UTC, date, datetime
from typing import Any

import structlog

from . import aggregation, lifecycle
from .config import (
    DEFAULT_EVENT_DATE,
    DEFAULT_MEMBER_PASSWORD,
    RECENT_ACTIVITY_LIMIT,
    PhaseWeights,
)
from .exceptions import (
    AuthenticationError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from .memory import InMemoryCategoryStore, InMemoryTaskStore, InMemoryUserDirectory
from .models.category import Category
from .models.enums import Phase, Priority, Status, UserRole
from .models.summary import ActivityEntry, DerivedState, EventSummary
from .models.task import Task
from .models.user import User
from .seed import SEED_SUPER_ADMIN, seed_categories, seed_tasks, seed_users
from .session import SessionContext, authenticate

log = structlog.get_logger()


def _utcnow() -> datetime:
    return datetime.now(UTC)


class EventCoordinator:
    """活动看板协调器

    stores 为持久化协作方，需暴露 task_store / category_store / user_store
    （可选 gallery_store），每个都满足 CollectionStore 协议；
    为 None 时仅在内存中运行。
    """

    def __init__(
        self,
        stores: Any = None,
        weights: PhaseWeights | None = None,
        *,
        event_date: date = DEFAULT_EVENT_DATE,
        activity_limit: int = RECENT_ACTIVITY_LIMIT,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._stores = stores
        self._weights = weights or PhaseWeights()
        self._event_date = event_date
        self._activity_limit = activity_limit
        self._clock = clock

        self.tasks = InMemoryTaskStore()
        self.categories = InMemoryCategoryStore()
        self.users = InMemoryUserDirectory()

        self._pending: set[asyncio.Task] = set()
        self._ready = False

    @property
    def ready(self) -> bool:
        """三个集合是否都已加载（成功或降级到种子数据）"""
        return self._ready

    @property
    def weights(self) -> PhaseWeights:
        return self._weights

    @property
    def event_date(self) -> date:
        return self._event_date

    # ============================================================
    # 启动加载
    # ============================================================

    async def hydrate(self) -> None:
        """并发读取成员、分类、任务；读取失败的集合降级为种子数据

        - 成员 / 分类为空时同样使用种子数据，任务为空则保持为空
        - 成员中没有 super-admin 时追加种子 super-admin
        - 照片墙中的照片并入所属任务的附件（去重）
        """
        if self._stores is None:
            users, categories, tasks, gallery = seed_users(), seed_categories(), seed_tasks(), []
        else:
            gallery_store = getattr(self._stores, "gallery_store", None)
            users, categories, tasks, gallery = await asyncio.gather(
                self._stores.user_store.select_all(),
                self._stores.category_store.select_all(),
                self._stores.task_store.select_all(),
                gallery_store.select_all() if gallery_store is not None else _no_rows(),
                return_exceptions=True,
            )

        if isinstance(users, BaseException):
            self._log_hydrate_failure("users", users)
            users = []
        if isinstance(categories, BaseException):
            self._log_hydrate_failure("categories", categories)
            categories = []
        if isinstance(tasks, BaseException):
            self._log_hydrate_failure("tasks", tasks)
            tasks = seed_tasks()
        if isinstance(gallery, BaseException):
            self._log_hydrate_failure("gallery", gallery)
            gallery = []

        self.users.replace_all(users or seed_users())
        if not self.users.has_super_admin():
            self.users.put(SEED_SUPER_ADMIN.model_copy())
        self.categories.replace_all(categories or seed_categories())
        self.tasks.replace_all(_merge_gallery_photos(tasks, gallery))

        self._ready = True
        log.info(
            "coordinator_hydrated",
            users=len(self.users),
            categories=len(self.categories),
            tasks=len(self.tasks),
        )

    @staticmethod
    def _log_hydrate_failure(collection: str, error: BaseException) -> None:
        log.warning(
            "hydrate_collection_failed",
            collection=collection,
            error=str(error),
            error_type=type(error).__name__,
            fallback="seed",
        )

    # ============================================================
    # 读路径
    # ============================================================

    def get_derived_state(self) -> DerivedState:
        """推导后的分类 + 整体进度，每次都从当前存储重新计算"""
        return aggregation.derive_state(
            self.categories.all(),
            self.tasks.all(),
            self._weights,
        )

    def get_task(self, task_id: str) -> Task:
        task = self.tasks.get(task_id)
        if task is None:
            raise NotFoundError("Task", task_id)
        return task

    def get_category(self, category_id: str) -> Category:
        """推导后的单个分类"""
        category = self.categories.get(category_id)
        if category is None:
            raise NotFoundError("Category", category_id)
        return aggregation.derive_category(category, self.tasks.for_category(category_id))

    def category_tasks(self, category_id: str) -> list[Task]:
        if category_id not in self.categories:
            raise NotFoundError("Category", category_id)
        return self.tasks.for_category(category_id)

    def get_category_detail(self, category_id: str) -> dict:
        """分类详情页：推导后的分类 + 所属任务 + 状态统计 + 最近动态"""
        category = self.get_category(category_id)
        tasks = self.tasks.for_category(category_id)
        return {
            "category": category,
            "tasks": tasks,
            "stats": aggregation.task_stats(tasks),
            "recent_activity": aggregation.recent_activity(tasks, self._activity_limit),
        }

    def list_tasks(
        self,
        query: str | None = None,
        mine: bool = False,
        session: SessionContext | None = None,
    ) -> list[Task]:
        """任务搜索；mine=True 时非 super-admin 只看到自己负责的任务"""
        assignee = None
        if mine:
            user = self._require_user(session)
            if not user.is_super_admin:
                assignee = user.name
        return aggregation.filter_tasks(self.tasks.all(), query=query, assignee=assignee)

    def list_users(self) -> list[User]:
        return self.users.all()

    def recent_activity(
        self,
        category_id: str | None = None,
        limit: int | None = None,
    ) -> list[ActivityEntry]:
        tasks = self.category_tasks(category_id) if category_id else self.tasks.all()
        return aggregation.recent_activity(tasks, limit or self._activity_limit)

    def event_summary(self, today: date | None = None) -> EventSummary:
        state = self.get_derived_state()
        return aggregation.summarize_event(
            state.categories,
            self.tasks.all(),
            self.users.all(),
            self._event_date,
            today or self._clock().date(),
        )

    # ============================================================
    # 写路径 -- 任务
    # ============================================================

    def quick_update(self, task_id: str, session: SessionContext) -> Task:
        """快捷进度 +10%"""
        user = self._require_user(session)
        task = self.get_task(task_id)
        updated = lifecycle.apply_quick_progress_update(task, user.name, self._clock())
        self._commit_task(updated, "quick_update")
        return updated

    def record_progress(
        self,
        task_id: str,
        progress: int,
        session: SessionContext,
        message: str | None = None,
    ) -> Task:
        """手动设定进度"""
        user = self._require_user(session)
        task = self.get_task(task_id)
        updated = lifecycle.apply_manual_progress_update(
            task, progress, user.name, self._clock(), message
        )
        self._commit_task(updated, "record_progress")
        return updated

    def add_task(self, category_id: str, fields: dict, session: SessionContext) -> Task:
        """在已存在的分类下创建任务"""
        user = self._require_user(session)
        if not category_id or category_id not in self.categories:
            raise NotFoundError("Category", category_id)
        task = lifecycle.create_task(category_id, fields, user.name, self._clock().date())
        self.tasks.put(task)
        log.info("task_created", task_id=task.id, category_id=category_id, user=user.name)
        self._persist("insert", "tasks", self._stores_attr("task_store"), task)
        return task

    def edit_task(self, task_id: str, changes: dict, session: SessionContext) -> Task:
        """编辑任务描述性字段，整条 upsert"""
        self._require_user(session)
        task = self.get_task(task_id)
        new_category = changes.get("category_id")
        if new_category is not None and new_category not in self.categories:
            raise NotFoundError("Category", new_category)
        updated = lifecycle.apply_task_edit(task, changes)
        self._commit_task(updated, "edit_task")
        return updated

    def attach_photo(self, task_id: str, photo_ref: str) -> Task:
        """照片上传后追加到任务附件"""
        updated = lifecycle.attach_photo(self.get_task(task_id), photo_ref)
        self._commit_task(updated, "attach_photo")
        return updated

    def detach_photo(self, task_id: str, photo_ref: str) -> Task | None:
        """照片改挂或删除后从原任务附件中移除；任务已删除时忽略"""
        task = self.tasks.get(task_id)
        if task is None or photo_ref not in task.attachments:
            return task
        updated = lifecycle.detach_photo(task, photo_ref)
        self._commit_task(updated, "detach_photo")
        return updated

    def delete_task(self, task_id: str, session: SessionContext) -> None:
        """硬删除任务，仅 super-admin"""
        user = self._require_user(session)
        lifecycle.ensure_super_admin(user)
        self.get_task(task_id)
        self.tasks.remove(task_id)
        log.info("task_deleted", task_id=task_id, user=user.name)
        self._persist_delete("tasks", self._stores_attr("task_store"), task_id)

    def _commit_task(self, task: Task, reason: str) -> None:
        self.tasks.put(task)
        log.info(
            "task_updated",
            task_id=task.id,
            reason=reason,
            progress=task.progress,
            status=task.status.value,
        )
        self._persist("upsert", "tasks", self._stores_attr("task_store"), task)

    # ============================================================
    # 写路径 -- 分类 / 成员 / 会话
    # ============================================================

    def add_category(
        self,
        name: str,
        session: SessionContext,
        *,
        phase: Phase = Phase.PRE_EVENT,
        due_date: date | None = None,
        priority: Priority = Priority.MEDIUM,
        responsible_persons: Sequence[str] | None = None,
    ) -> Category:
        """新建分类；负责人默认为当前用户，截止日期默认为活动日"""
        user = self._require_user(session)
        name = (name or "").strip()
        if not name:
            raise ValidationError("category name is required")

        category = Category(
            id=lifecycle.generate_id("cat"),
            name=name,
            phase=phase,
            responsible_persons=list(responsible_persons or [user.name]),
            progress=0,
            status=Status.NOT_STARTED,
            due_date=due_date or self._event_date,
            priority=priority,
        )
        self.categories.put(category)
        log.info("category_created", category_id=category.id, phase=phase.value)
        self._persist("insert", "categories", self._stores_attr("category_store"), category)
        return category

    def invite_member(
        self,
        name: str,
        email: str,
        department: str,
        session: SessionContext,
        *,
        role: UserRole = UserRole.TEAM_MEMBER,
        password: str | None = None,
    ) -> User:
        """邀请成员：姓名、邮箱、部门必填"""
        self._require_user(session)
        missing = [
            field
            for field, value in (("name", name), ("email", email), ("department", department))
            if not (value or "").strip()
        ]
        if missing:
            raise ValidationError(f"missing required fields: {', '.join(missing)}")

        member = User(
            id=lifecycle.generate_id("user"),
            name=name.strip(),
            email=email.strip(),
            role=role,
            department=department.strip(),
            password=password or DEFAULT_MEMBER_PASSWORD,
        )
        self.users.put(member)
        log.info("member_invited", user_id=member.id, role=role.value)
        self._persist("insert", "users", self._stores_attr("user_store"), member)
        return member

    def remove_member(self, user_id: str, session: SessionContext) -> None:
        """移除成员，仅 super-admin，且不能移除自己"""
        user = self._require_user(session)
        lifecycle.ensure_super_admin(user)
        if user_id not in self.users:
            raise NotFoundError("User", user_id)
        if user_id == user.id:
            raise ValidationError("cannot remove the signed-in user")
        self.users.remove(user_id)
        log.info("member_removed", user_id=user_id)
        self._persist_delete("users", self._stores_attr("user_store"), user_id)

    def login(self, user_id: str, password: str, session: SessionContext) -> User:
        user = authenticate(self.users.all(), user_id, password)
        session.login(user)
        log.info("user_logged_in", user_id=user.id, role=user.role.value)
        return user

    def logout(self, session: SessionContext) -> None:
        if session.current_user is not None:
            log.info("user_logged_out", user_id=session.current_user.id)
        session.logout()

    def resume_session(self, session: SessionContext) -> User | None:
        """从会话文件恢复；以成员目录中的最新记录为准，成员已移除时清空会话"""
        restored = session.restore()
        if restored is None:
            return None
        current = self.users.get(restored.id)
        if current is None:
            log.info("session_user_missing", user_id=restored.id)
            session.logout()
            return None
        session.login(current)
        return current

    @staticmethod
    def _require_user(session: SessionContext | None) -> User:
        if session is None:
            raise AuthenticationError("sign in required")
        return session.require_user()

    # ============================================================
    # 持久化转发
    # ============================================================

    def _stores_attr(self, name: str) -> Any:
        if self._stores is None:
            return None
        return getattr(self._stores, name)

    def _persist(self, operation: str, collection: str, store: Any, item: Any) -> None:
        if store is None:
            return
        self._schedule(operation, collection, lambda: getattr(store, operation)(item))

    def _persist_delete(self, collection: str, store: Any, item_id: str) -> None:
        if store is None:
            return
        self._schedule("delete", collection, lambda: store.delete(item_id))

    def _schedule(
        self,
        operation: str,
        collection: str,
        call: Callable[[], Awaitable[Any]],
    ) -> None:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            # 同步调用方：内存变更已生效，仅跳过转发
            log.warning(
                "persistence_write_skipped",
                operation=operation,
                collection=collection,
                reason="no running event loop",
            )
            return
        task = asyncio.create_task(self._forward(operation, collection, call))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _forward(
        self,
        operation: str,
        collection: str,
        call: Callable[[], Awaitable[Any]],
    ) -> None:
        try:
            await call()
        except PersistenceError as e:
            # 内存状态保持不变，不重试
            log.warning(
                "persistence_write_failed",
                operation=operation,
                collection=collection,
                error=str(e),
            )
        except Exception as e:
            # 非 SQLite 协作方的异常同样按持久化失败处理
            log.warning(
                "persistence_write_failed",
                operation=operation,
                collection=collection,
                error=str(PersistenceError(operation, collection, e)),
                error_type=type(e).__name__,
            )

    async def drain(self) -> None:
        """等待所有已转发的持久化调用结束（关闭前 / 测试中使用）"""
        while self._pending:
            await asyncio.gather(*list(self._pending))


async def _no_rows() -> list:
    return []


def _merge_gallery_photos(tasks: list[Task], gallery: list) -> list[Task]:
    photos_by_task: dict[str, list[str]] = {}
    for item in gallery:
        photos_by_task.setdefault(item.task_id, []).append(item.photo_data)

    merged = []
    for task in tasks:
        extra = photos_by_task.get(task.id)
        if extra:
            # 保持原顺序去重
            attachments = list(dict.fromkeys([*task.attachments, *extra]))
            task = task.model_copy(update={"attachments": attachments})
        merged.append(task)
    return merged
