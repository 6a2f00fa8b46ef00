"""聚合引擎 -- 从任务推导分类状态，从分类推导整体进度

全部为纯函数：无副作用、无缓存，每次读取都基于当前任务集合重新计算。
分类的 progress / status 只在读取时投影，不回写存储。
"""

import math
from collections.abc import Iterable, Sequence
from datetime import date

from .config import PhaseWeights
from .models.agenda import ScheduleItem
from .models.category import Category
from .models.enums import PHASE_ORDER, Phase, Status
from .models.summary import (
    ActivityEntry,
    DerivedState,
    EventSummary,
    PhaseSummary,
    TaskStats,
)
from .models.task import Task
from .models.user import User

_PHASE_WEIGHT_FIELDS: dict[Phase, str] = {
    Phase.PRE_EVENT: "pre_event",
    Phase.DURING_EVENT: "during_event",
    Phase.POST_EVENT: "post_event",
}


def round_half_up(value: float) -> int:
    """四舍五入到整数（.5 一律进位）

    内置 round() 为银行家舍入，这里不能使用。
    """
    # 先截断到 9 位小数，消除 0.6 * 90 这类浮点误差
    return math.floor(round(value, 9) + 0.5)


def _mean_half_up(values: Sequence[int]) -> int:
    """整数序列均值，按 half-up 取整（纯整数运算）"""
    count = len(values)
    return (2 * sum(values) + count) // (2 * count)


def derive_category(category: Category, tasks_of_category: Sequence[Task]) -> Category:
    """根据分类下的任务推导分类进度与状态

    Args:
        category: 分类（存储值）
        tasks_of_category: category_id 等于该分类 id 的任务，可为空

    Returns:
        无任务时原样返回；否则返回 progress / status 被替换后的新分类。
        一个 blocked 任务即阻塞整个分类；completed 需全部任务完成；
        存在任务时分类状态不会是 not-started。
    """
    if not tasks_of_category:
        return category

    progress = _mean_half_up([t.progress for t in tasks_of_category])

    if any(t.status == Status.BLOCKED for t in tasks_of_category):
        status = Status.BLOCKED
    elif all(t.status == Status.COMPLETED for t in tasks_of_category):
        status = Status.COMPLETED
    else:
        status = Status.IN_PROGRESS

    return category.model_copy(update={"progress": progress, "status": status})


def derive_categories(
    categories: Iterable[Category],
    tasks: Iterable[Task],
) -> list[Category]:
    """对所有分类执行 derive_category，任务按 category_id 分组"""
    by_category: dict[str, list[Task]] = {}
    for task in tasks:
        by_category.setdefault(task.category_id, []).append(task)

    return [derive_category(c, by_category.get(c.id, [])) for c in categories]


def phase_progress(derived_categories: Iterable[Category], phase: Phase) -> float:
    """阶段内分类进度的算术均值，阶段为空时为 0"""
    members = [c.progress for c in derived_categories if c.phase == phase]
    if not members:
        return 0.0
    return sum(members) / len(members)


def summarize_phases(
    derived_categories: Sequence[Category],
    weights: PhaseWeights,
) -> list[PhaseSummary]:
    """按固定阶段顺序输出阶段汇总"""
    return [
        PhaseSummary(
            phase=phase,
            progress=phase_progress(derived_categories, phase),
            weight=getattr(weights, _PHASE_WEIGHT_FIELDS[phase]),
            category_count=sum(1 for c in derived_categories if c.phase == phase),
        )
        for phase in PHASE_ORDER
    ]


def derive_overall_progress(
    derived_categories: Sequence[Category],
    weights: PhaseWeights | None = None,
) -> int:
    """整体进度 = Σ 阶段均值 × 阶段权重，结果 half-up 取整

    Args:
        derived_categories: 已推导的分类
        weights: 阶段权重，None 时使用默认 60/20/20
    """
    weights = weights or PhaseWeights()
    weighted = sum(
        phase_progress(derived_categories, phase) * getattr(weights, field)
        for phase, field in _PHASE_WEIGHT_FIELDS.items()
    )
    return round_half_up(weighted)


def derive_state(
    categories: Sequence[Category],
    tasks: Sequence[Task],
    weights: PhaseWeights | None = None,
) -> DerivedState:
    """看板读路径：推导分类 + 整体进度 + 阶段汇总"""
    weights = weights or PhaseWeights()
    derived = derive_categories(categories, tasks)
    return DerivedState(
        categories=derived,
        overall_progress=derive_overall_progress(derived, weights),
        phases=summarize_phases(derived, weights),
    )


# ============================================================
# 读侧辅助视图
# ============================================================


def task_stats(tasks: Iterable[Task]) -> TaskStats:
    """按状态统计任务数量"""
    stats = TaskStats()
    for task in tasks:
        stats.total += 1
        if task.status == Status.NOT_STARTED:
            stats.not_started += 1
        elif task.status == Status.IN_PROGRESS:
            stats.in_progress += 1
        elif task.status == Status.COMPLETED:
            stats.completed += 1
        elif task.status == Status.BLOCKED:
            stats.blocked += 1
    return stats


def filter_tasks(
    tasks: Iterable[Task],
    query: str | None = None,
    assignee: str | None = None,
) -> list[Task]:
    """任务搜索

    Args:
        tasks: 任务集合
        query: 关键字，大小写不敏感匹配标题、描述与负责人
        assignee: 非空时仅保留该成员负责的任务
    """
    needle = (query or "").strip().lower()
    result = []
    for task in tasks:
        if assignee is not None and assignee not in task.assigned_to:
            continue
        if needle:
            haystacks = [task.title, task.description, *task.assigned_to]
            if not any(needle in h.lower() for h in haystacks):
                continue
        result.append(task)
    return result


def recent_activity(tasks: Iterable[Task], limit: int) -> list[ActivityEntry]:
    """汇总所有任务的审计条目，按时间倒序取前 limit 条"""
    entries = [
        ActivityEntry(
            task_id=task.id,
            task_title=task.title,
            timestamp=update.timestamp,
            user=update.user,
            message=update.message,
            progress_before=update.progress_before,
            progress_after=update.progress_after,
        )
        for task in tasks
        for update in task.updates
    ]
    entries.sort(key=lambda e: e.timestamp, reverse=True)
    return entries[:limit]


def schedule_progress(
    schedule: Iterable[ScheduleItem],
    tasks: Sequence[Task],
) -> dict[str, int]:
    """日程条目进度：关联任务进度均值，无关联任务时为 0"""
    result: dict[str, int] = {}
    for item in schedule:
        linked = [t.progress for t in tasks if t.schedule_item_id == item.id]
        result[item.id] = _mean_half_up(linked) if linked else 0
    return result


def active_schedule_index(
    schedule: Sequence[ScheduleItem],
    progress_by_item: dict[str, int],
) -> int:
    """当前进行中的日程下标：第一个未满 100% 的条目，全部完成时为最后一条"""
    if not schedule:
        return 0
    for index, item in enumerate(schedule):
        if progress_by_item.get(item.id, 0) < 100:
            return index
    return len(schedule) - 1


def summarize_event(
    derived_categories: Sequence[Category],
    tasks: Sequence[Task],
    users: Sequence[User],
    event_date: date,
    today: date,
) -> EventSummary:
    """活动总览指标"""
    authors = {update.user for task in tasks for update in task.updates}
    return EventSummary(
        completed_tasks=sum(1 for t in tasks if t.status == Status.COMPLETED),
        total_tasks=len(tasks),
        days_to_go=(event_date - today).days,
        active_team=len(authors) if authors else len(users),
        at_risk=sum(1 for c in derived_categories if c.status == Status.BLOCKED),
    )
