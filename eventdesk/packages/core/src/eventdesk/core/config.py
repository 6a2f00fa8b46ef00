"""配置常量模块 -- 可通过环境变量覆盖

包含数据库路径、会话文件路径、活动日期、阶段权重、快捷进度步长等可配置常量。
"""

import os
from datetime import date
from pathlib import Path

import structlog
from pydantic import BaseModel, Field, ValidationError, model_validator

log = structlog.get_logger()


def _get_base_dir() -> Path:
    """获取项目 data 基础目录"""
    return Path(os.environ.get("EVENTDESK_DATA_DIR", "data"))


def get_db_path() -> str:
    """获取 SQLite 数据库路径"""
    return os.environ.get(
        "EVENTDESK_DB_PATH",
        str(_get_base_dir() / "sqlite" / "eventdesk.db"),
    )


def get_session_path() -> Path:
    """获取本地会话文件路径"""
    return Path(
        os.environ.get(
            "EVENTDESK_SESSION_PATH",
            str(_get_base_dir() / "session.json"),
        )
    )


def get_event_title() -> str:
    """获取活动名称（用于 AI 提示词与 CLI 输出）"""
    return os.environ.get("EVENTDESK_EVENT_TITLE", "IIT Madras Talk")


def get_event_date() -> date:
    """获取活动日期，非法值降级为默认日期"""
    raw = os.environ.get("EVENTDESK_EVENT_DATE", DEFAULT_EVENT_DATE.isoformat())
    try:
        return date.fromisoformat(raw)
    except ValueError:
        log.warning(
            "invalid_event_date_config",
            env_var="EVENTDESK_EVENT_DATE",
            value=raw,
            fallback=DEFAULT_EVENT_DATE.isoformat(),
        )
        return DEFAULT_EVENT_DATE


def get_activity_limit() -> int:
    """获取最近动态条数上限"""
    raw = os.environ.get("EVENTDESK_ACTIVITY_LIMIT", str(RECENT_ACTIVITY_LIMIT))
    try:
        return max(int(raw), 1)
    except ValueError:
        log.warning(
            "invalid_activity_limit_config",
            env_var="EVENTDESK_ACTIVITY_LIMIT",
            value=raw,
            fallback=RECENT_ACTIVITY_LIMIT,
        )
        return RECENT_ACTIVITY_LIMIT


class PhaseWeights(BaseModel):
    """阶段权重 -- 整体进度 = Σ 阶段均值 × 权重

    默认 60/20/20：大部分筹备工作发生在活动之前。
    """

    pre_event: float = Field(default=0.6, ge=0.0, le=1.0, description="活动前阶段权重")
    during_event: float = Field(default=0.2, ge=0.0, le=1.0, description="活动中阶段权重")
    post_event: float = Field(default=0.2, ge=0.0, le=1.0, description="活动后阶段权重")

    @model_validator(mode="after")
    def _check_total(self) -> "PhaseWeights":
        total = self.pre_event + self.during_event + self.post_event
        if abs(total - 1.0) > 1e-6:
            raise ValueError(f"阶段权重之和必须为 1，当前为 {total}")
        return self


def load_phase_weights() -> PhaseWeights:
    """从环境变量加载阶段权重

    EVENTDESK_PHASE_WEIGHTS 格式: "0.6,0.2,0.2"（pre,during,post）。
    解析或校验失败时记录 warning 并使用默认权重，不阻塞启动。
    """
    raw = os.environ.get("EVENTDESK_PHASE_WEIGHTS")
    if not raw:
        return PhaseWeights()

    try:
        pre, during, post = (float(part) for part in raw.split(","))
        return PhaseWeights(pre_event=pre, during_event=during, post_event=post)
    except (ValueError, ValidationError) as e:
        log.warning(
            "invalid_phase_weights_config",
            env_var="EVENTDESK_PHASE_WEIGHTS",
            value=raw,
            error=str(e),
        )
        return PhaseWeights()


# 默认活动日期
DEFAULT_EVENT_DATE: date = date(2026, 3, 10)

# 快捷更新每次增加的进度百分比
QUICK_UPDATE_STEP: int = 10

# 新建任务标题为空时的占位标题
DEFAULT_TASK_TITLE: str = "Untitled Task"

# 概览页最近动态条数
RECENT_ACTIVITY_LIMIT: int = 4

# 邀请成员未指定密码时的初始密码
DEFAULT_MEMBER_PASSWORD: str = "password123"

# 本地会话文件中保存用户记录的固定键
SESSION_KEY: str = "eventdesk_user"
