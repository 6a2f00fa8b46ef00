"""CLI 入口模块 -- python -m eventdesk.core <command>

支持的命令：
  seed     将内置成员与分类写入空数据库
  summary  加载数据并打印看板汇总（含本机当前登录用户）
  login    login <user_id> <password>，本机登录并写入会话文件
  logout   清除本机会话文件

会话文件只服务于本机命令行的重新进入，网关不读取它。
"""

import asyncio
import sys

from .config import (
    get_db_path,
    get_event_date,
    get_event_title,
    get_session_path,
    load_phase_weights,
)
from .coordinator import EventCoordinator
from .exceptions import AuthenticationError
from .seed import seed_categories, seed_users
from .session import SessionContext, SessionFile


def main() -> None:
    """CLI 主入口"""
    if len(sys.argv) < 2:
        print("用法: python -m eventdesk.core <command>")
        print("命令:")
        print("  seed     将内置成员与分类写入空数据库")
        print("  summary  加载数据并打印看板汇总")
        print("  login    login <user_id> <password>")
        print("  logout   清除本机会话")
        sys.exit(1)

    command = sys.argv[1]

    if command == "seed":
        asyncio.run(seed_database())
    elif command == "summary":
        asyncio.run(print_summary())
    elif command == "login":
        if len(sys.argv) != 4:
            print("用法: python -m eventdesk.core login <user_id> <password>")
            sys.exit(1)
        if not asyncio.run(login_local(sys.argv[2], sys.argv[3])):
            sys.exit(1)
    elif command == "logout":
        logout_local()
    else:
        print(f"未知命令: {command}")
        print("可用命令: seed, summary, login, logout")
        sys.exit(1)


async def seed_database() -> None:
    """写入种子数据（仅写入为空的集合）"""
    from .store import create_store_group

    db_path = get_db_path()
    print(f"数据库路径: {db_path}")

    store_group = await create_store_group(db_path)
    try:
        if await store_group.user_store.select_all():
            print("users 已有数据，跳过")
        else:
            users = seed_users()
            for user in users:
                await store_group.user_store.insert(user)
            print(f"写入 {len(users)} 名成员")

        if await store_group.category_store.select_all():
            print("categories 已有数据，跳过")
        else:
            categories = seed_categories()
            for category in categories:
                await store_group.category_store.insert(category)
            print(f"写入 {len(categories)} 个分类")
    finally:
        await store_group.close()


async def print_summary() -> None:
    """打印推导后的分类进度与整体进度"""
    from .store import create_store_group

    store_group = await create_store_group(get_db_path())
    try:
        coordinator = EventCoordinator(
            store_group,
            load_phase_weights(),
            event_date=get_event_date(),
        )
        await coordinator.hydrate()
        user = coordinator.resume_session(_local_session())

        state = coordinator.get_derived_state()
        summary = coordinator.event_summary()

        print(f"{get_event_title()} -- 活动日 {coordinator.event_date.isoformat()}")
        print(f"当前用户: {user.name}" if user is not None else "当前用户: 未登录")
        print(f"整体进度: {state.overall_progress}%")
        for phase in state.phases:
            print(
                f"  {phase.phase.value:<13} {phase.progress:6.1f}%  "
                f"权重 {phase.weight:.2f}  分类 {phase.category_count}"
            )
        print("分类:")
        for category in state.categories:
            print(
                f"  [{category.status.value:<11}] {category.progress:>3}%  "
                f"{category.name} ({category.id})"
            )
        print(
            f"任务 {summary.completed_tasks}/{summary.total_tasks} 完成，"
            f"距活动 {summary.days_to_go} 天，风险分类 {summary.at_risk} 个"
        )
    finally:
        await store_group.close()


def _local_session() -> SessionContext:
    return SessionContext(SessionFile(get_session_path()))


async def login_local(user_id: str, password: str) -> bool:
    """本机登录：校验口令后把成员（不含口令）写入会话文件"""
    from .store import create_store_group

    store_group = await create_store_group(get_db_path())
    try:
        coordinator = EventCoordinator(store_group)
        await coordinator.hydrate()
        try:
            user = coordinator.login(user_id, password, _local_session())
        except AuthenticationError as e:
            print(e.message)
            return False
        print(f"已登录: {user.name} ({user.role.value})")
        return True
    finally:
        await store_group.close()


def logout_local() -> None:
    """清除本机会话文件"""
    _local_session().logout()
    print("已登出")


if __name__ == "__main__":
    main()
