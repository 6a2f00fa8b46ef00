"""CLI 入口测试 -- seed / summary / login / logout"""

import json
import sys

import pytest
from eventdesk.core import __main__ as cli
from eventdesk.core.seed import seed_categories, seed_users
from eventdesk.core.store import create_store_group


@pytest.fixture
def cli_db(monkeypatch, tmp_path):
    db_path = tmp_path / "sqlite" / "cli.db"
    monkeypatch.setenv("EVENTDESK_DB_PATH", str(db_path))
    monkeypatch.setenv("EVENTDESK_SESSION_PATH", str(tmp_path / "session.json"))
    monkeypatch.delenv("EVENTDESK_PHASE_WEIGHTS", raising=False)
    monkeypatch.delenv("EVENTDESK_EVENT_DATE", raising=False)
    return db_path


class TestSeed:
    async def test_seed_empty_database(self, cli_db, capsys):
        await cli.seed_database()

        group = await create_store_group(cli_db)
        try:
            assert len(await group.user_store.select_all()) == len(seed_users())
            assert len(await group.category_store.select_all()) == len(seed_categories())
        finally:
            await group.close()
        assert f"写入 {len(seed_users())} 名成员" in capsys.readouterr().out

    async def test_seed_is_idempotent(self, cli_db, capsys):
        await cli.seed_database()
        await cli.seed_database()

        out = capsys.readouterr().out
        assert "users 已有数据，跳过" in out
        assert "categories 已有数据，跳过" in out


class TestSummary:
    async def test_prints_overall_progress(self, cli_db, capsys):
        await cli.seed_database()
        capsys.readouterr()

        await cli.print_summary()

        out = capsys.readouterr().out
        assert "整体进度: 0%" in out
        assert "Student Club Participation (cat-001)" in out
        assert "活动日 2026-03-10" in out
        assert "当前用户: 未登录" in out


class TestLocalSession:
    async def test_login_writes_session_file(self, cli_db, tmp_path, capsys):
        assert await cli.login_local("3", "password123") is True

        data = json.loads((tmp_path / "session.json").read_text(encoding="utf-8"))
        assert data["eventdesk_user"]["name"] == "Mr. Anmol"
        assert "password" not in data["eventdesk_user"]
        assert "已登录: Mr. Anmol" in capsys.readouterr().out

    async def test_wrong_password_leaves_no_file(self, cli_db, tmp_path, capsys):
        assert await cli.login_local("3", "nope") is False

        assert not (tmp_path / "session.json").exists()
        assert "Incorrect password" in capsys.readouterr().out

    async def test_summary_resumes_local_session(self, cli_db, capsys):
        await cli.login_local("9", "admin123")
        capsys.readouterr()

        await cli.print_summary()

        assert "当前用户: Super Admin" in capsys.readouterr().out

    async def test_logout_clears_session_file(self, cli_db, tmp_path, capsys):
        await cli.login_local("3", "password123")

        cli.logout_local()

        assert not (tmp_path / "session.json").exists()
        await cli.print_summary()
        assert "当前用户: 未登录" in capsys.readouterr().out


class TestMain:
    def test_no_command_exits(self, monkeypatch):
        monkeypatch.setattr(sys, "argv", ["eventdesk"])
        with pytest.raises(SystemExit) as exc_info:
            cli.main()
        assert exc_info.value.code == 1

    def test_unknown_command_exits(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, "argv", ["eventdesk", "migrate"])
        with pytest.raises(SystemExit):
            cli.main()
        assert "未知命令: migrate" in capsys.readouterr().out

    def test_login_requires_credentials(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, "argv", ["eventdesk", "login", "3"])
        with pytest.raises(SystemExit) as exc_info:
            cli.main()
        assert exc_info.value.code == 1
        assert "login <user_id> <password>" in capsys.readouterr().out
