"""Tests for the console view and REPL command handling."""

from __future__ import annotations

import io

import pytest

from memoapp.core import MemoApp
from memoapp.models import Category, EditBuffer, Memo, SessionPhase, Snapshot
from memoapp.views.base import ViewProjector
from memoapp.views.console import ConsoleRepl, ConsoleView, format_snapshot

from fakes import FakeStore

TOKEN = "123e4567-e89b-42d3-a456-426614174000"


class TestFormatSnapshot:
    def test_logged_out(self):
        text = format_snapshot(Snapshot(login_enabled=True))
        assert "logged out" in text
        assert "login button enabled" in text

    def test_active_with_detail(self):
        snap = Snapshot(
            session_phase=SessionPhase.ACTIVE,
            categories=(Category(1, "Personal"), Category(2, "Restaurants")),
            selected_category_id=2,
            selected_category_name="Restaurants",
            memos=(Memo(10, 2, "Blue Plate"),),
            selected_memo_id=10,
            memo_edit_buffer=EditBuffer("Blue Plate", "A diner."),
            detail_open=True,
            degraded=True,
            last_error="transport error: refused",
        )
        text = format_snapshot(snap)
        assert "v 2: Restaurants" in text
        assert "> 1: Personal" in text
        assert "* 10: Blue Plate" in text
        assert "Content: A diner." in text
        assert "degraded: transport error: refused" in text

    def test_empty_category(self):
        snap = Snapshot(session_phase=SessionPhase.ACTIVE, selected_category_id=3)
        assert "(none)" in format_snapshot(snap)


class TestConsoleView:
    def test_is_view_projector(self):
        assert isinstance(ConsoleView(), ViewProjector)

    def test_skips_unchanged_output(self):
        out = io.StringIO()
        view = ConsoleView(out)
        view.render(Snapshot())
        view.render(Snapshot())
        assert out.getvalue().count("logged out") == 1


class TestConsoleRepl:
    @pytest.mark.asyncio
    async def test_commands_drive_app(self, capsys):
        store = FakeStore(categories=[Category(1, "Personal")], memos=[Memo(20, 1, "Groceries", "milk")])
        app = MemoApp(store)
        repl = ConsoleRepl(app)

        await repl.handle(f"login {TOKEN}")
        await repl.handle("open 1")
        await repl.handle("memo 20")
        await repl.handle('title "Weekly groceries"')
        await repl.handle("save")
        assert store.memos[20].title == "Weekly groceries"

        await repl.handle("add buy eggs")
        assert len(app.snapshot().memos) == 2
        await repl.handle("delete")
        assert len(app.snapshot().memos) == 1

        await repl.handle("show")
        assert "Personal" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_invalid_token_message(self, capsys):
        repl = ConsoleRepl(MemoApp(FakeStore()))
        await repl.handle("login not-a-token")
        assert "Invalid access token" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_unknown_command(self, capsys):
        repl = ConsoleRepl(MemoApp(FakeStore()))
        await repl.handle("frobnicate")
        assert "Unknown command" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_unbalanced_quotes(self, capsys):
        repl = ConsoleRepl(MemoApp(FakeStore()))
        await repl.handle('title "oops')
        assert "Cannot parse" in capsys.readouterr().out
