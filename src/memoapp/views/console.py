"""Console rendering surface and REPL for development and testing."""

from __future__ import annotations

import asyncio
import logging
import shlex
import sys
from typing import TYPE_CHECKING, TextIO

from memoapp.models import Identifier, SessionPhase, Snapshot

if TYPE_CHECKING:
    from memoapp.core import MemoApp

logger = logging.getLogger(__name__)

HELP = """\
Commands:
  login <token>        log in with an access token
  open <category-id>   open (or collapse) a category
  memo <memo-id>       open a memo
  new                  create a blank memo in the open category
  add <text>           create a memo with the given content
  title <text>         edit the open memo's title
  content <text>       edit the open memo's content
  save                 save the open memo
  delete               delete the open memo
  show                 print the current state
  exit                 quit"""


def format_snapshot(snap: Snapshot) -> str:
    """Render a snapshot as plain text."""
    lines: list[str] = []
    if snap.session_phase is not SessionPhase.ACTIVE:
        state = "logging in..." if snap.session_phase is SessionPhase.PENDING else "logged out"
        login = "enabled" if snap.login_enabled else "disabled"
        lines.append(f"[{state}] login button {login}")
    else:
        lines.append("Categories:")
        for category in snap.categories:
            marker = "v" if category.id == snap.selected_category_id else ">"
            lines.append(f"  {marker} {category.id}: {category.name}")

    if snap.selected_category_id is not None:
        name = snap.selected_category_name or snap.selected_category_id
        lines.append(f"Memos in {name}:")
        for memo in snap.memos:
            marker = "*" if memo.id == snap.selected_memo_id else "-"
            lines.append(f"  {marker} {memo.id}: {memo.title}")
        if not snap.memos:
            lines.append("  (none)")

    if snap.detail_open:
        lines.append(f"Title:   {snap.memo_edit_buffer.title}")
        lines.append(f"Content: {snap.memo_edit_buffer.content}")

    if snap.degraded:
        lines.append(f"! degraded: {snap.last_error or 'remote unavailable'}")
    return "\n".join(lines)


class ConsoleView:
    """Prints each snapshot that differs from the previous one."""

    def __init__(self, out: TextIO | None = None) -> None:
        self._out = out
        self._last: str | None = None

    def render(self, snapshot: Snapshot) -> None:
        text = format_snapshot(snapshot)
        if text == self._last:
            return
        self._last = text
        print(f"\n{text}", file=self._out or sys.stdout)


def _parse_id(raw: str) -> Identifier:
    return int(raw) if raw.isdigit() else raw


class ConsoleRepl:
    """Interactive REPL: reads commands from stdin and drives a MemoApp."""

    def __init__(self, app: MemoApp) -> None:
        self._app = app
        self._running = False

    async def start(self) -> None:
        self._running = True
        loop = asyncio.get_running_loop()

        print("Memo App (type 'help' for commands, 'exit' or Ctrl+C to quit)")
        print("-" * 48)

        while self._running:
            try:
                line = await loop.run_in_executor(None, self._read_input)
            except (EOFError, KeyboardInterrupt):
                print("\nBye!")
                break

            if line is None or line.strip().lower() in ("exit", "quit"):
                print("Bye!")
                break

            text = line.strip()
            if not text:
                continue
            await self.handle(text)

    async def handle(self, text: str) -> None:
        """Run one command line against the app."""
        try:
            parts = shlex.split(text)
        except ValueError as e:
            print(f"Cannot parse command: {e}")
            return
        cmd, args = parts[0].lower(), parts[1:]
        rest = " ".join(args)
        app = self._app

        if cmd == "help":
            print(HELP)
        elif cmd == "login":
            app.set_credential_input(rest)
            if not await app.login():
                snap = app.snapshot()
                if snap.session_phase is SessionPhase.NONE and not snap.degraded:
                    print("Invalid access token.")
        elif cmd == "open" and args:
            await app.toggle_category(_parse_id(args[0]))
        elif cmd == "memo" and args:
            await app.select_memo(_parse_id(args[0]))
        elif cmd == "new":
            await app.create_memo()
        elif cmd == "add":
            await app.add_memo(rest)
        elif cmd == "title":
            app.edit(title=rest)
        elif cmd == "content":
            app.edit(content=rest)
        elif cmd == "save":
            await app.save_memo()
        elif cmd == "delete":
            await app.delete_memo()
        elif cmd == "show":
            print(format_snapshot(app.snapshot()))
        else:
            print(f"Unknown command: {text!r} (try 'help')")

    def _read_input(self) -> str | None:
        try:
            sys.stdout.write("\n> ")
            sys.stdout.flush()
            raw = sys.stdin.buffer.readline()
            if not raw:
                return None
            return raw.decode("utf-8", errors="replace").rstrip("\n")
        except EOFError:
            return None

    async def stop(self) -> None:
        self._running = False
