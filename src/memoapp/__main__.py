"""Entry point: python -m memoapp [chat]

- No args / "chat": Interactive console REPL
"""

from __future__ import annotations

import asyncio
import logging
import sys

from memoapp.config import MemoAppConfig, load_config


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


async def _chat(config: MemoAppConfig) -> None:
    from memoapp.core import MemoApp
    from memoapp.views.console import ConsoleRepl, ConsoleView

    app = MemoApp.from_config(config)
    app.add_view(ConsoleView())
    try:
        await ConsoleRepl(app).start()
    finally:
        await app.close()


def _run_cli() -> None:
    """Interactive console REPL mode."""
    config = load_config()
    _setup_logging(config.log_level)
    try:
        asyncio.run(_chat(config))
    except KeyboardInterrupt:
        pass


def main() -> None:
    cmd = sys.argv[1] if len(sys.argv) > 1 else "chat"

    if cmd in ("chat", "repl"):
        _run_cli()
    else:
        print("Usage: python -m memoapp [chat]")
        print("  chat   - Interactive console REPL (default)")
        sys.exit(1)


if __name__ == "__main__":
    main()
