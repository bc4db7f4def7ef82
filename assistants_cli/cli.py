from __future__ import annotations

import argparse
import logging
from typing import Sequence

from rich.console import Console
from rich.logging import RichHandler

from . import __version__
from .actions import build_actions
from .config import Settings
from .context import AppContext
from .errors import ConfigError
from .menu import MenuDispatcher

logger = logging.getLogger(__name__)


def configure_logging(level: str, console: Console | None = None) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console or Console(stderr=True), rich_tracebacks=True)],
        force=True,
    )
    # The SDK's HTTP client is chatty at INFO.
    logging.getLogger("httpx").setLevel(max(logging.WARNING, logging.getLogger().level))


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="assistants-cli",
        description="Interactive menu for listing, chatting with and feeding OpenAI assistants.",
    )
    parser.add_argument("--env-file", help="dotenv file to load instead of the nearest .env")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> None:
    args = _parse_args(argv)
    console = Console()
    try:
        settings = Settings.from_env(args.env_file)
        configure_logging(settings.log_level)
        actions = build_actions(settings.actions)
    except ConfigError as exc:
        console.print(str(exc), style="bold red")
        raise SystemExit(2) from exc

    context = AppContext.from_settings(settings, console=console)
    logger.debug("Menu actions: %s", ", ".join(a.key for a in actions))
    MenuDispatcher(context, actions).run()


if __name__ == "__main__":
    main()
