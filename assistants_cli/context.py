from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from rich.console import Console

from .config import Settings
from .polling import PollPolicy
from .registry import AssistantRegistry
from .service import AssistantService
from .session import LineReader


@dataclass(slots=True)
class AppContext:
    """State shared by the menu actions for the lifetime of the process.

    ``selected_assistant_id`` starts from the configured default and is replaced
    whenever the operator picks an assistant from the list.
    """

    settings: Settings
    service: AssistantService
    registry: AssistantRegistry
    console: Console = field(default_factory=Console)
    selected_assistant_id: str | None = None
    read_line: LineReader | None = None

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        console: Console | None = None,
        service_factory: Callable[[str | None], AssistantService] = AssistantService,
    ) -> AppContext:
        return cls(
            settings=settings,
            service=service_factory(settings.api_key),
            registry=AssistantRegistry(settings.registry_path),
            console=console or Console(),
            selected_assistant_id=settings.assistant_id,
        )

    @property
    def poll_policy(self) -> PollPolicy:
        s = self.settings
        return PollPolicy(
            interval=s.poll_interval,
            backoff=s.poll_backoff,
            max_interval=s.poll_max_interval,
            max_wait=s.poll_max_wait,
        )
