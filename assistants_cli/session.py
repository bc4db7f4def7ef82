from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, Literal

import questionary
from rich.console import Console
from rich.text import Text

from .errors import NoAssistantSelectedError
from .models import ChatMessage, Role, RunStatus
from .polling import PollPolicy, poll_run
from .service import AssistantService

logger = logging.getLogger(__name__)

MENU_SENTINEL = "menu"

LineReader = Callable[[], "str | None"]
EndReason = Literal["sentinel", "end_of_input", "run_failed"]


def ask_line() -> str | None:
    """Prompt for one chat line; ``None`` when the prompt is aborted (Ctrl-C / Ctrl-D)."""
    return questionary.text(">", qmark="").ask()


@dataclass(slots=True)
class SessionResult:
    thread_id: str
    ended_by: EndReason
    transcript: list[ChatMessage] = field(default_factory=list)
    turns: int = 0
    failed_status: RunStatus | None = None


class ChatSession:
    """One multi-turn conversation with an assistant on a fresh thread.

    The session creates a thread, then for every line read: posts it as a user
    message, starts a run, polls the run to completion and prints the first
    assistant message of the refreshed thread. Typing ``menu`` (any case,
    surrounding blanks ignored) ends the session without contacting the
    service.

    Example:
        >>> session = ChatSession(service, "asst_123")  # doctest: +SKIP
        >>> result = session.run()  # doctest: +SKIP
        >>> [m.role.value for m in result.transcript]  # doctest: +SKIP
        ['user', 'assistant']

    Note:
        Only one run is outstanding at a time: the next line is not read until
        the previous run reached a terminal status. The thread is left on the
        service when the session ends.
    """

    def __init__(
        self,
        service: AssistantService,
        assistant_id: str | None,
        read_line: LineReader | None = None,
        console: Console | None = None,
        policy: PollPolicy | None = None,
        *,
        cancel: threading.Event | None = None,
        sleep: Callable[[float], object] | None = None,
        sentinel: str = MENU_SENTINEL,
    ):
        self._service = service
        self._assistant_id = assistant_id
        self._read_line = read_line or ask_line
        self._console = console or Console()
        self._policy = policy or PollPolicy()
        self._cancel = cancel
        self._sleep = sleep
        self._sentinel = sentinel.strip().lower()
        self.transcript: list[ChatMessage] = []

    def _is_sentinel(self, line: str) -> bool:
        return line.strip().lower() == self._sentinel

    def run(self) -> SessionResult:
        """Drive the conversation until the sentinel, end of input or a failed run.

        Raises:
            NoAssistantSelectedError: Before any remote call when no assistant is set.
            ThreadCreationError: When the thread comes back without an id.
            RunInitiationError: When a run comes back without an id.
        """
        if not self._assistant_id:
            raise NoAssistantSelectedError()

        thread = self._service.create_thread(messages=[])
        logger.info("Chat session started on thread %s", thread.id)
        turns = 0

        while True:
            line = self._read_line()
            if line is None:
                logger.debug("Input closed; leaving thread %s", thread.id)
                return SessionResult(thread.id, "end_of_input", self.transcript, turns)
            if self._is_sentinel(line):
                self._console.print("Returning to the main menu...")
                return SessionResult(thread.id, "sentinel", self.transcript, turns)

            turns += 1
            self.transcript.append(ChatMessage(role=Role.USER, content=line))
            self._service.append_message(thread.id, Role.USER, line)
            run = self._service.start_run(thread.id, self._assistant_id)

            outcome = poll_run(
                self._service, thread.id, run.id, self._policy, cancel=self._cancel, sleep=self._sleep
            )
            if not outcome.succeeded:
                self._console.print("Run processing failed.", style="bold red")
                return SessionResult(thread.id, "run_failed", self.transcript, turns, outcome.status)

            reply = outcome.first_assistant_message()
            if reply is None:
                self._console.print("Assistant did not respond.", style="yellow")
                continue
            self.transcript.append(reply)
            self._console.print(Text.assemble(("Assistant: ", "bold blue"), reply.content))
