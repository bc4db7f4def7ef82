"""assistants-cli: an interactive terminal client for OpenAI's Assistants API.

The package wraps the assistants, threads, runs, files and vector-store
endpoints of OpenAI's Python SDK behind a small menu loop.

Quick start (reads `OPENAI_API_KEY`, `ASSISTANT_ID` and `VECTOR_STORE_ID`
from the environment or a `.env` file):

    $ assistants-cli

or, from Python:

    from assistants_cli import AssistantService, ChatSession
    service = AssistantService(api_key=None)
    ChatSession(service, assistant_id="asst_...").run()
"""

from .errors import (AssistantsCliError, NoAssistantSelectedError,
                     PollCancelledError, PollTimeoutError, RunInitiationError,
                     ThreadCreationError)
from .polling import PollOutcome, PollPolicy, poll_run
from .registry import AssistantRegistry
from .service import AssistantService
from .session import ChatSession, SessionResult

__all__ = [
    "AssistantRegistry",
    "AssistantService",
    "AssistantsCliError",
    "ChatSession",
    "NoAssistantSelectedError",
    "PollCancelledError",
    "PollOutcome",
    "PollPolicy",
    "PollTimeoutError",
    "RunInitiationError",
    "SessionResult",
    "ThreadCreationError",
    "poll_run",
]

# Expose package version from installed distribution metadata (assistants-cli)
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _pkg_version

try:  # Try to read the version of the installed distribution
    __version__ = _pkg_version("assistants-cli")
except PackageNotFoundError:  # Not installed (e.g., running from source without metadata)
    __version__ = "0.0.0"
