"""Exceptions raised by assistants-cli.

Failures coming from the OpenAI SDK itself (network, auth, malformed
responses) are left as ``openai.OpenAIError`` subclasses and are not wrapped.
"""

from __future__ import annotations


class AssistantsCliError(Exception):
    """Base class for every error raised by this package."""


class ConfigError(AssistantsCliError):
    """An environment value could not be turned into a setting."""


class NoAssistantSelectedError(AssistantsCliError):
    def __init__(self) -> None:
        super().__init__("Please select an assistant first.")


class ThreadCreationError(AssistantsCliError):
    def __init__(self) -> None:
        super().__init__("Failed to create a new thread.")


class RunInitiationError(AssistantsCliError):
    def __init__(self, thread_id: str) -> None:
        self.thread_id = thread_id
        super().__init__("Failed to initiate a run for the thread.")


class PollTimeoutError(AssistantsCliError):
    """The polling deadline passed before the run reached a terminal status."""

    def __init__(self, run_id: str, waited: float) -> None:
        self.run_id = run_id
        self.waited = waited
        super().__init__(f"Run {run_id} did not finish within {waited:g} seconds.")


class PollCancelledError(AssistantsCliError):
    def __init__(self, run_id: str) -> None:
        self.run_id = run_id
        super().__init__(f"Polling for run {run_id} was cancelled.")
