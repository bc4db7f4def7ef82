"""Completion polling for a single run.

A run starts ``PENDING``. Each poll fetches the run status once:

* a success-equivalent status moves to ``SUCCEEDED`` and the thread's
  messages are fetched exactly once;
* a failure-equivalent status moves to ``FAILED`` with no further request;
* anything else stays ``PENDING`` and the poller waits before asking again.

The loop itself is a `tenacity.Retrying` that retries on the *result* of the
status fetch. Polls are strictly sequential. With the default `PollPolicy`
the delay is a fixed second and there is no deadline, so the loop only ends
when the service reports a terminal status.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Protocol

from tenacity import (RetryCallState, RetryError, Retrying, retry_if_result,
                      stop_never, wait_exponential, wait_fixed)
from tenacity.stop import stop_base
from tenacity.wait import wait_base

from .errors import PollCancelledError, PollTimeoutError
from .models import ChatMessage, PollState, Role, RunStatus

logger = logging.getLogger(__name__)

Seconds = float


class RunStatusSource(Protocol):
    def get_run_status(self, thread_id: str, run_id: str) -> RunStatus: ...

    def list_messages(self, thread_id: str) -> list[ChatMessage]: ...


class stop_after_idle(stop_base):
    """Stop before the next sleep would push the total time slept past ``max_wait``.

    Unlike `tenacity.stop_after_delay` only the time spent sleeping counts, not
    the time spent in requests.
    """

    def __init__(self, max_wait: Seconds) -> None:
        self.max_wait = max_wait

    def __call__(self, retry_state: RetryCallState) -> bool:
        upcoming = retry_state.upcoming_sleep or 0.0
        return retry_state.idle_for + upcoming > self.max_wait


@dataclass(frozen=True, slots=True)
class PollPolicy:
    """Delay schedule between status fetches.

    Args:
        interval: First delay, in seconds.
        backoff: Multiplier applied after every delay. ``1.0`` keeps the delay fixed.
        max_interval: Upper bound for a single delay.
        max_wait: Upper bound for the total time spent waiting. ``None`` waits forever.

    Example:
        >>> PollPolicy(interval=1, backoff=2, max_interval=5).wait_strategy()  # doctest: +SKIP
        <tenacity.wait.wait_exponential object at ...>
    """

    interval: Seconds = 1.0
    backoff: float = 1.0
    max_interval: Seconds = 10.0
    max_wait: Seconds | None = None

    def __post_init__(self) -> None:
        if self.interval <= 0 or self.max_interval <= 0:
            raise ValueError("Poll intervals must be greater than zero.")
        if self.backoff < 1:
            raise ValueError("Poll backoff must be at least 1.0.")
        if self.max_wait is not None and self.max_wait <= 0:
            raise ValueError("max_wait must be greater than zero when set.")

    def wait_strategy(self) -> wait_base:
        if self.backoff == 1:
            return wait_fixed(min(self.interval, self.max_interval))
        return wait_exponential(multiplier=self.interval, exp_base=self.backoff, max=self.max_interval)

    def stop_strategy(self) -> stop_base:
        if self.max_wait is None:
            return stop_never
        return stop_after_idle(self.max_wait)


@dataclass(slots=True)
class PollOutcome:
    state: PollState
    status: RunStatus
    messages: list[ChatMessage] = field(default_factory=list)
    polls: int = 0
    waited: Seconds = 0.0

    @property
    def succeeded(self) -> bool:
        return self.state is PollState.SUCCEEDED

    def first_assistant_message(self) -> ChatMessage | None:
        """Return the first assistant message of the fetched list (the newest reply)."""
        for message in self.messages:
            if message.role is Role.ASSISTANT:
                return message
        return None


def _is_pending(status: RunStatus) -> bool:
    return not status.is_terminal


def poll_run(
    service: RunStatusSource,
    thread_id: str,
    run_id: str,
    policy: PollPolicy | None = None,
    *,
    cancel: threading.Event | None = None,
    sleep: Callable[[Seconds], object] | None = None,
) -> PollOutcome:
    """Wait for ``run_id`` to reach a terminal status.

    Args:
        service: Object exposing ``get_run_status`` and ``list_messages``
            (normally an `AssistantService`).
        thread_id: Thread the run belongs to.
        run_id: Run to watch.
        policy: Delay schedule; defaults to a fixed one-second delay with no deadline.
        cancel: Optional event; setting it interrupts the current wait.
        sleep: Replacement for the wait primitive, mainly for tests. When given, the
            ``cancel`` event is checked after each call instead of being waited on.

    Returns:
        PollOutcome: The terminal state, the last status and, on success, the thread
        messages fetched once after completion.

    Raises:
        PollTimeoutError: When ``policy.max_wait`` would be exceeded by the next wait.
        PollCancelledError: When ``cancel`` is set.
    """
    policy = policy or PollPolicy()
    polls = 0
    waited: Seconds = 0.0

    def fetch_status() -> RunStatus:
        nonlocal polls
        if cancel is not None and cancel.is_set():
            raise PollCancelledError(run_id)
        polls += 1
        return service.get_run_status(thread_id, run_id)

    def wait(delay: Seconds) -> None:
        nonlocal waited
        if sleep is not None:
            sleep(delay)
            cancelled = cancel is not None and cancel.is_set()
        elif cancel is not None:
            cancelled = cancel.wait(delay)
        else:
            time.sleep(delay)
            cancelled = False
        waited += delay
        if cancelled:
            raise PollCancelledError(run_id)

    def log_pending(retry_state: RetryCallState) -> None:
        status = retry_state.outcome.result()
        logger.debug(
            "Run %s is %s; checking again in %.1fs", run_id, status.value, retry_state.next_action.sleep
        )

    retrying = Retrying(
        retry=retry_if_result(_is_pending),
        wait=policy.wait_strategy(),
        stop=policy.stop_strategy(),
        sleep=wait,
        before_sleep=log_pending,
    )
    try:
        status = retrying(fetch_status)
    except RetryError as exc:
        raise PollTimeoutError(run_id, waited) from exc

    if status.is_success:
        messages = service.list_messages(thread_id)
        logger.debug("Run %s succeeded after %d poll(s)", run_id, polls)
        return PollOutcome(PollState.SUCCEEDED, status, messages, polls, waited)
    logger.info("Run %s ended with status %s", run_id, status.value)
    return PollOutcome(PollState.FAILED, status, [], polls, waited)
