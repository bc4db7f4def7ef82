"""Typed views over the Assistants API payloads used by the client.

The SDK returns loosely typed objects whose status and role fields are plain
strings. Everything that crosses the service boundary is decoded into the
models below, so the rest of the package can branch on enums instead of
string comparisons.
"""

from __future__ import annotations

import enum
import logging
from typing import Any, Iterable

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)


class RunStatus(str, enum.Enum):
    """Status of a run as reported by the service."""

    QUEUED = "queued"
    IN_PROGRESS = "in_progress"
    REQUIRES_ACTION = "requires_action"
    CANCELLING = "cancelling"
    CANCELLED = "cancelled"
    FAILED = "failed"
    COMPLETED = "completed"
    SUCCEEDED = "succeeded"
    INCOMPLETE = "incomplete"
    EXPIRED = "expired"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: Any) -> RunStatus:
        """Decode a raw status value, mapping anything unrecognised to ``UNKNOWN``.

        Example:
            >>> RunStatus.parse("completed")
            <RunStatus.COMPLETED: 'completed'>
            >>> RunStatus.parse("warming_up")
            <RunStatus.UNKNOWN: 'unknown'>
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            logger.debug("Unrecognised run status %r", value)
            return cls.UNKNOWN

    @property
    def is_success(self) -> bool:
        return self in _SUCCESS_STATUSES

    @property
    def is_failure(self) -> bool:
        return self in _FAILURE_STATUSES

    @property
    def is_terminal(self) -> bool:
        return self.is_success or self.is_failure


# "succeeded" is not part of the documented run vocabulary; it is accepted
# alongside "completed" until the service contract says otherwise.
_SUCCESS_STATUSES = frozenset({RunStatus.COMPLETED, RunStatus.SUCCEEDED})
_FAILURE_STATUSES = frozenset(
    {RunStatus.FAILED, RunStatus.CANCELLED, RunStatus.EXPIRED, RunStatus.INCOMPLETE}
)


class Role(str, enum.Enum):
    USER = "user"
    ASSISTANT = "assistant"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: Any) -> Role:
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value))
        except ValueError:
            return cls.UNKNOWN


class PollState(enum.Enum):
    """States of the completion-polling machine."""

    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class _Payload(BaseModel):
    model_config = ConfigDict(frozen=True)


class AssistantRef(_Payload):
    id: str
    name: str | None = None

    @property
    def label(self) -> str:
        return self.name or self.id

    @classmethod
    def from_sdk(cls, obj: Any) -> AssistantRef:
        return cls(id=getattr(obj, "id"), name=getattr(obj, "name", None))


class ThreadRef(_Payload):
    id: str


class RunRef(_Payload):
    id: str
    status: RunStatus = RunStatus.UNKNOWN

    @classmethod
    def from_sdk(cls, obj: Any) -> RunRef:
        return cls(id=getattr(obj, "id"), status=RunStatus.parse(getattr(obj, "status", None)))


class ChatMessage(_Payload):
    role: Role
    content: str = ""

    @classmethod
    def from_sdk(cls, obj: Any) -> ChatMessage:
        """Flatten an SDK message into its role and text.

        Only ``text`` content parts are kept; image and file parts are
        dropped. Multiple text parts are joined with a newline.
        """
        return cls(
            role=Role.parse(getattr(obj, "role", None)),
            content=_join_text_parts(getattr(obj, "content", None) or []),
        )


def _join_text_parts(parts: Iterable[Any]) -> str:
    if isinstance(parts, str):
        return parts
    texts: list[str] = []
    for part in parts:
        if getattr(part, "type", None) != "text":
            continue
        text = getattr(part, "text", None)
        value = getattr(text, "value", text)
        if isinstance(value, str):
            texts.append(value)
    return "\n".join(texts)


class UploadedFile(_Payload):
    id: str
    filename: str | None = None


class FileBatch(_Payload):
    id: str
    vector_store_id: str
    status: str | None = None
    file_ids: tuple[str, ...] = Field(default_factory=tuple)


class AssistantRecord(BaseModel):
    """A locally created assistant, as stored in the registry file."""

    name: str
    description: str = ""
