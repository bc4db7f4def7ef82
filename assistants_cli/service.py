from __future__ import annotations

import logging
from typing import IO, Iterable, Literal, Sequence

from openai import OpenAI
from typing_extensions import TypedDict

from .errors import RunInitiationError, ThreadCreationError
from .models import (AssistantRef, ChatMessage, FileBatch, Role, RunRef,
                     RunStatus, ThreadRef, UploadedFile)

logger = logging.getLogger(__name__)


class ThreadMessageParam(TypedDict):
    role: Literal["user", "assistant"]
    content: str


class AssistantService:
    """Thin, typed facade over the Assistants API endpoints the client uses.

    Every method is a single pass-through request; responses are decoded into
    the models of :mod:`assistants_cli.models`. SDK exceptions propagate
    unchanged.

    Example:
        >>> service = AssistantService(api_key="sk-test")  # doctest: +SKIP
        >>> [a.label for a in service.list_assistants()]  # doctest: +SKIP
        ['Support bot', 'Sommelier']

    Note:
        The underlying `OpenAI` client is built on first use, so a missing
        credential is reported by the first remote call rather than at start-up.
    """

    def __init__(self, api_key: str | None = None, client: OpenAI | None = None):
        self._api_key = api_key
        self._client = client

    @property
    def client(self) -> OpenAI:
        if self._client is None:
            self._client = OpenAI(api_key=self._api_key)
        return self._client

    def list_assistants(self, order: Literal["asc", "desc"] = "desc") -> list[AssistantRef]:
        logger.debug("Listing assistants (order=%s)", order)
        page = self.client.beta.assistants.list(order=order)
        return [AssistantRef.from_sdk(item) for item in page.data]

    def create_thread(self, messages: Sequence[ThreadMessageParam] = ()) -> ThreadRef:
        """Open a new thread seeded with ``messages``.

        Raises:
            ThreadCreationError: If the service answers without a thread id.
        """
        thread = self.client.beta.threads.create(messages=list(messages))
        thread_id = getattr(thread, "id", None)
        if not thread_id:
            raise ThreadCreationError()
        logger.debug("Created thread %s", thread_id)
        return ThreadRef(id=thread_id)

    def append_message(self, thread_id: str, role: Role | str, content: str) -> ChatMessage:
        role = Role.parse(role)
        logger.debug("Appending %s message to thread %s", role.value, thread_id)
        self.client.beta.threads.messages.create(
            thread_id=thread_id, role=role.value, content=content
        )
        return ChatMessage(role=role, content=content)

    def start_run(self, thread_id: str, assistant_id: str) -> RunRef:
        """Start a run of ``assistant_id`` over ``thread_id``.

        Raises:
            RunInitiationError: If the service answers without a run id.
        """
        run = self.client.beta.threads.runs.create(
            thread_id=thread_id, assistant_id=assistant_id
        )
        if not getattr(run, "id", None):
            raise RunInitiationError(thread_id)
        logger.debug("Started run %s on thread %s", run.id, thread_id)
        return RunRef.from_sdk(run)

    def get_run_status(self, thread_id: str, run_id: str) -> RunStatus:
        run = self.client.beta.threads.runs.retrieve(run_id=run_id, thread_id=thread_id)
        status = RunStatus.parse(getattr(run, "status", None))
        logger.debug("Run %s status: %s", run_id, status.value)
        return status

    def list_messages(self, thread_id: str) -> list[ChatMessage]:
        """Return the thread's messages in service order (newest first)."""
        page = self.client.beta.threads.messages.list(thread_id=thread_id)
        logger.debug("Fetched %d message(s) from thread %s", len(page.data), thread_id)
        return [ChatMessage.from_sdk(item) for item in page.data]

    def upload_file(self, stream: IO[bytes], purpose: str = "assistants") -> UploadedFile:
        uploaded = self.client.files.create(file=stream, purpose=purpose)  # type: ignore[arg-type]
        logger.debug("Uploaded file %s", uploaded.id)
        return UploadedFile(id=uploaded.id, filename=getattr(uploaded, "filename", None))

    def attach_files_to_vector_store(self, vector_store_id: str, file_ids: Iterable[str]) -> FileBatch:
        ids = tuple(file_ids)
        batch = self.client.vector_stores.file_batches.create(
            vector_store_id=vector_store_id, file_ids=list(ids)
        )
        logger.debug("Created file batch %s in vector store %s", batch.id, vector_store_id)
        return FileBatch(
            id=batch.id,
            vector_store_id=vector_store_id,
            status=getattr(batch, "status", None),
            file_ids=ids,
        )
