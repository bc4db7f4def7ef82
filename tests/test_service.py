from __future__ import annotations

import io
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from assistants_cli.errors import RunInitiationError, ThreadCreationError
from assistants_cli.models import Role, RunStatus
from assistants_cli.service import AssistantService


@pytest.fixture
def client() -> MagicMock:
    return MagicMock()


@pytest.fixture
def api(client) -> AssistantService:
    return AssistantService(client=client)


def test_client_is_built_lazily():
    with patch("assistants_cli.service.OpenAI") as openai_cls:
        service = AssistantService(api_key="sk-test")
        openai_cls.assert_not_called()

        service.client
        service.client

    openai_cls.assert_called_once_with(api_key="sk-test")


def test_list_assistants(api, client):
    client.beta.assistants.list.return_value = SimpleNamespace(
        data=[SimpleNamespace(id="asst_2", name="Newest"), SimpleNamespace(id="asst_1", name=None)]
    )

    assistants = api.list_assistants()

    client.beta.assistants.list.assert_called_once_with(order="desc")
    assert [(a.id, a.label) for a in assistants] == [("asst_2", "Newest"), ("asst_1", "asst_1")]


def test_create_thread(api, client):
    client.beta.threads.create.return_value = SimpleNamespace(id="thread_9")

    assert api.create_thread().id == "thread_9"
    client.beta.threads.create.assert_called_once_with(messages=[])


@pytest.mark.parametrize("thread", [SimpleNamespace(id=None), SimpleNamespace(id=""), SimpleNamespace()])
def test_create_thread_without_id(api, client, thread):
    client.beta.threads.create.return_value = thread
    with pytest.raises(ThreadCreationError):
        api.create_thread()


def test_append_message(api, client):
    message = api.append_message("thread_1", "user", "hello")

    client.beta.threads.messages.create.assert_called_once_with(
        thread_id="thread_1", role="user", content="hello"
    )
    assert message.role is Role.USER


def test_start_run(api, client):
    client.beta.threads.runs.create.return_value = SimpleNamespace(id="run_1", status="queued")

    run = api.start_run("thread_1", "asst_1")

    client.beta.threads.runs.create.assert_called_once_with(thread_id="thread_1", assistant_id="asst_1")
    assert run.id == "run_1"
    assert run.status is RunStatus.QUEUED


def test_start_run_without_id(api, client):
    client.beta.threads.runs.create.return_value = SimpleNamespace(id=None, status="queued")
    with pytest.raises(RunInitiationError):
        api.start_run("thread_1", "asst_1")


def test_get_run_status(api, client):
    client.beta.threads.runs.retrieve.return_value = SimpleNamespace(id="run_1", status="in_progress")

    assert api.get_run_status("thread_1", "run_1") is RunStatus.IN_PROGRESS
    client.beta.threads.runs.retrieve.assert_called_once_with(run_id="run_1", thread_id="thread_1")


def test_list_messages_keeps_service_order(api, client):
    def msg(role, value):
        return SimpleNamespace(role=role, content=[SimpleNamespace(type="text", text=SimpleNamespace(value=value))])

    client.beta.threads.messages.list.return_value = SimpleNamespace(
        data=[msg("assistant", "newest"), msg("user", "older")]
    )

    messages = api.list_messages("thread_1")

    assert [(m.role, m.content) for m in messages] == [(Role.ASSISTANT, "newest"), (Role.USER, "older")]


def test_upload_and_attach(api, client):
    client.files.create.return_value = SimpleNamespace(id="file_1", filename="notes.txt")
    client.vector_stores.file_batches.create.return_value = SimpleNamespace(id="vsfb_1", status="in_progress")
    stream = io.BytesIO(b"data")

    uploaded = api.upload_file(stream)
    batch = api.attach_files_to_vector_store("vs_1", [uploaded.id])

    client.files.create.assert_called_once_with(file=stream, purpose="assistants")
    client.vector_stores.file_batches.create.assert_called_once_with(vector_store_id="vs_1", file_ids=["file_1"])
    assert batch.file_ids == ("file_1",)
    assert batch.status == "in_progress"


def test_installed_sdk_has_top_level_vector_stores():
    from openai import OpenAI

    client = OpenAI(api_key="sk-test")
    assert hasattr(client.vector_stores, "file_batches")


def test_sdk_errors_propagate(api, client):
    client.beta.assistants.list.side_effect = RuntimeError("network down")
    with pytest.raises(RuntimeError, match="network down"):
        api.list_assistants()
