from __future__ import annotations

import io
from unittest.mock import MagicMock

import pytest
from rich.console import Console

from assistants_cli.config import Settings
from assistants_cli.context import AppContext
from assistants_cli.models import (ChatMessage, Role, RunRef, RunStatus,
                                   ThreadRef)
from assistants_cli.registry import AssistantRegistry
from assistants_cli.service import AssistantService


@pytest.fixture
def console() -> Console:
    return Console(file=io.StringIO(), width=200, color_system=None)



@pytest.fixture
def service() -> MagicMock:
    """An AssistantService double that answers every turn with one reply."""
    svc = MagicMock(spec=AssistantService)
    svc.create_thread.return_value = ThreadRef(id="thread_1")
    svc.start_run.return_value = RunRef(id="run_1", status=RunStatus.QUEUED)
    svc.get_run_status.return_value = RunStatus.COMPLETED
    svc.list_messages.return_value = [
        ChatMessage(role=Role.ASSISTANT, content="Hello there"),
        ChatMessage(role=Role.USER, content="hi"),
    ]
    return svc


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        api_key="sk-test",
        assistant_id="asst_default",
        vector_store_id="vs_1",
        registry_path=tmp_path / "assistants.json",
    )


@pytest.fixture
def context(settings, service, console) -> AppContext:
    return AppContext(
        settings=settings,
        service=service,
        registry=AssistantRegistry(settings.registry_path),
        console=console,
        selected_assistant_id=settings.assistant_id,
    )
