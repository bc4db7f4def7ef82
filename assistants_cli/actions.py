"""Menu actions.

Each action is a plain function taking the `AppContext`; the menu shows only
the actions enabled in the settings, in the order of `ACTIONS`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable

import questionary
from rich.markup import escape

from .context import AppContext
from .errors import ConfigError
from .models import AssistantRecord
from .session import ChatSession

logger = logging.getLogger(__name__)

Handler = Callable[[AppContext], None]


@dataclass(frozen=True, slots=True)
class Action:
    key: str
    label: str
    handler: Handler


def list_assistants(ctx: AppContext) -> None:
    """List remote assistants (newest first) and let the operator pick one."""
    assistants = ctx.service.list_assistants(order="desc")
    if not assistants:
        ctx.console.print("No assistants found.")
        return

    choices = [questionary.Choice(title=a.label, value=a.id) for a in assistants]
    assistant_id = questionary.select("Select an assistant", choices=choices).ask()
    if assistant_id is None:
        return
    ctx.selected_assistant_id = assistant_id
    label = next(a.label for a in assistants if a.id == assistant_id)
    logger.info("Selected assistant %s", assistant_id)
    ctx.console.print(f"Using assistant [bold]{escape(label)}[/bold] ({assistant_id}).")


def create_assistant(ctx: AppContext) -> None:
    """Record a new assistant name/description in the local registry.

    Nothing is created on the service; the registry is a local notebook of
    assistants the operator intends to set up.
    """
    name = questionary.text("Enter the assistant name:").ask()
    if name is None:
        return
    description = questionary.text("Enter a description for the assistant:").ask()
    if description is None:
        return

    record = AssistantRecord(name=name, description=description)
    ctx.registry.append(record)
    ctx.console.print(f"Assistant '{escape(record.name)}' created successfully!")


def chat_with_assistant(ctx: AppContext) -> None:
    session = ChatSession(
        ctx.service,
        ctx.selected_assistant_id,
        read_line=ctx.read_line,
        console=ctx.console,
        policy=ctx.poll_policy,
    )
    try:
        result = session.run()
    except KeyboardInterrupt:
        ctx.console.print("\nChat interrupted.")
        return
    logger.info("Chat on thread %s ended (%s) after %d turn(s)",
                result.thread_id, result.ended_by, result.turns)


def upload_file(ctx: AppContext) -> None:
    """Upload a local file and add it to the configured vector store."""
    file_path = questionary.path("Enter the path of the file to upload:").ask()
    if file_path is None:
        return

    full_path = Path(file_path).expanduser().resolve()
    if not full_path.is_file():
        ctx.console.print("File does not exist.")
        return
    vector_store_id = ctx.settings.vector_store_id
    if not vector_store_id:
        ctx.console.print("No vector store configured; set VECTOR_STORE_ID first.")
        return

    ctx.console.print(f"File '{escape(str(full_path))}' is ready to be uploaded.")
    with open(full_path, "rb") as f:
        uploaded = ctx.service.upload_file(f, purpose="assistants")
    batch = ctx.service.attach_files_to_vector_store(vector_store_id, [uploaded.id])
    ctx.console.print(
        f"Uploaded {uploaded.id} to vector store {vector_store_id} "
        f"(batch {batch.id}, status {batch.status or 'unknown'})."
    )


def create_thread(ctx: AppContext) -> None:
    thread = ctx.service.create_thread(messages=[])
    ctx.console.print(f"Created thread {thread.id}.")


ACTIONS: dict[str, Action] = {
    action.key: action
    for action in (
        Action("list", "List Assistants", list_assistants),
        Action("create", "Create Assistant", create_assistant),
        Action("chat", "Chat with Assistant", chat_with_assistant),
        Action("upload", "Upload File", upload_file),
        Action("thread", "Create Thread", create_thread),
    )
}


def build_actions(keys: Iterable[str]) -> list[Action]:
    """Resolve enabled action keys into menu entries.

    Raises:
        ConfigError: If a key does not name a known action.
    """
    wanted = {key.strip().lower() for key in keys}
    unknown = wanted - ACTIONS.keys()
    if unknown:
        raise ConfigError(
            f"Unknown menu action(s): {', '.join(sorted(unknown))}. "
            f"Choose from: {', '.join(ACTIONS)}."
        )
    return [action for key, action in ACTIONS.items() if key in wanted]
