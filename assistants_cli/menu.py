from __future__ import annotations

import logging
from typing import Callable, NoReturn, Sequence

import questionary

from .actions import Action
from .context import AppContext
from .errors import AssistantsCliError

logger = logging.getLogger(__name__)

EXIT_LABEL = "Exit"

MenuPrompt = Callable[[Sequence[str]], "str | None"]


def ask_choice(labels: Sequence[str]) -> str | None:
    return questionary.select("Please choose an option:", choices=list(labels)).ask()


class MenuDispatcher:
    """Main menu loop.

    Shows the enabled actions plus ``Exit``, runs the chosen action and comes
    back. Errors raised by an action are logged and never end the loop; only
    ``Exit`` (or an aborted prompt) leaves, with exit status 0.
    """

    def __init__(self, context: AppContext, actions: Sequence[Action], prompt: MenuPrompt | None = None):
        self._context = context
        self._actions = {action.label: action for action in actions}
        self._prompt = prompt or ask_choice

    @property
    def labels(self) -> list[str]:
        return [*self._actions, EXIT_LABEL]

    def run(self) -> NoReturn:
        while True:
            self.step()

    def step(self) -> None:
        console = self._context.console
        label = self._prompt(self.labels)
        if label is None or label == EXIT_LABEL:
            console.print("Goodbye!")
            raise SystemExit(0)

        action = self._actions.get(label)
        if action is None:
            console.print("Invalid option selected.")
        else:
            self.dispatch(action)
        console.print()

    def dispatch(self, action: Action) -> None:
        try:
            action.handler(self._context)
        except AssistantsCliError as exc:
            logger.info("%s stopped: %s", action.label, exc)
            self._context.console.print(str(exc), style="red")
        except KeyboardInterrupt:
            logger.info("%s interrupted", action.label)
            self._context.console.print("\nInterrupted.")
        except Exception as exc:
            logger.exception("An error occurred: %s", exc)
