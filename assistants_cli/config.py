"""Environment-driven settings, loaded once at startup."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Mapping

import dotenv
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from .errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_ACTIONS: tuple[str, ...] = ("list", "create", "chat", "upload")
DEFAULT_REGISTRY_FILE = "assistants.json"


class Settings(BaseModel):
    """Process configuration.

    ``api_key`` may be unset; the first remote call then fails.
    """

    model_config = ConfigDict(frozen=True)

    api_key: str | None = None
    assistant_id: str | None = None
    vector_store_id: str | None = None
    registry_path: Path = Path(DEFAULT_REGISTRY_FILE)
    actions: tuple[str, ...] = DEFAULT_ACTIONS
    poll_interval: float = 1.0
    poll_backoff: float = 1.0
    poll_max_interval: float = 10.0
    poll_max_wait: float | None = None
    log_level: str = "WARNING"

    @field_validator("poll_interval", "poll_max_interval")
    @classmethod
    def check_positive(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("must be greater than zero")
        return value

    @field_validator("poll_max_wait")
    @classmethod
    def check_positive_or_unset(cls, value: float | None) -> float | None:
        if value is not None and value <= 0:
            raise ValueError("must be greater than zero")
        return value

    @field_validator("poll_backoff")
    @classmethod
    def check_backoff(cls, value: float) -> float:
        if value < 1:
            raise ValueError("must be at least 1.0")
        return value

    @field_validator("log_level")
    @classmethod
    def check_log_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level {value!r}")
        return level

    @classmethod
    def from_env(
        cls, env_file: str | os.PathLike[str] | None = None, environ: Mapping[str, str] | None = None
    ) -> Settings:
        """Build settings from the process environment.

        Args:
            env_file: Optional path of a dotenv file. When omitted, a ``.env`` file is
                searched for from the current directory upwards. Values already present in
                the environment win over the file.
            environ: Mapping to read instead of ``os.environ``; no dotenv file is loaded
                when it is given.

        Returns:
            Settings: The validated settings.

        Raises:
            ConfigError: If a value cannot be parsed (e.g. ``POLL_INTERVAL=soon``).
        """
        if environ is None:
            dotenv.load_dotenv(env_file or dotenv.find_dotenv(usecwd=True))
            environ = os.environ

        def get(name: str) -> str | None:
            value = environ.get(name)
            if value is None or not value.strip():
                return None
            return value.strip()

        raw: dict[str, object] = {
            "api_key": get("OPENAI_API_KEY"),
            "assistant_id": get("ASSISTANT_ID"),
            "vector_store_id": get("VECTOR_STORE_ID"),
            "registry_path": get("ASSISTANTS_REGISTRY"),
            "actions": _split_csv(get("ASSISTANTS_CLI_ACTIONS")),
            "poll_interval": get("POLL_INTERVAL"),
            "poll_backoff": get("POLL_BACKOFF"),
            "poll_max_interval": get("POLL_MAX_INTERVAL"),
            "poll_max_wait": get("POLL_MAX_WAIT"),
            "log_level": get("LOG_LEVEL"),
        }
        clean = {k: v for k, v in raw.items() if v is not None}
        try:
            settings = cls(**clean)
        except ValidationError as exc:
            raise ConfigError(f"Invalid configuration: {exc}") from exc
        logger.debug("Loaded settings (assistant=%s, vector_store=%s)",
                     settings.assistant_id, settings.vector_store_id)
        return settings


def _split_csv(value: str | None) -> tuple[str, ...] | None:
    if value is None:
        return None
    return tuple(item.strip().lower() for item in value.split(",") if item.strip())
