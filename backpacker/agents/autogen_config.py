from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any

from autogen import LLMConfig

DEFAULT_MODEL = "gpt-4o-mini"

MISSING_CREDENTIALS_MESSAGE = "AI API key is missing.\nPlease configure it to start the application."


class MissingCredentialsError(RuntimeError):
    pass


@dataclass(frozen=True, slots=True)
class OpenAICompatibleSettings:
    model: str
    base_url: str | None
    api_key: str | None


def settings_from_env(*, default_model: str = DEFAULT_MODEL) -> OpenAICompatibleSettings:
    return OpenAICompatibleSettings(
        model=os.environ.get("OPENAI_MODEL", default_model),
        # For Ollama, typically http://127.0.0.1:11434/v1
        base_url=os.environ.get("OPENAI_BASE_URL") or None,
        api_key=os.environ.get("OPENAI_API_KEY") or None,
    )


def resolve_api_key(s: OpenAICompatibleSettings) -> str | None:
    # Many OpenAI-compatible servers ignore the key but some SDKs require it.
    return s.api_key or ("ollama" if s.base_url else None)


def has_credentials() -> bool:
    return resolve_api_key(settings_from_env()) is not None


def llm_config_from_env(*, default_model: str = DEFAULT_MODEL) -> LLMConfig:
    s = settings_from_env(default_model=default_model)
    api_key = resolve_api_key(s)

    if not api_key:
        raise MissingCredentialsError(MISSING_CREDENTIALS_MESSAGE)

    # AG2 expects a 'config_list' similar to OAI_CONFIG_LIST.
    config: dict[str, Any] = {"model": s.model, "api_key": api_key}
    if s.base_url:
        config["base_url"] = s.base_url

    return LLMConfig(config_list=[config])
