from __future__ import annotations

import os
from typing import cast

from backpacker.agents.ag2_backend import Ag2ChatAgent
from backpacker.agents.autogen_config import DEFAULT_MODEL
from backpacker.agents.base import Agent


def create_default_agent(*, name: str = "guide") -> Agent:
    """Create the default LLM-backed agent.

    Currently uses AG2/autogen and reads model configuration from env.
    """

    model = os.environ.get("OPENAI_MODEL", DEFAULT_MODEL)
    return cast(Agent, Ag2ChatAgent(name=name, model=model))
