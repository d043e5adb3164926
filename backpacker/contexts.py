from __future__ import annotations

from backpacker.api.models import Location
from backpacker.core.context import BaseAgentContext, RenderedContext, TravelerContext, compose_context
from backpacker.prompts import load_prompt


def make_guide_base_context() -> BaseAgentContext:
    """The guide agent's shared instructions, from prompts/guide_system.txt."""

    return BaseAgentContext(system_prompt=load_prompt("guide_system.txt").strip())


def make_guide_context(*, location: Location | None = None, activity: str = "") -> RenderedContext:
    traveler = TravelerContext(location_label=location.label if location else "", activity=activity)
    return compose_context(base=make_guide_base_context(), traveler=traveler)
