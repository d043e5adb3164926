from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class BaseAgentContext:
    """Global, shared instructions for the guide agent."""

    system_prompt: str


@dataclass(frozen=True, slots=True)
class TravelerContext:
    """Where the traveler is right now, and what they are doing there."""

    location_label: str = ""
    activity: str = ""


@dataclass(frozen=True, slots=True)
class RenderedContext:
    """Final, merged context passed into the LLM agent."""

    system_prompt: str


def compose_context(*, base: BaseAgentContext, traveler: TravelerContext | None = None) -> RenderedContext:
    parts: list[str] = [base.system_prompt.strip()]

    if traveler is not None and (traveler.location_label.strip() or traveler.activity.strip()):
        lines = ["TRAVELER CONTEXT:"]
        if traveler.location_label.strip():
            lines.append(f"- current_location: {traveler.location_label.strip()}")
        if traveler.activity.strip():
            lines.append(f"- activity: {traveler.activity.strip()}")
        parts.append("\n".join(lines))

    system_prompt = "\n\n".join([p for p in parts if p.strip()]).strip()
    return RenderedContext(system_prompt=system_prompt)
