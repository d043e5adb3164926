from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

from autogen import ConversableAgent

from backpacker.agents.autogen_config import llm_config_from_env
from backpacker.agents.base import AgentAction
from backpacker.agents.json_schema import JsonSchema
from backpacker.core.context import RenderedContext

logger = logging.getLogger(__name__)


def _extract_last_content(messages: object) -> str:
    """Extract the last message content from AG2 chat history."""

    if not isinstance(messages, list):
        return ""

    for msg in reversed(messages):
        if isinstance(msg, dict):
            content = msg.get("content")
            if isinstance(content, str) and content.strip():
                return content.strip()
    return ""


def _response_format(schema: JsonSchema) -> dict[str, Any]:
    return {
        "type": "json_schema",
        "json_schema": {
            "name": schema.name,
            "schema": schema.schema,
            "strict": schema.strict,
        },
    }


@dataclass(slots=True)
class Ag2ChatAgent:
    """AG2 agent wrapper that asks one question and returns the reply text.

    Environment variables supported:
    - OPENAI_MODEL
    - OPENAI_API_KEY (optional if OPENAI_BASE_URL is set)
    - OPENAI_BASE_URL (for OpenAI-compatible servers like Ollama, e.g. http://127.0.0.1:11434/v1)
    """

    name: str
    model: str

    def _run_blocking(self, *, prompt: str, ctx: RenderedContext, structured_output: JsonSchema | None) -> str:
        llm_config = llm_config_from_env(default_model=self.model)

        agent = ConversableAgent(
            name=self.name,
            system_message=ctx.system_prompt,
            llm_config=llm_config,
            human_input_mode="NEVER",
        )

        # AG2 forwards unknown kwargs through to the OpenAI client.
        extra: dict[str, Any] = {}
        if structured_output is not None:
            extra["response_format"] = _response_format(structured_output)

        result = agent.run(message=prompt, max_turns=1, **extra)
        result.process()

        text = _extract_last_content(list(result.messages))
        if not text:
            summary = result.summary
            if isinstance(summary, str):
                text = summary.strip()
        return text

    async def propose_action(
        self,
        *,
        prompt: str,
        ctx: RenderedContext,
        structured_output: JsonSchema | None = None,
    ) -> AgentAction:
        """Send a prompt using the stacked system context.

        AG2's run loop is synchronous, so it is pushed to a worker thread.
        """

        logger.debug("agent %s prompt (%s): %.120s", self.name, structured_output.name if structured_output else "text", prompt)
        text = await asyncio.to_thread(
            self._run_blocking, prompt=prompt, ctx=ctx, structured_output=structured_output
        )

        metadata: dict[str, Any] = {"model": self.model}
        if structured_output is not None:
            metadata["structured"] = structured_output.name
        return AgentAction(kind="chat", content=text, metadata=metadata)
