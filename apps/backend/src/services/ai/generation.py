"""Streaming text generation through pydantic-ai."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator

from pydantic_ai import Agent
from pydantic_ai.models import Model
from pydantic_ai.settings import ModelSettings

from services.ai.model_factory import get_chat_model
from services.ai.prompts import RenderedPrompt
from services.roast.cancellation import CancellationToken


logger = logging.getLogger(__name__)


class PydanticAIGenerationSource:
    """Produces the roast text as a stream of deltas.

    The model is resolved lazily so the application can start without API
    keys; a missing key surfaces as an error event on first use. Agents are
    cached per system prompt.
    """

    def __init__(self, model: Model | None = None) -> None:
        self._model = model
        self._agents: dict[str, Agent[None, str]] = {}

    def _get_agent(self, system_prompt: str) -> Agent[None, str]:
        agent = self._agents.get(system_prompt)
        if agent is None:
            if self._model is None:
                self._model = get_chat_model()
            agent = Agent(self._model, output_type=str, system_prompt=system_prompt)
            self._agents[system_prompt] = agent
        return agent

    async def stream(
        self,
        prompt: RenderedPrompt,
        *,
        temperature: float,
        max_tokens: int,
        cancel: CancellationToken,
    ) -> AsyncIterator[str]:
        agent = self._get_agent(prompt.system)
        model_settings = ModelSettings(temperature=temperature, max_tokens=max_tokens)

        async with agent.run_stream(prompt.user, model_settings=model_settings) as result:
            # debounce_by=None relays every delta as soon as the model produces it
            async for delta in result.stream_text(delta=True, debounce_by=None):
                if cancel.cancelled:
                    logger.debug("Generation stopped after client disconnect")
                    return
                yield delta
