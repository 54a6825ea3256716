"""Generation clients: the text backends the pipeline agents talk to"""

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, List, Optional

from anthropic import AsyncAnthropic
from openai import AsyncOpenAI

from .errors import GenerationError
from .types import AgentIdentity, AgentRuntimeInput, AgentStep, QaEvaluation

logger = logging.getLogger(__name__)


class GenerationClient(ABC):
    """Abstract base class for text-generation backends"""

    @abstractmethod
    async def generate(
        self,
        agent: AgentIdentity,
        runtime_input: AgentRuntimeInput,
    ) -> str:
        """
        Generate the raw response for one agent call.

        Args:
            agent: Name and instruction prompt of the calling agent
            runtime_input: Question, prior outputs and previous steps

        Returns:
            Raw response text (parsing is the agent's job)
        """
        pass

    async def aclose(self) -> None:
        """Release network resources (optional)."""
        return None


def _format_parsed(parsed: Any) -> str:
    if isinstance(parsed, QaEvaluation):
        return json.dumps(parsed.model_dump(exclude_none=True), ensure_ascii=False)
    if isinstance(parsed, str):
        return parsed
    return json.dumps(parsed, ensure_ascii=False, default=str)


def _format_step(index: int, step: AgentStep) -> str:
    return f"{index}. [{step.name.value}]\n{_format_parsed(step.parsed)}"


def render_runtime_input(runtime_input: AgentRuntimeInput) -> str:
    """
    Render the runtime input as the user message for a model call.

    Sections are only included when their value is present, so the analyzer's
    first call sees no feedback section at all.

    Args:
        runtime_input: Structured agent input

    Returns:
        Plain-text message
    """
    parts: List[str] = [f"QUESTION:\n{runtime_input.question}"]

    if runtime_input.liu_yao_analysis:
        parts.append(f"CURRENT LIU YAO ANALYSIS:\n{runtime_input.liu_yao_analysis}")

    if runtime_input.qa_feedback:
        parts.append(f"QA FEEDBACK:\n{runtime_input.qa_feedback}")

    if runtime_input.context_notes:
        parts.append(f"CONTEXT NOTES:\n{runtime_input.context_notes}")

    if runtime_input.previous_steps:
        steps_text = "\n\n".join(
            _format_step(i, step)
            for i, step in enumerate(runtime_input.previous_steps, start=1)
        )
        parts.append(f"PREVIOUS STEPS:\n{steps_text}")

    return "\n\n".join(parts)


class OpenAIGenerationClient(GenerationClient):
    """Chat-completions backend (OpenAI and OpenAI-compatible providers)"""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        base_url: Optional[str] = None,
        max_tokens: int = 2048,
        temperature: float = 0.7,
        json_mode: bool = True,
    ):
        """
        Initialize the OpenAI-compatible client.

        Args:
            api_key: Provider API key
            model: Model identifier
            base_url: Optional API base URL (e.g. DeepSeek)
            max_tokens: Completion token limit
            temperature: Sampling temperature
            json_mode: Request a JSON object response format
        """
        self.client = AsyncOpenAI(api_key=api_key, base_url=base_url)
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.json_mode = json_mode

        logger.info(f"Initialized OpenAIGenerationClient with model: {model}")

    async def aclose(self) -> None:
        await self.client.close()

    async def generate(
        self,
        agent: AgentIdentity,
        runtime_input: AgentRuntimeInput,
    ) -> str:
        api_params = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": agent.prompt},
                {"role": "user", "content": render_runtime_input(runtime_input)},
            ],
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
        }
        if self.json_mode:
            api_params["response_format"] = {"type": "json_object"}

        response = await self.client.chat.completions.create(**api_params)

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise GenerationError(
                f"{self.model} returned an empty response for agent {agent.name.value}"
            )

        logger.debug(f"[{agent.name.value}] {self.model} response: {content[:500]}")
        return content


class AnthropicGenerationClient(GenerationClient):
    """Anthropic messages backend"""

    def __init__(
        self,
        api_key: str,
        model: str = "claude-sonnet-4-5",
        max_tokens: int = 2048,
        temperature: float = 0.7,
    ):
        """
        Initialize the Anthropic client.

        Args:
            api_key: Anthropic API key
            model: Claude model identifier
            max_tokens: Response token limit
            temperature: Sampling temperature
        """
        self.client = AsyncAnthropic(api_key=api_key)
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature

        logger.info(f"Initialized AnthropicGenerationClient with model: {model}")

    async def aclose(self) -> None:
        await self.client.close()

    async def generate(
        self,
        agent: AgentIdentity,
        runtime_input: AgentRuntimeInput,
    ) -> str:
        response = await self.client.messages.create(
            model=self.model,
            system=agent.prompt,
            messages=[
                {"role": "user", "content": render_runtime_input(runtime_input)},
            ],
            max_tokens=self.max_tokens,
            temperature=self.temperature,
        )

        content = "".join(
            block.text for block in response.content if block.type == "text"
        )
        if not content:
            raise GenerationError(
                f"{self.model} returned an empty response for agent {agent.name.value}"
            )

        logger.debug(f"[{agent.name.value}] {self.model} response: {content[:500]}")
        return content
