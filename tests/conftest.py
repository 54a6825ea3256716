"""Shared test helpers: a scripted generation client that replays canned responses."""

from __future__ import annotations

import json
from typing import Any

from divination.agent.generation import GenerationClient
from divination.agent.types import AgentIdentity, AgentRuntimeInput


class ScriptedGenerationClient(GenerationClient):
    """Replays (agent name, output) pairs in order and records every call.

    An output that is an exception instance is raised instead of returned.
    """

    def __init__(self, script: list[tuple[str, Any]]) -> None:
        self.script = list(script)
        self.calls: list[dict[str, Any]] = []
        self.closed = False

    async def generate(self, agent: AgentIdentity, runtime_input: AgentRuntimeInput) -> str:
        if not self.script:
            raise RuntimeError(f"No scripted response available for agent: {agent.name.value}")
        expected_name, output = self.script.pop(0)
        self.calls.append({"name": agent.name.value, "prompt": agent.prompt, "input": runtime_input})
        if expected_name != agent.name.value:
            raise AssertionError(f"Expected agent {expected_name} but received call for {agent.name.value}")
        if isinstance(output, BaseException):
            raise output
        return output

    async def aclose(self) -> None:
        self.closed = True

    def names(self) -> list[str]:
        return [call["name"] for call in self.calls]


def as_json(**fields: Any) -> str:
    return json.dumps(fields)


def approving_script(*, answer: str = "Final synthesis") -> list[tuple[str, Any]]:
    return [
        ("questionProcessor", as_json(refinedQuestion="Refined question")),
        ("liuYaoExpert", as_json(analysis="Hexagram insight")),
        ("qa", as_json(consistent=True)),
        ("contextualizer", as_json(contextNotes="Contextual notes")),
        ("synthesizer", as_json(answer=answer)),
    ]
