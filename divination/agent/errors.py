"""
Agent pipeline errors.

AgentInvocationError marks a failed call to the generation backend so the
API can answer 502 instead of a generic 500.
"""

from typing import Optional


class GenerationError(Exception):
    """Raised by a generation client when the backend returns no usable text."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class AgentInvocationError(Exception):
    """Raised when the generation call for an agent fails."""

    def __init__(self, agent_name: str, cause: Optional[BaseException] = None) -> None:
        self.agent_name = agent_name
        self.cause = cause
        self.message = f"Failed to execute agent: {agent_name}"
        super().__init__(self.message)
