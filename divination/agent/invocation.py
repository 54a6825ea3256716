"""Single agent invocation: generate, parse, record"""

import logging

from .errors import AgentInvocationError, GenerationError
from .generation import GenerationClient
from .types import AgentDefinition, AgentExecution, AgentRuntimeInput, AgentStep

logger = logging.getLogger(__name__)


async def execute_agent(
    definition: AgentDefinition,
    client: GenerationClient,
    runtime_input: AgentRuntimeInput,
) -> AgentExecution:
    """
    Run one agent against the generation client.

    Args:
        definition: Agent to run
        client: Generation backend
        runtime_input: Structured input for this call

    Returns:
        AgentExecution with the parsed output and the step record

    Raises:
        AgentInvocationError: If the generation call fails. Parse problems
            never raise; they are absorbed by the agent's parser.
    """
    try:
        raw = await client.generate(definition.identity, runtime_input)
        if not isinstance(raw, str):
            raise GenerationError(
                f"Expected text from generation client, got {type(raw).__name__}"
            )
    except Exception as e:
        logger.error(f"Agent {definition.name.value} failed: {e}")
        raise AgentInvocationError(definition.name.value, e) from e

    parsed = definition.parser(raw) if definition.parser else raw
    logger.debug(f"Agent {definition.name.value} responded with {len(raw)} chars")

    step = AgentStep(
        name=definition.name,
        prompt=definition.prompt,
        response=raw,
        parsed=parsed,
    )
    return AgentExecution(output=parsed, step=step)
