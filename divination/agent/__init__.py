"""Liu Yao Divination Agent Pipeline

A fixed chain of five agents:
1. QuestionProcessor: Clarifies the seeker's question
2. LiuYaoExpert: Interprets the hexagrams
3. QA: Reviews the interpretation and can send it back for revision
4. Contextualizer: Maps the reading onto everyday life
5. Synthesizer: Writes the final answer
"""

from .errors import AgentInvocationError, GenerationError
from .factory import GenerationClientFactory
from .generation import (
    AnthropicGenerationClient,
    GenerationClient,
    OpenAIGenerationClient,
    render_runtime_input,
)
from .invocation import execute_agent
from .orchestrator import (
    DivinationOrchestrator,
    ReviewLoop,
    ReviewState,
    run_divination_orchestration,
)
from .prompts import AGENT_REGISTRY, get_agent_definition
from .types import (
    AgentDefinition,
    AgentExecution,
    AgentIdentity,
    AgentName,
    AgentRuntimeInput,
    AgentStep,
    OrchestrationResult,
    QaEvaluation,
)

__all__ = [
    "AGENT_REGISTRY",
    "AgentDefinition",
    "AgentExecution",
    "AgentIdentity",
    "AgentInvocationError",
    "AgentName",
    "AgentRuntimeInput",
    "AgentStep",
    "AnthropicGenerationClient",
    "DivinationOrchestrator",
    "GenerationClient",
    "GenerationClientFactory",
    "GenerationError",
    "OpenAIGenerationClient",
    "OrchestrationResult",
    "QaEvaluation",
    "ReviewLoop",
    "ReviewState",
    "execute_agent",
    "get_agent_definition",
    "render_runtime_input",
    "run_divination_orchestration",
]
