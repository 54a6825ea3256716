"""Typed records shared by the agent pipeline"""

from enum import Enum
from typing import Any, Callable, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class AgentName(str, Enum):
    """The five fixed stages of the divination pipeline"""
    QUESTION_PROCESSOR = "questionProcessor"
    LIU_YAO_EXPERT = "liuYaoExpert"
    QA = "qa"
    CONTEXTUALIZER = "contextualizer"
    SYNTHESIZER = "synthesizer"


class AgentIdentity(BaseModel):
    """What a generation client is told about the agent it is serving"""
    model_config = ConfigDict(frozen=True)

    name: AgentName
    prompt: str


class AgentDefinition(BaseModel):
    """Static (name, prompt, parser) configuration for one agent"""
    model_config = ConfigDict(frozen=True)

    name: AgentName
    prompt: str
    parser: Optional[Callable[[str], Any]] = None

    @property
    def identity(self) -> AgentIdentity:
        return AgentIdentity(name=self.name, prompt=self.prompt)


class QaEvaluation(BaseModel):
    """Parsed verdict of the QA reviewer"""
    model_config = ConfigDict(frozen=True)

    consistent: bool
    feedback: Optional[str] = None
    reasons: Optional[List[str]] = None


class AgentStep(BaseModel):
    """Record of one completed agent invocation"""
    model_config = ConfigDict(frozen=True)

    name: AgentName
    prompt: str
    response: str
    parsed: Any = None


class AgentRuntimeInput(BaseModel):
    """Context handed to the generation client for a single call"""
    model_config = ConfigDict(frozen=True)

    question: str
    liu_yao_analysis: Optional[str] = None
    qa_feedback: Optional[str] = None
    context_notes: Optional[str] = None
    previous_steps: Tuple[AgentStep, ...] = Field(default_factory=tuple)


class AgentExecution(BaseModel):
    """Parsed output of an invocation together with its step record"""
    model_config = ConfigDict(frozen=True)

    output: Any = None
    step: AgentStep


class OrchestrationResult(BaseModel):
    """Final outcome of one orchestration run"""
    model_config = ConfigDict(frozen=True)

    final_answer: str
    qa_satisfied: bool
    steps: Tuple[AgentStep, ...]
