"""
Pydantic models for API request/response validation
"""

from pydantic import BaseModel, Field
from typing import Any, List, Optional, Dict

from ..agent.types import AgentStep


# Divination Models
class DivinationRequest(BaseModel):
    """Request for a full multi-agent divination"""
    question: str = Field(..., min_length=1, description="The seeker's question")
    context: Optional[str] = Field(None, description="Background on the seeker's situation")


class StepRecord(BaseModel):
    """One agent step as returned to clients"""
    name: str
    prompt: str
    response: str
    parsed: Any = None

    @classmethod
    def from_step(cls, step: AgentStep) -> "StepRecord":
        parsed = step.parsed
        if isinstance(parsed, BaseModel):
            parsed = parsed.model_dump()
        return cls(
            name=step.name.value,
            prompt=step.prompt,
            response=step.response,
            parsed=parsed,
        )


class DivinationResponse(BaseModel):
    """Response from the divination pipeline"""
    final_answer: str
    qa_satisfied: bool
    steps: List[StepRecord] = Field(default_factory=list)
    processing_time: float


class ErrorResponse(BaseModel):
    """Error body for failed requests"""
    error: str
    agent: Optional[str] = None
    details: Optional[str] = None


# Health Check
class HealthResponse(BaseModel):
    """Health check response"""
    status: str
    services: Dict[str, str]
    version: str = "1.0.0"
