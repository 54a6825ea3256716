"""Deterministic Liu Yao consultation (no model calls)

Backs the lightweight /api/analyze endpoint, which answers instantly from
fixed templates for each reading style.
"""

from typing import Dict, List

from pydantic import BaseModel, Field


DEFAULT_MODEL = "liuyao-lite"

MODEL_DESCRIPTIONS: Dict[str, str] = {
    "liuyao-lite": "a concise interpretation balancing intuition with classical hexagram cues.",
    "liuyao-classic": "a traditional six-line analysis emphasising yin-yang balance and elemental relations.",
    "liuyao-experimental": "an exploratory blend that introduces contemporary mindfulness practices.",
}

BASE_RECOMMENDATIONS: List[str] = [
    "Take time to observe how circumstances shift over the next six days.",
    "Document intuitive impressions and compare them with tangible developments.",
    "Engage a trusted confidant to reflect on potential blind spots.",
]

MINDFULNESS_RECOMMENDATION = (
    "Incorporate a short mindfulness practice before making key decisions."
)


class ConsultationRequest(BaseModel):
    """Request for a template consultation"""
    question: str = ""
    context: str = ""
    model: str = DEFAULT_MODEL


class ConsultationResponse(BaseModel):
    """Template consultation result"""
    summary: str
    reasoning: str
    recommendations: List[str] = Field(default_factory=list)


def _approach_label(model: str) -> str:
    # "liuyao-classic" -> "classic"; only the first remaining dash becomes a space
    return model.replace("liuyao-", "", 1).replace("-", " ", 1)


def analyze_consultation(request: ConsultationRequest) -> ConsultationResponse:
    """
    Produce a consultation reading from fixed templates.

    Args:
        request: Question, optional context and reading style

    Returns:
        ConsultationResponse

    Raises:
        ValueError: If the question is blank
    """
    question = request.question.strip()
    if not question:
        raise ValueError("A question is required for consultation.")

    model = request.model if request.model in MODEL_DESCRIPTIONS else DEFAULT_MODEL
    description = MODEL_DESCRIPTIONS[model]

    if request.context:
        context_sentence = f'The querent also provided context: "{request.context}".'
    else:
        context_sentence = (
            "No additional context was supplied, so the reading focuses on the core inquiry."
        )

    summary = (
        f"Using the {_approach_label(model)} approach, the outlook encourages "
        f"patience and deliberate action."
    )
    reasoning = " ".join([
        f"The analysis draws on {description}",
        context_sentence,
        "The symbolic pattern suggests aligning intent with supportive "
        "relationships and keeping a flexible mindset.",
    ])

    recommendations = list(BASE_RECOMMENDATIONS)
    if model == "liuyao-experimental":
        recommendations.append(MINDFULNESS_RECOMMENDATION)

    return ConsultationResponse(
        summary=summary,
        reasoning=reasoning,
        recommendations=recommendations,
    )
