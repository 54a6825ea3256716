"""Agent definitions for the Liu Yao divination pipeline

Each agent pairs a static instruction prompt with a parser that turns the
model's raw text into a typed value. Parsers never raise: anything that is
not the documented JSON shape degrades to the raw text. The QA reviewer
approves only when its response cannot be decoded at all.
"""

from typing import Dict

from .parsing import get_str, get_str_list, load_json, load_json_object
from .types import AgentDefinition, AgentName, QaEvaluation


JSON_INSTRUCTION = (
    "Respond with valid JSON that matches the documented schema. "
    "Avoid commentary outside of the JSON payload."
)

QUESTION_PROCESSOR_PROMPT = f"""You are an intake specialist helping structure divination questions. {JSON_INSTRUCTION}
Return an object with:
- refinedQuestion: the clarified question from the seeker.
- keyDetails: bullet-point notes about the situation."""

LIU_YAO_EXPERT_PROMPT = f"""You are a seasoned Liu Yao (六爻) divination expert. {JSON_INSTRUCTION}
Return an object with:
- analysis: interpretation of the hexagrams and changing lines.
- guidance: actionable advice.
When QA feedback is supplied, revise your previous analysis so that every point it raises is resolved."""

QA_PROMPT = f"""You are a meticulous QA agent reviewing the Liu Yao expert's interpretation. {JSON_INSTRUCTION}
Return an object with:
- consistent: boolean indicating whether the reasoning is coherent.
- feedback: clear corrective notes when inconsistencies are found.
- reasons: array summarising contradictions found."""

CONTEXTUALIZER_PROMPT = f"""You map symbolic divination insights to pragmatic, real-world context. {JSON_INSTRUCTION}
Return an object with:
- contextNotes: practical considerations that relate the reading to everyday life."""

SYNTHESIZER_PROMPT = f"""You synthesise the Liu Yao divination, QA findings, and real-world context. {JSON_INSTRUCTION}
Return an object with:
- answer: a compassionate, actionable response to the seeker."""

DEFAULT_QA_FEEDBACK = "Please clarify and resolve the identified issues."


def parse_question_processor(raw: str) -> str:
    """refinedQuestion, else keyDetails, else the raw text."""
    data = load_json_object(raw)
    if data is None:
        return raw

    refined = get_str(data, "refinedQuestion")
    if refined is not None:
        return refined

    details = get_str(data, "keyDetails")
    if details is not None:
        return details

    return raw


def parse_liu_yao_expert(raw: str) -> str:
    """Join analysis and guidance with a blank line; raw text if both are empty."""
    data = load_json_object(raw)
    if data is None:
        return raw

    pieces = [
        piece
        for piece in (get_str(data, "analysis"), get_str(data, "guidance"))
        if piece
    ]
    return "\n\n".join(pieces) if pieces else raw


def parse_qa(raw: str) -> QaEvaluation:
    """
    Interpret the QA reviewer's verdict.

    Any decoded JSON other than ``null`` is a verdict: a missing or falsy
    ``consistent`` field counts as a rejection, and so does a non-object value
    such as ``false`` or ``[]``. An undecodable response (or ``null``)
    approves the analysis.
    TODO: confirm with product whether garbage output should really fail
    open; until then both defaults are pinned by tests.
    """
    data = load_json(raw)
    if data is None:
        return QaEvaluation(consistent=True)
    if not isinstance(data, dict):
        return QaEvaluation(consistent=False)

    return QaEvaluation(
        consistent=bool(data.get("consistent")),
        feedback=get_str(data, "feedback"),
        reasons=get_str_list(data, "reasons"),
    )


def parse_contextualizer(raw: str) -> str:
    data = load_json_object(raw)
    if data is None:
        return raw
    notes = get_str(data, "contextNotes")
    return notes if notes is not None else raw


def parse_synthesizer(raw: str) -> str:
    data = load_json_object(raw)
    if data is None:
        return raw
    answer = get_str(data, "answer")
    return answer if answer is not None else raw


question_processor_agent = AgentDefinition(
    name=AgentName.QUESTION_PROCESSOR,
    prompt=QUESTION_PROCESSOR_PROMPT,
    parser=parse_question_processor,
)

liu_yao_expert_agent = AgentDefinition(
    name=AgentName.LIU_YAO_EXPERT,
    prompt=LIU_YAO_EXPERT_PROMPT,
    parser=parse_liu_yao_expert,
)

qa_agent = AgentDefinition(
    name=AgentName.QA,
    prompt=QA_PROMPT,
    parser=parse_qa,
)

contextualizer_agent = AgentDefinition(
    name=AgentName.CONTEXTUALIZER,
    prompt=CONTEXTUALIZER_PROMPT,
    parser=parse_contextualizer,
)

synthesizer_agent = AgentDefinition(
    name=AgentName.SYNTHESIZER,
    prompt=SYNTHESIZER_PROMPT,
    parser=parse_synthesizer,
)

# Pipeline order
AGENT_REGISTRY: Dict[AgentName, AgentDefinition] = {
    definition.name: definition
    for definition in (
        question_processor_agent,
        liu_yao_expert_agent,
        qa_agent,
        contextualizer_agent,
        synthesizer_agent,
    )
}


def get_agent_definition(name: str) -> AgentDefinition:
    """
    Look up an agent definition by name.

    Args:
        name: Agent name (e.g., "qa", "liuYaoExpert")

    Returns:
        The static AgentDefinition

    Raises:
        ValueError: If name is not one of the five pipeline agents
    """
    try:
        return AGENT_REGISTRY[AgentName(name)]
    except ValueError:
        available = ", ".join(agent.value for agent in AGENT_REGISTRY)
        raise ValueError(
            f"Unknown agent '{name}'. Available agents: {available}"
        ) from None
