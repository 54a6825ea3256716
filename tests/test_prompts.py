"""Tests for the agent definitions and their response parsers."""

from __future__ import annotations

import json

import pytest

from divination.agent.prompts import (
    AGENT_REGISTRY,
    JSON_INSTRUCTION,
    get_agent_definition,
    parse_contextualizer,
    parse_liu_yao_expert,
    parse_qa,
    parse_question_processor,
    parse_synthesizer,
)
from divination.agent.types import AgentName, QaEvaluation

MALFORMED_RESPONSES = [
    "not json at all",
    "{broken",
    "",
    "```json\n{\"answer\": \n```",
]


def test_registry_holds_five_agents_in_pipeline_order() -> None:
    assert [name.value for name in AGENT_REGISTRY] == [
        "questionProcessor",
        "liuYaoExpert",
        "qa",
        "contextualizer",
        "synthesizer",
    ]
    for definition in AGENT_REGISTRY.values():
        assert JSON_INSTRUCTION in definition.prompt
        assert definition.parser is not None


def test_get_agent_definition_by_name() -> None:
    assert get_agent_definition("qa") is AGENT_REGISTRY[AgentName.QA]
    with pytest.raises(ValueError, match="Unknown agent 'oracle'"):
        get_agent_definition("oracle")


@pytest.mark.parametrize("raw", MALFORMED_RESPONSES)
@pytest.mark.parametrize(
    "parser",
    [parse_question_processor, parse_liu_yao_expert, parse_contextualizer, parse_synthesizer],
)
def test_text_parsers_fall_back_to_raw_text(parser, raw: str) -> None:
    assert parser(raw) == raw


@pytest.mark.parametrize("raw", MALFORMED_RESPONSES)
def test_qa_parser_fails_open_on_malformed_text(raw: str) -> None:
    assert parse_qa(raw) == QaEvaluation(consistent=True)


@pytest.mark.parametrize("raw", ["[1, 2]", "42", "null", '"just a string"', "true"])
def test_text_parsers_treat_non_object_json_as_raw_text(raw: str) -> None:
    assert parse_synthesizer(raw) == raw
    assert parse_question_processor(raw) == raw


@pytest.mark.parametrize("raw", ["[1, 2]", "42", '"just a string"', "true", "false", "{}"])
def test_qa_parser_rejects_decodable_non_verdicts(raw: str) -> None:
    assert parse_qa(raw) == QaEvaluation(consistent=False)


def test_qa_parser_treats_null_like_garbage() -> None:
    assert parse_qa("null") == QaEvaluation(consistent=True)


def test_question_processor_prefers_refined_question() -> None:
    raw = json.dumps({"refinedQuestion": "Will the move go well?", "keyDetails": "- moving in May"})
    assert parse_question_processor(raw) == "Will the move go well?"


def test_question_processor_falls_back_to_key_details_then_raw() -> None:
    assert parse_question_processor(json.dumps({"keyDetails": "- new job"})) == "- new job"
    raw = json.dumps({"other": "field"})
    assert parse_question_processor(raw) == raw


def test_question_processor_keeps_empty_refined_question() -> None:
    raw = json.dumps({"refinedQuestion": "", "keyDetails": "details"})
    assert parse_question_processor(raw) == ""


def test_question_processor_ignores_non_string_fields() -> None:
    raw = json.dumps({"refinedQuestion": 7, "keyDetails": "details"})
    assert parse_question_processor(raw) == "details"


def test_liu_yao_parser_joins_analysis_and_guidance() -> None:
    raw = json.dumps({"analysis": "Hexagram 11 rising", "guidance": "Act in spring"})
    assert parse_liu_yao_expert(raw) == "Hexagram 11 rising\n\nAct in spring"


def test_liu_yao_parser_skips_empty_pieces() -> None:
    assert parse_liu_yao_expert(json.dumps({"analysis": "", "guidance": "Wait"})) == "Wait"
    assert parse_liu_yao_expert(json.dumps({"analysis": "Only analysis"})) == "Only analysis"


def test_liu_yao_parser_returns_raw_when_both_fields_missing() -> None:
    raw = json.dumps({"analysis": "", "notes": "unrelated"})
    assert parse_liu_yao_expert(raw) == raw


def test_qa_parser_passes_feedback_and_reasons_through() -> None:
    raw = json.dumps(
        {"consistent": False, "feedback": "Line 3 contradicts line 5", "reasons": ["clash", 3, "timing"]}
    )
    evaluation = parse_qa(raw)
    assert evaluation.consistent is False
    assert evaluation.feedback == "Line 3 contradicts line 5"
    assert evaluation.reasons == ["clash", "timing"]


def test_qa_parser_missing_consistent_field_rejects_but_garbage_approves() -> None:
    # Valid-but-incomplete JSON is stricter than unparseable output.
    assert parse_qa(json.dumps({"feedback": "looks fine"})).consistent is False
    assert parse_qa("the analysis looks fine").consistent is True


def test_qa_parser_uses_truthiness_for_consistent() -> None:
    assert parse_qa(json.dumps({"consistent": 1})).consistent is True
    assert parse_qa(json.dumps({"consistent": 0})).consistent is False
    assert parse_qa(json.dumps({"consistent": "no"})).consistent is True


@pytest.mark.parametrize("value", [[], {}, "", None])
def test_qa_parser_empty_containers_are_falsy(value) -> None:
    assert parse_qa(json.dumps({"consistent": value})).consistent is False


def test_qa_parser_reads_fenced_verdict_without_consistent_as_rejection() -> None:
    raw = '```json\n{"feedback": "x"}\n```'
    assert parse_qa(raw) == QaEvaluation(consistent=False, feedback="x")


def test_context_and_synthesizer_parsers_extract_their_field() -> None:
    assert parse_contextualizer(json.dumps({"contextNotes": "Talk to your manager"})) == "Talk to your manager"
    assert parse_synthesizer(json.dumps({"answer": "Be patient"})) == "Be patient"
    raw = json.dumps({"answer": None})
    assert parse_synthesizer(raw) == raw


def test_parsers_accept_fenced_json() -> None:
    raw = '```json\n{"answer": "Trust the process"}\n```'
    assert parse_synthesizer(raw) == "Trust the process"


@pytest.mark.parametrize(
    "raw",
    [
        json.dumps({"refinedQuestion": "q", "analysis": "a", "guidance": "g"}),
        json.dumps({"consistent": False, "feedback": "f", "reasons": ["r"]}),
        "plain text",
    ],
)
def test_parsers_are_pure(raw: str) -> None:
    for definition in AGENT_REGISTRY.values():
        assert definition.parser(raw) == definition.parser(raw)
