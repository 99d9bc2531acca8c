"""Tests for prompt building, narrative generation and LLM construction."""

from unittest.mock import MagicMock, patch

import pytest
from langchain_core.messages import AIMessage

from workflow.core.answers import AnswerSet
from workflow.core.errors import NarrativeGenerationError
from workflow.core.llm_utils import count_words, get_llm_with_fallback, invoke_for_text
from workflow.core.prompts import REPORT_SECTIONS, build_report_prompt
from workflow.core.scoring_logic import calculate_scores
from workflow.nodes.narrative import generate_narrative


def test_prompt_contains_scores_and_adjustments(best_answers):
    result = calculate_scores(best_answers)
    prompt = build_report_prompt(result, best_answers)["user"]

    assert "Overall Exit Readiness Score: 100/100" in prompt
    assert "Category: EXIT READY" in prompt
    assert "Business Performance: 100/100" in prompt
    assert "Multipliers: Strong Moat (1.3x), Recurring Revenue Excellence (1.2x)" in prompt
    assert "Penalties: None" in prompt
    assert "Emotional Readiness: 10/10" in prompt


def test_prompt_lists_all_report_sections(empty_answers):
    prompt = build_report_prompt(calculate_scores(empty_answers), empty_answers)["user"]
    assert len(REPORT_SECTIONS) == 9
    for number, (title, _) in enumerate(REPORT_SECTIONS, start=1):
        assert f"{number}. {title}" in prompt
    assert "Explain what the overall score of 50 means" in prompt


def test_prompt_for_unanswered_fields(empty_answers):
    prompt = build_report_prompt(calculate_scores(empty_answers), empty_answers)["user"]
    assert "Exit Timeline: Not answered" in prompt
    assert "Emotional Readiness: Not answered" in prompt
    assert "SPECIAL FLAGS:\n- None" in prompt


def test_prompt_for_empty_selection():
    answers = AnswerSet.from_mapping({"competitive_advantages": []})
    prompt = build_report_prompt(calculate_scores(answers), answers)["user"]
    assert "Competitive Advantages: None identified" in prompt


def test_generate_narrative(empty_answers):
    llm = MagicMock()
    llm.invoke.return_value = AIMessage(content="  # EXECUTIVE SUMMARY\nText  ")
    narrative = generate_narrative(calculate_scores(empty_answers), empty_answers, llm=llm)
    assert narrative == "# EXECUTIVE SUMMARY\nText"


def test_generate_narrative_wraps_model_errors(empty_answers):
    llm = MagicMock()
    llm.invoke.side_effect = ConnectionError("network down")
    with pytest.raises(NarrativeGenerationError, match="network down"):
        generate_narrative(calculate_scores(empty_answers), empty_answers, llm=llm)


def test_invoke_for_text_joins_content_blocks():
    llm = MagicMock()
    llm.invoke.return_value = AIMessage(content=[{"type": "text", "text": "Hello "}, {"type": "text", "text": "world"}])
    assert invoke_for_text(llm, []) == "Hello world"


def test_count_words():
    assert count_words("  one two\nthree ") == 3
    assert count_words("") == 0


def test_llm_uses_environment_defaults(monkeypatch):
    monkeypatch.setenv("NARRATIVE_MODEL", "gpt-4o-mini")
    monkeypatch.setenv("NARRATIVE_TEMPERATURE", "0.2")
    monkeypatch.setenv("NARRATIVE_MAX_TOKENS", "1234")
    with patch("workflow.core.llm_utils.ChatOpenAI") as mock_chat:
        get_llm_with_fallback()
    mock_chat.assert_called_once_with(model="gpt-4.1-mini", temperature=0.2, max_tokens=1234)


def test_llm_explicit_arguments_win(monkeypatch):
    monkeypatch.setenv("NARRATIVE_MODEL", "gpt-4.1")
    with patch("workflow.core.llm_utils.ChatOpenAI") as mock_chat:
        get_llm_with_fallback("gpt-4.1-nano", temperature=0.0, max_tokens=100)
    mock_chat.assert_called_once_with(model="gpt-4.1-nano", temperature=0.0, max_tokens=100)
