"""Pytest configuration and fixtures."""

import os

# Set before any test module imports api
os.environ.setdefault("OPENAI_API_KEY", "test-openai-key")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from unittest.mock import MagicMock, patch

import pytest
from langchain_core.messages import AIMessage

from workflow.core import lookup_tables as tables
from workflow.core.answers import AnswerSet

SAMPLE_NARRATIVE = """# EXECUTIVE SUMMARY

Your business is **well positioned** for an exit.

- Strong recurring revenue
- Experienced management team

# IMMEDIATE ACTION PLAN (Next 90 Days)

1. Engage an M&A advisor
2. Refresh the financial statements
"""


@pytest.fixture(scope="session", autouse=True)
def setup_test_env():
    """Set up test environment variables."""
    os.environ["OPENAI_API_KEY"] = "test-openai-key"
    os.environ["NARRATIVE_MODEL"] = "gpt-4.1-mini"


def _extreme_answers(pick) -> dict:
    raw = {}
    for field_name, table in tables.TABLES.items():
        if isinstance(table, tables.LookupTable):
            raw[field_name] = pick(table)
    return raw


@pytest.fixture
def best_raw_answers():
    """Every field at its best-scoring answer"""
    raw = _extreme_answers(lambda table: tables.best_label(table.field))
    raw["valuation_method"] = ["Professional business valuation"]
    raw["competitive_advantages"] = sorted(tables.COMPETITIVE_ADVANTAGES.options)
    raw["growth_opportunities"] = sorted(tables.GROWTH_OPPORTUNITIES.options)
    raw["emotional_readiness"] = 10
    return raw


@pytest.fixture
def best_answers(best_raw_answers):
    return AnswerSet.from_mapping(best_raw_answers)


@pytest.fixture
def worst_answers():
    """Every field at its lowest-scoring answer"""
    raw = _extreme_answers(lambda table: min(table.labels, key=lambda label: table.scores[label]))
    raw["valuation_method"] = ["Gut feeling/personal assessment"]
    raw["competitive_advantages"] = ["None of the above"]
    raw["growth_opportunities"] = ["Limited opportunities"]
    raw["emotional_readiness"] = 1
    return AnswerSet.from_mapping(raw)


@pytest.fixture
def empty_answers():
    return AnswerSet()


def typeform_answer(ref, answer_type, value):
    answer = {"type": answer_type, "field": {"id": f"id_{ref}", "ref": ref, "type": "multiple_choice"}}
    if answer_type == "choice":
        answer["choice"] = {"label": value}
    elif answer_type == "choices":
        answer["choices"] = {"labels": value}
    elif answer_type in ("number", "opinion_scale"):
        answer["number"] = value
    else:
        answer[answer_type] = value
    return answer


@pytest.fixture
def typeform_payload():
    """Typeform webhook body with a mix of answer types"""
    return {
        "event_id": "01HXYZ",
        "event_type": "form_response",
        "form_response": {
            "form_id": "abc123",
            "token": "tok_456",
            "submitted_at": "2024-05-01T10:00:00Z",
            "answers": [
                typeform_answer("exit_timeline", "choice", "2-3 years"),
                typeform_answer("emotional_readiness", "opinion_scale", 8),
                typeform_answer("ebitda_margin", "choice", "20-30%"),
                typeform_answer("cash_flow_status", "choice", tables.CASH_FLOW_STRONG),
                typeform_answer("competitive_advantages", "choices", ["Patents", "Strong brand recognition"]),
                typeform_answer("annual_revenue", "choice", "$5-10 million"),
                typeform_answer("company_name", "text", "Acme Widgets"),
            ],
        },
    }


@pytest.fixture
def mock_llm():
    """Patch the chat model used for narratives; yields the fake model"""
    llm = MagicMock()
    llm.invoke.return_value = AIMessage(content=SAMPLE_NARRATIVE)
    with patch("workflow.nodes.narrative.get_llm_with_fallback", return_value=llm):
        yield llm
