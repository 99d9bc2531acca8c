"""Tests for the end-to-end scoring pipeline."""

import random

import pytest

from workflow.core import lookup_tables as tables
from workflow.core.answers import AnswerSet
from workflow.core.scoring_logic import (
    CRITICAL_ISSUE_CAP,
    FLAG_HIDDEN_GEM,
    FLAG_PE_ATTRACTIVE,
    FLAG_SELLERS_REMORSE,
    FLAG_TIMELINE_MISMATCH,
    calculate_scores,
    determine_category,
    has_critical_issues,
)
from workflow.core.scoring_models import ReadinessCategory
from workflow.core.weights import LARGE_COMPANY_REVENUE, SMALL_COMPANY_REVENUE


@pytest.mark.parametrize("score,category", [
    (100, ReadinessCategory.EXIT_READY),
    (90, ReadinessCategory.EXIT_READY),
    (89, ReadinessCategory.NEARLY_READY),
    (75, ReadinessCategory.NEARLY_READY),
    (74, ReadinessCategory.PREPARATION_NEEDED),
    (60, ReadinessCategory.PREPARATION_NEEDED),
    (59, ReadinessCategory.SIGNIFICANT_GAPS),
    (40, ReadinessCategory.SIGNIFICANT_GAPS),
    (39, ReadinessCategory.NOT_READY),
    (0, ReadinessCategory.NOT_READY),
])
def test_category_boundaries(score, category):
    assert determine_category(score) == category


def test_best_answers_are_exit_ready(best_answers):
    result = calculate_scores(best_answers)
    assert result.sections.business == 100
    assert result.overall == 100
    assert result.category == ReadinessCategory.EXIT_READY
    assert result.adjustments.penalties == ()


def test_all_defaults_score(empty_answers):
    result = calculate_scores(empty_answers)
    assert result.overall == 50
    assert result.category == ReadinessCategory.SIGNIFICANT_GAPS
    assert result.flags == ()
    assert result.adjustments.weights.total == pytest.approx(1.0, abs=1e-9)


def test_scoring_is_idempotent(best_answers, worst_answers, empty_answers):
    for answers in (best_answers, worst_answers, empty_answers):
        first = calculate_scores(answers)
        second = calculate_scores(answers)
        assert first == second
        assert first.to_dict() == second.to_dict()


def test_worst_answers_are_not_ready(worst_answers):
    result = calculate_scores(worst_answers)
    assert 0 <= result.overall <= CRITICAL_ISSUE_CAP
    assert result.category == ReadinessCategory.NOT_READY


def test_critical_owner_dependency_penalty_is_reported():
    answers = AnswerSet.from_mapping({
        "operate_without_owner": tables.WOULD_LIKELY_FAIL,
        "post_sale_involvement": tables.FULL_EXIT,
    })
    penalties = calculate_scores(answers).adjustments.penalties
    assert ("Critical Owner Dependency", 0.4) in [(p.name, p.factor) for p in penalties]


@pytest.mark.parametrize("field_name,label", [
    ("legal_issues", tables.LEGAL_MAJOR_PROBLEMS),
    ("cash_flow_status", tables.CASH_FLOW_NEGATIVE),
    ("ebitda_margin", tables.EBITDA_NEGATIVE),
])
def test_critical_issues_cap_the_score(best_raw_answers, field_name, label):
    answers = AnswerSet.from_mapping({**best_raw_answers, field_name: label})
    assert has_critical_issues(answers)
    result = calculate_scores(answers)
    assert result.overall <= CRITICAL_ISSUE_CAP


def test_timeline_pressure_and_mismatch_flag():
    result = calculate_scores(AnswerSet.from_mapping({"exit_timeline": tables.WITHIN_12_MONTHS}))
    assert [p.name for p in result.adjustments.penalties] == ["Timeline Pressure"]
    # 49.55 * 0.8 = 39.64
    assert result.overall == 40
    assert FLAG_TIMELINE_MISMATCH in result.flags


def test_hidden_gem_flag():
    result = calculate_scores(AnswerSet.from_mapping({"defensibility": tables.VERY_DEFENSIBLE}))
    assert 50 <= result.overall <= 70
    assert FLAG_HIDDEN_GEM in result.flags


def test_sellers_remorse_flag_needs_low_emotional_readiness():
    burnout = {"owner_motivation": tables.MOTIVATION_BURNOUT}
    flagged = calculate_scores(AnswerSet.from_mapping({**burnout, "emotional_readiness": 3}))
    unanswered = calculate_scores(AnswerSet.from_mapping(burnout))
    ready = calculate_scores(AnswerSet.from_mapping({**burnout, "emotional_readiness": 5}))
    off_scale = calculate_scores(AnswerSet.from_mapping({**burnout, "emotional_readiness": 0}))
    assert FLAG_SELLERS_REMORSE in flagged.flags
    assert FLAG_SELLERS_REMORSE not in unanswered.flags
    assert FLAG_SELLERS_REMORSE not in off_scale.flags
    assert FLAG_SELLERS_REMORSE not in ready.flags


def test_pe_attractive_flag(best_raw_answers):
    answers = AnswerSet.from_mapping({**best_raw_answers, "buyer_type": tables.PRIVATE_EQUITY})
    assert FLAG_PE_ATTRACTIVE in calculate_scores(answers).flags

    full_exit = AnswerSet.from_mapping({
        **best_raw_answers,
        "buyer_type": tables.PRIVATE_EQUITY,
        "post_sale_involvement": tables.FULL_EXIT,
    })
    assert FLAG_PE_ATTRACTIVE not in calculate_scores(full_exit).flags


def test_small_company_weights_in_result():
    result = calculate_scores(AnswerSet.from_mapping({"annual_revenue": "Under $1 million"}))
    weights = result.adjustments.weights
    assert weights.owner > 0.15
    assert weights.organizational < 0.20
    assert weights.total == pytest.approx(1.0, abs=1e-9)


def test_result_serializes_to_plain_json(best_answers):
    data = calculate_scores(best_answers).to_dict()
    assert data["category"] == "EXIT READY"
    assert set(data["sections"]) == {"owner", "business", "strategic", "organizational", "transaction"}
    assert data["adjustments"]["multipliers"][0] == {"name": "Strong Moat", "factor": 1.3}
    assert isinstance(data["flags"], list)


def test_unlisted_advantages_do_not_raise_the_score(empty_answers):
    made_up = AnswerSet.from_mapping({
        "competitive_advantages": [f"x{i}" for i in range(10)],
        "growth_opportunities": [f"y{i}" for i in range(10)],
    })
    result = calculate_scores(made_up)
    assert result.sections.strategic < calculate_scores(empty_answers).sections.strategic
    assert result.overall <= 50


def _random_answers(rng: random.Random) -> AnswerSet:
    raw = {}
    for field_name, table in tables.TABLES.items():
        if rng.random() < 0.2:
            continue
        if isinstance(table, tables.LookupTable):
            raw[field_name] = rng.choice(table.labels + ("Unlisted answer",))
        elif isinstance(table, tables.CountingTable):
            raw[field_name] = rng.sample(table.labels, rng.randint(0, len(table.labels)))
        elif isinstance(table, tables.RankedChoiceTable):
            labels = [label for label, _ in table.ranking] + ["Unlisted method"]
            raw[field_name] = rng.sample(labels, rng.randint(0, len(labels)))
        else:
            raw[field_name] = rng.randint(0, 11)
    raw["annual_revenue"] = rng.choice(
        sorted(SMALL_COMPANY_REVENUE | LARGE_COMPANY_REVENUE) + ["$5-10 million", None]
    )
    raw["buyer_type"] = rng.choice([tables.PRIVATE_EQUITY, "Strategic acquirer", None])
    return AnswerSet.from_mapping(raw)


@pytest.mark.parametrize("seed", range(5))
def test_random_answer_sets_hold_score_invariants(seed):
    rng = random.Random(seed)
    for _ in range(200):
        answers = _random_answers(rng)
        result = calculate_scores(answers)

        assert 0 <= result.overall <= 100
        assert all(0 <= score <= 100 for score in result.sections.as_dict().values())
        assert result.adjustments.weights.total == pytest.approx(1.0, abs=1e-9)
        assert result.category == determine_category(result.overall)
        if answers.legal_issues == tables.LEGAL_MAJOR_PROBLEMS:
            assert result.overall <= CRITICAL_ISSUE_CAP
        assert calculate_scores(answers) == result
