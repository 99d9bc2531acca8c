"""Tests for section weight resolution."""

import pytest

from workflow.core import lookup_tables as tables
from workflow.core.answers import AnswerSet
from workflow.core.weights import BASE_WEIGHTS, resolve_weights, size_override


def test_base_weights_without_context(empty_answers):
    weights = resolve_weights(empty_answers)
    for section, base in BASE_WEIGHTS.items():
        assert getattr(weights, section) == pytest.approx(base)


def test_small_company_shifts_weight_to_owner():
    weights = resolve_weights(AnswerSet.from_mapping({"annual_revenue": "Under $1 million"}))
    assert weights.owner > BASE_WEIGHTS["owner"]
    assert weights.organizational < BASE_WEIGHTS["organizational"]
    assert weights.total == pytest.approx(1.0, abs=1e-9)


def test_large_company_shifts_weight_to_organization():
    weights = resolve_weights(AnswerSet.from_mapping({"annual_revenue": "Over $100 million"}))
    assert weights.organizational > BASE_WEIGHTS["organizational"]
    assert weights.owner < BASE_WEIGHTS["owner"]


def test_mid_size_company_has_no_override():
    assert size_override("$5-10 million") == {}
    assert size_override(None) == {}


def test_private_equity_nudge_is_renormalized():
    weights = resolve_weights(AnswerSet.from_mapping({"buyer_type": tables.PRIVATE_EQUITY}))
    assert weights.business > BASE_WEIGHTS["business"]
    assert weights.strategic < BASE_WEIGHTS["strategic"]
    assert weights.total == pytest.approx(1.0, abs=1e-9)


@pytest.mark.parametrize("revenue", ["Under $1 million", "$1-5 million", "$25-50 million", "Over $100 million", None])
@pytest.mark.parametrize("buyer", [tables.PRIVATE_EQUITY, "Strategic buyer", None])
def test_weights_always_sum_to_one(revenue, buyer):
    weights = resolve_weights(AnswerSet(annual_revenue=revenue, buyer_type=buyer))
    assert weights.total == pytest.approx(1.0, abs=1e-9)
