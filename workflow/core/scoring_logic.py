"""
Pure scoring pipeline for the exit readiness assessment.

answers -> section scores -> weights, multipliers, penalties -> final score
-> category and advisory flags. Nothing here does I/O or keeps state, so the
same AnswerSet always produces the same ScoreResult.
"""

import logging
from typing import List

from workflow.core import lookup_tables as labels
from workflow.core.adjustments import get_multipliers, get_penalties, weighted_score
from workflow.core.answers import AnswerSet
from workflow.core.scoring_models import (
    AppliedAdjustments,
    ReadinessCategory,
    ScoreResult,
    SectionScores,
    WeightVector,
)
from workflow.core.sections import clamp, round_half_up, score_all_sections
from workflow.core.weights import resolve_weights

logger = logging.getLogger(__name__)

CRITICAL_ISSUE_CAP = 40

CATEGORY_THRESHOLDS = (
    (90, ReadinessCategory.EXIT_READY),
    (75, ReadinessCategory.NEARLY_READY),
    (60, ReadinessCategory.PREPARATION_NEEDED),
    (40, ReadinessCategory.SIGNIFICANT_GAPS),
)

FLAG_HIDDEN_GEM = "Hidden Gem - Strong moat compensates for weaknesses"
FLAG_TIMELINE_MISMATCH = "Timeline/Readiness Mismatch - Urgent action needed"
FLAG_SELLERS_REMORSE = "High Seller's Remorse Risk"
FLAG_PE_ATTRACTIVE = "PE Attractive - Founder transition enhances value"


def has_critical_issues(answers: AnswerSet) -> bool:
    """Existential defects that no strength elsewhere can offset"""
    return (
        answers.cash_flow_status == labels.CASH_FLOW_NEGATIVE
        or answers.ebitda_margin == labels.EBITDA_NEGATIVE
        or answers.legal_issues == labels.LEGAL_MAJOR_PROBLEMS
    )


def determine_category(score: int) -> ReadinessCategory:
    for threshold, category in CATEGORY_THRESHOLDS:
        if score >= threshold:
            return category
    return ReadinessCategory.NOT_READY


def identify_flags(answers: AnswerSet, sections: SectionScores, overall: int) -> List[str]:
    """Advisory annotations, independent of each other and of the category"""
    flags = []

    if 50 <= overall <= 70 and answers.defensibility == labels.VERY_DEFENSIBLE:
        flags.append(FLAG_HIDDEN_GEM)

    if answers.exit_timeline == labels.WITHIN_12_MONTHS and overall < 70:
        flags.append(FLAG_TIMELINE_MISMATCH)

    if (answers.owner_motivation == labels.MOTIVATION_BURNOUT
            and answers.emotional_readiness is not None
            and answers.emotional_readiness < 5):
        flags.append(FLAG_SELLERS_REMORSE)

    if (answers.buyer_type == labels.PRIVATE_EQUITY
            and sections.business >= 70
            and answers.post_sale_involvement != labels.FULL_EXIT):
        flags.append(FLAG_PE_ATTRACTIVE)

    return flags


def aggregate(sections: SectionScores, weights: WeightVector, answers: AnswerSet) -> ScoreResult:
    """
    Combine section scores into the final result.

    Args:
        sections: the five section scores
        weights: resolved section weights
        answers: raw answers, consulted by rules, the cap and the flags

    Returns:
        Complete, immutable ScoreResult
    """
    weighted = weighted_score(sections, weights)
    multipliers = get_multipliers(answers, sections, weights)
    penalties = get_penalties(answers, sections, weights)

    adjusted = weighted
    for multiplier in multipliers:
        adjusted *= multiplier.factor
    for penalty in penalties:
        adjusted *= penalty.factor

    if has_critical_issues(answers):
        adjusted = min(adjusted, CRITICAL_ISSUE_CAP)

    overall = round_half_up(clamp(adjusted))
    category = determine_category(overall)
    flags = identify_flags(answers, sections, overall)

    logger.debug(
        f"Weighted {weighted:.2f} -> adjusted {adjusted:.2f} -> {overall} ({category.value})"
    )

    return ScoreResult(
        overall=overall,
        sections=sections,
        category=category,
        flags=tuple(flags),
        adjustments=AppliedAdjustments(
            multipliers=tuple(multipliers),
            penalties=tuple(penalties),
            weights=weights,
        ),
    )


def calculate_scores(answers: AnswerSet) -> ScoreResult:
    """Run the full scoring pipeline for one AnswerSet"""
    sections = score_all_sections(answers)
    weights = resolve_weights(answers)
    return aggregate(sections, weights, answers)
