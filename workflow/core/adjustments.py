"""
Adjustment engine: conditional multipliers and penalties.

Rules are pure predicate objects grouped in a fixed order. Within a group
only the first matching rule fires, which is how mutually exclusive
alternatives (the two owner dependency penalties) are expressed; groups
themselves are independent. The returned adjustments keep evaluation order.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from workflow.core import lookup_tables as labels
from workflow.core.answers import AnswerSet
from workflow.core.scoring_models import Adjustment, SectionScores, WeightVector
from workflow.core.weights import resolve_weights

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RuleContext:
    """What a rule may look at besides the raw answers"""

    sections: SectionScores
    weighted_score: float


@dataclass(frozen=True)
class AdjustmentRule:
    name: str
    factor: float
    predicate: Callable[[AnswerSet, RuleContext], bool]

    def applies(self, answers: AnswerSet, context: RuleContext) -> bool:
        return bool(self.predicate(answers, context))

    def to_adjustment(self) -> Adjustment:
        return Adjustment(name=self.name, factor=self.factor)


RuleGroup = Tuple[AdjustmentRule, ...]


def weighted_score(sections: SectionScores, weights: WeightVector) -> float:
    """Sum of section score times section weight, before any adjustment"""
    section_weights = weights.as_dict()
    return sum(score * section_weights[section] for section, score in sections.as_dict().items())


STRONG_MOAT = AdjustmentRule(
    "Strong Moat", 1.3,
    lambda a, ctx: (
        a.defensibility == labels.VERY_DEFENSIBLE
        and a.competitive_position in (labels.MARKET_LEADER, labels.TOP_3)
    ),
)

RECURRING_REVENUE_EXCELLENCE = AdjustmentRule(
    "Recurring Revenue Excellence", 1.2,
    lambda a, ctx: (
        a.revenue_quality == labels.RECURRING_HIGH
        and a.customer_concentration in (labels.CONCENTRATION_UNDER_20, labels.CONCENTRATION_20_40)
    ),
)

FINANCIAL_EXCELLENCE = AdjustmentRule(
    "Financial Excellence", 1.15,
    lambda a, ctx: (
        a.ebitda_margin in (labels.EBITDA_20_30, labels.EBITDA_OVER_30)
        and a.cash_flow_status == labels.CASH_FLOW_STRONG
    ),
)

AUDITED_FINANCIALS = AdjustmentRule(
    "Audited Financials", 1.1,
    lambda a, ctx: a.financial_audits == labels.AUDITED_ANNUALLY,
)

CRITICAL_OWNER_DEPENDENCY = AdjustmentRule(
    "Critical Owner Dependency", 0.4,
    lambda a, ctx: (
        a.operate_without_owner == labels.WOULD_LIKELY_FAIL
        and a.post_sale_involvement == labels.FULL_EXIT
    ),
)

MANAGEABLE_OWNER_DEPENDENCY = AdjustmentRule(
    "Manageable Owner Dependency", 0.8,
    lambda a, ctx: (
        a.operate_without_owner == labels.WOULD_LIKELY_FAIL
        and a.post_sale_involvement in (labels.STAY_1_2_YEARS, labels.ADVISORY_ROLE)
    ),
)

CRITICAL_CUSTOMER_RISK = AdjustmentRule(
    "Critical Customer Risk", 0.3,
    lambda a, ctx: (
        a.customer_concentration == labels.CONCENTRATION_OVER_80
        and a.client_reaction in (labels.CLIENT_MAJOR_CONCERN, labels.CLIENT_CRITICAL_ISSUE)
    ),
)

# Compares against the weighted score before multipliers and penalties
TIMELINE_PRESSURE = AdjustmentRule(
    "Timeline Pressure", 0.8,
    lambda a, ctx: a.exit_timeline == labels.WITHIN_12_MONTHS and ctx.weighted_score < 70,
)

MULTIPLIER_RULES: Tuple[RuleGroup, ...] = (
    (STRONG_MOAT,),
    (RECURRING_REVENUE_EXCELLENCE,),
    (FINANCIAL_EXCELLENCE,),
    (AUDITED_FINANCIALS,),
)

PENALTY_RULES: Tuple[RuleGroup, ...] = (
    (CRITICAL_OWNER_DEPENDENCY, MANAGEABLE_OWNER_DEPENDENCY),
    (CRITICAL_CUSTOMER_RISK,),
    (TIMELINE_PRESSURE,),
)


def evaluate_rules(
    groups: Sequence[RuleGroup],
    answers: AnswerSet,
    context: RuleContext
) -> List[Adjustment]:
    """Return the adjustments whose rules fire, first match per group"""
    fired = []
    for group in groups:
        for rule in group:
            if rule.applies(answers, context):
                fired.append(rule.to_adjustment())
                break
    return fired


def _context(
    answers: AnswerSet,
    sections: SectionScores,
    weights: Optional[WeightVector]
) -> RuleContext:
    if weights is None:
        weights = resolve_weights(answers)
    return RuleContext(sections=sections, weighted_score=weighted_score(sections, weights))


def get_multipliers(
    answers: AnswerSet,
    sections: SectionScores,
    weights: Optional[WeightVector] = None
) -> List[Adjustment]:
    multipliers = evaluate_rules(MULTIPLIER_RULES, answers, _context(answers, sections, weights))
    logger.debug(f"Multipliers fired: {[m.name for m in multipliers]}")
    return multipliers


def get_penalties(
    answers: AnswerSet,
    sections: SectionScores,
    weights: Optional[WeightVector] = None
) -> List[Adjustment]:
    penalties = evaluate_rules(PENALTY_RULES, answers, _context(answers, sections, weights))
    logger.debug(f"Penalties fired: {[p.name for p in penalties]}")
    return penalties
