"""
Section scorers.

Each of the five sections combines a fixed set of sub-scores (0-10) into a
0-100 score using hand-tuned weights. The weights below are the relative
importances supplied by the advisors; they are normalized by their sum when
the section is defined so the effective weights of every section add up to
1.0 and an all-best section scores exactly 100.

Sections are independent of each other.
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Tuple

from workflow.core import lookup_tables as tables
from workflow.core.answers import AnswerSet
from workflow.core.scoring_models import SECTIONS, SectionScores

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (not banker's rounding)"""
    return int(math.floor(value + 0.5))


def clamp(value: float, low: float = 0, high: float = 100) -> float:
    return max(low, min(high, value))


@dataclass(frozen=True)
class SubScore:
    name: str
    table: Any
    weight: float


@dataclass(frozen=True)
class SectionDefinition:
    name: str
    components: Tuple[SubScore, ...]

    @classmethod
    def build(cls, name: str, components: Tuple[Tuple[str, Any, float], ...]) -> "SectionDefinition":
        total = sum(weight for _, _, weight in components)
        return cls(
            name=name,
            components=tuple(SubScore(key, table, weight / total) for key, table, weight in components),
        )

    def subscores(self, answers: AnswerSet) -> Dict[str, int]:
        return {
            component.name: tables.lookup(component.table, answers.get(component.table.field))
            for component in self.components
        }

    def score(self, answers: AnswerSet) -> int:
        subscores = self.subscores(answers)
        total = 0.0
        for component in self.components:
            total += subscores.get(component.name, 0) * component.weight * 10
        return round_half_up(clamp(total))


OWNER = SectionDefinition.build("owner", (
    ("motivation", tables.OWNER_MOTIVATION, 0.10),
    ("timeline", tables.EXIT_TIMELINE, 0.15),
    ("flexibility", tables.TIMELINE_FLEXIBILITY, 0.10),
    ("valuation_method", tables.VALUATION_METHOD, 0.10),
    ("net_worth", tables.NET_WORTH_CONCENTRATION, 0.10),
    ("proceeds", tables.PROCEEDS_SUFFICIENCY, 0.15),
    ("emotional", tables.EMOTIONAL_READINESS, 0.15),
    ("vision", tables.POST_EXIT_VISION, 0.10),
    ("involvement", tables.POST_SALE_INVOLVEMENT, 0.05),
    ("family", tables.FAMILY_ALIGNMENT, 0.05),
))

BUSINESS = SectionDefinition.build("business", (
    ("revenue_growth", tables.REVENUE_GROWTH, 0.15),
    ("ebitda", tables.EBITDA_MARGIN, 0.15),
    ("revenue_quality", tables.REVENUE_QUALITY, 0.10),
    ("concentration", tables.CUSTOMER_CONCENTRATION, 0.15),
    ("gross_margin", tables.GROSS_MARGIN, 0.10),
    ("capex", tables.CAPEX_REQUIREMENTS, 0.05),
    ("cash_flow", tables.CASH_FLOW_STATUS, 0.15),
    ("audits", tables.FINANCIAL_AUDITS, 0.05),
    ("debt", tables.DEBT_LEVELS, 0.05),
    ("competitive", tables.COMPETITIVE_POSITION, 0.10),
    ("market_size", tables.MARKET_SIZE, 0.05),
    ("market_growth", tables.MARKET_GROWTH, 0.10),
    ("documentation", tables.PROCESS_DOCUMENTATION, 0.05),
    ("reporting", tables.FINANCIAL_REPORTING, 0.05),
    ("risk_mgmt", tables.RISK_MANAGEMENT, 0.05),
))

STRATEGIC = SectionDefinition.build("strategic", (
    ("value_prop", tables.VALUE_PROPOSITION, 0.20),
    ("advantages", tables.COMPETITIVE_ADVANTAGES, 0.20),
    ("defensibility", tables.DEFENSIBILITY, 0.25),
    ("projected_growth", tables.PROJECTED_GROWTH, 0.15),
    ("opportunities", tables.GROWTH_OPPORTUNITIES, 0.10),
    ("investment", tables.GROWTH_INVESTMENT, 0.05),
    ("client_reaction", tables.CLIENT_REACTION, 0.15),
))

ORGANIZATIONAL = SectionDefinition.build("organizational", (
    ("operate", tables.OPERATE_WITHOUT_OWNER, 0.25),
    ("second", tables.SECOND_IN_COMMAND, 0.15),
    ("management", tables.MANAGEMENT_DEPTH, 0.15),
    ("flight_risk", tables.EMPLOYEE_FLIGHT_RISK, 0.10),
    ("it_infra", tables.IT_INFRASTRUCTURE, 0.10),
    ("cyber", tables.CYBERSECURITY, 0.10),
    ("systems", tables.SYSTEMS_INTEGRATION, 0.05),
    ("morale", tables.EMPLOYEE_MORALE, 0.05),
    ("knowledge", tables.KNOWLEDGE_DOCUMENTATION, 0.15),
))

TRANSACTION = SectionDefinition.build("transaction", (
    ("legal", tables.LEGAL_ISSUES, 0.25),
    ("records", tables.CORPORATE_RECORDS, 0.15),
    ("ip", tables.IP_PROTECTION, 0.10),
    ("ma_activity", tables.MA_MARKET_ACTIVITY, 0.15),
    ("comparables", tables.COMPARABLE_TRANSACTIONS, 0.10),
    ("conditions", tables.MARKET_CONDITIONS, 0.10),
    ("buyers", tables.BUYERS_IDENTIFIED, 0.10),
    ("offers", tables.UNSOLICITED_OFFERS, 0.05),
))

SECTION_DEFINITIONS: Dict[str, SectionDefinition] = {
    definition.name: definition
    for definition in (OWNER, BUSINESS, STRATEGIC, ORGANIZATIONAL, TRANSACTION)
}


def score_section(section: str, answers: AnswerSet) -> int:
    """
    Score one section of the assessment.

    Args:
        section: one of owner, business, strategic, organizational, transaction
        answers: the owner's answers

    Returns:
        Integer score in [0, 100]
    """
    try:
        definition = SECTION_DEFINITIONS[section]
    except KeyError:
        raise ValueError(f"Unknown section: {section}") from None
    return definition.score(answers)


def score_all_sections(answers: AnswerSet) -> SectionScores:
    scores = {section: score_section(section, answers) for section in SECTIONS}
    logger.debug(f"Section scores: {scores}")
    return SectionScores(**scores)
