"""
Answer lookup tables for the exit readiness assessment.

Every questionnaire field maps to exactly one table. A table enumerates the
answer labels it knows and the 0-10 sub-score each one earns, plus a single
default used when the answer is missing or carries a label the table does
not list. Most defaults are the neutral 5; a few fields treat "unknown" as a
mild risk and default lower.

The tables are the only place where defaults are resolved, so section
scorers never need to guard against missing answers.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Iterable, Mapping, Optional, Tuple

NEUTRAL = 5
MAX_SUBSCORE = 10


# Labels referenced by adjustment rules, weights and flags
WITHIN_12_MONTHS = "Within 12 months"
MOTIVATION_BURNOUT = "Burnout/loss of passion"
FULL_EXIT = "Want complete exit with no ongoing involvement"
STAY_1_2_YEARS = "Willing to stay 1-2 years if needed"
ADVISORY_ROLE = "Would like ongoing advisory/board role"

EBITDA_NEGATIVE = "Negative/Break-even"
EBITDA_20_30 = "20-30%"
EBITDA_OVER_30 = "Over 30%"
RECURRING_HIGH = "Highly recurring/subscription-based (>80%)"
CONCENTRATION_UNDER_20 = "Less than 20%"
CONCENTRATION_20_40 = "20-40%"
CONCENTRATION_OVER_80 = "Over 80%"
CASH_FLOW_STRONG = "Yes, strong positive cash flow"
CASH_FLOW_NEGATIVE = "No, negative cash flow"
AUDITED_ANNUALLY = "Yes, audited annually"
MARKET_LEADER = "Market leader"
TOP_3 = "Top 3 in market"

VERY_DEFENSIBLE = "Very defensible (3+ years)"
CLIENT_MAJOR_CONCERN = "Major concern - most clients have strong personal ties"
CLIENT_CRITICAL_ISSUE = "Critical issue - business depends on my relationships"

WOULD_LIKELY_FAIL = "No, would likely fail"
LEGAL_MAJOR_PROBLEMS = "Major problems"

PRIVATE_EQUITY = "Private equity firm"


@dataclass(frozen=True, eq=False)
class LookupTable:
    """Single-choice table: one label in, one sub-score out."""

    field: str
    scores: Mapping[str, int]
    default: int = NEUTRAL

    def __post_init__(self):
        object.__setattr__(self, "scores", MappingProxyType(dict(self.scores)))
        _check_range(self.field, list(self.scores.values()) + [self.default])

    @property
    def labels(self) -> Tuple[str, ...]:
        return tuple(self.scores)

    def lookup(self, value: Any) -> int:
        if isinstance(value, str) and value in self.scores:
            return self.scores[value]
        return self.default


@dataclass(frozen=True, eq=False)
class CountingTable:
    """
    Multi-select table scored by how many listed options were picked.

    Each distinct label found in options counts one point up to MAX_SUBSCORE;
    labels outside options earn nothing. The sentinel ("none of the above"
    style answer) overrides the count with sentinel_score.
    """

    field: str
    options: FrozenSet[str]
    sentinel: str
    sentinel_score: int
    default: int = NEUTRAL

    def __post_init__(self):
        object.__setattr__(self, "options", frozenset(self.options))
        if self.sentinel in self.options:
            raise ValueError(f"Table {self.field} lists its sentinel as a countable option")
        _check_range(self.field, [self.sentinel_score, self.default])

    @property
    def labels(self) -> Tuple[str, ...]:
        return tuple(sorted(self.options)) + (self.sentinel,)

    def lookup(self, value: Any) -> int:
        if not isinstance(value, (list, tuple)):
            return self.default
        if self.sentinel in value:
            return self.sentinel_score

        selected = {label.strip() for label in value if isinstance(label, str)} & self.options
        return min(len(selected), MAX_SUBSCORE)


@dataclass(frozen=True, eq=False)
class RankedChoiceTable:
    """
    Multi-select table where the best-ranked selected option wins.

    A selection that contains none of the ranked options scores no_match.
    """

    field: str
    ranking: Tuple[Tuple[str, int], ...]
    no_match: int = 1
    default: int = NEUTRAL

    def __post_init__(self):
        _check_range(self.field, [score for _, score in self.ranking] + [self.no_match, self.default])

    def lookup(self, value: Any) -> int:
        if not isinstance(value, (list, tuple)):
            return self.default
        for label, score in self.ranking:
            if label in value:
                return score
        return self.no_match


@dataclass(frozen=True, eq=False)
class ScaleTable:
    """Numeric 1-10 scale used directly as the sub-score."""

    field: str
    low: int = 1
    high: int = MAX_SUBSCORE
    default: int = NEUTRAL

    def __post_init__(self):
        _check_range(self.field, [self.low, self.high, self.default])

    def in_range(self, value: Any) -> bool:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return False
        return self.low <= value <= self.high

    def lookup(self, value: Any) -> int:
        if not self.in_range(value):
            return self.default
        return int(value)


def _check_range(name: str, values: Iterable[int]) -> None:
    for value in values:
        if not 0 <= value <= MAX_SUBSCORE:
            raise ValueError(f"Table {name} has sub-score {value} outside 0-{MAX_SUBSCORE}")


def lookup(table, value: Any) -> int:
    """Resolve one answer against its table, falling back to the table default"""
    return table.lookup(value)


# ---------------------------------------------------------------------------
# Owner readiness
# ---------------------------------------------------------------------------

OWNER_MOTIVATION = LookupTable("owner_motivation", {
    "Retirement/lifestyle change": 8,
    "Pursue new opportunities": 7,
    "Health concerns": 5,
    "Market timing is favorable": 9,
    MOTIVATION_BURNOUT: 4,
    "Family reasons": 6,
    "Financial needs": 3,
    "Unsolicited offer received": 7,
})

EXIT_TIMELINE = LookupTable("exit_timeline", {
    WITHIN_12_MONTHS: 5,
    "1-2 years": 8,
    "2-3 years": 10,
    "3-5 years": 9,
    "5+ years": 7,
    "Not sure": 3,
})

TIMELINE_FLEXIBILITY = LookupTable("timeline_flexibility", {
    "Very flexible - will wait for the right opportunity": 10,
    "Somewhat flexible - prefer to exit within my timeframe but can adjust": 8,
    "Fairly firm - need to exit close to my timeline": 6,
    "Very firm - must exit by a specific date": 4,
})

VALUATION_METHOD = RankedChoiceTable("valuation_method", (
    ("Professional business valuation", 10),
    ("Industry multiples/comparables", 8),
    ("Previous offers received", 7),
    ("Informal estimate from advisors", 6),
    ("Online valuation calculator", 4),
    ("Gut feeling/personal assessment", 3),
))

NET_WORTH_CONCENTRATION = LookupTable("net_worth_concentration", {
    "Less than 25%": 10,
    "25-50%": 8,
    "50-75%": 5,
    "More than 75%": 3,
})

PROCEEDS_SUFFICIENCY = LookupTable("proceeds_sufficiency", {
    "Yes, definitely": 10,
    "Yes, with some lifestyle adjustments": 7,
    "No, I'll need additional income": 4,
    "Not sure - haven't calculated this": 2,
})

EMOTIONAL_READINESS = ScaleTable("emotional_readiness")

POST_EXIT_VISION = LookupTable("post_exit_vision", {
    "Yes, very clear plans": 10,
    "Some ideas but not fully developed": 6,
    "No, haven't thought much about it": 3,
    "No, and this concerns me": 1,
})

POST_SALE_INVOLVEMENT = LookupTable("post_sale_involvement", {
    FULL_EXIT: 7,
    "Open to short transition period (3-6 months)": 9,
    STAY_1_2_YEARS: 10,
    ADVISORY_ROLE: 8,
    "Want to retain minority ownership": 6,
}, default=7)

FAMILY_ALIGNMENT = LookupTable("family_alignment", {
    "Yes, fully aligned and supportive": 10,
    "Yes, but some concerns to address": 6,
    "Partially discussed": 4,
    "No, not yet discussed": 2,
    "Not applicable": 10,
})

# ---------------------------------------------------------------------------
# Business performance
# ---------------------------------------------------------------------------

REVENUE_GROWTH = LookupTable("revenue_growth", {
    "Declining": 0,
    "Flat (0-2% annually)": 3,
    "Modest growth (3-10% annually)": 6,
    "Strong growth (11-25% annually)": 9,
    "Exceptional growth (>25% annually)": 10,
})

# Unknown margins are treated as a risk, not as neutral
EBITDA_MARGIN = LookupTable("ebitda_margin", {
    EBITDA_NEGATIVE: 0,
    "0-10%": 3,
    "10-20%": 6,
    EBITDA_20_30: 9,
    EBITDA_OVER_30: 10,
    "Not sure": 1,
}, default=3)

REVENUE_QUALITY = LookupTable("revenue_quality", {
    RECURRING_HIGH: 10,
    "Mostly recurring (50-80%)": 8,
    "Mix of recurring and project-based": 6,
    "Mostly project/transaction-based": 4,
    "Varies significantly month-to-month": 2,
})

CUSTOMER_CONCENTRATION = LookupTable("customer_concentration", {
    CONCENTRATION_UNDER_20: 10,
    CONCENTRATION_20_40: 8,
    "40-60%": 5,
    "60-80%": 2,
    CONCENTRATION_OVER_80: 0,
})

GROSS_MARGIN = LookupTable("gross_margin", {
    "Under 20%": 2,
    "20-30%": 4,
    "30-40%": 6,
    "40-50%": 8,
    "50-60%": 9,
    "Over 60%": 10,
})

CAPEX_REQUIREMENTS = LookupTable("capex_requirements", {
    "Minimal - service business with low capex needs": 10,
    "Low - occasional equipment/technology updates": 8,
    "Moderate - regular but manageable investments": 6,
    "High - significant ongoing capital needs": 4,
    "Very high - capital intensive business": 2,
})

CASH_FLOW_STATUS = LookupTable("cash_flow_status", {
    CASH_FLOW_STRONG: 10,
    "Yes, moderately positive": 7,
    "Breakeven/slightly positive": 4,
    "Sometimes positive, sometimes negative": 2,
    CASH_FLOW_NEGATIVE: 0,
})

FINANCIAL_AUDITS = LookupTable("financial_audits", {
    AUDITED_ANNUALLY: 10,
    "Yes, reviewed by CPA": 7,
    "No, but compiled by CPA": 5,
    "No, internally prepared only": 2,
})

DEBT_LEVELS = LookupTable("debt_levels", {
    "No debt": 10,
    "Minimal debt (< 1x EBITDA)": 8,
    "Moderate debt (1-3x EBITDA)": 6,
    "Significant debt (3-5x EBITDA)": 3,
    "High debt (> 5x EBITDA)": 1,
    "Not sure": 2,
})

COMPETITIVE_POSITION = LookupTable("competitive_position", {
    MARKET_LEADER: 10,
    TOP_3: 8,
    "Strong niche player": 7,
    "Average competitor": 4,
    "Struggling to compete": 1,
})

MARKET_SIZE = LookupTable("market_size", {
    "Over $1 billion": 10,
    "$500M - $1 billion": 8,
    "$100M - $500M": 6,
    "$50M - $100M": 4,
    "Under $50M": 2,
    "Not sure": 3,
})

MARKET_GROWTH = LookupTable("market_growth", {
    "Declining": 0,
    "Flat (0-2%)": 3,
    "Moderate (3-7%)": 6,
    "Strong (8-15%)": 9,
    "Very strong (>15%)": 10,
    "Not sure": 4,
})

PROCESS_DOCUMENTATION = LookupTable("process_documentation", {
    "Yes, comprehensively documented": 10,
    "Most critical processes documented": 7,
    "Some documentation exists": 4,
    "Minimal documentation": 2,
    "No formal documentation": 0,
})

FINANCIAL_REPORTING = LookupTable("financial_reporting", {
    "Excellent - real-time dashboards, detailed analytics": 10,
    "Good - monthly reports, key metrics tracked": 7,
    "Adequate - basic financial statements produced": 5,
    "Needs improvement - often delayed or incomplete": 2,
    "Poor - limited visibility into finances": 0,
})

RISK_MANAGEMENT = LookupTable("risk_management", {
    "Yes, comprehensive coverage recently reviewed": 10,
    "Yes, but should review/update": 7,
    "Basic coverage in place": 4,
    "Minimal coverage": 1,
    "Not sure what we have": 2,
})

# ---------------------------------------------------------------------------
# Strategic position
# ---------------------------------------------------------------------------

VALUE_PROPOSITION = LookupTable("value_proposition", {
    "Very clear and unique in market": 10,
    "Clear with some differentiation": 7,
    "Similar to competitors but well-executed": 5,
    "Unclear or poorly differentiated": 2,
    "Not sure": 3,
})

COMPETITIVE_ADVANTAGES = CountingTable("competitive_advantages", frozenset({
    "Proprietary technology",
    "Strong brand recognition",
    "Exclusive contracts",
    "Regulatory licenses",
    "Patents",
    "Network effects",
    "Cost leadership",
    "Unique supplier relationships",
    "Long-term customer contracts",
    "Specialized expertise",
}), sentinel="None of the above", sentinel_score=0)

DEFENSIBILITY = LookupTable("defensibility", {
    VERY_DEFENSIBLE: 10,
    "Moderately defensible (1-3 years)": 7,
    "Limited defensibility (<1 year)": 4,
    "Not defensible": 1,
    "Not sure": 3,
})

PROJECTED_GROWTH = LookupTable("projected_growth", {
    "Decline expected": 0,
    "Flat (0-5%)": 3,
    "Moderate (6-15%)": 7,
    "Strong (16-30%)": 9,
    "Very strong (>30%)": 10,
})

GROWTH_OPPORTUNITIES = CountingTable("growth_opportunities", frozenset({
    "Geographic expansion",
    "New products/services",
    "New customer segments",
    "Acquisitions",
    "Pricing optimization",
    "Digital/online channels",
    "Strategic partnerships",
    "Recurring revenue conversion",
    "International markets",
    "Operational efficiency gains",
}), sentinel="Limited opportunities", sentinel_score=2)

GROWTH_INVESTMENT = LookupTable("growth_investment", {
    "Minimal - can fund from cash flow": 10,
    "Moderate - some capital needed": 7,
    "Significant - major investment required": 4,
    "Not sure": 5,
})

CLIENT_REACTION = LookupTable("client_reaction", {
    "No concern - relationships are with the company": 10,
    "Minor concern - some personal relationships": 7,
    "Moderate concern - many buy because of me": 5,
    CLIENT_MAJOR_CONCERN: 2,
    CLIENT_CRITICAL_ISSUE: 0,
})

# ---------------------------------------------------------------------------
# Organizational readiness
# ---------------------------------------------------------------------------

OPERATE_WITHOUT_OWNER = LookupTable("operate_without_owner", {
    "Yes, definitely": 10,
    "Yes, with minor issues": 8,
    "Maybe, with significant challenges": 5,
    "No, would struggle significantly": 2,
    WOULD_LIKELY_FAIL: 0,
})

SECOND_IN_COMMAND = LookupTable("second_in_command", {
    "Yes, ready to take over": 10,
    "Yes, but needs 6-12 months development": 7,
    "Potential candidate identified": 4,
    "No clear successor": 1,
})

MANAGEMENT_DEPTH = LookupTable("management_depth", {
    "Excellent - strong leaders in all key areas": 10,
    "Good - most positions well-covered": 7,
    "Adequate - some gaps exist": 5,
    "Weak - significant gaps": 2,
    "No real management team": 0,
})

EMPLOYEE_FLIGHT_RISK = LookupTable("employee_flight_risk", {
    "Less than 10%": 10,
    "10-25%": 7,
    "25-50%": 4,
    "Over 50%": 1,
    "Not sure": 3,
})

IT_INFRASTRUCTURE = LookupTable("it_infrastructure", {
    "Modern and scalable": 10,
    "Good but needs some updates": 7,
    "Adequate but aging": 5,
    "Outdated and problematic": 2,
    "Minimal IT infrastructure": 1,
})

CYBERSECURITY = LookupTable("cybersecurity", {
    "Comprehensive security with recent audit": 10,
    "Good security measures in place": 7,
    "Basic protections": 4,
    "Minimal security": 1,
    "Not sure": 2,
})

SYSTEMS_INTEGRATION = LookupTable("systems_integration", {
    "Fully integrated ERP/CRM system": 10,
    "Most systems connected": 7,
    "Some integration": 5,
    "Mostly separate systems": 3,
    "Manual processes dominate": 1,
})

EMPLOYEE_MORALE = LookupTable("employee_morale", {
    "Excellent - highly engaged workforce": 10,
    "Good - generally positive": 7,
    "Average - some concerns": 5,
    "Poor - significant issues": 2,
    "Not sure": 4,
})

KNOWLEDGE_DOCUMENTATION = LookupTable("knowledge_documentation", {
    "Yes, comprehensive documentation": 10,
    "Most critical knowledge captured": 7,
    "Some documentation exists": 4,
    "Minimal documentation": 2,
    "Knowledge mostly in people's heads": 0,
})

# ---------------------------------------------------------------------------
# Transaction readiness
# ---------------------------------------------------------------------------

LEGAL_ISSUES = LookupTable("legal_issues", {
    "No issues": 10,
    "Minor issues, easily resolved": 7,
    "Some concerns but manageable": 4,
    "Significant issues": 1,
    LEGAL_MAJOR_PROBLEMS: 0,
})

CORPORATE_RECORDS = LookupTable("corporate_records", {
    "Excellent - recently audited": 10,
    "Good - well organized": 7,
    "Adequate - some cleanup needed": 5,
    "Poor - significant work required": 2,
    "Not sure": 3,
})

IP_PROTECTION = LookupTable("ip_protection", {
    "Yes, comprehensive protection": 10,
    "Mostly protected": 7,
    "Some protection": 4,
    "Minimal protection": 1,
    "Not applicable": 8,
    "Not sure": 2,
})

MA_MARKET_ACTIVITY = LookupTable("ma_market_activity", {
    "Very active - many recent deals": 10,
    "Moderately active": 7,
    "Some activity": 5,
    "Limited activity": 2,
    "Not sure": 4,
})

COMPARABLE_TRANSACTIONS = LookupTable("comparable_transactions", {
    "Yes, several recent comparables": 10,
    "Yes, a few comparables": 7,
    "Limited comparables": 4,
    "No recent comparables": 1,
    "Not sure": 3,
})

MARKET_CONDITIONS = LookupTable("market_conditions", {
    "Excellent - seller's market": 10,
    "Good conditions": 7,
    "Average conditions": 5,
    "Challenging conditions": 3,
    "Poor timing": 1,
    "Not sure": 4,
})

BUYERS_IDENTIFIED = LookupTable("buyers_identified", {
    "Yes, multiple interested parties": 10,
    "Yes, a few possibilities": 7,
    "One or two ideas": 4,
    "No specific buyers identified": 2,
    "No idea who would buy": 0,
})

UNSOLICITED_OFFERS = LookupTable("unsolicited_offers", {
    "Yes, multiple offers": 10,
    "Yes, one or two": 8,
    "Informal interest expressed": 5,
    "No offers or interest": 3,
})


TABLES: Dict[str, Any] = {
    table.field: table
    for table in (
        OWNER_MOTIVATION, EXIT_TIMELINE, TIMELINE_FLEXIBILITY, VALUATION_METHOD,
        NET_WORTH_CONCENTRATION, PROCEEDS_SUFFICIENCY, EMOTIONAL_READINESS,
        POST_EXIT_VISION, POST_SALE_INVOLVEMENT, FAMILY_ALIGNMENT,
        REVENUE_GROWTH, EBITDA_MARGIN, REVENUE_QUALITY, CUSTOMER_CONCENTRATION,
        GROSS_MARGIN, CAPEX_REQUIREMENTS, CASH_FLOW_STATUS, FINANCIAL_AUDITS,
        DEBT_LEVELS, COMPETITIVE_POSITION, MARKET_SIZE, MARKET_GROWTH,
        PROCESS_DOCUMENTATION, FINANCIAL_REPORTING, RISK_MANAGEMENT,
        VALUE_PROPOSITION, COMPETITIVE_ADVANTAGES, DEFENSIBILITY,
        PROJECTED_GROWTH, GROWTH_OPPORTUNITIES, GROWTH_INVESTMENT, CLIENT_REACTION,
        OPERATE_WITHOUT_OWNER, SECOND_IN_COMMAND, MANAGEMENT_DEPTH,
        EMPLOYEE_FLIGHT_RISK, IT_INFRASTRUCTURE, CYBERSECURITY,
        SYSTEMS_INTEGRATION, EMPLOYEE_MORALE, KNOWLEDGE_DOCUMENTATION,
        LEGAL_ISSUES, CORPORATE_RECORDS, IP_PROTECTION, MA_MARKET_ACTIVITY,
        COMPARABLE_TRANSACTIONS, MARKET_CONDITIONS, BUYERS_IDENTIFIED,
        UNSOLICITED_OFFERS,
    )
}


def get_table(field_name: str) -> Optional[Any]:
    """Return the lookup table registered for a field, if any"""
    return TABLES.get(field_name)


def best_label(field_name: str) -> Optional[str]:
    """Highest-scoring label of a single-choice table (first one on ties)"""
    table = TABLES.get(field_name)
    if not isinstance(table, LookupTable):
        return None
    return max(table.labels, key=lambda label: table.scores[label])
