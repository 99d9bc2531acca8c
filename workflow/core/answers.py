"""
AnswerSet: the immutable questionnaire response consumed by the scoring engine.
"""

import logging
from typing import Any, Dict, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, ValidationError, ValidationInfo, field_validator

from workflow.core.errors import InvalidPayloadError
from workflow.core.lookup_tables import get_table

logger = logging.getLogger(__name__)

MULTI_SELECT_FIELDS = ("valuation_method", "competitive_advantages", "growth_opportunities")
SCALE_FIELDS = ("emotional_readiness",)


class AnswerSet(BaseModel):
    """
    One owner's answers keyed by questionnaire field.

    A field left as None was not answered and is scored with its lookup
    table default. Keys outside the vocabulary are dropped on construction.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    # Owner readiness
    owner_motivation: Optional[str] = None
    exit_timeline: Optional[str] = None
    timeline_flexibility: Optional[str] = None
    valuation_method: Optional[Tuple[str, ...]] = None
    net_worth_concentration: Optional[str] = None
    proceeds_sufficiency: Optional[str] = None
    emotional_readiness: Optional[int] = None
    post_exit_vision: Optional[str] = None
    post_sale_involvement: Optional[str] = None
    family_alignment: Optional[str] = None

    # Business performance
    revenue_growth: Optional[str] = None
    ebitda_margin: Optional[str] = None
    revenue_quality: Optional[str] = None
    customer_concentration: Optional[str] = None
    gross_margin: Optional[str] = None
    capex_requirements: Optional[str] = None
    cash_flow_status: Optional[str] = None
    financial_audits: Optional[str] = None
    debt_levels: Optional[str] = None
    competitive_position: Optional[str] = None
    market_size: Optional[str] = None
    market_growth: Optional[str] = None
    process_documentation: Optional[str] = None
    financial_reporting: Optional[str] = None
    risk_management: Optional[str] = None

    # Strategic position
    value_proposition: Optional[str] = None
    competitive_advantages: Optional[Tuple[str, ...]] = None
    defensibility: Optional[str] = None
    projected_growth: Optional[str] = None
    growth_opportunities: Optional[Tuple[str, ...]] = None
    growth_investment: Optional[str] = None
    client_reaction: Optional[str] = None

    # Organizational readiness
    operate_without_owner: Optional[str] = None
    second_in_command: Optional[str] = None
    management_depth: Optional[str] = None
    employee_flight_risk: Optional[str] = None
    it_infrastructure: Optional[str] = None
    cybersecurity: Optional[str] = None
    systems_integration: Optional[str] = None
    employee_morale: Optional[str] = None
    knowledge_documentation: Optional[str] = None

    # Transaction readiness
    legal_issues: Optional[str] = None
    corporate_records: Optional[str] = None
    ip_protection: Optional[str] = None
    ma_market_activity: Optional[str] = None
    comparable_transactions: Optional[str] = None
    market_conditions: Optional[str] = None
    buyers_identified: Optional[str] = None
    unsolicited_offers: Optional[str] = None

    # Context used for weighting
    annual_revenue: Optional[str] = None
    buyer_type: Optional[str] = None

    @field_validator(*MULTI_SELECT_FIELDS, mode="before")
    @classmethod
    def _single_label_as_selection(cls, value: Any) -> Any:
        # Single-choice submissions of a multi-select question
        if isinstance(value, str):
            return (value,)
        return value

    @field_validator(*SCALE_FIELDS)
    @classmethod
    def _off_scale_as_unanswered(cls, value: Optional[int], info: ValidationInfo) -> Optional[int]:
        # Off-scale values score as unanswered
        if value is not None and not get_table(info.field_name).in_range(value):
            logger.debug(f"Ignoring off-scale {info.field_name}={value}")
            return None
        return value

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "AnswerSet":
        """
        Build an AnswerSet from a raw field -> value mapping.

        Raises:
            InvalidPayloadError: if the mapping is not a mapping or a value
                has the wrong shape for its field
        """
        if not isinstance(raw, Mapping):
            raise InvalidPayloadError(f"Answers must be a mapping, got {type(raw).__name__}")

        try:
            return cls.model_validate(dict(raw))
        except ValidationError as e:
            fields = sorted({str(err["loc"][0]) for err in e.errors() if err.get("loc")})
            raise InvalidPayloadError(f"Malformed answers for fields: {', '.join(fields)}") from e

    def get(self, field_name: str) -> Any:
        return getattr(self, field_name, None)

    @property
    def answered_fields(self) -> Tuple[str, ...]:
        return tuple(
            name for name in type(self).model_fields if getattr(self, name) is not None
        )

    def as_dict(self) -> Dict[str, Any]:
        """Answered fields only, multi-selects as lists"""
        return {
            name: list(value) if isinstance(value, tuple) else value
            for name, value in self.model_dump().items()
            if value is not None
        }
