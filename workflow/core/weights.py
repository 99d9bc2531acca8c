"""
Section weight resolution.

Weights start from a base vector, take at most one company-size override,
are nudged for private equity buyers, and are finally divided by their sum.
"""

import logging
from typing import Dict

from workflow.core.answers import AnswerSet
from workflow.core.lookup_tables import PRIVATE_EQUITY
from workflow.core.scoring_models import WeightVector

logger = logging.getLogger(__name__)

BASE_WEIGHTS = {
    "owner": 0.15,
    "business": 0.30,
    "strategic": 0.25,
    "organizational": 0.20,
    "transaction": 0.10,
}

SMALL_COMPANY_REVENUE = frozenset({"Under $1 million", "$1-5 million"})
LARGE_COMPANY_REVENUE = frozenset({"$25-50 million", "$50-100 million", "Over $100 million"})

# Small companies sell on the owner and their niche; large ones on the team
SMALL_COMPANY_OVERRIDE = {"owner": 0.25, "strategic": 0.20, "organizational": 0.15}
LARGE_COMPANY_OVERRIDE = {"owner": 0.10, "business": 0.25, "organizational": 0.30}

PRIVATE_EQUITY_NUDGE = {"business": 1.2, "organizational": 1.2, "strategic": 0.9}


def size_override(annual_revenue) -> Dict[str, float]:
    if annual_revenue in SMALL_COMPANY_REVENUE:
        return SMALL_COMPANY_OVERRIDE
    if annual_revenue in LARGE_COMPANY_REVENUE:
        return LARGE_COMPANY_OVERRIDE
    return {}


def resolve_weights(answers: AnswerSet) -> WeightVector:
    """Compute the five section weights for these answers, summing to 1.0"""
    weights = dict(BASE_WEIGHTS)
    weights.update(size_override(answers.annual_revenue))

    if answers.buyer_type == PRIVATE_EQUITY:
        for section, factor in PRIVATE_EQUITY_NUDGE.items():
            weights[section] *= factor

    total = sum(weights.values())
    normalized = {section: weight / total for section, weight in weights.items()}
    logger.debug(f"Resolved weights: {normalized}")
    return WeightVector(**normalized)
