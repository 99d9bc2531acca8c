import argparse
import json
import sys
from dotenv import load_dotenv

from workflow.core.answers import AnswerSet
from workflow.core.errors import InvalidPayloadError
from workflow.core.scoring_logic import calculate_scores
from src.utils.logging_config import setup_logging

load_dotenv()
logger = setup_logging()

SAMPLE_ANSWERS = {
    "owner_motivation": "Retirement/lifestyle change",
    "exit_timeline": "1-2 years",
    "timeline_flexibility": "Somewhat flexible - prefer to exit within my timeframe but can adjust",
    "valuation_method": ["Informal estimate from advisors"],
    "emotional_readiness": 7,
    "post_sale_involvement": "Willing to stay 1-2 years if needed",
    "annual_revenue": "$5-10 million",
    "revenue_growth": "Strong growth (11-25% annually)",
    "ebitda_margin": "20-30%",
    "revenue_quality": "Mostly recurring (50-80%)",
    "customer_concentration": "20-40%",
    "cash_flow_status": "Yes, strong positive cash flow",
    "financial_audits": "Yes, reviewed by CPA",
    "competitive_position": "Top 3 in market",
    "defensibility": "Moderately defensible (1-3 years)",
    "competitive_advantages": ["Proprietary technology", "Strong brand recognition"],
    "operate_without_owner": "Yes, with minor issues",
    "management_depth": "Good - most positions well-covered",
    "legal_issues": "No issues",
    "buyer_type": "Strategic buyer",
}


def score_assessment(raw_answers: dict) -> dict:
    """
    Score one set of answers and return the ScoreResult as a dict
    """
    answers = AnswerSet.from_mapping(raw_answers)
    logger.info(f"Scoring {len(answers.answered_fields)} answered fields")
    result = calculate_scores(answers)
    logger.info(f"Overall: {result.overall}/100 ({result.category.value})")
    return result.to_dict()


def load_answers(path: str) -> dict:
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Score an exit readiness assessment")
    parser.add_argument(
        "answers_file",
        nargs="?",
        help="JSON file of field -> answer (scores a built-in sample when omitted)"
    )
    args = parser.parse_args(argv)

    try:
        raw_answers = load_answers(args.answers_file) if args.answers_file else SAMPLE_ANSWERS
        result = score_assessment(raw_answers)
    except (OSError, json.JSONDecodeError, InvalidPayloadError) as e:
        logger.error(f"Could not score assessment: {e}")
        return 1

    print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
