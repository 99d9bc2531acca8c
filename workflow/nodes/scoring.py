"""
Scoring node for LangGraph workflow.
Deterministic: wraps the pure scoring pipeline, no LLM involved.
"""

import logging
from datetime import datetime
from typing import Any, Dict

from workflow.core.scoring_logic import calculate_scores

logger = logging.getLogger(__name__)


def scoring_node(state: Dict[str, Any]) -> Dict[str, Any]:
    """
    Score the AnswerSet produced by intake.

    Args:
        state: Current workflow state with answers

    Returns:
        State update with the ScoreResult
    """
    start_time = datetime.now()
    logger.info(f"=== SCORING NODE STARTED - Report: {state['report_id']} ===")

    try:
        if state.get("score_result") is not None:
            # Regeneration keeps the stored result untouched
            score_result = state["score_result"]
        else:
            score_result = calculate_scores(state["answers"])

        processing_time = (datetime.now() - start_time).total_seconds()

        logger.info(
            f"Overall score: {score_result.overall}/100 - {score_result.category.value}, "
            f"sections: {score_result.sections.as_dict()}"
        )
        if score_result.flags:
            logger.info(f"Flags: {', '.join(score_result.flags)}")
        logger.info(f"=== SCORING NODE COMPLETED - {processing_time:.2f}s ===")

        return {
            "current_stage": "scoring",
            "score_result": score_result,
            "processing_time": {**state.get("processing_time", {}), "scoring": processing_time},
            "messages": [
                f"Scoring completed in {processing_time:.2f}s - "
                f"Overall: {score_result.overall}/100 ({score_result.category.value}), "
                f"Multipliers: {len(score_result.adjustments.multipliers)}, "
                f"Penalties: {len(score_result.adjustments.penalties)}"
            ],
        }

    except Exception as e:
        logger.error(f"Error in scoring node: {str(e)}", exc_info=True)
        return {
            "current_stage": "scoring_error",
            "error": f"Scoring failed: {str(e)}",
            "error_type": type(e).__name__,
            "messages": [f"ERROR in scoring: {str(e)}"],
        }
