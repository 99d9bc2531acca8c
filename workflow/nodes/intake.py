"""
Intake node for LangGraph workflow.
Parses the Typeform webhook body into an AnswerSet and submission metadata.
"""

import logging
from datetime import datetime
from typing import Any, Dict

from workflow.core.typeform_parser import parse_typeform_response

logger = logging.getLogger(__name__)


def intake_node(state: Dict[str, Any]) -> Dict[str, Any]:
    """
    Intake node that turns the raw submission into answers.

    Skips parsing when answers were supplied directly (scoring API, report
    regeneration).

    Args:
        state: Current workflow state

    Returns:
        State update with answers and metadata
    """
    start_time = datetime.now()
    logger.info(f"=== INTAKE NODE STARTED - Report: {state['report_id']} ===")

    try:
        if state.get("answers") is not None:
            answers = state["answers"]
            metadata = state.get("metadata")
            message = "Intake skipped - answers supplied directly"
        else:
            parsed = parse_typeform_response(state.get("payload") or {})
            answers = parsed.answers
            metadata = parsed.metadata
            message = f"Intake parsed {len(parsed.raw_answers)} answers"

        processing_time = (datetime.now() - start_time).total_seconds()
        logger.info(f"Intake: {len(answers.answered_fields)} scored fields answered")
        logger.info(f"=== INTAKE NODE COMPLETED - {processing_time:.2f}s ===")

        return {
            "current_stage": "intake",
            "answers": answers,
            "metadata": metadata,
            "processing_time": {**state.get("processing_time", {}), "intake": processing_time},
            "messages": [f"{message} in {processing_time:.2f}s"],
        }

    except Exception as e:
        logger.error(f"Error in intake node: {str(e)}", exc_info=True)
        return {
            "current_stage": "intake_error",
            "error": f"Intake failed: {str(e)}",
            "error_type": type(e).__name__,
            "messages": [f"ERROR in intake: {str(e)}"],
        }
