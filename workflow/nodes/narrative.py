"""
Narrative generation node for LangGraph workflow.
Asks the chat model for the nine-section written report.
"""

import logging
from datetime import datetime
from typing import Any, Dict

from langchain_core.messages import HumanMessage, SystemMessage

from workflow.core.answers import AnswerSet
from workflow.core.errors import NarrativeGenerationError
from workflow.core.llm_utils import count_words, get_llm_with_fallback, invoke_for_text
from workflow.core.prompts import build_report_prompt
from workflow.core.scoring_models import ScoreResult

logger = logging.getLogger(__name__)


def generate_narrative(score_result: ScoreResult, answers: AnswerSet, llm=None) -> str:
    """
    Generate the written report for one scored assessment.

    Raises:
        NarrativeGenerationError: if the model call fails or returns nothing
    """
    prompts = build_report_prompt(score_result, answers)
    messages = [
        SystemMessage(content=prompts["system"]),
        HumanMessage(content=prompts["user"])
    ]

    try:
        llm = llm or get_llm_with_fallback()
        logger.debug(f"Narrative prompt: {len(prompts['user'])} chars")
        narrative = invoke_for_text(llm, messages)
    except Exception as e:
        raise NarrativeGenerationError(f"Failed to generate report: {e}") from e

    if not narrative:
        raise NarrativeGenerationError("Failed to generate report: empty response from model")

    return narrative


def narrative_node(state: Dict[str, Any]) -> Dict[str, Any]:
    """
    Narrative node.

    Args:
        state: Current workflow state with answers and score_result

    Returns:
        State update with the narrative text
    """
    start_time = datetime.now()
    logger.info(f"=== NARRATIVE NODE STARTED - Report: {state['report_id']} ===")

    try:
        narrative = generate_narrative(state["score_result"], state["answers"])

        processing_time = (datetime.now() - start_time).total_seconds()
        word_count = count_words(narrative)
        logger.info(f"Narrative generated: {word_count} words")
        logger.info(f"=== NARRATIVE NODE COMPLETED - {processing_time:.2f}s ===")

        return {
            "current_stage": "narrative",
            "narrative": narrative,
            "processing_time": {**state.get("processing_time", {}), "narrative": processing_time},
            "messages": [f"Narrative completed in {processing_time:.2f}s - {word_count} words"],
        }

    except Exception as e:
        logger.error(f"Error in narrative node: {str(e)}", exc_info=True)
        return {
            "current_stage": "narrative_error",
            "error": f"Narrative failed: {str(e)}",
            "error_type": type(e).__name__,
            "messages": [f"ERROR in narrative: {str(e)}"],
        }
