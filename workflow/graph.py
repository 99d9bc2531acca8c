"""
LangGraph workflow orchestration for the exit readiness assessment.
Defines the node execution order and state flow.
"""

import logging
from datetime import datetime
from typing import Any, Dict, Optional

from langgraph.graph import END, StateGraph

from src.utils.data_models import SubmissionMetadata
from src.utils.report_storage import generate_report_id
from workflow.core.answers import AnswerSet
from workflow.core.scoring_models import ScoreResult
from workflow.nodes.intake import intake_node
from workflow.nodes.narrative import narrative_node
from workflow.nodes.report import report_node
from workflow.nodes.scoring import scoring_node
from workflow.state import WorkflowState

logger = logging.getLogger(__name__)

PIPELINE = ["intake", "scoring", "narrative", "report"]


def _route_after(next_node: str):
    """Build a router that stops the run as soon as a node sets error"""

    def route(state: Dict[str, Any]) -> str:
        if state.get("error"):
            logger.warning(f"Stopping workflow at {state.get('current_stage')}: {state['error']}")
            return END
        return next_node

    return route


def create_workflow():
    """
    Creates the LangGraph workflow for the assessment.

    intake -> scoring -> narrative -> report -> END, with an early exit
    to END after any node that records an error.

    Returns:
        Compiled StateGraph ready for execution
    """
    workflow = StateGraph(WorkflowState)

    workflow.add_node("intake", intake_node)
    workflow.add_node("scoring", scoring_node)
    workflow.add_node("narrative", narrative_node)
    workflow.add_node("report", report_node)

    workflow.set_entry_point("intake")
    for current, following in zip(PIPELINE, PIPELINE[1:]):
        workflow.add_conditional_edges(
            current,
            _route_after(following),
            {following: following, END: END}
        )
    workflow.add_edge("report", END)

    return workflow.compile()


def _format_result(result: Dict[str, Any], total_time: float) -> Dict[str, Any]:
    score_result = result.get("score_result")
    return {
        "report_id": result.get("report_id"),
        "status": "error" if result.get("error") else "completed",
        "stage": result.get("current_stage"),
        "error": result.get("error"),
        "error_type": result.get("error_type"),
        "answers": result.get("answers"),
        "metadata": result.get("metadata"),
        "score_result": score_result,
        "narrative": result.get("narrative"),
        "html_report": result.get("html_report"),
        "generated_at": result.get("generated_at"),
        "processing_time": total_time,
        "stage_timings": result.get("processing_time", {}),
        "messages": result.get("messages", []),
    }


async def run_workflow(initial_state: Dict[str, Any]) -> Dict[str, Any]:
    start_time = datetime.now()
    report_id = initial_state["report_id"]

    try:
        logger.info(f"Starting LangGraph workflow for report: {report_id}")
        app = create_workflow()
        result = await app.ainvoke({
            "current_stage": "start",
            "error": None,
            "error_type": None,
            "processing_time": {},
            "messages": [],
            **initial_state,
        })
    except Exception as e:
        logger.error(f"Error in workflow: {str(e)}", exc_info=True)
        result = {
            **initial_state,
            "current_stage": "workflow_error",
            "error": str(e),
            "error_type": type(e).__name__,
        }

    total_time = (datetime.now() - start_time).total_seconds()
    formatted = _format_result(result, total_time)

    if formatted["status"] == "error":
        logger.error(f"Workflow error for report {report_id}: {formatted['error']}")
    else:
        logger.info(f"Workflow completed for report {report_id} in {total_time:.1f}s")

    return formatted


async def process_assessment_async(
    payload: Dict[str, Any],
    report_id: Optional[str] = None
) -> Dict[str, Any]:
    """
    Run the full pipeline on a Typeform webhook body.

    Args:
        payload: decoded webhook JSON
        report_id: id to run under, generated when omitted

    Returns:
        Dict with status ('completed' or 'error'), the failing stage and
        error when there is one, and every artifact produced so far
    """
    return await run_workflow({
        "report_id": report_id or generate_report_id(),
        "payload": payload,
    })


async def regenerate_report(
    report_id: str,
    score_result: ScoreResult,
    answers: AnswerSet,
    metadata: Optional[SubmissionMetadata] = None
) -> Dict[str, Any]:
    """
    Re-run narrative and rendering for an already scored submission.
    The stored ScoreResult is reused as-is, never recomputed.
    """
    return await run_workflow({
        "report_id": report_id,
        "payload": None,
        "answers": answers,
        "metadata": metadata,
        "score_result": score_result,
    })
