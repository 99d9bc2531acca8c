"""
Report node for LangGraph workflow.
Renders the narrative and scores into the standalone HTML report.
"""

import logging
from datetime import datetime
from typing import Any, Dict

from workflow.core.errors import ReportRenderingError
from workflow.core.formatters import create_html_report

logger = logging.getLogger(__name__)


def report_node(state: Dict[str, Any]) -> Dict[str, Any]:
    """
    Report node.

    Args:
        state: Current workflow state with narrative and score_result

    Returns:
        State update with html_report and generated_at
    """
    start_time = datetime.now()
    logger.info(f"=== REPORT NODE STARTED - Report: {state['report_id']} ===")

    try:
        try:
            html_report = create_html_report(state["narrative"], state["score_result"], start_time)
        except Exception as e:
            raise ReportRenderingError(f"Failed to render report: {e}") from e

        processing_time = (datetime.now() - start_time).total_seconds()
        logger.info(f"HTML report rendered: {len(html_report)} chars")
        logger.info(f"=== REPORT NODE COMPLETED - {processing_time:.2f}s ===")

        return {
            "current_stage": "report",
            "html_report": html_report,
            "generated_at": start_time.isoformat(),
            "processing_time": {**state.get("processing_time", {}), "report": processing_time},
            "messages": [f"Report rendered in {processing_time:.2f}s"],
        }

    except Exception as e:
        logger.error(f"Error in report node: {str(e)}", exc_info=True)
        return {
            "current_stage": "report_error",
            "error": f"Report failed: {str(e)}",
            "error_type": type(e).__name__,
            "messages": [f"ERROR in report: {str(e)}"],
        }
