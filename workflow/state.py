"""
LangGraph state definition for the exit readiness pipeline.
Single source of truth for all data flowing through the workflow.
"""

import operator
from typing import Annotated, Any, Dict, List, Optional, TypedDict

from src.utils.data_models import SubmissionMetadata
from workflow.core.answers import AnswerSet
from workflow.core.scoring_models import ScoreResult


class WorkflowState(TypedDict, total=False):
    """
    State passed between nodes. Nodes return partial updates;
    messages are appended, every other key is replaced.
    """
    # Input data
    report_id: str
    payload: Optional[Dict[str, Any]]

    # Node outputs
    answers: Optional[AnswerSet]
    metadata: Optional[SubmissionMetadata]
    score_result: Optional[ScoreResult]
    narrative: Optional[str]
    html_report: Optional[str]
    generated_at: Optional[str]

    # Execution metadata
    current_stage: str
    error: Optional[str]
    error_type: Optional[str]
    processing_time: Dict[str, float]
    messages: Annotated[List[str], operator.add]
