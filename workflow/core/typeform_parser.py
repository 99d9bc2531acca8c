"""
Typeform webhook parsing.
Turns the webhook body into an AnswerSet keyed by each question's field ref.
"""

import logging
from typing import Any, Dict, NamedTuple

from pydantic import ValidationError

from src.utils.data_models import SubmissionMetadata, TypeformAnswer, TypeformWebhook
from workflow.core.answers import AnswerSet
from workflow.core.errors import InvalidPayloadError

logger = logging.getLogger(__name__)


class ParsedSubmission(NamedTuple):
    answers: AnswerSet
    metadata: SubmissionMetadata
    raw_answers: Dict[str, Any]


def extract_answer_value(answer: TypeformAnswer) -> Any:
    """Pull the value out of one Typeform answer according to its type"""
    answer_type = answer.type

    if answer_type == "choice":
        return answer.choice.label if answer.choice else None
    if answer_type == "choices":
        return list(answer.choices.labels) if answer.choices else []
    if answer_type in ("number", "opinion_scale"):
        return answer.number
    if answer_type == "text":
        return answer.text

    logger.warning(f"Unknown answer type: {answer_type} (field {answer.field.ref})")
    extras = answer.model_extra or {}
    return extras.get("value", extras.get(answer_type))


def parse_typeform_response(payload: Dict[str, Any]) -> ParsedSubmission:
    """
    Parse a Typeform webhook body.

    Args:
        payload: decoded JSON body of the webhook

    Returns:
        ParsedSubmission with the AnswerSet, submission metadata and the raw
        ref -> value mapping

    Raises:
        InvalidPayloadError: if the body has no usable form_response or an
            answer has the wrong shape for its field
    """
    try:
        webhook = TypeformWebhook.model_validate(payload)
    except ValidationError as e:
        raise InvalidPayloadError("Invalid Typeform webhook data") from e

    form_response = webhook.form_response
    raw_answers = {}
    for answer in form_response.answers:
        raw_answers[answer.field.ref] = extract_answer_value(answer)

    metadata = SubmissionMetadata(
        submitted_at=form_response.submitted_at,
        response_id=form_response.token,
        form_id=form_response.form_id,
        token=form_response.token,
    )

    answers = AnswerSet.from_mapping(raw_answers)
    logger.info(
        f"Parsed Typeform response {metadata.response_id}: "
        f"{len(raw_answers)} answers, {len(answers.answered_fields)} scored fields"
    )
    return ParsedSubmission(answers=answers, metadata=metadata, raw_answers=raw_answers)
