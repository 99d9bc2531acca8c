from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Optional, Union
from datetime import datetime


class TypeformField(BaseModel):
    """Question reference inside a Typeform answer"""
    model_config = ConfigDict(extra="allow")

    ref: str
    id: Optional[str] = None
    type: Optional[str] = None


class TypeformChoice(BaseModel):
    label: Optional[str] = None


class TypeformChoices(BaseModel):
    labels: List[str] = Field(default_factory=list)


class TypeformAnswer(BaseModel):
    """One answer from a Typeform webhook; the populated key depends on type"""
    model_config = ConfigDict(extra="allow")

    type: str
    field: TypeformField
    choice: Optional[TypeformChoice] = None
    choices: Optional[TypeformChoices] = None
    number: Optional[Union[int, float]] = None
    text: Optional[str] = None


class FormResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    form_id: Optional[str] = None
    token: Optional[str] = None
    submitted_at: Optional[str] = None
    answers: List[TypeformAnswer] = Field(default_factory=list)


class TypeformWebhook(BaseModel):
    """Raw webhook body posted by Typeform"""
    model_config = ConfigDict(extra="allow")

    event_id: Optional[str] = None
    event_type: Optional[str] = None
    form_response: FormResponse


class SubmissionMetadata(BaseModel):
    submitted_at: Optional[str] = None
    response_id: Optional[str] = None
    form_id: Optional[str] = None
    token: Optional[str] = None


class WebhookResponse(BaseModel):
    """Returned to Typeform (and anything else) after a submission"""
    success: bool
    reportId: Optional[str] = None
    htmlUrl: Optional[str] = None
    timestamp: Optional[str] = None
    message: Optional[str] = None
    error: Optional[str] = None


class ReportSummary(BaseModel):
    """Entry of the /reports listing"""
    id: str
    status: str
    timestamp: datetime
    expires_at: datetime
    scores: Optional[Dict[str, Any]] = None
    htmlUrl: str
