"""
Exception types raised by the assessment pipeline.
"""


class AssessmentError(Exception):
    """Base class for assessment processing failures"""


class InvalidPayloadError(AssessmentError, ValueError):
    """The submission cannot be turned into an AnswerSet. Never retried."""


class NarrativeGenerationError(AssessmentError):
    """The text generation call failed or returned nothing usable"""


class ReportRenderingError(AssessmentError):
    """The HTML report could not be built from the score result"""
