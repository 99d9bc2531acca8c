from fastapi import Body, FastAPI, HTTPException
from fastapi.responses import HTMLResponse, JSONResponse
from contextlib import asynccontextmanager
import uvicorn
import os
import time
import asyncio
from datetime import timedelta
from typing import Any, Dict, Optional
from dotenv import load_dotenv

from workflow.graph import process_assessment_async, regenerate_report
from workflow.core.answers import AnswerSet
from workflow.core.errors import InvalidPayloadError
from workflow.core.formatters import (
    create_failed_report_page,
    create_no_reports_page,
    create_not_found_page,
)
from workflow.core.scoring_logic import calculate_scores
from src.utils.data_models import ReportSummary, WebhookResponse
from src.utils.logging_config import setup_logging
from src.utils.report_storage import (
    STATUS_FAILED,
    STATUS_READY,
    ReportRecord,
    ReportStore,
    generate_report_id,
    utcnow,
)

# Load environment variables
load_dotenv()

# Setup logging
logger = setup_logging()

SERVICE_NAME = "Exit Readiness Assessment API"
VERSION = "1.0.0"
GENERIC_FAILURE = "Failed to process assessment"

REPORT_TTL_HOURS = float(os.getenv("REPORT_TTL_HOURS", "24"))
SWEEP_INTERVAL_SECONDS = float(os.getenv("REPORT_SWEEP_INTERVAL_SECONDS", "600"))
PUBLIC_BASE_URL = os.getenv("PUBLIC_BASE_URL", "").rstrip("/")

report_store = ReportStore(default_ttl=timedelta(hours=REPORT_TTL_HOURS))


@asynccontextmanager
async def lifespan(app: FastAPI):
    if not os.getenv("OPENAI_API_KEY"):
        logger.warning("OPENAI_API_KEY not found - narrative generation will fail")

    sweeper = asyncio.create_task(report_store.run_sweeper(SWEEP_INTERVAL_SECONDS))
    logger.info(f"{SERVICE_NAME} started (report TTL {REPORT_TTL_HOURS}h)")
    try:
        yield
    finally:
        sweeper.cancel()
        try:
            await sweeper
        except asyncio.CancelledError:
            pass
        logger.info(f"{SERVICE_NAME} stopped")


# Initialize FastAPI app
app = FastAPI(
    title=SERVICE_NAME,
    description="Scores Typeform exit readiness submissions and serves the generated reports",
    version=VERSION,
    lifespan=lifespan
)


def report_url(report_id: str) -> str:
    return f"{PUBLIC_BASE_URL}/report/{report_id}"


def store_result(result: Dict[str, Any]) -> Optional[ReportRecord]:
    """Persist a workflow result; nothing is stored if scoring never happened"""
    if result.get("score_result") is None:
        return None

    record = ReportRecord(
        report_id=result["report_id"],
        status=STATUS_READY if result["status"] == "completed" else STATUS_FAILED,
        score_result=result["score_result"],
        answers=result["answers"],
        metadata=result.get("metadata"),
        narrative=result.get("narrative"),
        html_report=result.get("html_report"),
        error=result.get("error"),
        created_at=utcnow(),
    )
    return report_store.put(record.report_id, record)


def failure_response(status_code: int = 500, error: str = GENERIC_FAILURE) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=WebhookResponse(success=False, error=error).model_dump(exclude_none=True)
    )


# Service info
@app.get("/")
async def root():
    return {
        "status": "Exit Readiness Backend is running!",
        "service": SERVICE_NAME,
        "version": VERSION,
        "endpoints": {
            "webhook": "POST /webhook/typeform",
            "score": "POST /api/score",
            "health": "GET /health",
            "report": "GET /report/{report_id}",
            "latest": "GET /report/latest",
            "retry": "POST /report/{report_id}/retry",
            "reports": "GET /reports"
        }
    }


# Health check endpoint
@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "service": SERVICE_NAME,
        "version": VERSION,
        "timestamp": utcnow().isoformat(),
        "reports_stored": len(report_store)
    }


# Main webhook endpoint
@app.post("/webhook/typeform")
async def typeform_webhook(payload: Dict[str, Any] = Body(...)):
    """
    Process a Typeform submission end to end.

    1. Parses the webhook into answers
    2. Scores them
    3. Generates the narrative and HTML report
    4. Stores the report and returns its URL
    """
    request_start_time = time.time()
    report_id = generate_report_id()
    logger.info(f"Received Typeform webhook, report id {report_id}")

    result = await process_assessment_async(payload, report_id=report_id)
    record = store_result(result)
    total_time = time.time() - request_start_time

    if result["status"] == "error":
        if result.get("error_type") == InvalidPayloadError.__name__:
            logger.warning(f"Rejected webhook {report_id}: {result['error']}")
            return failure_response(400, "Invalid Typeform webhook data")

        logger.error(
            f"Assessment {report_id} failed at {result['stage']} after {total_time:.1f}s"
            + (" (scores kept for retry)" if record else "")
        )
        return failure_response()

    logger.info(
        f"Assessment {report_id} completed in {total_time:.1f}s - "
        f"{record.score_result.overall}/100 ({record.score_result.category.value})"
    )
    return WebhookResponse(
        success=True,
        reportId=report_id,
        htmlUrl=report_url(report_id),
        timestamp=record.created_at.isoformat(),
        message="Report generated successfully"
    ).model_dump(exclude_none=True)


# Scoring only, no narrative
@app.post("/api/score")
async def score_answers(answers: Dict[str, Any] = Body(...)):
    try:
        answer_set = AnswerSet.from_mapping(answers)
    except InvalidPayloadError as e:
        raise HTTPException(status_code=400, detail=str(e))

    score_result = calculate_scores(answer_set)
    logger.info(f"Scored {len(answer_set.answered_fields)} answers: {score_result.overall}/100")
    return score_result.to_dict()


# Registered before /report/{report_id} so "latest" is not taken as an id
@app.get("/report/latest", response_class=HTMLResponse)
async def latest_report():
    record = report_store.latest()
    if record is None:
        return HTMLResponse(create_no_reports_page())
    return HTMLResponse(record.html_report)


@app.get("/report/{report_id}", response_class=HTMLResponse)
async def get_report(report_id: str):
    record = report_store.get(report_id)
    if record is None:
        return HTMLResponse(create_not_found_page(), status_code=404)
    if record.status != STATUS_READY:
        return HTMLResponse(create_failed_report_page(report_id), status_code=503)
    return HTMLResponse(record.html_report)


@app.post("/report/{report_id}/retry")
async def retry_report(report_id: str):
    """Re-run narrative and rendering for a stored, failed report"""
    record = report_store.get(report_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Report not found")

    if record.status == STATUS_READY:
        return WebhookResponse(
            success=True,
            reportId=report_id,
            htmlUrl=report_url(report_id),
            timestamp=record.created_at.isoformat(),
            message="Report already generated"
        ).model_dump(exclude_none=True)

    logger.info(f"Retrying report {report_id}")
    result = await regenerate_report(report_id, record.score_result, record.answers, record.metadata)
    record = store_result(result)

    if result["status"] == "error":
        logger.error(f"Retry for {report_id} failed at {result['stage']}: {result['error']}")
        return failure_response()

    return WebhookResponse(
        success=True,
        reportId=report_id,
        htmlUrl=report_url(report_id),
        timestamp=record.created_at.isoformat(),
        message="Report generated successfully"
    ).model_dump(exclude_none=True)


@app.get("/reports")
async def list_reports():
    summaries = [
        ReportSummary(
            id=record.report_id,
            status=record.status,
            timestamp=record.created_at,
            expires_at=record.expires_at,
            scores=record.score_result.to_dict(),
            htmlUrl=report_url(record.report_id)
        ).model_dump(mode="json")
        for record in report_store.list()
    ]
    return {"totalReports": len(summaries), "reports": summaries}


# Error handler
@app.exception_handler(Exception)
async def general_exception_handler(request, exc):
    logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)
    return failure_response()


# Run the server
if __name__ == "__main__":
    port = int(os.getenv("PORT", "8000"))
    logger.info(f"Starting {SERVICE_NAME} on http://0.0.0.0:{port}")
    logger.info(f"Webhook URL: {PUBLIC_BASE_URL or f'http://localhost:{port}'}/webhook/typeform")
    uvicorn.run(app, host="0.0.0.0", port=port)
