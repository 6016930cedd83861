"""Report endpoint: resolve a service image and return its Coverity import bundle."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from vulnreport.core.config import Settings, get_settings
from vulnreport.schemas.coverity import Results
from vulnreport.schemas.report import ReportRequest
from vulnreport.services.errors import (
    CredentialsError,
    EvidenceWriteError,
    ImageResolutionError,
    OccurrenceStreamError,
    RecordRejectedError,
    ReportError,
    ResultsEncodeError,
    TagNotFoundError,
)
from vulnreport.services.report import generate_report

logger = logging.getLogger(__name__)
router = APIRouter()


def _status_for(error: ReportError) -> int:
    if isinstance(error, TagNotFoundError):
        return 404
    if isinstance(error, RecordRejectedError):
        return 422
    if isinstance(error, (ImageResolutionError, OccurrenceStreamError)):
        return 502
    if isinstance(error, CredentialsError):
        return 503
    if isinstance(error, (EvidenceWriteError, ResultsEncodeError)):
        return 500
    return 400


@router.post("/", response_model=Results, response_model_by_alias=True)
def post_report(
    body: ReportRequest,
    settings: Annotated[Settings, Depends(get_settings)],
) -> Results:
    """
    Generate the cov-import-results bundle for one service image.

    Evidence files are written under EVIDENCE_DIR. The whole pass fails on the first
    error; no partial bundle is returned.
    """
    try:
        results = generate_report(
            settings,
            service=body.service,
            project=body.project,
            root=body.root,
            tag=body.tag,
        )
    except ReportError as e:
        status = _status_for(e)
        logger.error(
            "Report failed",
            extra={
                "report_status": "failure",
                "service": body.service,
                "error_type": type(e).__name__,
                "reason": (e.message or str(e))[:500],
            },
        )
        raise HTTPException(status_code=status, detail=e.message) from e

    logger.info(
        "Report completed",
        extra={"report_status": "success", "service": body.service, "issue_count": len(results.issues)},
    )
    return results
