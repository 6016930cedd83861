"""End-to-end report: resolve the image, list its occurrences and assemble the bundle."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from typing import TYPE_CHECKING

import httpx

from vulnreport.core.gcp import get_access_token
from vulnreport.schemas.coverity import Results
from vulnreport.services.bundle import assemble
from vulnreport.services.errors import ReportError
from vulnreport.services.occurrences import list_occurrences
from vulnreport.services.registry import resolve_image

if TYPE_CHECKING:
    from vulnreport.core.config import Settings

logger = logging.getLogger(__name__)


def generate_report(
    settings: Settings,
    service: str,
    project: str | None = None,
    root: str | None = None,
    tag: str | None = None,
    evidence_dir: str | None = None,
    client: httpx.Client | None = None,
    token_provider: Callable[[], str] = get_access_token,
) -> Results:
    """
    Build the Coverity bundle for one service image.

    project/root/tag/evidence_dir default to GCP_PROJECT, GCR_ROOT, DEFAULT_TAG and
    EVIDENCE_DIR. Raises ReportError subclasses; nothing is retried.
    """
    if not service or not service.strip():
        raise ReportError("service must be set")
    project = (project or settings.GCP_PROJECT).strip()
    root = (root or settings.GCR_ROOT).strip()
    tag = (tag or settings.DEFAULT_TAG).strip()
    base_dir = evidence_dir or settings.EVIDENCE_DIR
    try:
        os.makedirs(base_dir, exist_ok=True)
    except OSError as e:
        raise ReportError(f"cannot create evidence directory {base_dir}: {e}") from e

    token = token_provider()
    owns_client = client is None
    if client is None:
        client = httpx.Client(timeout=httpx.Timeout(settings.REQUEST_TIMEOUT_SEC))
    try:
        image = resolve_image(root, project, service.strip(), tag, client, token)
        occurrences = list_occurrences(
            project,
            image,
            client,
            token,
            base_url=settings.CONTAINER_ANALYSIS_BASE_URL,
            page_size=settings.OCCURRENCE_PAGE_SIZE,
        )
        results = assemble(occurrences, base_dir)
    finally:
        if owns_client:
            client.close()

    logger.info(
        "Report completed",
        extra={"image": image, "issue_count": len(results.issues), "evidence_dir": base_dir},
    )
    return results
