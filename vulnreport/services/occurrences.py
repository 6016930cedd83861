"""List vulnerability occurrences for an image from Container Analysis (Grafeas v1beta1 REST)."""

import logging
from collections.abc import Iterator

import httpx
from pydantic import ValidationError

from vulnreport.schemas.occurrence import VULNERABILITY_KIND, RawOccurrence
from vulnreport.services.errors import OccurrenceStreamError

logger = logging.getLogger(__name__)


def occurrence_filter(image: str) -> str:
    """Server-side filter selecting vulnerability occurrences of one image."""
    resource_url = f"https://{image}"
    return f'resourceUrl = "{resource_url}" kind = "{VULNERABILITY_KIND}"'


def _error_detail(resp: httpx.Response) -> str:
    """Best-effort error message from a Google API error body (object or one-element list)."""
    fallback = resp.text[:500] if resp.text else "Unknown error"
    try:
        body = resp.json()
    except ValueError:
        return fallback
    if isinstance(body, list) and body:
        body = body[0]
    if not isinstance(body, dict):
        return fallback
    error = body.get("error")
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    return fallback


def _fetch_page(client: httpx.Client, url: str, params: dict[str, str | int], token: str) -> dict:
    try:
        resp = client.get(url, params=params, headers={"Authorization": f"Bearer {token}"})
    except httpx.HTTPError as e:
        raise OccurrenceStreamError(f"occurrence request failed: {e}") from e
    if resp.status_code in (401, 403):
        raise OccurrenceStreamError(
            "Container Analysis authentication failed (missing permission or invalid token).",
            resp.status_code,
        )
    if resp.status_code >= 400:
        detail = _error_detail(resp)
        raise OccurrenceStreamError(
            f"Container Analysis returned {resp.status_code}: {detail}", resp.status_code
        )
    try:
        body = resp.json()
    except ValueError as e:
        raise OccurrenceStreamError("Container Analysis returned invalid JSON.") from e
    if not isinstance(body, dict):
        raise OccurrenceStreamError(
            f"Container Analysis returned a JSON {type(body).__name__}, expected an object."
        )
    return body


def list_occurrences(
    project: str,
    image: str,
    client: httpx.Client,
    token: str,
    base_url: str = "https://containeranalysis.googleapis.com",
    page_size: int = 100,
) -> Iterator[RawOccurrence]:
    """
    Lazily yield vulnerability occurrences for image, one page fetched at a time.

    Raises OccurrenceStreamError mid-iteration on transport, auth or decoding failures.
    """
    url = f"{base_url.rstrip('/')}/v1beta1/projects/{project}/occurrences"
    params: dict[str, str | int] = {
        "filter": occurrence_filter(image),
        "pageSize": page_size,
    }
    logger.info("request", extra={"parent": f"projects/{project}", "occurrence_filter": params["filter"]})

    while True:
        page = _fetch_page(client, url, params, token)
        items = page.get("occurrences") or []
        if not isinstance(items, list):
            raise OccurrenceStreamError("Container Analysis returned occurrences that are not a list.")
        for item in items:
            try:
                yield RawOccurrence.model_validate(item)
            except ValidationError as e:
                raise OccurrenceStreamError(f"malformed occurrence in response: {e}") from e
        next_token = page.get("nextPageToken")
        if not next_token:
            return
        params["pageToken"] = next_token
