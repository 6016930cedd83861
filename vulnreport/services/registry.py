"""Resolve a registry root + project + service + tag to a digest-pinned image reference."""

import logging

import httpx

from vulnreport.services.errors import ImageResolutionError, TagNotFoundError

logger = logging.getLogger(__name__)

# GCR accepts an OAuth2 access token as the password of this fixed user.
GCR_TOKEN_USER = "oauth2accesstoken"


def repository_name(root: str, project: str, service: str) -> str:
    return f"{root.strip().rstrip('/')}/{project.strip()}/{service.strip()}"


def find_digest_for_tag(manifests: dict, tag: str) -> str | None:
    """Return the digest of the first manifest whose tag list contains tag, else None."""
    for digest, manifest in manifests.items():
        if not isinstance(manifest, dict):
            continue
        tags = manifest.get("tag")
        if isinstance(tags, list) and tag in tags:
            return digest
    return None


def resolve_image(
    root: str,
    project: str,
    service: str,
    tag: str,
    client: httpx.Client,
    token: str,
) -> str:
    """
    Return "<root>/<project>/<service>@<digest>" for the manifest tagged with tag.

    Uses the registry's tags/list endpoint, which lists every manifest with its tags.
    Raises TagNotFoundError when no manifest carries the tag and ImageResolutionError
    when the registry cannot be queried.
    """
    repo = repository_name(root, project, service)
    registry, _, path = repo.partition("/")
    url = f"https://{registry}/v2/{path}/tags/list"
    try:
        resp = client.get(url, auth=(GCR_TOKEN_USER, token))
    except httpx.HTTPError as e:
        raise ImageResolutionError(f"registry request failed for {repo}: {e}") from e
    if resp.status_code in (401, 403):
        raise ImageResolutionError(
            f"registry authentication failed for {repo}.", resp.status_code
        )
    if resp.status_code == 404:
        raise ImageResolutionError(f"repository {repo} not found.", 404)
    if resp.status_code >= 400:
        detail = resp.text[:500] if resp.text else "Unknown error"
        raise ImageResolutionError(
            f"registry returned {resp.status_code}: {detail}", resp.status_code
        )
    try:
        body = resp.json()
    except ValueError as e:
        raise ImageResolutionError(f"registry returned invalid JSON for {repo}.") from e
    if not isinstance(body, dict):
        raise ImageResolutionError(
            f"registry returned a JSON {type(body).__name__} for {repo}, expected an object."
        )
    manifests = body.get("manifest") or {}
    if not isinstance(manifests, dict):
        raise ImageResolutionError(f"registry returned a malformed manifest list for {repo}.")

    digest = find_digest_for_tag(manifests, tag)
    if digest is None:
        raise TagNotFoundError(f"did not find tag {tag!r} for service {service!r}")
    image = f"{repo}@{digest}"
    logger.info("Resolved image", extra={"image": image, "tag": tag})
    return image
