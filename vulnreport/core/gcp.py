"""Google credentials for the registry and Container Analysis APIs."""

import logging

from google.auth import default
from google.auth.exceptions import DefaultCredentialsError, RefreshError
from google.auth.transport.requests import Request

from vulnreport.services.errors import CredentialsError

logger = logging.getLogger(__name__)

CLOUD_PLATFORM_SCOPE = "https://www.googleapis.com/auth/cloud-platform"


def get_access_token() -> str:
    """
    Return an OAuth2 access token from Application Default Credentials.

    Raises CredentialsError when no credentials are configured or the refresh fails.
    """
    try:
        credentials, _ = default(scopes=[CLOUD_PLATFORM_SCOPE])
        credentials.refresh(Request())
    except (DefaultCredentialsError, RefreshError) as e:
        logger.debug("Could not obtain Google credentials.", exc_info=True)
        raise CredentialsError(
            f"Unable to obtain Google application default credentials: {e}"
        ) from e
    if not credentials.token:
        raise CredentialsError("Google credentials returned an empty access token.")
    return credentials.token
