"""Check GitHub for a newer release of the application."""
import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from .config.settings import UpdateCheckSettings
from .utils.connection import with_retry
from .utils.logging_config import timed
from .utils.system import compare_versions

logger = logging.getLogger(__name__)

GITHUB_ACCEPT = "application/vnd.github.v3+json"


@dataclass(frozen=True)
class ReleaseInfo:
    """Outcome of an update check."""
    current_version: str
    latest_version: Optional[str] = None
    update_available: bool = False


@with_retry(max_attempts=2, min_wait=0.5, max_wait=2, exceptions=(httpx.TransportError,))
async def _fetch_latest_tag(client: httpx.AsyncClient, url: str) -> str:
    resp = await client.get(url, headers={"Accept": GITHUB_ACCEPT})
    resp.raise_for_status()
    tag = resp.json().get("tag_name")
    if not tag:
        raise ValueError("Release payload has no tag_name")
    return str(tag)


@timed("check_update")
async def check_latest_version(
    current_version: str,
    settings: Optional[UpdateCheckSettings] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> ReleaseInfo:
    """
    Look up the latest published release.

    Args:
        current_version: Version of the running application
        settings: Repository to query, defaults to UpdateCheckSettings()
        client: HTTP client to use; one is created (and closed) if omitted

    Returns:
        ReleaseInfo. Network or payload errors are logged and reported as
        "no update" with ``latest_version`` None.
    """
    settings = settings or UpdateCheckSettings()
    own_client = client is None
    if client is None:
        client = httpx.AsyncClient(
            timeout=httpx.Timeout(settings.timeout),
            follow_redirects=True,
        )

    try:
        tag = await _fetch_latest_tag(client, settings.latest_release_url)
    except (httpx.HTTPError, ValueError) as e:
        logger.warning(f"Error checking version: {e}")
        return ReleaseInfo(current_version=current_version)
    finally:
        if own_client:
            await client.aclose()

    latest = tag.lstrip("vV")
    available = compare_versions(latest, current_version) > 0
    if available:
        logger.info(f"Update available: {current_version} -> {latest}")
    return ReleaseInfo(
        current_version=current_version,
        latest_version=latest,
        update_available=available,
    )
