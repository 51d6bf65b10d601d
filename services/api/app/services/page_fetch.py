"""
Fetch third-party recipe pages.

Browser-like headers keep the common bot filters quiet; the timeout is the
only cancellation point in a request.
"""

import asyncio
import logging
from typing import Optional

import httpx

from ..settings import settings

logger = logging.getLogger(__name__)


class PageFetchError(Exception):
    """The page could not be retrieved. The message is user-facing."""


class PageTimeoutError(PageFetchError):
    def __init__(self):
        super().__init__("The recipe page took too long to respond.")


class PageStatusError(PageFetchError):
    def __init__(self, status_code: int):
        self.status_code = status_code
        super().__init__(f"Failed to fetch page (HTTP {status_code})")


def browser_headers() -> dict[str, str]:
    return {
        "User-Agent": settings.fetch_user_agent,
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
        "Accept-Language": "en-US,en;q=0.9",
        "Cache-Control": "no-cache",
    }


async def _get(url: str, transport: Optional[httpx.AsyncBaseTransport]) -> httpx.Response:
    async with httpx.AsyncClient(
        headers=browser_headers(),
        timeout=settings.fetch_timeout_seconds,
        follow_redirects=True,
        transport=transport,
    ) as client:
        return await client.get(url)


async def fetch_page(url: str, transport: Optional[httpx.AsyncBaseTransport] = None) -> str:
    """
    Return the page body as text.

    Raises:
        PageTimeoutError: the whole request (redirects and body included) outlasted
            the fetch timeout
        PageStatusError: the page answered with a non-2xx status
        PageFetchError: any other network failure
    """
    try:
        # httpx timeouts are per step; wait_for bounds the wall clock
        response = await asyncio.wait_for(_get(url, transport), settings.fetch_timeout_seconds)
    except (httpx.TimeoutException, asyncio.TimeoutError) as e:
        logger.warning(f"Timed out fetching {url}: {e}")
        raise PageTimeoutError() from e
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        logger.warning(f"Could not reach {url}: {e.__class__.__name__}: {e}")
        raise PageFetchError(f"Could not reach the page: {e}") from e

    if not response.is_success:
        logger.warning(f"Fetching {url} returned HTTP {response.status_code}")
        raise PageStatusError(response.status_code)

    logger.info(f"Fetched {url} ({len(response.text)} chars)")
    return response.text
