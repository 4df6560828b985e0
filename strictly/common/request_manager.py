"""Article fetching.

This module provides ArticleFetcher, which encapsulates the HTTP client
used to retrieve one series article per request. Retrying and caching
are left to the caller; a failure surfaces as a TransientException.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from strictly import __version__
from strictly.common.exceptions import (
    HTMLResponseAssumptionException,
    RequestTimeoutException,
)

logger = logging.getLogger(__name__)

LATEST_SERIES = 22


class ArticleFetcher:
    """Fetches series articles over HTTP.

    Example::

        with ArticleFetcher(timeout=30.0) as fetcher:
            page = fetcher.fetch(7)
    """

    article_url = (
        "https://en.wikipedia.org/wiki/Strictly_Come_Dancing_(series_{series})"
    )
    user_agent = f"strictly-data/{__version__} (score extraction)"

    def __init__(
        self,
        timeout: float | None = 30.0,
        client: httpx.Client | None = None,
    ) -> None:
        """Initialize the fetcher.

        Args:
            timeout: Request timeout in seconds. None means no timeout.
            client: Optional preconfigured client (tests pass one built on
                httpx.MockTransport). The fetcher closes it on close().
        """
        self.timeout = timeout
        self._client = client or httpx.Client(
            timeout=timeout,
            headers={"User-Agent": self.user_agent},
            follow_redirects=True,
        )

    def close(self) -> None:
        """Close the HTTP client and release resources."""
        self._client.close()

    def __enter__(self) -> ArticleFetcher:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def url_for(self, series: int) -> str:
        return self.article_url.format(series=series)

    def fetch(self, series: int) -> str:
        """Fetch the article for a series and return its markup.

        Raises:
            HTMLResponseAssumptionException: If the status is not 2xx.
            RequestTimeoutException: If the request times out.
        """
        url = self.url_for(series)
        logger.info("Fetching series %d from %s", series, url)
        try:
            response = self._client.get(url)
        except httpx.TimeoutException as e:
            raise RequestTimeoutException(
                url=url, timeout_seconds=self.timeout
            ) from e

        if not response.is_success:
            raise HTMLResponseAssumptionException(
                status_code=response.status_code,
                expected_codes=[200],
                url=url,
            )
        return response.text
