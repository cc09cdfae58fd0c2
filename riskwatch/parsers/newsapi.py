"""
NewsAPI search adapter.

This module provides the NewsAPIParser class for fetching articles from the
NewsAPI "everything" endpoint.
"""

import logging
from typing import Any, Dict, List

import requests

from riskwatch.errors import InvalidInputError, NewsSourceError
from riskwatch.models import RawArticle
from riskwatch.parsers.base import NewsSource

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100


def validate_page_size(page_size: Any) -> int:
    """Returns page_size if it is an integer NewsAPI accepts."""
    if isinstance(page_size, bool) or not isinstance(page_size, int):
        raise InvalidInputError("pageSize must be an integer")
    if not 1 <= page_size <= MAX_PAGE_SIZE:
        raise InvalidInputError(f"pageSize must be between 1 and {MAX_PAGE_SIZE}")
    return page_size


class NewsAPIParser(NewsSource):
    """Searches NewsAPI for articles, newest first."""

    def __init__(
        self,
        api_key: str,
        url: str = "https://newsapi.org/v2/everything",
        timeout: float = 10,
    ):
        self.api_key = api_key
        self.url = url
        self.timeout = timeout

    @staticmethod
    def _to_article(item: Dict[str, Any]) -> RawArticle:
        return RawArticle(
            title=item.get("title") or "",
            description=item.get("description"),
            content=item.get("content"),
            source=item.get("source"),
            publishedAt=item.get("publishedAt"),
            url=item.get("url"),
        )

    def fetch(self, query: str, page_size: int) -> List[RawArticle]:
        """Fetches up to page_size articles matching query."""
        logger.info("Fetching news with query: %s", query)
        params = {
            "q": query,
            "pageSize": page_size,
            "sortBy": "publishedAt",
            "language": "en",
        }
        try:
            resp = requests.get(
                self.url,
                params=params,
                headers={"X-Api-Key": self.api_key},
                timeout=self.timeout,
            )
        except requests.RequestException as req_err:
            logger.error("Network error fetching news: %s", req_err)
            raise NewsSourceError(f"NewsAPI request failed: {req_err}") from req_err

        if not resp.ok:
            logger.error("NewsAPI error: %s %s", resp.status_code, resp.text)
            raise NewsSourceError(f"NewsAPI error: {resp.status_code}")

        try:
            data = resp.json()
        except ValueError as e:
            raise NewsSourceError("NewsAPI returned invalid JSON") from e

        if not isinstance(data, dict):
            raise NewsSourceError("NewsAPI returned an unexpected payload")

        items = data.get("articles") or []
        articles = [self._to_article(item) for item in items if isinstance(item, dict)]
        logger.info("Successfully fetched %d articles", len(articles))
        return articles
