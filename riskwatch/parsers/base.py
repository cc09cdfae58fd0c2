"""
Base classes and interfaces for news sources.

This module defines the contract that all news source adapters must follow.
"""

from typing import List, Protocol

from riskwatch.models import RawArticle


class NewsSource(Protocol):
    """
    Protocol for news sources.

    Classes implementing this protocol should be able to run a free-text
    search and return the matching articles as RawArticle records.
    """

    def fetch(self, query: str, page_size: int) -> List[RawArticle]:
        """Fetches articles matching a query."""
