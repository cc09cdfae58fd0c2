"""
Exceptions raised across the Risk Watch pipeline.

Request-level errors (configuration, input, news source) abort a whole
request. Classifier and parser errors only ever affect a single article and
are turned into fallback assessments by the analyzer.
"""

from typing import Optional


class RiskWatchError(Exception):
    """Base class for all Risk Watch errors."""


class ConfigurationError(RiskWatchError):
    """A required credential or setting is missing."""


class InvalidInputError(RiskWatchError):
    """The request payload cannot be turned into a batch of articles."""


class NewsSourceError(RiskWatchError):
    """The news search service could not be queried."""


class ClassifierError(RiskWatchError):
    """A single call to the reasoning service did not produce a reply."""


class TransportError(ClassifierError):
    """The request never got a response (DNS, connection, timeout)."""


class ServiceStatusError(ClassifierError):
    """The service answered with a non-success status."""

    def __init__(self, status_code: Optional[int], message: str = ""):
        self.status_code = status_code
        detail = f"Gemini API error {status_code}"
        if message:
            detail = f"{detail}: {message}"
        super().__init__(detail)


class EmptyReplyError(ClassifierError):
    """The service answered but produced no candidate text."""


class MalformedResponse(RiskWatchError):
    """The reply text does not hold a well-formed risk assessment."""
