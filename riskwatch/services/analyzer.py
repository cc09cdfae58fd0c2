"""
Batch risk analysis.

This module provides the RiskAnalyzer class, which classifies a batch of news
articles through the Gemini classifier and guarantees one well-formed
AnalyzedArticle per input article, in input order, whatever happens to the
individual calls.
"""

import concurrent.futures
import logging
from typing import Any, Dict, List, Optional, Protocol, Sequence, cast

from riskwatch.errors import ClassifierError, MalformedResponse
from riskwatch.models import UNKNOWN, AnalyzedArticle, RawArticle, RiskAssessment
from riskwatch.parsers.assessment import parse_assessment
from riskwatch.services.llm import RiskClassifier
from riskwatch.services.prompt_builder import build_prompt
from riskwatch.services.rate_limiter import TokenBucket

logger = logging.getLogger(__name__)

ANALYSIS_UNAVAILABLE = "Analysis unavailable: the risk service could not be reached."
ANALYSIS_MALFORMED = "Analysis failed: the risk service response was malformed."


class Classifier(Protocol):
    """Anything that turns a prompt into raw reply text."""

    def classify(self, prompt: str) -> str:
        """Returns the raw reply text or raises ClassifierError."""


def fallback_assessment(explanation: str) -> RiskAssessment:
    """The 'no risk detected' record used when classification fails."""
    return RiskAssessment(
        Risk_Type="None",
        Severity="None",
        Affected_Nodes=[],
        Explanation=explanation,
        Risk_Score=0,
    )


def _source_name(source: Any) -> str:
    if isinstance(source, dict):
        source = source.get("name")
    if isinstance(source, str) and source:
        return source
    return UNKNOWN


def merge_article(article: RawArticle, assessment: RiskAssessment) -> AnalyzedArticle:
    """Combines the article's display fields with its assessment."""
    return AnalyzedArticle(
        Title=article.get("title") or UNKNOWN,
        Source=_source_name(article.get("source")),
        PublishedAt=article.get("publishedAt"),
        Url=article.get("url"),
        Risk_Type=assessment["Risk_Type"],
        Severity=assessment["Severity"],
        Affected_Nodes=assessment["Affected_Nodes"],
        Explanation=assessment["Explanation"],
        Risk_Score=assessment["Risk_Score"],
    )


class RiskAnalyzer:
    """
    Drives prompt building, classification and parsing for a batch.

    Articles are classified on a bounded thread pool. Every worker takes a
    token from the shared rate limiter before calling the service, and each
    result is stored at its article's index, so output order never depends
    on completion order. max_workers=1 processes the batch sequentially.
    """

    def __init__(
        self,
        classifier: Classifier,
        rate_limiter: Optional[TokenBucket] = None,
        max_workers: int = 4,
    ):
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.classifier = classifier
        self.rate_limiter = rate_limiter
        self.max_workers = max_workers

    def assess(self, article: RawArticle) -> RiskAssessment:
        """Classifies one article, substituting the fallback on any failure."""
        title = article.get("title") or UNKNOWN
        prompt = build_prompt(article)

        if self.rate_limiter:
            self.rate_limiter.acquire()

        try:
            reply = self.classifier.classify(prompt)
        except ClassifierError as e:
            logger.error('Error analyzing article "%s": %s', title, e)
            return fallback_assessment(ANALYSIS_UNAVAILABLE)

        try:
            return parse_assessment(reply)
        except MalformedResponse as e:
            logger.warning('Malformed response for article "%s": %s', title, e)
            return fallback_assessment(ANALYSIS_MALFORMED)

    def _analyze_one(self, article: RawArticle) -> AnalyzedArticle:
        try:
            assessment = self.assess(article)
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error(
                'Unexpected error analyzing article "%s": %s', article.get("title"), e
            )
            assessment = fallback_assessment(ANALYSIS_UNAVAILABLE)
        return merge_article(article, assessment)

    def analyze(self, articles: Sequence[RawArticle]) -> List[AnalyzedArticle]:
        """Returns exactly one AnalyzedArticle per article, in input order."""
        if not articles:
            return []

        logger.info("Analyzing %d articles", len(articles))
        results: List[Optional[AnalyzedArticle]] = [None] * len(articles)

        with concurrent.futures.ThreadPoolExecutor(
            max_workers=min(self.max_workers, len(articles))
        ) as executor:
            future_to_index = {
                executor.submit(self._analyze_one, article): index
                for index, article in enumerate(articles)
            }
            for future in concurrent.futures.as_completed(future_to_index):
                index = future_to_index[future]
                try:
                    results[index] = future.result()
                except Exception as exc:  # pylint: disable=broad-exception-caught
                    logger.error("Article %d generated an exception: %s", index, exc)
                    results[index] = merge_article(
                        articles[index], fallback_assessment(ANALYSIS_UNAVAILABLE)
                    )

        logger.info("Successfully analyzed %d articles", len(results))
        return cast(List[AnalyzedArticle], results)


def build_analyzer(
    api_key: str,
    config: Dict[str, Any],
    rate_limiter: Optional[TokenBucket] = None,
) -> RiskAnalyzer:
    """Wires the Gemini classifier and rate limiter from configuration.

    Pass a long-lived rate_limiter to share one request budget across batches;
    otherwise a bucket is created for this analyzer alone.
    """
    classifier = RiskClassifier(
        api_key,
        model=config["model"],
        temperature=config["temperature"],
        max_output_tokens=config["max_output_tokens"],
        timeout=config["classifier_timeout"],
    )
    if rate_limiter is None:
        rate_limiter = build_rate_limiter(config)
    return RiskAnalyzer(
        classifier, rate_limiter=rate_limiter, max_workers=config["max_workers"]
    )


def build_rate_limiter(config: Dict[str, Any]) -> TokenBucket:
    """Creates the token bucket for the configured request budget."""
    return TokenBucket(config["requests_per_minute"], capacity=config["burst"])
