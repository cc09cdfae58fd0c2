"""
Risk Brief Generator
This script fetches news articles from NewsAPI (or loads them from a JSON
file), classifies each one with Google Gemini, and writes the analyzed batch
to the JSON data file the risk dashboard loads.
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from riskwatch.config import (
    GEMINI_KEY_VAR,
    NEWS_KEY_VAR,
    load_config,
    require_env,
    setup_logging,
)
from riskwatch.errors import ConfigurationError, InvalidInputError, NewsSourceError
from riskwatch.metrics import summarize
from riskwatch.models import AnalyzedArticle, RawArticle
from riskwatch.parsers.newsapi import NewsAPIParser, validate_page_size
from riskwatch.services.analyzer import build_analyzer

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse CLI arguments for the risk brief."""
    parser = argparse.ArgumentParser(description="Classify news articles by risk")
    parser.add_argument("--query", default=None, help="News search query")
    parser.add_argument(
        "--page-size", type=int, default=None, help="Number of articles to fetch"
    )
    parser.add_argument(
        "--input",
        default=None,
        help="Classify articles from this JSON file instead of fetching news",
    )
    parser.add_argument("--output", default=None, help="Where to write the results")
    parser.add_argument("--config", default=None, help="Path to config.json")
    return parser.parse_args(argv)


def load_articles(path: str) -> List[RawArticle]:
    """Loads articles from a JSON file holding a list or {"articles": [...]}."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get("articles")
    if not isinstance(data, list) or not all(isinstance(a, dict) for a in data):
        raise InvalidInputError(f"{path} does not contain a list of articles")
    return data


def write_results(results: List[AnalyzedArticle], path: str) -> None:
    """Writes the analyzed batch as pretty-printed JSON."""
    with open(path, "w", encoding="utf-8") as f:
        json.dump(results, f, indent=2, ensure_ascii=False)
    logger.info("Wrote %d analyzed articles to %s", len(results), path)


def main(argv: Optional[List[str]] = None) -> None:
    """Main execution entry point."""
    setup_logging()
    args = parse_args(argv)
    config = load_config(args.config)

    try:
        gemini_key = require_env(GEMINI_KEY_VAR)
        if args.input:
            articles = load_articles(args.input)
        else:
            source = NewsAPIParser(
                require_env(NEWS_KEY_VAR),
                url=config["news_api_url"],
                timeout=config["request_timeout"],
            )
            articles = source.fetch(
                args.query or config["default_query"],
                validate_page_size(
                    config["page_size"] if args.page_size is None else args.page_size
                ),
            )
    except (
        ConfigurationError,
        InvalidInputError,
        NewsSourceError,
        OSError,
        ValueError,
    ) as e:
        logger.error("Error: %s", e)
        sys.exit(1)

    if not articles:
        logger.info("No articles to analyze.")
        return

    analyzer = build_analyzer(gemini_key, config)
    results = analyzer.analyze(articles)

    write_results(results, args.output or config["output_file"])

    summary = summarize(results)
    logger.info(
        "Summary: %d articles, %d high risk (%.1f%%), avg score %.1f, "
        "%d supply chain (%.1f%%)",
        summary["total_articles"],
        summary["high_risk_count"],
        summary["high_risk_pct"],
        summary["avg_risk_score"],
        summary["supply_chain_count"],
        summary["supply_chain_pct"],
    )


if __name__ == "__main__":
    main()
