"""
HTTP entry point for the risk classification pipeline.

Two endpoints mirror the dashboard's backend functions: /fetch-news searches
for articles and /analyze-risk classifies a batch of them. Whole-request
failures reply with an error status and a single "error" field; per-article
failures never do, they show up as fallback rows in a successful response.
"""

import argparse
import logging
from typing import Any, Dict, List, Tuple

import uvicorn
from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from riskwatch.config import (
    GEMINI_KEY_VAR,
    NEWS_KEY_VAR,
    load_config,
    require_env,
    setup_logging,
)
from riskwatch.errors import InvalidInputError, RiskWatchError
from riskwatch.models import RawArticle
from riskwatch.parsers.newsapi import NewsAPIParser, validate_page_size
from riskwatch.services.analyzer import build_analyzer, build_rate_limiter

logger = logging.getLogger(__name__)

CORS_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]

CONFIG: Dict[str, Any] = load_config()
# One request budget for the whole process, shared by concurrent batches.
RATE_LIMITER = build_rate_limiter(CONFIG)

app = FastAPI(
    title="Risk Watch",
    description="News risk classification for the risk analysis dashboard",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=CORS_HEADERS,
)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@app.exception_handler(InvalidInputError)
async def invalid_input_handler(request: Request, exc: InvalidInputError):
    logger.error("Invalid request to %s: %s", request.url.path, exc)
    return _error(400, str(exc))


@app.exception_handler(RiskWatchError)
async def risk_watch_error_handler(request: Request, exc: RiskWatchError):
    logger.error("Error in %s: %s", request.url.path, exc)
    return _error(500, str(exc))


async def _read_json(request: Request) -> Dict[str, Any]:
    """Reads the request body as a JSON object; an empty body is {}."""
    body = await request.body()
    if not body.strip():
        return {}
    try:
        payload = await request.json()
    except ValueError as e:
        raise InvalidInputError("Request body is not valid JSON") from e
    if not isinstance(payload, dict):
        raise InvalidInputError("Request body must be a JSON object")
    return payload


def validate_articles(payload: Dict[str, Any]) -> List[RawArticle]:
    """Returns the payload's article list or raises InvalidInputError."""
    articles = payload.get("articles")
    if not isinstance(articles, list):
        raise InvalidInputError("Invalid articles data")
    for index, article in enumerate(articles):
        if not isinstance(article, dict):
            raise InvalidInputError(f"Article {index} is not an object")
    return articles


def parse_news_request(payload: Dict[str, Any], config: Dict[str, Any]) -> Tuple[str, int]:
    """Returns (query, page_size), applying configured defaults."""
    query = payload.get("query") or config["default_query"]
    if not isinstance(query, str):
        raise InvalidInputError("query must be a string")

    page_size = validate_page_size(payload.get("pageSize", config["page_size"]))
    return query, page_size


@app.options("/analyze-risk")
@app.options("/fetch-news")
async def preflight():
    """Answers pre-flight checks, including ones that carry no CORS request headers."""
    return Response(
        status_code=200,
        headers={
            "Access-Control-Allow-Origin": "*",
            "Access-Control-Allow-Headers": ", ".join(CORS_HEADERS),
        },
    )


@app.post("/analyze-risk")
async def analyze_risk(request: Request):
    """Classifies a batch of articles, one output row per input article."""
    try:
        api_key = require_env(GEMINI_KEY_VAR)
        articles = validate_articles(await _read_json(request))
        analyzer = build_analyzer(api_key, CONFIG, rate_limiter=RATE_LIMITER)
        results = await run_in_threadpool(analyzer.analyze, articles)
        return JSONResponse(content=results)
    except RiskWatchError:
        raise
    except Exception as e:  # pylint: disable=broad-exception-caught
        logger.error("Error in analyze-risk: %s", e)
        return _error(500, str(e) or "Unknown error")


@app.post("/fetch-news")
async def fetch_news(request: Request):
    """Searches the news source and returns the raw articles."""
    try:
        api_key = require_env(NEWS_KEY_VAR)
        query, page_size = parse_news_request(await _read_json(request), CONFIG)
        source = NewsAPIParser(
            api_key, url=CONFIG["news_api_url"], timeout=CONFIG["request_timeout"]
        )
        articles = await run_in_threadpool(source.fetch, query, page_size)
        return JSONResponse(content=articles)
    except RiskWatchError:
        raise
    except Exception as e:  # pylint: disable=broad-exception-caught
        logger.error("Error in fetch-news: %s", e)
        return _error(500, str(e) or "Unknown error")


@app.get("/health")
async def health():
    """Liveness probe."""
    return {"status": "ok"}


def main() -> None:
    """Runs the API under uvicorn."""
    parser = argparse.ArgumentParser(description="Risk Watch API server")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8000)
    args = parser.parse_args()

    setup_logging()
    uvicorn.run(app, host=args.host, port=args.port)


if __name__ == "__main__":
    main()
