"""
Configuration loading for Risk Watch.

Non-secret tunables come from an optional JSON file; API keys are only ever
read from the environment, and only when they are needed.
"""

import json
import logging
import os
from typing import Any, Dict, Optional

from riskwatch.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULTS: Dict[str, Any] = {
    "model": "gemini-1.5-flash",
    "temperature": 0.3,
    "max_output_tokens": 500,
    "requests_per_minute": 60,
    "burst": 1,
    "max_workers": 4,
    "default_query": "Tata Motors OR automotive OR electric vehicle OR supply chain",
    "page_size": 20,
    "news_api_url": "https://newsapi.org/v2/everything",
    "request_timeout": 10,
    "classifier_timeout": 30,
    "output_file": "tata_motors_risk_analysis.json",
}

GEMINI_KEY_VAR = "GEMINI_API_KEY"
NEWS_KEY_VAR = "NEWS_API_KEY"


def setup_logging() -> None:
    """Configure standard logging format for the CLI and API server."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def load_config(config_filename: Optional[str] = None) -> Dict[str, Any]:
    """Loads configuration from a JSON file, layered over the defaults."""
    config_path = config_filename or os.environ.get("RISKWATCH_CONFIG", "config.json")
    if not os.path.isabs(config_path):
        # Build absolute path relative to this package
        base_dir = os.path.dirname(os.path.abspath(__file__))
        config_path = os.path.join(base_dir, config_path)

    config = dict(DEFAULTS)
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config.update(json.load(f))
    except FileNotFoundError:
        logger.warning("Config file not found at %s. Using defaults.", config_path)
    return config


def require_env(name: str) -> str:
    """Returns a secret from the environment or raises ConfigurationError."""
    value = os.environ.get(name)
    if not value:
        raise ConfigurationError(f"{name} not configured")
    return value
