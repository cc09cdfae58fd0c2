"""
LLM Service Module.

This module provides the RiskClassifier class, which sends a single rendered
risk-classification prompt to the Google Gemini API and returns the raw text
of the first generated candidate.
"""

import logging
from typing import Any, Optional

import httpx
from google import genai
from google.genai import errors, types

from riskwatch.errors import (
    ClassifierError,
    EmptyReplyError,
    ServiceStatusError,
    TransportError,
)

logger = logging.getLogger(__name__)


class RiskClassifier:
    """
    Client for the Google Gemini generateContent endpoint.

    Each call to classify() performs exactly one request with no retry, so a
    failing article is reported immediately and the batch can move on.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-1.5-flash",
        temperature: float = 0.3,
        max_output_tokens: int = 500,
        timeout: float = 30,
    ):
        self.model = model
        self.generation_config = types.GenerateContentConfig(
            temperature=temperature,
            max_output_tokens=max_output_tokens,
        )
        self.client: Optional[genai.Client] = None
        try:
            # HttpOptions.timeout is in milliseconds
            self.client = genai.Client(
                api_key=api_key,
                http_options=types.HttpOptions(timeout=int(timeout * 1000)),
            )
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Failed to initialize Gemini client: %s", e)
            self.client = None

    @staticmethod
    def _first_candidate_text(response: Any) -> str:
        """Returns the text of the first part of the first candidate."""
        candidates = response.candidates or []
        if not candidates:
            return ""
        content = candidates[0].content
        if not content or not content.parts:
            return ""
        return content.parts[0].text or ""

    def classify(self, prompt: str) -> str:
        """Sends the prompt and returns the raw reply text.

        Raises:
            TransportError: the request did not reach the service.
            ServiceStatusError: the service returned a non-success status.
            EmptyReplyError: the service returned no candidate text.
        """
        if not self.client:
            raise ClassifierError("Gemini client not initialized.")

        try:
            response = self.client.models.generate_content(
                model=self.model,
                contents=prompt,
                config=self.generation_config,
            )
        except errors.APIError as e:
            raise ServiceStatusError(e.code, e.message or "") from e
        except (httpx.HTTPError, OSError) as e:
            raise TransportError(f"Gemini request failed: {e}") from e

        text = self._first_candidate_text(response)
        if not text.strip():
            raise EmptyReplyError("Gemini returned an empty reply.")
        return text
