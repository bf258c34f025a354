"""Service for normalizing scraped offer fragments into structured JSON with an LLM."""

import json
import re
from typing import Any, Dict, Optional

from pydantic import ValidationError

from price_monitor.prompts import payment_conditions, technical_features
from price_monitor.services.openai_service import OpenAIService
from price_monitor.utils import OpenAIServiceError, logger
from price_monitor.utils.config import LLM_MAX_INPUT_CHARS, OPENAI_CHAT_MODEL

CONDITIONS_FALLBACK_ERROR = "LLM analysis of payment conditions failed."
FEATURES_FALLBACK_ERROR = "LLM analysis of technical features failed."

_CODE_FENCE = re.compile(r"```json\n?|\n?```")


def parse_llm_json(content: str) -> Dict[str, Any]:
    """
    Parse an LLM reply that should hold a single JSON object.

    Markdown code fences (```json ... ```) around the object are removed first.

    Raises:
        ValueError: If the reply is not valid JSON or not an object
    """
    json_string = _CODE_FENCE.sub("", content).strip()
    parsed = json.loads(json_string)  # json.JSONDecodeError is a ValueError
    if not isinstance(parsed, dict):
        raise ValueError(f"Expected a JSON object, got {type(parsed).__name__}")
    return parsed


def _truncate(text: str, label: str) -> str:
    if len(text) <= LLM_MAX_INPUT_CHARS:
        return text
    logger.warning("⚠️ Truncated %s for LLM normalization (Sent %d of %d chars)", label, LLM_MAX_INPUT_CHARS, len(text))
    return text[:LLM_MAX_INPUT_CHARS] + "\n... (truncated due to length)"


class OfferNormalizer:
    """
    Sends unstructured page fragments to the LLM and parses the JSON replies.

    Failures never propagate: a failed call or unparsable reply yields a
    dict holding a single "error" key, which is stored like any other result.
    """

    def __init__(self, openai_service: OpenAIService, model: str = OPENAI_CHAT_MODEL):
        self.openai_service = openai_service
        self.model = model

    async def _ask_for_json(self, prompt: str, label: str) -> Dict[str, Any]:
        content = await self.openai_service.generate_response(prompt, model=self.model, use_json_mode=True)
        try:
            return parse_llm_json(content)
        except ValueError as e:
            logger.error("❌ Failed to parse LLM JSON reply for %s: %s\nResponse: %s", label, e, content[:500])
            raise

    async def normalize_conditions(self, conditions_text: Optional[str]) -> Optional[Dict[str, Any]]:
        """
        Normalize payment/shipping conditions text.

        Args:
            conditions_text: Visible text of the payment conditions block

        Returns:
            Optional[Dict[str, Any]]: Normalized conditions, the fallback error dict on
            failure, or None when there was no text to normalize
        """
        if not conditions_text or not conditions_text.strip():
            return None

        prompt = payment_conditions.get_prompt(_truncate(conditions_text, "payment conditions"))
        try:
            raw = await self._ask_for_json(prompt, "payment conditions")
        except (OpenAIServiceError, ValueError) as e:
            logger.error("❌ Error analyzing payment conditions with LLM: %s", e)
            return {"error": CONDITIONS_FALLBACK_ERROR}

        try:
            validated = payment_conditions.get_response_model().model_validate(raw)
        except ValidationError as e:
            # Keep what the model said even when a field has an unexpected type
            logger.warning("⚠️ Payment conditions reply does not match the expected shape: %s", e)
            return raw

        logger.info("✅ Normalized payment conditions with LLM")
        return {**raw, **validated.model_dump()}

    async def extract_features(self, specs_html: Optional[str]) -> Optional[Dict[str, Any]]:
        """
        Extract technical features from the specifications block HTML.

        Args:
            specs_html: Inner HTML of the technical specifications block

        Returns:
            Optional[Dict[str, Any]]: snake_case feature map, the fallback error dict on
            failure, or None when there was no HTML to analyze
        """
        if not specs_html or not specs_html.strip():
            return None

        prompt = technical_features.get_prompt(_truncate(specs_html, "technical specifications"))
        try:
            features = await self._ask_for_json(prompt, "technical features")
        except (OpenAIServiceError, ValueError) as e:
            logger.error("❌ Error analyzing technical features with LLM: %s", e)
            return {"error": FEATURES_FALLBACK_ERROR}

        logger.info("✅ Extracted %d technical features with LLM", len(features))
        return features
