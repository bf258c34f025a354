"""OpenAI service for generating normalized JSON from scraped product text."""

from typing import Optional

import openai
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_fixed

from price_monitor.services.clients.openai_client import OpenAIClient
from price_monitor.utils import OpenAIServiceError, logger
from price_monitor.utils.config import LLM_MAX_TOKENS, OPENAI_CHAT_MODEL


class OpenAIService:
    """
    Handles interactions with OpenAI API for offer and feature normalization.

    Provides business logic layer on top of OpenAI API interactions,
    including retries, error handling, and data normalization.
    """

    def __init__(self, api_key: Optional[str] = None):
        """
        Initialize OpenAI service with API client.

        Args:
            api_key: Optional API key override
        """
        self.client = OpenAIClient(api_key=api_key)

    @retry(
        stop=stop_after_attempt(3),  # Retry 3 times
        wait=wait_fixed(2),  # Wait 2 seconds between retries
        retry=retry_if_exception_type(openai.OpenAIError),  # Retry only OpenAI errors
        reraise=True,
    )
    async def _complete(self, prompt: str, model: str, max_tokens: int, use_json_mode: bool):
        messages = [self.client.create_message(role="system", content=prompt)]
        # JSON mode requires the prompt itself to ask for JSON; both normalization prompts do
        response_format_arg = {"type": "json_object"} if use_json_mode else None
        return await self.client.create_chat_completion(
            messages=messages,
            model=model,
            temperature=0.2,
            max_tokens=max_tokens,
            response_format=response_format_arg,
        )

    async def generate_response(
        self,
        prompt: str,
        model: str = OPENAI_CHAT_MODEL,
        max_tokens: int = LLM_MAX_TOKENS,
        use_json_mode: bool = False,
    ) -> str:
        """
        Generates a response from OpenAI. Retries on failure.

        Args:
            prompt: Text prompt to send to the model
            model: OpenAI model to use
            max_tokens: Maximum tokens for the response
            use_json_mode: If True, request JSON output from the model

        Returns:
            str: Generated text response (a JSON string if use_json_mode=True)

        Raises:
            OpenAIServiceError: If the API call fails after retries or the reply is empty
        """
        try:
            response = await self._complete(prompt, model, max_tokens, use_json_mode)
        except openai.OpenAIError as e:
            logger.error("❌ OpenAI API returned an error: %s", str(e))
            raise OpenAIServiceError("OpenAI API error after all retries") from e
        except Exception as e:
            logger.error("❌ Unexpected OpenAI error: %s", str(e))
            raise OpenAIServiceError("Unexpected OpenAI Failure") from e

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise OpenAIServiceError("Empty response content from OpenAI")
        return content
