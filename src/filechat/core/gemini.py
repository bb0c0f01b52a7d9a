"""
FileChat Core - Gemini Developer API Integration.

Single text-generation call used by the chat agent. The client is built
lazily on first use so the app starts without an API key; a missing key
then surfaces as a GenerationFailure on the first chat turn.
"""

import logging
import os
from typing import Protocol

from filechat.config import GeminiSettings
from filechat.exceptions import GenerationFailure

logger = logging.getLogger(__name__)


class TextGenerator(Protocol):
    """Anything that turns a system + user instruction into text."""

    async def generate(
        self,
        system_instruction: str,
        user_instruction: str,
        temperature: float = 0.7,
        max_output_tokens: int = 2000,
    ) -> str: ...


class GeminiGenerator:
    """TextGenerator backed by the google-genai SDK."""

    def __init__(self, settings: GeminiSettings, client=None):
        self.settings = settings
        self.model = settings.model
        self._client = client

    def _get_api_key(self) -> str:
        """
        Resolution order:
        1. GEMINI_API_KEY via settings
        2. GOOGLE_API_KEY environment variable
        """
        api_key = self.settings.api_key or os.environ.get("GOOGLE_API_KEY", "")
        if not api_key:
            raise GenerationFailure("No API key found. Set GEMINI_API_KEY environment variable.")
        return api_key

    @property
    def client(self):
        if self._client is None:
            from google import genai

            self._client = genai.Client(api_key=self._get_api_key())
            logger.info("Gemini client initialized with API key")
        return self._client

    async def generate(
        self,
        system_instruction: str,
        user_instruction: str,
        temperature: float = 0.7,
        max_output_tokens: int = 2000,
    ) -> str:
        """
        Run one generation call.

        Raises:
            GenerationFailure: on any SDK, network or quota error, or an empty reply
        """
        from google.genai import types

        try:
            logger.info(f"Generating with {self.model}: {user_instruction[:50]}...")
            response = await self.client.aio.models.generate_content(
                model=self.model,
                contents=user_instruction,
                config=types.GenerateContentConfig(
                    system_instruction=system_instruction,
                    temperature=temperature,
                    max_output_tokens=max_output_tokens,
                ),
            )
        except GenerationFailure:
            raise
        except Exception as e:
            logger.error(f"Generation failed: {e}")
            raise GenerationFailure(str(e)) from e

        text = response.text
        if not text:
            raise GenerationFailure("Empty response from model")
        return text
