import logging
from typing import Optional
from google import genai
from google.genai import types

from ..settings import settings

logger = logging.getLogger("recipe_import.ai")


def normalize_model_id(model_string: str) -> str:
    """
    Sanitize a model string from the environment.
    'model="gemini-2.5-flash"' -> 'gemini-2.5-flash'
    """
    if not model_string:
        return model_string

    s = model_string.strip()
    if s.lower().startswith("model="):
        s = s[6:]
    return s.strip('"\'').strip()


class AIClient:
    _instance = None

    def __init__(self):
        self.api_key = settings.gemini_api_key
        self.mode = settings.ai_mode  # "mock" or "gemini"
        self._client: Optional[genai.Client] = None

        if self.mode == "gemini" and self.api_key:
            self._client = genai.Client(api_key=self.api_key)

    @classmethod
    def get_instance(cls):
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def is_available(self) -> bool:
        return self.mode == "gemini" and self._client is not None

    async def generate_text(
        self,
        prompt: str,
        model: Optional[str] = None,
        system_instruction: Optional[str] = None,
        json_output: bool = False,
    ) -> Optional[str]:
        """
        Generate text with Gemini (async).
        Returns None if AI is disabled/unavailable or the call fails.
        """
        if not self.is_available():
            logger.warning("AI is not available (mode=%s), skipping generation", self.mode)
            return None

        model_id = normalize_model_id(model or settings.gemini_text_model)

        try:
            config = types.GenerateContentConfig(
                response_mime_type="application/json" if json_output else "text/plain",
                system_instruction=system_instruction,
                temperature=0,
            )

            response = await self._client.aio.models.generate_content(
                model=model_id,
                contents=prompt,
                config=config,
            )

            if not response.text:
                logger.warning(f"Gemini returned empty response from model {model_id}")
                return None

            return response.text

        except Exception as e:
            logger.error(f"Gemini generation failed: {e}")
            return None


# Singleton instance access
ai_client = AIClient.get_instance()
