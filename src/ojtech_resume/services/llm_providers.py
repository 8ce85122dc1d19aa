from __future__ import annotations

import os
from abc import ABC, abstractmethod

from dotenv import load_dotenv

"""LLM provider implementations used to author resume content."""

# Load environment variables for LLM API keys (GEMINI_API_KEY, LLM_MODEL, etc.)
load_dotenv()

DEFAULT_GEMINI_MODEL = "gemini-2.5-flash"


class LLMError(RuntimeError):
    """Raised when the LLM service cannot be used or fails.

    Attributes:
        status_code: HTTP status reported by the provider, or None when the
            call failed before a response arrived.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class LLMProvider(ABC):
    """Abstract base class for LLM providers."""

    def generate_llm_config(
        self,
        temperature: float,
        max_tokens: int | None,
        seed: int | None,
    ) -> dict:
        """Build the provider-neutral request options.

        Args:
            temperature: Controls randomness
            max_tokens: Maximum response length
            seed: Random seed for reproducibility

        Returns:
            Configuration dictionary with common parameters
        """
        config = {}

        if temperature is not None:
            config["temperature"] = temperature
        if max_tokens is not None:
            config["max_tokens"] = max_tokens
        if seed is not None:
            config["seed"] = seed

        return config

    @abstractmethod
    def send_prompt(self, prompt: str, config: dict) -> str:
        """Send a prompt to the LLM and return the text response.

        Raises:
            LLMError: If the provider call fails.
        """


class GeminiProvider(LLMProvider):
    """Gemini implementation."""

    def __init__(self) -> None:
        from google import genai

        self.api_key = os.environ.get("GEMINI_API_KEY")
        if not self.api_key:
            raise LLMError("Missing GEMINI_API_KEY environment variable")

        self.model = os.environ.get("LLM_MODEL", DEFAULT_GEMINI_MODEL)
        self.client = genai.Client(api_key=self.api_key)

    def generate_llm_config(
        self,
        temperature: float,
        max_tokens: int | None,
        seed: int | None,
    ) -> dict:
        config = super().generate_llm_config(temperature, max_tokens, seed)

        # Gemini calls it max_output_tokens
        if "max_tokens" in config:
            config["max_output_tokens"] = config.pop("max_tokens")

        return config

    def send_prompt(self, prompt: str, config: dict) -> str:
        """Send prompt to Gemini and return the stripped response text.

        Errors from the SDK are re-raised as :class:`LLMError`; the status
        code of ``google.genai.errors.APIError`` is preserved.
        """
        from google.genai import errors

        try:
            response = self.client.models.generate_content(
                model=self.model, contents=prompt, config=config
            )
            return (response.text or "").strip()
        except errors.APIError as e:
            raise LLMError(f"Gemini API call failed: {e}", status_code=e.code) from e
        except Exception as e:
            raise LLMError(f"Gemini API call failed: {e}") from e
