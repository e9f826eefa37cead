"""OpenAI-backed machine translation provider."""

import asyncio
import logging
import os
from typing import Dict, Optional

from openai import AsyncOpenAI, OpenAIError

from .exceptions import MTProviderError
from .prompt_loader import PromptLoader

log = logging.getLogger(__name__)


class OpenAIMTProvider:
    """Translates section HTML with chat completion models.

    Provider ids map to model names, so several engines can be offered to
    the translator from one API account. Works with OpenAI and OpenRouter
    compatible endpoints.
    """

    def __init__(
        self,
        providers: Dict[str, str],
        source_language: str,
        target_language: str,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        temperature: float = 0.3,
        max_tokens: int = 4000,
        max_retries: int = 3,
        prompt_loader: Optional[PromptLoader] = None,
        client: Optional[AsyncOpenAI] = None,
    ):
        """Initialize provider.

        Args:
            providers: Provider id to model name
            source_language: Source language code
            target_language: Target language code
            api_key: API key (OpenAI or OpenRouter)
            base_url: Base URL for API (use "https://openrouter.ai/api/v1" for OpenRouter)
            temperature: Sampling temperature
            max_tokens: Maximum tokens in response
            max_retries: Maximum number of attempts per request
            prompt_loader: Prompt loader instance (creates default if None)
            client: Preconfigured client (created from api_key/base_url if None)
        """
        self.providers = dict(providers)
        self.source_language = source_language
        self.target_language = target_language
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.max_retries = max_retries
        self.prompt_loader = prompt_loader or PromptLoader()

        if client is None:
            api_key = api_key or os.getenv("OPENAI_API_KEY") or os.getenv("OPENROUTER_API_KEY")
            if not api_key:
                raise MTProviderError("API key not provided (set OPENAI_API_KEY or OPENROUTER_API_KEY)")

            client_kwargs = {"api_key": api_key}
            if base_url:
                client_kwargs["base_url"] = base_url
            client = AsyncOpenAI(**client_kwargs)

        self.client = client

    @classmethod
    def from_config(cls, config, **kwargs) -> "OpenAIMTProvider":
        """Build a provider from a TrackerConfig."""
        return cls(
            providers=config.mt.providers,
            source_language=config.source_language,
            target_language=config.target_language,
            api_key=config.mt.api_key,
            base_url=config.mt.base_url,
            temperature=config.mt.temperature,
            max_tokens=config.mt.max_tokens,
            max_retries=config.mt.max_retries,
            **kwargs,
        )

    async def translate(self, html: str, provider_id: str) -> str:
        """Translate a section HTML fragment.

        Args:
            html: Source section HTML
            provider_id: Provider to use

        Returns:
            Translated HTML

        Raises:
            MTProviderError: If the provider is unknown or the request fails after retries
        """
        model = self.providers.get(provider_id)
        if not model:
            raise MTProviderError(f"Unknown MT provider: {provider_id}", provider_id)

        if not html.strip():
            return html

        prompt_config = self.prompt_loader.load("section_translation")
        messages = [
            {
                "role": "system",
                "content": prompt_config.format_system_prompt(
                    source_language=self.source_language,
                    target_language=self.target_language,
                ),
            },
            {
                "role": "user",
                "content": prompt_config.format_user_prompt(content=html),
            },
        ]
        temperature = prompt_config.temperature if prompt_config.temperature is not None else self.temperature
        max_tokens = prompt_config.max_tokens or self.max_tokens

        for attempt in range(self.max_retries):
            try:
                response = await self.client.chat.completions.create(
                    model=model,
                    messages=messages,
                    temperature=temperature,
                    max_tokens=max_tokens,
                )
                return (response.choices[0].message.content or "").strip()

            except OpenAIError as e:
                if attempt == self.max_retries - 1:
                    raise MTProviderError(
                        f"Translation with {provider_id} failed after {self.max_retries} attempts: {e}",
                        provider_id,
                    ) from e

                # Exponential backoff
                wait_time = 2 ** attempt
                log.warning(
                    "MT API error (attempt %d/%d): %s. Retrying in %d seconds",
                    attempt + 1, self.max_retries, e, wait_time,
                )
                await asyncio.sleep(wait_time)

        raise MTProviderError(f"Translation with {provider_id} failed", provider_id)
