"""
LLM Client - single-shot completion against the configured provider
"""

from __future__ import annotations

import os
import time
import logging
from typing import Optional, Dict, Any
from dataclasses import dataclass

import anthropic
import requests
from openai import OpenAI
import openai

from ..exceptions import EnrichmentUnavailable

logger = logging.getLogger(__name__)


SUPPORTED_PROVIDERS = ('none', 'openai', 'anthropic', 'custom')

DEFAULT_MODELS = {
    'openai': 'gpt-4o',
    'anthropic': 'claude-sonnet-4-20250514',
}

API_KEY_ENV_VARS = {
    'openai': 'OPENAI_API_KEY',
    'anthropic': 'ANTHROPIC_API_KEY',
    'custom': 'GQLATLAS_LLM_API_KEY',
}


@dataclass
class LLMConfig:
    """Configuration for the enrichment provider

    For the SDK providers `endpoint` is an optional base URL; for the
    custom provider it is the full URL the prompt is POSTed to.
    """
    provider: str = 'none'
    api_key: Optional[str] = None
    model: Optional[str] = None
    endpoint: Optional[str] = None
    timeout: float = 120
    max_tokens: int = 4000
    temperature: float = 0.1

    def __post_init__(self):
        self.provider = (self.provider or 'none').lower()
        if self.api_key is None and self.provider in API_KEY_ENV_VARS:
            self.api_key = os.environ.get(API_KEY_ENV_VARS[self.provider])
        if self.model is None:
            self.model = DEFAULT_MODELS.get(self.provider)

    @property
    def enabled(self) -> bool:
        return self.provider != 'none'

    def to_dict(self) -> Dict[str, Any]:
        """Serializable form; the API key is never written out"""
        result: Dict[str, Any] = {'provider': self.provider}
        if self.model:
            result['model'] = self.model
        if self.endpoint:
            result['endpoint'] = self.endpoint
        result['timeout'] = self.timeout
        return result


@dataclass
class LLMResponse:
    """Response from the provider"""
    content: str
    model: Optional[str]
    provider: str
    latency_ms: float = 0.0


class LLMClient:
    """
    Sends one prompt to the configured provider and returns the text.

    There is exactly one attempt per call: SDK clients are built with
    max_retries=0 and every failure surfaces as EnrichmentUnavailable.
    """

    def __init__(self, config: Optional[LLMConfig] = None):
        self.config = config or LLMConfig()
        self._client = None

        if self.config.provider == 'anthropic' and self.config.api_key:
            self._client = anthropic.Anthropic(
                api_key=self.config.api_key,
                base_url=self.config.endpoint,
                max_retries=0,
                timeout=self.config.timeout,
            )
        elif self.config.provider == 'openai' and self.config.api_key:
            self._client = OpenAI(
                api_key=self.config.api_key,
                base_url=self.config.endpoint,
                max_retries=0,
                timeout=self.config.timeout,
            )

        if self._client is not None:
            logger.info(f"LLM client initialized: {self.config.provider} ({self.config.model})")
        elif self.config.provider in ('anthropic', 'openai'):
            logger.warning(f"No API key provided for {self.config.provider}")

    @property
    def is_available(self) -> bool:
        """Check if the client can make a request"""
        if self.config.provider == 'custom':
            return bool(self.config.endpoint)
        return self._client is not None

    def complete(self, prompt: str, system: Optional[str] = None) -> LLMResponse:
        """
        Send a single prompt.

        Raises:
            EnrichmentUnavailable: Provider unsupported, unconfigured or failing
        """
        provider = self.config.provider
        if provider not in SUPPORTED_PROVIDERS or provider == 'none':
            raise EnrichmentUnavailable(provider, "Unsupported LLM provider")
        if not self.is_available:
            raise EnrichmentUnavailable(provider, "LLM client not configured")

        start_time = time.time()
        if provider == 'anthropic':
            content = self._complete_anthropic(prompt, system)
        elif provider == 'openai':
            content = self._complete_openai(prompt, system)
        else:
            content = self._complete_custom(prompt, system)
        latency_ms = (time.time() - start_time) * 1000

        logger.info(f"LLM response received from {provider} in {latency_ms:.0f}ms")
        return LLMResponse(
            content=content,
            model=self.config.model,
            provider=provider,
            latency_ms=latency_ms,
        )

    def _complete_anthropic(self, prompt: str, system: Optional[str]) -> str:
        request_params: Dict[str, Any] = {
            'model': self.config.model,
            'max_tokens': self.config.max_tokens,
            'temperature': self.config.temperature,
            'messages': [{'role': 'user', 'content': prompt}],
        }
        if system:
            request_params['system'] = system

        try:
            response = self._client.messages.create(**request_params)
            return response.content[0].text
        except anthropic.APIError as e:
            raise EnrichmentUnavailable('anthropic', f"API error: {e}") from e
        except (IndexError, AttributeError) as e:
            raise EnrichmentUnavailable('anthropic', "Empty response from API") from e

    def _complete_openai(self, prompt: str, system: Optional[str]) -> str:
        messages = []
        if system:
            messages.append({'role': 'system', 'content': system})
        messages.append({'role': 'user', 'content': prompt})

        try:
            response = self._client.chat.completions.create(
                model=self.config.model,
                messages=messages,
                temperature=self.config.temperature,
                max_tokens=self.config.max_tokens,
            )
        except openai.APIError as e:
            raise EnrichmentUnavailable('openai', f"API error: {e}") from e

        if not response.choices:
            raise EnrichmentUnavailable('openai', "Empty response from API")
        return response.choices[0].message.content or ""

    def _complete_custom(self, prompt: str, system: Optional[str]) -> str:
        headers = {'Content-Type': 'application/json'}
        if self.config.api_key:
            headers['Authorization'] = f"Bearer {self.config.api_key}"

        payload = {
            'model': self.config.model,
            'prompt': f"{system}\n\n{prompt}" if system else prompt,
            'temperature': self.config.temperature,
        }

        try:
            response = requests.post(
                self.config.endpoint,
                headers=headers,
                json=payload,
                timeout=self.config.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as e:
            raise EnrichmentUnavailable('custom', f"Request failed: {e}") from e
        except ValueError as e:
            raise EnrichmentUnavailable('custom', "Response is not JSON") from e

        content = None
        if isinstance(data, dict):
            content = data.get('content') or data.get('text') or data.get('output')
        if not isinstance(content, str):
            raise EnrichmentUnavailable('custom', "Response carries no content, text or output field")
        return content


def create_llm_client(provider: str = 'none', api_key: Optional[str] = None,
                      model: Optional[str] = None, endpoint: Optional[str] = None,
                      timeout: float = 120) -> LLMClient:
    """Factory function to create an LLM client"""
    config = LLMConfig(
        provider=provider,
        api_key=api_key,
        model=model,
        endpoint=endpoint,
        timeout=timeout,
    )
    return LLMClient(config)
