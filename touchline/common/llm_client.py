"""
LLM Client

One text-generation call over Anthropic, OpenAI or Google Gemini, used by
the model-assisted intent classifier. Structured (JSON) replies are
requested natively where the provider has a JSON mode.

A client without a key or SDK is constructed but unavailable; generate()
then raises RuntimeError and the caller decides how to degrade.
"""

from __future__ import annotations

import hashlib
import logging
from typing import Dict, Optional

logger = logging.getLogger("touchline.common.llm_client")

PROVIDERS = ("anthropic", "openai", "google")


class LLMClient:
    """Provider-agnostic text generation."""

    def __init__(
        self,
        provider: str = "openai",
        model: str = "",
        anthropic_api_key: Optional[str] = None,
        openai_api_key: Optional[str] = None,
        google_api_key: Optional[str] = None,
    ) -> None:
        self.provider = (provider or "openai").lower()
        self.model = model
        self._client = None
        self._gemini_models: Dict[str, object] = {}

        if self.provider not in PROVIDERS:
            logger.warning("Unsupported LLM provider: %s", self.provider)
            return

        api_key = {
            "anthropic": anthropic_api_key,
            "openai": openai_api_key,
            "google": google_api_key,
        }[self.provider]
        if not api_key:
            logger.info("%s API key not provided, LLM client unavailable", self.provider)
            return

        try:
            self._client = getattr(self, f"_connect_{self.provider}")(api_key)
        except ImportError as e:
            logger.warning("%s SDK not installed: %s", self.provider, e)
        except Exception as e:
            logger.warning("Failed to initialize %s client: %s", self.provider, e)

    @staticmethod
    def _connect_anthropic(api_key: str):
        import anthropic
        return anthropic.Anthropic(api_key=api_key)

    @staticmethod
    def _connect_openai(api_key: str):
        from openai import OpenAI
        return OpenAI(api_key=api_key)

    @staticmethod
    def _connect_google(api_key: str):
        import google.generativeai as genai
        genai.configure(api_key=api_key)
        # The module itself; models are built per system prompt
        return genai

    @property
    def is_available(self) -> bool:
        return self._client is not None

    def generate(
        self,
        prompt: str,
        *,
        system: Optional[str] = None,
        max_tokens: int = 256,
        temperature: float = 0.1,
        json_output: bool = False,
        timeout: float = 15.0,
    ) -> str:
        """
        Generate a reply.

        Args:
            prompt: User content
            system: System instruction
            max_tokens: Output token cap
            temperature: Sampling temperature
            json_output: Ask the provider for a JSON object reply
            timeout: Request timeout in seconds

        Returns:
            Stripped reply text

        Raises:
            RuntimeError: if the client is unavailable; SDK errors propagate
        """
        if not self.is_available:
            raise RuntimeError("LLM client is not available")

        handler = getattr(self, f"_generate_{self.provider}")
        return handler(prompt, system, max_tokens, temperature, json_output, timeout)

    def _generate_anthropic(self, prompt, system, max_tokens, temperature, json_output, timeout) -> str:
        # No JSON mode; the system instruction carries the format
        kwargs = {"system": system} if system else {}
        response = self._client.messages.create(
            model=self.model,
            max_tokens=max_tokens,
            temperature=temperature,
            messages=[{"role": "user", "content": prompt}],
            timeout=timeout,
            **kwargs,
        )
        return response.content[0].text.strip()

    def _generate_openai(self, prompt, system, max_tokens, temperature, json_output, timeout) -> str:
        messages = [{"role": "system", "content": system}] if system else []
        messages.append({"role": "user", "content": prompt})

        kwargs = {"response_format": {"type": "json_object"}} if json_output else {}
        response = self._client.chat.completions.create(
            model=self.model,
            messages=messages,
            max_tokens=max_tokens,
            temperature=temperature,
            timeout=timeout,
            **kwargs,
        )
        return (response.choices[0].message.content or "").strip()

    def _generate_google(self, prompt, system, max_tokens, temperature, json_output, timeout) -> str:
        model = self._gemini_model(system)
        generation_config = {"max_output_tokens": max_tokens, "temperature": temperature}
        if json_output:
            generation_config["response_mime_type"] = "application/json"

        response = model.generate_content(
            prompt,
            generation_config=generation_config,
            request_options={"timeout": timeout},
        )
        return response.text.strip()

    def _gemini_model(self, system: Optional[str]):
        """Gemini binds the system instruction to the model; cache one per prompt"""
        key = hashlib.md5((system or "").encode()).hexdigest()
        if key not in self._gemini_models:
            kwargs = {"model_name": self.model}
            if system:
                kwargs["system_instruction"] = system
            self._gemini_models[key] = self._client.GenerativeModel(**kwargs)
        return self._gemini_models[key]
