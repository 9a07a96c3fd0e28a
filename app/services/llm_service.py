"""AI gateway client with provider fallback and retry handling."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, Sequence

import httpx
from loguru import logger
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from app.config import settings
from app.utils.exceptions import AICreditsExhaustedError, AIGatewayError, AIRateLimitError

Message = Dict[str, Any]


@dataclass
class LLMResult:
    """Structured response returned by the :class:`LLMService`."""

    provider: str
    model: str
    content: str
    prompt_tokens: int
    completion_tokens: int
    total_tokens: int
    raw_response: Dict[str, Any]


class TransientGatewayError(AIGatewayError):
    """Server-side gateway failure worth retrying."""


class BaseLLMProvider(Protocol):
    """Protocol shared by provider implementations."""

    name: str

    def generate(self, messages: Sequence[Message], **kwargs: Any) -> LLMResult:  # pragma: no cover - interface definition
        """Generate a chat completion."""

    def synthesize_speech(self, text: str, *, voice: str) -> bytes:  # pragma: no cover - interface definition
        """Return MP3 audio for ``text``."""


def _raise_for_gateway_status(provider: str, response: httpx.Response) -> None:
    if response.status_code < 400:
        return
    body = response.text
    logger.error("AI gateway returned error", provider=provider, status=response.status_code, body=body)
    if response.status_code == 429:
        raise AIRateLimitError("Rate limits exceeded", {"provider": provider})
    if response.status_code == 402:
        raise AICreditsExhaustedError("Payment required", {"provider": provider})
    if response.status_code >= 500:
        raise TransientGatewayError(f"{provider} error {response.status_code}: {body}")
    raise AIGatewayError(f"{provider} error {response.status_code}: {body}")


_gateway_retry = retry(
    retry=retry_if_exception_type((TransientGatewayError, httpx.TransportError)),
    stop=stop_after_attempt(settings.LLM_MAX_RETRIES),
    wait=wait_exponential(multiplier=1, min=1, max=8),
    before_sleep=before_sleep_log(logger, "warning"),
    reraise=True,
)


@dataclass
class GatewayProvider:
    """OpenAI-compatible chat completions gateway."""

    api_key: str
    model: str
    base_url: str = "https://ai.gateway.lovable.dev/v1"
    request_timeout: float = 60.0
    speech_model: str = "tts-1"

    name: str = "gateway"

    def _build_headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    @_gateway_retry
    def generate(self, messages: Sequence[Message], **kwargs: Any) -> LLMResult:
        payload: Dict[str, Any] = {
            "model": kwargs.get("model") or self.model,
            "messages": list(messages),
        }
        if "temperature" in kwargs:
            payload["temperature"] = kwargs["temperature"]
        if "max_tokens" in kwargs:
            payload["max_tokens"] = kwargs["max_tokens"]
        if "response_format" in kwargs:
            payload["response_format"] = kwargs["response_format"]

        with httpx.Client(base_url=self.base_url, timeout=self.request_timeout) as client:
            response = client.post("/chat/completions", json=payload, headers=self._build_headers())

        _raise_for_gateway_status(self.name, response)

        try:
            data = response.json()
            choice = (data.get("choices") or [{}])[0]
            content = (choice.get("message") or {}).get("content") or ""
            usage = data.get("usage") or {}
        except (ValueError, AttributeError, IndexError, KeyError, TypeError) as exc:
            logger.error("Invalid gateway response", provider=self.name, body=response.text[:200])
            raise AIGatewayError("invalid gateway response", {"provider": self.name}) from exc
        if not isinstance(content, str):
            raise AIGatewayError("invalid gateway response", {"provider": self.name})

        result = LLMResult(
            provider=self.name,
            model=payload["model"],
            content=content.strip(),
            prompt_tokens=usage.get("prompt_tokens", 0),
            completion_tokens=usage.get("completion_tokens", 0),
            total_tokens=usage.get("total_tokens", usage.get("prompt_tokens", 0) + usage.get("completion_tokens", 0)),
            raw_response=data,
        )
        logger.info(
            "Gateway completion success",
            model=result.model,
            tokens=result.total_tokens,
        )
        return result

    @_gateway_retry
    def synthesize_speech(self, text: str, *, voice: str) -> bytes:
        payload = {"model": self.speech_model, "input": text, "voice": voice}
        with httpx.Client(base_url=self.base_url, timeout=self.request_timeout) as client:
            response = client.post("/audio/speech", json=payload, headers=self._build_headers())

        _raise_for_gateway_status(self.name, response)
        logger.info("Gateway speech success", voice=voice, size=len(response.content))
        return response.content


class LLMService:
    """Coordinate chat completion requests across providers."""

    def __init__(self, providers: Optional[Sequence[BaseLLMProvider]] = None) -> None:
        if providers is not None:
            self._providers = list(providers)
        else:
            self._providers = self._build_default_providers()
        if not self._providers:
            raise ValueError("LLMService requires at least one provider")

    def _build_default_providers(self) -> List[BaseLLMProvider]:
        provider_list: List[BaseLLMProvider] = []
        if settings.AI_GATEWAY_API_KEY:
            provider_list.append(
                GatewayProvider(
                    api_key=settings.AI_GATEWAY_API_KEY,
                    model=settings.ASSISTANT_MODEL,
                    base_url=settings.AI_GATEWAY_BASE_URL,
                    request_timeout=settings.LLM_REQUEST_TIMEOUT_SECONDS,
                    speech_model=settings.SPEECH_MODEL,
                )
            )
        return provider_list

    def generate_chat_completion(
        self,
        messages: Sequence[Message],
        *,
        model: Optional[str] = None,
        system_prompt: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> LLMResult:
        """Generate a chat completion using the configured providers."""

        provider_messages: List[Message] = list(messages)
        if system_prompt:
            provider_messages = [{"role": "system", "content": system_prompt}, *provider_messages]

        payload_kwargs: Dict[str, Any] = {"model": model}
        if temperature is not None:
            payload_kwargs["temperature"] = temperature
        if max_tokens is not None:
            payload_kwargs["max_tokens"] = max_tokens

        errors: List[str] = []
        last_error: Optional[Exception] = None
        for provider in self._providers:
            try:
                result = provider.generate(provider_messages, **payload_kwargs)
                logger.debug(
                    "LLM provider success",
                    provider=provider.name,
                    tokens=result.total_tokens,
                )
                return result
            except (AIGatewayError, httpx.HTTPError) as exc:
                logger.exception("LLM provider failure", provider=provider.name)
                errors.append(f"{provider.name}: {exc}")
                last_error = exc
                continue
        if isinstance(last_error, (AIRateLimitError, AICreditsExhaustedError)):
            raise last_error
        raise AIGatewayError("; ".join(errors))

    def text_to_speech(self, text: str, *, voice: Optional[str] = None) -> bytes:
        """Return MP3 audio for ``text`` from the first provider that succeeds."""

        resolved_voice = voice or settings.SPEECH_VOICE
        errors: List[str] = []
        last_error: Optional[Exception] = None
        for provider in self._providers:
            try:
                return provider.synthesize_speech(text, voice=resolved_voice)
            except (AIGatewayError, httpx.HTTPError) as exc:
                logger.exception("Speech provider failure", provider=provider.name)
                errors.append(f"{provider.name}: {exc}")
                last_error = exc
        if isinstance(last_error, (AIRateLimitError, AICreditsExhaustedError)):
            raise last_error
        raise AIGatewayError("; ".join(errors))


__all__ = ["GatewayProvider", "LLMService", "LLMResult", "TransientGatewayError"]
