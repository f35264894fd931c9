"""Generative capability interface and implementations."""

import time
from abc import ABC, abstractmethod

import httpx
from pydantic import SecretStr

from hela.config import OnDeviceSettings, RemoteSettings
from hela.exceptions import (
    CapabilityUnavailableError,
    ErrorCode,
    GenerationFailedError,
)
from hela.llm.models import CapabilityTier, GenerationResult, Message, Role
from hela.logging_config import get_logger
from hela.observability.metrics import track_generation_request

logger = get_logger(__name__)


class GenerativeCapability(ABC):
    """Abstract base class for generative capabilities.

    A capability turns a prompt into response text on one tier.
    """

    @property
    @abstractmethod
    def tier(self) -> CapabilityTier:
        """Tier this capability serves."""
        ...

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Get the model name."""
        ...

    def is_available(self) -> bool:
        """Whether the capability can be called at all."""
        return True

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        tier: CapabilityTier,
        system_prompt: str | None = None,
    ) -> str:
        """Generate response text for a prompt.

        Args:
            prompt: User prompt.
            tier: Tier the caller expects this capability to serve.
            system_prompt: Optional system prompt.

        Returns:
            Generated text.

        Raises:
            CapabilityUnavailableError: If the capability cannot run.
            GenerationFailedError: If generation fails.
        """
        ...


class OpenAICompatibleCapability(GenerativeCapability):
    """Capability backed by an OpenAI-compatible chat completions API.

    Works with:
    - Ollama or llama.cpp servers on the device (on-device tier)
    - OpenAI or any hosted OpenAI-compatible endpoint (remote tier)
    """

    def __init__(
        self,
        tier: CapabilityTier,
        base_url: str,
        model: str,
        api_key: SecretStr | None = None,
        timeout: float = 30.0,
        max_tokens: int = 512,
        temperature: float = 0.1,
        require_credentials: bool = False,
        enabled: bool = True,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the capability.

        Args:
            tier: Tier served by this endpoint.
            base_url: API base URL.
            model: Model name.
            api_key: Optional API key.
            timeout: HTTP timeout in seconds.
            max_tokens: Maximum tokens in response.
            temperature: Sampling temperature.
            require_credentials: Treat a missing API key as unavailable.
            enabled: Switch the capability off entirely.
            client: HTTP client (for testing).
        """
        self._tier = tier
        self._base_url = base_url.rstrip("/")
        self._model = model
        self._api_key = api_key
        self._timeout = timeout
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._require_credentials = require_credentials
        self._enabled = enabled
        self._client = client
        self._owns_client = client is None

    @classmethod
    def on_device(
        cls,
        settings: OnDeviceSettings,
        client: httpx.AsyncClient | None = None,
    ) -> "OpenAICompatibleCapability":
        """Build the on-device capability from settings."""
        return cls(
            tier=CapabilityTier.ON_DEVICE,
            base_url=settings.base_url,
            model=settings.model,
            timeout=settings.timeout,
            max_tokens=settings.max_tokens,
            temperature=settings.temperature,
            enabled=settings.enabled,
            client=client,
        )

    @classmethod
    def remote(
        cls,
        settings: RemoteSettings,
        client: httpx.AsyncClient | None = None,
    ) -> "OpenAICompatibleCapability":
        """Build the remote capability from settings."""
        return cls(
            tier=CapabilityTier.REMOTE,
            base_url=settings.base_url,
            model=settings.model,
            api_key=settings.api_key,
            timeout=settings.timeout,
            max_tokens=settings.max_tokens,
            temperature=settings.temperature,
            require_credentials=True,
            client=client,
        )

    @property
    def tier(self) -> CapabilityTier:
        """Tier this capability serves."""
        return self._tier

    @property
    def model_name(self) -> str:
        """Get the model name."""
        return self._model

    def _api_key_value(self) -> str | None:
        if self._api_key is None:
            return None
        return self._api_key.get_secret_value() or None

    def is_available(self) -> bool:
        """Available when enabled and, if required, credentialed."""
        if not self._enabled:
            return False
        return not (self._require_credentials and self._api_key_value() is None)

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    async def complete(self, messages: list[Message]) -> GenerationResult:
        """Call the chat completions endpoint.

        Args:
            messages: Conversation messages.

        Returns:
            GenerationResult with the generated text.

        Raises:
            GenerationFailedError: If the request or response is bad.
        """
        client = await self._get_client()
        url = f"{self._base_url}/chat/completions"

        payload = {
            "model": self._model,
            "messages": [msg.to_payload() for msg in messages],
            "temperature": self._temperature,
            "max_tokens": self._max_tokens,
        }

        headers = {}
        api_key = self._api_key_value()
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"

        details = {"tier": self._tier.value, "model": self._model}
        start = time.perf_counter()

        try:
            response = await client.post(url, json=payload, headers=headers)
            response.raise_for_status()

        except httpx.TimeoutException as e:
            self._track(start, success=False)
            logger.error(f"Generation request timed out: {e}", extra=details)
            raise GenerationFailedError(
                "Generation request timed out",
                code=ErrorCode.GENERATION_TIMEOUT,
                details={**details, "timeout": self._timeout},
            ) from e

        except httpx.HTTPStatusError as e:
            self._track(start, success=False)
            status = e.response.status_code
            logger.error(f"Generation request failed: {status}", extra=details)

            if status == 429:
                raise GenerationFailedError(
                    "Rate limit exceeded",
                    code=ErrorCode.GENERATION_RATE_LIMIT,
                    details={**details, "status_code": status},
                ) from e

            raise GenerationFailedError(
                f"Generation service returned {status}",
                details={**details, "status_code": status},
            ) from e

        except httpx.RequestError as e:
            self._track(start, success=False)
            logger.error(f"Generation connection error: {e}", extra=details)
            raise GenerationFailedError(
                f"Failed to connect to generation service: {e}",
                details={**details, "url": url},
            ) from e

        try:
            data = response.json()
            choice = data["choices"][0]
            usage = data.get("usage") or {}

            result = GenerationResult(
                content=choice["message"]["content"] or "",
                model=data.get("model", self._model),
                tier=self._tier,
                prompt_tokens=usage.get("prompt_tokens", 0),
                completion_tokens=usage.get("completion_tokens", 0),
                finish_reason=choice.get("finish_reason"),
            )

        except (KeyError, IndexError, TypeError, ValueError) as e:
            self._track(start, success=False)
            raise GenerationFailedError(
                f"Invalid response from generation service: {e}",
                code=ErrorCode.GENERATION_MALFORMED,
                details={**details, "error": str(e)},
            ) from e

        if result.truncated:
            logger.warning(
                "Generation stopped at the token limit",
                extra={**details, "max_tokens": self._max_tokens},
            )

        self._track(start, success=True, result=result)
        return result

    def _track(
        self,
        start: float,
        success: bool,
        result: GenerationResult | None = None,
    ) -> None:
        track_generation_request(
            tier=self._tier.value,
            model=self._model,
            duration=time.perf_counter() - start,
            prompt_tokens=result.prompt_tokens if result else 0,
            completion_tokens=result.completion_tokens if result else 0,
            success=success,
        )

    async def generate(
        self,
        prompt: str,
        tier: CapabilityTier,
        system_prompt: str | None = None,
    ) -> str:
        """Generate response text from a simple prompt."""
        if tier != self._tier:
            raise CapabilityUnavailableError(
                f"Capability serves {self._tier.value}, not {tier.value}",
                details={"tier": tier.value},
            )
        if not self.is_available():
            reason = "disabled" if not self._enabled else "missing credentials"
            raise CapabilityUnavailableError(
                f"{self._tier.value} capability unavailable: {reason}",
                details={"tier": self._tier.value, "reason": reason},
            )

        messages: list[Message] = []
        if system_prompt:
            messages.append(Message(role=Role.SYSTEM, content=system_prompt))
        messages.append(Message(role=Role.USER, content=prompt))

        result = await self.complete(messages)
        return result.content
