"""
OpenRouter API Client

Typed wrapper around the OpenRouter chat-completions endpoint with
structured (JSON schema) outputs, a hard request timeout and a typed error
taxonomy. One call is one HTTP request: no retries, no caching.

Call lifecycle:
    building-request  credential and model parameters validated locally
    in-flight         POST with a hard timeout; the request task is
                      cancelled (and the connection closed) when it expires
    success           choices shape, content, finish_reason, JSON and schema checks
    failed            HTTP status mapped to a specific AdvisoryError
"""
from __future__ import annotations

import asyncio
import json
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Generic, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as SchemaValidationError

from reefmetrics.config import settings
from reefmetrics.utils import (
    get_logger,
    AdvisoryError,
    AdvisoryConfigError,
    AdvisoryValidationError,
    AdvisoryNetworkError,
    AdvisoryTimeoutError,
    AdvisoryAuthError,
    AdvisoryRateLimitError,
    AdvisoryModelError,
    AdvisoryTokenLimitError,
    AdvisoryParseError,
    AdvisoryPaymentError,
    AdvisoryAPIError,
)

logger = get_logger(__name__)

T = TypeVar("T", bound=BaseModel)

API_KEY_PREFIX = "sk-or-"
DEFAULT_RETRY_AFTER_SECONDS = 60


@dataclass(frozen=True)
class OpenRouterConfig:
    """Immutable client configuration."""
    api_key: Optional[str] = field(default_factory=lambda: settings.openrouter_api_key)
    default_model: str = field(default_factory=lambda: settings.openrouter_default_model)
    base_url: str = field(default_factory=lambda: settings.openrouter_base_url)
    request_timeout_seconds: float = field(default_factory=lambda: settings.advisory_timeout_seconds)
    referer: str = field(default_factory=lambda: settings.app_referer)
    title: str = field(default_factory=lambda: settings.app_title)


@dataclass(frozen=True)
class ModelParameters:
    """Sampling parameters sent with every completion."""
    temperature: float = 0.7
    max_tokens: int = 1000
    top_p: float = 1.0
    frequency_penalty: float = 0.0
    presence_penalty: float = 0.0

    def validate(self) -> None:
        """Raise AdvisoryValidationError for out-of-bounds values."""
        if not 0 <= self.temperature <= 2:
            raise AdvisoryValidationError("Temperature must be between 0 and 2")
        if self.max_tokens <= 0:
            raise AdvisoryValidationError("max_tokens must be positive")
        if not 0 <= self.top_p <= 1:
            raise AdvisoryValidationError("top_p must be between 0 and 1")
        if not -2 <= self.frequency_penalty <= 2:
            raise AdvisoryValidationError("frequency_penalty must be between -2 and 2")
        if not -2 <= self.presence_penalty <= 2:
            raise AdvisoryValidationError("presence_penalty must be between -2 and 2")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class CompletionRequest(Generic[T]):
    """
    One structured completion.

    ``response_model`` is the caller's declared output shape. Declare it with
    ``extra="forbid"`` so the JSON schema sent upstream is strict and unknown
    fields in the reply fail validation.
    """
    system_prompt: str
    user_prompt: str
    response_model: Type[T]
    schema_name: str = "structured_response"
    model: Optional[str] = None
    model_params: Optional[ModelParameters] = None


def build_response_format(schema_name: str, response_model: Type[BaseModel]) -> Dict[str, Any]:
    """OpenRouter ``response_format`` block for a strict JSON schema."""
    return {
        "type": "json_schema",
        "json_schema": {
            "name": schema_name,
            "strict": True,
            "schema": response_model.model_json_schema(),
        },
    }


def parse_retry_after(value: Optional[str]) -> int:
    """Seconds from a Retry-After header; 60 when absent or not an integer."""
    if value is None:
        return DEFAULT_RETRY_AFTER_SECONDS
    try:
        return int(value.strip())
    except ValueError:
        return DEFAULT_RETRY_AFTER_SECONDS


class OpenRouterClient:
    """
    Client for the OpenRouter chat-completions API.

    Holds configuration only; every call builds its own HTTP client and
    cancellation scope, so a single instance can serve concurrent requests.
    """

    def __init__(
        self,
        config: Optional[OpenRouterConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize OpenRouter client.

        Args:
            config: Optional configuration, uses settings if not provided
            transport: Optional httpx transport (tests inject a MockTransport)
        """
        self.config = config or OpenRouterConfig()
        self._transport = transport

        if not self.is_configured:
            logger.warning("OPENROUTER_API_KEY is not set - advisory calls will fail with CONFIG_ERROR")

    @property
    def is_configured(self) -> bool:
        return bool(self.config.api_key and self.config.api_key.strip())

    @property
    def completions_url(self) -> str:
        return f"{self.config.base_url.rstrip('/')}/chat/completions"

    def validate_config(self) -> None:
        """Raise AdvisoryConfigError for a missing or malformed API key."""
        if not self.is_configured:
            raise AdvisoryConfigError("OpenRouter API key is missing")
        if not self.config.api_key.startswith(API_KEY_PREFIX):
            raise AdvisoryConfigError("Invalid OpenRouter API key format")

    def build_payload(self, request: CompletionRequest) -> Dict[str, Any]:
        """
        Validate configuration and parameters and assemble the request body.

        Raises:
            AdvisoryConfigError: bad credential
            AdvisoryValidationError: model parameter out of bounds
        """
        self.validate_config()

        params = request.model_params or ModelParameters()
        params.validate()

        return {
            "model": request.model or self.config.default_model,
            "messages": [
                {"role": "system", "content": request.system_prompt},
                {"role": "user", "content": request.user_prompt},
            ],
            "response_format": build_response_format(request.schema_name, request.response_model),
            **params.to_dict(),
        }

    async def complete(self, request: CompletionRequest[T]) -> T:
        """
        Run one structured completion and return the validated result.

        Args:
            request: Prompts, declared response model and optional overrides

        Returns:
            Instance of ``request.response_model``

        Raises:
            AdvisoryError: one subclass per failure kind
        """
        model_name = request.model or self.config.default_model
        logger.info(f"Creating chat completion (model={model_name}, schema={request.schema_name})")

        try:
            payload = self.build_payload(request)
            body = await self._send(payload)
            choice = self._first_choice(body)
            logger.info(
                f"OpenRouter request successful: usage={body.get('usage')}, "
                f"finish_reason={choice.get('finish_reason')}"
            )
            return self._parse(body, choice, request.response_model)

        except AdvisoryError as e:
            logger.error(f"Chat completion failed [{e.code}]: {e.message}")
            raise
        except Exception as e:
            logger.error(f"Unexpected error during chat completion: {e}", exc_info=True)
            raise AdvisoryError(
                "Unexpected error during chat completion",
                details={"cause": repr(e)},
            ) from e

    async def _send(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """POST the payload under the hard timeout and return the decoded body."""
        timeout = self.config.request_timeout_seconds
        try:
            response = await asyncio.wait_for(self._post(payload), timeout=timeout)
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise AdvisoryTimeoutError(
                f"Request timed out after {timeout:g} seconds",
                timeout_seconds=timeout,
            ) from e
        except httpx.HTTPError as e:
            raise AdvisoryNetworkError("Failed to connect to OpenRouter API", cause=e) from e

        if not response.is_success:
            self._raise_for_status(response)

        try:
            body = response.json()
        except ValueError as e:
            raise AdvisoryParseError(
                "Failed to decode API response body",
                details={"body": response.text[:1000]},
            ) from e
        if not isinstance(body, dict):
            raise AdvisoryParseError("Unexpected API response shape", details={"body": body})
        return body

    async def _post(self, payload: Dict[str, Any]) -> httpx.Response:
        headers = {
            "Authorization": f"Bearer {self.config.api_key}",
            "Content-Type": "application/json",
            "HTTP-Referer": self.config.referer,
            "X-Title": self.config.title,
        }
        async with httpx.AsyncClient(
            transport=self._transport,
            timeout=self.config.request_timeout_seconds,
        ) as client:
            return await client.post(self.completions_url, json=payload, headers=headers)

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        """Map a non-success HTTP response to its AdvisoryError."""
        try:
            error_body = response.json()
        except ValueError:
            error_body = {}
        if not isinstance(error_body, dict):
            error_body = {"body": error_body}

        error = error_body.get("error")
        message = (error.get("message") if isinstance(error, dict) else None) or response.reason_phrase

        status = response.status_code
        if status == 401:
            raise AdvisoryAuthError("Authentication failed. Check API key.")
        if status == 429:
            raise AdvisoryRateLimitError(
                "Rate limit exceeded",
                retry_after=parse_retry_after(response.headers.get("Retry-After")),
            )
        if status == 400:
            raise AdvisoryValidationError(message, details=error_body)
        if status == 404:
            raise AdvisoryModelError("Model not found or unavailable", model_name=error_body.get("model"))
        if status == 402:
            raise AdvisoryPaymentError("Insufficient credits")
        raise AdvisoryAPIError(message, status_code=status, body=error_body or response.text)

    @staticmethod
    def _first_choice(body: Dict[str, Any]) -> Dict[str, Any]:
        """First entry of ``choices``; anything but a non-empty list of objects is a ParseError."""
        choices = body.get("choices")
        if not isinstance(choices, list) or not choices:
            raise AdvisoryParseError("No choices in API response", details={"body": body})
        if not isinstance(choices[0], dict):
            raise AdvisoryParseError("Malformed choice in API response", details={"body": body})
        return choices[0]

    @staticmethod
    def _parse(body: Dict[str, Any], choice: Dict[str, Any], response_model: Type[T]) -> T:
        """Extract the message content and validate it against ``response_model``."""
        message = choice.get("message")
        content = message.get("content") if isinstance(message, dict) else None
        if not content or not isinstance(content, str):
            raise AdvisoryParseError("No content in API response", details={"body": body})

        if choice.get("finish_reason") == "length":
            usage = body.get("usage") if isinstance(body.get("usage"), dict) else {}
            raise AdvisoryTokenLimitError(
                "Response truncated due to token limit",
                token_count=usage.get("total_tokens"),
            )

        try:
            data = json.loads(content)
        except ValueError as e:
            raise AdvisoryParseError(
                "Failed to parse response JSON",
                details={"content": content, "error": str(e)},
            ) from e

        try:
            return response_model.model_validate(data)
        except SchemaValidationError as e:
            raise AdvisoryParseError(
                "Response does not match the declared schema",
                details={"content": content, "errors": [err["msg"] for err in e.errors()]},
            ) from e
