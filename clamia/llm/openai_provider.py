"""
OpenAI-compatible LLM Provider.
Talks to the Chat Completions endpoint over httpx.
"""

import httpx
import logging
import time
from typing import Optional, List, Dict, Any

from .base import LLMProvider, LLMMessage, LLMResponse
from ..core.errors import UpstreamError, UpstreamTimeout

logger = logging.getLogger(__name__)


def _error_message(response: httpx.Response) -> str:
    """Pull ``error.message`` out of an error body, if there is one."""
    try:
        body = response.json()
    except ValueError:
        return ""
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict):
            return str(error.get("message") or "")
        if isinstance(error, str):
            return error
    return ""


class OpenAIProvider(LLMProvider):
    """
    Provider for the OpenAI Chat Completions API or any endpoint that speaks
    the same request/response format.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4",
        base_url: str = "https://api.openai.com/v1",
        default_temperature: float = 0.7,
        default_max_tokens: int = 1024,
        timeout: float = 30.0,
    ):
        super().__init__(api_key, model, base_url, default_temperature, default_max_tokens)
        self.timeout = timeout

    def _get_headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    async def chat_completion(
        self,
        messages: List[LLMMessage],
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        **kwargs
    ) -> LLMResponse:
        """Send request to the Chat Completions endpoint."""
        start_time = time.time()
        url = f"{self.base_url}/chat/completions"
        payload: Dict[str, Any] = {
            "model": kwargs.get("model", self.model),
            "messages": self._format_messages(messages),
            "temperature": temperature if temperature is not None else self.default_temperature,
            "max_tokens": max_tokens or self.default_max_tokens,
        }

        # Log request (DEBUG level)
        if logger.isEnabledFor(logging.DEBUG):
            message_summary = f"{len(messages)} messages"
            if messages:
                message_summary += f", first: {str(messages[0].content)[:200]}"
            logger.debug(
                f"LLM API call starting: provider=openai, model={payload['model']}, "
                f"temperature={payload['temperature']}, {message_summary}"
            )

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.post(url, json=payload, headers=self._get_headers())
                try:
                    resp.raise_for_status()
                except httpx.HTTPStatusError as e:
                    message = _error_message(e.response) or "OpenAI API request failed"
                    raise UpstreamError(message) from e
                data = resp.json()

            choices = data.get("choices") or []
            if not choices:
                raise UpstreamError("No response from language model")

            message = choices[0].get("message") or {}
            usage = data.get("usage", {})
            duration_ms = (time.time() - start_time) * 1000

            # Log successful response (INFO level)
            logger.info(
                "LLM API call completed",
                extra={"extra_fields": {
                    "provider": "openai",
                    "model": data.get("model", self.model),
                    "prompt_tokens": usage.get("prompt_tokens", 0),
                    "completion_tokens": usage.get("completion_tokens", 0),
                    "total_tokens": usage.get("total_tokens", 0),
                    "duration_ms": round(duration_ms, 2),
                }}
            )

            return LLMResponse(
                content=message.get("content") or "",
                role=message.get("role", "assistant"),
                model=data.get("model", self.model),
                usage=usage,
                raw=data,
            )
        except httpx.TimeoutException as e:
            self._log_failure(payload, start_time, e)
            raise UpstreamTimeout() from e
        except httpx.HTTPError as e:
            self._log_failure(payload, start_time, e)
            raise UpstreamError(f"OpenAI API request failed: {e}") from e
        except UpstreamError as e:
            self._log_failure(payload, start_time, e)
            raise

    def _log_failure(self, payload: Dict[str, Any], start_time: float, error: Exception) -> None:
        duration_ms = (time.time() - start_time) * 1000
        logger.error(
            f"LLM API call failed: {str(error)}",
            exc_info=True,
            extra={"extra_fields": {
                "provider": "openai",
                "model": payload.get("model"),
                "duration_ms": round(duration_ms, 2),
                "error": str(error),
            }}
        )
