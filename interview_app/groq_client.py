from typing import List, Optional
import httpx
from loguru import logger
from .config import GROQ_API_URL
from .models import ChatCompletion


class ProviderError(Exception):
    """Groq could not be reached or answered with a non-success status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class GroqClient:
    def __init__(
        self,
        api_key: str,
        api_url: str = GROQ_API_URL,
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.api_url = api_url
        self.timeout = timeout
        # Tests swap in an httpx.MockTransport here
        self.transport = transport

    async def chat_completion(
        self,
        model: str,
        messages: List[dict],
        temperature: float = 0.7,
        max_tokens: int = 300,
    ) -> ChatCompletion:
        """
        Request a single JSON-object completion for the given transcript.
        Failures are raised as ProviderError and never retried.
        """
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        payload = {
            "model": model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
            "response_format": {"type": "json_object"},
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                logger.info(f"Calling Groq: model={model} turns={len(messages)}")
                resp = await client.post(self.api_url, headers=headers, json=payload)
        except httpx.HTTPError as e:
            raise ProviderError(f"Groq API request failed: {e}") from e

        if not resp.is_success:
            logger.error(f"Groq API error: {resp.status_code} {resp.text[:200]}")
            raise ProviderError(f"Groq API error: {resp.status_code}", status_code=resp.status_code)

        try:
            data = resp.json()
        except ValueError as e:
            raise ProviderError("Groq API returned an invalid response body", status_code=resp.status_code) from e

        if not isinstance(data, dict):
            raise ProviderError("Groq API returned an unexpected response body", status_code=resp.status_code)

        choices = data.get("choices") or []
        try:
            content = choices[0].get("message", {}).get("content") or ""
        except (IndexError, AttributeError):
            content = ""
        return ChatCompletion(content=content, model=data.get("model"))
