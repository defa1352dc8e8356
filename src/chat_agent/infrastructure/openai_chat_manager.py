from typing import Any

import httpx
import openai
from openai import AsyncOpenAI

from chat_agent.services.errors import InvalidRequestError, TransportError

DEFAULT_TIMEOUT = 60.0


class OpenAIChat:
    """
    Chat-completions client for any OpenAI-compatible endpoint.

    The payload built by the agent is sent as-is: ``model`` and ``messages`` are passed
    as arguments, every other key goes through ``extra_body`` so that provider-specific
    parameters survive untouched. Nothing is retried here.
    """

    def __init__(
        self,
        api_key: str | None,
        base_url: str | None,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize the chat client.

        A missing key or base URL is not an error until the first call, so that an
        agent can be assembled before credentials are available.

        Args:
            api_key: Bearer token for the endpoint.
            base_url: Endpoint root, e.g. 'https://api.groq.com/openai/v1'.
            timeout: Per-request timeout in seconds.
            http_client: Optional httpx client (the caller keeps ownership).
        """
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self._http_client = http_client
        self._openai: AsyncOpenAI | None = None

    def _client(self) -> AsyncOpenAI:
        if not self.api_key:
            raise InvalidRequestError("LLM_API_KEY is not configured")
        if not self.base_url:
            raise InvalidRequestError("LLM_API_BASE_URL is not configured")
        if self._openai is None:
            self._openai = AsyncOpenAI(
                api_key=self.api_key,
                base_url=self.base_url,
                timeout=self.timeout,
                max_retries=0,
                http_client=self._http_client,
            )
        return self._openai

    async def close(self) -> None:
        """Release the connection pool, unless the http client was injected by the caller."""
        if self._openai is not None and self._http_client is None:
            await self._openai.close()
        self._openai = None

    async def complete(self, payload: dict[str, Any]) -> dict[str, Any]:
        """
        Send one chat-completion request.

        Args:
            payload: Fully built request body.

        Returns:
            The response body as a dict.

        Raises:
            InvalidRequestError: If credentials are missing or streaming is requested.
            TransportError: On a non-2xx response or a network failure.
        """
        if payload.get("stream"):
            raise InvalidRequestError("Streaming responses are not supported")

        body = dict(payload)
        model = body.pop("model", None)
        messages = body.pop("messages", None)
        if not model:
            raise InvalidRequestError("Request has no model")
        if not messages:
            raise InvalidRequestError("Request has no messages")

        client = self._client()
        try:
            completion = await client.chat.completions.create(
                model=model,
                messages=messages,
                extra_body=body or None,
            )
        except openai.APIStatusError as e:
            raise TransportError(
                f"HTTP {e.status_code}: {e.response.text}",
                status_code=e.status_code,
                detail=e.response.text,
            ) from e
        except openai.APIConnectionError as e:
            raise TransportError(f"Connection error calling {self.base_url}: {e}") from e

        return completion.to_dict()
