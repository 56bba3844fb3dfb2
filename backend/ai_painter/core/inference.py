"""
Workers AI Client

Runs text-to-image models through the Cloudflare Workers AI REST API.
"""
import logging
from typing import Any, AsyncIterator, Dict, Optional, Union

import httpx

from ai_painter.core.catalog import ResponseEncoding, encoding_for

logger = logging.getLogger(__name__)

InferenceResult = Union[Dict[str, Any], AsyncIterator[bytes]]


class WorkersAIClient:
    """
    Inference capability backed by Workers AI.

    `run` returns the unwrapped JSON result for base64 models and an async
    iterator of PNG bytes for binary models.
    """

    def __init__(
        self,
        account_id: str,
        api_token: str,
        base_url: str = "https://api.cloudflare.com/client/v4",
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.account_id = account_id
        self.api_token = api_token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def _url(self, model_id: str) -> str:
        return f"{self.base_url}/accounts/{self.account_id}/ai/run/{model_id}"

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_token}",
            "Content-Type": "application/json",
        }

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    async def run(self, model_id: str, inputs: Dict[str, Any]) -> InferenceResult:
        """
        Run a model.

        Args:
            model_id: Workers AI model identifier, e.g. "@cf/black-forest-labs/flux-1-schnell".
            inputs: Model input object.

        Raises:
            httpx.HTTPError: on transport failure or a non-2xx upstream status.
        """
        logger.info(f"[Inference] Running {model_id}")
        if encoding_for(model_id) is ResponseEncoding.BASE64_JSON:
            return await self._run_json(model_id, inputs)
        return await self._run_stream(model_id, inputs)

    async def _run_json(self, model_id: str, inputs: Dict[str, Any]) -> Dict[str, Any]:
        async with self._client() as client:
            response = await client.post(self._url(model_id), json=inputs, headers=self._headers())
            response.raise_for_status()

            result = response.json()
            # Unwrap {"result": {...}, "success": true} envelope if present
            if isinstance(result, dict) and "result" in result:
                return result["result"] or {}
            return result

    async def _run_stream(self, model_id: str, inputs: Dict[str, Any]) -> AsyncIterator[bytes]:
        client = self._client()
        try:
            request = client.build_request("POST", self._url(model_id), json=inputs, headers=self._headers())
            response = await client.send(request, stream=True)
        except BaseException:
            await client.aclose()
            raise

        if response.is_error:
            try:
                await response.aread()
                response.raise_for_status()
            finally:
                await response.aclose()
                await client.aclose()

        return _iter_body(client, response)


async def _iter_body(client: httpx.AsyncClient, response: httpx.Response) -> AsyncIterator[bytes]:
    """Yield the streamed body, releasing the connection when done."""
    try:
        async for chunk in response.aiter_bytes():
            yield chunk
    finally:
        await response.aclose()
        await client.aclose()
