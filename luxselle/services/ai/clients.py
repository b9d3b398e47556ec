"""
HTTP clients for the AI providers.

Both providers speak the chat-completions wire format; OpenAI web search
goes through its Responses endpoint. Every failure is raised as an
AiProviderError carrying a router error code.
"""

import json
import logging
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

import httpx

from luxselle.core.exceptions import AiProviderError

logger = logging.getLogger(__name__)


def citation_title(url: str) -> str:
    host = urlparse(url).netloc
    return host[4:] if host.startswith("www.") else (host or url)


class ChatCompletionsClient:
    """
    Base client with shared request logic (_make_request).
    """

    BASE_URL = ""
    PROVIDER = ""

    def __init__(self, api_key: str, default_model: str):
        self.api_key = api_key
        self.default_model = default_model

    def _get_headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    async def _make_request(
        self,
        method: str,
        endpoint: str,
        data: Optional[Dict] = None,
        timeout: float = 30.0,
    ) -> Dict:
        """
        Make a request to the provider API.

        Raises:
            AiProviderError: timeout, network_error or provider_http_error
        """
        url = f"{self.BASE_URL}/{endpoint.lstrip('/')}"
        logger.debug(f"Making {method} request to {url}")
        if data:
            logger.debug(f"Data: {json.dumps(data)[:500]}...")

        try:
            async with httpx.AsyncClient(timeout=timeout) as client:
                response = await client.request(method=method, url=url, headers=self._get_headers(), json=data)
        except httpx.TimeoutException as e:
            logger.error(f"{self.PROVIDER} timeout: {str(e)}")
            raise AiProviderError("timeout", f"{self.PROVIDER} request timed out", 504)
        except httpx.RequestError as e:
            logger.error(f"{self.PROVIDER} network error: {str(e)}")
            raise AiProviderError("network_error", f"{self.PROVIDER} request failed: {str(e)}")

        if response.status_code not in (200, 201):
            body = response.text[:500]
            logger.error(f"{self.PROVIDER} API error {response.status_code}: {body}")
            raise AiProviderError(
                "provider_http_error",
                f"{self.PROVIDER} request failed ({response.status_code})",
                response.status_code,
            )

        try:
            return response.json()
        except ValueError:
            raise AiProviderError("invalid_json", f"{self.PROVIDER} returned a non-JSON body")

    async def chat(
        self,
        messages: List[Dict[str, Any]],
        model: Optional[str] = None,
        max_tokens: int = 400,
        temperature: float = 0.5,
        json_mode: bool = False,
        timeout: float = 30.0,
        extra: Optional[Dict[str, Any]] = None,
    ) -> Dict:
        payload: Dict[str, Any] = {
            "model": model or self.default_model,
            "messages": messages,
            "max_tokens": max_tokens,
            "temperature": temperature,
        }
        if json_mode:
            payload["response_format"] = {"type": "json_object"}
        if extra:
            payload.update({key: value for key, value in extra.items() if value is not None})
        return await self._make_request("POST", "chat/completions", data=payload, timeout=timeout)

    @staticmethod
    def message_content(payload: Dict) -> str:
        choices = payload.get("choices") or []
        if not choices:
            return ""
        return (choices[0].get("message") or {}).get("content") or ""


class OpenAIClient(ChatCompletionsClient):
    BASE_URL = "https://api.openai.com/v1"
    PROVIDER = "openai"

    async def web_search(
        self,
        query: str,
        domains: Optional[List[str]] = None,
        country: Optional[str] = None,
        timeout: float = 30.0,
    ) -> Dict[str, Any]:
        tool: Dict[str, Any] = {"type": "web_search", "search_context_size": "high"}
        if domains:
            tool["filters"] = {"allowed_domains": domains}
        if country:
            tool["user_location"] = {"type": "approximate", "country": country}

        payload = await self._make_request(
            "POST",
            "responses",
            data={"model": self.default_model, "tools": [tool], "input": query},
            timeout=timeout,
        )

        texts = []
        annotations = []
        for item in payload.get("output") or []:
            if item.get("type") != "message":
                continue
            for block in item.get("content") or []:
                if block.get("type") != "output_text":
                    continue
                texts.append(block.get("text") or "")
                for ann in block.get("annotations") or []:
                    if ann.get("type") == "url_citation" and ann.get("url"):
                        annotations.append({"url": ann["url"], "title": ann.get("title") or citation_title(ann["url"])})
        return {"rawText": "".join(texts), "annotations": annotations}


class PerplexityClient(ChatCompletionsClient):
    BASE_URL = "https://api.perplexity.ai"
    PROVIDER = "perplexity"

    def __init__(self, api_key: str, search_model: str, extraction_model: str):
        super().__init__(api_key, extraction_model)
        self.search_model = search_model

    async def web_search(
        self,
        query: str,
        domains: Optional[List[str]] = None,
        country: Optional[str] = None,
        timeout: float = 30.0,
    ) -> Dict[str, Any]:
        payload = await self.chat(
            [
                {
                    "role": "system",
                    "content": "You are a market search assistant. Return concise listing results with sources.",
                },
                {"role": "user", "content": query},
            ],
            model=self.search_model,
            temperature=0,
            max_tokens=1500,
            timeout=timeout,
            extra={
                "search_domain_filter": domains or None,
                "web_search_options": {"user_location": {"country": country}} if country else None,
            },
        )
        citations = [url for url in payload.get("citations") or [] if isinstance(url, str) and url]
        return {
            "rawText": self.message_content(payload),
            "annotations": [{"url": url, "title": citation_title(url)} for url in citations],
        }
