"""
Routes AI tasks to OpenAI or Perplexity.

In `dynamic` mode each task type has a preferred provider order and only
providers with a configured API key take part. A provider gets up to two
attempts for retryable failures before the router falls through to the
next one. Providers failing 3 times within 5 minutes are moved to the back
of the order for 60 seconds. Fixed modes only ever use the named provider.
"""

import asyncio
import json
import logging
import re
import time
from typing import Any, Awaitable, Callable, Dict, List, Optional, Type

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from luxselle.core.config import Settings, get_settings
from luxselle.core.enums import AiProvider, AiRoutingMode, AiTaskType
from luxselle.core.exceptions import AiProviderError
from luxselle.services.ai.clients import OpenAIClient, PerplexityClient

logger = logging.getLogger(__name__)

PREFERRED_PROVIDERS_BY_TASK: Dict[AiTaskType, List[AiProvider]] = {
    AiTaskType.WEB_SEARCH: [AiProvider.PERPLEXITY, AiProvider.OPENAI],
    AiTaskType.STRUCTURED_EXTRACTION_JSON: [AiProvider.OPENAI, AiProvider.PERPLEXITY],
    AiTaskType.FREEFORM_GENERATION: [AiProvider.OPENAI, AiProvider.PERPLEXITY],
}

RETRYABLE_CODES = {"provider_http_error", "timeout", "invalid_json", "invalid_schema", "network_error"}
MAX_ATTEMPTS_PER_PROVIDER = 2

FAILURE_WINDOW_SECONDS = 5 * 60
UNHEALTHY_SECONDS = 60
UNHEALTHY_THRESHOLD = 3


class RoutedTaskResult(BaseModel):
    data: Any
    provider: AiProvider
    fallback_used: bool = False


def is_retryable(error: AiProviderError) -> bool:
    if error.code not in RETRYABLE_CODES:
        return False
    if not error.status:
        return True
    return error.status == 429 or error.status >= 500


def parse_json_candidates(raw: str) -> Optional[Any]:
    candidates = []
    trimmed = (raw or "").strip()
    if trimmed:
        candidates.append(trimmed)
    match = re.search(r"\{[\s\S]*\}", raw or "")
    if match and match.group(0) not in candidates:
        candidates.append(match.group(0))
    for candidate in candidates:
        try:
            return json.loads(candidate)
        except ValueError:
            continue
    return None


class AiRouter:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        openai_client: Optional[OpenAIClient] = None,
        perplexity_client: Optional[PerplexityClient] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.settings = settings or get_settings()
        self.clock = clock
        self._openai = openai_client
        self._perplexity = perplexity_client
        self._failures: Dict[str, List[float]] = {}
        self._unhealthy_until: Dict[str, float] = {}
        self.last_provider_by_task: Dict[str, str] = {}

    # --- configuration -------------------------------------------------

    def routing_mode(self) -> AiRoutingMode:
        try:
            return AiRoutingMode(self.settings.AI_ROUTING_MODE)
        except ValueError:
            return AiRoutingMode.DYNAMIC

    def provider_availability(self) -> Dict[str, bool]:
        return {
            AiProvider.OPENAI.value: bool(self.settings.OPENAI_API_KEY),
            AiProvider.PERPLEXITY.value: bool(self.settings.PERPLEXITY_API_KEY),
        }

    def diagnostics(self) -> Dict[str, Any]:
        return {
            "routing_mode": self.routing_mode().value,
            "providers": self.provider_availability(),
            "healthy": {
                f"{task.value}:{provider.value}": self.is_healthy(task, provider)
                for task in AiTaskType
                for provider in AiProvider
            },
            "last_provider_by_task": {task.value: self.last_provider_by_task.get(task.value) for task in AiTaskType},
        }

    @property
    def openai(self) -> OpenAIClient:
        if not self.settings.OPENAI_API_KEY:
            raise AiProviderError("no_provider_available", "OPENAI_API_KEY is not configured")
        if self._openai is None:
            self._openai = OpenAIClient(self.settings.OPENAI_API_KEY, self.settings.OPENAI_MODEL)
        return self._openai

    @property
    def perplexity(self) -> PerplexityClient:
        if not self.settings.PERPLEXITY_API_KEY:
            raise AiProviderError("no_provider_available", "PERPLEXITY_API_KEY is not configured")
        if self._perplexity is None:
            self._perplexity = PerplexityClient(
                self.settings.PERPLEXITY_API_KEY,
                self.settings.PERPLEXITY_SEARCH_MODEL,
                self.settings.PERPLEXITY_EXTRACTION_MODEL,
            )
        return self._perplexity

    def _client(self, provider: AiProvider):
        return self.openai if provider == AiProvider.OPENAI else self.perplexity

    def _timeout(self, task: AiTaskType) -> float:
        if task == AiTaskType.WEB_SEARCH:
            return self.settings.AI_WEB_SEARCH_TIMEOUT_SECONDS
        return self.settings.AI_GENERATION_TIMEOUT_SECONDS

    # --- health --------------------------------------------------------

    @staticmethod
    def _health_key(task: AiTaskType, provider: AiProvider) -> str:
        return f"{task.value}:{provider.value}"

    def is_healthy(self, task: AiTaskType, provider: AiProvider) -> bool:
        return self._unhealthy_until.get(self._health_key(task, provider), 0) <= self.clock()

    def record_failure(self, task: AiTaskType, provider: AiProvider) -> None:
        key = self._health_key(task, provider)
        now = self.clock()
        failures = [ts for ts in self._failures.get(key, []) if now - ts <= FAILURE_WINDOW_SECONDS]
        failures.append(now)
        self._failures[key] = failures
        if len(failures) >= UNHEALTHY_THRESHOLD:
            self._unhealthy_until[key] = now + UNHEALTHY_SECONDS
            logger.warning(f"ai_provider_unhealthy task={task.value} provider={provider.value}")

    def record_success(self, task: AiTaskType, provider: AiProvider) -> None:
        key = self._health_key(task, provider)
        self._failures.pop(key, None)
        self._unhealthy_until.pop(key, None)

    # --- ordering ------------------------------------------------------

    def ordered_providers(self, task: AiTaskType) -> List[AiProvider]:
        mode = self.routing_mode()
        if mode == AiRoutingMode.OPENAI:
            base = [AiProvider.OPENAI]
        elif mode == AiRoutingMode.PERPLEXITY:
            base = [AiProvider.PERPLEXITY]
        else:
            base = PREFERRED_PROVIDERS_BY_TASK[task]

        configured = self.provider_availability()
        available = [provider for provider in base if configured[provider.value]]
        if mode != AiRoutingMode.DYNAMIC:
            return available

        healthy = [p for p in available if self.is_healthy(task, p)]
        unhealthy = [p for p in available if not self.is_healthy(task, p)]
        return healthy + unhealthy if healthy else available

    # --- execution -----------------------------------------------------

    async def _execute_task(
        self,
        task: AiTaskType,
        run_by_provider: Dict[AiProvider, Callable[[], Awaitable[Any]]],
        validate: Optional[Callable[[Any], Any]] = None,
    ) -> RoutedTaskResult:
        providers = [p for p in self.ordered_providers(task) if p in run_by_provider]
        if not providers:
            raise AiProviderError(
                "no_provider_available",
                f'No configured AI provider available for task "{task.value}"',
            )

        last_error: Optional[AiProviderError] = None
        for index, provider in enumerate(providers):
            fallback_used = index > 0
            for attempt in range(1, MAX_ATTEMPTS_PER_PROVIDER + 1):
                started = time.perf_counter()
                try:
                    data = await asyncio.wait_for(run_by_provider[provider](), timeout=self._timeout(task))
                    if validate is not None:
                        data = validate(data)
                except asyncio.TimeoutError:
                    last_error = AiProviderError("timeout", f"{provider.value} {task.value} timed out", 504)
                except AiProviderError as e:
                    last_error = e
                except Exception as e:
                    logger.exception(f"Unexpected {provider.value} failure for {task.value}")
                    last_error = AiProviderError("unknown", str(e))
                else:
                    self.record_success(task, provider)
                    self.last_provider_by_task[task.value] = provider.value
                    logger.info(
                        f"ai_router_task_success task={task.value} provider={provider.value} "
                        f"attempt={attempt} fallback={fallback_used} "
                        f"elapsed_ms={round((time.perf_counter() - started) * 1000)}"
                    )
                    return RoutedTaskResult(data=data, provider=provider, fallback_used=fallback_used)

                self.record_failure(task, provider)
                logger.warning(
                    f"ai_router_task_failure task={task.value} provider={provider.value} attempt={attempt} "
                    f"code={last_error.code} status={last_error.status} message={last_error}"
                )
                if not (attempt < MAX_ATTEMPTS_PER_PROVIDER and is_retryable(last_error)):
                    break

        raise last_error

    async def _parse_json(self, provider: AiProvider, raw: str, schema: Optional[Type[BaseModel]]):
        data = parse_json_candidates(raw)
        if data is None:
            data = parse_json_candidates(await self._repair_json(provider, raw))
        if data is None:
            raise AiProviderError("invalid_json", "Model returned invalid JSON")
        if schema is None:
            return data
        try:
            return schema.model_validate(data)
        except PydanticValidationError as e:
            first = e.errors()[0]["msg"] if e.errors() else "invalid shape"
            raise AiProviderError("invalid_schema", f"JSON failed schema validation: {first}")

    async def _repair_json(self, provider: AiProvider, raw: str) -> str:
        client = self._client(provider)
        payload = await client.chat(
            [
                {"role": "system", "content": "You repair malformed JSON. Return only valid JSON."},
                {
                    "role": "user",
                    "content": f"Repair this malformed JSON. Return ONLY valid JSON and do not invent fields.\n\nMalformed content:\n{raw}",
                },
            ],
            max_tokens=1600,
            temperature=0,
            json_mode=provider == AiProvider.OPENAI,
            timeout=self._timeout(AiTaskType.STRUCTURED_EXTRACTION_JSON),
        )
        return client.message_content(payload)

    # --- public tasks --------------------------------------------------

    async def web_search(
        self,
        query: str,
        domains: Optional[List[str]] = None,
        country: Optional[str] = None,
    ) -> RoutedTaskResult:
        timeout = self._timeout(AiTaskType.WEB_SEARCH)

        def validate(data):
            if not isinstance(data.get("rawText"), str) or not isinstance(data.get("annotations"), list):
                raise AiProviderError("invalid_schema", "Web search response was malformed")
            return data

        return await self._execute_task(
            AiTaskType.WEB_SEARCH,
            {
                AiProvider.OPENAI: lambda: self.openai.web_search(query, domains, country, timeout=timeout),
                AiProvider.PERPLEXITY: lambda: self.perplexity.web_search(query, domains, country, timeout=timeout),
            },
            validate,
        )

    async def extract_structured_json(
        self,
        system_prompt: str,
        user_prompt: str,
        schema: Optional[Type[BaseModel]] = None,
        max_tokens: int = 1500,
        temperature: float = 0.2,
    ) -> RoutedTaskResult:
        timeout = self._timeout(AiTaskType.STRUCTURED_EXTRACTION_JSON)
        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ]

        def run(provider: AiProvider):
            async def call():
                client = self._client(provider)
                payload = await client.chat(
                    messages,
                    max_tokens=max_tokens,
                    temperature=temperature,
                    json_mode=True,
                    timeout=timeout,
                )
                return await self._parse_json(provider, client.message_content(payload), schema)
            return call

        return await self._execute_task(
            AiTaskType.STRUCTURED_EXTRACTION_JSON,
            {provider: run(provider) for provider in AiProvider},
        )

    async def generate_text(
        self,
        user_prompt: str,
        system_prompt: Optional[str] = None,
        max_tokens: int = 400,
        temperature: float = 0.5,
    ) -> RoutedTaskResult:
        timeout = self._timeout(AiTaskType.FREEFORM_GENERATION)
        messages = ([{"role": "system", "content": system_prompt}] if system_prompt else []) + [
            {"role": "user", "content": user_prompt}
        ]

        def run(provider: AiProvider):
            async def call():
                client = self._client(provider)
                payload = await client.chat(messages, max_tokens=max_tokens, temperature=temperature, timeout=timeout)
                return client.message_content(payload)
            return call

        def validate(data: str) -> str:
            if not data or not data.strip():
                raise AiProviderError("empty_response", "Generation returned empty content")
            return data.strip()

        return await self._execute_task(
            AiTaskType.FREEFORM_GENERATION,
            {provider: run(provider) for provider in AiProvider},
            validate,
        )
