import asyncio

import pytest

from luxselle.core.config import Settings
from luxselle.core.enums import AiProvider, AiTaskType
from luxselle.core.exceptions import AiProviderError
from luxselle.services.ai.clients import OpenAIClient, PerplexityClient
from luxselle.services.ai.router import AiRouter, is_retryable


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def make_settings(**overrides) -> Settings:
    values = {
        "OPENAI_API_KEY": None,
        "PERPLEXITY_API_KEY": None,
        "AI_ROUTING_MODE": "dynamic",
        "AI_WEB_SEARCH_TIMEOUT_SECONDS": 1.0,
        "AI_GENERATION_TIMEOUT_SECONDS": 1.0,
    }
    values.update(overrides)
    return Settings(**values)


def chat_payload(content: str) -> dict:
    return {"choices": [{"message": {"content": content}}]}


@pytest.fixture
def clock():
    return FakeClock()


@pytest.mark.parametrize(
    "code,status,expected",
    [
        ("provider_http_error", 429, True),
        ("provider_http_error", 503, True),
        ("provider_http_error", 400, False),
        ("timeout", None, True),
        ("invalid_json", None, True),
        ("network_error", None, True),
        ("no_provider_available", None, False),
        ("empty_response", None, False),
    ],
)
def test_is_retryable(code, status, expected):
    assert is_retryable(AiProviderError(code, "boom", status)) is expected


async def test_no_configured_provider(clock):
    router = AiRouter(make_settings(), clock=clock)

    with pytest.raises(AiProviderError) as exc_info:
        await router.web_search("chanel classic flap price")

    assert exc_info.value.code == "no_provider_available"
    assert 'No configured AI provider available for task "web_search"' in str(exc_info.value)


async def test_perplexity_only_handles_search_and_generation(clock, mocker):
    router = AiRouter(make_settings(PERPLEXITY_API_KEY="pplx-test"), clock=clock)
    search = mocker.patch.object(
        PerplexityClient,
        "web_search",
        return_value={"rawText": "Classic Flap listed at EUR 8,900", "annotations": []},
    )
    chat = mocker.patch.object(PerplexityClient, "chat", return_value=chat_payload("  A short description.  "))

    searched = await router.web_search("chanel classic flap", country="IE")
    generated = await router.generate_text("Describe this bag")

    assert searched.provider == AiProvider.PERPLEXITY
    assert searched.fallback_used is False
    assert searched.data["rawText"].startswith("Classic Flap")
    assert generated.provider == AiProvider.PERPLEXITY
    assert generated.data == "A short description."
    search.assert_awaited_once()
    chat.assert_awaited_once()


async def test_falls_back_after_retryable_failures(clock, mocker):
    router = AiRouter(make_settings(OPENAI_API_KEY="sk-test", PERPLEXITY_API_KEY="pplx-test"), clock=clock)
    openai_chat = mocker.patch.object(
        OpenAIClient, "chat", side_effect=AiProviderError("provider_http_error", "upstream 503", 503)
    )
    mocker.patch.object(PerplexityClient, "chat", return_value=chat_payload("fallback text"))

    result = await router.generate_text("hello")

    assert result.provider == AiProvider.PERPLEXITY
    assert result.fallback_used is True
    assert openai_chat.await_count == 2
    assert router.last_provider_by_task["freeform_generation"] == "perplexity"


async def test_non_retryable_failure_moves_on_without_retry(clock, mocker):
    router = AiRouter(make_settings(OPENAI_API_KEY="sk-test", PERPLEXITY_API_KEY="pplx-test"), clock=clock)
    openai_chat = mocker.patch.object(
        OpenAIClient, "chat", side_effect=AiProviderError("provider_http_error", "bad request", 400)
    )
    mocker.patch.object(PerplexityClient, "chat", return_value=chat_payload("ok"))

    result = await router.generate_text("hello")

    assert result.fallback_used is True
    assert openai_chat.await_count == 1


async def test_provider_marked_unhealthy_after_three_failures(clock):
    router = AiRouter(make_settings(OPENAI_API_KEY="sk-test", PERPLEXITY_API_KEY="pplx-test"), clock=clock)
    task = AiTaskType.FREEFORM_GENERATION

    for _ in range(3):
        router.record_failure(task, AiProvider.OPENAI)

    assert router.is_healthy(task, AiProvider.OPENAI) is False
    assert router.ordered_providers(task) == [AiProvider.PERPLEXITY, AiProvider.OPENAI]

    clock.now += 61
    assert router.is_healthy(task, AiProvider.OPENAI) is True
    assert router.ordered_providers(task) == [AiProvider.OPENAI, AiProvider.PERPLEXITY]


async def test_failures_outside_window_do_not_count(clock):
    router = AiRouter(make_settings(OPENAI_API_KEY="sk-test"), clock=clock)
    task = AiTaskType.WEB_SEARCH

    router.record_failure(task, AiProvider.OPENAI)
    router.record_failure(task, AiProvider.OPENAI)
    clock.now += 301
    router.record_failure(task, AiProvider.OPENAI)

    assert router.is_healthy(task, AiProvider.OPENAI) is True


async def test_fixed_mode_uses_only_named_provider(clock):
    router = AiRouter(
        make_settings(AI_ROUTING_MODE="openai", OPENAI_API_KEY="sk-test", PERPLEXITY_API_KEY="pplx-test"),
        clock=clock,
    )

    assert router.ordered_providers(AiTaskType.WEB_SEARCH) == [AiProvider.OPENAI]


async def test_structured_json_repairs_invalid_output(clock, mocker):
    router = AiRouter(make_settings(OPENAI_API_KEY="sk-test"), clock=clock)
    chat = mocker.patch.object(
        OpenAIClient,
        "chat",
        side_effect=[
            chat_payload("Sure! estimatedRetailEur is 4200"),
            chat_payload('{"estimatedRetailEur": 4200}'),
        ],
    )

    result = await router.extract_structured_json("system", "user")

    assert result.data == {"estimatedRetailEur": 4200}
    assert chat.await_count == 2


async def test_structured_json_extracts_embedded_object(clock, mocker):
    router = AiRouter(make_settings(OPENAI_API_KEY="sk-test"), clock=clock)
    mocker.patch.object(OpenAIClient, "chat", return_value=chat_payload('Here you go: {"confidence": 0.4} thanks'))

    result = await router.extract_structured_json("system", "user")

    assert result.data == {"confidence": 0.4}


async def test_timeout_is_reported(clock, mocker):
    router = AiRouter(
        make_settings(PERPLEXITY_API_KEY="pplx-test", AI_WEB_SEARCH_TIMEOUT_SECONDS=0.01), clock=clock
    )

    async def slow_search(*args, **kwargs):
        await asyncio.sleep(1)

    mocker.patch.object(PerplexityClient, "web_search", side_effect=slow_search)

    with pytest.raises(AiProviderError) as exc_info:
        await router.web_search("slow query")

    assert exc_info.value.code == "timeout"


def test_diagnostics_shape(clock):
    router = AiRouter(make_settings(PERPLEXITY_API_KEY="pplx-test"), clock=clock)

    diagnostics = router.diagnostics()

    assert diagnostics["routing_mode"] == "dynamic"
    assert diagnostics["providers"] == {"openai": False, "perplexity": True}
    assert diagnostics["healthy"]["web_search:perplexity"] is True
