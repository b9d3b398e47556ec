import httpx
import pytest

from luxselle.core.config import Settings
from luxselle.core.exceptions import AiProviderError
from luxselle.schemas.pricing import PricingAnalyseRequest
from luxselle.services.ai.clients import OpenAIClient, PerplexityClient, citation_title
from luxselle.services.ai.router import AiRouter
from luxselle.services.pricing.providers import AiPricingProvider


def make_response(status_code: int, payload=None, text: str = "") -> httpx.Response:
    request = httpx.Request("POST", "https://api.example.test")
    if payload is not None:
        return httpx.Response(status_code, json=payload, request=request)
    return httpx.Response(status_code, text=text, request=request)


def test_citation_title():
    assert citation_title("https://www.designerexchange.ie/bags/1") == "designerexchange.ie"
    assert citation_title("https://siopaella.com/x") == "siopaella.com"


async def test_http_error_carries_status(mocker):
    mocker.patch.object(httpx.AsyncClient, "request", return_value=make_response(429, text="slow down"))
    client = OpenAIClient("sk-test", "gpt-4o-mini")

    with pytest.raises(AiProviderError) as exc_info:
        await client.chat([{"role": "user", "content": "hi"}])

    assert exc_info.value.code == "provider_http_error"
    assert exc_info.value.status == 429


async def test_timeout_is_mapped(mocker):
    mocker.patch.object(httpx.AsyncClient, "request", side_effect=httpx.ReadTimeout("too slow"))

    with pytest.raises(AiProviderError) as exc_info:
        await OpenAIClient("sk-test", "gpt-4o-mini").chat([{"role": "user", "content": "hi"}])

    assert exc_info.value.code == "timeout"


async def test_network_error_is_mapped(mocker):
    mocker.patch.object(httpx.AsyncClient, "request", side_effect=httpx.ConnectError("refused"))

    with pytest.raises(AiProviderError) as exc_info:
        await PerplexityClient("pplx", "sonar", "sonar").chat([{"role": "user", "content": "hi"}])

    assert exc_info.value.code == "network_error"


async def test_perplexity_search_uses_citations(mocker):
    payload = {
        "choices": [{"message": {"content": "Speedy 30 from EUR 650"}}],
        "citations": ["https://www.vestiairecollective.com/speedy", ""],
    }
    request = mocker.patch.object(httpx.AsyncClient, "request", return_value=make_response(200, payload))

    result = await PerplexityClient("pplx", "sonar-pro", "sonar").web_search("speedy 30", domains=["vestiairecollective.com"])

    assert result == {
        "rawText": "Speedy 30 from EUR 650",
        "annotations": [{"url": "https://www.vestiairecollective.com/speedy", "title": "vestiairecollective.com"}],
    }
    sent = request.call_args.kwargs["json"]
    assert sent["model"] == "sonar-pro"
    assert sent["search_domain_filter"] == ["vestiairecollective.com"]


async def test_openai_search_reads_url_citations(mocker):
    payload = {
        "output": [
            {"type": "web_search_call"},
            {
                "type": "message",
                "content": [
                    {
                        "type": "output_text",
                        "text": "Lady Dior medium around EUR 3,900.",
                        "annotations": [{"type": "url_citation", "url": "https://www.luxuryexchange.ie/dior", "title": "Lady Dior"}],
                    }
                ],
            },
        ]
    }
    mocker.patch.object(httpx.AsyncClient, "request", return_value=make_response(200, payload))

    result = await OpenAIClient("sk-test", "gpt-4o-mini").web_search("lady dior")

    assert result["rawText"].startswith("Lady Dior")
    assert result["annotations"] == [{"url": "https://www.luxuryexchange.ie/dior", "title": "Lady Dior"}]


async def test_ai_pricing_provider_combines_search_and_extraction(mocker):
    router = AiRouter(Settings(OPENAI_API_KEY="sk-test", PERPLEXITY_API_KEY="pplx-test"))
    mocker.patch.object(
        PerplexityClient,
        "web_search",
        return_value={"rawText": "", "annotations": [{"url": "https://siopaella.com/a", "title": "siopaella.com"}]},
    )
    mocker.patch.object(
        OpenAIClient,
        "chat",
        return_value={
            "choices": [
                {
                    "message": {
                        "content": '{"estimatedRetailEur": 4199.6, "confidence": 1.4, '
                        '"comps": [{"title": "Lady Dior", "price": 4100.4, "source": "Siopaella", '
                        '"sourceUrl": "https://siopaella.com/a"}, {"title": "bad", "price": 0}]}'
                    }
                }
            ]
        },
    )

    estimate = await AiPricingProvider(router).analyse(PricingAnalyseRequest(brand="Dior", model="Lady Dior"))

    assert estimate.estimated_retail_eur == 4200
    assert estimate.confidence == 1.0
    assert [c.price_eur for c in estimate.comps] == [4100]
    assert estimate.comps[0].source_url == "https://siopaella.com/a"
