import pytest

from luxselle.core.config import Settings
from luxselle.schemas.pricing import PricingAnalyseRequest
from luxselle.services.pricing import PricingService
from luxselle.services.pricing.providers import AiPricingProvider, MockPricingProvider, brand_model_hash, js_round
from luxselle.services.pricing.service import max_buy_price
from luxselle.services.ai.router import AiRouter


@pytest.mark.parametrize("value,expected", [(2.5, 3), (2.4999, 2), (-2.5, -2), (3899.75, 3900)])
def test_js_round(value, expected):
    assert js_round(value) == expected


def test_hash_is_case_insensitive():
    assert brand_model_hash("A", "B") == brand_model_hash("a", "b") == 3105


def test_hash_wraps_to_signed_32_bit():
    value = brand_model_hash("Louis Vuitton", "Neverfull MM Damier Ebene")
    assert -(2 ** 31) <= value < 2 ** 31


async def test_mock_provider_is_deterministic():
    provider = MockPricingProvider()
    request = PricingAnalyseRequest(brand="A", model="B", condition="good")

    first = await provider.analyse(request)
    second = await provider.analyse(request)

    assert first == second
    assert first.estimated_retail_eur == 4105
    assert [c.price_eur for c in first.comps] == [3900, 4310, 4187]
    assert first.confidence == 0.7


async def test_mock_provider_applies_condition_multiplier():
    fair = await MockPricingProvider().analyse(PricingAnalyseRequest(brand="A", model="B", condition="Fair"))
    unknown = await MockPricingProvider().analyse(PricingAnalyseRequest(brand="A", model="B", condition="vintage"))

    assert fair.estimated_retail_eur == 3489
    assert unknown.estimated_retail_eur == 4105


@pytest.mark.parametrize("retail,margin,expected", [(4105, 35, 2668), (10000, 0, 10000), (1000, 20, 800)])
def test_max_buy_price(retail, margin, expected):
    assert max_buy_price(retail, margin) == expected


async def test_analyse_persists_evaluation(db_session, settings):
    service = PricingService(db_session, AiRouter(settings), settings=settings)

    analysis = await service.analyse(PricingAnalyseRequest(brand="A", model="B", condition="good"))

    assert analysis.provider == "mock"
    assert analysis.estimated_retail_eur == 4105
    assert analysis.max_buy_price_eur == 2668
    assert analysis.target_margin_pct == 35
    assert analysis.history_avg_paid_eur is None
    assert analysis.evaluation_id


def test_ai_provider_selected_only_with_key(db_session):
    configured = Settings(PRICING_PROVIDER="openai", OPENAI_API_KEY="sk-test")
    missing_key = Settings(PRICING_PROVIDER="openai", OPENAI_API_KEY=None)

    assert isinstance(PricingService(db_session, AiRouter(configured), settings=configured).provider, AiPricingProvider)
    assert isinstance(PricingService(db_session, AiRouter(missing_key), settings=missing_key).provider, MockPricingProvider)
