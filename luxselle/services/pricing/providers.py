"""Pricing providers: a deterministic mock and an AI-router backed provider."""

import logging
import math
from typing import List, Optional

from pydantic import BaseModel, Field

from luxselle.schemas.pricing import PricingAnalyseRequest, PricingComparable, PricingEstimate
from luxselle.services.ai.router import AiRouter

logger = logging.getLogger(__name__)

CONDITION_MULTIPLIERS = {
    "new": 1.2,
    "excellent": 1.1,
    "good": 1.0,
    "fair": 0.85,
    "poor": 0.7,
}


def js_round(value: float) -> int:
    """Half-up rounding to an integer."""
    return int(math.floor(value + 0.5))


def brand_model_hash(brand: str, model: str) -> int:
    """32-bit signed string hash of the lowercased brand and model."""
    h = 0
    for ch in f"{brand}{model}".lower():
        h = ((h << 5) - h + ord(ch)) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return h


class MockPricingProvider:
    """Deterministic pricing for local development and tests."""

    name = "mock"

    def base_price(self, brand: str, model: str) -> int:
        return 1000 + abs(brand_model_hash(brand, model)) % 9000

    async def analyse(self, request: PricingAnalyseRequest) -> PricingEstimate:
        multiplier = CONDITION_MULTIPLIERS.get((request.condition or "").lower(), 1.0)
        retail = js_round(self.base_price(request.brand, request.model) * multiplier)
        label = f"{request.brand} {request.model}"
        comps = [
            PricingComparable(
                title=f"{label} - Similar",
                price_eur=js_round(retail * 0.95),
                source="Designer Exchange",
                source_url="https://www.designerexchange.ie/",
            ),
            PricingComparable(
                title=f"{label} - Like New",
                price_eur=js_round(retail * 1.05),
                source="Luxury Exchange",
                source_url="https://www.luxuryexchange.ie/",
            ),
            PricingComparable(
                title=f"{label} - {request.condition}",
                price_eur=js_round(retail * 1.02),
                source="Vestiaire Collective",
                source_url="https://www.vestiairecollective.com/",
            ),
        ]
        return PricingEstimate(estimated_retail_eur=retail, confidence=0.7, comps=comps)


class _ExtractedComp(BaseModel):
    title: str = ""
    price: float
    source: str = ""
    sourceUrl: Optional[str] = None


class _PricingExtraction(BaseModel):
    estimatedRetailEur: float
    confidence: Optional[float] = None
    comps: List[_ExtractedComp] = Field(default_factory=list)


class AiPricingProvider:
    """
    Web search for live listings, then structured extraction of a price
    estimate, both routed through the AiRouter.
    """

    name = "openai"

    def __init__(self, router: AiRouter):
        self.router = router

    async def analyse(self, request: PricingAnalyseRequest) -> PricingEstimate:
        query = " ".join(
            part for part in (request.brand, request.model, request.colour, request.category) if part
        ) + " price second-hand pre-owned for sale EUR"

        search = await self.router.web_search(query, country="IE")
        annotations = search.data.get("annotations", [])
        raw_text = search.data.get("rawText", "")
        if len(raw_text) > 50 or annotations:
            sources = "\n".join(f"- {a['title']}: {a['url']}" for a in annotations)
            context = f"=== LIVE WEB SEARCH RESULTS ===\n{raw_text}\n\nSource URLs:\n{sources}\n=== END SEARCH RESULTS ==="
        else:
            context = "(No live search results available)"

        prompt = (
            "You are a luxury goods pricing expert. Analyse this item and estimate its current "
            "resale market value in EUR.\n\n"
            f"{context}\n\n"
            "Item details:\n"
            f"Brand: {request.brand}\nModel: {request.model}\nCategory: {request.category}\n"
            f"Condition: {request.condition}\nColour: {request.colour}\nNotes: {request.notes}\n"
            + (f"Asking Price: EUR {request.ask_price_eur}\n" if request.ask_price_eur else "")
            + '\nReturn ONLY JSON: {"estimatedRetailEur": <number>, "confidence": <0-1>, '
            '"comps": [{"title": "", "price": <number EUR>, "source": "", "sourceUrl": ""}]}'
        )
        extracted = await self.router.extract_structured_json(
            system_prompt="You price second-hand luxury goods. Use only the evidence provided.",
            user_prompt=prompt,
            schema=_PricingExtraction,
        )
        data: _PricingExtraction = extracted.data
        comps = [
            PricingComparable(title=c.title, price_eur=js_round(c.price), source=c.source, source_url=c.sourceUrl)
            for c in data.comps
            if c.price > 0
        ]
        confidence = min(max(data.confidence if data.confidence is not None else 0.5, 0.0), 1.0)
        logger.info(f"AI pricing for {request.brand} {request.model} served by {extracted.provider}")
        return PricingEstimate(
            estimated_retail_eur=js_round(max(data.estimatedRetailEur, 0)),
            confidence=confidence,
            comps=comps,
        )
