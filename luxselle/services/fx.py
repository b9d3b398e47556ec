"""Currency conversion helpers used by pricing and supplier imports."""

from luxselle.core.utils import round_money


def usd_to_eur(usd: float, rate_usd_to_eur: float) -> float:
    """Convert USD to EUR at the given rate, rounded to 2 decimal places."""
    return round_money(usd * rate_usd_to_eur)


def eur_to_usd(eur: float, rate_usd_to_eur: float) -> float:
    return round_money(eur / rate_usd_to_eur)
