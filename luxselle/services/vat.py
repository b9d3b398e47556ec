"""VAT helpers for net and gross amounts. Rates are percentages (23 means 23%)."""

from luxselle.core.utils import round_money
from luxselle.schemas.vat import VatCalculation


def vat_from_net(net_eur: float, rate_pct: float) -> VatCalculation:
    vat_eur = round_money(net_eur * rate_pct / 100)
    return VatCalculation(
        net_eur=round_money(net_eur),
        vat_eur=vat_eur,
        gross_eur=round_money(net_eur + vat_eur),
        rate_pct=rate_pct,
    )


def vat_from_gross(gross_eur: float, rate_pct: float) -> VatCalculation:
    """Split a VAT-inclusive amount; net is rounded first and VAT is the remainder."""
    net_eur = round_money(gross_eur / (1 + rate_pct / 100))
    return VatCalculation(
        net_eur=net_eur,
        vat_eur=round_money(gross_eur - net_eur),
        gross_eur=round_money(gross_eur),
        rate_pct=rate_pct,
    )


def calculate_vat(amount_eur: float, incl_vat: bool, rate_pct: float) -> VatCalculation:
    if incl_vat:
        return vat_from_gross(amount_eur, rate_pct)
    return vat_from_net(amount_eur, rate_pct)
