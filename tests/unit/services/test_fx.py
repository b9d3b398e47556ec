import pytest

from luxselle.services.fx import eur_to_usd, usd_to_eur


def test_usd_to_eur():
    assert usd_to_eur(100, 0.9) == 90.0


@pytest.mark.parametrize("usd,rate,expected", [(0, 0.92, 0.0), (1999.99, 0.92, 1839.99), (0.005, 1.0, 0.01)])
def test_usd_to_eur_rounds_to_cents(usd, rate, expected):
    assert usd_to_eur(usd, rate) == expected


def test_eur_to_usd():
    assert eur_to_usd(90, 0.9) == 100.0
