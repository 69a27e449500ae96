import pytest

from core import pricing
from core.pricing import (
    UnknownOptionError,
    calculate_total_price,
    discounted_price,
    estimated_monthly_payment,
    financing_terms,
    monthly_payment,
    savings_breakdown,
    selected_options,
)


def test_discounted_price_rounds():
    assert discounted_price(47995, 0.15) == 40796
    assert discounted_price(40000, 0.15) == 34000


@pytest.mark.parametrize("list_price", [100, 999, 47995, 125000.5])
@pytest.mark.parametrize("rate", [0.01, 0.15, 0.5])
def test_discount_is_strictly_lower(list_price, rate):
    assert discounted_price(list_price, rate) < list_price


def test_zero_rate_keeps_list_price():
    assert discounted_price(47995, 0) == 47995


def test_default_rate_comes_from_settings(monkeypatch):
    monkeypatch.setattr(pricing.settings, "employee_discount_rate", 0.10)
    assert discounted_price(1000) == 900


def test_monthly_payment_zero_apr_is_straight_division():
    assert monthly_payment(12000, 0.0, 120) == 100


def test_monthly_payment_amortized():
    # 30,000 at 5.25% for 120 months
    assert monthly_payment(30000, 0.0525, 120) == pytest.approx(321.88, abs=0.05)


def test_monthly_payment_rejects_zero_term():
    with pytest.raises(ValueError):
        monthly_payment(1000, 0.05, 0)


def test_estimated_monthly_payment_takes_twenty_percent_down():
    assert estimated_monthly_payment(37500, annual_rate=0.0) == 250


def test_financing_terms():
    terms = financing_terms(50000)
    assert terms["down_payment"] == 10000
    assert terms["loan_amount"] == 40000
    assert terms["months"] == 120
    assert terms["apr"] == 0.0
    assert terms["monthly_payment"] == pytest.approx(333.33, abs=0.01)


def test_savings_breakdown_adds_interest_savings():
    savings = savings_breakdown(40000, 0.15)
    assert savings["discounted_price"] == 34000
    assert savings["price_savings"] == 6000
    assert savings["interest_savings"] > 0
    assert savings["total_savings"] == savings["price_savings"] + savings["interest_savings"]


def test_total_price_adds_selected_options():
    options = {
        "power_package": "lithium",
        "hitch_package": "anti-sway",
        "brake_control": "wireless",
        "protection_plan": None,
    }
    assert calculate_total_price(40000, options, 0.15) == 34000 + 1299 + 600 + 299


def test_zero_priced_options_do_not_change_total():
    options = {"hitch_package": "have-hitch", "brake_control": "installed", "protection_plan": "none"}
    assert calculate_total_price(40000, options, 0.15) == 34000


def test_selected_options_lines():
    lines = selected_options({"power_package": "6volt", "brake_control": ""})
    assert lines == [{"category": "power_package", "id": "6volt", "name": "Two 6-Volt RV Batteries", "price": 555}]


def test_unknown_option_rejected():
    with pytest.raises(UnknownOptionError):
        selected_options({"power_package": "nuclear"})
    with pytest.raises(UnknownOptionError):
        selected_options({"paint": "red"})


def test_discounted_price_rounds_half_up():
    # 41970 * 0.85 = 35674.5
    assert discounted_price(41970, 0.15) == 35675
    assert calculate_total_price(41970, {"power_package": "standard"}, 0.15) == 35675 + 419


def test_estimated_monthly_payment_rounds_half_up():
    # 80% of 375 over 120 months is exactly 2.5
    assert estimated_monthly_payment(375, annual_rate=0.0) == 3
