"""Tests for time value of money calculators."""

import pytest


class TestCompoundInterest:
    """Tests for compound_interest."""

    def test_annual_compounding(self, ok) -> None:
        """1000 at 5% for 10 years."""
        out = ok("compound_interest", principal=1000, annual_rate=5, years=10)
        assert out["result"] == pytest.approx(1628.8946, abs=1e-3)
        assert out["interest_earned"] == pytest.approx(628.8946, abs=1e-3)
        assert len(out["yearly"]) == 10

    def test_effective_rate_for_monthly(self, ok) -> None:
        """12% compounded monthly is 12.68% effective."""
        out = ok("compound_interest", principal=1000, annual_rate=12, years=1, compounding="monthly")
        assert out["effective_annual_rate"] == pytest.approx(12.6825, abs=1e-3)


class TestFutureValue:
    """Tests for future_value."""

    def test_single_amount(self, ok) -> None:
        """1000 at 10% for two years."""
        out = ok("future_value", mode="single", present_value=1000, annual_rate=10, years=2)
        assert out["result"] == pytest.approx(1210.0)

    def test_ordinary_annuity(self, ok) -> None:
        """Two payments of 100 at 10%."""
        out = ok("future_value", mode="annuity", payment=100, annual_rate=10, years=2)
        assert out["result"] == pytest.approx(210.0)

    def test_growing_annuity(self, ok) -> None:
        """Payments growing 5% a year at a 10% rate."""
        out = ok("future_value", mode="growing_annuity", payment=100, annual_rate=10, growth_rate=5, years=2)
        assert out["result"] == pytest.approx(215.0)

    def test_annuity_needs_payment(self, calc) -> None:
        """Annuity modes require a payment."""
        result = calc("future_value", mode="annuity", annual_rate=10, years=2)
        assert not result.success
        assert result.errors[0]["field"] == "payment"


class TestPresentValueAndNpv:
    """Tests for present_value and npv."""

    def test_present_value(self, ok) -> None:
        """1210 in two years at 10% is worth 1000 today."""
        out = ok("present_value", future_value=1210, annual_rate=10, years=2)
        assert out["result"] == pytest.approx(1000.0)
        assert out["discount"] == pytest.approx(210.0)

    def test_npv_accept(self, ok) -> None:
        """A cash flow string is split into a series."""
        out = ok("npv", discount_rate=10, initial_investment=1000, cash_flows="600, 600")
        assert out["result"] == pytest.approx(41.3223, abs=1e-3)
        assert out["tier"] == "Accept"
        assert out["discounted_cash_flows"][0] == pytest.approx(-1000.0)

    def test_npv_reject(self, ok) -> None:
        """Negative NPV is rejected."""
        out = ok("npv", discount_rate=20, cash_flows=[-1000, 500, 500])
        assert out["tier"] == "Reject"


class TestPaybackPeriod:
    """Tests for payback_period."""

    def test_interpolates_within_year(self, ok) -> None:
        """1000 recovered at 400 a year takes 2.5 years."""
        out = ok("payback_period", initial_investment=1000, cash_flows=[400, 400, 400])
        assert out["result"] == pytest.approx(2.5)
        assert out["text"] == "2 years and 6 months"

    def test_never_recovered(self, ok) -> None:
        """Cash flows that never cover the investment report the shortfall."""
        out = ok("payback_period", initial_investment=1000, cash_flows=[100, 100])
        assert out["result"] is None
        assert out["recovered"] is False
        assert out["shortfall"] == pytest.approx(800.0)


class TestPerpetuityAndAnnuities:
    """Tests for perpetuity, growing_annuity and annuity_payment."""

    def test_level_perpetuity(self, ok) -> None:
        assert ok("perpetuity", payment=100, discount_rate=5)["result"] == pytest.approx(2000.0)

    def test_growing_perpetuity(self, ok) -> None:
        out = ok("perpetuity", payment=100, discount_rate=5, growth_rate=2)
        assert out["result"] == pytest.approx(3333.3333, abs=1e-3)

    def test_perpetuity_rate_must_exceed_growth(self, calc) -> None:
        result = calc("perpetuity", payment=100, discount_rate=5, growth_rate=5)
        assert not result.success
        assert result.errors[0]["field"] == "discount_rate"

    def test_growing_annuity_equal_rates(self, ok) -> None:
        """When growth equals the discount rate the PV is n*pmt/(1+i)."""
        out = ok("growing_annuity", payment=100, discount_rate=5, growth_rate=5, periods=10)
        assert out["result"] == pytest.approx(952.381, abs=1e-3)
        assert out["growing_perpetuity"] is None

    def test_annuity_payment_ordinary_and_due(self, ok) -> None:
        """Annuity-due payments are the ordinary payment divided by (1+i)."""
        ordinary = ok("annuity_payment", amount=1000, annual_rate=12, periods=12)
        due = ok("annuity_payment", amount=1000, annual_rate=12, periods=12, annuity_due=True)
        assert ordinary["result"] == pytest.approx(88.8488, abs=1e-3)
        assert due["result"] == pytest.approx(88.8488 / 1.01, abs=1e-3)

    def test_annuity_payment_growth_out_of_range(self, calc) -> None:
        """1.97 ** 1200 does not fit in a float."""
        result = calc("annuity_payment", amount=1000, annual_rate=97, periods=1200, frequency="annual")
        assert not result.success
        assert result.errors[0]["field"] == "periods"


class TestSipAndRates:
    """Tests for sip_returns, real_interest_rate and tax_equivalent_yield."""

    def test_sip(self, ok) -> None:
        """1000 a month at 12% for a year."""
        out = ok("sip_returns", monthly_investment=1000, expected_return=12, years=1)
        assert out["result"] == pytest.approx(12809.33, abs=0.01)
        assert out["total_invested"] == pytest.approx(12000.0)

    def test_sip_shorter_than_a_month(self, calc) -> None:
        result = calc("sip_returns", monthly_investment=500, expected_return=12, years=0.04)
        assert not result.success
        assert result.errors[0]["field"] == "years"

    def test_real_rate_fisher(self, ok) -> None:
        out = ok("real_interest_rate", nominal_rate=8, inflation_rate=3)
        assert out["result"] == pytest.approx(4.8544, abs=1e-3)
        assert out["approximate"] == pytest.approx(5.0)
        assert out["tier"] == "Moderate"

    def test_tax_equivalent_yield(self, ok) -> None:
        assert ok("tax_equivalent_yield", tax_free_yield=3, tax_rate=25)["result"] == pytest.approx(4.0)

    def test_percent_unit_accepted(self, ok) -> None:
        """A rate given as {"value", "unit": "%"} is already canonical."""
        out = ok("tax_equivalent_yield", tax_free_yield={"value": 3, "unit": "%"}, tax_rate=25)
        assert out["result"] == pytest.approx(4.0)
