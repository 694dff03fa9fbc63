"""
Unit tests for the amortization engine
"""
import pytest
from decimal import Decimal

from app.modules.loans.amortization import compute_emi, generate_schedule, summarize


class TestComputeEMI:
    """Tests for EMI calculation"""

    @pytest.mark.unit
    def test_reference_value_small_loan(self):
        """10,000 at 1% over 5 months"""
        assert compute_emi(10000, 1, 5) == Decimal("2005.00")

    @pytest.mark.unit
    def test_reference_value_one_year(self):
        """10,000 at 12% over 12 months is the textbook 888.49"""
        assert compute_emi(Decimal("10000.00"), Decimal("12.00"), 12) == Decimal("888.49")

    @pytest.mark.unit
    def test_accepts_string_inputs(self):
        assert compute_emi("10000", "12", 12) == Decimal("888.49")

    @pytest.mark.unit
    def test_result_has_two_decimal_places(self):
        emi = compute_emi(Decimal("5000.00"), Decimal("15.00"), 24)

        assert emi.as_tuple().exponent == -2
        assert emi > Decimal("0")

    @pytest.mark.unit
    def test_zero_interest_yields_zero(self):
        """A zero rate has no amortizing EMI and signals invalid input"""
        assert compute_emi(Decimal("1200.00"), Decimal("0"), 12) == Decimal("0.00")

    @pytest.mark.unit
    @pytest.mark.parametrize("principal,rate,months", [
        (Decimal("0"), Decimal("12"), 12),
        (Decimal("-100"), Decimal("12"), 12),
        (Decimal("10000"), Decimal("-5"), 12),
        (Decimal("10000"), Decimal("12"), 0),
        ("not-a-number", Decimal("12"), 12),
        (float("nan"), Decimal("12"), 12),
    ])
    def test_invalid_inputs_yield_zero(self, principal, rate, months):
        assert compute_emi(principal, rate, months) == Decimal("0.00")

    @pytest.mark.unit
    def test_is_deterministic(self):
        assert compute_emi(75000, Decimal("9.5"), 36) == compute_emi(75000, Decimal("9.5"), 36)


class TestGenerateSchedule:
    """Tests for amortization schedule generation"""

    @pytest.mark.unit
    @pytest.mark.parametrize("principal,rate,months", [
        (Decimal("10000.00"), Decimal("1.00"), 5),
        (Decimal("10000.00"), Decimal("12.00"), 12),
        (Decimal("5000.00"), Decimal("15.00"), 24),
        (Decimal("100000.00"), Decimal("10.00"), 60),
        (Decimal("1500.00"), Decimal("24.00"), 6),
    ])
    def test_schedule_pays_off_principal(self, principal, rate, months):
        emi = compute_emi(principal, rate, months)
        schedule = list(generate_schedule(principal, rate, months, emi))
        tolerance = Decimal("0.01") * months

        assert emi > 0
        assert 0 < len(schedule) <= months
        assert schedule[0].month == 1
        assert schedule[-1].balance <= tolerance

        total_principal = sum(entry.principal_component for entry in schedule)
        assert abs(total_principal - principal) <= tolerance

    @pytest.mark.unit
    def test_payment_splits_into_interest_and_principal(self):
        emi = compute_emi(Decimal("10000.00"), Decimal("12.00"), 12)
        first = next(generate_schedule(Decimal("10000.00"), Decimal("12.00"), 12, emi))

        # 1% of 10,000 in the first month
        assert first.interest_component == Decimal("100.00")
        assert first.principal_component == Decimal("788.49")
        assert first.balance == Decimal("9211.51")
        assert first.payment == emi

    @pytest.mark.unit
    def test_interest_share_declines(self):
        emi = compute_emi(Decimal("10000.00"), Decimal("12.00"), 12)
        schedule = list(generate_schedule(Decimal("10000.00"), Decimal("12.00"), 12, emi))

        interests = [entry.interest_component for entry in schedule]
        assert interests == sorted(interests, reverse=True)

    @pytest.mark.unit
    def test_stops_early_when_balance_cleared(self):
        """An installment larger than the EMI clears the loan before tenure"""
        schedule = list(generate_schedule(Decimal("10000.00"), Decimal("12.00"), 12, Decimal("5000.00")))

        assert len(schedule) == 3
        assert schedule[-1].balance == Decimal("0.00")
        assert all(entry.balance >= 0 for entry in schedule)

    @pytest.mark.unit
    def test_schedule_is_restartable(self):
        args = (Decimal("5000.00"), Decimal("15.00"), 24, compute_emi(Decimal("5000.00"), Decimal("15.00"), 24))

        assert list(generate_schedule(*args)) == list(generate_schedule(*args))

    @pytest.mark.unit
    def test_schedule_is_lazy(self):
        schedule = generate_schedule(Decimal("10000.00"), Decimal("12.00"), 12, Decimal("888.49"))

        assert next(schedule).month == 1
        assert next(schedule).month == 2


class TestSummarize:

    @pytest.mark.unit
    def test_totals(self):
        total_payment, total_interest = summarize(Decimal("10000"), 5, Decimal("2005.00"))

        assert total_payment == Decimal("10025.00")
        assert total_interest == Decimal("25.00")
