"""Tests for the loan amortization engine."""

from datetime import date
from decimal import Decimal
from unittest.mock import patch

import pytest

from contract_engine.config import EngineConfig
from contract_engine.engine import NEVER, LoanAmortizationEngine, TenureSentinel, monthly_rate
from contract_engine.exceptions import ContractEngineError, InvalidLoanParametersError
from contract_engine.money import to_money


class TestCalculateEmi:
    """Tests for EMI calculation."""

    def test_standard_loan(self, amortization: LoanAmortizationEngine) -> None:
        """100,000 at 12% over a year."""
        emi = amortization.calculate_emi(100_000, 12.0, 12)
        assert emi == pytest.approx(8884.88, abs=0.01)

    def test_home_loan(self, amortization: LoanAmortizationEngine) -> None:
        emi = amortization.calculate_emi(5_000_000, 8.5, 240)
        assert emi == pytest.approx(43391, abs=1)

    def test_zero_rate_is_straight_line(self, amortization: LoanAmortizationEngine) -> None:
        assert amortization.calculate_emi(120_000, 0.0, 12) == 10_000.0

    def test_single_month_loan(self, amortization: LoanAmortizationEngine) -> None:
        """One installment repays principal plus one month of interest."""
        assert amortization.calculate_emi(10_000, 12.0, 1) == pytest.approx(10_100.0)

    def test_long_tenure_at_high_rate(self, amortization: LoanAmortizationEngine) -> None:
        """Tenures of centuries at the top of the rate range stay finite."""
        emi = amortization.calculate_emi(100_000, 480.0, 2400)
        assert emi == pytest.approx(40_000.0)

    def test_emi_is_not_rounded(self, amortization: LoanAmortizationEngine) -> None:
        emi = amortization.calculate_emi(100_000, 12.0, 12)
        assert emi != round(emi, 2)

    @pytest.mark.parametrize(
        "principal,rate,tenure",
        [(0, 10.0, 12), (-1000, 10.0, 12), (1000, 10.0, 0), (1000, 10.0, -5), (1000, -0.5, 12)],
    )
    def test_invalid_inputs_raise(
        self,
        amortization: LoanAmortizationEngine,
        principal: float,
        rate: float,
        tenure: int,
    ) -> None:
        with pytest.raises(InvalidLoanParametersError):
            amortization.calculate_emi(principal, rate, tenure)

    def test_invalid_inputs_are_value_errors(self, amortization: LoanAmortizationEngine) -> None:
        with pytest.raises(ValueError):
            amortization.calculate_emi(0, 10.0, 12)

    def test_emi_increases_with_rate(self, amortization: LoanAmortizationEngine) -> None:
        emis = [amortization.calculate_emi(1_000_000, rate, 120) for rate in (0, 1, 5, 10, 20, 40)]
        assert emis == sorted(emis)
        assert len(set(emis)) == len(emis)

    def test_emi_decreases_with_tenure(self, amortization: LoanAmortizationEngine) -> None:
        emis = [amortization.calculate_emi(1_000_000, 9.0, n) for n in (12, 24, 60, 120, 360)]
        assert emis == sorted(emis, reverse=True)

    def test_monthly_rate(self) -> None:
        assert monthly_rate(12.0) == pytest.approx(0.01)
        assert monthly_rate(0.0) == 0.0


class TestCalculateAnnualInterestRate:
    """Tests for the rate solver."""

    @pytest.mark.parametrize(
        "principal,rate,tenure",
        [(5_000_000, 8.5, 240), (100_000, 12.0, 12), (750_000, 15.25, 60), (20_000, 1.0, 6)],
    )
    def test_recovers_rate_from_emi(
        self,
        amortization: LoanAmortizationEngine,
        principal: float,
        rate: float,
        tenure: int,
    ) -> None:
        emi = round(amortization.calculate_emi(principal, rate, tenure), 2)
        solved = amortization.calculate_annual_interest_rate(principal, emi, tenure)
        assert solved == pytest.approx(rate, abs=0.01)

    def test_long_tenure_at_high_rate(self, amortization: LoanAmortizationEngine) -> None:
        solved = amortization.calculate_annual_interest_rate(100_000, 40_000, 2400)
        assert solved == pytest.approx(480.0, abs=0.01)

    def test_payments_not_exceeding_principal(self, amortization: LoanAmortizationEngine) -> None:
        assert amortization.calculate_annual_interest_rate(120_000, 10_000, 12) == 0.0
        assert amortization.calculate_annual_interest_rate(120_000, 9_000, 12) == 0.0

    @pytest.mark.parametrize("principal,emi,tenure", [(0, 100, 12), (1000, 0, 12), (1000, 100, 0)])
    def test_degenerate_inputs(
        self,
        amortization: LoanAmortizationEngine,
        principal: float,
        emi: float,
        tenure: int,
    ) -> None:
        assert amortization.calculate_annual_interest_rate(principal, emi, tenure) == 0.0

    def test_iterations_follow_config(self) -> None:
        coarse = LoanAmortizationEngine(EngineConfig(rate_search_iterations=1))
        # One halving of [0, 500] lands on the midpoint
        assert coarse.calculate_annual_interest_rate(100_000, 8884.88, 12) == 250.0


class TestCalculateRemainingTenure:
    """Tests for the remaining-tenure solver."""

    def test_zero_rate(self, amortization: LoanAmortizationEngine) -> None:
        assert amortization.calculate_remaining_tenure(490_000, 0.0, 10_000) == 49

    def test_zero_rate_rounds_up(self, amortization: LoanAmortizationEngine) -> None:
        assert amortization.calculate_remaining_tenure(490_001, 0.0, 10_000) == 50

    def test_closed_form(self, amortization: LoanAmortizationEngine) -> None:
        assert amortization.calculate_remaining_tenure(100_000, 12.0, 8884.88) == 12

    def test_home_loan_full_term(self, amortization: LoanAmortizationEngine) -> None:
        emi = amortization.calculate_emi(5_000_000, 8.5, 240)
        assert amortization.calculate_remaining_tenure(5_000_000, 8.5, emi) == 240

    def test_paid_off_balance(self, amortization: LoanAmortizationEngine) -> None:
        assert amortization.calculate_remaining_tenure(0.0, 12.0, 1000) == 0
        assert amortization.calculate_remaining_tenure(0.005, 12.0, 1000) == 0

    def test_zero_payment_never_closes(self, amortization: LoanAmortizationEngine) -> None:
        assert amortization.calculate_remaining_tenure(1000, 12.0, 0) is NEVER

    def test_payment_equal_to_interest_never_closes(
        self, amortization: LoanAmortizationEngine
    ) -> None:
        assert amortization.calculate_remaining_tenure(1_000_000, 12.0, 10_000) is NEVER

    def test_payment_below_interest_never_closes(
        self, amortization: LoanAmortizationEngine
    ) -> None:
        result = amortization.calculate_remaining_tenure(1_000_000, 12.0, 5_000)
        assert result is TenureSentinel.NEVER
        assert result == "NEVER"

    def test_falls_back_to_simulation(self, amortization: LoanAmortizationEngine) -> None:
        """A rate too small to move the logarithm is simulated month by month."""
        assert amortization.calculate_remaining_tenure(1000, 1e-15, 100) == 10

    def test_simulation_is_capped(self) -> None:
        capped = LoanAmortizationEngine(EngineConfig(max_simulation_months=5))
        assert capped.calculate_remaining_tenure(1000, 1e-15, 100) == 5


class TestSplitInstallment:
    """Tests for splitting one EMI."""

    def test_split(self, amortization: LoanAmortizationEngine) -> None:
        interest, principal, balance = amortization.split_installment(100_000, 12.0, 8884.88)

        assert interest == pytest.approx(1000.0)
        assert principal == pytest.approx(7884.88)
        assert balance == pytest.approx(92115.12)

    def test_balance_never_negative(self, amortization: LoanAmortizationEngine) -> None:
        _, _, balance = amortization.split_installment(500, 12.0, 8884.88)
        assert balance == 0.0


class TestGenerateSchedule:
    """Tests for amortization schedules."""

    def test_home_loan_schedule(self, amortization: LoanAmortizationEngine) -> None:
        emi = amortization.calculate_emi(5_000_000, 8.5, 240)
        summary = amortization.generate_schedule(5_000_000, 8.5, 240, emi, date(2024, 1, 10))

        assert len(summary.schedule) == 240
        assert summary.closes
        assert summary.expected_closure_date == date(2043, 12, 10)
        assert summary.schedule[-1].remaining_balance <= Decimal("0.01")
        principal_paid = sum(e.principal_portion for e in summary.schedule)
        assert float(principal_paid) == pytest.approx(5_000_000, abs=1.5)
        assert float(summary.schedule[-1].cumulative_principal_paid) == pytest.approx(
            5_000_000, abs=0.01
        )

    def test_first_entry(self, amortization: LoanAmortizationEngine) -> None:
        emi = amortization.calculate_emi(5_000_000, 8.5, 240)
        summary = amortization.generate_schedule(5_000_000, 8.5, 240, emi, date(2024, 1, 10))
        first = summary.entry_at_month(1)

        assert first.month_number == 1
        assert first.payment_date == date(2024, 1, 10)
        assert first.interest_portion == Decimal("35416.67")
        assert first.emi_paid == to_money(emi)
        assert first.principal_portion + first.interest_portion == pytest.approx(
            first.emi_paid, abs=Decimal("0.01")
        )

    def test_totals(self, amortization: LoanAmortizationEngine) -> None:
        emi = amortization.calculate_emi(100_000, 12.0, 12)
        summary = amortization.generate_schedule(100_000, 12.0, 12, emi, date(2025, 1, 1))

        last = summary.schedule[-1]
        assert summary.total_interest_payable == last.cumulative_interest_paid
        assert summary.total_amount_payable == pytest.approx(
            Decimal("100000") + summary.total_interest_payable, abs=Decimal("0.01")
        )
        assert float(summary.total_interest_payable) == pytest.approx(6618.55, abs=0.02)

    def test_month_end_start_date(self, amortization: LoanAmortizationEngine) -> None:
        """Payment dates clamp to shorter months without drifting."""
        summary = amortization.generate_schedule(12_000, 0.0, 4, 3000, date(2024, 1, 31))
        dates = [entry.payment_date for entry in summary.schedule]

        assert dates == [
            date(2024, 1, 31),
            date(2024, 2, 29),
            date(2024, 3, 31),
            date(2024, 4, 30),
        ]

    def test_stops_early_and_trims_final_installment(
        self, amortization: LoanAmortizationEngine
    ) -> None:
        summary = amortization.generate_schedule(10_000, 12.0, 12, 5000, date(2024, 1, 15))

        assert len(summary.schedule) == 3
        assert summary.expected_closure_date == date(2024, 3, 15)
        final = summary.schedule[-1]
        assert final.emi_paid == Decimal("152.51")
        assert final.principal_portion == Decimal("151.00")
        assert final.remaining_balance == Decimal("0.00")
        assert summary.total_interest_payable == Decimal("152.51")
        assert summary.total_amount_payable == Decimal("10152.51")

    def test_single_month_loan(self, amortization: LoanAmortizationEngine) -> None:
        summary = amortization.generate_schedule(10_000, 12.0, 1, 10_100, date(2025, 5, 1))

        assert len(summary.schedule) == 1
        assert summary.schedule[0].emi_paid == Decimal("10100.00")
        assert summary.schedule[0].interest_portion == Decimal("100.00")
        assert summary.expected_closure_date == date(2025, 5, 1)

    def test_unpaid_loan_has_no_closure(self, amortization: LoanAmortizationEngine) -> None:
        summary = amortization.generate_schedule(100_000, 12.0, 12, 1000, date(2025, 1, 1))

        assert len(summary.schedule) == 12
        assert summary.expected_closure_date is None
        assert not summary.closes
        assert summary.schedule[-1].remaining_balance == Decimal("100000.00")

    @pytest.mark.parametrize(
        "principal,rate,tenure,emi",
        [(0, 10.0, 12, 100), (1000, -1.0, 12, 100), (1000, 10.0, 0, 100), (1000, 10.0, 12, 0)],
    )
    def test_invalid_inputs_raise(
        self,
        amortization: LoanAmortizationEngine,
        principal: float,
        rate: float,
        tenure: int,
        emi: float,
    ) -> None:
        with pytest.raises(ContractEngineError):
            amortization.generate_schedule(principal, rate, tenure, emi, date(2025, 1, 1))

    def test_entry_at_month_out_of_range(self, amortization: LoanAmortizationEngine) -> None:
        summary = amortization.generate_schedule(12_000, 0.0, 4, 3000, date(2024, 1, 1))

        assert summary.entry_at_month(0) is None
        assert summary.entry_at_month(5) is None
        assert summary.entry_at_month(4).month_number == 4

    def test_logs_unpaid_loan(self, amortization: LoanAmortizationEngine) -> None:
        with patch("contract_engine.engine.amortization.logger") as mock_logger:
            amortization.generate_schedule(100_000, 12.0, 12, 1000, date(2025, 1, 1))
        mock_logger.debug.assert_called_once()


class TestLoanStatusAt:
    """Tests for the loan position on a date."""

    @pytest.fixture
    def summary(self, amortization: LoanAmortizationEngine):
        return amortization.generate_schedule(10_000, 12.0, 12, 5000, date(2024, 1, 15))

    def test_before_first_payment(self, summary) -> None:
        status = summary.status_at(date(2024, 1, 1))

        assert status.months_completed == 0
        assert str(status.remaining_principal) == "10000.00"
        assert str(status.total_amount_paid) == "0.00"
        assert str(status.total_interest_paid) == "0.00"
        assert status.total_amount_paid == Decimal("0")
        assert status.remaining_principal == Decimal("10000")
        assert status.remaining_months == 12
        assert not status.is_loan_closed

    def test_midway(self, summary) -> None:
        status = summary.status_at(date(2024, 2, 20))

        assert status.months_completed == 2
        assert status.remaining_principal == Decimal("151.00")
        assert status.total_interest_paid == Decimal("151.00")
        assert status.total_amount_paid == Decimal("10000.00")
        assert status.total_principal_paid == Decimal("9849.00")
        assert status.remaining_months == 10
        assert not status.is_loan_closed

    def test_after_closure(self, summary) -> None:
        status = summary.status_at(date(2030, 1, 1))

        assert status.months_completed == 3
        assert status.is_loan_closed
        assert status.expected_closure_date == date(2024, 3, 15)


class TestContractSchedule:
    """Tests for schedules built from contracts."""

    def test_reducing_contract(self, amortization: LoanAmortizationEngine, home_loan) -> None:
        summary = amortization.generate_contract_schedule(home_loan)

        assert summary is not None
        assert summary.start_date == home_loan.start_date
        assert summary.emi == home_loan.reducing_metadata.emi_amount
        assert 0 < len(summary.schedule) <= 240

    def test_non_reducing_contract(self, amortization: LoanAmortizationEngine, sip) -> None:
        assert amortization.generate_contract_schedule(sip) is None
