"""Loan amortization models."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from contract_engine.config import ZERO_TOLERANCE
from contract_engine.money import to_money, zero_money


@dataclass(frozen=True)
class AmortizationEntry:
    """One scheduled EMI payment."""

    month_number: int  # 1-indexed
    payment_date: date
    emi_paid: Decimal
    principal_portion: Decimal
    interest_portion: Decimal
    remaining_balance: Decimal
    cumulative_principal_paid: Decimal
    cumulative_interest_paid: Decimal

    @property
    def cumulative_total_paid(self) -> Decimal:
        return self.cumulative_principal_paid + self.cumulative_interest_paid


@dataclass(frozen=True)
class LoanStatusAtDate:
    """How far a loan has progressed as of a given date."""

    as_of_date: date
    months_completed: int
    total_amount_paid: Decimal
    total_interest_paid: Decimal
    remaining_principal: Decimal
    remaining_months: int
    expected_closure_date: date | None
    is_loan_closed: bool

    @property
    def total_principal_paid(self) -> Decimal:
        return self.total_amount_paid - self.total_interest_paid


@dataclass(frozen=True)
class LoanSummary:
    """A full amortization schedule with its aggregate totals.

    ``expected_closure_date`` is the payment date of the first entry whose
    balance reaches the zero tolerance, or ``None`` when the schedule does
    not pay the loan off within its tenure.
    """

    principal: float
    annual_interest_rate: float
    tenure_months: int
    emi: float
    start_date: date
    schedule: tuple[AmortizationEntry, ...] = field(repr=False)
    total_amount_payable: Decimal
    total_interest_payable: Decimal
    expected_closure_date: date | None

    @property
    def monthly_interest_rate(self) -> float:
        return self.annual_interest_rate / 12 / 100

    @property
    def closes(self) -> bool:
        return self.expected_closure_date is not None

    def entry_at_month(self, month_number: int) -> AmortizationEntry | None:
        if month_number < 1 or month_number > len(self.schedule):
            return None
        return self.schedule[month_number - 1]

    def status_at(self, as_of: date) -> LoanStatusAtDate:
        """Loan position after every payment due on or before ``as_of``."""
        last_entry = None
        for entry in self.schedule:
            if entry.payment_date > as_of:
                break
            last_entry = entry

        if last_entry is None:
            return LoanStatusAtDate(
                as_of_date=as_of,
                months_completed=0,
                total_amount_paid=zero_money(),
                total_interest_paid=zero_money(),
                remaining_principal=to_money(self.principal),
                remaining_months=self.tenure_months,
                expected_closure_date=self.expected_closure_date,
                is_loan_closed=False,
            )

        return LoanStatusAtDate(
            as_of_date=as_of,
            months_completed=last_entry.month_number,
            total_amount_paid=last_entry.cumulative_total_paid,
            total_interest_paid=last_entry.cumulative_interest_paid,
            remaining_principal=last_entry.remaining_balance,
            remaining_months=self.tenure_months - last_entry.month_number,
            expected_closure_date=self.expected_closure_date,
            is_loan_closed=float(last_entry.remaining_balance) <= ZERO_TOLERANCE,
        )
