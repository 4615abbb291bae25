"""Reducing-balance loan amortization engine.

All arithmetic runs on unrounded floats. Money values are rounded only
when they are written into ``AmortizationEntry`` / ``LoanSummary``.

EMI for principal ``P``, monthly rate ``r`` and tenure ``n``::

    EMI = P * r / (1 - (1 + r)^-n)                 (r > 0)
    EMI = P / n                                     (r == 0)

Loans whose payment never covers the interest are not errors: the
remaining-tenure solver returns ``NEVER`` and a schedule built for such a
loan has no closure date.
"""

from __future__ import annotations

import logging
import math
from datetime import date
from enum import Enum

from contract_engine.config import EngineConfig
from contract_engine.dates import add_months
from contract_engine.exceptions import InvalidLoanParametersError
from contract_engine.models.contract import Contract
from contract_engine.models.loan import AmortizationEntry, LoanSummary
from contract_engine.money import to_money

logger = logging.getLogger(__name__)


class TenureSentinel(str, Enum):
    """Outcome of the remaining-tenure solver for a loan that cannot be paid off."""

    NEVER = "NEVER"


NEVER = TenureSentinel.NEVER


def monthly_rate(annual_interest_rate: float) -> float:
    """Convert an annual percentage rate (8.5 for 8.5%) to a monthly fraction."""
    return annual_interest_rate / 12 / 100


class LoanAmortizationEngine:
    """Stateless calculator for EMI, rate, remaining tenure and schedules.

    Parameters
    ----------
    config : EngineConfig | None
        Numeric settings (zero tolerance, display precision, solver
        bounds). Defaults to ``EngineConfig()``.
    """

    def __init__(self, config: EngineConfig | None = None) -> None:
        self.config = config or EngineConfig()

    def calculate_emi(
        self,
        principal: float,
        annual_interest_rate: float,
        tenure_months: int,
    ) -> float:
        """Calculate the equated monthly installment.

        Parameters
        ----------
        principal : float
            Loan amount.
        annual_interest_rate : float
            Annual rate as a percentage.
        tenure_months : int
            Number of monthly installments.

        Returns
        -------
        float
            Unrounded EMI.

        Raises
        ------
        InvalidLoanParametersError
            If principal or tenure is not positive, or the rate is negative.
        """
        if principal <= 0:
            raise InvalidLoanParametersError(f"Principal must be positive, got {principal}")
        if tenure_months <= 0:
            raise InvalidLoanParametersError(f"Tenure must be positive, got {tenure_months}")
        if annual_interest_rate < 0:
            raise InvalidLoanParametersError(
                f"Annual interest rate cannot be negative, got {annual_interest_rate}"
            )

        r = monthly_rate(annual_interest_rate)
        if r == 0:
            return principal / tenure_months

        # 1 - (1 + r)^-n, which stays finite for long tenures at high rates
        discount = -math.expm1(-tenure_months * math.log1p(r))
        return principal * r / discount

    def calculate_annual_interest_rate(
        self,
        principal: float,
        emi: float,
        tenure_months: int,
    ) -> float:
        """Solve for the annual rate that makes ``emi`` repay ``principal``.

        Bisection over ``[0, rate_search_upper_percent]``; EMI grows
        strictly with the rate for a fixed principal and tenure. Returns
        ``0.0`` for degenerate inputs and when the payments do not exceed
        the principal.
        """
        if principal <= 0 or emi <= 0 or tenure_months <= 0:
            return 0.0
        if emi * tenure_months <= principal:
            return 0.0

        low = 0.0
        high = self.config.rate_search_upper_percent
        mid = 0.0
        for _ in range(self.config.rate_search_iterations):
            mid = (low + high) / 2
            if self.calculate_emi(principal, mid, tenure_months) > emi:
                high = mid
            else:
                low = mid
        return mid

    def calculate_remaining_tenure(
        self,
        balance: float,
        annual_interest_rate: float,
        emi: float,
    ) -> int | TenureSentinel:
        """Months of ``emi`` payments needed to clear ``balance``.

        Uses ``n = ceil(-ln(1 - B*r/E) / ln(1 + r))``. Returns ``NEVER``
        when the payment is zero or does not cover the monthly interest.
        When the closed form cannot be evaluated the balance is paid down
        month by month, up to ``max_simulation_months``.
        """
        tolerance = self.config.zero_tolerance
        if balance <= tolerance:
            return 0
        if emi <= tolerance:
            return NEVER

        r = monthly_rate(annual_interest_rate)
        if r <= 0:
            return math.ceil(balance / emi)
        if balance * r >= emi:
            return NEVER

        log_argument = 1 - balance * r / emi
        denominator = math.log(1 + r)
        if 0 < log_argument < 1 and denominator > 0:
            months = -math.log(log_argument) / denominator
            # absorb float noise on exact multiples
            return math.ceil(round(months, 9))

        logger.debug(
            "Closed-form tenure undefined (log argument %r), simulating balance %.2f",
            log_argument,
            balance,
        )
        return self._simulate_tenure(balance, r, emi)

    def split_installment(
        self,
        balance: float,
        annual_interest_rate: float,
        emi: float,
    ) -> tuple[float, float, float]:
        """Split one EMI into (interest, principal, new_balance).

        The new balance is clamped at zero; nothing here is rounded.
        """
        interest = balance * monthly_rate(annual_interest_rate)
        principal = emi - interest
        new_balance = max(0.0, balance - principal)
        return interest, principal, new_balance

    def generate_schedule(
        self,
        principal: float,
        annual_interest_rate: float,
        tenure_months: int,
        emi: float,
        start_date: date,
    ) -> LoanSummary:
        """Build the month-by-month amortization schedule.

        The first installment falls on ``start_date`` and the rest follow at
        one-month intervals. The schedule stops at the first month whose
        balance reaches the zero tolerance. An installment larger than the
        outstanding balance plus interest is trimmed so it never overpays.

        Parameters
        ----------
        principal : float
            Loan amount.
        annual_interest_rate : float
            Annual rate as a percentage.
        tenure_months : int
            Maximum number of installments.
        emi : float
            Monthly installment.
        start_date : date
            Due date of the first installment.

        Returns
        -------
        LoanSummary
            Entries, totals and the closure date (``None`` if the loan is
            not paid off within ``tenure_months``).

        Raises
        ------
        InvalidLoanParametersError
            If principal, tenure or EMI is not positive, or the rate is negative.
        """
        self._validate_loan(principal, annual_interest_rate, tenure_months, emi)

        places = self.config.decimal_places
        tolerance = self.config.zero_tolerance
        r = monthly_rate(annual_interest_rate)

        balance = principal
        cumulative_principal = 0.0
        cumulative_interest = 0.0
        closure_date = None
        entries: list[AmortizationEntry] = []

        for month_number in range(1, tenure_months + 1):
            payment_date = add_months(start_date, month_number - 1)
            interest = balance * r
            principal_part = emi - interest
            payment = emi

            if principal_part >= balance:
                # Final installment
                principal_part = balance
                payment = balance + interest

            balance = max(0.0, balance - principal_part)
            cumulative_principal += principal_part
            cumulative_interest += interest

            entries.append(
                AmortizationEntry(
                    month_number=month_number,
                    payment_date=payment_date,
                    emi_paid=to_money(payment, places),
                    principal_portion=to_money(principal_part, places),
                    interest_portion=to_money(interest, places),
                    remaining_balance=to_money(balance, places),
                    cumulative_principal_paid=to_money(cumulative_principal, places),
                    cumulative_interest_paid=to_money(cumulative_interest, places),
                )
            )

            if balance <= tolerance:
                closure_date = payment_date
                break

        if closure_date is None:
            logger.debug(
                "Loan of %.2f at %.4f%% not repaid within %d months, %.2f outstanding",
                principal,
                annual_interest_rate,
                tenure_months,
                balance,
            )

        return LoanSummary(
            principal=principal,
            annual_interest_rate=annual_interest_rate,
            tenure_months=tenure_months,
            emi=emi,
            start_date=start_date,
            schedule=tuple(entries),
            total_amount_payable=to_money(cumulative_principal + cumulative_interest, places),
            total_interest_payable=to_money(cumulative_interest, places),
            expected_closure_date=closure_date,
        )

    def generate_contract_schedule(self, contract: Contract) -> LoanSummary | None:
        """Schedule for a reducing contract's original loan terms.

        Returns ``None`` for growing and fixed contracts.
        """
        metadata = contract.reducing_metadata
        if metadata is None:
            return None
        return self.generate_schedule(
            principal=metadata.principal_amount,
            annual_interest_rate=metadata.interest_rate_percent,
            tenure_months=metadata.tenure_months,
            emi=metadata.emi_amount,
            start_date=contract.start_date,
        )

    def _simulate_tenure(self, balance: float, r: float, emi: float) -> int:
        """Pay the balance down month by month, capped at ``max_simulation_months``."""
        tolerance = self.config.zero_tolerance
        months = 0
        while balance > tolerance and months < self.config.max_simulation_months:
            balance -= emi - balance * r
            months += 1
        return months

    def _validate_loan(
        self,
        principal: float,
        annual_interest_rate: float,
        tenure_months: int,
        emi: float,
    ) -> None:
        if principal <= 0:
            raise InvalidLoanParametersError(f"Principal must be positive, got {principal}")
        if annual_interest_rate < 0:
            raise InvalidLoanParametersError(
                f"Annual interest rate cannot be negative, got {annual_interest_rate}"
            )
        if tenure_months <= 0:
            raise InvalidLoanParametersError(f"Tenure must be positive, got {tenure_months}")
        if emi <= 0:
            raise InvalidLoanParametersError(f"EMI must be positive, got {emi}")
