"""Monthly execution engine.

Turns a list of contracts into a ``MonthlySnapshot`` for one calendar
month, advances contract state month by month, replays months a contract
missed, and chains both into multi-month projections.

Month flow for ``execute_month``:

1. Keep contracts that are active, started on or before the month and
   have not ended before it.
2. Work out each contract's contribution by type:

   - reducing: the EMI, split into interest (balance * monthly rate) and
     principal; the payable total still pending (remaining tenure * EMI)
     goes to ``total_debt``.
   - growing: the monthly contribution; ``total_invested`` goes to
     ``total_wealth``. No market appreciation is modelled.
   - fixed: the monthly amount; the coverage amount (or the monthly
     amount) goes to wealth for assets and to debt for liabilities.

3. Sum per type on unrounded floats and round once, into the snapshot.

The engine holds no state between calls. Projections and catch-up are
folds: each month's contract states feed the next month.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Callable, Iterable

from contract_engine.config import EngineConfig
from contract_engine.dates import months_between, next_month, previous_month
from contract_engine.engine.amortization import NEVER, LoanAmortizationEngine, TenureSentinel
from contract_engine.exceptions import InvalidLoanParametersError, InvalidPeriodError
from contract_engine.models.contract import Contract
from contract_engine.models.enums import ContractStatus, ContractType
from contract_engine.models.snapshot import ContractContribution, MonthlySnapshot, Projection
from contract_engine.money import to_money

logger = logging.getLogger(__name__)


class MonthlyExecutionEngine:
    """Deterministic month-by-month processor for a contract portfolio.

    Parameters
    ----------
    config : EngineConfig | None
        Numeric settings. Defaults to ``EngineConfig()``.
    amortization : LoanAmortizationEngine | None
        Loan calculator used for reducing contracts. Built from
        ``config`` when omitted.
    clock : Callable[[], datetime] | None
        Source of the ``generated_at`` stamp on snapshots. Defaults to
        ``datetime.now``; nothing else in the engine reads the clock.
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        amortization: LoanAmortizationEngine | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.config = config or EngineConfig()
        self.amortization = amortization or LoanAmortizationEngine(self.config)
        self._clock = clock or datetime.now

    # Snapshots

    def execute_month(
        self,
        contracts: Iterable[Contract],
        month: int,
        year: int,
        total_income: float = 0.0,
        include_breakdown: bool = True,
    ) -> MonthlySnapshot:
        """Build the snapshot for one month.

        Parameters
        ----------
        contracts : Iterable[Contract]
            Every contract; inapplicable ones are filtered out here.
        month : int
            Target month (1-12).
        year : int
            Target year.
        total_income : float
            Income for the month, supplied by the caller.
        include_breakdown : bool
            Attach per-contract contributions to the snapshot.

        Returns
        -------
        MonthlySnapshot
            Aggregates for the month. A month without applicable contracts
            yields zero outflows.

        Raises
        ------
        InvalidPeriodError
            If the month or year is out of range.
        """
        self._validate_month_year(month, year)

        places = self.config.decimal_places
        contracts = list(contracts)
        active = [c for c in contracts if c.is_active and c.is_applicable(month, year)]

        outflows = {contract_type: 0.0 for contract_type in ContractType}
        total_wealth = 0.0
        total_debt = 0.0
        contributions: list[ContractContribution] = []

        for contract in active:
            if contract.type is ContractType.REDUCING:
                contribution, amount, pending_debt = self._reducing_contribution(contract)
                total_debt += pending_debt
            elif contract.type is ContractType.GROWING:
                contribution, amount = self._growing_contribution(contract)
                total_wealth += contract.growing_metadata.total_invested
            else:
                contribution, amount = self._fixed_contribution(contract)
                fixed = contract.fixed_metadata
                held = (
                    fixed.coverage_amount
                    if fixed.coverage_amount is not None
                    else contract.monthly_amount
                )
                if fixed.is_liability:
                    total_debt += held
                else:
                    total_wealth += held

            outflows[contract.type] += amount
            if include_breakdown:
                contributions.append(contribution)

        reducing_outflow = to_money(outflows[ContractType.REDUCING], places)
        growing_outflow = to_money(outflows[ContractType.GROWING], places)
        fixed_outflow = to_money(outflows[ContractType.FIXED], places)

        logger.debug(
            "Executed %02d/%d: %d of %d contracts applicable",
            month,
            year,
            len(active),
            len(contracts),
            extra={"month": month, "year": year},
        )

        return MonthlySnapshot(
            month=month,
            year=year,
            total_income=to_money(total_income, places),
            mandatory_outflow=reducing_outflow + growing_outflow + fixed_outflow,
            reducing_outflow=reducing_outflow,
            growing_outflow=growing_outflow,
            fixed_outflow=fixed_outflow,
            active_contract_count=len(active),
            total_wealth=to_money(total_wealth, places),
            total_debt=to_money(total_debt, places),
            contract_breakdown=tuple(contributions) if include_breakdown else None,
            generated_at=self._clock(),
        )

    def generate_projection(
        self,
        contracts: Iterable[Contract],
        start_month: int,
        start_year: int,
        month_count: int,
        monthly_income: float = 0.0,
    ) -> Projection:
        """Project ``month_count`` months, advancing contract state after each.

        Raises
        ------
        InvalidPeriodError
            If the start month/year is out of range or ``month_count`` is
            not positive.
        """
        self._validate_month_year(start_month, start_year)
        if month_count <= 0:
            raise InvalidPeriodError(f"month_count must be positive, got {month_count}")

        current = list(contracts)
        snapshots: list[MonthlySnapshot] = []
        month, year = start_month, start_year

        for _ in range(month_count):
            snapshots.append(
                self.execute_month(current, month, year, monthly_income, include_breakdown=True)
            )
            current = self.advance_contracts(current, month, year)
            month, year = next_month(month, year)

        to_month, to_year = previous_month(month, year)
        logger.debug(
            "Projected %d months from %02d/%d to %02d/%d",
            month_count,
            start_month,
            start_year,
            to_month,
            to_year,
        )

        return Projection(
            snapshots=tuple(snapshots),
            final_contract_states=tuple(current),
            projected_from_month=start_month,
            projected_from_year=start_year,
            projected_to_month=to_month,
            projected_to_year=to_year,
        )

    def calculate_type_outflow(
        self,
        contracts: Iterable[Contract],
        contract_type: ContractType,
        start_month: int,
        start_year: int,
        month_count: int,
    ) -> Decimal:
        """Total outflow of one contract type across a projection."""
        projection = self.generate_projection(contracts, start_month, start_year, month_count)
        return sum(
            (snapshot.outflow_for(contract_type) for snapshot in projection.snapshots),
            Decimal("0.00"),
        )

    # State transitions

    def advance_contract(self, contract: Contract, month: int, year: int) -> Contract:
        """Apply one month of payments to a contract.

        Paused and closed contracts, and contracts not running in the
        given month, come back unchanged.
        """
        if not contract.is_active or not contract.is_applicable(month, year):
            return contract

        if contract.type is ContractType.REDUCING:
            return self._advance_reducing(contract)
        if contract.type is ContractType.GROWING:
            return self._advance_growing(contract)
        return contract

    def advance_contracts(
        self,
        contracts: Iterable[Contract],
        month: int,
        year: int,
    ) -> list[Contract]:
        """Advance every contract by the given month."""
        self._validate_month_year(month, year)
        return [self.advance_contract(contract, month, year) for contract in contracts]

    def catch_up_contract(self, contract: Contract, target_month: int, target_year: int) -> Contract:
        """Replay the months a contract missed before the target month.

        The number of months that should have been applied is the month
        distance from the contract's start month to the target month
        (exclusive). Months already applied are read from
        ``paid_installments`` / ``paid_months``; only the difference is
        replayed, so calling this twice gives the same result as once.
        """
        self._validate_month_year(target_month, target_year)

        if not contract.is_active or contract.type is ContractType.FIXED:
            return contract

        start = contract.start_date
        if (target_year, target_month) < (start.year, start.month):
            return contract

        expected = months_between(start, date(target_year, target_month, 1))
        applied = self._months_applied(contract)
        deficit = expected - applied
        if deficit <= 0:
            return contract

        year, month_index = divmod(start.year * 12 + start.month - 1 + applied, 12)
        month = month_index + 1

        current = contract
        for _ in range(deficit):
            if not current.is_active or year > self.config.max_year:
                break
            current = self.advance_contract(current, month, year)
            month, year = next_month(month, year)

        logger.debug(
            "Caught up contract %s by %d months to %02d/%d",
            contract.id,
            deficit,
            target_month,
            target_year,
            extra={"contract_id": contract.id, "month": target_month, "year": target_year},
        )
        return current

    def catch_up_contracts(
        self,
        contracts: Iterable[Contract],
        target_month: int,
        target_year: int,
    ) -> list[Contract]:
        return [self.catch_up_contract(c, target_month, target_year) for c in contracts]

    def apply_prepayment(self, contract: Contract, amount: float) -> Contract:
        """Pay an extra lump sum off a reducing contract's balance.

        The applied amount is capped at the outstanding balance and added to
        ``prepayments_made``. A balance that reaches zero closes the
        contract. Closed and non-reducing contracts are returned unchanged.

        Raises
        ------
        InvalidLoanParametersError
            If ``amount`` is negative.
        """
        if amount < 0:
            raise InvalidLoanParametersError(f"Prepayment amount cannot be negative, got {amount}")

        metadata = contract.reducing_metadata
        if metadata is None or contract.is_closed:
            return contract

        applied = min(amount, metadata.remaining_balance)
        new_balance = metadata.remaining_balance - applied
        status = contract.status
        if new_balance <= self.config.zero_tolerance:
            new_balance = 0.0
            status = ContractStatus.CLOSED

        return contract.with_changes(
            status=status,
            metadata=metadata.with_changes(
                remaining_balance=new_balance,
                prepayments_made=metadata.prepayments_made + applied,
            ),
        )

    # Solvers, for filling in the one loan parameter a user left blank

    def calculate_emi(
        self,
        principal: float,
        annual_interest_rate: float,
        tenure_months: int,
    ) -> float:
        return self.amortization.calculate_emi(principal, annual_interest_rate, tenure_months)

    def calculate_annual_interest_rate(
        self,
        principal: float,
        emi: float,
        tenure_months: int,
    ) -> float:
        return self.amortization.calculate_annual_interest_rate(principal, emi, tenure_months)

    def calculate_remaining_tenure(
        self,
        balance: float,
        annual_interest_rate: float,
        emi: float,
    ) -> int | TenureSentinel:
        return self.amortization.calculate_remaining_tenure(balance, annual_interest_rate, emi)

    # Helpers

    def _reducing_contribution(
        self, contract: Contract
    ) -> tuple[ContractContribution, float, float]:
        places = self.config.decimal_places
        metadata = contract.reducing_metadata
        rate = metadata.interest_rate_percent
        emi = metadata.emi_amount

        interest, principal, new_balance = self.amortization.split_installment(
            metadata.remaining_balance, rate, emi
        )

        remaining = self.amortization.calculate_remaining_tenure(new_balance, rate, emi)
        if remaining is NEVER:
            pending_debt = new_balance
        else:
            pending_debt = remaining * emi

        contribution = ContractContribution(
            contract_id=contract.id,
            contract_name=contract.name,
            contract_type=contract.type,
            amount=to_money(emi, places),
            principal_portion=to_money(principal, places),
            interest_portion=to_money(interest, places),
            new_balance=to_money(new_balance, places),
        )
        return contribution, emi, pending_debt

    def _growing_contribution(self, contract: Contract) -> tuple[ContractContribution, float]:
        places = self.config.decimal_places
        metadata = contract.growing_metadata
        contribution = ContractContribution(
            contract_id=contract.id,
            contract_name=contract.name,
            contract_type=contract.type,
            amount=to_money(contract.monthly_amount, places),
            new_invested_total=to_money(metadata.total_invested + contract.monthly_amount, places),
        )
        return contribution, contract.monthly_amount

    def _fixed_contribution(self, contract: Contract) -> tuple[ContractContribution, float]:
        contribution = ContractContribution(
            contract_id=contract.id,
            contract_name=contract.name,
            contract_type=contract.type,
            amount=to_money(contract.monthly_amount, self.config.decimal_places),
        )
        return contribution, contract.monthly_amount

    def _advance_reducing(self, contract: Contract) -> Contract:
        metadata = contract.reducing_metadata
        tolerance = self.config.zero_tolerance

        if metadata.remaining_balance <= tolerance:
            return contract.close()

        _, _, new_balance = self.amortization.split_installment(
            metadata.remaining_balance,
            metadata.interest_rate_percent,
            metadata.emi_amount,
        )
        status = contract.status
        if new_balance <= tolerance:
            new_balance = 0.0
            status = ContractStatus.CLOSED

        return contract.with_changes(
            status=status,
            metadata=metadata.with_changes(
                remaining_balance=new_balance,
                paid_installments=metadata.paid_installments + 1,
            ),
        )

    def _advance_growing(self, contract: Contract) -> Contract:
        metadata = contract.growing_metadata
        return contract.with_changes(
            metadata=metadata.with_changes(
                total_invested=metadata.total_invested + contract.monthly_amount,
                current_value=metadata.current_value + contract.monthly_amount,
                paid_months=metadata.paid_months + 1,
            ),
        )

    def _months_applied(self, contract: Contract) -> int:
        if contract.type is ContractType.REDUCING:
            return contract.reducing_metadata.paid_installments
        if contract.type is ContractType.GROWING:
            return contract.growing_metadata.paid_months
        return 0

    def _validate_month_year(self, month: int, year: int) -> None:
        if month < 1 or month > 12:
            raise InvalidPeriodError(f"Month must be between 1 and 12, got {month}")
        if year < self.config.min_year or year > self.config.max_year:
            raise InvalidPeriodError(
                f"Year must be between {self.config.min_year} and {self.config.max_year}, got {year}"
            )
