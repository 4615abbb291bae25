"""Monthly snapshot and projection models."""

import calendar
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal

from contract_engine.dates import month_start
from contract_engine.models.contract import Contract
from contract_engine.models.enums import ContractType
from contract_engine.money import zero_money


@dataclass(frozen=True)
class ContractContribution:
    """What one contract contributes to a month."""

    contract_id: str
    contract_name: str
    contract_type: ContractType
    amount: Decimal
    principal_portion: Decimal | None = None  # reducing only
    interest_portion: Decimal | None = None  # reducing only
    new_balance: Decimal | None = None  # reducing only
    new_invested_total: Decimal | None = None  # growing only


@dataclass(frozen=True)
class MonthlySnapshot:
    """Aggregated financial picture for one calendar month.

    Money fields are rounded once, when the snapshot is built, so
    ``mandatory_outflow`` always equals the sum of the three per-type
    outflows. ``total_income`` is supplied by the caller and never derived
    from contracts. ``generated_at`` is bookkeeping only and does not take
    part in equality.
    """

    month: int
    year: int
    total_income: Decimal
    mandatory_outflow: Decimal
    reducing_outflow: Decimal
    growing_outflow: Decimal
    fixed_outflow: Decimal
    active_contract_count: int
    total_wealth: Decimal
    total_debt: Decimal
    contract_breakdown: tuple[ContractContribution, ...] | None = None
    generated_at: datetime | None = field(default=None, compare=False)

    @classmethod
    def empty(
        cls,
        month: int,
        year: int,
        total_income: Decimal = Decimal("0.00"),
        generated_at: datetime | None = None,
    ) -> "MonthlySnapshot":
        """Snapshot for a month with no applicable contracts."""
        zero = zero_money()
        return cls(
            month=month,
            year=year,
            total_income=total_income,
            mandatory_outflow=zero,
            reducing_outflow=zero,
            growing_outflow=zero,
            fixed_outflow=zero,
            active_contract_count=0,
            total_wealth=zero,
            total_debt=zero,
            contract_breakdown=(),
            generated_at=generated_at,
        )

    @property
    def free_balance(self) -> Decimal:
        """Income left after mandatory payments (negative when overspending)."""
        return self.total_income - self.mandatory_outflow

    @property
    def savings_rate_percent(self) -> float:
        if self.total_income <= 0:
            return 0.0
        return float(self.free_balance / self.total_income * 100)

    @property
    def is_deficit(self) -> bool:
        return self.free_balance < 0

    @property
    def has_no_contracts(self) -> bool:
        return self.active_contract_count == 0

    @property
    def month_date(self) -> date:
        return month_start(self.year, self.month)

    @property
    def month_name(self) -> str:
        return calendar.month_name[self.month]

    @property
    def display_month(self) -> str:
        return f"{self.month_name} {self.year}"

    def outflow_for(self, contract_type: ContractType) -> Decimal:
        if contract_type is ContractType.REDUCING:
            return self.reducing_outflow
        if contract_type is ContractType.GROWING:
            return self.growing_outflow
        return self.fixed_outflow

    def __str__(self) -> str:
        return (
            f"MonthlySnapshot({self.display_month}: income={self.total_income}, "
            f"outflow={self.mandatory_outflow}, free={self.free_balance}, "
            f"contracts={self.active_contract_count})"
        )


@dataclass(frozen=True)
class Projection:
    """Result of a multi-month projection."""

    snapshots: tuple[MonthlySnapshot, ...]
    final_contract_states: tuple[Contract, ...]
    projected_from_month: int
    projected_from_year: int
    projected_to_month: int
    projected_to_year: int

    @property
    def month_count(self) -> int:
        return len(self.snapshots)

    @property
    def total_mandatory_outflow(self) -> Decimal:
        return sum((s.mandatory_outflow for s in self.snapshots), Decimal("0.00"))

    @property
    def total_income(self) -> Decimal:
        return sum((s.total_income for s in self.snapshots), Decimal("0.00"))

    @property
    def total_free_balance(self) -> Decimal:
        return self.total_income - self.total_mandatory_outflow

    @property
    def average_monthly_outflow(self) -> Decimal:
        if not self.snapshots:
            return Decimal("0.00")
        return self.total_mandatory_outflow / len(self.snapshots)

    @property
    def first_snapshot(self) -> MonthlySnapshot | None:
        return self.snapshots[0] if self.snapshots else None

    @property
    def last_snapshot(self) -> MonthlySnapshot | None:
        return self.snapshots[-1] if self.snapshots else None
