"""Type-specific contract metadata.

The three metadata classes form a closed union, ``ContractMetadata``.
Each variant names the ``ContractType`` it belongs to so a contract can
check that its metadata matches its ``type``.
"""

from dataclasses import dataclass, field, replace
from datetime import date
from typing import ClassVar, Union

from contract_engine.exceptions import InvalidContractError
from contract_engine.models.enums import BillingCycle, ContractType


@dataclass(frozen=True)
class ReducingContractMetadata:
    """Loan / EMI details."""

    contract_type: ClassVar[ContractType] = ContractType.REDUCING

    principal_amount: float
    interest_rate_percent: float  # Annual, e.g. 8.5 for 8.5%
    tenure_months: int
    remaining_balance: float
    emi_amount: float
    paid_installments: int = 0
    prepayments_made: float = 0.0
    lender_name: str | None = None
    loan_type: str | None = None  # home, car, personal, education...
    account_number: str | None = None

    def __post_init__(self) -> None:
        if self.remaining_balance < 0:
            raise InvalidContractError(
                f"remaining_balance cannot be negative, got {self.remaining_balance}"
            )

    @property
    def monthly_interest_rate(self) -> float:
        return self.interest_rate_percent / 12 / 100

    @property
    def remaining_installments(self) -> int:
        return self.tenure_months - self.paid_installments

    @property
    def progress_percent(self) -> float:
        """Share of scheduled installments already paid (0.0 to 1.0)."""
        if self.tenure_months <= 0:
            return 0.0
        return self.paid_installments / self.tenure_months

    @property
    def total_paid(self) -> float:
        return self.paid_installments * self.emi_amount + self.prepayments_made

    def with_changes(self, **changes) -> "ReducingContractMetadata":
        return replace(self, **changes)


@dataclass(frozen=True)
class GrowingContractMetadata:
    """Investment / SIP details."""

    contract_type: ClassVar[ContractType] = ContractType.GROWING

    total_invested: float
    current_value: float
    paid_months: int = 0
    expected_return_percent: float | None = None
    target_amount: float | None = None
    target_date: date | None = None
    investment_type: str | None = None  # mutual_fund, sip, fd, rd...
    provider_name: str | None = None
    folio_number: str | None = None
    sip_date: int | None = None  # Day of month, 1-31
    asset_allocation: dict[str, float] | None = field(default=None, hash=False)

    @property
    def absolute_returns(self) -> float:
        return self.current_value - self.total_invested

    @property
    def returns_percent(self) -> float:
        if self.total_invested <= 0:
            return 0.0
        return self.absolute_returns / self.total_invested * 100

    @property
    def target_progress(self) -> float | None:
        if not self.target_amount or self.target_amount <= 0:
            return None
        return self.current_value / self.target_amount

    def with_changes(self, **changes) -> "GrowingContractMetadata":
        return replace(self, **changes)


@dataclass(frozen=True)
class FixedContractMetadata:
    """Subscription, insurance, fixed asset or liability details."""

    contract_type: ClassVar[ContractType] = ContractType.FIXED

    billing_cycle: BillingCycle = BillingCycle.MONTHLY
    auto_renew: bool = True
    is_liability: bool = True
    coverage_amount: float | None = None
    category: str | None = None  # insurance, subscription, utility, rent...
    renewal_date: date | None = None
    provider_name: str | None = None
    policy_number: str | None = None
    beneficiaries: tuple[str, ...] = ()
    payment_method: str | None = None
    reminder_days: int | None = None

    def is_renewal_due_within(self, days: int, today: date) -> bool:
        """Whether the renewal date falls within ``days`` of ``today`` (inclusive)."""
        if self.renewal_date is None:
            return False
        diff = (self.renewal_date - today).days
        return 0 <= diff <= days

    def with_changes(self, **changes) -> "FixedContractMetadata":
        return replace(self, **changes)


ContractMetadata = Union[
    ReducingContractMetadata,
    GrowingContractMetadata,
    FixedContractMetadata,
]
