"""Contract entity: one recurring financial commitment."""

from dataclasses import dataclass, replace
from datetime import date, datetime

from contract_engine.dates import months_between
from contract_engine.exceptions import InvalidContractError
from contract_engine.models.enums import ContractStatus, ContractType
from contract_engine.models.metadata import (
    ContractMetadata,
    FixedContractMetadata,
    GrowingContractMetadata,
    ReducingContractMetadata,
)


@dataclass(frozen=True)
class Contract:
    """A loan, investment or subscription tracked month by month.

    Contracts are immutable. Every transition (pause, resume, close, a
    monthly advance, a prepayment) returns a new ``Contract``; the
    original value is never modified.

    ``monthly_amount`` depends on ``type``: the EMI for reducing
    contracts, the monthly contribution for growing ones, and the
    normalised monthly payment for fixed ones.

    Computed accessors that depend on the current date take it as an
    argument instead of reading the system clock.
    """

    id: str
    name: str
    type: ContractType
    status: ContractStatus
    start_date: date
    monthly_amount: float
    metadata: ContractMetadata
    end_date: date | None = None
    description: str | None = None
    tags: tuple[str, ...] = ()
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        metadata_type = getattr(self.metadata, "contract_type", None)
        if metadata_type is None:
            raise InvalidContractError(
                f"Contract {self.id} has unsupported metadata {type(self.metadata).__name__}"
            )
        if metadata_type is not self.type:
            raise InvalidContractError(
                f"Contract {self.id} is {self.type.value} but carries "
                f"{metadata_type.value} metadata"
            )

    # Status

    @property
    def is_active(self) -> bool:
        return self.status is ContractStatus.ACTIVE

    @property
    def is_paused(self) -> bool:
        return self.status is ContractStatus.PAUSED

    @property
    def is_closed(self) -> bool:
        return self.status is ContractStatus.CLOSED

    @property
    def can_update(self) -> bool:
        return self.status.allows_updates

    # Dates

    @property
    def is_indefinite(self) -> bool:
        return self.end_date is None

    @property
    def duration_months(self) -> int | None:
        if self.end_date is None:
            return None
        return months_between(self.start_date, self.end_date)

    def elapsed_months(self, now: date) -> int:
        """Calendar months from the start date to ``now`` (0 before the start)."""
        if now < self.start_date:
            return 0
        return months_between(self.start_date, now)

    def remaining_months(self, now: date) -> int | None:
        """Calendar months left until the end date (``None`` when indefinite)."""
        if self.end_date is None:
            return None
        if now > self.end_date:
            return 0
        return months_between(now, self.end_date)

    def has_ended(self, now: date) -> bool:
        if self.end_date is None:
            return False
        return now > self.end_date

    def is_applicable(self, month: int, year: int) -> bool:
        """Whether the contract runs during the given calendar month.

        The contract must have started in or before that month and, if it
        has an end date, must not have ended in an earlier month.
        """
        if (self.start_date.year, self.start_date.month) > (year, month):
            return False
        if self.end_date is not None and (year, month) > (self.end_date.year, self.end_date.month):
            return False
        return True

    @property
    def annual_amount(self) -> float:
        return self.monthly_amount * 12

    # Typed metadata access; None on a type mismatch

    @property
    def reducing_metadata(self) -> ReducingContractMetadata | None:
        if isinstance(self.metadata, ReducingContractMetadata):
            return self.metadata
        return None

    @property
    def growing_metadata(self) -> GrowingContractMetadata | None:
        if isinstance(self.metadata, GrowingContractMetadata):
            return self.metadata
        return None

    @property
    def fixed_metadata(self) -> FixedContractMetadata | None:
        if isinstance(self.metadata, FixedContractMetadata):
            return self.metadata
        return None

    # Transitions

    def with_changes(self, **changes) -> "Contract":
        """Return a copy with the named fields replaced."""
        return replace(self, **changes)

    def pause(self) -> "Contract":
        if self.status is not ContractStatus.ACTIVE:
            return self
        return self.with_changes(status=ContractStatus.PAUSED)

    def resume(self) -> "Contract":
        if self.status is not ContractStatus.PAUSED:
            return self
        return self.with_changes(status=ContractStatus.ACTIVE)

    def close(self) -> "Contract":
        if self.status.is_terminal:
            return self
        return self.with_changes(status=ContractStatus.CLOSED)

    def __str__(self) -> str:
        return (
            f"Contract(id={self.id}, name={self.name}, type={self.type.display_name}, "
            f"status={self.status.display_name}, monthly_amount={self.monthly_amount})"
        )
