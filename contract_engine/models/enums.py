"""Enumeration types for contract entities."""

from enum import Enum


class ContractType(str, Enum):
    REDUCING = "reducing"  # loans, EMIs
    GROWING = "growing"  # SIPs, savings
    FIXED = "fixed"  # subscriptions, insurance, rent

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


class ContractStatus(str, Enum):
    ACTIVE = "active"
    PAUSED = "paused"
    CLOSED = "closed"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    @property
    def allows_updates(self) -> bool:
        """Only active contracts take part in monthly advances."""
        return self is ContractStatus.ACTIVE

    @property
    def is_terminal(self) -> bool:
        return self is ContractStatus.CLOSED


class BillingCycle(str, Enum):
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    HALF_YEARLY = "half_yearly"
    YEARLY = "yearly"

    @property
    def months(self) -> int:
        return _CYCLE_MONTHS[self]

    @property
    def display_name(self) -> str:
        return self.value.replace("_", " ").title()

    def to_monthly(self, amount: float) -> float:
        """Normalise an amount billed once per cycle to a monthly amount."""
        return amount / self.months


_CYCLE_MONTHS = {
    BillingCycle.MONTHLY: 1,
    BillingCycle.QUARTERLY: 3,
    BillingCycle.HALF_YEARLY: 6,
    BillingCycle.YEARLY: 12,
}
