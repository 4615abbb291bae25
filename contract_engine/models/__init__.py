"""Contract domain models."""

from contract_engine.models.contract import Contract
from contract_engine.models.enums import BillingCycle, ContractStatus, ContractType
from contract_engine.models.loan import AmortizationEntry, LoanStatusAtDate, LoanSummary
from contract_engine.models.metadata import (
    ContractMetadata,
    FixedContractMetadata,
    GrowingContractMetadata,
    ReducingContractMetadata,
)
from contract_engine.models.snapshot import ContractContribution, MonthlySnapshot, Projection

__all__ = [
    "AmortizationEntry",
    "BillingCycle",
    "Contract",
    "ContractContribution",
    "ContractMetadata",
    "ContractStatus",
    "ContractType",
    "FixedContractMetadata",
    "GrowingContractMetadata",
    "LoanStatusAtDate",
    "LoanSummary",
    "MonthlySnapshot",
    "Projection",
    "ReducingContractMetadata",
]
