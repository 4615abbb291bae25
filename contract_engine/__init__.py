"""Deterministic projection engine for recurring financial contracts."""

from contract_engine.config import EngineConfig
from contract_engine.engine import (
    NEVER,
    LoanAmortizationEngine,
    MonthlyExecutionEngine,
    TenureSentinel,
)
from contract_engine.models import (
    AmortizationEntry,
    BillingCycle,
    Contract,
    ContractContribution,
    ContractStatus,
    ContractType,
    FixedContractMetadata,
    GrowingContractMetadata,
    LoanStatusAtDate,
    LoanSummary,
    MonthlySnapshot,
    Projection,
    ReducingContractMetadata,
)

__version__ = "0.1.0"

__all__ = [
    "NEVER",
    "AmortizationEntry",
    "BillingCycle",
    "Contract",
    "ContractContribution",
    "ContractStatus",
    "ContractType",
    "EngineConfig",
    "FixedContractMetadata",
    "GrowingContractMetadata",
    "LoanAmortizationEngine",
    "LoanStatusAtDate",
    "LoanSummary",
    "MonthlyExecutionEngine",
    "MonthlySnapshot",
    "Projection",
    "ReducingContractMetadata",
    "TenureSentinel",
]
