"""Loan amortization and monthly execution engines."""

from contract_engine.engine.amortization import (
    NEVER,
    LoanAmortizationEngine,
    TenureSentinel,
    monthly_rate,
)
from contract_engine.engine.execution import MonthlyExecutionEngine

__all__ = [
    "NEVER",
    "LoanAmortizationEngine",
    "MonthlyExecutionEngine",
    "TenureSentinel",
    "monthly_rate",
]
