"""Pytest configuration and fixtures."""

from datetime import date, datetime

import pytest

from contract_engine.engine import LoanAmortizationEngine, MonthlyExecutionEngine
from contract_engine.models import (
    BillingCycle,
    Contract,
    ContractStatus,
    ContractType,
    FixedContractMetadata,
    GrowingContractMetadata,
    ReducingContractMetadata,
)

FIXED_NOW = datetime(2026, 1, 15, 9, 30, 0)


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def fixed_clock():
    """Clock that always returns the same instant."""
    return lambda: FIXED_NOW


@pytest.fixture
def amortization() -> LoanAmortizationEngine:
    """Loan calculator with default settings."""
    return LoanAmortizationEngine()


@pytest.fixture
def engine(fixed_clock) -> MonthlyExecutionEngine:
    """Execution engine with a frozen clock."""
    return MonthlyExecutionEngine(clock=fixed_clock)


@pytest.fixture
def home_loan(amortization: LoanAmortizationEngine) -> Contract:
    """5,000,000 home loan at 8.5% over 20 years."""
    emi = round(amortization.calculate_emi(5_000_000, 8.5, 240), 2)
    return Contract(
        id="loan-home-001",
        name="Home Loan",
        type=ContractType.REDUCING,
        status=ContractStatus.ACTIVE,
        start_date=date(2024, 1, 10),
        monthly_amount=emi,
        metadata=ReducingContractMetadata(
            principal_amount=5_000_000.0,
            interest_rate_percent=8.5,
            tenure_months=240,
            remaining_balance=5_000_000.0,
            emi_amount=emi,
            lender_name="Test Bank",
            loan_type="home",
        ),
    )


@pytest.fixture
def zero_rate_loan() -> Contract:
    """Interest-free 500,000 loan repaid at 10,000 a month."""
    return Contract(
        id="loan-zero-001",
        name="Family Loan",
        type=ContractType.REDUCING,
        status=ContractStatus.ACTIVE,
        start_date=date(2025, 1, 1),
        monthly_amount=10_000.0,
        metadata=ReducingContractMetadata(
            principal_amount=500_000.0,
            interest_rate_percent=0.0,
            tenure_months=50,
            remaining_balance=500_000.0,
            emi_amount=10_000.0,
        ),
    )


@pytest.fixture
def sip() -> Contract:
    """Monthly 5,000 SIP."""
    return Contract(
        id="sip-001",
        name="Index Fund SIP",
        type=ContractType.GROWING,
        status=ContractStatus.ACTIVE,
        start_date=date(2025, 6, 5),
        monthly_amount=5_000.0,
        metadata=GrowingContractMetadata(
            total_invested=0.0,
            current_value=0.0,
            expected_return_percent=12.0,
            target_amount=600_000.0,
            investment_type="sip",
            sip_date=5,
        ),
    )


@pytest.fixture
def subscription() -> Contract:
    """Monthly streaming subscription."""
    return Contract(
        id="sub-001",
        name="Streaming",
        type=ContractType.FIXED,
        status=ContractStatus.ACTIVE,
        start_date=date(2024, 3, 1),
        monthly_amount=499.0,
        metadata=FixedContractMetadata(
            billing_cycle=BillingCycle.MONTHLY,
            is_liability=True,
            category="subscription",
        ),
    )


@pytest.fixture
def gold_asset() -> Contract:
    """Fixed monthly purchase held as an asset."""
    return Contract(
        id="asset-001",
        name="Gold Savings",
        type=ContractType.FIXED,
        status=ContractStatus.ACTIVE,
        start_date=date(2024, 6, 1),
        monthly_amount=10_000.0,
        metadata=FixedContractMetadata(is_liability=False, category="gold"),
    )


@pytest.fixture
def portfolio(
    zero_rate_loan: Contract,
    sip: Contract,
    subscription: Contract,
    gold_asset: Contract,
) -> list[Contract]:
    """One contract of every kind."""
    return [zero_rate_loan, sip, subscription, gold_asset]
