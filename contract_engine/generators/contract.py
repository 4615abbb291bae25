"""Sample contract generator."""

from __future__ import annotations

import random
from datetime import date
from typing import Iterator

from contract_engine.dates import add_months
from contract_engine.engine.amortization import LoanAmortizationEngine
from contract_engine.generators.base import BaseGenerator
from contract_engine.models import (
    BillingCycle,
    Contract,
    ContractStatus,
    ContractType,
    FixedContractMetadata,
    GrowingContractMetadata,
    ReducingContractMetadata,
)


class ContractGenerator(BaseGenerator):
    """Generate realistic loans, investments and subscriptions.

    Start dates fall up to ``max_age_months`` before ``as_of``; every
    generated contract is fresh (no installments or months applied yet),
    so callers catch it up before projecting.

    Parameters
    ----------
    as_of : date
        Reference date; no contract starts in a later month.
    seed : int | None
        Random seed for reproducibility.
    max_age_months : int
        Oldest allowed start date, in months before ``as_of``.
    """

    CONTRACT_TYPES = list(ContractType)
    CONTRACT_TYPE_WEIGHTS = [0.30, 0.30, 0.40]

    # loan_type: (principal range, annual rate range %, tenure choices)
    LOAN_PROFILES = {
        "home": ((1_500_000, 8_000_000), (7.5, 9.5), [180, 240, 300]),
        "car": ((300_000, 1_500_000), (8.0, 11.0), [36, 48, 60, 84]),
        "personal": ((50_000, 800_000), (10.5, 18.0), [12, 24, 36, 60]),
        "education": ((200_000, 2_000_000), (8.5, 12.0), [60, 84, 120]),
    }

    # investment_type: (monthly contribution range, expected return range %)
    INVESTMENT_PROFILES = {
        "sip": ((1_000, 25_000), (10.0, 14.0)),
        "rd": ((500, 10_000), (6.0, 7.5)),
        "ppf": ((500, 12_500), (7.0, 7.5)),
    }

    # category: (amount range per cycle, is_liability)
    FIXED_PROFILES = {
        "subscription": ((149, 1_499), True),
        "insurance": ((5_000, 60_000), True),
        "rent": ((8_000, 60_000), True),
        "utility": ((500, 5_000), True),
        "chit_fund": ((2_000, 20_000), False),
    }

    def __init__(
        self,
        as_of: date,
        seed: int | None = None,
        max_age_months: int = 36,
    ) -> None:
        super().__init__(seed)
        self.as_of = as_of
        self.max_age_months = max_age_months
        self._amortization = LoanAmortizationEngine()

    def generate(self, contract_type: ContractType | None = None) -> Contract:
        """Generate a single contract.

        Parameters
        ----------
        contract_type : ContractType | None
            Type to generate; picked at random when omitted.

        Returns
        -------
        Contract
            Generated active contract.
        """
        if contract_type is None:
            contract_type = random.choices(
                self.CONTRACT_TYPES, weights=self.CONTRACT_TYPE_WEIGHTS, k=1
            )[0]

        if contract_type is ContractType.REDUCING:
            return self.generate_reducing()
        if contract_type is ContractType.GROWING:
            return self.generate_growing()
        return self.generate_fixed()

    def generate_batch(self, count: int) -> Iterator[Contract]:
        """Generate multiple contracts of random types.

        Parameters
        ----------
        count : int
            Number of contracts to generate.

        Yields
        ------
        Contract
            Generated contracts.
        """
        for _ in range(count):
            yield self.generate()

    def generate_portfolio(
        self,
        num_reducing: int,
        num_growing: int,
        num_fixed: int,
    ) -> list[Contract]:
        """Generate a household portfolio with a fixed count per type."""
        portfolio = [self.generate_reducing() for _ in range(num_reducing)]
        portfolio.extend(self.generate_growing() for _ in range(num_growing))
        portfolio.extend(self.generate_fixed() for _ in range(num_fixed))
        return portfolio

    def generate_reducing(self, loan_type: str | None = None) -> Contract:
        """Generate a loan with a consistent EMI."""
        loan_type = loan_type or random.choice(list(self.LOAN_PROFILES))
        principal_range, rate_range, tenures = self.LOAN_PROFILES[loan_type]

        principal = self._amount(*principal_range, step=1000)
        rate = round(random.uniform(*rate_range), 2)
        tenure = random.choice(tenures)
        emi = round(self._amortization.calculate_emi(principal, rate, tenure), 2)
        lender = self.fake.company()
        start_date = self._start_date()

        return Contract(
            id=self.fake.uuid4(),
            name=f"{loan_type.title()} Loan - {lender}",
            type=ContractType.REDUCING,
            status=ContractStatus.ACTIVE,
            start_date=start_date,
            end_date=add_months(start_date, tenure),
            monthly_amount=emi,
            metadata=ReducingContractMetadata(
                principal_amount=principal,
                interest_rate_percent=rate,
                tenure_months=tenure,
                remaining_balance=principal,
                emi_amount=emi,
                lender_name=lender,
                loan_type=loan_type,
                account_number=self.fake.numerify("##########"),
            ),
            tags=("loan", loan_type),
        )

    def generate_growing(self, investment_type: str | None = None) -> Contract:
        """Generate a recurring investment."""
        investment_type = investment_type or random.choice(list(self.INVESTMENT_PROFILES))
        amount_range, return_range = self.INVESTMENT_PROFILES[investment_type]

        monthly = self._amount(*amount_range, step=100)
        provider = self.fake.company()

        return Contract(
            id=self.fake.uuid4(),
            name=f"{investment_type.upper()} - {provider}",
            type=ContractType.GROWING,
            status=ContractStatus.ACTIVE,
            start_date=self._start_date(),
            monthly_amount=monthly,
            metadata=GrowingContractMetadata(
                total_invested=0.0,
                current_value=0.0,
                expected_return_percent=round(random.uniform(*return_range), 2),
                target_amount=monthly * random.choice([60, 120, 180]),
                investment_type=investment_type,
                provider_name=provider,
                sip_date=random.randint(1, 28),
            ),
            tags=("investment", investment_type),
        )

    def generate_fixed(self, category: str | None = None) -> Contract:
        """Generate a subscription, policy, rent or fixed asset."""
        category = category or random.choice(list(self.FIXED_PROFILES))
        amount_range, is_liability = self.FIXED_PROFILES[category]

        cycle = BillingCycle.YEARLY if category == "insurance" else BillingCycle.MONTHLY
        cycle_amount = self._amount(*amount_range)
        provider = self.fake.company()
        start_date = self._start_date()

        return Contract(
            id=self.fake.uuid4(),
            name=f"{category.replace('_', ' ').title()} - {provider}",
            type=ContractType.FIXED,
            status=ContractStatus.ACTIVE,
            start_date=start_date,
            monthly_amount=round(cycle.to_monthly(cycle_amount), 2),
            metadata=FixedContractMetadata(
                billing_cycle=cycle,
                auto_renew=random.random() < 0.8,
                is_liability=is_liability,
                coverage_amount=(
                    float(random.randint(10, 100) * 100_000) if category == "insurance" else None
                ),
                category=category,
                renewal_date=add_months(start_date, cycle.months),
                provider_name=provider,
            ),
            tags=(category,),
        )

    def _start_date(self) -> date:
        months_back = random.randint(0, self.max_age_months)
        start = add_months(self.as_of, -months_back)
        return start.replace(day=random.randint(1, 28))
