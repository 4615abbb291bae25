"""Household budget scenario: a generated portfolio projected forward."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

from contract_engine.config import EngineConfig, ScenarioConfig
from contract_engine.engine.execution import MonthlyExecutionEngine
from contract_engine.generators.contract import ContractGenerator
from contract_engine.models import Contract, Projection

logger = logging.getLogger(__name__)


class HouseholdBudgetScenario:
    """Generate a household's contracts and project its monthly budget.

    This scenario:
    - Generates loans, investments and fixed commitments that started
      before the projection start month
    - Catches every contract up to the start month
    - Projects ``projection_months`` months of snapshots
    """

    def __init__(
        self,
        config: ScenarioConfig,
        seed: int | None = None,
        engine_config: EngineConfig | None = None,
    ) -> None:
        """Initialize household budget scenario.

        Parameters
        ----------
        config : ScenarioConfig
            Contract counts, income and projection window.
        seed : int | None
            Random seed for reproducibility.
        engine_config : EngineConfig | None
            Numeric settings for the execution engine.
        """
        self.config = config
        self.seed = seed
        self.engine = MonthlyExecutionEngine(config=engine_config)
        self._generator = ContractGenerator(
            as_of=date(config.start_year, config.start_month, 1),
            seed=seed,
        )
        self.contracts: list[Contract] = []
        self.projection: Projection | None = None

    def generate(self) -> Projection:
        """Generate the portfolio and run the projection.

        Returns
        -------
        Projection
            Monthly snapshots and final contract states.
        """
        cfg = self.config
        logger.info(
            "Starting household scenario '%s': %d loans, %d investments, %d fixed",
            cfg.name,
            cfg.num_reducing,
            cfg.num_growing,
            cfg.num_fixed,
            extra={"scenario": cfg.name},
        )

        generated = self._generator.generate_portfolio(
            cfg.num_reducing,
            cfg.num_growing,
            cfg.num_fixed,
        )
        self.contracts = self.engine.catch_up_contracts(generated, cfg.start_month, cfg.start_year)
        logger.info(
            "Caught up %d contracts to %02d/%d",
            len(self.contracts),
            cfg.start_month,
            cfg.start_year,
            extra={"scenario": cfg.name},
        )

        self.projection = self.engine.generate_projection(
            self.contracts,
            cfg.start_month,
            cfg.start_year,
            cfg.projection_months,
            monthly_income=cfg.monthly_income,
        )
        logger.info(
            "Projected %d months, total outflow %s, deficit months %d",
            self.projection.month_count,
            self.projection.total_mandatory_outflow,
            sum(1 for s in self.projection.snapshots if s.is_deficit),
            extra={"scenario": cfg.name},
        )
        return self.projection

    def get_summary(self) -> dict[str, Any]:
        """Headline figures of the last projection (empty before ``generate``)."""
        if self.projection is None:
            return {}

        last = self.projection.last_snapshot
        return {
            "scenario": self.config.name,
            "months": self.projection.month_count,
            "total_income": self.projection.total_income,
            "total_outflow": self.projection.total_mandatory_outflow,
            "total_free_balance": self.projection.total_free_balance,
            "closing_debt": last.total_debt,
            "closing_wealth": last.total_wealth,
            "closed_contracts": sum(
                1 for c in self.projection.final_contract_states if c.is_closed
            ),
            "labels": dict(self.config.labels),
        }
