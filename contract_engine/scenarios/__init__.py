"""Scenarios for projecting sample household budgets."""

from contract_engine.scenarios.household import HouseholdBudgetScenario

__all__ = ["HouseholdBudgetScenario"]
