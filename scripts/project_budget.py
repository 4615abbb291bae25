#!/usr/bin/env python3
"""Project a sample household budget month by month.

Generates a seeded portfolio of loans, investments and fixed commitments,
catches it up to the start month and prints one line per projected month.
Optionally writes the full projection as JSON.
"""

import argparse
import json
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from contract_engine.config import EngineConfig, ScenarioConfig
from contract_engine.logging import setup_logging
from contract_engine.scenarios import HouseholdBudgetScenario
from contract_engine.serialization import projection_report


def print_projection(scenario: HouseholdBudgetScenario) -> None:
    """Print the monthly table and closing summary."""
    projection = scenario.projection
    print(f"{'Month':<16}{'Outflow':>14}{'Free':>14}{'Debt':>18}{'Wealth':>14}")
    print("-" * 76)
    for snapshot in projection.snapshots:
        marker = "  !" if snapshot.is_deficit else ""
        print(
            f"{snapshot.display_month:<16}{snapshot.mandatory_outflow:>14,}"
            f"{snapshot.free_balance:>14,}{snapshot.total_debt:>18,}"
            f"{snapshot.total_wealth:>14,}{marker}"
        )

    print("-" * 76)
    for key, value in scenario.get_summary().items():
        print(f"  {key:<20} {value}")


def main() -> None:
    """Run the household projection."""
    parser = argparse.ArgumentParser(description="Project a sample household budget")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    parser.add_argument("--months", type=int, default=12, help="Months to project (default: 12)")
    parser.add_argument("--start", type=str, default="2026-01", help="Start month as YYYY-MM")
    parser.add_argument("--income", type=float, default=150000.0, help="Monthly income")
    parser.add_argument("--loans", type=int, default=2, help="Number of loans")
    parser.add_argument("--investments", type=int, default=2, help="Number of investments")
    parser.add_argument("--fixed", type=int, default=3, help="Number of fixed commitments")
    parser.add_argument("--json", type=Path, default=None, help="Write the projection to this file")
    parser.add_argument("--log-format", choices=["standard", "json"], default="standard")
    args = parser.parse_args()

    engine_config = EngineConfig.from_env()
    setup_logging(level=engine_config.log_level, format_type=args.log_format)

    start_year, start_month = (int(part) for part in args.start.split("-"))
    config = ScenarioConfig(
        name="household",
        num_reducing=args.loans,
        num_growing=args.investments,
        num_fixed=args.fixed,
        monthly_income=args.income,
        projection_months=args.months,
        start_month=start_month,
        start_year=start_year,
    )
    scenario = HouseholdBudgetScenario(config, seed=args.seed, engine_config=engine_config)
    projection = scenario.generate()

    print_projection(scenario)

    if args.json is not None:
        with open(args.json, "w", encoding="utf-8") as f:
            json.dump(projection_report(projection), f, indent=2, ensure_ascii=False)
        print(f"\nSaved {projection.month_count} snapshots to {args.json}")


if __name__ == "__main__":
    main()
