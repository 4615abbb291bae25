"""Configuration management for contract-engine."""

from dataclasses import dataclass, field
from typing import Any

from contract_engine.exceptions import ConfigurationError

# Residual balance below which a loan counts as fully paid
ZERO_TOLERANCE = 0.01

# Decimal places applied to aggregate and display money fields
DECIMAL_PLACES = 2

# Cap for the month-by-month tenure simulation (100 years)
MAX_SIMULATION_MONTHS = 1200

RATE_SEARCH_UPPER_PERCENT = 500.0
RATE_SEARCH_ITERATIONS = 40

MIN_YEAR = 1900
MAX_YEAR = 2100


@dataclass(frozen=True)
class EngineConfig:
    """Numeric settings shared by the amortization and execution engines."""

    zero_tolerance: float = ZERO_TOLERANCE
    decimal_places: int = DECIMAL_PLACES
    max_simulation_months: int = MAX_SIMULATION_MONTHS
    rate_search_upper_percent: float = RATE_SEARCH_UPPER_PERCENT
    rate_search_iterations: int = RATE_SEARCH_ITERATIONS
    min_year: int = MIN_YEAR
    max_year: int = MAX_YEAR
    log_level: str = "INFO"

    def validate(self) -> "EngineConfig":
        """Check the settings are usable.

        Returns
        -------
        EngineConfig
            ``self``, so calls can be chained.

        Raises
        ------
        ConfigurationError
            If any setting is out of range.
        """
        if self.zero_tolerance <= 0:
            raise ConfigurationError(f"zero_tolerance must be positive, got {self.zero_tolerance}")
        if self.decimal_places < 0:
            raise ConfigurationError(f"decimal_places cannot be negative, got {self.decimal_places}")
        if self.max_simulation_months <= 0:
            raise ConfigurationError(
                f"max_simulation_months must be positive, got {self.max_simulation_months}"
            )
        if self.rate_search_upper_percent <= 0:
            raise ConfigurationError(
                f"rate_search_upper_percent must be positive, got {self.rate_search_upper_percent}"
            )
        if self.rate_search_iterations <= 0:
            raise ConfigurationError(
                f"rate_search_iterations must be positive, got {self.rate_search_iterations}"
            )
        if self.min_year > self.max_year:
            raise ConfigurationError(
                f"min_year ({self.min_year}) is greater than max_year ({self.max_year})"
            )
        return self

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Create config from environment variables."""
        import os

        try:
            config = cls(
                zero_tolerance=float(
                    os.getenv("CONTRACT_ENGINE_ZERO_TOLERANCE", str(ZERO_TOLERANCE))
                ),
                decimal_places=int(
                    os.getenv("CONTRACT_ENGINE_DECIMAL_PLACES", str(DECIMAL_PLACES))
                ),
                max_simulation_months=int(
                    os.getenv("CONTRACT_ENGINE_MAX_SIMULATION_MONTHS", str(MAX_SIMULATION_MONTHS))
                ),
                rate_search_iterations=int(
                    os.getenv("CONTRACT_ENGINE_RATE_ITERATIONS", str(RATE_SEARCH_ITERATIONS))
                ),
                log_level=os.getenv("LOG_LEVEL", "INFO"),
            )
        except ValueError as exc:
            raise ConfigurationError(f"Invalid contract-engine environment setting: {exc}") from exc

        return config.validate()


@dataclass
class ScenarioConfig:
    """Configuration for a household budget scenario."""

    name: str
    num_reducing: int = 2
    num_growing: int = 2
    num_fixed: int = 3
    monthly_income: float = 150000.0
    projection_months: int = 12
    start_month: int = 1
    start_year: int = 2026
    labels: dict[str, Any] = field(default_factory=dict)
