"""Custom exception hierarchy for contract-engine."""


class ContractEngineError(Exception):
    """Base exception for all contract-engine errors."""


class InvalidPeriodError(ContractEngineError, ValueError):
    """Raised when a month, year or month count is out of range."""


class InvalidLoanParametersError(ContractEngineError, ValueError):
    """Raised when loan inputs have an invalid shape (non-positive principal, tenure, EMI)."""


class InvalidContractError(ContractEngineError, ValueError):
    """Raised when a contract value violates its own invariants."""


class ConfigurationError(ContractEngineError):
    """Raised when configuration is invalid or missing."""
