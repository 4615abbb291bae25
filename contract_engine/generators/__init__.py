"""Sample contract generators."""

from contract_engine.generators.base import BaseGenerator
from contract_engine.generators.contract import ContractGenerator

__all__ = ["BaseGenerator", "ContractGenerator"]
