"""Config package init."""
from secretvars.contract.config.contract_config import ContractConfig
from secretvars.contract.config.validator import ConfigValidator
__all__ = ["ContractConfig", "ConfigValidator"]
