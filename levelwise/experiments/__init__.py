from .config import (
    DataConfig,
    AprioriConfig,
    MLxtendConfig,
    FilterConfig,
    RuleMiningConfig,
    ExperimentConfig
)
from .base import (
    load_data,
    run_rule_mining,
    create_miner,
    apply_filters,
    select_itemsets
)

__all__ = [
    'DataConfig',
    'AprioriConfig',
    'MLxtendConfig',
    'FilterConfig',
    'RuleMiningConfig',
    'ExperimentConfig',
    'load_data',
    'run_rule_mining',
    'create_miner',
    'apply_filters',
    'select_itemsets'
]
