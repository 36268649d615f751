"""
levelwise: frequent itemsets and association rules with the level-wise Apriori search.
"""
import logging

from .data import Itemset, Rule, SupportNotComputedError, TransactionDatabase
from .rule_mining import (
    AprioriItemsetMiner,
    AprioriMiner,
    MLxtendMiner,
    RuleGenerator,
    SupportMode,
    derive_rules
)

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Attach a stream handler to the package logger (for scripts)."""
    logger = logging.getLogger(__name__)
    if not any(getattr(h, '_levelwise', False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
        handler._levelwise = True
        logger.addHandler(handler)
    logger.setLevel(level)
    return logger


__all__ = [
    'Itemset',
    'Rule',
    'SupportNotComputedError',
    'TransactionDatabase',
    'AprioriItemsetMiner',
    'AprioriMiner',
    'MLxtendMiner',
    'RuleGenerator',
    'SupportMode',
    'derive_rules',
    'setup_logging'
]
