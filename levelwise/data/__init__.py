"""
Data structures consumed by the mining engines: itemsets, rules and the
transaction database that counts their support.
"""
from .itemset import Itemset, SupportNotComputedError
from .rule import Rule, simple_rules
from .database import TransactionDatabase

__all__ = [
    'Itemset',
    'SupportNotComputedError',
    'Rule',
    'simple_rules',
    'TransactionDatabase'
]
