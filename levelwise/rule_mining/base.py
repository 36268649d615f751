"""
Base interfaces for rule mining front-ends.

A front-end accepts raw data (DataFrame, list of transactions or a
TransactionDatabase), runs a mining algorithm and returns plain dict records
together with run statistics.
"""
import math
import numbers
from abc import ABC, abstractmethod
from typing import Dict, List, Tuple, Any, Union

import pandas as pd

from levelwise.data.database import TransactionDatabase

MiningInput = Union[pd.DataFrame, TransactionDatabase, List[List[Any]]]


def to_database(data: MiningInput, items_col: str = None) -> TransactionDatabase:
    """Wrap any accepted input into a TransactionDatabase."""
    if isinstance(data, TransactionDatabase):
        return data
    if isinstance(data, pd.DataFrame):
        return TransactionDatabase.from_dataframe(data, items_col=items_col)
    return TransactionDatabase(data)


def absolute_support(min_support: Union[int, float], n_transactions: int) -> int:
    """
    Convert a support threshold to a transaction count.

    Integers are absolute counts. Floats are fractions in (0, 1] of the
    number of transactions.
    """
    if isinstance(min_support, bool):
        raise ValueError(f"min_support must be a number, got {min_support!r}")
    if isinstance(min_support, numbers.Integral):
        return int(min_support)
    if not 0.0 < min_support <= 1.0:
        raise ValueError(
            f"Fractional min_support must be within the interval (0, 1], got {min_support}"
        )
    # Rounding first absorbs float noise such as 0.6 * 5 == 3.0000000000000004
    return math.ceil(round(min_support * n_transactions, 9))


class FrequentItemsetMiner(ABC):
    """
    Base class for frequent itemset mining algorithms.

    These algorithms discover frequent co-occurring items without forming
    rules (no antecedent -> consequent structure).
    """

    def __init__(self, min_support: Union[int, float] = 0.01, **kwargs):
        self.min_support = min_support
        self.config = kwargs

    @abstractmethod
    def mine_itemsets(self, data: MiningInput) -> Tuple[List[Dict[str, Any]], Dict[str, Any]]:
        """
        Mine frequent itemsets from data.

        Args:
            data: Transactions (DataFrame, list of item lists or TransactionDatabase)

        Returns:
            Tuple of (itemsets, stats) where:
                itemsets: List of dicts with keys 'items' (sorted list), 'support' (float),
                          'support_count' (int), 'length' (int) and 'exact_support' (bool)
                stats: Dict with mining statistics (execution_time, num_itemsets, etc.)
        """
        pass


class AssociationRuleMiner(ABC):
    """
    Base class for association rule mining algorithms.

    These algorithms discover rules in the form: antecedent -> consequent
    with quality metrics (support, confidence, etc.).
    """

    def __init__(
        self,
        min_support: Union[int, float] = 0.01,
        min_confidence: float = 0.5,
        **kwargs
    ):
        self.min_support = min_support
        self.min_confidence = min_confidence
        self.config = kwargs

    @abstractmethod
    def mine_rules(self, data: MiningInput) -> Tuple[List[Dict[str, Any]], Dict[str, Any]]:
        """
        Mine association rules from data.

        Args:
            data: Transactions (DataFrame, list of item lists or TransactionDatabase)

        Returns:
            Tuple of (rules, stats) where:
                rules: List of dicts with keys:
                    - 'antecedents': sorted list of items (left-hand side)
                    - 'consequents': sorted list of items (right-hand side)
                    - 'support': float
                    - 'confidence': float
                    - 'lift', 'leverage', 'conviction', 'zhangs_metric', 'interestingness'
                stats: Dict with mining statistics
        """
        pass


class HybridMiner(FrequentItemsetMiner, AssociationRuleMiner):
    """
    Base class for algorithms that produce both frequent itemsets and association rules.

    max_items bounds the total number of items of an itemset, hence of a
    rule (antecedent and consequent together).
    """

    def __init__(
        self,
        min_support: Union[int, float] = 0.01,
        min_confidence: float = 0.5,
        max_items: int = None,
        **kwargs
    ):
        """
        Initialize hybrid miner with both support and confidence thresholds.

        Args:
            min_support: Minimum support, as a fraction in (0, 1] or an absolute count
            min_confidence: Minimum confidence threshold
            max_items: Maximum number of items in an itemset or rule
            **kwargs: Additional configuration
        """
        AssociationRuleMiner.__init__(self, min_support, min_confidence, **kwargs)
        self.max_items = max_items

    @abstractmethod
    def mine_itemsets(self, data: MiningInput) -> Tuple[List[Dict[str, Any]], Dict[str, Any]]:
        """Mine frequent itemsets."""
        pass

    @abstractmethod
    def mine_rules(self, data: MiningInput) -> Tuple[List[Dict[str, Any]], Dict[str, Any]]:
        """Mine association rules."""
        pass


def rule_metrics(
    support: float,
    confidence: float,
    consequent_support: float
) -> Dict[str, float]:
    """
    Derived interestingness measures of a rule, from relative supports.

    Returns:
        Dict with lift, leverage, conviction, zhangs_metric and interestingness
    """
    antecedent_support = support / confidence if confidence > 0 else 0.0
    lift = confidence / consequent_support if consequent_support > 0 else 0.0
    leverage = support - antecedent_support * consequent_support

    if confidence < 1.0:
        conviction = (1.0 - consequent_support) / (1.0 - confidence)
    else:
        conviction = float('inf')

    if 0 < consequent_support < 1:
        if confidence >= consequent_support:
            zhangs_metric = (confidence - consequent_support) / (1 - consequent_support)
        else:
            zhangs_metric = (confidence - consequent_support) / consequent_support
    else:
        zhangs_metric = 0.0

    return {
        'lift': lift,
        'leverage': leverage,
        'conviction': conviction,
        'zhangs_metric': round(zhangs_metric, 4),
        'interestingness': round(support * confidence, 4)
    }
