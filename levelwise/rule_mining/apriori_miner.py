"""
Apriori front-end.

Runs the level-wise itemset search and the rule derivation engine on raw
data and converts their output to the dict records shared by all miners.
"""
import time
from typing import Dict, List, Tuple, Any, Union

from levelwise.data.itemset import Itemset
from levelwise.data.rule import Rule
from levelwise.data.database import TransactionDatabase
from levelwise.rule_mining.apriori import AprioriItemsetMiner
from levelwise.rule_mining.base import (
    HybridMiner, MiningInput, absolute_support, rule_metrics, to_database
)
from levelwise.rule_mining.rule_generation import RuleGenerator
from levelwise.rule_mining.support import SupportMode


class AprioriMiner(HybridMiner):
    """
    Level-wise Apriori miner.

    Can generate:
    - Frequent itemsets, with exact or lower-bound supports depending on support_mode
    - Association rules, obtained by enlarging consequents while confidence holds
    """

    def __init__(
        self,
        min_support: Union[int, float] = 0.01,
        min_confidence: float = 0.5,
        max_items: int = None,
        support_mode: Union[SupportMode, str] = SupportMode.PARTIAL_THEN_REFINE,
        items_col: str = None,
        n_jobs: int = 1,
        verbose: bool = False,
        **kwargs
    ):
        """
        Initialize Apriori miner.

        Args:
            min_support: Minimum support, as a fraction in (0, 1] or an absolute count
            min_confidence: Minimum confidence threshold (inclusive)
            max_items: Maximum number of items in an itemset or rule
            support_mode: How supports are counted during the search
            items_col: DataFrame column holding item lists, if the input has one
            n_jobs: Number of joblib workers used to join candidates
            verbose: Show progress bars
        """
        super().__init__(min_support, min_confidence, max_items, **kwargs)
        self.support_mode = SupportMode.coerce(support_mode)
        self.items_col = items_col
        self.n_jobs = n_jobs
        self.verbose = verbose

        self.database: TransactionDatabase = None
        self.frequent_levels: List[List[Itemset]] = []
        self.rule_levels: List[List[Rule]] = []

    def _run_search(self, data: MiningInput) -> int:
        self.database = to_database(data, items_col=self.items_col)
        min_count = absolute_support(self.min_support, self.database.n_transactions)
        miner = AprioriItemsetMiner(
            self.database,
            support_mode=self.support_mode,
            max_len=self.max_items,
            n_jobs=self.n_jobs,
            verbose=self.verbose
        )
        self.frequent_levels = miner.mine(min_count)
        return min_count

    def mine_itemsets(self, data: MiningInput) -> Tuple[List[Dict[str, Any]], Dict[str, Any]]:
        """
        Mine frequent itemsets.

        Args:
            data: Transactions (DataFrame, list of item lists or TransactionDatabase)

        Returns:
            Tuple of (itemsets, stats)
        """
        start_time = time.time()
        min_count = self._run_search(data)

        itemsets = [
            self._itemset_record(itemset)
            for level in self.frequent_levels
            for itemset in level
        ]

        execution_time = time.time() - start_time

        stats = {
            'num_itemsets': len(itemsets),
            'num_transactions': self.database.n_transactions,
            'min_support_count': min_count,
            'levels': len(self.frequent_levels),
            'execution_time': execution_time,
            'average_support': sum(i['support'] for i in itemsets) / len(itemsets) if itemsets else 0.0,
            'support_mode': self.support_mode.value,
            'algorithm': 'Apriori',
            'mode': 'itemsets'
        }

        return itemsets, stats

    def mine_rules(self, data: MiningInput) -> Tuple[List[Dict[str, Any]], Dict[str, Any]]:
        """
        Mine association rules.

        Args:
            data: Transactions (DataFrame, list of item lists or TransactionDatabase)

        Returns:
            Tuple of (rules, stats)
        """
        start_time = time.time()
        min_count = self._run_search(data)

        generator = RuleGenerator(self.database, verbose=self.verbose)
        generator.derive_rules(self.frequent_levels, self.min_confidence)
        self.rule_levels = generator.levels

        # Consequent supports are only needed for the derived metrics
        self.database.compute_support(
            rule.consequent for level in self.rule_levels for rule in level
        )

        rules = [
            self._rule_record(rule, level_idx)
            for level_idx, level in enumerate(self.rule_levels)
            for rule in level
        ]

        execution_time = time.time() - start_time

        stats = {
            'num_rules': len(rules),
            'num_transactions': self.database.n_transactions,
            'min_support_count': min_count,
            'levels': len(self.rule_levels),
            'execution_time': execution_time,
            'average_support': sum(r['support'] for r in rules) / len(rules) if rules else 0.0,
            'average_confidence': sum(r['confidence'] for r in rules) / len(rules) if rules else 0.0,
            'average_zhangs_metric': sum(r['zhangs_metric'] for r in rules) / len(rules) if rules else 0.0,
            'average_interestingness': sum(r['interestingness'] for r in rules) / len(rules) if rules else 0.0,
            'algorithm': 'Apriori',
            'mode': 'rules'
        }

        return rules, stats

    def _itemset_record(self, itemset: Itemset) -> Dict[str, Any]:
        return {
            'items': itemset.sorted_items(),
            'support': self.database.relative_support(itemset.support),
            'support_count': itemset.support,
            'length': len(itemset),
            'exact_support': itemset.support_is_exact
        }

    def _rule_record(self, rule: Rule, level: int) -> Dict[str, Any]:
        support = self.database.relative_support(rule.support)
        confidence = rule.confidence
        consequent_support = self.database.relative_support(rule.consequent.support)

        record = {
            'antecedents': rule.antecedent.sorted_items(),
            'consequents': rule.consequent.sorted_items(),
            'support': support,
            'confidence': confidence
        }
        record.update(rule_metrics(support, confidence, consequent_support))
        record['level'] = level
        return record

    def __repr__(self):
        return (f"AprioriMiner(min_support={self.min_support}, "
                f"min_confidence={self.min_confidence}, max_items={self.max_items}, "
                f"support_mode='{self.support_mode.value}')")
