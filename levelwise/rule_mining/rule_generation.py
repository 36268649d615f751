"""
Level-wise association rule derivation.

Level 0 holds the rules with a single-item consequent built from every
frequent itemset. Level n+1 moves one antecedent item of each surviving
level-n rule into its consequent. Confidence is not anti-monotonic across
these moves, so every derived rule is evaluated again.
"""
import logging
from typing import Dict, Iterable, List, Sequence

from tqdm.auto import tqdm

from levelwise.data.itemset import Itemset
from levelwise.data.rule import Rule, simple_rules
from levelwise.data.database import TransactionDatabase

logger = logging.getLogger(__name__)


class RuleGenerator:
    """Derive association rules from frequent itemset levels."""

    def __init__(self, database: TransactionDatabase, verbose: bool = False):
        self.database = database
        self.verbose = verbose
        self.levels: List[List[Rule]] = []

    def derive_rules(
        self,
        frequent_levels: Sequence[Iterable[Itemset]],
        min_confidence: float
    ) -> List[Rule]:
        """
        Generate every rule reaching the minimum confidence.

        Args:
            frequent_levels: Frequent itemsets grouped by size
            min_confidence: Minimum confidence (inclusive)

        Returns:
            Surviving rules of all levels, level 0 first
        """
        self.levels = []
        level = self._evaluate(self._simple_rules(frequent_levels), min_confidence)

        while level:
            self.levels.append(level)
            logger.info("Rule level %d: %d rules", len(self.levels) - 1, len(level))
            level = self._evaluate(self._derived_rules(level), min_confidence)

        return [rule for level in self.levels for rule in level]

    def _simple_rules(self, frequent_levels: Sequence[Iterable[Itemset]]) -> List[Rule]:
        candidates = []
        for level in frequent_levels:
            for itemset in level:
                candidates.extend(simple_rules(itemset))
        return candidates

    def _derived_rules(self, rules: List[Rule]) -> List[Rule]:
        rules_iter = tqdm(rules, desc="Deriving rules", unit="rule") if self.verbose else rules
        candidates = []
        for rule in rules_iter:
            candidates.extend(rule.derive_rules())
        return candidates

    def _evaluate(self, candidates: List[Rule], min_confidence: float) -> List[Rule]:
        """Count the supports of each candidate and keep those reaching min_confidence."""
        unique: Dict[tuple, Rule] = {}
        for rule in candidates:
            unique.setdefault(rule.key, rule)
        candidates = list(unique.values())

        itemsets = []
        for rule in candidates:
            itemsets.append(rule.antecedent)
            itemsets.append(rule.numerator)
        self.database.compute_support(itemsets)

        return [rule for rule in candidates if rule.confidence >= min_confidence]


def derive_rules(
    database: TransactionDatabase,
    frequent_levels: Sequence[Iterable[Itemset]],
    min_confidence: float
) -> List[Rule]:
    """Functional shortcut for RuleGenerator(database).derive_rules(...)."""
    return RuleGenerator(database).derive_rules(frequent_levels, min_confidence)
