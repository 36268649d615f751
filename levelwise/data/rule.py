"""
Association rule data structure.

A rule pairs an antecedent itemset with a disjoint consequent itemset. Its
confidence is the support of the union of both sides (the numerator) divided
by the support of the antecedent.
"""
from typing import List, Tuple

from levelwise.data.itemset import Itemset


class Rule:
    """Association rule: antecedent -> consequent."""

    __slots__ = ('antecedent', 'consequent', 'numerator')

    def __init__(self, antecedent: Itemset, consequent: Itemset):
        if antecedent.items & consequent.items:
            raise ValueError(
                f"Antecedent and consequent overlap: {sorted(antecedent.items & consequent.items)}"
            )
        self.antecedent = antecedent
        self.consequent = consequent
        self.numerator = antecedent.union(consequent)

    @property
    def key(self) -> Tuple[frozenset, frozenset]:
        return self.antecedent.items, self.consequent.items

    @property
    def support(self) -> int:
        return self.numerator.support

    @property
    def confidence(self) -> float:
        """
        Confidence of the rule.

        Raises:
            SupportNotComputedError: if either support has not been attached
        """
        numerator_support = self.numerator.support
        antecedent_support = self.antecedent.support
        if antecedent_support == 0:
            return 0.0
        return numerator_support / antecedent_support

    def compute_confidence(self, database) -> float:
        database.compute_support([self.antecedent, self.numerator])
        return self.confidence

    def derive_rules(self) -> List['Rule']:
        """
        Derive the rules obtained by moving one antecedent item to the consequent.

        A rule needs an antecedent of at least two items to be derived, so
        that every derived antecedent keeps at least one item.
        """
        derived = []
        if len(self.antecedent) < 2:
            return derived

        for item in self.antecedent:
            antecedent = self.antecedent.clone()
            consequent = self.consequent.clone()
            antecedent.remove(item)
            consequent.add(item)
            derived.append(Rule(antecedent, consequent))
        return derived

    def __eq__(self, other) -> bool:
        if not isinstance(other, Rule):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)

    def __repr__(self):
        return f"Rule({self.antecedent!r} -> {self.consequent!r})"

    def __str__(self):
        antecedent = ' '.join(str(item) for item in self.antecedent)
        consequent = ' '.join(str(item) for item in self.consequent)
        return f"Rule: {antecedent} -> {consequent}"


def simple_rules(itemset: Itemset) -> List[Rule]:
    """
    Generate the one-item-consequent rules of an itemset.

    Args:
        itemset: Frequent itemset with at least two items

    Returns:
        One rule per item, that item forming the consequent
    """
    if len(itemset) < 2:
        return []
    return [
        Rule(Itemset(itemset.items - {item}), Itemset([item]))
        for item in itemset
    ]
