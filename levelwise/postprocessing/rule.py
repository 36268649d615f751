from typing import Any, Dict, List, Tuple


def filter_rules(rules, criterion: str, threshold: float):
    """
    Filters rules based on a criterion >= threshold.

    Args:
        rules: List of rule dictionaries
        criterion: The rule metric to filter on (e.g., 'support', 'confidence', 'lift')
        threshold: Minimum value for the criterion (inclusive)

    Returns:
        List of rules meeting the criterion
    """
    return [rule for rule in rules if rule.get(criterion, float("-inf")) >= threshold]


def filter_rules_by_pattern(
    rules,
    antecedent_contains: list = None,
    consequent_contains: list = None,
    antecedent_excludes: list = None,
    consequent_excludes: list = None,
    match_any: bool = False
):
    """
    Filter rules by antecedent/consequent patterns.

    Patterns are matched case-insensitively as substrings of the string form
    of each item, so 'milk' matches both 'milk' and 'product__milk'.

    Args:
        rules: List of rule dictionaries
        antecedent_contains: List of patterns that must appear in antecedent
        consequent_contains: List of patterns that must appear in consequent
        antecedent_excludes: List of patterns that must NOT appear in antecedent
        consequent_excludes: List of patterns that must NOT appear in consequent
        match_any: If True, match if ANY pattern matches. If False, ALL must match.

    Returns:
        List of filtered rules
    """
    def normalize_itemset(val):
        """Convert itemset to a set of lower-cased strings for matching."""
        if val is None:
            return set()
        if isinstance(val, str):
            return {val.lower()}
        if isinstance(val, (list, tuple, set, frozenset)):
            return {str(item).lower() for item in val}
        return {str(val).lower()}

    def matches_patterns(itemset, patterns, match_any_pattern):
        if not patterns:
            return True
        itemset_normalized = normalize_itemset(itemset)
        patterns_lower = [p.lower() for p in patterns]
        check = any if match_any_pattern else all
        return check(
            any(p in item for item in itemset_normalized)
            for p in patterns_lower
        )

    def excludes_patterns(itemset, patterns):
        if not patterns:
            return True
        itemset_normalized = normalize_itemset(itemset)
        return not any(
            any(p.lower() in item for item in itemset_normalized)
            for p in patterns
        )

    filtered = []
    for rule in rules:
        ant = rule.get('antecedents')
        cons = rule.get('consequents')

        if (matches_patterns(ant, antecedent_contains, match_any)
                and matches_patterns(cons, consequent_contains, match_any)
                and excludes_patterns(ant, antecedent_excludes)
                and excludes_patterns(cons, consequent_excludes)):
            filtered.append(rule)

    return filtered


def filter_rules_by_consequent(rules, targets: list, match_any: bool = True):
    """Keep only rules whose consequent matches the target patterns."""
    return filter_rules_by_pattern(rules, consequent_contains=targets, match_any=match_any)


def filter_rules_by_antecedent(rules, patterns: list, match_any: bool = True):
    """Keep only rules whose antecedent matches the patterns."""
    return filter_rules_by_pattern(rules, antecedent_contains=patterns, match_any=match_any)


def filter_itemsets(itemsets, criterion: str = 'support', threshold: float = 0.0):
    """
    Filters frequent itemsets based on a criterion >= threshold.
    Returns both filtered itemsets and a stats dictionary.

    Args:
        itemsets: List of itemset dictionaries (each with 'items' and 'support' keys)
        criterion: The metric to filter on (default: 'support')
        threshold: Minimum value for the criterion (inclusive)

    Returns:
        Tuple of (filtered_itemsets, stats)
    """
    filtered_itemset_list = [itemset for itemset in itemsets if itemset.get(criterion, float("-inf")) >= threshold]

    count = len(filtered_itemset_list)
    if count == 0:
        stats = {
            "num_itemsets": 0,
            "average_support": 0.0,
        }
        return filtered_itemset_list, stats

    avg_support = sum(item.get("support", 0) for item in filtered_itemset_list) / count

    stats = {
        "num_itemsets": count,
        "average_support": round(avg_support, 3),
    }

    return filtered_itemset_list, stats


def maximal_itemsets(itemsets: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Keep the itemsets that have no frequent proper superset.

    Args:
        itemsets: Frequent itemset records

    Returns:
        Maximal itemsets, in input order
    """
    keyed = [(frozenset(record['items']), record) for record in itemsets]
    return [
        record for items, record in keyed
        if not any(items < other for other, _ in keyed)
    ]


def closed_itemsets(itemsets: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Keep the itemsets that have no proper superset with the same support.

    Supports must be exact: a lower bound from a partial count cannot tell a
    closed itemset from a non-closed one.

    Raises:
        ValueError: if any record carries an inexact support
    """
    inexact = [record['items'] for record in itemsets if not record.get('exact_support', True)]
    if inexact:
        raise ValueError(
            f"Closed itemsets need exact supports; {len(inexact)} itemsets only have a lower bound "
            f"(e.g. {inexact[0]}). Mine with support_mode 'partial_then_refine' or 'always_exact'."
        )

    keyed: List[Tuple[frozenset, Dict[str, Any]]] = [
        (frozenset(record['items']), record) for record in itemsets
    ]
    return [
        record for items, record in keyed
        if not any(
            items < other and other_record['support_count'] == record['support_count']
            for other, other_record in keyed
        )
    ]
