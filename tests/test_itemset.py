import pytest

from levelwise.data.itemset import Itemset, SupportNotComputedError
from levelwise.data.rule import Rule, simple_rules


def test_equality_ignores_insertion_order() -> None:
    assert Itemset(['B', 'A']) == Itemset(['A', 'B'])
    assert hash(Itemset(['B', 'A'])) == hash(Itemset(['A', 'B']))
    assert len({Itemset(['A', 'B']), Itemset(['B', 'A'])}) == 1


def test_duplicate_items_collapse() -> None:
    itemset = Itemset(['A', 'A', 'B'])
    itemset.add('B')
    assert len(itemset) == 2
    assert list(itemset) == ['A', 'B']


def test_string_is_not_split_into_characters() -> None:
    with pytest.raises(TypeError):
        Itemset('milk')
    assert Itemset(['milk']).items == frozenset({'milk'})


def test_support_unset_raises() -> None:
    with pytest.raises(SupportNotComputedError):
        Itemset(['A']).support
    assert not Itemset(['A']).has_support


def test_attach_support() -> None:
    itemset = Itemset(['A'])
    itemset.attach_support(3, exact=False)
    assert itemset.support == 3
    assert not itemset.support_is_exact
    itemset.attach_support(4)
    assert itemset.support_is_exact


def test_mutation_resets_support() -> None:
    itemset = Itemset(['A', 'B'])
    itemset.attach_support(2)
    itemset.remove('B')
    assert not itemset.has_support
    with pytest.raises(KeyError):
        itemset.remove('Z')


def test_clone_is_independent() -> None:
    original = Itemset(['A', 'B'])
    original.attach_support(5)
    copy = original.clone()
    assert copy == original and copy.support == 5
    copy.add('C')
    assert 'C' not in original
    assert original.support == 5


def test_union() -> None:
    union = Itemset(['A']).union(Itemset(['B', 'C']))
    assert union.items == frozenset({'A', 'B', 'C'})
    assert not union.has_support


def test_subsets() -> None:
    subsets = Itemset(['A', 'B', 'C']).subsets()
    assert subsets == [Itemset(['B', 'C']), Itemset(['A', 'C']), Itemset(['A', 'B'])]
    assert all(len(s) == 2 for s in subsets)


def test_join_sharing_all_but_one_item() -> None:
    assert Itemset(['A', 'B']).join(Itemset(['A', 'C'])) == Itemset(['A', 'B', 'C'])
    assert Itemset(['A']).join(Itemset(['B'])) == Itemset(['A', 'B'])


@pytest.mark.parametrize("left, right", [
    (['A', 'B'], ['C', 'D']),
    (['A', 'B'], ['A', 'B']),
    (['A'], ['A', 'B']),
])
def test_join_failures_return_none(left, right) -> None:
    assert Itemset(left).join(Itemset(right)) is None


def test_simple_rules() -> None:
    rules = simple_rules(Itemset(['A', 'B', 'C']))
    assert {(r.antecedent.items, r.consequent.items) for r in rules} == {
        (frozenset('BC'), frozenset('A')),
        (frozenset('AC'), frozenset('B')),
        (frozenset('AB'), frozenset('C')),
    }
    assert simple_rules(Itemset(['A'])) == []


def test_rule_sides_must_be_disjoint() -> None:
    with pytest.raises(ValueError):
        Rule(Itemset(['A', 'B']), Itemset(['B']))


def test_rule_confidence_requires_support() -> None:
    rule = Rule(Itemset(['A']), Itemset(['B']))
    with pytest.raises(SupportNotComputedError):
        rule.confidence
    rule.antecedent.attach_support(3)
    rule.numerator.attach_support(2)
    assert rule.confidence == pytest.approx(2 / 3)


def test_rule_compute_confidence(abc_database) -> None:
    rule = Rule(Itemset(['A', 'B']), Itemset(['C']))
    assert rule.compute_confidence(abc_database) == 0.5
    assert rule.antecedent.support == 2 and rule.antecedent.support_is_exact
    assert rule.numerator.support == 1 and rule.numerator.support_is_exact


def test_rule_confidence_zero_antecedent_support() -> None:
    rule = Rule(Itemset(['A']), Itemset(['B']))
    rule.antecedent.attach_support(0)
    rule.numerator.attach_support(0)
    assert rule.confidence == 0.0


def test_derive_rules_moves_one_item() -> None:
    parent = Rule(Itemset(['A', 'B', 'C']), Itemset(['D']))
    derived = parent.derive_rules()
    assert len(derived) == 3
    for rule in derived:
        assert len(rule.antecedent) == len(parent.antecedent) - 1
        assert len(rule.consequent) == len(parent.consequent) + 1
        assert rule.numerator == parent.numerator
        assert not rule.antecedent.has_support


def test_single_item_antecedent_is_terminal() -> None:
    assert Rule(Itemset(['A']), Itemset(['B', 'C'])).derive_rules() == []


def test_rule_str() -> None:
    assert str(Rule(Itemset(['B', 'A']), Itemset(['C']))) == "Rule: A B -> C"
