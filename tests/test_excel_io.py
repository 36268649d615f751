import pandas as pd

from levelwise.utils.excel_io import (
    format_rule_for_excel,
    save_experiment_results,
    save_rule_mining_results,
    save_rules_text,
)

RULES = [
    {'antecedents': ['color__red', 'size__S'], 'consequents': ['label__yes'],
     'support': 0.25, 'confidence': 0.8, 'lift': 1.6, 'level': 0},
    {'antecedents': ['bread'], 'consequents': ['milk', 'eggs'],
     'support': 0.1, 'confidence': 1.0, 'conviction': float('inf'), 'level': 1},
]


def test_format_rule_for_excel() -> None:
    formatted = format_rule_for_excel(RULES[0])
    assert formatted['antecedents'] == 'color=red AND size=S'
    assert formatted['consequents'] == 'label=yes'
    assert RULES[0]['antecedents'] == ['color__red', 'size__S']


def test_format_non_string_items() -> None:
    formatted = format_rule_for_excel({'antecedents': [1, 2], 'consequents': [3]})
    assert formatted['antecedents'] == '1 AND 2'
    assert formatted['consequents'] == '3'


def test_save_rule_mining_results(tmp_path) -> None:
    itemsets = [{'items': ['bread', 'milk'], 'support': 0.4, 'support_count': 4}]
    path = save_rule_mining_results(
        RULES,
        {'num_rules': 2},
        tmp_path / "results",
        parameters={'min_support': 0.1},
        metadata={'dataset': 'baskets'},
        itemsets=itemsets
    )
    assert path.suffix == '.xlsx'

    sheets = pd.read_excel(path, sheet_name=None)
    assert list(sheets) == ['Rules', 'Itemsets', 'Summary', 'Parameters']
    assert sheets['Rules']['antecedents'].tolist() == ['color=red AND size=S', 'bread']
    assert sheets['Itemsets']['items'].tolist() == ['bread AND milk']
    assert sheets['Summary']['Metric'].tolist() == ['num_rules', 'dataset']


def test_save_rule_mining_results_without_rules(tmp_path) -> None:
    path = save_rule_mining_results([], {'num_rules': 0}, tmp_path / "empty.xlsx")
    assert list(pd.read_excel(path, sheet_name=None)) == ['Summary']


def test_save_experiment_results(tmp_path) -> None:
    path = save_experiment_results(
        tmp_path / "nested" / "experiment",
        sheets={
            'A very long sheet name that Excel would reject': pd.DataFrame({'x': [1]}),
            'Records': [{'a': 1}, {'a': 2}],
            'Parameters': {'k': 'v'},
            'Skipped': [],
        }
    )
    sheets = pd.read_excel(path, sheet_name=None)
    assert list(sheets) == ['A very long sheet name that Exc', 'Records', 'Parameters']
    assert sheets['Parameters']['Value'].tolist() == ['v']


def test_save_rules_text_grouped(tmp_path) -> None:
    path = save_rules_text(RULES, tmp_path / "rules", title="TEST RULES", group_by='level',
                           metadata={'dataset': 'baskets'})
    text = path.read_text()
    assert path.suffix == '.txt'
    assert "TEST RULES" in text
    assert "dataset: baskets" in text
    assert "LEVEL: 0" in text and "LEVEL: 1" in text
    assert "IF color=red AND size=S" in text
    assert "THEN milk AND eggs" in text
    assert "Total rules: 2" in text


def test_save_rules_text_empty(tmp_path) -> None:
    path = save_rules_text([], tmp_path / "none.txt")
    assert "No rules found." in path.read_text()
