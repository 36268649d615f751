import logging
import pandas as pd
from pathlib import Path
from datetime import datetime
from typing import Dict, List, Any, Union

logger = logging.getLogger(__name__)


def _xlsx_path(output_path: Union[str, Path]) -> Path:
    output_path = Path(output_path)
    if output_path.suffix != '.xlsx':
        output_path = output_path.with_suffix('.xlsx')
    output_path.parent.mkdir(parents=True, exist_ok=True)
    return output_path


def save_rule_mining_results(
    rules: List[Dict[str, Any]],
    stats: Dict[str, Any],
    output_path: Union[str, Path],
    parameters: Dict[str, Any] = None,
    metadata: Dict[str, Any] = None,
    itemsets: List[Dict[str, Any]] = None
) -> Path:
    """
    Save rule mining results to Excel with multiple sheets.

    Sheets:
        - Rules: All mined rules with metrics (human-readable sides)
        - Itemsets: Frequent itemsets (if given)
        - Summary: Aggregate statistics
        - Parameters: Algorithm parameters used

    Args:
        rules: List of rule dictionaries
        stats: Statistics dictionary from mining
        output_path: Output file path (will add .xlsx if needed)
        parameters: Algorithm parameters used
        metadata: Additional metadata (dataset name, timestamp, etc.)
        itemsets: Frequent itemset dictionaries

    Returns:
        Path of the written workbook
    """
    output_path = _xlsx_path(output_path)

    with pd.ExcelWriter(output_path, engine='openpyxl') as writer:
        # Sheet 1: Rules
        if rules:
            rules_df = pd.DataFrame([format_rule_for_excel(rule) for rule in rules])
            rules_df.to_excel(writer, sheet_name='Rules', index=False)

        # Sheet 2: Itemsets
        if itemsets:
            itemsets_df = pd.DataFrame([
                {**itemset, 'items': _format_itemset(itemset['items'])} for itemset in itemsets
            ])
            itemsets_df.to_excel(writer, sheet_name='Itemsets', index=False)

        # Sheet 3: Summary
        summary_data = {
            'Metric': list(stats.keys()),
            'Value': [str(v) for v in stats.values()]
        }
        if metadata:
            summary_data['Metric'].extend(list(metadata.keys()))
            summary_data['Value'].extend([str(v) for v in metadata.values()])
        summary_df = pd.DataFrame(summary_data)
        summary_df.to_excel(writer, sheet_name='Summary', index=False)

        # Sheet 4: Parameters
        if parameters:
            params_df = pd.DataFrame({
                'Parameter': list(parameters.keys()),
                'Value': [str(v) for v in parameters.values()]
            })
            params_df.to_excel(writer, sheet_name='Parameters', index=False)

    logger.info("Results saved to: %s", output_path)
    return output_path


def save_experiment_results(
    output_path: Union[str, Path],
    sheets: Dict[str, Union[pd.DataFrame, List[Dict], Dict[str, Any]]]
) -> Path:
    """
    Generic function to save experiment results with custom sheets.

    Args:
        output_path: Output file path
        sheets: Dictionary mapping sheet names to data.
                Data can be:
                - pd.DataFrame: Written directly
                - List[Dict]: Converted to DataFrame
                - Dict[str, Any]: Converted to key-value DataFrame
                Anything else (including empty lists) is skipped.
    """
    output_path = _xlsx_path(output_path)

    written = 0
    with pd.ExcelWriter(output_path, engine='openpyxl') as writer:
        for sheet_name, data in sheets.items():
            if isinstance(data, pd.DataFrame):
                df = data
            elif isinstance(data, list) and data and isinstance(data[0], dict):
                df = pd.DataFrame(data)
            elif isinstance(data, dict):
                df = pd.DataFrame({
                    'Key': list(data.keys()),
                    'Value': [str(v) for v in data.values()]
                })
            else:
                continue

            # Excel limits sheet names to 31 chars
            df.to_excel(writer, sheet_name=sheet_name[:31], index=False)
            written += 1

        # openpyxl refuses to save a workbook without sheets
        if written == 0:
            pd.DataFrame().to_excel(writer, sheet_name='Empty', index=False)

    logger.info("Results saved to: %s", output_path)
    return output_path


def format_rule_for_excel(rule: Dict[str, Any]) -> Dict[str, Any]:
    """
    Format a rule dictionary for Excel output with human-readable sides.

    Converts antecedents/consequents from item lists to parseable strings:
    - Format: "feature1=value1 AND item2"
    - Parseable by splitting on " AND " then "="
    """
    formatted = rule.copy()

    for key in ['antecedents', 'consequents']:
        if key in formatted:
            formatted[key] = _format_itemset(formatted[key])

    return formatted


def _format_itemset(val: Any) -> str:
    """Convert an itemset to 'feature=value AND ...' string format."""
    if isinstance(val, str):
        # Tabular items: "feature__value" -> "feature=value"
        if '__' in val:
            feature, value = val.split('__', 1)
            return f"{feature}={value}"
        return val
    if isinstance(val, (list, tuple, set, frozenset)):
        items = sorted(val, key=str) if isinstance(val, (set, frozenset)) else val
        return ' AND '.join(_format_itemset(item) if isinstance(item, str) else str(item) for item in items)
    return str(val)


def save_rules_text(
    rules: List[Dict[str, Any]],
    output_path: Union[str, Path],
    title: str = "MINED RULES",
    group_by: str = None,
    metadata: Dict[str, Any] = None
) -> Path:
    """
    Save rules in human-readable text format.

    Args:
        rules: List of rule dictionaries with keys 'antecedents', 'consequents',
               'confidence', 'support', 'lift', etc.
        output_path: Output file path (will add .txt if needed)
        title: Title for the output file header
        group_by: Optional key to group rules by (e.g., 'level')
        metadata: Optional metadata to include in header
    """
    output_path = Path(output_path)
    if output_path.suffix != '.txt':
        output_path = output_path.with_suffix('.txt')
    output_path.parent.mkdir(parents=True, exist_ok=True)

    def format_metric(value, decimals=4):
        if isinstance(value, (int, float)):
            return f"{value:.{decimals}f}"
        return str(value) if value is not None else "N/A"

    with open(output_path, 'w') as f:
        f.write("=" * 80 + "\n")
        f.write(f"{title}\n")
        f.write(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n")
        if metadata:
            for key, val in metadata.items():
                f.write(f"{key}: {val}\n")
        f.write("=" * 80 + "\n\n")

        if not rules:
            f.write("No rules found.\n")
            logger.info("Rules saved to: %s", output_path)
            return output_path

        if group_by and group_by in rules[0]:
            groups = {}
            for rule in rules:
                groups.setdefault(rule.get(group_by, 'unknown'), []).append(rule)

            rule_num = 1
            for group_key, group_rules in groups.items():
                f.write("-" * 80 + "\n")
                f.write(f"{group_by.upper()}: {group_key}\n")
                f.write(f"Rules in group: {len(group_rules)}\n")
                f.write("-" * 80 + "\n\n")

                for rule in group_rules:
                    rule_num = _write_rule(f, rule, rule_num, format_metric)
                f.write("\n")
        else:
            for i, rule in enumerate(rules, 1):
                _write_rule(f, rule, i, format_metric)

        f.write("=" * 80 + "\n")
        f.write(f"Total rules: {len(rules)}\n")
        f.write("=" * 80 + "\n")

    logger.info("Rules saved to: %s", output_path)
    return output_path


def _write_rule(f, rule: Dict[str, Any], rule_num: int, format_metric) -> int:
    antecedent = _format_itemset(rule.get('antecedents', 'N/A'))
    consequent = _format_itemset(rule.get('consequents', 'N/A'))

    f.write(f"Rule #{rule_num}:\n")
    f.write(f"  IF {antecedent}\n")
    f.write(f"  THEN {consequent}\n\n")
    f.write("  Metrics:\n")

    metrics = [
        ('confidence', 'Confidence'),
        ('support', 'Support'),
        ('lift', 'Lift'),
        ('leverage', 'Leverage'),
        ('conviction', 'Conviction'),
        ('zhangs_metric', "Zhang's Metric"),
        ('interestingness', 'Interestingness'),
    ]

    for key, label in metrics:
        if key in rule:
            f.write(f"    {label:18s} {format_metric(rule[key])}\n")

    f.write("\n")
    return rule_num + 1
