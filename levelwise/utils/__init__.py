from .excel_io import (
    save_rule_mining_results,
    save_experiment_results,
    save_rules_text,
    format_rule_for_excel
)

__all__ = [
    'save_rule_mining_results',
    'save_experiment_results',
    'save_rules_text',
    'format_rule_for_excel'
]
