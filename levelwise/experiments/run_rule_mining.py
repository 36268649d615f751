"""
Rule Mining Experiment: Market Baskets

Mines frequent itemsets and association rules from a basket file with the
level-wise Apriori miner, cross-checks the rule count against the mlxtend
reference miner and saves the results.
"""
import logging
from datetime import datetime
from pathlib import Path

from levelwise import setup_logging
from levelwise.experiments.base import load_data, run_rule_mining, generate_output_filename
from levelwise.experiments.config import (
    AprioriConfig, DataConfig, ExperimentConfig, FilterConfig, MLxtendConfig, RuleMiningConfig
)
from levelwise.utils.excel_io import save_rule_mining_results, save_rules_text

# =============================================================================
# CONFIGURATION
# =============================================================================

DATA_PATH = "data/baskets.txt"
OUTPUT_DIR = "out/basket_rules"

APRIORI_CONFIG = {
    'min_support': 0.2,
    'min_confidence': 0.6,
    'support_mode': 'partial_then_refine',
    'max_items': None,
}

# Filter thresholds
MIN_LIFT = 1.0


def default_experiment() -> ExperimentConfig:
    return ExperimentConfig(
        name="basket_rules",
        data=DataConfig(path=DATA_PATH, name=Path(DATA_PATH).stem),
        mining=RuleMiningConfig(
            miner_type='apriori',
            miner_config=AprioriConfig(**APRIORI_CONFIG),
            mode='both',
            filters=[FilterConfig(metric='lift', threshold=MIN_LIFT)]
        ),
        output_dir=OUTPUT_DIR
    )


# =============================================================================
# EXPERIMENT
# =============================================================================

def run_experiment(experiment: ExperimentConfig = None, cross_check: bool = True) -> Path:
    experiment = experiment or default_experiment()
    mining = experiment.mining

    print("=" * 70)
    print("BASKET RULE MINING EXPERIMENT")
    print("=" * 70)

    # Load data
    print("\n[1] Loading data...")
    data = load_data(experiment.data)
    print(f"  Transactions: {len(data)}")

    # Mine
    print("\n[2] Mining...")
    results, stats = run_rule_mining(data, mining, items_col=experiment.data.items_col)
    itemsets = results.get('itemsets', [])
    rules = results.get('rules', [])
    if 'itemsets' in stats:
        print(f"  Frequent itemsets: {len(itemsets)} ({stats['itemsets'].get('levels', 'n/a')} levels)")
    if 'rules' in stats:
        print(f"  Rules: {len(rules)}")

    # Cross-check the rule search against mlxtend
    if cross_check and mining.miner_type == 'apriori' and mining.mode in ['rules', 'both']:
        print("\n[3] Cross-checking with mlxtend...")
        cfg = mining.miner_config
        reference = RuleMiningConfig(
            miner_type='mlxtend',
            miner_config=MLxtendConfig(
                algorithm='apriori',
                min_support=cfg.min_support,
                min_confidence=cfg.min_confidence,
                max_items=cfg.max_items
            ),
            mode='rules',
            filters=mining.filters
        )
        reference_results, _ = run_rule_mining(data, reference, items_col=experiment.data.items_col)
        print(f"  mlxtend rules: {len(reference_results['rules'])} (Apriori: {len(rules)})")

    # Save results
    print(f"\n{'=' * 70}")
    print("SAVING RESULTS")
    print("=" * 70)

    output_path = experiment.get_output_path()
    filename = generate_output_filename(experiment.name, mining.miner_type, mining.mode, experiment.data.name)

    params = {
        **experiment.data.to_dict(),
        **mining.to_dict(),
        'timestamp': datetime.now().isoformat()
    }
    summary = {f"{section}_{key}": value for section, values in stats.items() for key, value in values.items()}

    workbook = save_rule_mining_results(
        rules=rules,
        stats=summary,
        output_path=output_path / filename,
        parameters=params,
        itemsets=itemsets
    )
    save_rules_text(rules, output_path / filename, title="BASKET RULES", group_by='level')

    print(f"\n{'=' * 70}")
    print("EXPERIMENT COMPLETE")
    print("=" * 70)
    print(f"Output: {workbook}")
    print("=" * 70)

    return workbook


if __name__ == '__main__':
    setup_logging(logging.INFO)
    run_experiment()
