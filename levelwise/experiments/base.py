import logging
from datetime import datetime
from pathlib import Path
from typing import List, Dict, Any, Tuple, Union

import pandas as pd

from levelwise.rule_mining.apriori_miner import AprioriMiner
from levelwise.rule_mining.mlxtend_miner import MLxtendMiner
from levelwise.postprocessing.rule import (
    filter_rules, filter_itemsets, maximal_itemsets, closed_itemsets
)

from .config import DataConfig, RuleMiningConfig, FilterConfig

logger = logging.getLogger(__name__)


def load_data(config: DataConfig) -> Union[pd.DataFrame, List[List[str]]]:
    """
    Load a transaction dataset.

    Tabular files are read with pandas. Basket files (.txt) hold one
    transaction per line, items separated by ``config.item_separator``.
    """
    path = Path(config.path)
    if path.suffix == '.csv':
        return pd.read_csv(path, sep=config.sep)
    elif path.suffix in ['.xlsx', '.xls']:
        return pd.read_excel(path)
    elif path.suffix == '.parquet':
        return pd.read_parquet(path)
    elif path.suffix == '.txt':
        with open(path) as f:
            return [
                [item.strip() for item in line.split(config.item_separator) if item.strip()]
                for line in f
                if line.strip()
            ]
    else:
        raise ValueError(f"Unsupported file format: {path.suffix}")


def create_miner(config: RuleMiningConfig, items_col: str = None):
    miner_type = config.miner_type.lower()
    cfg = config.miner_config

    if miner_type == 'apriori':
        return AprioriMiner(
            min_support=cfg.min_support,
            min_confidence=cfg.min_confidence,
            max_items=cfg.max_items,
            support_mode=cfg.support_mode,
            items_col=items_col,
            n_jobs=cfg.n_jobs,
            verbose=cfg.verbose
        )

    elif miner_type == 'mlxtend':
        return MLxtendMiner(
            algorithm=cfg.algorithm,
            min_support=cfg.min_support,
            min_confidence=cfg.min_confidence,
            max_items=cfg.max_items,
            items_col=items_col
        )

    else:
        raise ValueError(f"Unknown miner type: {miner_type}")


def apply_filters(
    data: List[Dict],
    filters: List[FilterConfig],
    mode: str = 'rules'
) -> List[Dict]:
    if not filters:
        return data

    result = data
    for f in filters:
        if mode == 'rules':
            result = filter_rules(result, criterion=f.metric, threshold=f.threshold)
        else:
            result, _ = filter_itemsets(result, criterion=f.metric, threshold=f.threshold)

    return result


def select_itemsets(itemsets: List[Dict], itemset_type: str = 'all') -> List[Dict]:
    if itemset_type == 'maximal':
        return maximal_itemsets(itemsets)
    if itemset_type == 'closed':
        return closed_itemsets(itemsets)
    return itemsets


def run_rule_mining(
    data,
    config: RuleMiningConfig,
    items_col: str = None
) -> Tuple[Dict[str, List[Dict]], Dict[str, Any]]:
    """
    Mine itemsets and/or rules as configured.

    Returns:
        Tuple of (results, stats), each keyed by 'itemsets' and/or 'rules'
    """
    miner = create_miner(config, items_col=items_col)
    mode = config.mode
    logger.info("Running %r in '%s' mode", miner, mode)

    results = {}
    stats = {}

    if mode in ['itemsets', 'both']:
        itemsets, itemset_stats = miner.mine_itemsets(data)
        itemsets = select_itemsets(itemsets, config.itemset_type)
        itemsets = apply_filters(itemsets, config.filters, mode='itemsets')
        results['itemsets'] = itemsets
        stats['itemsets'] = itemset_stats
        stats['itemsets']['count'] = len(itemsets)

    if mode in ['rules', 'both']:
        rules, rule_stats = miner.mine_rules(data)
        rules = apply_filters(rules, config.filters, mode='rules')
        results['rules'] = rules
        stats['rules'] = rule_stats
        stats['rules']['count'] = len(rules)

    return results, stats


def generate_output_filename(
    experiment_name: str,
    miner_type: str,
    mode: str,
    dataset_name: str
) -> str:
    timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
    return f"{timestamp}_{experiment_name}_{miner_type}_{mode}_{dataset_name}"
