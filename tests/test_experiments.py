import logging

import pandas as pd
import pytest

import levelwise
from levelwise.experiments.base import (
    apply_filters,
    create_miner,
    generate_output_filename,
    load_data,
    run_rule_mining,
    select_itemsets,
)
from levelwise.experiments.config import (
    AprioriConfig,
    DataConfig,
    ExperimentConfig,
    FilterConfig,
    MLxtendConfig,
    RuleMiningConfig,
)
from levelwise.experiments.run_rule_mining import run_experiment
from levelwise.rule_mining.apriori_miner import AprioriMiner
from levelwise.rule_mining.mlxtend_miner import MLxtendMiner


@pytest.fixture
def basket_file(tmp_path, basket_transactions):
    path = tmp_path / "baskets.txt"
    path.write_text("\n".join(", ".join(t) for t in basket_transactions) + "\n\n")
    return path


def test_apriori_config_validation() -> None:
    assert AprioriConfig(support_mode='ALWAYS_EXACT').support_mode == 'always_exact'
    with pytest.raises(ValueError):
        AprioriConfig(support_mode='unknown')
    with pytest.raises(ValueError):
        AprioriConfig(min_confidence=1.5)


def test_rule_mining_config_validation() -> None:
    with pytest.raises(ValueError):
        RuleMiningConfig(miner_type='niaarm', miner_config=AprioriConfig())
    with pytest.raises(ValueError):
        RuleMiningConfig(miner_type='apriori', miner_config=AprioriConfig(), mode='graphs')
    with pytest.raises(ValueError):
        RuleMiningConfig(miner_type='apriori', miner_config=AprioriConfig(), itemset_type='free')
    with pytest.raises(ValueError):
        RuleMiningConfig(
            miner_type='apriori',
            miner_config=AprioriConfig(support_mode='never_refine'),
            itemset_type='closed'
        )


def test_rule_mining_config_round_trip() -> None:
    config = RuleMiningConfig(
        miner_type='apriori',
        miner_config=AprioriConfig(min_support=3, min_confidence=0.7, max_items=3),
        mode='both',
        filters=[FilterConfig(metric='lift', threshold=1.0)],
        itemset_type='maximal'
    )
    rebuilt = RuleMiningConfig.from_dict(config.to_dict())
    assert rebuilt == config

    mlxtend = RuleMiningConfig.from_dict({'miner_type': 'mlxtend', 'miner_config': {'algorithm': 'fpgrowth'}})
    assert isinstance(mlxtend.miner_config, MLxtendConfig)


def test_create_miner() -> None:
    apriori = create_miner(RuleMiningConfig('apriori', AprioriConfig(min_support=2, support_mode='always_exact')))
    assert isinstance(apriori, AprioriMiner)
    assert apriori.min_support == 2
    assert apriori.support_mode.value == 'always_exact'

    mlxtend = create_miner(RuleMiningConfig('mlxtend', MLxtendConfig(algorithm='fpgrowth')))
    assert isinstance(mlxtend, MLxtendMiner)
    assert mlxtend.algorithm == 'fpgrowth'


def test_load_basket_file(basket_file) -> None:
    data = load_data(DataConfig(path=str(basket_file), name='baskets'))
    assert len(data) == 10
    assert data[0] == ['bread', 'milk']


def test_load_csv(tmp_path) -> None:
    path = tmp_path / "table.csv"
    pd.DataFrame({'color': ['red', 'blue'], 'size': ['S', 'L']}).to_csv(path, sep=';', index=False)
    df = load_data(DataConfig(path=str(path), name='table', sep=';'))
    assert list(df.columns) == ['color', 'size']


def test_load_unsupported_format(tmp_path) -> None:
    with pytest.raises(ValueError):
        load_data(DataConfig(path=str(tmp_path / "data.json"), name='data'))


def test_apply_filters_and_selection() -> None:
    rules = [{'lift': 1.5}, {'lift': 0.5}]
    assert apply_filters(rules, [FilterConfig('lift', 1.0)]) == [{'lift': 1.5}]
    assert apply_filters(rules, []) is rules

    itemsets = [{'items': ['a'], 'support': 0.5, 'support_count': 5},
                {'items': ['a', 'b'], 'support': 0.5, 'support_count': 5}]
    assert apply_filters(itemsets, [FilterConfig('support', 0.4)], mode='itemsets') == itemsets
    assert select_itemsets(itemsets, 'maximal') == [itemsets[1]]
    assert select_itemsets(itemsets, 'closed') == [itemsets[1]]
    assert select_itemsets(itemsets) == itemsets


def test_run_rule_mining_both_modes(basket_transactions) -> None:
    config = RuleMiningConfig(
        miner_type='apriori',
        miner_config=AprioriConfig(min_support=0.2, min_confidence=0.65),
        mode='both',
        filters=[FilterConfig(metric='confidence', threshold=0.7)]
    )
    results, stats = run_rule_mining(basket_transactions, config)

    assert set(results) == {'itemsets', 'rules'}
    assert all(r['confidence'] >= 0.7 for r in results['rules'])
    assert stats['rules']['count'] == len(results['rules'])
    # Itemsets carry no confidence, so the confidence filter removes them all
    assert results['itemsets'] == []


def test_generate_output_filename() -> None:
    name = generate_output_filename('exp', 'apriori', 'rules', 'baskets')
    assert name.endswith('_exp_apriori_rules_baskets')


def test_run_experiment_writes_reports(tmp_path, basket_file, capsys) -> None:
    experiment = ExperimentConfig(
        name='test',
        data=DataConfig(path=str(basket_file), name='baskets'),
        mining=RuleMiningConfig(
            miner_type='apriori',
            miner_config=AprioriConfig(min_support=0.2, min_confidence=0.65),
            mode='both'
        ),
        output_dir=str(tmp_path / "out")
    )
    workbook = run_experiment(experiment)

    assert workbook.exists() and workbook.suffix == '.xlsx'
    assert workbook.with_suffix('.txt').exists()
    sheets = pd.read_excel(workbook, sheet_name=None)
    assert {'Rules', 'Itemsets', 'Summary', 'Parameters'} <= set(sheets)

    output = capsys.readouterr().out
    assert "EXPERIMENT COMPLETE" in output
    assert "mlxtend rules" in output


def test_setup_logging_is_idempotent() -> None:
    logger = levelwise.setup_logging(logging.DEBUG)
    handlers = len(logger.handlers)
    levelwise.setup_logging(logging.INFO)
    assert len(logger.handlers) == handlers
    assert logger.level == logging.INFO
