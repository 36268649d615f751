"""
MLxtend-based reference miner.

Supports multiple algorithms: Apriori, FP-Growth, FPMax.
Produces the same records as AprioriMiner so that results of both miners
can be compared directly.
"""
import time
from typing import Dict, List, Tuple, Any, Union

import pandas as pd
from mlxtend.frequent_patterns import fpgrowth, apriori, fpmax, association_rules

from levelwise.rule_mining.base import (
    HybridMiner, MiningInput, absolute_support, rule_metrics, to_database
)


class MLxtendMiner(HybridMiner):
    """
    MLxtend rule miner with multiple algorithm support.

    Supports algorithms:
    - 'apriori': Apriori (default, same search as AprioriMiner)
    - 'fpgrowth': FP-Growth
    - 'fpmax': FPMax (finds maximal itemsets)
    """

    def __init__(
        self,
        algorithm: str = 'apriori',
        min_support: Union[int, float] = 0.01,
        min_confidence: float = 0.5,
        max_items: int = None,
        items_col: str = None,
        **kwargs
    ):
        """
        Initialize MLxtend miner.

        Args:
            algorithm: Mining algorithm ('apriori', 'fpgrowth', 'fpmax')
            min_support: Minimum support, as a fraction in (0, 1] or an absolute count
            min_confidence: Minimum confidence threshold
            max_items: Maximum number of items in an itemset
            items_col: DataFrame column holding item lists, if the input has one
        """
        super().__init__(min_support, min_confidence, max_items, **kwargs)
        self.algorithm = algorithm.lower()
        self.items_col = items_col

        valid_algorithms = ['apriori', 'fpgrowth', 'fpmax']
        if self.algorithm not in valid_algorithms:
            raise ValueError(f"Algorithm must be one of {valid_algorithms}, got '{self.algorithm}'")

    def _frequent_itemsets(self, data: MiningInput) -> Tuple[pd.DataFrame, int]:
        database = to_database(data, items_col=self.items_col)
        n_transactions = database.n_transactions
        df_encoded = database.to_dataframe()

        columns = ['support', 'itemsets']
        if n_transactions == 0 or df_encoded.shape[1] == 0:
            return pd.DataFrame(columns=columns), n_transactions

        min_count = absolute_support(self.min_support, n_transactions)
        # mlxtend expects a fraction; rejects anything outside (0, 1]
        min_fraction = min(max(min_count, 1) / n_transactions, 1.0)

        algorithms = {'apriori': apriori, 'fpgrowth': fpgrowth, 'fpmax': fpmax}
        frequent_itemsets_df = algorithms[self.algorithm](
            df_encoded,
            min_support=min_fraction,
            use_colnames=True,
            max_len=self.max_items
        )
        return frequent_itemsets_df, n_transactions

    def mine_itemsets(self, data: MiningInput) -> Tuple[List[Dict[str, Any]], Dict[str, Any]]:
        """
        Mine frequent itemsets.

        Args:
            data: Transactions (DataFrame, list of item lists or TransactionDatabase)

        Returns:
            Tuple of (itemsets, stats)
        """
        start_time = time.time()
        frequent_itemsets_df, n_transactions = self._frequent_itemsets(data)

        itemsets = []
        for _, row in frequent_itemsets_df.iterrows():
            support = float(row['support'])
            itemsets.append({
                'items': sorted(row['itemsets']),
                'support': support,
                'support_count': int(round(support * n_transactions)),
                'length': len(row['itemsets']),
                'exact_support': True
            })

        execution_time = time.time() - start_time

        stats = {
            'num_itemsets': len(itemsets),
            'num_transactions': n_transactions,
            'execution_time': execution_time,
            'average_support': sum(i['support'] for i in itemsets) / len(itemsets) if itemsets else 0.0,
            'algorithm': f'MLxtend_{self.algorithm}',
            'mode': 'itemsets'
        }

        return itemsets, stats

    def mine_rules(self, data: MiningInput) -> Tuple[List[Dict[str, Any]], Dict[str, Any]]:
        """
        Mine association rules.

        Args:
            data: Transactions (DataFrame, list of item lists or TransactionDatabase)

        Returns:
            Tuple of (rules, stats)
        """
        if self.algorithm == 'fpmax':
            raise ValueError("FPMax only yields maximal itemsets; rules need the support of every subset")

        start_time = time.time()
        frequent_itemsets_df, n_transactions = self._frequent_itemsets(data)

        if len(frequent_itemsets_df) == 0:
            return [], {
                'num_rules': 0,
                'num_transactions': n_transactions,
                'execution_time': time.time() - start_time,
                'algorithm': f'MLxtend_{self.algorithm}',
                'mode': 'rules'
            }

        rules_df = association_rules(
            frequent_itemsets_df,
            num_itemsets=n_transactions,
            metric='confidence',
            min_threshold=self.min_confidence
        )

        rules = []
        for _, row in rules_df.iterrows():
            support = float(row['support'])
            confidence = float(row['confidence'])
            consequent_support = float(row['consequent support'])

            rule = {
                'antecedents': sorted(row['antecedents']),
                'consequents': sorted(row['consequents']),
                'support': support,
                'confidence': confidence
            }
            rule.update(rule_metrics(support, confidence, consequent_support))
            rule['level'] = len(row['consequents']) - 1
            rules.append(rule)

        execution_time = time.time() - start_time

        stats = {
            'num_rules': len(rules),
            'num_transactions': n_transactions,
            'execution_time': execution_time,
            'average_support': sum(r['support'] for r in rules) / len(rules) if rules else 0.0,
            'average_confidence': sum(r['confidence'] for r in rules) / len(rules) if rules else 0.0,
            'algorithm': f'MLxtend_{self.algorithm}',
            'mode': 'rules'
        }

        return rules, stats

    def __repr__(self):
        return (f"MLxtendMiner(algorithm='{self.algorithm}', min_support={self.min_support}, "
                f"min_confidence={self.min_confidence}, max_items={self.max_items})")
