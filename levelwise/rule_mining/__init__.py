"""
Rule Mining Module

Level-wise search engines and the miner front-ends built on them:
- Frequent itemset mining (Apriori, MLxtend reference miners)
- Association rule derivation (consequent enlargement under a confidence threshold)
"""
from .support import SupportMode
from .apriori import AprioriItemsetMiner
from .rule_generation import RuleGenerator, derive_rules
from .apriori_miner import AprioriMiner
from .mlxtend_miner import MLxtendMiner

__all__ = [
    'SupportMode',
    'AprioriItemsetMiner',
    'RuleGenerator',
    'derive_rules',
    'AprioriMiner',
    'MLxtendMiner'
]
