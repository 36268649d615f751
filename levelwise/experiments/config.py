from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional, Union
from pathlib import Path

from levelwise.rule_mining.support import SupportMode

MINER_TYPES = ['apriori', 'mlxtend']
MODES = ['rules', 'itemsets', 'both']
ITEMSET_TYPES = ['all', 'maximal', 'closed']


@dataclass
class DataConfig:
    path: str
    name: str
    # Column holding item lists; None for one-hot or categorical tables
    items_col: Optional[str] = None
    # Basket (.txt) files: one transaction per line
    item_separator: str = ","
    # CSV delimiter
    sep: str = ","

    def to_dict(self) -> Dict[str, Any]:
        return {
            'path': self.path,
            'name': self.name,
            'items_col': self.items_col,
            'item_separator': self.item_separator,
            'sep': self.sep
        }


@dataclass
class AprioriConfig:
    min_support: Union[int, float] = 0.1
    min_confidence: float = 0.5
    support_mode: str = SupportMode.PARTIAL_THEN_REFINE.value
    max_items: Optional[int] = None
    n_jobs: int = 1
    verbose: bool = False

    def __post_init__(self):
        self.support_mode = SupportMode.coerce(self.support_mode).value
        if not 0.0 <= self.min_confidence <= 1.0:
            raise ValueError(f"min_confidence must be within [0, 1], got {self.min_confidence}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            'min_support': self.min_support,
            'min_confidence': self.min_confidence,
            'support_mode': self.support_mode,
            'max_items': self.max_items,
            'n_jobs': self.n_jobs,
            'verbose': self.verbose
        }


@dataclass
class MLxtendConfig:
    algorithm: str = 'apriori'
    min_support: Union[int, float] = 0.1
    min_confidence: float = 0.5
    max_items: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'algorithm': self.algorithm,
            'min_support': self.min_support,
            'min_confidence': self.min_confidence,
            'max_items': self.max_items
        }


@dataclass
class FilterConfig:
    metric: str
    threshold: float

    def to_dict(self) -> Dict[str, Any]:
        return {'metric': self.metric, 'threshold': self.threshold}


@dataclass
class RuleMiningConfig:
    miner_type: str  # 'apriori', 'mlxtend'
    miner_config: Any  # AprioriConfig or MLxtendConfig
    mode: str = 'rules'  # 'rules', 'itemsets', 'both'
    filters: List[FilterConfig] = field(default_factory=list)
    itemset_type: str = 'all'  # 'all', 'maximal', 'closed'

    def __post_init__(self):
        if self.miner_type.lower() not in MINER_TYPES:
            raise ValueError(f"Miner type must be one of {MINER_TYPES}, got '{self.miner_type}'")
        if self.mode not in MODES:
            raise ValueError(f"Mode must be one of {MODES}, got '{self.mode}'")
        if self.itemset_type not in ITEMSET_TYPES:
            raise ValueError(f"Itemset type must be one of {ITEMSET_TYPES}, got '{self.itemset_type}'")
        if (self.itemset_type == 'closed'
                and getattr(self.miner_config, 'support_mode', None) == SupportMode.NEVER_REFINE.value):
            raise ValueError("Closed itemsets need exact supports; support_mode 'never_refine' only gives lower bounds")

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> 'RuleMiningConfig':
        miner_type = config.get('miner_type', 'apriori').lower()
        miner_config_cls = AprioriConfig if miner_type == 'apriori' else MLxtendConfig
        return cls(
            miner_type=miner_type,
            miner_config=miner_config_cls(**config.get('miner_config', {})),
            mode=config.get('mode', 'rules'),
            filters=[FilterConfig(**f) for f in config.get('filters', [])],
            itemset_type=config.get('itemset_type', 'all')
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'miner_type': self.miner_type,
            'miner_config': self.miner_config.to_dict(),
            'mode': self.mode,
            'filters': [f.to_dict() for f in self.filters],
            'itemset_type': self.itemset_type
        }


@dataclass
class ExperimentConfig:
    name: str
    data: DataConfig
    mining: RuleMiningConfig
    output_dir: str = "./out"

    def get_output_path(self) -> Path:
        path = Path(self.output_dir)
        path.mkdir(parents=True, exist_ok=True)
        return path
