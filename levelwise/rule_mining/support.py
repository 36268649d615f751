"""Support computation strategies for the level-wise itemset search."""
from enum import Enum


class SupportMode(str, Enum):
    """
    How support is counted while mining.

    - PARTIAL_THEN_REFINE: partial counts during the search, then one exact
      pass over the retained itemsets
    - ALWAYS_EXACT: exact counts during the search
    - NEVER_REFINE: partial counts only (supports are lower bounds)
    """
    PARTIAL_THEN_REFINE = 'partial_then_refine'
    ALWAYS_EXACT = 'always_exact'
    NEVER_REFINE = 'never_refine'

    @classmethod
    def coerce(cls, value) -> 'SupportMode':
        if isinstance(value, cls):
            return value
        valid = [mode.value for mode in cls]
        if isinstance(value, str) and value.lower() in valid:
            return cls(value.lower())
        raise ValueError(f"Support mode must be one of {valid}, got '{value}'")

    @property
    def exact_search(self) -> bool:
        return self is SupportMode.ALWAYS_EXACT

    @property
    def refines(self) -> bool:
        return self is SupportMode.PARTIAL_THEN_REFINE
