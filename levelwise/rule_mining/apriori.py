"""
Level-wise frequent itemset search (Apriori).

Level k+1 is built only from the frequent itemsets of level k: candidates
come from joining pairs of level-k itemsets, candidates with an infrequent
subset are pruned before counting, and the survivors are counted against the
minimum support.
"""
import logging
import math
from typing import Dict, List, Sequence

from joblib import Parallel, delayed, effective_n_jobs
from tqdm.auto import tqdm

from levelwise.data.itemset import Itemset
from levelwise.data.database import TransactionDatabase
from levelwise.rule_mining.support import SupportMode

logger = logging.getLogger(__name__)

BLOCKS_PER_WORKER = 4


def _join_with_successors(itemset: Itemset, successors: Sequence[Itemset]) -> List[Itemset]:
    candidates = []
    for other in successors:
        candidate = itemset.join(other)
        if candidate is not None:
            candidates.append(candidate)
    return candidates


def _join_block(block: Sequence[Itemset], n_rows: int) -> List[Itemset]:
    """Join the first ``n_rows`` itemsets of ``block`` with their successors in it."""
    candidates = []
    for i in range(n_rows):
        candidates.extend(_join_with_successors(block[i], block[i + 1:]))
    return candidates


def all_subsets_frequent(candidate: Itemset, frequent: set) -> bool:
    """Check that every size-k subset of a size-(k+1) candidate is frequent."""
    return all(subset in frequent for subset in candidate.subsets())


class AprioriItemsetMiner:
    """
    Frequent itemset miner running the level-wise Apriori search.

    Levels are kept after the run: ``levels[0]`` holds the frequent
    1-itemsets, ``levels[k-1]`` the frequent k-itemsets.
    """

    def __init__(
        self,
        database: TransactionDatabase,
        support_mode=SupportMode.PARTIAL_THEN_REFINE,
        max_len: int = None,
        n_jobs: int = 1,
        verbose: bool = False
    ):
        """
        Initialize the miner.

        Args:
            database: Transaction database answering support queries
            support_mode: SupportMode (or its string value)
            max_len: Maximum itemset size. None means no limit
            n_jobs: Number of joblib workers used to join candidate pairs
            verbose: Show a progress bar while joining candidates
        """
        if max_len is not None and max_len < 1:
            raise ValueError(f"max_len must be at least 1, got {max_len}")
        self.database = database
        self.support_mode = SupportMode.coerce(support_mode)
        self.max_len = max_len
        self.n_jobs = n_jobs
        self.verbose = verbose
        self.levels: List[List[Itemset]] = []

    def mine(self, min_support: int) -> List[List[Itemset]]:
        """
        Compute the frequent itemsets of every size.

        Args:
            min_support: Minimum number of transactions containing an itemset

        Returns:
            List of levels, level k holding the frequent k-itemsets
        """
        self.levels = []
        level = self._first_level(min_support)

        while level:
            self.levels.append(level)
            logger.info("Level %d: %d frequent itemsets", len(self.levels), len(level))
            if self.max_len is not None and len(self.levels) >= self.max_len:
                break
            level = self._next_level(level, min_support)

        if self.support_mode.refines:
            self._refine_support()

        return self.levels

    def _first_level(self, min_support: int) -> List[Itemset]:
        items = sorted(self.database.retrieve_distinct_items())
        candidates = [Itemset([item]) for item in items]
        return self.database.filter_by_min_support(
            candidates, min_support, exact=self.support_mode.exact_search
        )

    def _next_level(self, level: List[Itemset], min_support: int) -> List[Itemset]:
        candidates = self._generate_candidates(level)

        frequent = set(level)
        pruned = [c for c in candidates if all_subsets_frequent(c, frequent)]
        logger.debug(
            "Level %d: %d candidates, %d after subset pruning",
            len(level[0]) + 1, len(candidates), len(pruned)
        )

        return self.database.filter_by_min_support(
            pruned, min_support, exact=self.support_mode.exact_search
        )

    def _generate_candidates(self, level: List[Itemset]) -> List[Itemset]:
        """Join every unordered pair of the level, dropping duplicate candidates."""
        desc = f"Joining {len(level[0])}-itemsets"

        if self.n_jobs == 1:
            rows = range(len(level))
            if self.verbose:
                rows = tqdm(rows, desc=desc, unit="itemset")
            joined = [_join_with_successors(level[i], level[i + 1:]) for i in rows]
        else:
            # One task per contiguous block of rows
            n_blocks = effective_n_jobs(self.n_jobs) * BLOCKS_PER_WORKER
            block_size = max(1, math.ceil(len(level) / n_blocks))
            starts = range(0, len(level), block_size)
            if self.verbose:
                starts = tqdm(starts, desc=desc, unit="block")
            joined = Parallel(n_jobs=self.n_jobs)(
                delayed(_join_block)(level[start:], min(block_size, len(level) - start))
                for start in starts
            )

        unique: Dict[Itemset, None] = {}
        for candidates in joined:
            for candidate in candidates:
                unique.setdefault(candidate, None)
        return list(unique)

    def _refine_support(self) -> None:
        """Replace partial counts with exact counts on every retained itemset."""
        for level in self.levels:
            self.database.recompute_support_exact(level)

    def __repr__(self):
        return (f"AprioriItemsetMiner(support_mode='{self.support_mode.value}', "
                f"max_len={self.max_len}, n_jobs={self.n_jobs})")
