"""
In-memory transaction database.

Transactions are one-hot encoded into a boolean matrix (rows are transactions,
columns are items). The database is the only place where support counts are
computed; itemsets only carry the counts attached to them here.
"""
import logging
from typing import Dict, Hashable, Iterable, List, Optional, Sequence, Set, Tuple

import numpy as np
import pandas as pd
from mlxtend.preprocessing import TransactionEncoder

from levelwise.data.itemset import Itemset

logger = logging.getLogger(__name__)


class TransactionDatabase:
    """
    Transaction store answering item enumeration and support queries.

    Counting comes in two flavours:
    - exact: every transaction is checked
    - partial: transactions are scanned in chunks of ``chunk_size`` rows and
      the scan stops as soon as the count reaches the requested threshold.
      The attached count is then a lower bound, flagged as inexact.
    """

    def __init__(self, transactions: Iterable[Iterable[Hashable]], chunk_size: int = 1024):
        if chunk_size < 1:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        transactions = [list(dict.fromkeys(t)) for t in transactions]
        self.chunk_size = chunk_size

        if any(transactions):
            te = TransactionEncoder()
            self._matrix = te.fit(transactions).transform(transactions)
            self._items: List[Hashable] = list(te.columns_)
        else:
            self._matrix = np.zeros((len(transactions), 0), dtype=bool)
            self._items = []

        self._index: Dict[Hashable, int] = {item: i for i, item in enumerate(self._items)}
        self._exact_counts: Dict[frozenset, int] = {}

    @classmethod
    def from_dataframe(
        cls,
        df: pd.DataFrame,
        items_col: str = None,
        chunk_size: int = 1024
    ) -> 'TransactionDatabase':
        """
        Build a database from a DataFrame.

        Three layouts are accepted:
        - ``items_col`` given: that column holds one iterable of items per row
        - one-hot (bool or 0/1 columns): each column is an item
        - categorical: each non-null cell becomes the item ``"column__value"``

        Args:
            df: Input DataFrame
            items_col: Column holding item lists, if any
            chunk_size: Rows scanned per step during partial counting

        Returns:
            TransactionDatabase
        """
        if items_col is not None:
            if items_col not in df.columns:
                raise ValueError(f"Column '{items_col}' not found in DataFrame")
            transactions = [list(items) if items is not None else [] for items in df[items_col]]
            return cls(transactions, chunk_size=chunk_size)

        if _is_one_hot(df):
            values = df.fillna(0).values.astype(bool)
            columns = list(df.columns)
            transactions = [[columns[j] for j in np.flatnonzero(row)] for row in values]
            return cls(transactions, chunk_size=chunk_size)

        transactions = []
        for _, row in df.iterrows():
            transaction = []
            for col in df.columns:
                value = row[col]
                if pd.notna(value):
                    transaction.append(f"{col}__{value}")
            transactions.append(transaction)
        return cls(transactions, chunk_size=chunk_size)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def n_transactions(self) -> int:
        return int(self._matrix.shape[0])

    def __len__(self) -> int:
        return self.n_transactions

    def relative_support(self, count: int) -> float:
        if self.n_transactions == 0:
            return 0.0
        return count / self.n_transactions

    def to_dataframe(self) -> pd.DataFrame:
        """One-hot view of the transactions, one boolean column per item."""
        return pd.DataFrame(self._matrix, columns=self._items)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def retrieve_distinct_items(self) -> Set[Hashable]:
        return set(self._items)

    def filter_by_min_support(
        self,
        candidates: Sequence[Itemset],
        min_support: int,
        exact: bool = False
    ) -> List[Itemset]:
        """
        Keep the candidates contained in at least ``min_support`` transactions.

        Support is attached to the surviving itemsets only.

        Args:
            candidates: Itemsets to count
            min_support: Minimum number of transactions (inclusive)
            exact: If False, stop counting an itemset once it reaches min_support

        Returns:
            Surviving itemsets, in candidate order
        """
        frequent = []
        for itemset in candidates:
            count, is_exact = self._count(itemset, None if exact else min_support)
            if count >= min_support:
                itemset.attach_support(count, exact=is_exact)
                frequent.append(itemset)

        logger.debug("%d/%d candidates reach support %d", len(frequent), len(candidates), min_support)
        return frequent

    def recompute_support_exact(self, itemsets: Iterable[Itemset]) -> None:
        for itemset in itemsets:
            count, _ = self._count(itemset)
            itemset.attach_support(count, exact=True)

    def compute_support(self, itemsets: Iterable[Itemset]) -> None:
        for itemset in itemsets:
            if itemset.support_is_exact:
                continue
            count, _ = self._count(itemset)
            itemset.attach_support(count, exact=True)

    # ------------------------------------------------------------------
    # Counting
    # ------------------------------------------------------------------

    def _columns(self, itemset: Itemset) -> Optional[List[int]]:
        columns = []
        for item in itemset.items:
            if item not in self._index:
                return None
            columns.append(self._index[item])
        return columns

    def _count(self, itemset: Itemset, limit: int = None) -> Tuple[int, bool]:
        """
        Count the transactions containing an itemset.

        Returns:
            Tuple of (count, exact). ``exact`` is False when a partial scan
            stopped early after reaching ``limit``.
        """
        key = itemset.items
        if key in self._exact_counts:
            return self._exact_counts[key], True

        columns = self._columns(itemset)
        if columns is None:
            return 0, True

        n = self.n_transactions
        if limit is None:
            count = int(self._matrix[:, columns].all(axis=1).sum())
        else:
            count = 0
            for start in range(0, n, self.chunk_size):
                if count >= limit:
                    return count, False
                block = self._matrix[start:start + self.chunk_size, columns]
                count += int(block.all(axis=1).sum())

        self._exact_counts[key] = count
        return count, True

    def __repr__(self):
        return f"TransactionDatabase(n_transactions={self.n_transactions}, n_items={len(self._items)})"


def _is_one_hot(df: pd.DataFrame) -> bool:
    if len(df.columns) == 0:
        return False
    if all(pd.api.types.is_bool_dtype(dtype) for dtype in df.dtypes):
        return True
    if not all(pd.api.types.is_numeric_dtype(dtype) for dtype in df.dtypes):
        return False
    values = pd.unique(df.values.ravel())
    return all(pd.isna(v) or v in (0, 1) for v in values)
