"""
Itemset data structure.

An itemset is a set of unique items together with the number of transactions
that contain it. The support count is never computed here: the transaction
database attaches it once a batch of itemsets has been counted.
"""
from typing import Any, Hashable, Iterable, Iterator, List, Optional


class SupportNotComputedError(RuntimeError):
    """Raised when support is read before the database attached it."""


class Itemset:
    """Set of unique items with a lazily attached support count."""

    __slots__ = ('_items', '_support', '_exact')

    def __init__(self, items: Iterable[Hashable] = ()):
        if isinstance(items, str):
            raise TypeError(f"Itemset expects an iterable of items, got the string {items!r}")
        self._items = set(items)
        self._support: Optional[int] = None
        self._exact = False

    @property
    def items(self) -> frozenset:
        return frozenset(self._items)

    def sorted_items(self) -> List[Any]:
        return sorted(self._items)

    # Changing the content invalidates any attached count.
    def add(self, item: Hashable) -> None:
        if item not in self._items:
            self._items.add(item)
            self._support = None

    def remove(self, item: Hashable) -> None:
        self._items.remove(item)
        self._support = None

    def clone(self) -> 'Itemset':
        copy = Itemset(self._items)
        copy._support = self._support
        copy._exact = self._exact
        return copy

    def union(self, other: 'Itemset') -> 'Itemset':
        return Itemset(self._items | other._items)

    def subsets(self) -> List['Itemset']:
        """Return every subset holding one item less than this itemset."""
        return [Itemset(self._items - {item}) for item in self.sorted_items()]

    def join(self, other: 'Itemset') -> Optional['Itemset']:
        """
        Join two itemsets of size k into a candidate of size k+1.

        The join only succeeds when both itemsets have the same size and share
        all but one item.

        Returns:
            The candidate itemset, or None when the pair cannot be joined
        """
        if len(self._items) != len(other._items):
            return None
        merged = self._items | other._items
        if len(merged) != len(self._items) + 1:
            return None
        return Itemset(merged)

    # ------------------------------------------------------------------
    # Support
    # ------------------------------------------------------------------

    @property
    def has_support(self) -> bool:
        return self._support is not None

    @property
    def support(self) -> int:
        if self._support is None:
            raise SupportNotComputedError(f"Support of {self!r} has not been computed")
        return self._support

    @property
    def support_is_exact(self) -> bool:
        """False when the attached count is a lower bound from a partial scan."""
        return self._support is not None and self._exact

    def attach_support(self, count: int, exact: bool = True) -> None:
        self._support = int(count)
        self._exact = exact

    # ------------------------------------------------------------------
    # Container protocol
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item) -> bool:
        return item in self._items

    def __iter__(self) -> Iterator[Any]:
        return iter(self.sorted_items())

    def __eq__(self, other) -> bool:
        if not isinstance(other, Itemset):
            return NotImplemented
        return self._items == other._items

    def __hash__(self) -> int:
        return hash(frozenset(self._items))

    def __repr__(self):
        items = ', '.join(str(item) for item in self.sorted_items())
        if self._support is None:
            return f"Itemset({{{items}}})"
        return f"Itemset({{{items}}}, support={self._support})"
