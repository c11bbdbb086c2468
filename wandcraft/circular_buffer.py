"""
Circular Buffer
================
Fixed-capacity ring buffer used for the deck, hand and discard piles.
"""

from typing import Generic, Iterable, Iterator, List, Optional, TypeVar


T = TypeVar('T')


class BufferFullError(Exception):
    """Raised when pushing onto a buffer that has no free slot."""


class CircularBuffer(Generic[T]):
    """
    Ring buffer with O(1) push, pop-first and clear.

    Items are stored by reference in a preallocated list. Nothing is ever
    overwritten: pushing onto a full buffer raises BufferFullError.
    """

    def __init__(self, capacity: int):
        if capacity < 0:
            raise ValueError(f'Capacity must be non-negative, got {capacity}')
        self._items: List[Optional[T]] = [None] * capacity
        self._start = 0  # Index of the front item
        self.used = 0

    @property
    def capacity(self) -> int:
        return len(self._items)

    def __len__(self) -> int:
        return self.used

    def __iter__(self) -> Iterator[T]:
        """Iterate front to back without consuming."""
        for offset in range(self.used):
            yield self._items[(self._start + offset) % self.capacity]

    def __repr__(self) -> str:
        return f'CircularBuffer({self.to_array()!r}, capacity={self.capacity})'

    def is_full(self) -> bool:
        return self.used == self.capacity

    def push(self, item: T) -> None:
        """Append an item at the back."""
        if self.is_full():
            raise BufferFullError(
                f'Cannot push onto a full buffer (capacity {self.capacity})'
            )
        self._items[(self._start + self.used) % self.capacity] = item
        self.used += 1

    def push_many(self, items: Iterable[T]) -> None:
        """Append items in iteration order."""
        for item in items:
            self.push(item)

    def try_pop_first(self) -> Optional[T]:
        """Remove and return the front item, or None when empty."""
        if self.used == 0:
            return None

        item = self._items[self._start]
        self._items[self._start] = None
        self._start = (self._start + 1) % self.capacity
        self.used -= 1
        return item

    def clear(self) -> None:
        """
        Forget every item.

        Slots are not scrubbed; they get overwritten by later pushes.
        """
        self._start = 0
        self.used = 0

    def to_array(self) -> List[T]:
        """Snapshot of the contents, front to back."""
        return list(self)

    def push_contents_into(self, other: 'CircularBuffer[T]') -> None:
        """Move everything into another buffer (order kept), then empty self."""
        other.push_many(self)
        self.clear()
