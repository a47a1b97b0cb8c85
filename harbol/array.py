"""Fixed-capacity array that grows only when asked to."""

from __future__ import annotations

from typing import Any, Iterator

DEFAULT_SIZE = 4


def _next_pow_of_2(value: int) -> int:
    """Smallest power of two that is at least ``value``."""
    if value <= 1:
        return 1
    return 1 << (value - 1).bit_length()


class Array:
    """An array with an explicit capacity.

    Insertions fail with :class:`OverflowError` when the array is full;
    the capacity changes only through :meth:`grow`, :meth:`resize` and
    :meth:`shrink`. After :meth:`clear` the array has no storage until it
    is grown or resized again.
    """

    def __init__(self, capacity: int = DEFAULT_SIZE) -> None:
        if capacity < 0:
            raise ValueError("capacity cannot be negative")
        self._table: list[Any] | None = None
        self._cap = 0
        self._len = 0
        self._resize_table(max(capacity, DEFAULT_SIZE))

    def _resize_table(self, new_cap: int) -> None:
        if self._table is not None and self._cap == new_cap:
            return
        old = self._table or []
        table = [None] * new_cap
        keep = min(len(old), new_cap)
        table[:keep] = old[:keep]
        self._table = table
        self._cap = new_cap
        self._len = min(self._len, new_cap)

    def _storage(self) -> list[Any]:
        if self._table is None:
            raise ValueError("array has no storage")
        return self._table

    def _check_index(self, index: int) -> int:
        if index < 0:
            index += self._len
        if not 0 <= index < self._len:
            raise IndexError(f"index {index} out of range for length {self._len}")
        return index

    def __len__(self) -> int:
        return self._len

    def __iter__(self) -> Iterator[Any]:
        if self._table is None:
            return iter(())
        return iter(self._table[:self._len])

    def __getitem__(self, index: int) -> Any:
        table = self._storage()
        return table[self._check_index(index)]

    def __setitem__(self, index: int, value: Any) -> None:
        table = self._storage()
        table[self._check_index(index)] = value

    def __repr__(self) -> str:
        return f"Array({list(self)!r}, cap={self._cap})"

    def cap(self) -> int:
        """Number of slots reserved."""
        return self._cap

    def clear(self) -> None:
        """Release the storage; capacity and length become zero."""
        self._table = None
        self._cap = self._len = 0

    def grow(self) -> bool:
        """Double the capacity (to a power of two); return whether it grew."""
        old_cap = self._cap
        self._resize_table(DEFAULT_SIZE if self._cap == 0 else _next_pow_of_2(self._cap << 1))
        return self._cap > old_cap

    def resize(self, new_cap: int) -> bool:
        """Set the capacity to a power of two; return whether it changed.

        An array without storage, or a request for zero, gets the default size.
        """
        if new_cap < 0:
            raise ValueError("capacity cannot be negative")
        old_cap = self._cap
        target = DEFAULT_SIZE if self._cap == 0 or new_cap == 0 else _next_pow_of_2(new_cap)
        self._resize_table(target)
        return self._cap != old_cap

    def shrink(self, exact_fit: bool = False) -> bool:
        """Reduce the capacity towards the length; return whether it shrank."""
        if self._cap <= DEFAULT_SIZE or self._len == 0:
            return False
        old_cap = self._cap
        self._resize_table(self._len if exact_fit else _next_pow_of_2(self._len))
        return old_cap > self._cap

    def wipe(self) -> None:
        """Empty every slot and set the length to zero, keeping the capacity."""
        if self._table is None:
            return
        self._len = 0
        self._table = [None] * self._cap

    def empty(self) -> bool:
        """True when there is no storage or no items."""
        return self._table is None or self._cap == 0 or self._len == 0

    def full(self) -> bool:
        """True when the length has reached the capacity."""
        return self._len >= self._cap

    def add(self, other: Array) -> None:
        """Append all items of ``other``; the result must stay below capacity."""
        table = self._storage()
        other_table = other._storage()
        if self._len + other._len >= self._cap:
            raise OverflowError("not enough capacity to add arrays")
        table[self._len:self._len + other._len] = other_table[:other._len]
        self._len += other._len

    def copy_from(self, other: Array) -> None:
        """Replace the items with those of ``other``, truncated to capacity."""
        if other is self:
            return
        other_table = other._storage()
        self._storage()
        self.wipe()
        count = min(self._cap, other._len)
        self._table[:count] = other_table[:count]
        self._len = count

    def len_diff(self, other: Array) -> int:
        """Absolute difference of the lengths."""
        return abs(self._len - other._len)

    def cap_diff(self, other: Array) -> int:
        """Absolute difference of the capacities."""
        return abs(self._cap - other._cap)

    def insert(self, value: Any) -> None:
        """Add ``value`` at the end."""
        self.append(value)

    def append(self, value: Any) -> int:
        """Add ``value`` at the end and return its index."""
        table = self._storage()
        if self._len >= self._cap:
            raise OverflowError("array is full")
        index = self._len
        table[index] = value
        self._len += 1
        return index

    def fill(self, value: Any) -> None:
        """Set every slot to ``value``; the length becomes the capacity."""
        table = self._storage()
        table[:] = [value] * self._cap
        self._len = self._cap

    def pop(self) -> Any:
        """Remove and return the last item."""
        table = self._storage()
        if self._len == 0:
            raise IndexError("pop from empty array")
        self._len -= 1
        return table[self._len]

    def peek(self) -> Any:
        """Return the last item without removing it."""
        table = self._storage()
        if self._len == 0:
            raise IndexError("peek at empty array")
        return table[self._len - 1]

    def reverse(self) -> None:
        """Reverse the order of the items in place."""
        table = self._storage()
        table[:self._len] = table[:self._len][::-1]

    def shift_up(self, index: int, amount: int = 1) -> None:
        """Remove ``amount`` items starting at ``index``, moving later items down."""
        table = self._storage()
        if not 0 <= index < self._len:
            raise IndexError(f"index {index} out of range for length {self._len}")
        if amount <= 0:
            raise ValueError("amount must be positive")
        amount = min(amount, self._len - index)
        remaining = table[index + amount:self._len]
        table[index:index + len(remaining)] = remaining
        new_len = self._len - amount
        table[new_len:self._len] = [None] * amount
        self._len = new_len

    def count(self, value: Any) -> int:
        """Number of items equal to ``value``."""
        if self._table is None:
            return 0
        return sum(1 for item in self._table[:self._len] if item == value)

    def index_of(self, value: Any, start: int = 0) -> int:
        """Index of the first item equal to ``value`` at or after ``start``."""
        table = self._storage()
        for i in range(max(start, 0), self._len):
            if table[i] == value:
                return i
        raise ValueError(f"{value!r} is not in array")

    def del_by_index(self, index: int) -> None:
        """Remove the item at ``index``."""
        table = self._storage()
        if index == self._len - 1 and self._len > 0:
            self._len -= 1
            table[self._len] = None
            return
        self.shift_up(index, 1)

    def del_by_range(self, index: int, count: int) -> None:
        """Remove ``count`` items starting at ``index``."""
        table = self._storage()
        if index == 0 and index + count >= self._len:
            self.wipe()
        elif index == self._len - 1 and self._len > 0:
            self._len -= 1
            table[self._len] = None
        else:
            self.shift_up(index, count)

    def del_by_val(self, value: Any) -> None:
        """Remove the first item equal to ``value``."""
        self.del_by_index(self.index_of(value))