"""Double-ended stack allocator: one arena growing from both ends."""

from __future__ import annotations

from .region import AllocationError, align_size


class BiStack:
    """A fixed buffer with a front stack growing up and a back stack growing down.

    Allocations return offsets into :attr:`mem`.
    """

    def __init__(self, size: int) -> None:
        if size <= 0:
            raise ValueError("bistack size must be positive")
        self.mem: bytearray | None = bytearray(size)
        self.size = size
        self.front = 0
        self.back = size

    def _require_mem(self) -> bytearray:
        if self.mem is None:
            raise AllocationError("bistack has no memory")
        return self.mem

    def alloc_front(self, size: int) -> int:
        """Reserve ``size`` bytes (word aligned) from the front; return their offset."""
        self._require_mem()
        aligned = align_size(size)
        if self.front + aligned >= self.back:
            raise AllocationError(f"front of bistack exhausted: {aligned} bytes requested")
        offset = self.front
        self.front += aligned
        return offset

    def alloc_back(self, size: int) -> int:
        """Reserve ``size`` bytes (word aligned) from the back; return their offset."""
        self._require_mem()
        aligned = align_size(size)
        if self.back - aligned <= self.front:
            raise AllocationError(f"back of bistack exhausted: {aligned} bytes requested")
        self.back -= aligned
        return self.back

    def reset_front(self) -> None:
        """Release every front allocation."""
        if self.mem is not None:
            self.front = 0

    def reset_back(self) -> None:
        """Release every back allocation."""
        if self.mem is not None:
            self.back = self.size

    def reset_all(self) -> None:
        """Release every allocation from both ends."""
        if self.mem is not None:
            self.front = 0
            self.back = self.size

    def margins(self) -> int:
        """Bytes between the front and back stacks."""
        return self.back - self.front

    def resize(self, new_size: int) -> None:
        """Resize the buffer, keeping its bytes; both stacks are reset."""
        if new_size <= 0:
            raise ValueError("bistack size must be positive")
        old = self.mem or bytearray()
        new_mem = bytearray(new_size)
        keep = min(len(old), new_size)
        new_mem[:keep] = old[:keep]
        self.mem = new_mem
        self.size = self.back = new_size
        self.front = 0

    def clear(self) -> None:
        """Release the buffer."""
        if self.mem is None:
            return
        self.mem = None
        self.front = self.back = self.size = 0