"""Region (arena) allocator handing out blocks from the top of a buffer downward."""

from __future__ import annotations

WORD_SIZE = 8


def align_size(size: int, align: int = WORD_SIZE) -> int:
    """Round ``size`` up to the next multiple of ``align`` (a power of two)."""
    return (size + align - 1) & ~(align - 1)


class AllocationError(MemoryError):
    """Raised when an allocator cannot satisfy a request."""


class Region:
    """A fixed-size arena whose allocations grow from the end toward the start.

    Addresses handed out are offsets into the region's buffer.
    """

    def __init__(self, size: int) -> None:
        if size < 0:
            raise ValueError("region size cannot be negative")
        self.mem: bytearray | None = bytearray(size) if size else None
        self.size = size
        self.offs = size

    def alloc(self, size: int) -> int:
        """Reserve ``size`` bytes (word aligned) and return their offset."""
        if self.mem is None or size <= 0 or size > self.size:
            raise AllocationError(f"cannot allocate {size} bytes from region")
        alloc_size = align_size(size)
        if alloc_size > self.offs:
            raise AllocationError(f"region exhausted: {self.offs} bytes left, {alloc_size} requested")
        self.offs -= alloc_size
        self.mem[self.offs:self.offs + alloc_size] = bytes(alloc_size)
        return self.offs

    def remaining(self) -> int:
        """Bytes still available for allocation."""
        return 0 if self.offs > self.size else self.offs

    def clear(self) -> None:
        """Release the buffer; the region can no longer allocate."""
        self.mem = None
        self.offs = 0
        self.size = 0

    def _check_range(self, offset: int, size: int) -> bytearray:
        if self.mem is None:
            raise IndexError("region has no memory")
        if offset < 0 or size < 0 or offset + size > self.size:
            raise IndexError(f"range [{offset}, {offset + size}) outside region of {self.size} bytes")
        return self.mem

    def read(self, offset: int, size: int) -> bytes:
        """Return ``size`` bytes starting at ``offset``."""
        mem = self._check_range(offset, size)
        return bytes(mem[offset:offset + size])

    def write(self, offset: int, data: bytes) -> None:
        """Store ``data`` starting at ``offset``."""
        mem = self._check_range(offset, len(data))
        mem[offset:offset + len(data)] = data