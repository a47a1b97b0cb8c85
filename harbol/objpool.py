"""Fixed-size object pool with an embedded free-block index list."""

from __future__ import annotations

import struct

from .mempool import InvalidPointerError
from .region import AllocationError, align_size

_INDEX = struct.Struct("<Q")


class ObjPool:
    """A pool of equally sized blocks; pointers are offsets into :attr:`mem`.

    Each free block stores the index of the next free block in its first word.
    """

    def __init__(self, objsize: int, length: int) -> None:
        if length <= 0 or objsize <= 0:
            raise ValueError("object size and pool length must be positive")
        self.objsize = align_size(objsize, _INDEX.size)
        self.size = length
        self.free_blocks = length
        self.mem: bytearray | None = bytearray(length * self.objsize)
        for i in range(length):
            _INDEX.pack_into(self.mem, i * self.objsize, i + 1)
        self.next: int | None = 0

    def alloc(self) -> int:
        """Take a zeroed block and return its pointer."""
        if self.free_blocks == 0 or self.mem is None or self.next is None:
            raise AllocationError("object pool exhausted")
        ptr = self.next
        (index,) = _INDEX.unpack_from(self.mem, ptr)
        self.free_blocks -= 1
        self.next = index * self.objsize if self.free_blocks else None
        self.mem[ptr:ptr + self.objsize] = bytes(self.objsize)
        return ptr

    def _check(self, ptr: int) -> bytearray:
        if self.mem is None:
            raise InvalidPointerError("object pool has no memory")
        if ptr is None or ptr < 0 or ptr >= self.size * self.objsize or ptr % self.objsize:
            raise InvalidPointerError(f"pointer {ptr!r} is not a block of this pool")
        return self.mem

    def free(self, ptr: int) -> None:
        """Return the block at ``ptr`` to the pool."""
        mem = self._check(ptr)
        index = self.next // self.objsize if self.next is not None else self.size
        _INDEX.pack_into(mem, ptr, index)
        self.next = ptr
        self.free_blocks += 1

    def clear(self) -> None:
        """Release the pool's memory."""
        if self.mem is None:
            return
        self.mem = None
        self.next = None
        self.size = self.objsize = self.free_blocks = 0

    def read(self, ptr: int) -> bytes:
        """Return the bytes of the block at ``ptr``."""
        mem = self._check(ptr)
        return bytes(mem[ptr:ptr + self.objsize])

    def write(self, ptr: int, data: bytes) -> None:
        """Store ``data`` at the start of the block at ``ptr``."""
        mem = self._check(ptr)
        if len(data) > self.objsize:
            raise ValueError(f"{len(data)} bytes do not fit a block of {self.objsize}")
        mem[ptr:ptr + len(data)] = data