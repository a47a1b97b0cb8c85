"""General-purpose memory pool with size-bucketed free lists over a region."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator

from .region import AllocationError, Region, align_size

HEADER_SIZE = 24
BUCKET_SIZE = 8
BUCKET_BITS = 3
MEM_SPLIT_THRESHOLD = 32


class InvalidPointerError(ValueError):
    """Raised when a pointer does not refer to a block of the pool."""


@dataclass(eq=False)
class MemNode:
    """Header of a pool block: its address, total size and free-list links."""

    address: int
    size: int
    next: MemNode | None = field(default=None, repr=False)
    prev: MemNode | None = field(default=None, repr=False)


def _split_node(node: MemNode, size: int) -> MemNode:
    """Carve ``size`` bytes off the end of ``node`` as a new block."""
    carved = MemNode(node.address + node.size - size, size)
    node.size -= size
    return carved


class FreeList:
    """Doubly linked list of free blocks."""

    def __init__(self) -> None:
        self.head: MemNode | None = None
        self.tail: MemNode | None = None
        self._len = 0

    def __iter__(self) -> Iterator[MemNode]:
        node = self.head
        while node is not None:
            yield node
            node = node.next

    def __len__(self) -> int:
        return self._len

    def remove(self, node: MemNode) -> MemNode:
        """Unlink ``node`` and return it."""
        if node.prev is not None:
            node.prev.next = node.next
        else:
            self.head = node.next
            if self.head is not None:
                self.head.prev = None
            else:
                self.tail = None
        if node.next is not None:
            node.next.prev = node.prev
        else:
            self.tail = node.prev
            if self.tail is not None:
                self.tail.next = None
            else:
                self.head = None
        self._len -= 1
        node.next = node.prev = None
        return node

    def find(self, size: int) -> MemNode | None:
        """Take a block of at least ``size`` bytes, splitting large ones."""
        for node in self:
            if node.size < size:
                continue
            if node.size <= size + MEM_SPLIT_THRESHOLD:
                return self.remove(node)
            return _split_node(node, size)
        return None

    def _insert_before(self, curr: MemNode, insert: MemNode) -> None:
        insert.next = curr
        if curr.prev is None:
            insert.prev = None
            self.head = insert
        else:
            insert.prev = curr.prev
            curr.prev.next = insert
        curr.prev = insert
        self._len += 1


class MemPool:
    """Memory pool; pointers are offsets of block data within the pool."""

    def __init__(self, size: int) -> None:
        if size <= 0:
            raise ValueError("pool size must be positive")
        self.stack = Region(size)
        self.large = FreeList()
        self.buckets = [FreeList() for _ in range(BUCKET_SIZE)]
        self._headers: dict[int, MemNode] = {}

    def _list_for(self, size: int) -> tuple[FreeList, bool]:
        slot = (size >> BUCKET_BITS) - 1
        if 0 <= slot < BUCKET_SIZE:
            return self.buckets[slot], True
        return self.large, False

    def _transfer(self, node: MemNode) -> None:
        target, is_bucket = self._list_for(node.size)
        self._insert(target, node, is_bucket)

    def _insert(self, flist: FreeList, node: MemNode, is_bucket: bool) -> None:
        node.next = node.prev = None
        if flist.head is None:
            flist.head = node
            flist._len += 1
            return
        it = flist.head
        while it is not None:
            if it.address == self.stack.offs:
                # a free block sits at the stack top: hand it back to the stack.
                self.stack.offs += it.size
                flist.remove(it)
                it = flist.head
                if it is None:
                    flist.head = node
                    flist._len += 1
                    return
                continue
            if it is node:
                return
            it_end = it.address + it.size
            node_end = node.address + node.size
            if it.address < node.address:
                if it_end > node.address:
                    return
                if it_end == node.address:
                    it.size += node.size
                    return
                if it.next is None:
                    it.next = node
                    node.prev = it
                    flist._len += 1
                    return
            elif it.address > node.address:
                if it is flist.head and node_end == it.address:
                    node.size += it.size
                    node.next = it.next
                    if node.next is not None:
                        node.next.prev = node
                    node.prev = None
                    flist.head = node
                    if node.next is None:
                        flist.tail = node
                    if is_bucket:
                        self._transfer(flist.remove(node))
                    return
                flist._insert_before(it, node)
                return
            it = it.next

    def _node(self, ptr: int | None) -> MemNode:
        if ptr is None or ptr - HEADER_SIZE < 0:
            raise InvalidPointerError(f"invalid pool pointer {ptr!r}")
        node = self._headers.get(ptr - HEADER_SIZE)
        if node is None:
            raise InvalidPointerError(f"no block at pointer {ptr}")
        return node

    def alloc(self, size: int) -> int:
        """Allocate ``size`` zeroed bytes and return a pointer to them."""
        if size <= 0 or size > self.stack.size:
            raise AllocationError(f"cannot allocate {size} bytes from pool")
        alloc_bytes = align_size(size + HEADER_SIZE)
        flist, _ = self._list_for(alloc_bytes)
        node = flist.find(alloc_bytes)
        if node is None:
            address = self.stack.alloc(alloc_bytes)
            node = MemNode(address, alloc_bytes)
        else:
            node.next = node.prev = None
        self._headers[node.address] = node
        ptr = node.address + HEADER_SIZE
        self.stack.write(ptr, bytes(node.size - HEADER_SIZE))
        return ptr

    def realloc(self, ptr: int | None, size: int) -> int:
        """Move the block at ``ptr`` to a block of ``size`` bytes, keeping its data."""
        if size > self.stack.size:
            raise AllocationError(f"cannot allocate {size} bytes from pool")
        if ptr is None:
            return self.alloc(size)
        old = self._node(ptr)
        new_ptr = self.alloc(size)
        resized = self._headers[new_ptr - HEADER_SIZE]
        count = min(old.size, resized.size) - HEADER_SIZE
        self.stack.write(new_ptr, self.stack.read(ptr, count))
        self.free(ptr)
        return new_ptr

    def free(self, ptr: int | None) -> None:
        """Return the block at ``ptr`` to the pool."""
        node = self._node(ptr)
        if not (self.stack.offs <= node.address <= self.stack.size) or not (
            HEADER_SIZE <= node.size <= self.stack.size
        ):
            raise InvalidPointerError(f"pointer {ptr} is not an allocated block")
        if node.address == self.stack.offs:
            self.stack.offs += node.size
        else:
            flist, is_bucket = self._list_for(node.size)
            self._insert(flist, node, is_bucket)

    def mem_remaining(self) -> int:
        """Bytes left on the stack plus bytes held in free lists."""
        total = self.stack.remaining()
        total += sum(node.size for node in self.large)
        total += sum(node.size for bucket in self.buckets for node in bucket)
        return total

    def clear(self) -> None:
        """Release all memory held by the pool."""
        self.stack.clear()
        self.large = FreeList()
        self.buckets = [FreeList() for _ in range(BUCKET_SIZE)]
        self._headers.clear()

    def block_size(self, ptr: int) -> int:
        """Usable bytes of the block at ``ptr``."""
        return self._node(ptr).size - HEADER_SIZE

    def read(self, ptr: int, size: int) -> bytes:
        """Read ``size`` bytes from the block at ``ptr``."""
        if size > self.block_size(ptr):
            raise ValueError(f"read of {size} bytes exceeds block")
        return self.stack.read(ptr, size)

    def write(self, ptr: int, data: bytes) -> None:
        """Write ``data`` into the block at ``ptr``."""
        if len(data) > self.block_size(ptr):
            raise ValueError(f"write of {len(data)} bytes exceeds block")
        self.stack.write(ptr, data)