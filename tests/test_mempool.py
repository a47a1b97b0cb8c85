import struct

import pytest

from harbol.mempool import InvalidPointerError, MemPool
from harbol.region import AllocationError


def test_initial_remaining():
    pool = MemPool(1000)
    assert pool.mem_remaining() == 1000


def test_give_and_release_memory():
    pool = MemPool(1000)
    p = pool.alloc(4)
    pool.write(p, struct.pack("<i", 500))
    assert struct.unpack("<i", pool.read(p, 4))[0] == 500
    assert pool.mem_remaining() == 968
    f = pool.alloc(4)
    pool.write(f, struct.pack("<f", 500.5))
    assert struct.unpack("<f", pool.read(f, 4))[0] == 500.5
    assert pool.mem_remaining() == 936
    pool.free(f)
    pool.free(p)
    assert pool.mem_remaining() == 1000


def test_array_memory():
    pool = MemPool(1000)
    p = pool.alloc(400)
    data = struct.pack("<100i", *range(1, 101))
    pool.write(p, data)
    assert pool.read(p, 400) == data
    assert pool.mem_remaining() == 576
    f = pool.alloc(400)
    assert pool.mem_remaining() == 152
    pool.free(p)
    pool.free(f)
    assert pool.mem_remaining() == 1000
    assert len(pool.large) == 1


def test_reuse_from_bucket():
    pool = MemPool(1000)
    a = pool.alloc(4)
    b = pool.alloc(4)
    assert (a, b) == (992, 960)
    pool.write(a, b"\x07\x07\x07\x07")
    pool.free(a)
    assert len(pool.buckets[3]) == 1
    assert pool.mem_remaining() == 968
    again = pool.alloc(4)
    assert again == a
    assert pool.read(again, 4) == bytes(4)
    assert len(pool.buckets[3]) == 0


def test_coalescing_free_blocks():
    pool = MemPool(1000)
    a = pool.alloc(4)
    b = pool.alloc(4)
    pool.alloc(4)
    pool.free(a)
    pool.free(b)
    assert len(pool.buckets[3]) == 0
    assert [node.size for node in pool.buckets[7]] == [64]
    assert pool.mem_remaining() == 968
    assert pool.alloc(40) == 960


def test_split_large_block():
    pool = MemPool(1000)
    a = pool.alloc(400)
    pool.alloc(4)
    pool.free(a)
    ptr = pool.alloc(100)
    assert ptr == 896
    assert [node.size for node in pool.large] == [296]
    assert pool.mem_remaining() == 840
    assert pool.block_size(ptr) == 104


def test_double_free_raises():
    pool = MemPool(1000)
    p = pool.alloc(4)
    pool.free(p)
    with pytest.raises(InvalidPointerError):
        pool.free(p)
    assert pool.mem_remaining() == 1000


def test_invalid_pointers():
    pool = MemPool(1000)
    with pytest.raises(InvalidPointerError):
        pool.free(None)
    with pytest.raises(InvalidPointerError):
        pool.free(5)
    with pytest.raises(InvalidPointerError):
        pool.free(500)


def test_invalid_allocation_sizes():
    pool = MemPool(100)
    with pytest.raises(AllocationError):
        pool.alloc(0)
    with pytest.raises(AllocationError):
        pool.alloc(200)


def test_pool_exhaustion():
    pool = MemPool(64)
    assert pool.alloc(40) == 24
    with pytest.raises(AllocationError):
        pool.alloc(4)


def test_zero_sized_pool_rejected():
    with pytest.raises(ValueError):
        MemPool(0)


def test_realloc_preserves_data():
    pool = MemPool(1000)
    jj = pool.alloc(1)
    pool.write(jj, bytes([50]))
    newer = pool.realloc(jj, 4)
    assert pool.read(newer, 1) == bytes([50])
    jj = pool.realloc(newer, 1)
    assert pool.read(jj, 1) == bytes([50])
    newer = pool.realloc(jj, 40)
    values = struct.pack("<10i", *range(1, 11))
    pool.write(newer, values)
    newer = pool.realloc(newer, 20)
    assert struct.unpack("<5i", pool.read(newer, 20)) == (1, 2, 3, 4, 5)
    pool.free(newer)


def test_realloc_none_allocates():
    pool = MemPool(1000)
    ptr = pool.realloc(None, 8)
    assert ptr == 992
    assert pool.mem_remaining() == 968


def test_write_beyond_block_rejected():
    pool = MemPool(1000)
    p = pool.alloc(4)
    assert pool.block_size(p) == 8
    with pytest.raises(ValueError):
        pool.write(p, bytes(9))


def test_clear():
    pool = MemPool(1000)
    p = pool.alloc(16)
    pool.clear()
    assert pool.stack.mem is None
    assert pool.large.head is None
    assert pool.mem_remaining() == 0
    with pytest.raises(InvalidPointerError):
        pool.free(p)
    with pytest.raises(AllocationError):
        pool.alloc(4)