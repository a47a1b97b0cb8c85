import struct

import pytest

from harbol.mempool import InvalidPointerError
from harbol.objpool import ObjPool
from harbol.region import AllocationError


def _put(pool, ptr, value):
    pool.write(ptr, struct.pack("<q", value))


def _get(pool, ptr):
    return struct.unpack("<q", pool.read(ptr))[0]


def test_initial_free_blocks():
    pool = ObjPool(8, 5)
    assert pool.free_blocks == 5
    assert pool.objsize == 8


def test_objsize_is_word_aligned():
    assert ObjPool(3, 2).objsize == 8
    assert ObjPool(9, 2).objsize == 16


def test_invalid_construction():
    with pytest.raises(ValueError):
        ObjPool(0, 5)
    with pytest.raises(ValueError):
        ObjPool(8, 0)


def test_alloc_values_and_remaining():
    pool = ObjPool(8, 5)
    ptrs = []
    for n in range(5):
        ptr = pool.alloc()
        _put(pool, ptr, n + 1)
        ptrs.append(ptr)
        assert _get(pool, ptr) == n + 1
        assert pool.free_blocks == 4 - n
    assert ptrs == [0, 8, 16, 24, 32]
    assert [_get(pool, p) for p in ptrs] == [1, 2, 3, 4, 5]
    with pytest.raises(AllocationError):
        pool.alloc()


def test_free_and_realloc():
    pool = ObjPool(8, 5)
    ptrs = [pool.alloc() for _ in range(5)]
    for n, ptr in enumerate(ptrs):
        pool.free(ptr)
        assert pool.free_blocks == n + 1
    again = []
    for n in range(5):
        ptr = pool.alloc()
        _put(pool, ptr, n + 1)
        again.append(ptr)
        assert _get(pool, ptr) == n + 1
        assert pool.free_blocks == 4 - n
    assert again == list(reversed(ptrs))


def test_alloc_returns_zeroed_block():
    pool = ObjPool(16, 2)
    ptr = pool.alloc()
    pool.write(ptr, b"\xff" * 16)
    pool.free(ptr)
    assert pool.alloc() == ptr
    assert pool.read(ptr) == bytes(16)


def test_invalid_pointer_free():
    pool = ObjPool(8, 2)
    with pytest.raises(InvalidPointerError):
        pool.free(16)
    with pytest.raises(InvalidPointerError):
        pool.free(3)


def test_write_too_large():
    pool = ObjPool(8, 2)
    ptr = pool.alloc()
    with pytest.raises(ValueError):
        pool.write(ptr, bytes(9))


def test_clear():
    pool = ObjPool(8, 5)
    pool.alloc()
    pool.clear()
    assert pool.mem is None
    assert pool.next is None
    assert pool.free_blocks == 0
    with pytest.raises(AllocationError):
        pool.alloc()