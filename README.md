# harbol

A small collection of building blocks in pure Python with no runtime
dependencies:

- **Allocators.** Models of fixed-size memory arenas. Each hands out integer
  offsets into its own private byte store.
  - `harbol.region.Region`: a bump allocator that grows downward from the end
    of its buffer.
  - `harbol.mempool.MemPool`: a general-purpose pool with size-class buckets,
    a large free list, block coalescing and `realloc`.
  - `harbol.bistack.BiStack`: a double-ended stack allocator.
  - `harbol.objpool.ObjPool`: a pool of equally sized object slots.
- **Containers.**
  - `harbol.bytebuffer.ByteBuffer`: a growable byte buffer with typed
    insertion. It takes bytes, 16/32/64-bit integers, floats, NUL-terminated
    strings and raw bytes. Multi-byte values are stored little-endian.
  - `harbol.array.Array`: a capacity-bounded array. Growing, shrinking,
    shifting and deletion are all explicit.
- **Configuration.** `harbol.cfg_parser` reads a small JSON-like config
  language. `harbol.cfg` queries, edits and writes parsed configs.

## Allocators

```python
from harbol.region import Region, AllocationError
from harbol.mempool import MemPool

region = Region(80)
offset = region.alloc(8)
region.write(offset, (42).to_bytes(8, "little"))
assert int.from_bytes(region.read(offset, 8), "little") == 42
print(region.remaining())

pool = MemPool(1000)
ptr = pool.alloc(4)
pool.write(ptr, b"\x01\x02\x03\x04")
ptr = pool.realloc(ptr, 40)   # contents are carried over
pool.free(ptr)
print(pool.mem_remaining())
```

If an allocator runs out of space it raises `AllocationError`. `MemPool`
raises `harbol.mempool.InvalidPointerError` for a pointer that is not one of
its blocks.

`BiStack` hands out space from both ends of one buffer, with `alloc_front`
and `alloc_back`. `margins()` reports the gap between the two ends.
`reset_front`, `reset_back` and `reset_all` give space back.

`ObjPool(objsize, length)` gives out slots of one fixed size with `alloc` and
takes them back with `free`. Slot contents are read and written with `read`
and `write`.

## Byte buffers and arrays

```python
from harbol.bytebuffer import ByteBuffer
from harbol.array import Array

buf = ByteBuffer()
buf.insert_byte(5)
buf.insert_int16(50)
buf.insert_cstr("hello")      # stored with a terminating NUL
raw = bytes(buf)

arr = Array(8)
for value in (100, 101, 102, 103):
    arr.insert(value)
arr.del_by_index(0)
arr.reverse()
print(list(arr), arr.count(101), arr.index_of(102, 0))
```

`Array` raises `OverflowError` when it is full. It grows only through
`grow()` or `resize()`.

## Config files

A config file is a sequence of key/value pairs.

- **Keys** are quoted strings.
- **Values** can be any of these:
  - strings;
  - integers, written in decimal, hex (`0x…`) or octal (a leading `0`);
  - floats, including hex floats such as `0xB.p+2`;
  - `true`, `false` and `null`;
  - colors `c[r, g, b, a]` and vectors `v[x, y, z, w]`;
  - nested `{ ... }` sections;
  - the counters `iota` (per section) and `IOTA` (global);
  - `<FILE>`, the name of the file being parsed.
- **Separators and comments.** Colons and commas between items are optional.
  `#`, `//` and `/* ... */` start comments.
- **Enumerated keys.** `<enum>` in a key is replaced by a per-section counter,
  and `<ENUM>` by a global one.
- **Includes.** A key `<include>` with a quoted path parses that file. The
  result is stored as a section named by the path.

```python
from harbol import cfg
from harbol.cfg_parser import parse_cstr, CfgType

config = parse_cstr("""
'root': {
    'name': 'John',
    'age': 0x18,
    'money': 35.42e4,
    'colors': c[0xff, 0xff, 0xff, 0xaa],
    'phoneNumbers.': { '1': { 'type': 'home' } },
    'spouse': null
}
""")

cfg.get_int(config, "root.age")                        # 24
cfg.get_str(config, "root.phoneNumbers\\..1.type")     # 'home'
cfg.get_type(config, "root.money") is CfgType.FLOAT

cfg.set_str(config, "root.spouse", "Jane Smith", True)
print(cfg.to_str(config))
cfg.build_file(config, "settings.ini", True)
```

Key paths are split on `.`. Write `\.` for a literal dot inside a key name.

**Getters.** The getters return `None` when the key is missing or holds a
different type.

**Setters.** A setter works only on a key that already exists:

- if the key is missing, it raises `KeyError`;
- if the type differs and `override_convert` is false, it raises `TypeError`.

**Reading and writing files.** Files are read with
`harbol.cfg_parser.parse_file`. Malformed input raises
`harbol.cfg_parser.CfgSyntaxError`. `build_file` overwrites the target file,
or appends to it when `overwrite` is false.

## What is not included

The config parser does not evaluate arithmetic. A `<math ...>` marker inside
a key or a string value is kept as plain text. There is no function that
computes an expression stored in a config.

The package has no command-line tool.