"""Growable byte buffer for serialising integers, floats and strings."""

from __future__ import annotations

import os
import struct
from typing import BinaryIO, overload


class ByteBuffer:
    """An appendable sequence of bytes; multi-byte values are little-endian.

    Floating values of maximum width are stored as 64-bit IEEE doubles.
    """

    def __init__(self) -> None:
        self._data = bytearray()
        self._cap = 0

    def __len__(self) -> int:
        return len(self._data)

    def __bytes__(self) -> bytes:
        return bytes(self._data)

    @overload
    def __getitem__(self, index: int) -> int: ...

    @overload
    def __getitem__(self, index: slice) -> bytes: ...

    def __getitem__(self, index):
        item = self._data[index]
        return bytes(item) if isinstance(index, slice) else item

    def __repr__(self) -> str:
        return f"ByteBuffer({bytes(self._data)!r})"

    def cap(self) -> int:
        """Bytes currently reserved."""
        return self._cap

    def clear(self) -> None:
        """Drop all contents and reserved space."""
        self._data = bytearray()
        self._cap = 0

    def _extend(self, data: bytes) -> None:
        if len(self._data) + len(data) >= self._cap:
            self._cap = len(self._data) + len(data)
        self._data += data

    def insert_byte(self, value: int) -> None:
        """Append one byte (truncated to 8 bits)."""
        self._extend(struct.pack("<B", value & 0xFF))

    def insert_int16(self, value: int) -> None:
        """Append a 16-bit integer."""
        self._extend(struct.pack("<H", value & 0xFFFF))

    def insert_int32(self, value: int) -> None:
        """Append a 32-bit integer."""
        self._extend(struct.pack("<I", value & 0xFFFF_FFFF))

    def insert_int64(self, value: int) -> None:
        """Append a 64-bit integer."""
        self._extend(struct.pack("<Q", value & 0xFFFF_FFFF_FFFF_FFFF))

    def insert_ptr(self, value: int) -> None:
        """Append a pointer-sized (64-bit) integer."""
        self.insert_int64(value)

    def insert_float32(self, value: float) -> None:
        """Append a 32-bit float."""
        self._extend(struct.pack("<f", value))

    def insert_float64(self, value: float) -> None:
        """Append a 64-bit float."""
        self._extend(struct.pack("<d", value))

    def insert_floatmax(self, value: float) -> None:
        """Append the widest float, stored as a 64-bit double."""
        self.insert_float64(value)

    def insert_cstr(self, text: str | bytes) -> None:
        """Append a string (UTF-8 for ``str``) followed by a NUL byte."""
        raw = text.encode("utf-8") if isinstance(text, str) else bytes(text)
        nul = raw.find(b"\0")
        if nul >= 0:
            raw = raw[:nul]
        self._extend(raw + b"\0")

    def insert_obj(self, data: bytes) -> None:
        """Append raw bytes."""
        self._extend(bytes(data))

    def insert_zeros(self, amount: int) -> None:
        """Append ``amount`` zero bytes."""
        if amount < 0:
            raise ValueError("amount cannot be negative")
        self._extend(bytes(amount))

    def delete(self, index: int, count: int) -> None:
        """Remove ``count`` bytes starting at ``index``."""
        if not 0 <= index < len(self._data):
            raise IndexError(f"index {index} out of range for {len(self._data)} bytes")
        if count <= 0:
            raise ValueError("count must be positive")
        del self._data[index:index + count]

    def to_file(self, file: BinaryIO) -> None:
        """Write the contents to a binary file object."""
        if self._cap == 0:
            raise ValueError("buffer holds no data")
        written = file.write(bytes(self._data))
        if written is not None and written != len(self._data):
            raise OSError(f"wrote {written} of {len(self._data)} bytes")

    def insert_from_file(self, file: BinaryIO) -> None:
        """Append the whole contents of a binary file object."""
        file.seek(0, os.SEEK_END)
        size = file.tell()
        if size <= 0:
            raise ValueError("file is empty")
        file.seek(0)
        data = file.read(size)
        self._extend(data)
        if len(data) != size:
            raise OSError(f"read {len(data)} of {size} bytes")

    def insert_from_filename(self, filename: str | os.PathLike[str]) -> None:
        """Append the whole contents of the named file."""
        with open(filename, "rb") as file:
            self.insert_from_file(file)

    def append(self, other: ByteBuffer) -> None:
        """Append the contents of another buffer."""
        if other._cap == 0:
            raise ValueError("source buffer holds no data")
        self._extend(bytes(other._data))

    def copy_from(self, other: ByteBuffer) -> None:
        """Replace the contents with those of another buffer."""
        if other._cap == 0:
            raise ValueError("source buffer holds no data")
        if len(other._data) != len(self._data):
            self._cap = len(other._data)
        self._data = bytearray(other._data)