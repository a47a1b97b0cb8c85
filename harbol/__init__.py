"""Allocator models, byte buffers, dynamic arrays and a config-file parser."""

__version__ = "0.1.0"

__all__ = [
    "array",
    "bistack",
    "bytebuffer",
    "cfg",
    "cfg_parser",
    "mempool",
    "objpool",
    "region",
]