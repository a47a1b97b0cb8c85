"""Lookup, update and serialisation of parsed configuration mappings.

Keys are dotted paths such as ``"root.section.key"``; a literal dot inside a
key is written as ``"\\."``.
"""

from __future__ import annotations

import os
from dataclasses import replace

from .cfg_parser import CfgType, CfgValue, Color, Vec4D

Cfg = dict[str, CfgValue]


def _target_name(key: str) -> str:
    """Return the last segment of a dotted path, with escapes removed."""
    i = len(key) - 1
    start = 0
    while i > 0:
        if key[i] == ".":
            if key[i - 1] == "\\":
                i -= 1
            else:
                start = i + 1
                break
        else:
            i -= 1
    return key[start:].replace("\\", "")


def _segments(key: str):
    """Yield the path segments of ``key``, turning ``\\.`` into a dot."""
    pos, n = 0, len(key)
    while pos < n:
        chars: list[str] = []
        while pos < n:
            c = key[pos]
            if c == "\\" and pos + 1 < n and key[pos + 1] == ".":
                chars.append(".")
                pos += 2
            elif c == ".":
                pos += 1
                break
            else:
                chars.append(c)
                pos += 1
        yield "".join(chars)


def _get_var(cfg: Cfg, key: str) -> CfgValue | None:
    dot = key.find(".")
    if dot < 0 or (dot > 0 and key[dot - 1] == "\\"):
        var = cfg.get(key)
        return None if var is None or var.type == CfgType.NULL else var

    target = _target_name(key)
    itermap: Cfg = cfg
    var: CfgValue | None = None
    for section in _segments(key):
        if not section:
            break
        var = itermap.get(section)
        if var is None or section == target:
            break
        if var.type == CfgType.MAP:
            itermap = var.value
    return var


def _get_typed(cfg: Cfg, key: str, cfg_type: CfgType):
    var = _get_var(cfg, key)
    if var is None or var.type != cfg_type:
        return None
    return var.value


def get_section(cfg: Cfg, key: str) -> Cfg | None:
    """Return the section at ``key``, or None if there is no such section."""
    return _get_typed(cfg, key, CfgType.MAP)


def get_str(cfg: Cfg, key: str) -> str | None:
    """Return the string at ``key``, or None."""
    return _get_typed(cfg, key, CfgType.STRING)


def get_float(cfg: Cfg, key: str) -> float | None:
    """Return the float at ``key``, or None."""
    return _get_typed(cfg, key, CfgType.FLOAT)


def get_int(cfg: Cfg, key: str) -> int | None:
    """Return the integer at ``key``, or None."""
    return _get_typed(cfg, key, CfgType.INT)


def get_bool(cfg: Cfg, key: str) -> bool | None:
    """Return the boolean at ``key``, or None."""
    return _get_typed(cfg, key, CfgType.BOOL)


def get_color(cfg: Cfg, key: str) -> Color | None:
    """Return the color at ``key``, or None."""
    return _get_typed(cfg, key, CfgType.COLOR)


def get_vec4d(cfg: Cfg, key: str) -> Vec4D | None:
    """Return the vector at ``key``, or None."""
    return _get_typed(cfg, key, CfgType.VEC4D)


def get_type(cfg: Cfg, key: str) -> CfgType:
    """Return the type of the value at ``key``, ``CfgType.INVALID`` if absent."""
    var = _get_var(cfg, key)
    return CfgType.INVALID if var is None else var.type


def _set(cfg: Cfg, key: str, cfg_type: CfgType, value, override_convert: bool) -> None:
    var = _get_var(cfg, key)
    if var is None:
        raise KeyError(key)
    if var.type != cfg_type and not override_convert:
        raise TypeError(f"key '{key}' holds {var.type.name}, not {cfg_type.name}")
    var.type = cfg_type
    var.value = value


def set_str(cfg: Cfg, key: str, value: str, override_convert: bool = False) -> None:
    """Store a string at an existing ``key``."""
    _set(cfg, key, CfgType.STRING, str(value), override_convert)


def set_float(cfg: Cfg, key: str, value: float, override_convert: bool = False) -> None:
    """Store a float at an existing ``key``."""
    _set(cfg, key, CfgType.FLOAT, float(value), override_convert)


def set_int(cfg: Cfg, key: str, value: int, override_convert: bool = False) -> None:
    """Store an integer at an existing ``key``."""
    _set(cfg, key, CfgType.INT, int(value), override_convert)


def set_bool(cfg: Cfg, key: str, value: bool, override_convert: bool = False) -> None:
    """Store a boolean at an existing ``key``."""
    _set(cfg, key, CfgType.BOOL, bool(value), override_convert)


def set_color(cfg: Cfg, key: str, value: Color, override_convert: bool = False) -> None:
    """Store a color at an existing ``key``."""
    _set(cfg, key, CfgType.COLOR, replace(value), override_convert)


def set_vec4d(cfg: Cfg, key: str, value: Vec4D, override_convert: bool = False) -> None:
    """Store a vector at an existing ``key``."""
    _set(cfg, key, CfgType.VEC4D, Vec4D(value.x, value.y, value.z, value.w), override_convert)


def set_to_null(cfg: Cfg, key: str) -> None:
    """Replace the value at an existing ``key`` with null."""
    var = _get_var(cfg, key)
    if var is None:
        raise KeyError(key)
    var.type = CfgType.NULL
    var.value = None


def _scalar_text(var: CfgValue) -> str:
    t, v = var.type, var.value
    if t == CfgType.NULL:
        return "null"
    if t == CfgType.STRING:
        return f'"{v}"'
    if t == CfgType.FLOAT:
        return f"{v:f}"
    if t == CfgType.INT:
        return str(v)
    if t == CfgType.BOOL:
        return "true" if v else "false"
    if t == CfgType.COLOR:
        return f"c[ {v.r}, {v.g}, {v.b}, {v.a} ]"
    if t == CfgType.VEC4D:
        return f"v[ {v.x:f}, {v.y:f}, {v.z:f}, {v.w:f} ]"
    raise TypeError(f"cannot format value of type {t!r}")


def _lines(cfg: Cfg, depth: int):
    indent = "\t" * depth
    for key, var in cfg.items():
        head = f'{indent}"{key}": '
        if var.type == CfgType.MAP:
            yield head + "{\n"
            yield from _lines(var.value, depth + 1)
            yield indent + "}\n"
        else:
            yield head + _scalar_text(var) + "\n"


def to_str(cfg: Cfg) -> str:
    """Render a configuration back into its text form."""
    return "".join(_lines(cfg, 0))


def build_file(cfg: Cfg, filename: str | os.PathLike[str], overwrite: bool = True) -> None:
    """Write the configuration to ``filename``, replacing or appending to it."""
    with open(filename, "w" if overwrite else "a", encoding="utf-8") as file:
        file.write(to_str(cfg))