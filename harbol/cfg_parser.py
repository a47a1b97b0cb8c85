"""Parser for the key/value configuration format.

Grammar::

    keyval  = ( string | "<include>" | "<enum>" ) [':'] ( value | section ) [','] .
    section = '{' *keyval '}' .
    value   = string | number | vec | "true" | "false" | "null" | "iota" | "IOTA" | "<FILE>" .
    matrix  = '[' number [','] [number] [','] [number] [','] [number] ']' .
    vec     = ('v' | 'c') matrix .
    string  = '"' chars '"' | "'" chars "'" .

A parsed configuration is an ordered ``dict`` mapping keys to :class:`CfgValue`.
"""

from __future__ import annotations

import os
import struct
import warnings
from dataclasses import dataclass
from enum import IntEnum
from typing import Any

INT_MIN = -(1 << 63)
INT_MAX = (1 << 63) - 1
ULONG_MAX = (1 << 64) - 1
STRING_CFG_NAME = "C-string-cfg"

_WHITESPACE = frozenset(" \t\r\n\v\f")
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
_OCT_DIGITS = frozenset("01234567")
_SUFFIX_CHARS = frozenset("uUlLfF")
_SIMPLE_ESCAPES = {
    "n": "\n", "t": "\t", "r": "\r", "a": "\a", "b": "\b", "f": "\f", "v": "\v",
    "\\": "\\", "'": "'", '"': '"', "?": "?",
}
_KEYWORD_ERROR = "invalid keyword value, only 'true', 'false', 'null', 'iota', and 'IOTA' are allowed"


def _to_float32(value: float) -> float:
    return struct.unpack("<f", struct.pack("<f", value))[0]


class CfgType(IntEnum):
    """Kind of value stored under a configuration key."""

    INVALID = -1
    NULL = 0
    MAP = 1
    STRING = 2
    FLOAT = 3
    INT = 4
    BOOL = 5
    COLOR = 6
    VEC4D = 7


@dataclass
class Color:
    """A four-byte RGBA color."""

    r: int = 0
    g: int = 0
    b: int = 0
    a: int = 0

    def __post_init__(self) -> None:
        for name in ("r", "g", "b", "a"):
            component = getattr(self, name)
            if not 0 <= component <= 0xFF:
                raise ValueError(f"color component {name}={component} outside 0..255")


@dataclass
class Vec4D:
    """A four-component vector of 32-bit floats."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 0.0

    def __post_init__(self) -> None:
        self.x = _to_float32(self.x)
        self.y = _to_float32(self.y)
        self.z = _to_float32(self.z)
        self.w = _to_float32(self.w)


@dataclass
class CfgValue:
    """A typed configuration value; sections hold a ``dict`` of further values."""

    type: CfgType
    value: Any = None

    def __post_init__(self) -> None:
        self.type = CfgType(self.type)


class CfgSyntaxError(ValueError):
    """Raised when configuration text cannot be parsed."""

    def __init__(self, message: str, filename: str | None = None, line: int | None = None) -> None:
        self.message = message
        self.filename = filename
        self.line = line
        where = filename if filename is not None else "<string>"
        if line is not None:
            where = f"{where}:{line}"
        super().__init__(f"{where}: {message}")


@dataclass
class _Number:
    sign: str
    body: str
    is_float: bool
    is_hex: bool

    def _integer_prefix(self) -> int:
        body = self.body
        if self.is_hex:
            digits = _take_while(body[2:], _HEX_DIGITS)
            return int(digits, 16) if digits else 0
        if body.startswith("0"):
            return int(_take_while(body, _OCT_DIGITS), 8)
        digits = _take_while(body, frozenset("0123456789"))
        return int(digits) if digits else 0

    def as_int(self) -> int:
        magnitude = self._integer_prefix()
        value = -magnitude if self.sign == "-" else magnitude
        return max(INT_MIN, min(INT_MAX, value))

    def as_byte(self) -> int:
        magnitude = self._integer_prefix()
        if magnitude > ULONG_MAX:
            value = ULONG_MAX
        else:
            value = (-magnitude) % (ULONG_MAX + 1) if self.sign == "-" else magnitude
        return value & 0xFF

    def as_float(self) -> float:
        text = self.sign + self.body
        return float.fromhex(text) if self.is_hex else float(text)


def _take_while(text: str, allowed: frozenset[str]) -> str:
    end = 0
    while end < len(text) and text[end] in allowed:
        end += 1
    return text[:end]


class _Parser:
    def __init__(self, text: str, filename: str | None) -> None:
        nul = text.find("\0")
        self.text = text if nul < 0 else text[:nul]
        self.filename = filename
        self.pos = 0
        self.line = 1
        self.local_iota = 0
        self.local_enum = 0
        self.global_iota = 0
        self.global_enum = 0

    def error(self, message: str) -> CfgSyntaxError:
        return CfgSyntaxError(message, self.filename, self.line)

    def _peek(self, offset: int = 0) -> str:
        index = self.pos + offset
        return self.text[index] if index < len(self.text) else ""

    def _startswith(self, prefix: str) -> bool:
        return self.text.startswith(prefix, self.pos)

    def _skip(self) -> bool:
        """Skip whitespace, comments and delimiters; report whether input remains."""
        while True:
            c = self._peek()
            if not c:
                return False
            if c in _WHITESPACE:
                if c == "\n":
                    self.line += 1
                self.pos += 1
            elif c == "#" or self._startswith("//"):
                end = self.text.find("\n", self.pos)
                self.pos = len(self.text) if end < 0 else end
            elif self._startswith("/*"):
                end = self.text.find("*/", self.pos + 2)
                stop = len(self.text) if end < 0 else end + 2
                self.line += self.text.count("\n", self.pos, stop)
                self.pos = stop
            elif c in (":", ","):
                self.pos += 1
            else:
                return True

    def _lex_string(self) -> str:
        quote = self._peek()
        self.pos += 1
        out: list[str] = []
        while True:
            c = self._peek()
            if not c:
                raise self.error("unterminated string literal")
            self.pos += 1
            if c == quote:
                return "".join(out)
            if c == "\\":
                out.append(self._lex_escape())
            else:
                if c == "\n":
                    self.line += 1
                out.append(c)

    def _lex_hex_run(self, limit: int | None = None) -> str:
        start = self.pos
        while self._peek() in _HEX_DIGITS and self._peek() and (limit is None or self.pos - start < limit):
            self.pos += 1
        return self.text[start:self.pos]

    def _lex_escape(self) -> str:
        c = self._peek()
        if not c:
            raise self.error("unterminated escape sequence")
        self.pos += 1
        if c in _SIMPLE_ESCAPES:
            return _SIMPLE_ESCAPES[c]
        if c in _OCT_DIGITS:
            digits = c
            while len(digits) < 3 and self._peek() and self._peek() in _OCT_DIGITS:
                digits += self._peek()
                self.pos += 1
            return chr(int(digits, 8))
        if c == "x":
            digits = self._lex_hex_run()
            if not digits:
                raise self.error("hex escape sequence has no digits")
            return chr(int(digits, 16))
        if c in ("u", "U"):
            width = 4 if c == "u" else 8
            digits = self._lex_hex_run(width)
            if len(digits) != width:
                raise self.error(f"unicode escape needs {width} hex digits")
            try:
                return chr(int(digits, 16))
            except ValueError:
                raise self.error(f"invalid unicode escape '\\{c}{digits}'") from None
        raise self.error(f"invalid escape sequence '\\{c}'")

    def _consume_digits(self, allowed: frozenset[str]) -> int:
        start = self.pos
        while self._peek() and self._peek() in allowed:
            self.pos += 1
        return self.pos - start

    def _lex_number(self) -> _Number:
        sign = ""
        if self._peek() in ("+", "-"):
            sign = self._peek()
            self.pos += 1
        c = self._peek()
        if not (c.isdigit() or c == "."):
            raise self.error(f"invalid initial numeric digit: '{c}'")
        start = self.pos
        decimal = frozenset("0123456789")
        is_float = False
        is_hex = self._startswith("0x") or self._startswith("0X")
        if is_hex:
            self.pos += 2
            digits = self._consume_digits(_HEX_DIGITS)
            has_point = self._peek() == "."
            if has_point:
                is_float = True
                self.pos += 1
                digits += self._consume_digits(_HEX_DIGITS)
            if digits == 0:
                raise self.error(f"invalid number '{sign}{self.text[start:self.pos]}', hex literal has no digits")
            if self._peek() in ("p", "P"):
                is_float = True
                self._lex_exponent(start, sign)
            elif has_point:
                raise self.error(f"invalid number '{sign}{self.text[start:self.pos]}', hex float needs an exponent")
        else:
            digits = self._consume_digits(decimal)
            if self._peek() == ".":
                is_float = True
                self.pos += 1
                digits += self._consume_digits(decimal)
            if digits == 0:
                raise self.error(f"invalid number '{sign}{self.text[start:self.pos]}', no digits")
            if self._peek() in ("e", "E"):
                is_float = True
                self._lex_exponent(start, sign)
        body = self.text[start:self.pos]
        suffix_start = self.pos
        self._consume_digits(_SUFFIX_CHARS)
        suffix = self.text[suffix_start:self.pos]
        if (is_float and any(ch in "uU" for ch in suffix)) or (not is_float and any(ch in "fF" for ch in suffix)):
            raise self.error(f"invalid number '{sign}{body}{suffix}', bad suffix")
        trailing = self._peek()
        if trailing and (trailing.isalnum() or trailing in ("_", ".")):
            raise self.error(f"invalid number '{sign}{body}{suffix}', unexpected '{trailing}'")
        return _Number(sign, body, is_float, is_hex)

    def _lex_exponent(self, start: int, sign: str) -> None:
        self.pos += 1
        if self._peek() in ("+", "-"):
            self.pos += 1
        if self._consume_digits(frozenset("0123456789")) == 0:
            raise self.error(f"invalid number '{sign}{self.text[start:self.pos]}', exponent has no digits")

    def _insert(self, cfg: dict[str, CfgValue], key: str, value: CfgValue) -> None:
        if key in cfg:
            raise self.error(f"duplicate string key '{key}'")
        cfg[key] = value

    def parse_key_val(self, cfg: dict[str, CfgValue]) -> bool:
        """Parse one key/value pair into ``cfg``; return False at end of input."""
        if not self._skip():
            return False
        if self._peek() not in ("'", '"'):
            raise self.error(f"missing beginning quote for key '{self._peek()}'")
        key = self._lex_string()
        if not key:
            raise self.error("empty string key")
        if key in cfg:
            raise self.error(f"duplicate string key '{key}'")
        self._skip()

        if key in ("<INCLUDE>", "<include>"):
            self._parse_include(cfg)
            self._skip()
            return True

        local_enum, global_enum = self.local_enum, self.global_enum
        if "<enum>" in key:
            key = key.replace("<enum>", str(local_enum))
            self.local_enum += 1
        if "<ENUM>" in key:
            key = key.replace("<ENUM>", str(global_enum))
            self.global_enum += 1

        self._insert(cfg, key, self._parse_value(key))
        self._skip()
        return True

    def _parse_include(self, cfg: dict[str, CfgValue]) -> None:
        if self._peek() not in ("'", '"'):
            raise self.error("file for config inclusion is missing string quotes")
        path = self._lex_string()
        try:
            included = parse_file(path)
        except (OSError, CfgSyntaxError) as exc:
            warnings.warn(f"failed to include cfg file '{path}': {exc}", stacklevel=4)
            return
        self._insert(cfg, path, CfgValue(CfgType.MAP, included))

    def _parse_value(self, key: str) -> CfgValue:
        c = self._peek()
        if c == "{":
            saved = (self.local_iota, self.local_enum)
            self.local_iota = self.local_enum = 0
            section = self.parse_section()
            self.local_iota, self.local_enum = saved
            return CfgValue(CfgType.MAP, section)
        if c in ("'", '"'):
            return CfgValue(CfgType.STRING, self._lex_string())
        if c in ("c", "v"):
            return self._parse_matrix(key)
        if c == "t":
            self._expect_keyword("true")
            return CfgValue(CfgType.BOOL, True)
        if c == "f":
            self._expect_keyword("false")
            return CfgValue(CfgType.BOOL, False)
        if c == "n":
            self._expect_keyword("null")
            return CfgValue(CfgType.NULL, None)
        if c == "I":
            self._expect_keyword("IOTA")
            value = self.global_iota
            self.global_iota += 1
            return CfgValue(CfgType.INT, value)
        if c == "i":
            self._expect_keyword("iota")
            value = self.local_iota
            self.local_iota += 1
            return CfgValue(CfgType.INT, value)
        if c.isdigit() or c in (".", "-", "+"):
            number = self._lex_number()
            if number.is_float:
                return CfgValue(CfgType.FLOAT, number.as_float())
            return CfgValue(CfgType.INT, number.as_int())
        if c == "[":
            raise self.error("array bracket missing 'c' or 'v' tag")
        if c == "<":
            if self._startswith("<file>") or self._startswith("<FILE>"):
                self.pos += len("<file>")
                name = self.filename if self.filename is not None else STRING_CFG_NAME
                return CfgValue(CfgType.STRING, name)
            raise self.error(f"unknown control/command '{self._peek(1)}'")
        raise self.error(f"unknown character detected '{c}'")

    def _expect_keyword(self, word: str) -> None:
        if not self._startswith(word):
            raise self.error(_KEYWORD_ERROR)
        self.pos += len(word)

    def _parse_matrix(self, key: str) -> CfgValue:
        valtype = self._peek()
        self.pos += 1
        self._skip()
        if self._peek() != "[":
            raise self.error(f"missing '[', got '{self._peek()}' instead")
        self.pos += 1
        self._skip()
        components: list[_Number] = []
        while self._peek() and self._peek() != "]":
            try:
                number = self._lex_number()
            except CfgSyntaxError as exc:
                kind = "color" if valtype == "c" else "vector"
                raise self.error(f"invalid number in {kind} array for key '{key}': {exc.message}") from None
            if len(components) < 4:
                components.append(number)
            self._skip()
        if not self._peek():
            raise self.error("unexpected end of file with ending ']' missing")
        self.pos += 1
        if valtype == "c":
            values = [n.as_byte() for n in components] + [0] * (4 - len(components))
            return CfgValue(CfgType.COLOR, Color(*values))
        floats = [n.as_float() for n in components] + [0.0] * (4 - len(components))
        return CfgValue(CfgType.VEC4D, Vec4D(*floats))

    def parse_section(self) -> dict[str, CfgValue]:
        if self._peek() != "{":
            raise self.error(f"missing '{{' but got '{self._peek()}' for section")
        self.pos += 1
        self._skip()
        section: dict[str, CfgValue] = {}
        while self._peek() and self._peek() != "}":
            if not self.parse_key_val(section):
                break
        if not self._peek():
            raise self.error("unexpected end of file with missing '}' for section")
        self.pos += 1
        return section

    def parse(self) -> dict[str, CfgValue]:
        cfg: dict[str, CfgValue] = {}
        while self.parse_key_val(cfg):
            pass
        return cfg


def parse_cstr(code: str) -> dict[str, CfgValue]:
    """Parse configuration text into an ordered mapping of keys to values."""
    return _Parser(code, None).parse()


def parse_file(filename: str | os.PathLike[str]) -> dict[str, CfgValue]:
    """Parse the configuration file ``filename``."""
    name = os.fspath(filename)
    with open(name, encoding="utf-8") as file:
        text = file.read()
    return _Parser(text, name).parse()