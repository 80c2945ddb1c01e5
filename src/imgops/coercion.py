## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# imgops — Typed coercion of raw argument tokens into numbers.
#

import re

from .types import ArgKind
from .errors import FloatParseError, IntParseError, UIntParseError


_FLOAT_RE = re.compile(r'[+-]?(?:(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?|inf|infinity|nan)', re.IGNORECASE)
_INT_RE = re.compile(r'([+-]?)0*(\d{1,10})')   # At most ten significant digits.
_UINT_RE = re.compile(r'\+?0*(\d{1,10})')

I32_MIN, I32_MAX = -2**31, 2**31 - 1
U32_MAX = 2**32 - 1
U8_MAX = 2**8 - 1


def _context(token, operation, argument) -> str:
    where = f" for argument {argument}" if argument is not None else ""
    where += f" of `{operation}`" if operation else ""
    return f"`{token}`{where}"


def parse_float(token: str, *, operation=None, argument=None, position=None) -> float:
    if not isinstance(token, str) or not _FLOAT_RE.fullmatch(token):
        raise FloatParseError(f"Expected a floating point number, got {_context(token, operation, argument)}.",
                              operation=operation, token=token, argument=argument, position=position)
    return float(token)

def parse_int(token: str, *, operation=None, argument=None, position=None) -> int:
    m = _INT_RE.fullmatch(token) if isinstance(token, str) else None
    if not m or not (I32_MIN <= (value := int(m.group(1) + m.group(2))) <= I32_MAX):
        raise IntParseError(f"Expected a signed 32-bit integer, got {_context(token, operation, argument)}.",
                            operation=operation, token=token, argument=argument, position=position)
    return value

def parse_uint(token: str, *, operation=None, argument=None, position=None, maximum: int = U32_MAX) -> int:
    # `-0` is rejected too: an unsigned field never accepts a sign other than `+`.
    m = _UINT_RE.fullmatch(token) if isinstance(token, str) else None
    if not m or (value := int(m.group(1))) > maximum:
        bits = maximum.bit_length()
        raise UIntParseError(f"Expected an unsigned {bits}-bit integer, got {_context(token, operation, argument)}.",
                             operation=operation, token=token, argument=argument, position=position)
    return value

def parse_u8(token: str, **kwargs) -> int:
    return parse_uint(token, maximum=U8_MAX, **kwargs)


NUMERIC_PARSERS = {
    ArgKind.FLOAT: parse_float,
    ArgKind.INT: parse_int,
    ArgKind.UINT: parse_uint,
}


def parse_number(kind: ArgKind, token: str, **kwargs):
    return NUMERIC_PARSERS[kind](token, **kwargs)

def parse_array(kind: ArgKind, tokens, *, operation=None, first_argument: int = 1, position: int = 0) -> tuple:
    """Parse elements in declaration order; the first failing element aborts the whole array."""
    parser = NUMERIC_PARSERS[kind]
    return tuple(parser(tok, operation=operation, argument=first_argument + i, position=position + i)
                 for i, tok in enumerate(tokens))
