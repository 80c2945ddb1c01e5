## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# imgops — The closed catalog of image operations, their arities and typed constructors.
#

import re
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Callable, ClassVar
from dataclasses import dataclass

from .types import ArgKind, FontOptions, ParserConfig, QuotingPolicy
from .errors import ArgumentCountMismatch, InvalidNamedValueError, UnknownOperationError
from .tokens import TokenCursor, unquote
from .coercion import parse_number, parse_array, parse_float, parse_uint, parse_u8


F, I, U = ArgKind.FLOAT, ArgKind.INT, ArgKind.UINT


class OperationId(str, Enum):
    BLUR = 'blur'
    BRIGHTEN = 'brighten'
    CONTRAST = 'contrast'
    CROP = 'crop'
    DIFF = 'diff'
    DRAW_TEXT = 'draw-text'
    FILTER3X3 = 'filter3x3'
    FLIP_HORIZONTAL = 'flip-horizontal'
    FLIP_VERTICAL = 'flip-vertical'
    GRAYSCALE = 'grayscale'
    HUE_ROTATE = 'hue-rotate'
    INVERT = 'invert'
    RESIZE = 'resize'
    ROTATE90 = 'rotate90'
    ROTATE180 = 'rotate180'
    ROTATE270 = 'rotate270'
    UNSHARPEN = 'unsharpen'

    def __str__(self):
        return self.value

    @property
    def arity(self) -> int:
        return len(_OPERATION_TYPES[self].params)

    @property
    def operation_type(self) -> type:
        return _OPERATION_TYPES[self]


class Op:
    """Common base of all constructed operations; `params` fixes arity and argument kinds."""
    id: ClassVar[OperationId]
    params: ClassVar[tuple[ArgKind, ...]] = ()
    packed: ClassVar[bool] = False   # Store all arguments as a single tuple field.

    @classmethod
    def from_values(cls, values: list):
        return cls(tuple(values)) if cls.packed else cls(*values)


@dataclass(frozen=True)
class Blur(Op):
    id = OperationId.BLUR
    params = (F,)
    sigma: float

@dataclass(frozen=True)
class Brighten(Op):
    id = OperationId.BRIGHTEN
    params = (I,)
    value: int

@dataclass(frozen=True)
class Contrast(Op):
    id = OperationId.CONTRAST
    params = (F,)
    value: float

@dataclass(frozen=True)
class Crop(Op):
    id = OperationId.CROP
    params = (U, U, U, U)
    packed = True
    box: tuple[int, int, int, int]

@dataclass(frozen=True)
class Diff(Op):
    id = OperationId.DIFF
    params = (ArgKind.PATH,)
    path: Path

@dataclass(frozen=True)
class DrawText(Op):
    id = OperationId.DRAW_TEXT
    params = (ArgKind.TEXT, ArgKind.COORD, ArgKind.RGBA, ArgKind.SIZE, ArgKind.FONT)
    text: str
    coord: tuple[int, int]
    color: tuple[int, int, int, int]
    font: FontOptions

    @classmethod
    def from_values(cls, values: list):
        text, coord, color, size, font_path = values
        return cls(text, coord, color, FontOptions(font_path, size))

@dataclass(frozen=True)
class Filter3x3(Op):
    id = OperationId.FILTER3X3
    params = (F,) * 9
    packed = True
    kernel: tuple[float, ...]

@dataclass(frozen=True)
class FlipHorizontal(Op):
    id = OperationId.FLIP_HORIZONTAL

@dataclass(frozen=True)
class FlipVertical(Op):
    id = OperationId.FLIP_VERTICAL

@dataclass(frozen=True)
class Grayscale(Op):
    id = OperationId.GRAYSCALE

@dataclass(frozen=True)
class HueRotate(Op):
    id = OperationId.HUE_ROTATE
    params = (I,)
    degrees: int

@dataclass(frozen=True)
class Invert(Op):
    id = OperationId.INVERT

@dataclass(frozen=True)
class Resize(Op):
    id = OperationId.RESIZE
    params = (U, U)
    packed = True
    size: tuple[int, int]

@dataclass(frozen=True)
class Rotate90(Op):
    id = OperationId.ROTATE90

@dataclass(frozen=True)
class Rotate180(Op):
    id = OperationId.ROTATE180

@dataclass(frozen=True)
class Rotate270(Op):
    id = OperationId.ROTATE270

@dataclass(frozen=True)
class Unsharpen(Op):
    id = OperationId.UNSHARPEN
    params = (F, I)
    sigma: float
    threshold: int


_OPERATION_TYPES = MappingProxyType({cls.id: cls for cls in Op.__subclasses__()})
assert set(_OPERATION_TYPES) == set(OperationId), "Every operation id needs exactly one operation type."

_ALIASES = MappingProxyType({'filter-3x3': OperationId.FILTER3X3})
_FEATURE_GATED = frozenset({OperationId.DRAW_TEXT})


# Catalog queries ─────────────────────────────────────────────────────────────────────────────

def _resolve(name) -> OperationId | None:
    if not isinstance(name, str): return None
    try:
        return OperationId(name)
    except ValueError:
        return _ALIASES.get(name)

def is_operation(name, drawing: bool = False) -> bool:
    return (op_id := _resolve(name)) is not None and (drawing or op_id not in _FEATURE_GATED)

def lookup(name: str, drawing: bool = False) -> OperationId:
    if not is_operation(name, drawing=drawing):
        raise UnknownOperationError(f"Operation `{name}` is not a known image operation.", token=name)
    return _resolve(name)

def arity(op_id: OperationId) -> int:
    return op_id.arity

def operation_names(drawing: bool = False) -> list[str]:
    return [op.value for op in OperationId if drawing or op not in _FEATURE_GATED]


# Structured arguments ────────────────────────────────────────────────────────────────────────

_NAMED_RE = re.compile(r'\s*([A-Za-z_][\w\-]*)\s*\((.*)\)\s*', re.DOTALL)


def _named_value(token: str, name: str, operation, argument, position=None) -> str:
    if not (m := _NAMED_RE.fullmatch(token)) or m.group(1) != name:
        raise InvalidNamedValueError(f"Expected `{name}(...)` for argument {argument} of `{operation}`, got `{token}`.",
                                     token=token, argument=argument, position=position)
    return m.group(2)

def _named_fields(token: str, name: str, count: int, operation, argument, position=None) -> list[str]:
    fields = [f.strip() for f in _named_value(token, name, operation, argument, position).split(',')]
    if len(fields) != count:
        raise InvalidNamedValueError(f"`{name}(...)` takes {count} value(s), got {len(fields)} in `{token}`.",
                                     token=token, argument=argument, position=position)
    return fields


def coerce_argument(kind: ArgKind, token: str, *, operation, argument: int, config: ParserConfig, position=None):
    where = dict(operation=operation, argument=argument, position=position)
    if kind in (ArgKind.FLOAT, ArgKind.INT, ArgKind.UINT):
        return parse_number(kind, token, **where)
    if kind is ArgKind.PATH:
        return Path(unquote(token, config.quoting))
    if kind is ArgKind.TEXT:
        return unquote(token, config.quoting)
    if kind is ArgKind.COORD:
        return tuple(parse_uint(f, **where) for f in _named_fields(token, 'coord', 2, **where))
    if kind is ArgKind.RGBA:
        return tuple(parse_u8(f, **where) for f in _named_fields(token, 'rgba', 4, **where))
    if kind is ArgKind.SIZE:
        return parse_float(_named_value(token, 'size', **where).strip(), **where)
    # ArgKind.FONT: paths are always quoted inside `font(...)`, independent of the surrounding syntax.
    return Path(unquote(_named_value(token, 'font', **where).strip(), QuotingPolicy.UNQUOTE))


def construct(op_id: OperationId, cursor: TokenCursor, config: ParserConfig = ParserConfig(),
              is_boundary: Callable = lambda token: False):
    """Consume exactly `arity` argument tokens from the cursor and build the typed operation.

    Stops early at end-of-input or at a boundary token, such as the next operation flag, in which case
    the operation is starved and `ArgumentCountMismatch` is raised. Error positions index the token
    buffer: the operation name for a count mismatch, otherwise the offending argument itself.
    """
    cls = op_id.operation_type
    start = cursor.position
    args = cursor.take_until(len(cls.params), is_boundary)
    if len(args) != len(cls.params):
        raise ArgumentCountMismatch(
            f"Operation `{op_id}` expects {len(cls.params)} argument(s), but {len(args)} were found.",
            operation=op_id, expected=len(cls.params), found=len(args), token=op_id.value, position=start - 1)

    if cls.packed and len(set(cls.params)) == 1:
        values = parse_array(cls.params[0], args, operation=op_id, position=start)
    else:
        values = [coerce_argument(kind, tok, operation=op_id, argument=i + 1, config=config, position=start + i)
                  for i, (kind, tok) in enumerate(zip(cls.params, args))]
    return cls.from_values(values)
