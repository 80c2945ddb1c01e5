## imgops — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from enum import Enum
from pathlib import Path
from dataclasses import dataclass, field


class _Sentinel:
    """Marker token that can never compare equal to a user-supplied string."""
    __slots__ = ('label',)

    def __init__(self, label: str):
        self.label = label

    def __repr__(self):
        return f"<{self.label}>"

# All checks for exhausted input must be done by identity against this.
END_OF_INPUT = _Sentinel('end-of-input')
# Inserted between script statements; never produced in Arg mode.
STATEMENT_END = _Sentinel('statement-end')


class ArgKind(Enum):
    FLOAT = 'float'
    INT = 'int'
    UINT = 'uint'
    PATH = 'path'
    TEXT = 'text'
    COORD = 'coord'
    RGBA = 'rgba'
    SIZE = 'size'
    FONT = 'font'


class ParseMode(Enum):
    AMBIGUOUS = 'ambiguous'
    ARG = 'arg'
    SCRIPT = 'script'


class QuotingPolicy(Enum):
    VERBATIM = 'verbatim'   # Shell already removed the quotes.
    UNQUOTE = 'unquote'     # Script text still carries them.


class FilterType(Enum):
    NEAREST = 'nearest'
    TRIANGLE = 'triangle'
    CATMULLROM = 'catmullrom'
    GAUSSIAN = 'gaussian'
    LANCZOS3 = 'lanczos3'


@dataclass(frozen=True)
class ParserConfig:
    quoting: QuotingPolicy = QuotingPolicy.VERBATIM
    strict_flags: bool = False
    drawing: bool = False


# Modifiers ───────────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class PreserveAspectRatio:
    value: bool

@dataclass(frozen=True)
class SamplingFilter:
    filter: FilterType

Modifier = PreserveAspectRatio | SamplingFilter


# Instructions ────────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Execute:
    operation: object

@dataclass(frozen=True)
class EnvironmentAdd:
    modifier: Modifier
    target: int | None = None
    for_operation: object = None

@dataclass(frozen=True)
class Skip:
    tokens: tuple[str, ...] = field(default_factory=tuple)

Instruction = Execute | EnvironmentAdd | Skip


class Program(tuple):
    """Ordered, immutable list of instructions handed to the image engine."""
    __slots__ = ()

    def __repr__(self):
        return f"Program({list(self)!r})"

    @property
    def operations(self) -> list:
        return [it.operation for it in self if isinstance(it, Execute)]


@dataclass(frozen=True)
class FontOptions:
    path: Path
    size: float
