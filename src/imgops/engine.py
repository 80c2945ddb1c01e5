## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from typing import Any, Protocol, runtime_checkable

from .types import Program
from .errors import EngineError


@runtime_checkable
class ImageEngine(Protocol):
    """Anything that executes a finished program on an image buffer, raising `EngineError` on failure."""

    def apply(self, buffer: Any, program: Program) -> Any: ...


def apply(engine: ImageEngine, buffer: Any, program: Program) -> Any:
    if not isinstance(engine, ImageEngine):
        raise TypeError(f"Expected an image engine with an `apply(buffer, program)` method, got {type(engine).__name__}.")
    if not isinstance(program, Program):
        raise TypeError(f"Expected a parsed Program, got {type(program).__name__}.")
    return engine.apply(buffer, program)


__all__ = ['ImageEngine', 'EngineError', 'apply']
