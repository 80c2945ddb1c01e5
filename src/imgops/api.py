## imgops — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from typing import Iterable

from .types import *
from .errors import *
from .parser import InstructionParser
from .program import assemble
from .script import tokenize_script
from .formatting import show_trace, to_script
from .engine import ImageEngine, apply


def parse(tokens: Iterable, config: ParserConfig | None = None, verbosity: int = 0, file=None) -> Program:
    parser = InstructionParser(tokens, config)
    if verbosity <= 0:
        return assemble(parser)

    def _traced():
        for consumed, instruction in parser.iter_with_tokens():
            show_trace(consumed, instruction, file=file)
            yield instruction
    return assemble(_traced())


def parse_args(tokens: Iterable[str], *, strict_flags: bool = False, drawing: bool = False,
               verbosity: int = 0, file=None) -> Program:
    """Parse shell-split arguments such as `["--blur", "1.0", "--flip-horizontal"]`."""
    config = ParserConfig(quoting=QuotingPolicy.VERBATIM, strict_flags=strict_flags, drawing=drawing)
    return parse(tokens, config, verbosity=verbosity, file=file)


def parse_script(source: str | Iterable[str], *, drawing: bool = False, verbosity: int = 0,
                 filename: str | None = None, file=None) -> Program:
    """Parse script text `blur 1; flip-horizontal`, or statements already split on `;`."""
    config = ParserConfig(quoting=QuotingPolicy.UNQUOTE, drawing=drawing)
    return parse(tokenize_script(source, filename=filename), config, verbosity=verbosity, file=file)
