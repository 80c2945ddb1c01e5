## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import re
import sys
from enum import Enum
from pathlib import Path

from .types import STATEMENT_END, Program, Execute, EnvironmentAdd, Skip, PreserveAspectRatio, SamplingFilter
from .operations import Op, DrawText
from .modifiers import ModifierId, MODIFIER_KEYWORD


def write_without_ansi(write_fn):
    """Wrapper function that strips ANSI codes before calling the original writer."""
    ansi_re = re.compile(r'\033\[[0-9;]*m')
    return lambda text: write_fn(ansi_re.sub('', text))


def _quote(text: str) -> str:
    return '"' + text.replace('\\', '\\\\').replace('"', '\\"') + '"'

def format_value(value) -> str:
    if isinstance(value, bool): return str(value).lower()
    if isinstance(value, Enum): return str(value.value)
    if isinstance(value, Path): return _quote(str(value))
    if isinstance(value, str): return _quote(value)
    if isinstance(value, tuple): return ' '.join(format_value(v) for v in value)
    return str(value)

def format_operation(op: Op) -> str:
    if isinstance(op, DrawText):
        (x, y), (r, g, b, a) = op.coord, op.color
        args = [_quote(op.text), f"coord({x}, {y})", f"rgba({r}, {g}, {b}, {a})",
                f"size({op.font.size})", f"font({_quote(str(op.font.path))})"]
    else:
        args = [format_value(getattr(op, f)) for f in op.__dataclass_fields__]
    return ' '.join([op.id.value, *args])

def format_modifier(modifier) -> str:
    if isinstance(modifier, PreserveAspectRatio):
        return f"{ModifierId.PRESERVE_ASPECT_RATIO.value} {format_value(modifier.value)}"
    assert isinstance(modifier, SamplingFilter)
    return f"{ModifierId.SAMPLING_FILTER.value} {format_value(modifier.filter)}"

def format_instruction(instruction) -> str:
    if isinstance(instruction, Execute):
        return format_operation(instruction.operation)
    if isinstance(instruction, EnvironmentAdd):
        text = format_modifier(instruction.modifier)
        return f"{MODIFIER_KEYWORD} {instruction.for_operation.value} {text}" if instruction.for_operation else text
    assert isinstance(instruction, Skip)
    return ' '.join(instruction.tokens)


def to_script(program: Program) -> str:
    """Render a program back as script text; skipped foreign tokens are left out."""
    return '; '.join(format_instruction(it) for it in program if not isinstance(it, Skip))


def show_program(program: Program, file=None) -> None:
    file = file or sys.stdout
    if not program:
        print('∅', file=file)
    for i, it in enumerate(program):
        if isinstance(it, Skip):
            print(f"\033[90m{i:>3} | skip  {format_instruction(it)}\033[0m", file=file)
        elif isinstance(it, EnvironmentAdd):
            bound = f" \033[36m→ {it.target}\033[0m" if it.target is not None else ""
            print(f"\033[90m{i:>3} |\033[0m \033[33menv\033[0m   {format_instruction(it)}{bound}", file=file)
        else:
            print(f"\033[90m{i:>3} |\033[0m \033[97mop\033[0m    {format_instruction(it)}", file=file)

def show_trace(tokens: list, instruction, file=None) -> None:
    consumed = ' '.join(t if isinstance(t, str) else repr(t) for t in tokens)
    print(f"\033[90mtoken(in)\033[0m {consumed:<32} \033[36m <=> \033[0m {format_instruction(instruction)}",
          file=file or sys.stderr)


def format_token_context(tokens: list, position: int | None) -> str:
    """Render the token stream on one line, highlighting the token at `position`."""
    parts = []
    for i, token in enumerate(tokens):
        text = ';' if token is STATEMENT_END else str(token)
        parts.append(f"\033[48;5;30m\033[1;97m{text}\033[0m" if i == position else f"\033[90m{text}\033[0m")
    if position is not None and position >= len(tokens):
        parts.append("\033[48;5;30m\033[1;97m␃\033[0m")
    return '\n    ' + ' '.join(parts) + '\n'


def format_source_context(filename: str, source: str, line: int, column: int, token_value: str) -> str:
    lines = source.splitlines()
    start_line, end_line = max(0, line - 3), min(len(lines), line + 2)
    result = [f"\033[97m  File \"{filename}\", line {line}\033[0m"]

    for i in range(start_line, end_line):
        line_content = lines[i]
        line_color = '\033[90m'
        if i+1 == line:
            line_color = '\033[97m'
            if 0 < column <= len(line_content):
                width = max(1, len(token_value))
                line_content = (
                    line_content[:column-1] +
                    f"\033[48;5;30m\033[1;97m{line_content[column-1:column+width-1]}\033[0m" +
                    line_content[column+width-1:]
                )
        result.append(f"{line_color}{i+1:>5} |\033[0m {line_content}")
    return '\n' + '\n'.join(result) + '\n'
