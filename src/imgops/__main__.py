## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# imgops — Image operation programs from CLI arguments or inline scripts.
#

import sys
from dataclasses import dataclass

import click

from .types import ParserConfig, QuotingPolicy, Program
from .errors import (ImgOpsError, ScriptSyntaxError, NumericParseError, ArgumentCountMismatch, InvalidNamedValueError,
                     InvalidModifierSyntax, InvalidOperationForModifier, ModifierArgumentExpected, UnboundModifierError)
from .script import tokenize_script
from .operations import OperationId, operation_names
from .modifiers import ModifierId, MODIFIER_KEYWORD
from .formatting import write_without_ansi, show_program, to_script, format_token_context, format_source_context

from . import api


@dataclass(frozen=True)
class RuntimeConfig:
    verbose: int
    strict: bool
    drawing: bool
    plain: bool
    emit: str


class ProgramRunner:
    def __init__(self, config: RuntimeConfig):
        self.verbose = config.verbose
        self.strict = config.strict
        self.drawing = config.drawing
        self.emit = config.emit
        self.failure = False

        if config.plain:
            writer = write_without_ansi(sys.stdout.write)
            sys.stdout.write, sys.stderr.write = writer, writer

    def _fatal_error(self, message: str, detail: str, exc_type: str = None, context: str = '') -> None:
        header = detail if not exc_type else f"{detail} (Exception: \033[33m{exc_type}\033[0m)"
        print(f'\033[30;43m {message} \033[0m {header}\n{context}', file=sys.stderr)
        self.failure = True

    def _handle_exception(self, exc: ImgOpsError, name: str, tokens: list, source: str | None = None) -> None:
        kind = type(exc).__name__
        if isinstance(exc, ScriptSyntaxError):
            context = format_source_context(name, source or '', exc.line or 0, exc.column or 0, exc.token or '')
            self._fatal_error("SYNTAX ERROR.", f"Lexing `\033[97m{name}\033[0m` caused a problem!", kind, context)
            return

        context = format_token_context(tokens, exc.position) + f"\n\033[90m{exc}\033[0m\n"
        if isinstance(exc, (NumericParseError, ArgumentCountMismatch, InvalidNamedValueError)):
            detail = f"Arguments of `\033[1;97m{getattr(exc, 'operation', None) or exc.token}\033[0m` from `\033[97m{name}\033[0m` are invalid!"
            self._fatal_error("ARGUMENT ERROR.", detail, kind, context)
        elif isinstance(exc, (InvalidModifierSyntax, InvalidOperationForModifier, ModifierArgumentExpected, UnboundModifierError)):
            self._fatal_error("MODIFIER ERROR.", f"Modifier declaration in `\033[97m{name}\033[0m` is invalid!", kind, context)
        else:
            detail = f"Token `\033[1;97m{exc.token}\033[0m` from `\033[97m{name}\033[0m` is not an image operation!"
            self._fatal_error("SYNTAX ERROR.", detail, kind, context)

    def _emit(self, program: Program) -> None:
        if self.emit == 'script':
            print(to_script(program))
        else:
            show_program(program)

    def run_args(self, tokens: list[str]) -> Program | None:
        config = ParserConfig(quoting=QuotingPolicy.VERBATIM, strict_flags=self.strict, drawing=self.drawing)
        try:
            program = api.parse(tokens, config, verbosity=self.verbose)
        except ImgOpsError as exc:
            self._handle_exception(exc, '<ARGS>', tokens)
            return None
        self._emit(program)
        return program

    def run_script(self, source: str, name: str) -> Program | None:
        config = ParserConfig(quoting=QuotingPolicy.UNQUOTE, drawing=self.drawing)
        tokens = []
        try:
            tokens = tokenize_script(source, filename=name)
            program = api.parse(tokens, config, verbosity=self.verbose)
        except ImgOpsError as exc:
            self._handle_exception(exc, name, tokens, source=source)
            return None
        self._emit(program)
        return program

    def finalize(self) -> int:
        return 1 if self.failure else 0


def _show_catalog(drawing: bool) -> None:
    print(f"\033[97m\033[48;5;30m OPERATIONS. \033[0m")
    for name in operation_names(drawing=drawing):
        op = OperationId(name)
        kinds = ' '.join(f"<{k.value}>" for k in op.operation_type.params)
        print(f"  {name:<16}\033[90m{kinds}\033[0m")
    print(f"\033[97m\033[48;5;30m MODIFIERS. \033[0m")
    for modifier in ModifierId:
        print(f"  {modifier.value:<24}\033[90m[{MODIFIER_KEYWORD} <operation>] {modifier.value} <value>\033[0m")


@click.command(context_settings={'ignore_unknown_options': True, 'allow_extra_args': True})
@click.option('--script', '-s', 'scripts', multiple=True, help='Inline script, e.g. "blur 1; flip-horizontal".')
@click.option('--script-file', '-f', type=click.File('r', encoding='utf-8'), help='Read a script from file, or `-` for stdin.')
@click.option('--strict', is_flag=True, help='Reject unknown CLI flags instead of skipping them.')
@click.option('--drawing', is_flag=True, help='Enable drawing operations such as `draw-text`.')
@click.option('--emit', type=click.Choice(['table', 'script']), default='table', help='Output format of the program.')
@click.option('--list', 'list_catalog', is_flag=True, help='List known operations and modifiers.')
@click.option('--verbose', '-v', default=0, count=True, help='Trace each decoded instruction.')
@click.option('--plain', '-p', is_flag=True, help='Strip ANSI color codes and redirect stderr to stdout.')
@click.argument('tokens', nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def cli(ctx: click.Context, scripts: tuple[str, ...], script_file, strict: bool, drawing: bool, emit: str,
        list_catalog: bool, verbose: int, plain: bool, tokens: tuple[str, ...]) -> None:
    runner = ProgramRunner(RuntimeConfig(verbose=verbose, strict=strict, drawing=drawing, plain=plain, emit=emit))

    if list_catalog:
        _show_catalog(drawing)
        ctx.exit(0)

    for index, source in enumerate(scripts, start=1):
        runner.run_script(source, f'<SCRIPT_{index}>')
    if script_file is not None:
        runner.run_script(script_file.read(), script_file.name or '<STDIN>')
    if tokens or not (scripts or script_file):
        runner.run_args(list(tokens))
    ctx.exit(runner.finalize())


def main(argv: list[str] | None = None) -> None:
    cli.main(args=list(sys.argv[1:] if argv is None else argv), prog_name='imgops')


if __name__ == "__main__":
    main()
