## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# imgops — Mode-sensing parser turning a token stream into a stream of instructions.
#
# The same grammar accepts CLI arguments (`--blur 1 --flip-horizontal`) and script
# statements (`blur 1; flip-horizontal`). The shape of the first token decides which of
# the two is being read, and that decision holds until the end of the parse.
#

from typing import Iterable, Iterator

from .types import END_OF_INPUT, STATEMENT_END, ParseMode, ParserConfig, Execute, Skip
from .errors import UnexpectedTokenError
from .tokens import TokenCursor, is_cli_flag, is_long_flag, strip_flag
from .operations import is_operation, lookup, construct
from .modifiers import is_modifier, is_modifier_start, parse_declaration, parse_short_form, ModifierId


class InstructionParser:
    """Iterator of instructions over one token stream; each instance parses exactly once."""

    def __init__(self, tokens: Iterable | TokenCursor, config: ParserConfig | None = None):
        self.cursor = tokens if isinstance(tokens, TokenCursor) else TokenCursor(tokens)
        self.config = config or ParserConfig()
        self.mode = ParseMode.AMBIGUOUS

    def __iter__(self) -> Iterator:
        return self

    def __next__(self):
        if (token := self._skip_separators()) is END_OF_INPUT:
            raise StopIteration
        return self._dispatch(token)

    def iter_with_tokens(self) -> Iterator[tuple[list, object]]:
        """Yield each instruction together with the raw tokens it consumed."""
        while (token := self._skip_separators()) is not END_OF_INPUT:
            start = self.cursor.position
            instruction = self._dispatch(token)
            yield self.cursor.tokens[start:self.cursor.position], instruction

    # Mode ────────────────────────────────────────────────────────────────────────────────────
    def _sense_mode(self, token: str) -> None:
        if self.mode is ParseMode.AMBIGUOUS:
            self.mode = ParseMode.ARG if is_long_flag(token) else ParseMode.SCRIPT

    def _name_of(self, token: str) -> str:
        return strip_flag(token) if self.mode is ParseMode.ARG else token

    def _is_known(self, name) -> bool:
        return is_operation(name, drawing=self.config.drawing) or is_modifier(name) or is_modifier_start(name)

    def _is_boundary(self, token) -> bool:
        # Script statements end at STATEMENT_END, which the cursor already stops at.
        return self.mode is ParseMode.ARG and is_long_flag(token) and self._is_known(strip_flag(token))

    # Dispatch ────────────────────────────────────────────────────────────────────────────────
    def _skip_separators(self):
        while (token := self.cursor.peek()) is STATEMENT_END:
            self.cursor.next()
        return token

    def _dispatch(self, token: str):
        self._sense_mode(token)
        position = self.cursor.position
        self.cursor.next()
        name = self._name_of(token)

        if is_operation(name, drawing=self.config.drawing):
            return Execute(construct(lookup(name, drawing=self.config.drawing), self.cursor, self.config, self._is_boundary))
        if is_modifier_start(name):
            return parse_declaration(self.cursor, self._is_boundary, drawing=self.config.drawing)
        if is_modifier(name):
            return parse_short_form(ModifierId(name), self.cursor, self._is_boundary)

        if self.mode is ParseMode.ARG and is_cli_flag(token) and not self.config.strict_flags:
            # Foreign CLI argument: drop it along with its values, up to the next flag or statement end.
            skipped = self.cursor.skip_while(lambda t: t is not STATEMENT_END and not is_cli_flag(t))
            return Skip((token, *skipped))

        raise UnexpectedTokenError(f"Unexpected token `{token}` at position {position}; expected an image "
                                   f"operation or modifier.", token=token, position=position)


def iter_instructions(tokens: Iterable, config: ParserConfig | None = None) -> Iterator:
    yield from InstructionParser(tokens, config)
