## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from typing import Callable, Iterable

from .types import END_OF_INPUT, STATEMENT_END, QuotingPolicy


FLAG_MARKER = '--'


def is_long_flag(token) -> bool:
    return isinstance(token, str) and token.startswith(FLAG_MARKER) and len(token) > 2

def is_short_flag(token) -> bool:
    return isinstance(token, str) and token.startswith('-') and len(token) == 2

def is_cli_flag(token) -> bool:
    return is_long_flag(token) or is_short_flag(token)

def strip_flag(token: str) -> str:
    return token[len(FLAG_MARKER):] if is_long_flag(token) else token


def unquote(token: str, policy: QuotingPolicy) -> str:
    """Remove one matching pair of outer quotes when the policy asks for it."""
    if policy is not QuotingPolicy.UNQUOTE or len(token) < 2:
        return token
    quote = token[0]
    if quote not in ('"', "'") or token[-1] != quote:
        return token
    inner = token[1:-1]
    if quote == '"':
        inner = inner.replace('\\"', '"').replace('\\\\', '\\')
    return inner


class TokenCursor:
    """Index over a materialized token buffer with unbounded, non-consuming lookahead."""

    def __init__(self, tokens: Iterable):
        self.tokens = list(tokens)
        self.position = 0

    def __repr__(self):
        return f"TokenCursor({self.position}/{len(self.tokens)})"

    @property
    def exhausted(self) -> bool:
        return self.position >= len(self.tokens)

    def peek(self, offset: int = 0):
        index = self.position + offset
        return self.tokens[index] if 0 <= index < len(self.tokens) else END_OF_INPUT

    def next(self):
        token = self.peek()
        if token is not END_OF_INPUT:
            self.position += 1
        return token

    def skip_while(self, predicate: Callable) -> list:
        skipped = []
        while (token := self.peek()) is not END_OF_INPUT and predicate(token):
            skipped.append(self.next())
        return skipped

    def take_until(self, count: int, is_boundary: Callable) -> list:
        """Consume up to `count` tokens, stopping before end-of-input or a boundary token."""
        taken = []
        while len(taken) < count:
            token = self.peek()
            if token is END_OF_INPUT or token is STATEMENT_END or is_boundary(token):
                break
            taken.append(self.next())
        return taken
