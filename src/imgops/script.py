## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# imgops — Lexing of inline image operation scripts, e.g. `blur 1; diff "/my path.png"`.
#

from typing import Iterable

import lark

from .types import STATEMENT_END
from .errors import ScriptSyntaxError


GRAMMAR = r"""?start: statement (SEMI statement)*
statement: (NAMED | STRING | WORD)*

// TOKENS
NAMED.3: /[A-Za-z_][A-Za-z0-9_\-]*\((?:"(?:[^"\\]|\\.)*"|'[^']*'|[^()"'])*\)/
STRING.2: /"(?:[^"\\]|\\.)*"/ | /'[^']*'/
WORD: /[^\s;"'()]+/
SEMI: ";"

// WHITESPACE
%import common.WS
%ignore WS
"""

_LARK = None


def _get_parser() -> lark.Lark:
    global _LARK
    if _LARK is None:
        _LARK = lark.Lark(GRAMMAR, start='start', parser='lalr', lexer='basic')
    return _LARK


def split_statements(source: str, filename=None) -> list[list[str]]:
    """Split script text into statements of raw tokens; quoted spans and `name(...)` stay whole."""
    try:
        tree = _get_parser().parse(source)
    except lark.exceptions.UnexpectedInput as exc:
        def attr(k): return getattr(exc, k, None)
        char = attr('char') or getattr(attr('token'), 'value', '') or ''
        where = f" in `{filename}`" if filename else ""
        raise ScriptSyntaxError(f"Unexpected input `{char}`{where} at line {attr('line')}, column {attr('column')}.",
                                line=attr('line'), column=attr('column'), token=char, position=attr('pos_in_stream')) from None

    statements = tree.children if tree.data == 'start' else [tree]
    return [[str(tok) for tok in st.children] for st in statements if isinstance(st, lark.Tree)]


def tokenize_script(source: str | Iterable[str], filename=None) -> list:
    """Flatten a script (or pre-split statements) into tokens separated by `STATEMENT_END`."""
    chunks = [source] if isinstance(source, str) else list(source)
    tokens = []
    for chunk in chunks:
        for statement in split_statements(chunk, filename=filename):
            if not statement: continue
            tokens.extend(statement)
            tokens.append(STATEMENT_END)
    return tokens
