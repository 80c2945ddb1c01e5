## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# imgops — Environment modifiers, either `set <operation> <modifier> <arg>` or a bare
# `<modifier> <arg>` statement that applies to the next operation consuming it.
#

from enum import Enum
from types import MappingProxyType
from typing import Callable

from .types import END_OF_INPUT, STATEMENT_END, EnvironmentAdd, FilterType, PreserveAspectRatio, SamplingFilter
from .errors import (InvalidModifierSyntax, InvalidOperationForModifier, ModifierArgumentExpected,
                     UnrecognizedSamplingFilterName)
from .tokens import TokenCursor
from .operations import OperationId, is_operation, lookup


MODIFIER_KEYWORD = 'set'


class ModifierId(str, Enum):
    PRESERVE_ASPECT_RATIO = 'preserve-aspect-ratio'
    SAMPLING_FILTER = 'sampling-filter'

    def __str__(self):
        return self.value


# Operations whose execution reads each modifier from the engine environment.
CONSUMERS = MappingProxyType({
    ModifierId.PRESERVE_ASPECT_RATIO: frozenset({OperationId.RESIZE}),
    ModifierId.SAMPLING_FILTER: frozenset({OperationId.RESIZE}),
})

_BOOLEANS = MappingProxyType({'true': True, 'false': False})
_MODIFIER_NAMES = frozenset(m.value for m in ModifierId)


def is_modifier_start(token) -> bool:
    return token == MODIFIER_KEYWORD

def is_modifier(token) -> bool:
    return isinstance(token, str) and token in _MODIFIER_NAMES

def consumers_of(modifier) -> frozenset:
    key = ModifierId.PRESERVE_ASPECT_RATIO if isinstance(modifier, PreserveAspectRatio) else ModifierId.SAMPLING_FILTER
    return CONSUMERS[key]


def _is_missing(token, is_boundary: Callable) -> bool:
    return token is END_OF_INPUT or token is STATEMENT_END or is_boundary(token)


def parse_modifier_argument(modifier_id: ModifierId, cursor: TokenCursor, is_boundary: Callable = lambda t: False):
    """Consume the single argument of a modifier and build its typed value."""
    position = cursor.position
    if _is_missing(cursor.peek(), is_boundary):
        raise ModifierArgumentExpected(f"Modifier `{modifier_id}` expects an argument.",
                                       token=modifier_id.value, position=position)
    token = cursor.next()

    if modifier_id is ModifierId.PRESERVE_ASPECT_RATIO:
        if token not in _BOOLEANS:
            raise InvalidModifierSyntax(f"Modifier `{modifier_id}` expects `true` or `false`, got `{token}`.",
                                        token=token, position=position, argument=1)
        return PreserveAspectRatio(_BOOLEANS[token])
    else:
        return _parse_sampling_filter(token, position)


def _parse_sampling_filter(token: str, position: int) -> SamplingFilter:
    try:
        return SamplingFilter(FilterType(token))
    except ValueError:
        names = ', '.join(f.value for f in FilterType)
        raise UnrecognizedSamplingFilterName(f"Unknown sampling filter `{token}`; expected one of {names}.",
                                             token=token, position=position, argument=1) from None


def parse_short_form(modifier_id: ModifierId, cursor: TokenCursor, is_boundary: Callable = lambda t: False) -> EnvironmentAdd:
    return EnvironmentAdd(parse_modifier_argument(modifier_id, cursor, is_boundary))


def parse_declaration(cursor: TokenCursor, is_boundary: Callable = lambda t: False, drawing: bool = False) -> EnvironmentAdd:
    """Parse the remainder of `set <operation> <modifier> <arg>`, the keyword already consumed."""
    position = cursor.position
    if _is_missing(target := cursor.peek(), is_boundary):
        raise InvalidModifierSyntax(f"Expected an operation name after `{MODIFIER_KEYWORD}`.",
                                    token=MODIFIER_KEYWORD, position=position)
    cursor.next()
    if not is_operation(target, drawing=drawing):
        raise InvalidOperationForModifier(f"Cannot set a modifier for `{target}`, which is not a known operation.",
                                          token=target, position=position)

    if _is_missing(keyword := cursor.peek(), is_boundary) or not is_modifier(keyword):
        shown = keyword if isinstance(keyword, str) else repr(keyword)
        raise InvalidModifierSyntax(f"Expected one of {', '.join(m.value for m in ModifierId)} after "
                                    f"`{MODIFIER_KEYWORD} {target}`, got `{shown}`.",
                                    token=keyword if isinstance(keyword, str) else None, position=cursor.position)
    cursor.next()

    modifier = parse_modifier_argument(ModifierId(keyword), cursor, is_boundary)
    return EnvironmentAdd(modifier, for_operation=lookup(target, drawing=drawing))
