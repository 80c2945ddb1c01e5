## imgops — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import pytest

from imgops.types import STATEMENT_END, EnvironmentAdd, FilterType, PreserveAspectRatio, SamplingFilter
from imgops.errors import (InvalidModifierSyntax, InvalidOperationForModifier, ModifierArgumentExpected,
                           UnrecognizedSamplingFilterName)
from imgops.tokens import TokenCursor
from imgops.operations import OperationId
from imgops.modifiers import (ModifierId, is_modifier, is_modifier_start, consumers_of, parse_declaration,
                              parse_short_form, parse_modifier_argument)


def declare(*tokens):
    return parse_declaration(TokenCursor(tokens))


def test_declaration_binds_to_named_operation():
    assert declare("resize", "sampling-filter", "nearest") == \
        EnvironmentAdd(SamplingFilter(FilterType.NEAREST), for_operation=OperationId.RESIZE)
    assert declare("resize", "preserve-aspect-ratio", "false") == \
        EnvironmentAdd(PreserveAspectRatio(False), for_operation=OperationId.RESIZE)


@pytest.mark.parametrize("name", [f.value for f in FilterType])
def test_every_sampling_filter_name(name):
    assert declare("resize", "sampling-filter", name).modifier == SamplingFilter(FilterType(name))


def test_declaration_requires_target():
    with pytest.raises(InvalidModifierSyntax):
        declare()
    with pytest.raises(InvalidModifierSyntax):
        parse_declaration(TokenCursor([STATEMENT_END, "resize"]))


def test_declaration_rejects_unknown_target():
    with pytest.raises(InvalidOperationForModifier) as info:
        declare("sharpen", "preserve-aspect-ratio", "true")
    assert info.value.token == "sharpen"


@pytest.mark.parametrize("tokens", [("resize",), ("resize", "keep-ratio", "true"), ("resize", "resize")])
def test_declaration_rejects_bad_modifier_keyword(tokens):
    with pytest.raises(InvalidModifierSyntax) as info:
        declare(*tokens)
    assert not isinstance(info.value, UnrecognizedSamplingFilterName)


def test_missing_argument():
    with pytest.raises(ModifierArgumentExpected):
        declare("resize", "sampling-filter")
    with pytest.raises(ModifierArgumentExpected):
        parse_short_form(ModifierId.PRESERVE_ASPECT_RATIO, TokenCursor([STATEMENT_END]))


def test_boundary_counts_as_missing_argument():
    cursor = TokenCursor(["--resize", "1", "1"])
    with pytest.raises(ModifierArgumentExpected):
        parse_modifier_argument(ModifierId.SAMPLING_FILTER, cursor, lambda t: t.startswith("--"))
    assert cursor.position == 0


@pytest.mark.parametrize("value", ["yes", "True", "1", ""])
def test_booleans_are_exactly_true_or_false(value):
    with pytest.raises(InvalidModifierSyntax):
        parse_short_form(ModifierId.PRESERVE_ASPECT_RATIO, TokenCursor([value]))


@pytest.mark.parametrize("value", ["tri", "", "Nearest", "lanczos"])
def test_unknown_sampling_filter(value):
    with pytest.raises(UnrecognizedSamplingFilterName) as info:
        parse_short_form(ModifierId.SAMPLING_FILTER, TokenCursor([value]))
    assert isinstance(info.value, InvalidModifierSyntax)
    assert info.value.token == value


def test_short_form_is_unbound():
    add = parse_short_form(ModifierId.PRESERVE_ASPECT_RATIO, TokenCursor(["true"]))
    assert add == EnvironmentAdd(PreserveAspectRatio(True))
    assert add.target is None and add.for_operation is None


def test_keyword_recognition_is_exact():
    assert is_modifier_start("set")
    assert not is_modifier_start("settings")
    assert not is_modifier_start("--set")
    assert is_modifier("sampling-filter")
    assert not is_modifier("sampling")


def test_resize_consumes_both_modifiers():
    assert consumers_of(PreserveAspectRatio(True)) == {OperationId.RESIZE}
    assert consumers_of(SamplingFilter(FilterType.GAUSSIAN)) == {OperationId.RESIZE}


def test_modifier_argument_dispatch():
    assert parse_modifier_argument(ModifierId.SAMPLING_FILTER, TokenCursor(["triangle"])) == SamplingFilter(FilterType.TRIANGLE)
    assert parse_modifier_argument(ModifierId.PRESERVE_ASPECT_RATIO, TokenCursor(["true"])) == PreserveAspectRatio(True)
