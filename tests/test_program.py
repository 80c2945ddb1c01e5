## imgops — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import pytest

from imgops.types import Program, Execute, EnvironmentAdd, Skip, PreserveAspectRatio, SamplingFilter, FilterType
from imgops.errors import UnboundModifierError, FloatParseError
from imgops.operations import OperationId, Blur, Resize, Invert
from imgops.program import assemble


NEAREST = SamplingFilter(FilterType.NEAREST)


def set_for_resize(modifier):
    return EnvironmentAdd(modifier, for_operation=OperationId.RESIZE)


def test_empty_program():
    assert assemble([]) == Program([]) == ()
    assert Program([]).operations == []


def test_order_is_preserved():
    items = [Execute(Blur(1.0)), Skip(("--output", "x")), Execute(Invert()), Execute(Blur(2.0))]
    program = assemble(items)
    assert list(program) == items
    assert program.operations == [Blur(1.0), Invert(), Blur(2.0)]


def test_declaration_binds_to_next_matching_operation():
    program = assemble([set_for_resize(NEAREST), Execute(Blur(1.0)), Execute(Resize((1, 1))), Execute(Resize((2, 2)))])
    assert program[0].target == 2


def test_declarations_share_their_operation():
    program = assemble([set_for_resize(NEAREST), set_for_resize(PreserveAspectRatio(True)), Execute(Resize((1, 1)))])
    assert (program[0].target, program[1].target) == (2, 2)


def test_later_declaration_binds_to_later_operation():
    program = assemble([set_for_resize(NEAREST), Execute(Resize((1, 1))),
                        set_for_resize(PreserveAspectRatio(False)), Execute(Resize((2, 2)))])
    assert (program[0].target, program[2].target) == (1, 3)


def test_unbound_declaration_is_an_error():
    with pytest.raises(UnboundModifierError) as info:
        assemble([Execute(Resize((1, 1))), set_for_resize(NEAREST), Execute(Blur(1.0))])
    assert info.value.token == "resize"


def test_short_form_binds_to_next_consumer():
    program = assemble([EnvironmentAdd(NEAREST), Execute(Blur(1.0)), Execute(Resize((1, 1)))])
    assert program[0].target == 2


def test_short_form_without_consumer_stays_unbound():
    program = assemble([EnvironmentAdd(NEAREST), Execute(Blur(1.0))])
    assert program[0].target is None


def test_errors_propagate_without_partial_program():
    def failing():
        yield Execute(Blur(1.0))
        raise FloatParseError("bad", token="A")

    with pytest.raises(FloatParseError):
        assemble(failing())


def test_program_is_immutable_sequence():
    program = assemble([Execute(Invert())])
    assert isinstance(program, tuple)
    with pytest.raises(TypeError):
        program[0] = Execute(Blur(1.0))
    assert repr(program).startswith("Program([")
