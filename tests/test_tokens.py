## imgops — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import pytest

from imgops.types import END_OF_INPUT, STATEMENT_END, QuotingPolicy
from imgops.tokens import TokenCursor, is_long_flag, is_short_flag, is_cli_flag, strip_flag, unquote


def test_peek_does_not_consume():
    cursor = TokenCursor(["blur", "1", "invert"])
    assert cursor.peek() == "blur"
    assert cursor.peek(2) == "invert"
    assert cursor.position == 0
    assert cursor.next() == "blur"
    assert cursor.peek() == "1"


def test_reading_past_the_end_yields_sentinel():
    cursor = TokenCursor(["invert"])
    assert cursor.peek(5) is END_OF_INPUT
    assert cursor.next() == "invert"
    assert cursor.exhausted
    assert cursor.next() is END_OF_INPUT
    assert cursor.position == 1


def test_sentinel_never_equals_user_input():
    # End-of-text control character used to mark exhaustion elsewhere is just a token here.
    cursor = TokenCursor(["\x03", "<end-of-input>"])
    assert cursor.next() is not END_OF_INPUT
    assert cursor.next() is not END_OF_INPUT
    assert cursor.next() is END_OF_INPUT
    assert END_OF_INPUT != "<end-of-input>"


def test_take_until_stops_at_boundary_without_consuming_it():
    cursor = TokenCursor(["0", "1", "--blur", "2"])
    taken = cursor.take_until(4, lambda t: t.startswith("--"))
    assert taken == ["0", "1"]
    assert cursor.peek() == "--blur"


def test_take_until_stops_at_statement_end():
    cursor = TokenCursor(["100", STATEMENT_END, "100"])
    assert cursor.take_until(2, lambda t: False) == ["100"]
    assert cursor.peek() is STATEMENT_END


def test_take_until_takes_no_more_than_requested():
    cursor = TokenCursor(["1", "2", "3"])
    assert cursor.take_until(2, lambda t: False) == ["1", "2"]
    assert cursor.take_until(0, lambda t: False) == []
    assert cursor.position == 2


def test_skip_while():
    cursor = TokenCursor(["out.png", "x", "--blur"])
    assert cursor.skip_while(lambda t: not is_cli_flag(t)) == ["out.png", "x"]
    assert cursor.peek() == "--blur"


def test_flag_shapes():
    assert is_long_flag("--blur")
    assert not is_long_flag("--")
    assert not is_long_flag("blur")
    assert is_short_flag("-o") and is_short_flag("-1")
    assert not is_short_flag("-10")
    assert is_cli_flag("-o") and is_cli_flag("--output")
    assert not is_cli_flag(STATEMENT_END)
    assert strip_flag("--flip-horizontal") == "flip-horizontal"
    assert strip_flag("blur") == "blur"


@pytest.mark.parametrize("token, expected", [
    ('"/my/path"', "/my/path"),
    ("'/my/path'", "/my/path"),
    ('"a \\"b\\""', 'a "b"'),
    ('"/my/path', '"/my/path'),
    ('"mismatch\'', '"mismatch\''),
    ('"', '"'),
    ("plain", "plain"),
])
def test_unquote_strips_one_matching_pair(token, expected):
    assert unquote(token, QuotingPolicy.UNQUOTE) == expected


def test_unquote_is_a_no_op_for_verbatim_policy():
    assert unquote('"/my/path"', QuotingPolicy.VERBATIM) == '"/my/path"'
