import math
from fractions import Fraction

import pytest

from lispreader.lang import reader as reader
from lispreader.lang import symbol as sym
from lispreader.lang.obj import lrepr


@pytest.mark.parametrize(
    "v,s",
    [
        (None, "null"),
        (1, "1"),
        (-10, "-10"),
        (1.5, "1.5"),
        (math.inf, "Infinity"),
        (-math.inf, "-Infinity"),
        (math.nan, "NaN"),
        (Fraction(1, 2), "1/2"),
        (Fraction(-22, 7), "-22/7"),
    ],
)
def test_lrepr_scalars(v, s: str):
    assert lrepr(v) == s


@pytest.mark.parametrize(
    "v,s",
    [
        ("", '""'),
        ("abc", '"abc"'),
        ('"', r'"\""'),
        ("\\", r'"\\"'),
        ("a\tb", r'"a\tb"'),
        ("line\nbreak\r", r'"line\nbreak\r"'),
    ],
)
def test_lrepr_str(v: str, s: str):
    assert lrepr(v) == s


def test_lrepr_str_human_readable():
    assert lrepr("a\tb", human_readable=True) == "a\tb"
    assert lrepr("a\tb", print_readably=False) == '"a\tb"'


@pytest.mark.parametrize(
    "s",
    [
        "",
        "plain",
        "tab\there",
        "quote \" and backslash \\",
        "\r\n mixed \t \\n",
        "unicode Ω and emoji",
    ],
)
def test_str_round_trips_through_reader(s: str):
    assert [s] == list(reader.read_str(lrepr(s)))


def test_negative_numbers_do_not_read_back_as_numbers():
    assert [sym.symbol("-10")] == list(reader.read_str(lrepr(-10)))
    assert [sym.symbol("-1/2")] == list(reader.read_str(lrepr(Fraction(-1, 2))))


def test_lrepr_docstring_notes_unreadable_output():
    assert "not always readable" in lrepr.__doc__
