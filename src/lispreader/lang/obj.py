import math
from abc import ABC, abstractmethod
from collections.abc import Iterable
from fractions import Fraction
from functools import singledispatch
from typing import Any, cast

from typing_extensions import TypedDict, Unpack

PRINT_READABLY = True
PRINT_SEPARATOR = " "


class PrintSettings(TypedDict, total=False):
    human_readable: bool
    print_readably: bool


class LispObject(ABC):
    """Abstract base class for reader values which would like to customize their
    ``__str__`` and Python ``__repr__`` representation."""

    __slots__ = ()

    def __repr__(self):
        return self.lrepr()

    def __str__(self):
        return self.lrepr(human_readable=True)

    @abstractmethod
    def _lrepr(self, **kwargs: Unpack[PrintSettings]) -> str:
        """Private Lisp representation method. Callers (including object
        internal callers) should not call this method directly, but instead
        should use the module function :py:meth:`lrepr` ."""
        raise NotImplementedError()

    def lrepr(self, **kwargs: Unpack[PrintSettings]) -> str:
        """Return the printed representation of this object, as by the module
        function :py:meth:`lrepr`."""
        return lrepr(self, **kwargs)


def seq_lrepr(
    iterable: Iterable[Any],
    start: str,
    end: str,
    **kwargs: Unpack[PrintSettings],
) -> str:
    """Produce a Lisp representation of a sequential collection, bookended
    with the start and end string supplied. The keyword arguments will be
    passed along to lrepr for the sequence elements."""
    kw_items = cast(PrintSettings, dict(kwargs, human_readable=False))
    items = [lrepr(o, **kw_items) for o in iterable]
    return f"{start}{PRINT_SEPARATOR.join(items)}{end}"


# pylint: disable=unused-argument
@singledispatch
def lrepr(
    o: Any,
    human_readable: bool = False,
    print_readably: bool = PRINT_READABLY,
) -> str:
    """Return a string representation of a value produced by the reader.

    The result is not always readable: `-10` prints as written but reads back as
    a symbol, and a character prints as a 1-character string.

    Permissible keyword arguments are:
    - human_readable: if logical True, print strings without quotations or
                      escape sequences (default: false)
    - print_readably: if logical false, print strings without converting
                      special characters to escape sequences (default: true)"""
    return repr(o)


@lrepr.register(LispObject)
def _lrepr_lisp_obj(
    o: Any,
    human_readable: bool = False,
    print_readably: bool = PRINT_READABLY,
) -> str:  # pragma: no cover
    return o._lrepr(human_readable=human_readable, print_readably=print_readably)


@lrepr.register(type(None))
def _lrepr_nil(_: None, **__) -> str:
    return "null"


_STR_ESCAPES = str.maketrans(
    {
        "\\": "\\\\",
        '"': '\\"',
        "\t": "\\t",
        "\r": "\\r",
        "\n": "\\n",
    }
)


@lrepr.register(str)
def _lrepr_str(
    o: str, human_readable: bool = False, print_readably: bool = PRINT_READABLY, **_
) -> str:
    if human_readable:
        return o
    if print_readably is None or print_readably is False:
        return f'"{o}"'
    return f'"{o.translate(_STR_ESCAPES)}"'


@lrepr.register(float)
def _lrepr_float(o: float, **_) -> str:
    if math.isinf(o):
        return "Infinity" if o > 0 else "-Infinity"
    if math.isnan(o):
        return "NaN"
    return repr(o)


@lrepr.register(Fraction)
def _lrepr_fraction(o: Fraction, **_) -> str:
    return f"{o.numerator}/{o.denominator}"
