import threading
from functools import total_ordering
from typing import Optional

from immutables import Map
from typing_extensions import Unpack

from lispreader.lang.obj import LispObject, PrintSettings

_LOCK = threading.Lock()
_INTERN: "Map[tuple[Optional[str], str], Symbol]" = Map()


@total_ordering
class Symbol(LispObject):
    """Symbols are named references to values.

    Symbols read from source are interned, so two symbols with the same name and
    namespace read anywhere in the process are the same object. Names beginning
    with `:` are keyword-like symbols which evaluate to themselves."""

    __slots__ = ("_name", "_ns", "_hash")

    def __init__(self, name: str, ns: Optional[str] = None) -> None:
        self._name = name
        self._ns = ns
        self._hash = hash((ns, name))

    def _lrepr(self, **kwargs: Unpack[PrintSettings]) -> str:
        if self._ns is not None:
            return f"{self._ns}/{self._name}"
        return self._name

    @property
    def name(self) -> str:
        return self._name

    @property
    def ns(self) -> Optional[str]:
        return self._ns

    @property
    def is_keyword(self) -> bool:
        return self._name.startswith(":")

    def __eq__(self, other):
        return self is other or (
            isinstance(other, Symbol)
            and (self._ns, self._name) == (other._ns, other._name)
        )

    def __hash__(self):
        return self._hash

    def __lt__(self, other):
        if other is None:  # pragma: no cover
            return False
        if not isinstance(other, Symbol):
            return NotImplemented
        if self._ns is None and other._ns is None:
            return self._name < other._name
        if self._ns is None:
            return True
        if other._ns is None:
            return False
        return (self._ns, self._name) < (other._ns, other._name)

    def __reduce__(self):
        return symbol, (self._name, self._ns)


def symbol(name: str, ns: Optional[str] = None) -> Symbol:
    """Return a symbol with name `name` and optional namespace `ns`.

    Symbol instances are interned, so an existing object may be returned if one
    with the same name and namespace are already interned."""
    global _INTERN

    with _LOCK:
        found = _INTERN.get((ns, name))
        if found is not None:
            return found
        s = Symbol(name, ns=ns)
        _INTERN = _INTERN.set((ns, name), s)
        return s
