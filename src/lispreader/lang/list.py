from typing import Optional, TypeVar

from pyrsistent import PList, PMap, plist
from typing_extensions import Unpack

from lispreader.lang.obj import LispObject, PrintSettings
from lispreader.lang.obj import seq_lrepr as _seq_lrepr

T = TypeVar("T")


class PersistentList(LispObject):
    """Reader List. Delegates internally to a pyrsistent.PList object.

    Do not instantiate directly. Instead use the l() and list() factory
    methods below."""

    __slots__ = ("_inner", "_meta")

    def __init__(self, wrapped: "PList[T]", meta: Optional[PMap] = None) -> None:
        self._inner = wrapped
        self._meta = meta

    def __bool__(self):
        return True

    def __eq__(self, other):
        if self is other:
            return True
        if not isinstance(other, PersistentList):
            return NotImplemented
        return self._inner == other._inner

    def __getitem__(self, item):
        if isinstance(item, slice):
            return PersistentList(self._inner[item])
        return self._inner[item]

    def __hash__(self):
        return hash(self._inner)

    def __iter__(self):
        yield from self._inner

    def __len__(self):
        return len(self._inner)

    def _lrepr(self, **kwargs: Unpack[PrintSettings]) -> str:
        return _seq_lrepr(self._inner, "(", ")", **kwargs)

    @property
    def meta(self) -> Optional[PMap]:
        return self._meta

    def with_meta(self, meta: Optional[PMap]) -> "PersistentList":
        return PersistentList(self._inner, meta=meta)


EMPTY: PersistentList = PersistentList(plist())


def list(members, meta=None) -> PersistentList:  # pylint:disable=redefined-builtin
    """Creates a new list."""
    return PersistentList(plist(iterable=members), meta=meta)


def l(*members, meta=None) -> PersistentList:  # noqa
    """Creates a new list from members."""
    return PersistentList(plist(iterable=members), meta=meta)
