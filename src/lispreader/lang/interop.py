"""Values naming members and types of the host (Python) environment.

These forms are produced by the reader for tokens written with `.` separators,
such as `.append`, `collections.OrderedDict.`, `.collections.OrderedDict.fromkeys`
and `math.pi`. The type portion of each form is resolved when the form is read;
members are kept as names and looked up by whatever consumes the form."""

from typing import Any

import attr
from typing_extensions import Unpack

from lispreader.lang.obj import LispObject, PrintSettings


def _host_name(o: Any) -> str:
    module = getattr(o, "__module__", None)
    qualname = getattr(o, "__qualname__", None)
    if qualname is None:
        return getattr(o, "__name__", repr(o))
    if module is None or module == "builtins":
        return qualname
    return f"{module}.{qualname}"


@attr.frozen(repr=False)
class Accessor(LispObject):
    member: str

    def _lrepr(self, **kwargs: Unpack[PrintSettings]) -> str:
        return f".{self.member}"


@attr.frozen(repr=False)
class ClassName(LispObject):
    type: Any
    name: str = attr.field(eq=False, default="")

    def _lrepr(self, **kwargs: Unpack[PrintSettings]) -> str:
        return f"{self.name or _host_name(self.type)}."


@attr.frozen(repr=False)
class InstanceMemberName(LispObject):
    type: Any
    member: str
    name: str = attr.field(eq=False, default="")

    def _lrepr(self, **kwargs: Unpack[PrintSettings]) -> str:
        return f".{self.name or _host_name(self.type)}.{self.member}"


@attr.frozen(repr=False)
class StaticMemberName(LispObject):
    type: Any
    member: str
    name: str = attr.field(eq=False, default="")

    def _lrepr(self, **kwargs: Unpack[PrintSettings]) -> str:
        return f"{self.name or _host_name(self.type)}.{self.member}"
