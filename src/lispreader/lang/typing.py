from fractions import Fraction
from typing import Union

from lispreader.lang import interop
from lispreader.lang import list as llist
from lispreader.lang import runtime
from lispreader.lang import symbol as sym

LispNumber = Union[int, float, Fraction]
HostNameForm = Union[
    interop.Accessor,
    interop.ClassName,
    interop.InstanceMemberName,
    interop.StaticMemberName,
]
ReaderForm = Union[
    None,
    int,
    float,
    Fraction,
    str,
    sym.Symbol,
    runtime.Var,
    llist.PersistentList,
    HostNameForm,
]
