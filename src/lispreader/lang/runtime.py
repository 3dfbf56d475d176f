import builtins
import importlib
import logging
import threading
from typing import Any, Optional

from immutables import Map
from typing_extensions import Unpack

from lispreader.lang import symbol as sym
from lispreader.lang.obj import LispObject, PrintSettings

logger = logging.getLogger(__name__)


class HostNameResolutionError(LookupError):
    """Raised when a dotted host name cannot be resolved to a module, type or
    attribute."""


class Var(LispObject):
    """Vars are named references interned in a Namespace.

    The reader produces Vars for `ns:name` tokens. A Var is identified by the
    namespace it is interned in and its name; reading the same reference twice
    yields the same Var."""

    __slots__ = ("_ns", "_name")

    def __init__(self, ns: "Namespace", name: sym.Symbol) -> None:
        self._ns = ns
        self._name = name

    def _lrepr(self, **kwargs: Unpack[PrintSettings]) -> str:
        return f"{self._ns.name}:{self._name.name}"

    @property
    def ns(self) -> "Namespace":
        return self._ns

    @property
    def name(self) -> sym.Symbol:
        return self._name


class Namespace(LispObject):
    """Namespaces are named containers of Vars.

    Every namespace created during the life of the process is kept in a global
    cache keyed by its name symbol. Vars interned in a namespace are never
    overwritten by later interns of the same name."""

    _NAMESPACES: "Map[sym.Symbol, Namespace]" = Map()
    _NAMESPACES_LOCK = threading.Lock()

    __slots__ = ("_name", "_interns", "_lock")

    def __init__(self, name: sym.Symbol) -> None:
        self._name = name
        self._interns: "Map[sym.Symbol, Var]" = Map()
        self._lock = threading.RLock()

    def _lrepr(self, **kwargs: Unpack[PrintSettings]) -> str:
        return self._name.name

    @property
    def name(self) -> str:
        return self._name.name

    def intern(self, name: sym.Symbol) -> Var:
        """Return the Var mapped by `name` in this namespace, creating and interning
        a new Var if no Var is mapped yet."""
        with self._lock:
            var = self._interns.get(name)
            if var is None:
                var = Var(self, name)
                self._interns = self._interns.set(name, var)
            return var

    def find(self, name: sym.Symbol) -> Optional[Var]:
        """Find the Var mapped by the given Symbol input or None if no Var is
        mapped by that Symbol."""
        with self._lock:
            return self._interns.get(name)

    @classmethod
    def get_or_create(cls, name: sym.Symbol) -> "Namespace":
        """Get the namespace bound to the symbol `name` in the global namespace
        cache, creating it if it does not exist.
        Return the namespace."""
        with cls._NAMESPACES_LOCK:
            ns = cls._NAMESPACES.get(name)
            if ns is None:
                logger.debug(f"Creating namespace '{name}'")
                ns = Namespace(name)
                cls._NAMESPACES = cls._NAMESPACES.set(name, ns)
            return ns

    @classmethod
    def get(cls, name: sym.Symbol) -> "Optional[Namespace]":
        """Get the namespace bound to the symbol `name` in the global namespace
        cache. Return the namespace if it exists or None otherwise."""
        with cls._NAMESPACES_LOCK:
            return cls._NAMESPACES.get(name)

    @classmethod
    def remove(cls, name: sym.Symbol) -> Optional["Namespace"]:
        """Remove the namespace bound to the symbol `name` in the global
        namespace cache and return that namespace.
        Return None if the namespace did not exist in the cache."""
        with cls._NAMESPACES_LOCK:
            ns = cls._NAMESPACES.get(name)
            if ns is not None:
                cls._NAMESPACES = cls._NAMESPACES.delete(name)
            return ns


def intern_var(ns: str, name: str) -> Var:
    """Return the Var named by `name` in the namespace named `ns`, creating either
    of them as needed."""
    namespace = Namespace.get_or_create(sym.symbol(ns))
    return namespace.intern(sym.symbol(name))


def resolve_host_name(name: str) -> Any:
    """Resolve a dotted host name to the object it names.

    The full name is first tried as an importable module. Failing that, the last
    `.` separated segment is looked up as an attribute of whatever the preceding
    segments resolve to, so nested classes such as `a.b.Outer.Inner` resolve.
    Single names which are not modules are looked up in `builtins`.

    Raise a HostNameResolutionError if the name cannot be resolved."""
    if not name or any(len(part) == 0 for part in name.split(".")):
        raise HostNameResolutionError(f"Invalid host name '{name}'")

    try:
        mod = importlib.import_module(name)
    except ImportError:
        pass
    else:
        logger.debug(f"Resolved host name '{name}' to module {mod}")
        return mod

    container_name, _, attr_name = name.rpartition(".")
    container = (
        builtins if not container_name else resolve_host_name(container_name)
    )
    try:
        v = getattr(container, attr_name)
    except AttributeError as e:
        raise HostNameResolutionError(
            f"Unable to resolve host name '{name}'"
        ) from e
    logger.debug(f"Resolved host name '{name}' to {v}")
    return v
