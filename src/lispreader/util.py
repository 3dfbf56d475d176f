from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class Maybe(Generic[T]):
    """Wrap a value which may be None, supplying a default in its place."""

    __slots__ = ("_inner",)

    def __init__(self, inner: Optional[T]) -> None:
        self._inner = inner

    def or_else_get(self, else_v: T) -> T:
        if self._inner is None:
            return else_v
        return self._inner
