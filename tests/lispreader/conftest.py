import pytest

from lispreader.lang import runtime as runtime
from lispreader.lang import symbol as sym


@pytest.fixture
def test_ns() -> str:
    return "lispreader-test"


@pytest.fixture
def test_ns_sym(test_ns: str) -> sym.Symbol:
    return sym.symbol(test_ns)


@pytest.fixture
def ns(test_ns_sym: sym.Symbol) -> runtime.Namespace:
    try:
        yield runtime.Namespace.get_or_create(test_ns_sym)
    finally:
        runtime.Namespace.remove(test_ns_sym)
