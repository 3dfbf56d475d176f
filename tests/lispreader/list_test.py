import pytest
from pyrsistent import pmap

import lispreader.lang.list as llist
from lispreader.lang.obj import lrepr
from lispreader.lang.symbol import symbol


def test_list_construction():
    assert llist.l(1, 2, 3) == llist.list([1, 2, 3])
    assert llist.l() == llist.EMPTY
    assert llist.list([]) == llist.EMPTY


def test_empty_list_is_truthy():
    assert bool(llist.EMPTY) is True
    assert llist.EMPTY is not None


def test_list_equality():
    assert llist.l(1, 2) != llist.l(2, 1)
    assert llist.l(1, 2) != llist.l(1, 2, 3)
    assert llist.l(symbol("a")) == llist.l(symbol("a"))
    assert llist.l(llist.l(1)) == llist.l(llist.l(1))
    assert llist.l(1, 2) != [1, 2]


def test_list_hash():
    assert hash(llist.l(1, 2)) == hash(llist.l(1, 2))


def test_list_meta():
    meta = pmap({"line": 1})
    l1 = llist.l(1, meta=meta)
    assert l1.meta == meta
    assert llist.l(1).meta is None

    l2 = l1.with_meta(pmap({"line": 2}))
    assert l1 is not l2
    assert l1 == l2
    assert l2.meta == pmap({"line": 2})


def test_list_seq_access():
    l = llist.l(1, 2, 3)
    assert len(l) == 3
    assert l[1] == 2
    assert l[1:] == llist.l(2, 3)
    assert list(l) == [1, 2, 3]


@pytest.mark.parametrize(
    "l,s",
    [
        (llist.l(), "()"),
        (llist.l(1, 2, 3), "(1 2 3)"),
        (llist.l(symbol("a"), "b", None), '(a "b" null)'),
        (llist.l(llist.l(1), llist.l()), "((1) ())"),
    ],
)
def test_list_repr(l: llist.PersistentList, s: str):
    assert lrepr(l) == s
    assert repr(l) == s
