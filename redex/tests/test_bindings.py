"""Tests for the Bindings class and NoMatch singleton."""

import pytest
from redex import Bindings, NoMatch, wrap_bindings, match, Sym, Fun


a, b = Sym("a"), Sym("b")


class TestBindings:
    """Tests for Bindings class."""

    def test_creation_from_pairs(self):
        bindings = Bindings([("x", a), ("y", b)])
        assert bindings["x"] == a
        assert bindings["y"] == b

    def test_creation_from_dict(self):
        assert Bindings({"x": a})["x"] == a

    def test_getitem_missing_raises(self):
        with pytest.raises(KeyError):
            _ = Bindings({"x": a})["y"]

    def test_get_with_default(self):
        bindings = Bindings({"x": a})
        assert bindings.get("x") == a
        assert bindings.get("y") is None
        assert bindings.get("y", default=b) == b

    def test_contains(self):
        bindings = Bindings({"x": a})
        assert "x" in bindings
        assert "y" not in bindings

    def test_len_and_iter(self):
        bindings = Bindings({"x": a, "y": b})
        assert len(bindings) == 2
        assert set(bindings) == {"x", "y"}
        assert set(bindings.keys()) == {"x", "y"}
        assert set(bindings.values()) == {a, b}
        assert set(bindings.items()) == {("x", a), ("y", b)}

    def test_bool_always_true(self):
        """Bindings are truthy even when empty."""
        assert bool(Bindings())
        assert bool(Bindings({"x": a}))

    def test_to_dict_is_copy(self):
        bindings = Bindings({"x": a})
        d = bindings.to_dict()
        d["y"] = b
        assert "y" not in bindings

    def test_equality(self):
        assert Bindings({"x": a}) == Bindings({"x": a})
        assert Bindings({"x": a}) == {"x": a}
        assert Bindings({"x": a}) != Bindings({"x": b})
        assert Bindings({"x": a}) != "x"

    def test_repr_renders_values(self):
        bindings = Bindings({"x": Fun("f", [a])})
        assert repr(bindings) == "Bindings({x: f(a)})"


class TestNoMatch:
    """Tests for NoMatch singleton."""

    def test_singleton(self):
        from redex.rewriter import _NoMatch
        assert _NoMatch() is NoMatch

    def test_bool_false(self):
        assert bool(NoMatch) is False

    def test_behaves_empty(self):
        with pytest.raises(KeyError):
            _ = NoMatch["x"]
        assert NoMatch.get("x", a) == a
        assert "x" not in NoMatch
        assert len(NoMatch) == 0
        assert list(NoMatch) == []

    def test_repr(self):
        assert repr(NoMatch) == "NoMatch"


class TestWrapBindings:
    """Tests for wrap_bindings."""

    def test_failed(self):
        assert wrap_bindings("failed") is NoMatch

    def test_success(self):
        assert wrap_bindings({"x": a}) == Bindings({"x": a})

    def test_walrus_usage(self):
        """match results work with the walrus operator."""
        if bindings := match(Fun("f", [Sym("x")]), Fun("f", [a])):
            assert bindings["x"] == a
        else:
            pytest.fail("expected a match")
