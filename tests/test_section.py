"""
Tests for Section operations.
"""

import numpy as np
import pytest

from cliquetree.algebra.section import Section
from cliquetree.algebra.semiring import logprob_semiring, prob_semiring


class TestSection:
    """Section table operations."""

    def test_creation(self):
        sec = Section(domain=("A", "B"), data=np.array([[1.0, 2.0], [3.0, 4.0]]))
        assert sec.domain == ("A", "B")
        assert sec.keys == ("A", "B")
        assert sec.cardinalities == {"A": 2, "B": 2}

    def test_domain_mismatch_raises(self):
        with pytest.raises(ValueError):
            Section(domain=("A",), data=np.array([[1.0, 2.0], [3.0, 4.0]]))

    def test_duplicate_domain_raises(self):
        with pytest.raises(ValueError):
            Section(domain=("A", "A"), data=np.array([[1.0, 2.0], [3.0, 4.0]]))

    def test_unit(self):
        sec = Section.unit(domain=("X", "Y"), shape=(2, 3))
        assert sec.data.shape == (2, 3)
        assert np.all(sec.data == 1.0)

    def test_star_shared_key(self):
        f = Section(("A", "B"), np.array([[1.0, 2.0], [3.0, 4.0]]))
        g = Section(("B", "C"), np.array([[1.0, 10.0], [100.0, 1000.0]]))
        h = f.star(g)

        assert h.domain == ("A", "B", "C")
        for a in range(2):
            for b in range(2):
                for c in range(2):
                    assert h.data[a, b, c] == f.data[a, b] * g.data[b, c]

    def test_star_reordered_domain(self):
        f = Section(("A", "B"), np.array([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]]))
        g = Section(("B", "A"), np.ones((3, 2)))
        h = f.star(g)
        assert h.domain == ("A", "B")
        assert np.allclose(h.data, f.data)

    def test_star_cardinality_mismatch(self):
        f = Section(("A",), np.ones(2))
        g = Section(("A",), np.ones(3))
        with pytest.raises(ValueError):
            f.star(g)

    def test_star_semiring_mismatch(self):
        f = Section(("A",), np.ones(2), prob_semiring)
        g = Section(("A",), np.zeros(2), logprob_semiring)
        with pytest.raises(ValueError):
            f.star(g)

    def test_restrict_orders_axes(self):
        f = Section(("A", "B", "C"), np.arange(8, dtype=float).reshape(2, 2, 2))
        r = f.restrict(("C", "A"))
        assert r.domain == ("C", "A")
        assert np.allclose(r.data, np.sum(f.data, axis=1).T)

    def test_restrict_to_scalar(self):
        f = Section(("A", "B"), np.array([[1.0, 2.0], [3.0, 4.0]]))
        r = f.restrict(())
        assert r.domain == ()
        assert float(r.data) == pytest.approx(10.0)

    def test_restrict_unknown_key(self):
        with pytest.raises(ValueError):
            Section(("A",), np.ones(2)).restrict(("Z",))

    def test_divide(self):
        f = Section(("A", "B"), np.array([[1.0, 3.0], [2.0, 2.0]]))
        cond = f.divide(f.restrict(("A",)))
        assert np.allclose(cond.data, [[0.25, 0.75], [0.5, 0.5]])

    def test_divide_requires_subset(self):
        f = Section(("A",), np.ones(2))
        with pytest.raises(ValueError):
            f.divide(Section(("B",), np.ones(2)))

    def test_logprob_matches_prob(self):
        table = np.array([[0.1, 0.4], [0.3, 0.2]])
        p = Section.from_probabilities(("A", "B"), table, prob_semiring)
        q = Section.from_probabilities(("A", "B"), table, logprob_semiring)
        assert np.allclose(p.restrict(("B",)).probabilities(), q.restrict(("B",)).probabilities())

    def test_value(self):
        f = Section(("A", "B"), np.array([[1.0, 2.0], [3.0, 4.0]]))
        assert f.value({"B": 1, "A": 0}) == 2.0
