"""
Tests for junction tree construction, clone and assign.
"""

import numpy as np
import pytest

from cliquetree.inference.elimination_tree import EliminationTree
from cliquetree.inference.junction_tree import JunctionTree, JunctionTreeNode
from cliquetree.inference.ordering import min_degree_ordering
from cliquetree.symbolic import SymbolicFactor as F
from cliquetree.symbolic import eliminate_sequential_symbolic, eliminate_symbolic
from cliquetree.traversal.forest import forest_orders


def random_factors(seed, n_keys=12, n_factors=16, max_arity=3):
    rng = np.random.default_rng(seed)
    factors = []
    for _ in range(n_factors):
        arity = int(rng.integers(1, max_arity + 1))
        keys = rng.choice(n_keys, size=arity, replace=False)
        factors.append(F(tuple(int(k) for k in keys)))
    return factors


def edges(tree):
    pre, _ = forest_orders(tree.roots)
    return [(p, c) for p in pre for c in p.children]


class TestConstruction:
    """Clique grouping on small hand-checked graphs."""

    def test_chain_merges_top_pair(self):
        f_cb, f_ba = F(("C", "B")), F(("B", "A"))
        jt = JunctionTree.from_factors([f_cb, f_ba], ["C", "B", "A"])

        assert len(jt.roots) == 1
        root = jt.roots[0]
        assert root.keys == ["B", "A"]
        assert root.factors == [f_ba]
        assert root.problem_size == 2
        assert len(root.children) == 1
        leaf = root.children[0]
        assert leaf.keys == ["C"]
        assert leaf.factors == [f_cb]
        assert leaf.children == []

    def test_triangle_is_one_clique(self):
        factors = [F(("C", "B")), F(("C", "A")), F(("B", "A"))]
        jt = JunctionTree.from_factors(factors, ["C", "B", "A"])

        assert len(jt.roots) == 1
        root = jt.roots[0]
        assert root.keys == ["C", "B", "A"]
        assert root.children == []
        assert root.problem_size == 3
        assert sorted(f.keys for f in root.factors) == sorted(f.keys for f in factors)
        assert all(any(f is g for g in root.factors) for f in factors)

    def test_star_merges_into_hub(self):
        # Every leaf has one parent and the hub none, so each leaf merges
        factors = [F(("L1", "H")), F(("L2", "H")), F(("L3", "H"))]
        jt = JunctionTree.from_factors(factors, ["L1", "L2", "L3", "H"])

        assert len(jt.roots) == 1
        assert jt.roots[0].keys == ["L3", "L2", "L1", "H"]
        assert jt.roots[0].children == []
        assert jt.roots[0].problem_size == 2

    def test_merged_children_prepended_in_turn(self):
        # Both branches merge into c; the second branch's clique lands in front
        factors = [F(("a1", "a2", "c")), F(("b1", "b2", "c"))]
        jt = JunctionTree.from_factors(factors, ["a1", "a2", "b1", "b2", "c"])

        assert len(jt.roots) == 1
        assert jt.roots[0].keys == ["b1", "b2", "a1", "a2", "c"]
        assert jt.roots[0].children == []

    def test_merged_key_order_reaches_elimination(self):
        seen = []

        def eliminate(factors, ordering):
            seen.append(list(ordering))
            return eliminate_symbolic(factors, ordering)

        jt = JunctionTree.from_factors([F(("L1", "H")), F(("L2", "H"))], ["L1", "L2", "H"])
        bt, _ = jt.eliminate(eliminate)
        assert seen == [["L2", "L1", "H"]]
        assert bt.roots[0].frontals == ("L2", "L1", "H")

    def test_anchored_star_keeps_leaf_cliques(self):
        # The hub keeps a parent outside the ordering, so no leaf qualifies
        factors = [F(("L1", "H")), F(("L2", "H")), F(("L3", "H")), F(("H", "X"))]
        jt = JunctionTree.from_factors(factors, ["L1", "L2", "L3", "H"])

        assert len(jt.roots) == 1
        hub = jt.roots[0]
        assert hub.keys == ["H"]
        assert [c.keys for c in hub.children] == [["L1"], ["L2"], ["L3"]]
        assert all(c.children == [] for c in hub.children)

    def test_grandchildren_spliced(self):
        # d -> c -> b -> a with an extra leaf e under b
        factors = [F(("d", "c")), F(("c", "b", "a")), F(("e", "b")), F(("b", "a"))]
        jt = JunctionTree.from_factors(factors, ["d", "e", "c", "b", "a"])

        root = jt.roots[0]
        assert root.keys[-1] == "a"
        child_keys = sorted(tuple(c.keys) for c in root.children)
        assert child_keys == [("d",), ("e",)]

    def test_independent_components(self):
        jt = JunctionTree.from_factors([F(("a", "b")), F(("c", "d"))], ["a", "b", "c", "d"])
        assert [r.keys for r in jt.roots] == [["a", "b"], ["c", "d"]]

    def test_remaining_factors_carried_through(self):
        f_x = F(("x",))
        etree = EliminationTree.from_factors([F(("a", "b")), f_x], ["a", "b"])
        jt = JunctionTree.from_elimination_tree(etree)
        assert jt.remaining_factors == [f_x]
        assert jt.remaining_factors[0] is f_x

    def test_custom_symbolic_eliminate(self):
        calls = []

        def spy(factors, ordering):
            calls.append(tuple(ordering))
            return eliminate_symbolic(factors, ordering)

        etree = EliminationTree.from_factors([F(("a", "b"))], ["a", "b"])
        JunctionTree.from_elimination_tree(etree, symbolic_eliminate=spy)
        assert calls == [("a",), ("b",)]


class TestProperties:
    """Invariants on random factor graphs."""

    @pytest.mark.parametrize("seed", range(8))
    def test_partition_invariant(self, seed):
        factors = random_factors(seed)
        ordering = min_degree_ordering(factors)
        jt = JunctionTree.from_factors(factors, ordering)

        all_keys = [k for node in jt.nodes() for k in node.keys]
        assert len(all_keys) == len(set(all_keys))
        assert set(all_keys) == set(ordering)

    @pytest.mark.parametrize("seed", range(8))
    def test_every_factor_assigned_once(self, seed):
        factors = random_factors(seed)
        jt = JunctionTree.from_factors(factors, min_degree_ordering(factors))
        assigned = [id(f) for node in jt.nodes() for f in node.factors]
        assert sorted(assigned) == sorted(id(f) for f in factors)

    @pytest.mark.parametrize("seed", range(8))
    def test_merge_rule_applied_exhaustively(self, seed):
        factors = random_factors(seed)
        ordering = min_degree_ordering(factors)
        etree = EliminationTree.from_factors(factors, ordering)
        jt = JunctionTree.from_elimination_tree(etree)

        nr_parents = {k: c.nr_parents for k, c in zip(ordering, eliminate_sequential_symbolic(factors, ordering))}
        etree_parent = {}
        for node in forest_orders(etree.roots)[0]:
            for child in node.children:
                etree_parent[child.key] = node.key

        # Kept edges: the child's top key must not qualify for merging
        for parent, child in edges(jt):
            top = child.keys[-1]
            assert etree_parent[top] in parent.keys
            assert nr_parents[etree_parent[top]] + 1 != nr_parents[top]

        # Inside a clique every non-top key was merged into its etree parent
        for node in jt.nodes():
            for k in node.keys[:-1]:
                p = etree_parent[k]
                assert p in node.keys
                assert nr_parents[p] + 1 == nr_parents[k]

    @pytest.mark.parametrize("seed", range(4))
    def test_problem_size_bounds(self, seed):
        factors = random_factors(seed)
        ordering = min_degree_ordering(factors)
        jt = JunctionTree.from_factors(factors, ordering)
        sizes = {k: len(c) for k, c in zip(ordering, eliminate_sequential_symbolic(factors, ordering))}
        for node in jt.nodes():
            assert node.problem_size == max(sizes[k] for k in node.keys)


class TestCloneAssign:
    """Copying and replacing junction tree structure."""

    @pytest.fixture
    def tree(self):
        factors = [F(("a", "b")), F(("b", "c")), F(("c", "d")), F(("e", "c"))]
        return JunctionTree.from_factors(factors, ["a", "e", "b", "c", "d"])

    def test_clone_duplicates_nodes_shares_factors(self, tree):
        twin = tree.clone()
        orig_nodes, twin_nodes = tree.nodes(), twin.nodes()

        assert len(orig_nodes) == len(twin_nodes)
        for a, b in zip(orig_nodes, twin_nodes):
            assert a is not b
            assert a.keys == b.keys
            assert a.keys is not b.keys
            assert a.problem_size == b.problem_size
            assert len(a.factors) == len(b.factors)
            assert all(f is g for f, g in zip(a.factors, b.factors))

    def test_clone_is_structurally_independent(self, tree):
        twin = tree.clone()
        twin.roots[0].children.append(JunctionTreeNode(keys=["z"]))
        twin.roots[0].keys.append("zz")
        assert "zz" not in tree.roots[0].keys
        assert len(tree.nodes()) + 1 == len(twin.nodes())

    def test_copy_module(self, tree):
        import copy
        twin = copy.copy(tree)
        assert isinstance(twin, JunctionTree)
        assert twin.roots[0] is not tree.roots[0]

    def test_assign_replaces_structure(self, tree):
        other = JunctionTree.from_factors([F(("p", "q"))], ["p", "q"])
        returned = tree.assign(other)

        assert returned is tree
        assert [n.keys for n in tree.nodes()] == [["p", "q"]]
        assert tree.roots[0] is not other.roots[0]
        assert tree.roots[0].factors[0] is other.roots[0].factors[0]
        assert tree.remaining_factors == other.remaining_factors
