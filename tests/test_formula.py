"""
Tests for the combinator formula enumerator
"""

import pytest

from sequence_automata import EnumerationOverflow, FormulaTree, InvalidRuleString, Op


def all_configurations(tree):
    configurations = [tree.to_string()]
    while tree.has_next():
        tree.generate_next()
        configurations.append(tree.to_string())
    return configurations


class TestLeaf:
    def test_identity_then_negation(self):
        leaf = FormulaTree(0, 0)
        assert leaf.op == Op.NONE
        assert leaf.evaluate([True]) is True
        assert leaf.has_next()

        leaf.generate_next()
        assert leaf.op == Op.NOT
        assert leaf.evaluate([True]) is False
        assert not leaf.has_next()

    def test_exhausted_leaf_overflows(self):
        leaf = FormulaTree(0, 0)
        leaf.generate_next()
        with pytest.raises(EnumerationOverflow):
            leaf.generate_next()

    def test_single_leaf_has_two_formulas(self):
        assert all_configurations(FormulaTree(2, 2)) == ["2", "!2"]


class TestEnumeration:
    def test_two_leaf_order(self):
        tree = FormulaTree(0, 1)
        assert all_configurations(tree) == [
            "( 0 & 1 )",
            "( !0 & 1 )",
            "( 0 & !1 )",
            "( !0 & !1 )",
            "( 0 | 1 )",
            "( !0 | 1 )",
            "( 0 | !1 )",
            "( !0 | !1 )",
        ]

    def test_two_leaf_truth_tables(self):
        tree = FormulaTree(0, 1)
        inputs = [(True, True), (True, False), (False, True), (False, False)]
        tables = []
        for _ in range(8):
            tables.append([tree.evaluate(list(v)) for v in inputs])
            if tree.has_next():
                tree.generate_next()

        assert tables[0] == [True, False, False, False]   # 0 & 1
        assert tables[1] == [False, False, True, False]   # !0 & 1
        assert tables[3] == [False, False, False, True]   # !0 & !1
        assert tables[4] == [True, True, True, False]     # 0 | 1
        assert tables[7] == [False, True, True, True]     # !0 | !1

    def test_three_leaf_count(self):
        tree = FormulaTree(0, 2)
        counter = 1
        while tree.has_next():
            tree.generate_next()
            counter += 1
        assert counter == 64

    def test_three_leaf_configurations_distinct(self):
        configurations = all_configurations(FormulaTree(0, 2))
        assert len(set(configurations)) == len(configurations) == 64

    def test_initial_three_leaf_tree(self):
        tree = FormulaTree(0, 2)
        assert tree.to_string() == "( 0 & ( 1 & 2 ) )"
        assert tree.split == 0
        assert len(tree) == 3

    def test_split_moves_after_or(self):
        tree = FormulaTree(0, 2)
        for _ in range(32):
            tree.generate_next()
        assert tree.split == 1
        assert tree.op == Op.AND
        assert tree.to_string() == "( ( 0 & 1 ) & 2 )"

    def test_exhausted_tree_overflows(self):
        tree = FormulaTree(0, 1)
        while tree.has_next():
            tree.generate_next()
        with pytest.raises(EnumerationOverflow):
            tree.generate_next()

    def test_evaluate_is_pure(self):
        tree = FormulaTree(0, 2)
        assignments = [[bool(n & 1), bool(n & 2), bool(n & 4)] for n in range(8)]
        while True:
            for values in assignments:
                assert tree.evaluate(values) == tree.evaluate(list(values))
            if not tree.has_next():
                break
            tree.generate_next()

    def test_evaluate_rejects_short_input(self):
        tree = FormulaTree(0, 2)
        with pytest.raises(IndexError):
            tree.evaluate([True, False])
        with pytest.raises(ValueError):
            tree.evaluate([])

    def test_empty_range_rejected(self):
        with pytest.raises(ValueError):
            FormulaTree(3, 2)


class TestClusters:
    def test_leaf_is_own_cluster(self):
        assert FormulaTree(4, 4).get_clustered_variables() == [[4]]

    def test_same_combinator_chain_is_one_cluster(self):
        assert FormulaTree(0, 2).get_clustered_variables() == [[0, 1, 2]]

    def test_mixed_combinators(self):
        tree = FormulaTree.from_string("( 0 | ( 1 & 2 ) )")
        assert tree.get_clustered_variables() == [[0], [1, 2]]

    def test_two_subtrees_under_other_combinator(self):
        tree = FormulaTree.from_string("( ( 0 & 1 ) | ( 2 & 3 ) )")
        assert tree.get_clustered_variables() == [[0, 1], [2, 3]]

    def test_negation_does_not_split_cluster(self):
        tree = FormulaTree.from_string("( !0 | ( 1 | !2 ) )")
        assert tree.get_clustered_variables() == [[0, 1, 2]]


class TestParsing:
    def test_parse_matches_enumerated_tree(self):
        tree = FormulaTree(0, 2)
        while True:
            parsed = FormulaTree.from_string(tree.to_string())
            assert parsed == tree
            assert parsed.has_next() == tree.has_next()
            if not tree.has_next():
                break
            tree.generate_next()

    def test_parsed_tree_keeps_enumerating(self):
        parsed = FormulaTree.from_string("( !0 & !1 )")
        parsed.generate_next()
        assert parsed.to_string() == "( 0 | 1 )"

    @pytest.mark.parametrize("text", [
        "",
        "( 0 & 2 )",
        "( 1 & 2 )",
        "( 0 & 1",
        "( 0 ^ 1 )",
        "!",
        "( 0 & 1 ) 2",
    ])
    def test_invalid_text(self, text):
        with pytest.raises(InvalidRuleString):
            FormulaTree.from_string(text)
