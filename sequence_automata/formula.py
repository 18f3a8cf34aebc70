"""Exhaustive, non-redundant enumeration of AND/OR/NOT formulas over a leaf range."""

import re
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from .errors import EnumerationOverflow, InvalidRuleString


class Op(Enum):
    # Internal node combinators
    AND = "&"
    OR = "|"
    # Leaf operations
    NONE = ""
    NOT = "!"


class FormulaTree:
    """Binary combinator tree over the contiguous leaf range [start, end].

    A leaf reads values[start], optionally negated. An internal node splits its
    range after `split` (left child [start, split], right child [split+1, end])
    and joins the two sub-formulas with AND or OR.

    generate_next() steps through every NOT assignment, every combinator
    choice and every split position exactly once:

        1. advance the left child
        2. else advance the right child and restart the left one
        3. else AND -> OR with fresh children
        4. else move the split one leaf to the right, fresh children, AND
    """

    def __init__(self, start: int, end: int):
        if start > end:
            raise ValueError(f"Empty leaf range [{start}, {end}]")
        self.start = start
        self.end = end
        self.split = start
        self.op = Op.NONE
        self.left: Optional["FormulaTree"] = None
        self.right: Optional["FormulaTree"] = None
        self._reset_children()

    def _reset_children(self):
        if self.is_leaf:
            self.op = Op.NONE
            return
        self.op = Op.AND
        self.left = FormulaTree(self.start, self.split)
        self.right = FormulaTree(self.split + 1, self.end)

    @property
    def is_leaf(self) -> bool:
        return self.start == self.end

    def __len__(self):
        return self.end - self.start + 1

    def evaluate(self, values: Sequence[bool]) -> bool:
        if len(values) == 0:
            raise ValueError("Cannot evaluate a formula over no values")
        if self.end >= len(values):
            raise IndexError(
                f"Leaf range [{self.start}, {self.end}] outside {len(values)} values"
            )
        return self._evaluate(values)

    def _evaluate(self, values: Sequence[bool]) -> bool:
        if self.is_leaf:
            if self.op == Op.NOT:
                return not values[self.start]
            return bool(values[self.start])
        if self.op == Op.AND:
            return self.left._evaluate(values) and self.right._evaluate(values)
        return self.left._evaluate(values) or self.right._evaluate(values)

    def has_next(self) -> bool:
        if self.is_leaf:
            return self.op == Op.NONE
        return (
            self.left.has_next()
            or self.right.has_next()
            or self.op == Op.AND
            or self.split < self.end - 1
        )

    def generate_next(self):
        if self.is_leaf:
            if self.op != Op.NONE:
                raise EnumerationOverflow(f"Leaf {self.start} already negated")
            self.op = Op.NOT
            return

        if self.left.has_next():
            self.left.generate_next()
            return

        if self.right.has_next():
            self.right.generate_next()
            self.left = FormulaTree(self.start, self.split)
            return

        if self.op == Op.AND:
            self._reset_children()
            self.op = Op.OR
            return

        if self.split + 1 == self.end:
            raise EnumerationOverflow(
                f"Every formula over [{self.start}, {self.end}] has been generated"
            )

        self.split += 1
        self._reset_children()

    def get_clustered_variables(self) -> List[List[int]]:
        """Group leaf indices joined by the same chain of combinators.

        Reordering leaves inside one cluster never changes the formula, so
        only exchanges between clusters are worth trying.
        """
        top, others = self._clusters()
        clusters = [cluster for cluster in [top] + others if cluster]
        return sorted((sorted(cluster) for cluster in clusters), key=lambda c: c[0])

    def _clusters(self) -> Tuple[List[int], List[List[int]]]:
        if self.is_leaf:
            return [self.start], []

        top: List[int] = []
        others: List[List[int]] = []
        for child in (self.left, self.right):
            child_top, child_others = child._clusters()
            if child.is_leaf or child.op == self.op:
                top.extend(child_top)
            else:
                others.append(child_top)
            others.extend(child_others)
        return top, others

    def to_string(self) -> str:
        if self.is_leaf:
            return f"{self.op.value}{self.start}"
        return f"( {self.left.to_string()} {self.op.value} {self.right.to_string()} )"

    @classmethod
    def from_string(cls, text: str) -> "FormulaTree":
        """Parse the to_string() format, e.g. '( !0 & ( 1 | 2 ) )'."""
        tokens = re.findall(r"\(|\)|&|\||!|\d+|\S", text)
        if not tokens:
            raise InvalidRuleString("Empty formula")
        tree, position = cls._parse(tokens, 0)
        if position != len(tokens):
            raise InvalidRuleString(f"Unexpected trailing input in {text!r}")
        if tree.start != 0:
            raise InvalidRuleString(f"Formula must start at leaf 0: {text!r}")
        return tree

    @classmethod
    def _parse(cls, tokens: List[str], position: int) -> Tuple["FormulaTree", int]:
        if position >= len(tokens):
            raise InvalidRuleString("Formula ended unexpectedly")

        token = tokens[position]
        if token == "(":
            left, position = cls._parse(tokens, position + 1)
            if position >= len(tokens) or tokens[position] not in ("&", "|"):
                raise InvalidRuleString("Expected '&' or '|' between sub-formulas")
            op = Op(tokens[position])
            right, position = cls._parse(tokens, position + 1)
            if position >= len(tokens) or tokens[position] != ")":
                raise InvalidRuleString("Missing ')'")
            if left.end + 1 != right.start:
                raise InvalidRuleString(
                    f"Leaves must be contiguous: {left.end} is followed by {right.start}"
                )
            return cls._join(op, left, right), position + 1

        negated = token == "!"
        if negated:
            position += 1
            if position >= len(tokens):
                raise InvalidRuleString("'!' must be followed by a leaf index")
            token = tokens[position]
        if not token.isdigit():
            raise InvalidRuleString(f"Unexpected token {token!r}")

        leaf = cls(int(token), int(token))
        if negated:
            leaf.op = Op.NOT
        return leaf, position + 1

    @classmethod
    def _join(cls, op: Op, left: "FormulaTree", right: "FormulaTree") -> "FormulaTree":
        node = cls.__new__(cls)
        node.start = left.start
        node.end = right.end
        node.split = left.end
        node.op = op
        node.left = left
        node.right = right
        return node

    def __eq__(self, other):
        if not isinstance(other, FormulaTree):
            return False
        return (
            self.start == other.start
            and self.end == other.end
            and self.split == other.split
            and self.op == other.op
            and self.left == other.left
            and self.right == other.right
        )

    def __repr__(self):
        return f"FormulaTree({self.to_string()})"
