"""Update rules: a formula over a cell's neighbourhood plus an action on the cell."""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from .cell import Cell
from .errors import InvalidRuleString
from .formula import FormulaTree
from .permuter import SymmetryPermuter


class Action(Enum):
    SET = "set"
    UNSET = "unset"
    FLIP = "flip"


# Canonical action cycle
_NEXT_ACTION = {Action.SET: Action.UNSET, Action.UNSET: Action.FLIP}


def neighbourhood_size(dimensions: int) -> int:
    """Number of values a rule reads: the cell itself plus its 3^D - 1 neighbours."""
    return 3 ** dimensions


@dataclass(frozen=True)
class RuleSnapshot:
    """Immutable description of a rule at one point of the enumeration."""
    dimensions: int
    condition: str
    action: str
    permutation: Tuple[int, ...]

    def to_string(self) -> str:
        return f"{self.condition} -> {self.action}"

    def to_rule(self) -> "Rule":
        return Rule.from_string(self.to_string(), self.dimensions)


class Rule:
    """Condition over the 3^D neighbourhood values and the action taken when it holds.

    Value 0 is the cell itself; values 1.. are its neighbours in the order
    Cell.iter_nearby_coordinates() yields them.
    """

    def __init__(
        self,
        dimensions: int,
        condition: Optional[FormulaTree] = None,
        action: Action = Action.SET,
    ):
        size = neighbourhood_size(dimensions)
        if condition is None:
            condition = FormulaTree(0, size - 1)
        elif len(condition) != size or condition.start != 0:
            raise ValueError(
                f"A {dimensions}-dimensional rule needs a formula over {size} leaves, "
                f"got {len(condition)}"
            )
        self.dimensions = dimensions
        self.condition = condition
        self.action = action
        self.permuter = SymmetryPermuter(condition.get_clustered_variables())

    @property
    def permutation(self) -> List[int]:
        return self.permuter.get_sequence()

    def evaluate(self, values: Sequence[bool], permutation: Optional[Sequence[int]] = None) -> bool:
        if permutation is None:
            permutation = self.permuter.get_sequence()
        if len(permutation) != len(values):
            raise ValueError(
                f"Permutation of length {len(permutation)} for {len(values)} values"
            )
        return self.condition.evaluate([values[index] for index in permutation])

    def apply(self, cell: Cell):
        if self.action == Action.SET:
            cell.set()
        elif self.action == Action.UNSET:
            cell.unset()
        else:
            cell.flip()

    def has_next(self) -> bool:
        return self.action != Action.FLIP or self.condition.has_next()

    def generate_next(self):
        """Cycle the action, then move to the next condition with the action back at SET."""
        if self.action in _NEXT_ACTION:
            self.action = _NEXT_ACTION[self.action]
        else:
            self.condition.generate_next()
            self.action = Action.SET
        self.permuter.reset(self.condition.get_clustered_variables())

    def has_next_permutation(self) -> bool:
        return self.permuter.has_next()

    def generate_next_permutation(self):
        self.permuter.generate_next()

    def to_string(self) -> str:
        return f"{self.condition.to_string()} -> {self.action.value}"

    @classmethod
    def from_string(cls, rule_str: str, dimensions: Optional[int] = None) -> "Rule":
        """Parse a rule like '( 0 | ( 1 | 2 ) ) -> set'."""
        if "->" not in rule_str:
            raise InvalidRuleString(f"Missing '-> action' in {rule_str!r}")
        condition_part, action_part = rule_str.rsplit("->", 1)
        try:
            action = Action(action_part.strip().lower())
        except ValueError:
            raise InvalidRuleString(f"Unknown action {action_part.strip()!r}") from None

        condition = FormulaTree.from_string(condition_part)
        if dimensions is None:
            dimensions = _dimensions_for(len(condition))
        if len(condition) != neighbourhood_size(dimensions):
            raise InvalidRuleString(
                f"{len(condition)} leaves do not fit a {dimensions}-dimensional neighbourhood"
            )
        return cls(dimensions, condition, action)

    def snapshot(self) -> RuleSnapshot:
        return RuleSnapshot(
            dimensions=self.dimensions,
            condition=self.condition.to_string(),
            action=self.action.value,
            permutation=tuple(self.permuter.get_sequence()),
        )

    def __repr__(self):
        return f"Rule({self.to_string()}, permutation={self.permutation})"


def _dimensions_for(leaves: int) -> int:
    dimensions, size = 1, 3
    while size < leaves:
        dimensions += 1
        size *= 3
    if size != leaves:
        raise InvalidRuleString(f"{leaves} leaves is not a power of three")
    return dimensions
