"""Exhaustive search for a rule whose population trajectory matches a target sequence."""

from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, List, Optional, Sequence, Tuple

from .automaton import CellularAutomaton
from .errors import EnumerationOverflow
from .rule import Rule, RuleSnapshot, neighbourhood_size
from .sequences import PRIMES


@dataclass(frozen=True)
class Trial:
    """One (dimension, rule, permutation) point of the search space."""
    dimension: int
    rule_index: int
    permutation_index: int
    rule: RuleSnapshot


@dataclass
class TrialOutcome:
    """A trial and how many leading target entries it reproduced."""
    trial: Trial
    depth: int

    def to_dict(self) -> Dict:
        return {
            "dimension": self.trial.dimension,
            "rule_index": self.trial.rule_index,
            "permutation_index": self.trial.permutation_index,
            "rule": self.trial.rule.to_string(),
            "permutation": list(self.trial.rule.permutation),
            "depth": self.depth,
        }


@dataclass
class DimensionSummary:
    """Rules explored and best match achieved within one dimension."""
    dimension: int
    rules_explored: int = 0
    trials_run: int = 0
    best: Optional[TrialOutcome] = None

    @property
    def best_depth(self) -> int:
        return self.best.depth if self.best else 0

    def to_dict(self) -> Dict:
        return {
            "dimension": self.dimension,
            "rules_explored": self.rules_explored,
            "trials_run": self.trials_run,
            "best": self.best.to_dict() if self.best else None,
        }


@dataclass
class SearchResult:
    """Results from a search run."""
    success: bool
    target: List[int]
    winner: Optional[TrialOutcome]
    best: Optional[TrialOutcome]
    summaries: List[DimensionSummary] = field(default_factory=list)
    trials_run: int = 0
    exhausted: bool = True

    def to_dict(self) -> Dict:
        return {
            "success": self.success,
            "target": list(self.target),
            "winner": self.winner.to_dict() if self.winner else None,
            "best": self.best.to_dict() if self.best else None,
            "summaries": [s.to_dict() for s in self.summaries],
            "trials_run": self.trials_run,
            "exhausted": self.exhausted,
        }


class SearchCursor:
    """Explicit dimension x rule x permutation position of the search.

    Iterating yields the cursor itself at every position, starting with the
    identity permutation of the first rule of min_dimensions. Permutations
    vary fastest, then rules (action before condition), then dimensions.
    """

    def __init__(self, min_dimensions: int, max_dimensions: int):
        self.min_dimensions = min_dimensions
        self.max_dimensions = max_dimensions
        self.dimension = min_dimensions
        self.rule = Rule(min_dimensions)
        self.rule_index = 0
        self.permutation_index = 0

    @property
    def position(self) -> Tuple[int, int, int]:
        return self.dimension, self.rule_index, self.permutation_index

    def has_next(self) -> bool:
        return (
            self.rule.has_next_permutation()
            or self.rule.has_next()
            or self.dimension < self.max_dimensions
        )

    def generate_next(self):
        if self.rule.has_next_permutation():
            self.rule.generate_next_permutation()
            self.permutation_index += 1
        elif self.rule.has_next():
            self.rule.generate_next()
            self.rule_index += 1
            self.permutation_index = 0
        elif self.dimension < self.max_dimensions:
            self.dimension += 1
            self.rule = Rule(self.dimension)
            self.rule_index = 0
            self.permutation_index = 0
        else:
            raise EnumerationOverflow("Search space exhausted")

    def trial(self) -> Trial:
        return Trial(
            dimension=self.dimension,
            rule_index=self.rule_index,
            permutation_index=self.permutation_index,
            rule=self.rule.snapshot(),
        )

    def __iter__(self) -> Iterator["SearchCursor"]:
        while True:
            yield self
            if not self.has_next():
                return
            self.generate_next()


def run_trial(
    dimension: int,
    rule: Rule,
    target: Sequence[int],
    permutation: Optional[Sequence[int]] = None,
) -> int:
    """Simulate rule from a single seed cell; return the number of target entries matched.

    Depends only on its arguments, so trials can be farmed out independently.
    """
    automaton = CellularAutomaton(dimension, rule, permutation)
    return automaton.match_depth(target)


class SearchDriver:
    """Brute-force generate-and-test search over every rule of each dimension."""

    def __init__(
        self,
        min_dimensions: int = 1,
        max_dimensions: int = 2,
        target_sequence: Sequence[int] = PRIMES,
        max_trials: Optional[int] = None,
    ):
        if min_dimensions < 1:
            raise ValueError(f"min_dimensions must be positive, got {min_dimensions}")
        if max_dimensions < min_dimensions:
            raise ValueError(
                f"max_dimensions ({max_dimensions}) is below min_dimensions ({min_dimensions})"
            )
        if len(target_sequence) == 0:
            raise ValueError("Target sequence is empty")
        if any(v < 1 for v in target_sequence):
            raise ValueError(f"Target sequence entries must be positive: {list(target_sequence)}")
        if max_trials is not None and max_trials < 1:
            raise ValueError(f"max_trials must be positive, got {max_trials}")

        self.min_dimensions = min_dimensions
        self.max_dimensions = max_dimensions
        self.target_sequence = list(target_sequence)
        self.max_trials = max_trials

    def run(
        self,
        verbose: bool = False,
        callback: Optional[Callable[[Tuple[int, int, int], int], None]] = None,
        progress_interval: int = 10000,
    ) -> SearchResult:
        """Explore until a rule reproduces the whole target or the space runs out."""
        target = self.target_sequence
        summaries: Dict[int, DimensionSummary] = {}
        best: Optional[TrialOutcome] = None
        trials_run = 0

        def finish(winner: Optional[TrialOutcome], exhausted: bool) -> SearchResult:
            result = SearchResult(
                success=winner is not None,
                target=list(target),
                winner=winner,
                best=best,
                summaries=[summaries[d] for d in sorted(summaries)],
                trials_run=trials_run,
                exhausted=exhausted,
            )
            if verbose:
                print_result(result)
            return result

        for cursor in SearchCursor(self.min_dimensions, self.max_dimensions):
            dimension = cursor.dimension
            summary = summaries.get(dimension)
            if summary is None:
                summary = summaries[dimension] = DimensionSummary(dimension)
                if verbose:
                    print(f"Exploring {dimension}D rules over {neighbourhood_size(dimension)} neighbourhood values...")

            if cursor.permutation_index == 0:
                summary.rules_explored += 1

            depth = run_trial(dimension, cursor.rule, target)
            trials_run += 1
            summary.trials_run += 1

            if depth > summary.best_depth:
                outcome = TrialOutcome(cursor.trial(), depth)
                summary.best = outcome
                if best is None or depth > best.depth:
                    best = outcome
                    if verbose:
                        print(f"  Trial {trials_run:8d}: matched {depth}/{len(target)} "
                              f"with {outcome.trial.rule.to_string()} "
                              f"permutation={list(outcome.trial.rule.permutation)}")

            if callback:
                callback(cursor.position, depth)

            if depth == len(target):
                return finish(summary.best, exhausted=False)

            if verbose and trials_run % progress_interval == 0:
                print(f"  {trials_run} trials, {summary.rules_explored} {dimension}D rules, "
                      f"best depth {best.depth if best else 0}")

            if self.max_trials is not None and trials_run >= self.max_trials:
                return finish(None, exhausted=False)

        return finish(None, exhausted=True)


def print_result(result: SearchResult):
    """Print a search outcome the way the CLI reports it."""
    print()
    if result.success:
        trial = result.winner.trial
        print(f"Found a {trial.dimension}D rule reproducing {result.target}:")
        print(f"  Rule: {trial.rule.condition}")
        print(f"  Action: {trial.rule.action}")
        print(f"  Permutation: {list(trial.rule.permutation)}")
        print(f"  Trials run: {result.trials_run}")
        return

    reason = "search space exhausted" if result.exhausted else "trial budget reached"
    print(f"No rule found ({reason}, {result.trials_run} trials).")
    for summary in result.summaries:
        line = (f"  {summary.dimension}D: {summary.rules_explored} rules, "
                f"{summary.trials_run} trials, best depth {summary.best_depth}")
        if summary.best:
            line += f" ({summary.best.trial.rule.to_string()})"
        print(line)
