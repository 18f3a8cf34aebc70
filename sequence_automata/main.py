#!/usr/bin/env python3
"""CLI for the sequence-matching cellular automaton search."""

import argparse
import sys
from pathlib import Path

from .automaton import CellularAutomaton
from .errors import InvalidRuleString
from .rule import Rule
from .search import SearchDriver
from .sequences import KNOWN_SEQUENCES, parse_sequence
from .storage import ResultDatabase
from .visualize import visualize_rule


def _target(text: str):
    try:
        return parse_sequence(text)
    except ValueError as e:
        print(f"Error parsing target '{text}': {e}")
        sys.exit(1)


def _permutation(text):
    if not text:
        return None
    try:
        return [int(part) for part in text.split(",") if part.strip()]
    except ValueError:
        print(f"Error parsing permutation '{text}'")
        sys.exit(1)


def cmd_search(args):
    """Search every rule from --min-dims to --max-dims for the target trajectory."""
    target = _target(args.target)

    print(f"Starting exhaustive search...")
    print(f"  Dimensions: {args.min_dims}..{args.max_dims}")
    print(f"  Target: {target}")
    if args.max_trials:
        print(f"  Trial budget: {args.max_trials}")
    print()

    try:
        driver = SearchDriver(
            min_dimensions=args.min_dims,
            max_dimensions=args.max_dims,
            target_sequence=target,
            max_trials=args.max_trials,
        )
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    result = driver.run(verbose=True, progress_interval=args.progress)

    if args.database:
        db = ResultDatabase(args.database)
        record = db.add(result)
        if record:
            print(f"\nSaved outcome to {args.database}")

    if args.visualize and (result.winner or result.best):
        outcome = result.winner or result.best
        rule = outcome.trial.rule.to_rule()
        paths = visualize_rule(
            rule,
            steps=len(target),
            permutation=outcome.trial.rule.permutation,
            output_dir=args.output,
        )
        for path in paths:
            print(f"Saved: {path}")

    if not result.success:
        sys.exit(2)


def cmd_simulate(args):
    """Grow a single rule from the seed cell and print its population trajectory."""
    try:
        rule = Rule.from_string(args.rule, args.dims)
    except InvalidRuleString as e:
        print(f"Error parsing rule '{args.rule}': {e}")
        sys.exit(1)

    permutation = _permutation(args.permutation)
    try:
        ca = CellularAutomaton(rule.dimensions, rule, permutation)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    print(f"Simulating rule: {rule.to_string()}")
    print(f"  Dimensions: {rule.dimensions}")
    print(f"  Permutation: {ca.permutation}")
    print()

    trajectory = ca.trajectory(args.steps)
    for generation, population in enumerate(trajectory):
        print(f"  Generation {generation:3d}: {population:6d} active")
    print(f"  Lattice size: {len(ca.lattice)} cells")

    if args.target:
        target = _target(args.target)
        depth = CellularAutomaton(rule.dimensions, rule, permutation).match_depth(target)
        print(f"\nMatched {depth}/{len(target)} entries of {target}")

    if args.visualize:
        output_dir = Path(args.output)
        paths = visualize_rule(rule, steps=args.steps, permutation=permutation, output_dir=str(output_dir))
        print(f"\nSaved:")
        for path in paths:
            print(f"  {path}")


def cmd_results(args):
    """Show recorded search outcomes."""
    db = ResultDatabase(args.database)

    if len(db) == 0:
        print("No results recorded yet. Run a search first!")
        return

    leaderboard = db.get_leaderboard(args.top)

    print(f"Top {len(leaderboard)} recorded outcomes:\n")
    print(f"{'Rank':<6}{'Found':<7}{'Dims':<6}{'Depth':<8}{'Target':<28}Rule")
    print("-" * 80)

    for i, r in enumerate(leaderboard, 1):
        target = ",".join(str(v) for v in r.target)
        print(f"{i:<6}{'yes' if r.success else 'no':<7}{r.dimension:<6}"
              f"{f'{r.depth}/{len(r.target)}':<8}{target[:26]:<28}{r.rule_string}")


def cmd_export(args):
    """Export recorded outcomes to CSV."""
    db = ResultDatabase(args.database)

    if len(db) == 0:
        print("No results to export.")
        return

    db.export_csv(args.output)
    print(f"Exported {len(db)} outcomes to {args.output}")


def main():
    parser = argparse.ArgumentParser(
        description="Search for an N-dimensional cellular automaton whose active-cell counts follow a sequence"
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    known = ", ".join(sorted(KNOWN_SEQUENCES))

    # Search command
    search_parser = subparsers.add_parser("search", help="Run the exhaustive rule search")
    search_parser.add_argument("--min-dims", type=int, default=1, help="Smallest dimension to try")
    search_parser.add_argument("--max-dims", type=int, default=2, help="Largest dimension to try")
    search_parser.add_argument("-t", "--target", type=str, default="primes",
                               help=f"Target sequence: {known} or e.g. 1,3,5,7")
    search_parser.add_argument("--max-trials", type=int, default=None, help="Stop after this many trials")
    search_parser.add_argument("--progress", type=int, default=10000, help="Trials between progress lines")
    search_parser.add_argument("--database", type=str, default="search_results.json",
                               help="Results file (empty string to skip saving)")
    search_parser.add_argument("-o", "--output", type=str, default="output", help="Output directory")
    search_parser.add_argument("-v", "--visualize", action="store_true", help="Visualize the found rule")
    search_parser.set_defaults(func=cmd_search)

    # Simulate command
    sim_parser = subparsers.add_parser("simulate", help="Grow one rule and print its trajectory")
    sim_parser.add_argument("rule", type=str, help="Rule like '( 0 | ( 1 | 2 ) ) -> set'")
    sim_parser.add_argument("--dims", type=int, default=None, help="Dimensions (inferred from the rule)")
    sim_parser.add_argument("--steps", type=int, default=10, help="Generations to simulate")
    sim_parser.add_argument("-p", "--permutation", type=str, default=None,
                            help="Leaf permutation, e.g. 2,1,0")
    sim_parser.add_argument("-t", "--target", type=str, default=None, help="Compare against a target sequence")
    sim_parser.add_argument("-o", "--output", type=str, default="output", help="Output directory")
    sim_parser.add_argument("-v", "--visualize", action="store_true", help="Save pictures of the run")
    sim_parser.set_defaults(func=cmd_simulate)

    # Results command
    results_parser = subparsers.add_parser("results", help="Show recorded search outcomes")
    results_parser.add_argument("-n", "--top", type=int, default=20, help="Number of outcomes to show")
    results_parser.add_argument("--database", type=str, default="search_results.json", help="Results file")
    results_parser.set_defaults(func=cmd_results)

    # Export command
    export_parser = subparsers.add_parser("export", help="Export outcomes to CSV")
    export_parser.add_argument("-o", "--output", type=str, default="results.csv", help="Output CSV file")
    export_parser.add_argument("--database", type=str, default="search_results.json", help="Results file")
    export_parser.set_defaults(func=cmd_export)

    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    args.func(args)


if __name__ == "__main__":
    main()
