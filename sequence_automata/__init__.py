"""Sequence Automata - search for a cellular automaton rule whose population follows a sequence."""

from .automaton import CellularAutomaton
from .cell import Cell, Offset
from .errors import EnumerationOverflow, InvalidRuleString
from .formula import FormulaTree, Op
from .lattice import Lattice
from .permuter import SymmetryPermuter
from .rule import Action, Rule, RuleSnapshot
from .search import SearchCursor, SearchDriver, SearchResult, run_trial

__all__ = [
    "Action",
    "Cell",
    "CellularAutomaton",
    "EnumerationOverflow",
    "FormulaTree",
    "InvalidRuleString",
    "Lattice",
    "Offset",
    "Op",
    "Rule",
    "RuleSnapshot",
    "SearchCursor",
    "SearchDriver",
    "SearchResult",
    "SymmetryPermuter",
    "run_trial",
]
