"""Persistence layer for finished search outcomes."""

import csv
import json
from dataclasses import asdict, dataclass
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

from .search import SearchResult


@dataclass
class SearchRecord:
    """The rule a finished search ended with: the winner, or its best near-miss."""
    target: List[int]
    success: bool
    rule_string: str
    dimension: int
    permutation: List[int]
    depth: int
    trials_run: int
    discovered_at: str
    notes: str = ""

    def to_dict(self) -> Dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict) -> "SearchRecord":
        return cls(**data)

    @property
    def coverage(self) -> float:
        """Fraction of the target sequence the rule reproduced."""
        return self.depth / len(self.target) if self.target else 0.0


class ResultDatabase:
    """JSON-based storage for search outcomes."""

    def __init__(self, filepath: str = "search_results.json"):
        self.filepath = Path(filepath)
        self.records: List[SearchRecord] = []
        self._load()

    def _load(self):
        """Load records from file."""
        if self.filepath.exists():
            try:
                with open(self.filepath, "r") as f:
                    data = json.load(f)
                    self.records = [SearchRecord.from_dict(r) for r in data.get("records", [])]
            except (json.JSONDecodeError, KeyError, TypeError):
                self.records = []
        else:
            self.records = []

    def save(self):
        """Save records to file."""
        self.filepath.parent.mkdir(parents=True, exist_ok=True)
        data = {
            "version": "1.0",
            "updated_at": datetime.now().isoformat(),
            "records": [r.to_dict() for r in self.records],
        }
        with open(self.filepath, "w") as f:
            json.dump(data, f, indent=2)

    def add(self, result: SearchResult, notes: str = "") -> Optional[SearchRecord]:
        """Record a search outcome; returns None when no trial matched anything."""
        outcome = result.winner or result.best
        if outcome is None:
            return None

        trial = outcome.trial
        rule_string = trial.rule.to_string()
        permutation = list(trial.rule.permutation)

        for existing in self.records:
            if (existing.target == result.target and existing.rule_string == rule_string
                    and existing.permutation == permutation):
                # Keep the deepest match seen for this rule
                if outcome.depth > existing.depth:
                    existing.depth = outcome.depth
                    existing.success = result.success
                    existing.discovered_at = datetime.now().isoformat()
                    self.save()
                return existing

        record = SearchRecord(
            target=list(result.target),
            success=result.success,
            rule_string=rule_string,
            dimension=trial.dimension,
            permutation=permutation,
            depth=outcome.depth,
            trials_run=result.trials_run,
            discovered_at=datetime.now().isoformat(),
            notes=notes,
        )
        self.records.append(record)
        self.save()
        return record

    def get_leaderboard(self, top_n: int = 20) -> List[SearchRecord]:
        """Get top N records, full matches first, then by coverage."""
        return sorted(
            self.records,
            key=lambda r: (r.success, r.coverage, r.depth),
            reverse=True,
        )[:top_n]

    def get_by_target(self, target: List[int]) -> List[SearchRecord]:
        return [r for r in self.records if r.target == list(target)]

    def clear(self):
        """Clear all records."""
        self.records = []
        self.save()

    def export_csv(self, filepath: str):
        """Export records to CSV format."""
        with open(filepath, "w", newline="") as f:
            writer = csv.writer(f)
            writer.writerow([
                "target", "success", "rule", "dimension", "permutation",
                "depth", "coverage", "trials_run", "discovered_at", "notes",
            ])
            for r in self.get_leaderboard(len(self.records)):
                writer.writerow([
                    " ".join(str(v) for v in r.target),
                    r.success,
                    r.rule_string,
                    r.dimension,
                    " ".join(str(v) for v in r.permutation),
                    r.depth,
                    f"{r.coverage:.4f}",
                    r.trials_run,
                    r.discovered_at,
                    r.notes,
                ])

    def __len__(self):
        return len(self.records)

    def __iter__(self):
        return iter(self.records)
