"""
Tests for the result database
"""

import csv
import json

from sequence_automata import SearchDriver, SearchResult
from sequence_automata.storage import ResultDatabase


def found(target=(1, 3, 5)):
    return SearchDriver(1, 1, list(target)).run()


def near_miss():
    return SearchDriver(1, 1, [1, 5]).run()


class TestResultDatabase:
    def test_add_and_reload(self, tmp_path):
        path = tmp_path / "results.json"
        db = ResultDatabase(str(path))
        record = db.add(found())

        assert record.success is True
        assert record.depth == 3
        assert record.dimension == 1
        assert json.loads(path.read_text())["records"][0]["rule_string"] == record.rule_string

        reloaded = ResultDatabase(str(path))
        assert len(reloaded) == 1
        assert reloaded.records[0] == record

    def test_duplicate_not_stored_twice(self, tmp_path):
        db = ResultDatabase(str(tmp_path / "results.json"))
        db.add(found())
        db.add(found())
        assert len(db) == 1

    def test_leaderboard_prefers_full_matches(self, tmp_path):
        db = ResultDatabase(str(tmp_path / "results.json"))
        db.add(near_miss())
        db.add(found())
        leaderboard = db.get_leaderboard()
        assert [r.success for r in leaderboard] == [True, False]
        assert leaderboard[1].coverage == 0.5

    def test_get_by_target(self, tmp_path):
        db = ResultDatabase(str(tmp_path / "results.json"))
        db.add(near_miss())
        db.add(found())
        assert len(db.get_by_target([1, 5])) == 1
        assert db.get_by_target([2]) == []

    def test_nothing_matched(self, tmp_path):
        db = ResultDatabase(str(tmp_path / "results.json"))
        empty = SearchResult(success=False, target=[2], winner=None, best=None)
        assert db.add(empty) is None
        assert len(db) == 0

    def test_corrupt_file_starts_empty(self, tmp_path):
        path = tmp_path / "results.json"
        path.write_text("{not json")
        assert len(ResultDatabase(str(path))) == 0

    def test_clear(self, tmp_path):
        db = ResultDatabase(str(tmp_path / "results.json"))
        db.add(found())
        db.clear()
        assert len(ResultDatabase(str(tmp_path / "results.json"))) == 0

    def test_export_csv(self, tmp_path):
        db = ResultDatabase(str(tmp_path / "results.json"))
        db.add(found())
        db.add(near_miss())
        out = tmp_path / "results.csv"
        db.export_csv(str(out))

        with open(out, newline="") as f:
            rows = list(csv.reader(f))
        assert rows[0][:3] == ["target", "success", "rule"]
        assert len(rows) == 3
        assert rows[1][0] == "1 3 5"
