"""
Tests for the exhaustive search driver
"""

import pytest

from sequence_automata import EnumerationOverflow, SearchCursor, SearchDriver, run_trial
from sequence_automata.search import print_result


class TestSearchCursor:
    def test_starts_at_first_rule(self):
        cursor = SearchCursor(1, 1)
        assert cursor.position == (1, 0, 0)
        assert cursor.rule.to_string() == "( 0 & ( 1 & 2 ) ) -> set"

    def test_walks_every_one_dimension_rule(self):
        positions = [cursor.position for cursor in SearchCursor(1, 1)]
        assert len(positions) == len(set(positions))
        assert positions[0] == (1, 0, 0)
        assert {rule_index for _, rule_index, _ in positions} == set(range(192))

    def test_permutations_vary_fastest(self):
        positions = [cursor.position for cursor in SearchCursor(1, 1)]
        for previous, current in zip(positions, positions[1:]):
            if current[1] == previous[1]:
                assert current[2] == previous[2] + 1
            else:
                assert current[1] == previous[1] + 1
                assert current[2] == 0

    def test_moves_to_next_dimension(self):
        cursor = SearchCursor(1, 2)
        for cursor in cursor:
            if cursor.dimension == 2:
                break
        assert cursor.position == (2, 0, 0)
        assert len(cursor.rule.condition) == 9

    def test_overflow(self):
        cursor = SearchCursor(1, 1)
        for cursor in cursor:
            pass
        assert not cursor.has_next()
        with pytest.raises(EnumerationOverflow):
            cursor.generate_next()

    def test_trial_snapshot(self):
        cursor = SearchCursor(1, 1)
        trial = cursor.trial()
        assert trial.dimension == 1
        assert trial.rule.condition == "( 0 & ( 1 & 2 ) )"
        assert trial.rule.permutation == (0, 1, 2)


class TestSearchDriver:
    def test_finds_odd_numbers(self):
        result = SearchDriver(min_dimensions=1, max_dimensions=2, target_sequence=[1, 3, 5, 7]).run()

        assert result.success is True
        assert result.exhausted is False
        assert result.winner.depth == 4
        assert result.winner.trial.dimension == 1
        assert [s.dimension for s in result.summaries] == [1]

    def test_winner_replays(self):
        target = [1, 3, 5, 7]
        result = SearchDriver(1, 1, target).run()
        snapshot = result.winner.trial.rule
        assert run_trial(1, snapshot.to_rule(), target, snapshot.permutation) == len(target)

    def test_unreachable_target(self):
        result = SearchDriver(min_dimensions=1, max_dimensions=1, target_sequence=[1, 5]).run()

        assert result.success is False
        assert result.exhausted is True
        assert result.winner is None
        assert result.best.depth == 1

        summary = result.summaries[0]
        assert summary.dimension == 1
        assert summary.rules_explored == 192
        assert summary.trials_run == result.trials_run
        assert summary.trials_run >= 192
        assert summary.best_depth == 1

    def test_first_trial_matches_seed(self):
        result = SearchDriver(1, 1, [1]).run()
        assert result.success is True
        assert result.trials_run == 1
        assert result.winner.trial.rule_index == 0

    def test_trial_budget(self):
        result = SearchDriver(1, 1, [1, 5], max_trials=10).run()
        assert result.success is False
        assert result.exhausted is False
        assert result.trials_run == 10

    def test_callback_sees_every_trial(self):
        seen = []
        result = SearchDriver(1, 1, [1, 5], max_trials=25).run(
            callback=lambda position, depth: seen.append((position, depth))
        )
        assert len(seen) == result.trials_run == 25
        assert seen[0] == ((1, 0, 0), 1)

    def test_verbose_report(self, capsys):
        SearchDriver(1, 1, [1, 5], max_trials=5).run(verbose=True)
        out = capsys.readouterr().out
        assert "Exploring 1D rules" in out
        assert "No rule found (trial budget reached, 5 trials)" in out

    def test_result_to_dict(self):
        result = SearchDriver(1, 1, [1, 3]).run()
        data = result.to_dict()
        assert data["success"] is True
        assert data["target"] == [1, 3]
        assert data["winner"]["depth"] == 2
        assert data["summaries"][0]["dimension"] == 1

    def test_print_success(self, capsys):
        result = SearchDriver(1, 1, [1, 3, 5]).run()
        print_result(result)
        out = capsys.readouterr().out
        assert "Found a 1D rule" in out
        assert result.winner.trial.rule.condition in out

    @pytest.mark.parametrize("kwargs", [
        dict(min_dimensions=0, max_dimensions=1, target_sequence=[1]),
        dict(min_dimensions=2, max_dimensions=1, target_sequence=[1]),
        dict(min_dimensions=1, max_dimensions=1, target_sequence=[]),
        dict(min_dimensions=1, max_dimensions=1, target_sequence=[1, 0]),
        dict(min_dimensions=1, max_dimensions=1, target_sequence=[1], max_trials=0),
    ])
    def test_invalid_configuration(self, kwargs):
        with pytest.raises(ValueError):
            SearchDriver(**kwargs)
