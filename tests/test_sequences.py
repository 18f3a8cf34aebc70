"""
Tests for target sequence parsing
"""

import pytest

from sequence_automata.sequences import PRIMES, parse_sequence


class TestParseSequence:
    def test_named(self):
        assert parse_sequence("primes") == list(PRIMES)
        assert parse_sequence(" Odd ")[:4] == [1, 3, 5, 7]

    def test_list(self):
        assert parse_sequence("1,3,5,7") == [1, 3, 5, 7]
        assert parse_sequence("1, 2, 3") == [1, 2, 3]

    @pytest.mark.parametrize("text", ["", "fibonacci", "1,x", "1,0", "-1"])
    def test_invalid(self, text):
        with pytest.raises(ValueError):
            parse_sequence(text)
