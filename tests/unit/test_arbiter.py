"""
Unit tests for specificity arbitration.
"""

from bibresolver.resolution.arbiter import SpecificityArbiter


class TestIsMoreSpecific:

    def test_longer_by_more_than_two(self):
        assert SpecificityArbiter.is_more_specific("QA76.7612", "QA76")

    def test_longer_by_exactly_two_is_not_enough(self):
        assert not SpecificityArbiter.is_more_specific("QA7612", "QA76")

    def test_decimal_point_beats_none(self):
        assert SpecificityArbiter.is_more_specific("QA7.6", "QA76")

    def test_dewey_decimals_beat_class(self):
        assert SpecificityArbiter.is_more_specific("823.9", "823")

    def test_same_value(self):
        assert not SpecificityArbiter.is_more_specific("823.914", "823.914")


class TestPickBest:

    def test_more_specific_candidate_wins(self):
        assert SpecificityArbiter.pick_best("QA76", ["QA76.76"]) == "QA76.76"

    def test_blank_current_takes_first_candidate(self):
        assert SpecificityArbiter.pick_best("", ["500.1"]) == "500.1"
        assert SpecificityArbiter.pick_best("   ", ["500.1", "500.12345"]) == "500.1"

    def test_less_specific_candidate_keeps_current(self):
        assert SpecificityArbiter.pick_best("500.1", ["500"]) == "500.1"

    def test_no_candidates(self):
        assert SpecificityArbiter.pick_best("", []) == ""
        assert SpecificityArbiter.pick_best("823", []) == "823"

    def test_greedy_first_match(self):
        # First qualifying candidate wins even if a later one is longer
        assert SpecificityArbiter.pick_best("823", ["823.9", "823.91409"]) == "823.9"
