from collections import namedtuple

import pytest

from data.ballots import first_choice_counts, is_valid_ranking, normalize_ballots

VoteRow = namedtuple("VoteRow", ["voter", "rankings"])


@pytest.mark.unit
class TestNormalizeBallots:
    """Test ballot normalizer filtering and candidate universe."""

    def test_valid_records_become_tuples(self):
        """Rankings are frozen to tuples in input order."""
        result = normalize_ballots([{"rankings": ["A", "B"]}, {"rankings": ["B"]}])

        assert result.ballots == [("A", "B"), ("B",)]
        assert result.candidates == ("A", "B")

    def test_malformed_records_dropped(self, malformed_records):
        """Missing, null, empty and scalar rankings are silently excluded."""
        result = normalize_ballots(malformed_records)

        assert result.ballots == [("A", "B"), ("B",)]
        assert result.candidates == ("A", "B")

    def test_candidates_in_first_seen_order(self):
        """Universe follows first appearance across ballots, left to right."""
        result = normalize_ballots(
            [{"rankings": ["C", "A"]}, {"rankings": ["B", "C", "D"]}]
        )

        assert result.candidates == ("C", "A", "B", "D")

    def test_candidates_from_lower_ranks_included(self):
        """A movie only ever ranked second still enters the universe."""
        result = normalize_ballots([{"rankings": ["A", "Z"]}])

        assert "Z" in result.candidates

    def test_attribute_and_bare_records(self):
        """Records may expose rankings as an attribute or be bare sequences."""
        result = normalize_ballots([VoteRow("u1", ["A"]), ["B", "A"], ("C",)])

        assert result.ballots == [("A",), ("B", "A"), ("C",)]

    def test_unhashable_entries_dropped(self):
        """A ballot with unhashable entries is malformed, not fatal."""
        result = normalize_ballots([{"rankings": [["A"], "B"]}, {"rankings": ["B"]}])

        assert result.ballots == [("B",)]

    def test_null_entries_stripped(self):
        """Null entries never become candidates; an all-null ballot is dropped."""
        result = normalize_ballots(
            [{"rankings": [None, "A"]}, {"rankings": [None]}, {"rankings": ["A"]}]
        )

        assert result.ballots == [("A",), ("A",)]
        assert result.candidates == ("A",)
        assert None not in result.candidates

    def test_null_entry_between_preferences(self):
        """Stripping a null keeps the remaining preferences in order."""
        result = normalize_ballots([{"rankings": ["B", None, "A"]}])

        assert result.ballots == [("B", "A")]
        assert result.candidates == ("B", "A")

    def test_none_and_empty_input(self):
        """No records yields no ballots and an empty universe."""
        assert normalize_ballots(None) == ([], ())
        assert normalize_ballots([]) == ([], ())

    def test_input_records_not_mutated(self):
        """Normalizing leaves caller records untouched."""
        records = [{"rankings": ["A", "B"]}]

        normalize_ballots(records)

        assert records == [{"rankings": ["A", "B"]}]


@pytest.mark.unit
@pytest.mark.parametrize(
    "rankings,expected",
    [
        (["A"], True),
        (("A", "B"), True),
        ([1, 2], True),
        ([], False),
        (None, False),
        ("AB", False),
        (42, False),
        ({"A": 1}, False),
    ],
)
def test_is_valid_ranking(rankings, expected):
    """Only non-empty, non-string sequences are valid rankings."""
    assert is_valid_ranking(rankings) is expected


@pytest.mark.unit
def test_first_choice_counts():
    """Position-0 tally ignores lower preferences entirely."""
    ballots = [("A", "B", "C"), ("B", "A", "C"), ("A", "B", "C")]

    assert first_choice_counts(ballots) == {"A": 2, "B": 1}
