"""
IRV Interface Testing.

This module tests the run_irv_tabulation interface and result structures
that the API layer serializes.
"""

import sys
import unittest
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from analysis.irv import IRVRound, IRVTabulator  # noqa: E402
from analysis.results import ElectionResult, tabulate_election  # noqa: E402


class TestIRVInterface(unittest.TestCase):
    """Test IRV tabulation interface and result structures."""

    def setUp(self):
        """Set up test fixtures."""
        self.records = self._build_test_records()

    def _build_test_records(self):
        """Movie night with 120 voters and no first-round majority."""
        records = []

        # 50 ballots: Alien first, Brazil second
        records.extend({"rankings": ["Alien", "Brazil"]} for _ in range(50))

        # 40 ballots: Brazil first, Clue second
        records.extend({"rankings": ["Brazil", "Clue"]} for _ in range(40))

        # 30 ballots: Clue first, Brazil second
        records.extend({"rankings": ["Clue", "Brazil"]} for _ in range(30))

        return records

    def test_run_irv_tabulation_return_type(self):
        """Test that run_irv_tabulation returns correct type."""
        tabulator = IRVTabulator.from_vote_records(self.records)
        rounds = tabulator.run_irv_tabulation()

        self.assertIsInstance(rounds, list)
        self.assertGreater(len(rounds), 0)
        for round_obj in rounds:
            self.assertIsInstance(round_obj, IRVRound)

    def test_irv_round_structure(self):
        """Test IRVRound objects have correct structure."""
        tabulator = IRVTabulator.from_vote_records(self.records)
        rounds = tabulator.run_irv_tabulation()

        first_round = rounds[0]

        self.assertTrue(hasattr(first_round, "round_number"))
        self.assertTrue(hasattr(first_round, "vote_counts"))
        self.assertTrue(hasattr(first_round, "eliminated"))
        self.assertTrue(hasattr(first_round, "tied_candidates"))
        self.assertTrue(hasattr(first_round, "winner"))
        self.assertTrue(hasattr(first_round, "exhausted_ballots"))

        self.assertEqual(first_round.round_number, 1)
        self.assertIsInstance(first_round.vote_counts, dict)

    def test_transfers_decide_winner(self):
        """Clue's supporters transfer to Brazil, overtaking Alien."""
        tabulator = IRVTabulator.from_vote_records(self.records)
        rounds = tabulator.run_irv_tabulation()

        self.assertEqual(
            rounds[0].vote_counts, {"Alien": 50, "Brazil": 40, "Clue": 30}
        )
        self.assertEqual(rounds[0].eliminated, "Clue")
        self.assertEqual(rounds[1].vote_counts, {"Alien": 50, "Brazil": 70})
        self.assertEqual(rounds[1].winner, "Brazil")
        self.assertEqual(tabulator.winner, "Brazil")

    def test_election_result_structure(self):
        """Test ElectionResult carries every field the API returns."""
        result = tabulate_election(self.records)

        self.assertIsInstance(result, ElectionResult)
        self.assertEqual(result.total_votes, 120)
        self.assertEqual(
            result.first_choice_votes, {"Alien": 50, "Brazil": 40, "Clue": 30}
        )
        self.assertEqual(result.rankings, {"Brazil": 1, "Alien": 2, "Clue": 3})
        self.assertEqual(result.winner, "Brazil")

    def test_serialized_keys(self):
        """Test to_dict produces the API field names."""
        data = tabulate_election(self.records).to_dict()

        self.assertEqual(
            set(data),
            {"totalVotes", "firstChoiceVotes", "rankings", "winner", "eliminationRounds"},
        )
        for entry in data["eliminationRounds"]:
            self.assertIn("round", entry)
            self.assertIn("voteCounts", entry)
            self.assertTrue(set(entry) <= {
                "round",
                "voteCounts",
                "eliminated",
                "tiedCandidates",
                "winner",
            })


if __name__ == "__main__":
    unittest.main()
