import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Hashable, Iterable, List, Optional

import pandas as pd

try:
    from ..data.ballots import first_choice_counts, normalize_ballots
    from .config import TabulationConfig
    from .irv import IRVRound, IRVTabulator, build_round_summary
    from .ranking import rankings_to_points, resolve_rankings
except ImportError:
    from analysis.config import TabulationConfig
    from analysis.irv import IRVRound, IRVTabulator, build_round_summary
    from analysis.ranking import rankings_to_points, resolve_rankings
    from data.ballots import first_choice_counts, normalize_ballots

logger = logging.getLogger(__name__)


@dataclass
class ElectionResult:
    """Outcome of one IRV tabulation over a ballot snapshot."""

    total_votes: int = 0
    first_choice_votes: Dict[Hashable, int] = field(default_factory=dict)
    rankings: Dict[Hashable, int] = field(default_factory=dict)
    winner: Optional[Hashable] = None
    elimination_rounds: List[IRVRound] = field(default_factory=list)

    def points(self) -> Dict[Hashable, int]:
        """Display points per candidate: winner highest, last place 1."""
        return rankings_to_points(self.rankings)

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize to the JSON-ready result structure.

        Optional round fields (eliminated, tiedCandidates, winner) are
        omitted when absent.
        """
        rounds = []
        for round_obj in self.elimination_rounds:
            entry: Dict[str, Any] = {
                "round": round_obj.round_number,
                "voteCounts": dict(round_obj.vote_counts),
            }
            if round_obj.eliminated is not None:
                entry["eliminated"] = round_obj.eliminated
            if round_obj.tied_candidates:
                entry["tiedCandidates"] = list(round_obj.tied_candidates)
            if round_obj.winner is not None:
                entry["winner"] = round_obj.winner
            rounds.append(entry)

        return {
            "totalVotes": self.total_votes,
            "firstChoiceVotes": dict(self.first_choice_votes),
            "rankings": dict(self.rankings),
            "winner": self.winner,
            "eliminationRounds": rounds,
        }

    def get_round_summary(self) -> pd.DataFrame:
        """Round-by-round results, one row per (round, candidate)."""
        return build_round_summary(self.elimination_rounds)

    def get_final_results(self) -> pd.DataFrame:
        """
        Get final standings for all candidates.

        Returns:
            DataFrame sorted by rank with points, first-choice votes,
            last-round votes and elimination round
        """
        if not self.rankings:
            return pd.DataFrame()

        points = self.points()
        eliminated_in = {
            r.eliminated: r.round_number
            for r in self.elimination_rounds
            if r.eliminated is not None
        }

        results_data = []
        for candidate_id, rank in self.rankings.items():
            # Last round in which the candidate was still counted
            final_votes = 0
            for round_obj in self.elimination_rounds:
                if candidate_id in round_obj.vote_counts:
                    final_votes = round_obj.vote_counts[candidate_id]

            results_data.append(
                {
                    "candidate_id": candidate_id,
                    "rank": rank,
                    "points": points[candidate_id],
                    "first_choice_votes": self.first_choice_votes.get(candidate_id, 0),
                    "final_votes": final_votes,
                    "status": (
                        "winner" if candidate_id == self.winner else "not_elected"
                    ),
                    "eliminated_round": eliminated_in.get(candidate_id),
                }
            )

        return pd.DataFrame(results_data).sort_values("rank").reset_index(drop=True)


def tabulate_election(
    vote_records: Optional[Iterable[Any]], config: Optional[TabulationConfig] = None
) -> ElectionResult:
    """
    Turn raw vote records into a winner, full ranking and round trace.

    Malformed records are dropped; zero valid ballots yields an empty result
    rather than an error.

    Args:
        vote_records: Records exposing a ``rankings`` sequence
        config: Tabulation settings (default tie-break: first-inserted)

    Returns:
        ElectionResult for this ballot snapshot
    """
    tabulator = IRVTabulator.from_vote_records(vote_records, config=config)

    if tabulator.total_votes == 0:
        return ElectionResult()

    rounds = tabulator.run_irv_tabulation()
    rankings = resolve_rankings(
        tabulator.winner, tabulator.ballots, tabulator.candidates, rounds
    )

    return ElectionResult(
        total_votes=tabulator.total_votes,
        first_choice_votes=first_choice_counts(tabulator.ballots),
        rankings=rankings,
        winner=tabulator.winner,
        elimination_rounds=rounds,
    )
