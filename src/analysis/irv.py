import logging
from dataclasses import dataclass, field
from typing import Dict, Hashable, Iterable, List, Optional, Sequence, Tuple

import pandas as pd

try:
    from ..data.ballots import Ballot, normalize_ballots
    from .config import TabulationConfig
except ImportError:
    from analysis.config import TabulationConfig
    from data.ballots import Ballot, normalize_ballots

logger = logging.getLogger(__name__)


@dataclass
class IRVRound:
    """Represents one round of Instant-Runoff tabulation."""

    round_number: int
    vote_counts: Dict[Hashable, int]
    eliminated: Optional[Hashable] = None
    tied_candidates: Optional[List[Hashable]] = None  # Only set for a multi-way tie
    winner: Optional[Hashable] = None
    exhausted_ballots: int = 0


@dataclass
class EliminationOutcome:
    """Rounds, winner and elimination order from one elimination run."""

    rounds: List[IRVRound] = field(default_factory=list)
    winner: Optional[Hashable] = None
    elimination_order: List[Hashable] = field(default_factory=list)


def majority_threshold(total_votes: int) -> int:
    """
    Votes needed to win a round outright: floor(total_votes / 2) + 1

    Args:
        total_votes: Total valid ballots (exhausted ballots included)

    Returns:
        Majority threshold
    """
    return total_votes // 2 + 1


def count_active_votes(
    ballots: Iterable[Ballot], active: Sequence[Hashable]
) -> Tuple[Dict[Hashable, int], int]:
    """
    Count each ballot toward its highest-ranked active candidate.

    Args:
        ballots: Valid ballots
        active: Active candidates in tie-break order

    Returns:
        (vote counts keyed in the order of ``active``, exhausted ballot count)
    """
    counts = {candidate: 0 for candidate in active}
    exhausted = 0
    for ballot in ballots:
        for candidate in ballot:
            if candidate in counts:
                counts[candidate] += 1
                break
        else:
            exhausted += 1
    return counts, exhausted


def run_elimination(
    ballots: Sequence[Ballot],
    candidates: Sequence[Hashable],
    ignore: Iterable[Hashable] = (),
    stop_at_majority: bool = True,
    total_votes: Optional[int] = None,
) -> EliminationOutcome:
    """
    Run the elimination loop over ``candidates`` minus ``ignore``.

    Used once to find the winner and once more, with the winner ignored and
    majority stopping disabled, to order the remaining candidates.

    Args:
        ballots: Valid ballots
        candidates: Candidate universe, already in tie-break order
        ignore: Candidates that take no part in this run
        stop_at_majority: Stop as soon as a candidate reaches the majority threshold
        total_votes: Ballot total for the threshold (defaults to len(ballots))

    Returns:
        EliminationOutcome with the recorded rounds
    """
    if total_votes is None:
        total_votes = len(ballots)
    threshold = majority_threshold(total_votes)

    ignored = set(ignore)
    active = [c for c in candidates if c not in ignored]
    outcome = EliminationOutcome()
    round_number = 1

    while len(active) > 1:
        counts, exhausted = count_active_votes(ballots, active)

        if stop_at_majority:
            leader = next(
                (c for c, votes in counts.items() if votes >= threshold), None
            )
            if leader is not None:
                logger.debug(
                    f"Round {round_number}: {leader} reaches majority with {counts[leader]} of {total_votes}"
                )
                outcome.winner = leader
                outcome.rounds.append(
                    IRVRound(
                        round_number=round_number,
                        vote_counts=counts,
                        winner=leader,
                        exhausted_ballots=exhausted,
                    )
                )
                return outcome

        # Zero-vote candidates take part in the comparison
        min_votes = min(counts.values())
        tied = [c for c in active if counts[c] == min_votes]
        eliminated = tied[0]

        logger.debug(
            f"Round {round_number}: eliminating {eliminated} with {min_votes} votes"
        )
        outcome.rounds.append(
            IRVRound(
                round_number=round_number,
                vote_counts=counts,
                eliminated=eliminated,
                tied_candidates=tied if len(tied) > 1 else None,
                exhausted_ballots=exhausted,
            )
        )
        outcome.elimination_order.append(eliminated)
        active.remove(eliminated)
        round_number += 1

    if len(active) == 1:
        # Sole survivor is declared winner with the full ballot total
        survivor = active[0]
        outcome.winner = survivor
        outcome.rounds.append(
            IRVRound(
                round_number=round_number,
                vote_counts={survivor: total_votes},
                winner=survivor,
            )
        )

    return outcome


def build_round_summary(rounds: List[IRVRound]) -> pd.DataFrame:
    """
    Flatten a round trace into one row per (round, candidate).

    Returns:
        DataFrame with round, candidate_id, votes, status, tied, exhausted_ballots
    """
    if not rounds:
        return pd.DataFrame()

    summary_data = []
    for round_obj in rounds:
        tied = set(round_obj.tied_candidates or ())
        for candidate_id, votes in round_obj.vote_counts.items():
            summary_data.append(
                {
                    "round": round_obj.round_number,
                    "candidate_id": candidate_id,
                    "votes": votes,
                    "status": _get_candidate_status(candidate_id, round_obj),
                    "tied": candidate_id in tied,
                    "exhausted_ballots": round_obj.exhausted_ballots,
                }
            )

    return pd.DataFrame(summary_data)


def _get_candidate_status(candidate_id: Hashable, round_obj: IRVRound) -> str:
    """Get the status of a candidate in a given round."""
    if candidate_id == round_obj.winner:
        return "winner"
    elif candidate_id == round_obj.eliminated:
        return "eliminated"
    else:
        return "continuing"


class IRVTabulator:
    """
    Instant-Runoff Voting tabulation engine.
    Single winner; majority threshold is floor(total / 2) + 1.
    """

    def __init__(
        self,
        ballots: Iterable[Ballot],
        candidates: Iterable[Hashable],
        config: Optional[TabulationConfig] = None,
    ):
        """
        Initialize IRV tabulator.

        Args:
            ballots: Valid (normalized) ballots
            candidates: Candidate universe in first-seen order
            config: Tabulation settings (default tie-break: first-inserted)
        """
        self.ballots: List[Ballot] = list(ballots)
        self.config = config or TabulationConfig()
        self.candidates: Tuple[Hashable, ...] = self.config.tie_break.order(candidates)
        self.rounds: List[IRVRound] = []
        self.winner: Optional[Hashable] = None
        self.eliminated: List[Hashable] = []

    @classmethod
    def from_vote_records(
        cls, vote_records: Iterable, config: Optional[TabulationConfig] = None
    ) -> "IRVTabulator":
        """Build a tabulator straight from raw vote records."""
        normalized = normalize_ballots(vote_records)
        return cls(normalized.ballots, normalized.candidates, config=config)

    @property
    def total_votes(self) -> int:
        return len(self.ballots)

    def run_irv_tabulation(self) -> List[IRVRound]:
        """
        Run complete IRV tabulation.

        Returns:
            List of IRVRound objects representing each round
        """
        self.rounds = []
        self.winner = None
        self.eliminated = []

        if not self.ballots:
            logger.info("No valid ballots; nothing to tabulate")
            return self.rounds

        logger.info("Starting IRV tabulation")
        logger.info(f"Total valid ballots: {self.total_votes}")
        logger.info(f"Majority threshold: {majority_threshold(self.total_votes)}")
        logger.info(
            f"Candidates: {len(self.candidates)} (tie-break: {self.config.tie_break.value})"
        )

        outcome = run_elimination(self.ballots, self.candidates)

        for round_obj in outcome.rounds:
            if round_obj.tied_candidates:
                logger.warning(
                    f"Round {round_obj.round_number}: tie for fewest votes between "
                    f"{round_obj.tied_candidates}, eliminating {round_obj.eliminated}"
                )
            elif round_obj.eliminated is not None:
                logger.info(
                    f"Round {round_obj.round_number}: eliminated {round_obj.eliminated}"
                )
            if round_obj.winner is not None:
                logger.info(
                    f"Round {round_obj.round_number}: {round_obj.winner} wins with "
                    f"{round_obj.vote_counts[round_obj.winner]} votes"
                )

        self.rounds = outcome.rounds
        self.winner = outcome.winner
        self.eliminated = outcome.elimination_order

        logger.info("IRV tabulation complete:")
        logger.info(f"Winner: {self.winner}")
        logger.info(f"Total rounds: {len(self.rounds)}")

        return self.rounds

    def get_round_summary(self) -> pd.DataFrame:
        """
        Get summary of all rounds as a DataFrame.

        Returns:
            DataFrame with round-by-round results
        """
        return build_round_summary(self.rounds)
