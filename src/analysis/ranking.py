import logging
from typing import Dict, Hashable, List, Optional, Sequence

try:
    from ..data.ballots import Ballot
    from .irv import IRVRound, run_elimination
except ImportError:
    from analysis.irv import IRVRound, run_elimination
    from data.ballots import Ballot

logger = logging.getLogger(__name__)


def resolve_rankings(
    winner: Optional[Hashable],
    ballots: Sequence[Ballot],
    candidates: Sequence[Hashable],
    rounds: List[IRVRound],
) -> Dict[Hashable, int]:
    """
    Assign every candidate a unique rank, 1 being the winner.

    Eliminated candidates are ranked in reverse elimination order. When the
    winner was decided in round 1 there is no elimination order to reuse, so
    the non-winners are run through a secondary elimination loop that ignores
    the winner. Anything still unranked takes the next free rank.

    Args:
        winner: Winning candidate (None when there were no ballots)
        ballots: Valid ballots
        candidates: Candidate universe in tie-break order
        rounds: Round trace from the primary tabulation

    Returns:
        Dictionary mapping candidate to rank, ordered best first
    """
    rankings: Dict[Hashable, int] = {}
    next_rank = len(candidates)

    for round_obj in rounds:
        if round_obj.eliminated is not None and round_obj.eliminated not in rankings:
            rankings[round_obj.eliminated] = next_rank
            next_rank -= 1

    if winner is not None:
        rankings[winner] = 1

        if len(rounds) == 1:
            secondary = run_elimination(
                ballots, candidates, ignore={winner}, stop_at_majority=False
            )
            ordered: List[Hashable] = list(secondary.elimination_order)
            if secondary.winner is not None:
                ordered.append(secondary.winner)
            if ordered:
                logger.debug(f"Secondary ordering of non-winners: {ordered}")
            for candidate in ordered:
                rankings[candidate] = next_rank
                next_rank -= 1

    for candidate in candidates:
        if candidate not in rankings:
            rankings[candidate] = next_rank
            next_rank -= 1

    return dict(sorted(rankings.items(), key=lambda item: item[1]))


def rankings_to_points(rankings: Dict[Hashable, int]) -> Dict[Hashable, int]:
    """
    Convert ranks to display points (inverse of rank).

    The winner of an N-candidate race gets N points, last place gets 1.
    """
    total = len(rankings)
    return {candidate: total - rank + 1 for candidate, rank in rankings.items()}
