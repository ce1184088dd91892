import logging
from collections.abc import Mapping, Sequence
from typing import Any, Dict, Hashable, Iterable, List, NamedTuple, Optional, Tuple

logger = logging.getLogger(__name__)

Ballot = Tuple[Hashable, ...]


class NormalizedBallots(NamedTuple):
    """Valid ballots plus the candidate universe they span."""

    ballots: List[Ballot]
    candidates: Tuple[Hashable, ...]


def extract_rankings(record: Any) -> Optional[Any]:
    """
    Pull the raw rankings field out of a vote record.

    Records may be mappings with a "rankings" key, objects with a
    ``rankings`` attribute, or the ranking sequence itself.
    """
    if isinstance(record, Mapping):
        return record.get("rankings")
    if hasattr(record, "rankings"):
        return record.rankings
    return record


def is_valid_ranking(rankings: Any) -> bool:
    """A ranking is a non-empty, non-string sequence of hashable entries."""
    if rankings is None or isinstance(rankings, (str, bytes)):
        return False
    if not isinstance(rankings, Sequence) or len(rankings) == 0:
        return False
    try:
        for entry in rankings:
            hash(entry)
    except TypeError:
        return False
    return True


def normalize_ballots(vote_records: Optional[Iterable[Any]]) -> NormalizedBallots:
    """
    Filter raw vote records down to well-formed ballots.

    Malformed records (missing, null, scalar or empty rankings) are dropped
    rather than failing the whole tabulation. Null entries inside a ranking
    are stripped; a ranking left empty by that is dropped too.

    Args:
        vote_records: Iterable of vote records

    Returns:
        NormalizedBallots with ballots as tuples and candidates in first-seen order
    """
    ballots: List[Ballot] = []
    seen: Dict[Hashable, None] = {}
    dropped = 0

    for record in vote_records or ():
        rankings = extract_rankings(record)
        if not is_valid_ranking(rankings):
            dropped += 1
            continue

        # None is never a candidate; it means "no winner" downstream
        ballot = tuple(entry for entry in rankings if entry is not None)
        if not ballot:
            dropped += 1
            continue

        ballots.append(ballot)
        for candidate in ballot:
            seen.setdefault(candidate, None)

    if dropped:
        logger.debug(f"Dropped {dropped} malformed vote records")
    logger.debug(f"Normalized {len(ballots)} ballots over {len(seen)} candidates")

    return NormalizedBallots(ballots=ballots, candidates=tuple(seen))


def first_choice_counts(ballots: Iterable[Ballot]) -> Dict[Hashable, int]:
    """Position-0 tally, independent of any elimination."""
    counts: Dict[Hashable, int] = {}
    for ballot in ballots:
        if ballot:
            counts[ballot[0]] = counts.get(ballot[0], 0) + 1
    return counts
