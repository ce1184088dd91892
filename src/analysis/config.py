import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import Hashable, Iterable, Tuple

logger = logging.getLogger(__name__)

TIE_BREAK_ENV_VAR = "RCV_TIE_BREAK"


class TieBreakPolicy(Enum):
    """
    Order in which candidates are scanned when several tie for fewest votes.

    The first tied candidate in this order is the one eliminated; the full
    tied set is still recorded on the round.
    """

    FIRST_INSERTED = "first-inserted"
    LEXICOGRAPHIC = "lexicographic"

    @classmethod
    def from_name(cls, name: str) -> "TieBreakPolicy":
        """
        Parse a policy name as typed on the command line or in the environment.

        Args:
            name: Policy name, e.g. "first-inserted" or "LEXICOGRAPHIC"

        Returns:
            Matching TieBreakPolicy
        """
        normalized = name.strip().lower().replace("_", "-")
        for policy in cls:
            if policy.value == normalized:
                return policy
        choices = ", ".join(p.value for p in cls)
        raise ValueError(f"Unknown tie-break policy '{name}' (expected one of: {choices})")

    def order(self, candidates: Iterable[Hashable]) -> Tuple[Hashable, ...]:
        """
        Return candidates in the iteration order this policy prescribes.

        LEXICOGRAPHIC compares the string form of each identifier, so integer
        ids sort as text: 10 comes before 9.
        """
        candidates = tuple(candidates)
        if self is TieBreakPolicy.LEXICOGRAPHIC:
            return tuple(sorted(candidates, key=str))
        return candidates


@dataclass(frozen=True)
class TabulationConfig:
    """Settings for one tabulation run."""

    tie_break: TieBreakPolicy = TieBreakPolicy.FIRST_INSERTED

    @classmethod
    def from_env(cls) -> "TabulationConfig":
        """Build a config from RCV_TIE_BREAK, falling back to defaults."""
        raw = os.environ.get(TIE_BREAK_ENV_VAR)
        if not raw:
            return cls()
        policy = TieBreakPolicy.from_name(raw)
        logger.debug(f"Tie-break policy from {TIE_BREAK_ENV_VAR}: {policy.value}")
        return cls(tie_break=policy)
