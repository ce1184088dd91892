"""
Analysis module for ranked-choice (Instant-Runoff) election tabulation.

This module provides:
- IRVTabulator: Round-by-round Instant-Runoff tabulation with an audit trail
- resolve_rankings: Full ranking of every candidate, winner first
- tabulate_election: Raw vote records in, ElectionResult out
- PyRankVoteVerifier: Cross-check of our winner against the PyRankVote library
"""

from .config import TabulationConfig, TieBreakPolicy
from .irv import IRVRound, IRVTabulator, majority_threshold, run_elimination
from .ranking import rankings_to_points, resolve_rankings
from .results import ElectionResult, tabulate_election

# Import verification utilities
from .verification import PyRankVoteVerifier

__all__ = [
    "TabulationConfig",
    "TieBreakPolicy",
    "IRVRound",
    "IRVTabulator",
    "majority_threshold",
    "run_elimination",
    "resolve_rankings",
    "rankings_to_points",
    "ElectionResult",
    "tabulate_election",
    "PyRankVoteVerifier",
]
