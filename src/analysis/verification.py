import logging
from typing import Any, Dict, Hashable, List, Optional, Sequence

from pyrankvote import Ballot, Candidate, instant_runoff_voting

try:
    from ..data.ballots import first_choice_counts
    from .results import ElectionResult
except ImportError:
    from analysis.results import ElectionResult
    from data.ballots import first_choice_counts

logger = logging.getLogger(__name__)


class PyRankVoteVerifier:
    """
    Cross-checks our IRV winner against the PyRankVote library.
    """

    def __init__(self):
        self.candidates_map: Dict[str, Hashable] = {}
        self.ballots_data: List[Ballot] = []
        self.pyrankvote_result = None

    def _prepare_pyrankvote_data(
        self, ballots: Sequence[Sequence[Hashable]], candidates: Sequence[Hashable]
    ) -> List[Candidate]:
        """Convert ballots to PyRankVote format."""
        self.candidates_map = {}
        pyrankvote_candidates = {}
        for candidate_id in candidates:
            name = str(candidate_id)
            self.candidates_map[name] = candidate_id
            pyrankvote_candidates[candidate_id] = Candidate(name)

        self.ballots_data = []
        for ballot in ballots:
            ranked_candidates = []
            seen_candidates = set()  # PyRankVote rejects duplicate rankings

            for candidate_id in ballot:
                if (
                    candidate_id in pyrankvote_candidates
                    and candidate_id not in seen_candidates
                ):
                    ranked_candidates.append(pyrankvote_candidates[candidate_id])
                    seen_candidates.add(candidate_id)

            if ranked_candidates:  # Only add ballots with valid preferences
                self.ballots_data.append(Ballot(ranked_candidates=ranked_candidates))

        logger.debug(
            f"Prepared {len(pyrankvote_candidates)} candidates and {len(self.ballots_data)} ballots for PyRankVote"
        )
        return list(pyrankvote_candidates.values())

    def verify(
        self,
        result: ElectionResult,
        ballots: Sequence[Sequence[Hashable]],
        candidates: Optional[Sequence[Hashable]] = None,
    ) -> Dict[str, Any]:
        """
        Verify our winner against PyRankVote's instant-runoff result.

        Args:
            result: Our ElectionResult
            ballots: The valid ballots the result was computed from
            candidates: Candidate universe (defaults to the result's ranked candidates)

        Returns:
            Verification report dictionary
        """
        if candidates is None:
            candidates = list(result.rankings)

        had_ties = any(r.tied_candidates for r in result.elimination_rounds)
        report: Dict[str, Any] = {
            "our_winner": result.winner,
            "pyrankvote_winner": None,
            "winners_match": False,
            "had_ties": had_ties,
            "total_votes": result.total_votes,
            "first_choice_matches": first_choice_counts(ballots)
            == result.first_choice_votes,
        }

        if not ballots or not candidates:
            report["winners_match"] = result.winner is None
            report["verification_passed"] = report["winners_match"]
            return report

        logger.info("Verifying IRV winner against PyRankVote")

        if len(candidates) == 1:
            # Single candidate wins outright, no election needed
            logger.info("Only one candidate, skipping PyRankVote run")
            self.pyrankvote_result = None
            report["pyrankvote_winner"] = candidates[0]
        else:
            try:
                pyrankvote_candidates = self._prepare_pyrankvote_data(
                    ballots, candidates
                )
                self.pyrankvote_result = instant_runoff_voting(
                    candidates=pyrankvote_candidates, ballots=self.ballots_data
                )
            except Exception as e:
                logger.error(f"PyRankVote tabulation failed: {e}")
                report["error"] = str(e)
                report["verification_passed"] = False
                return report

            winners = self.pyrankvote_result.get_winners()
            if winners:
                report["pyrankvote_winner"] = self.candidates_map.get(
                    winners[0].name, winners[0].name
                )

        report["winners_match"] = report["pyrankvote_winner"] == result.winner
        # PyRankVote breaks elimination ties its own way
        report["verification_passed"] = report["first_choice_matches"] and (
            report["winners_match"] or had_ties
        )

        if not report["winners_match"]:
            logger.warning(
                f"Winner mismatch: ours={result.winner}, pyrankvote={report['pyrankvote_winner']}"
            )

        return report

    def generate_verification_report(self, verification_results: Dict[str, Any]) -> str:
        """
        Generate a human-readable verification report.

        Args:
            verification_results: Results from verify()

        Returns:
            Formatted verification report string
        """
        report = []
        report.append("=" * 60)
        report.append("IRV RESULTS VERIFICATION REPORT")
        report.append("=" * 60)

        if verification_results["verification_passed"]:
            report.append("✅ VERIFICATION PASSED - Winner matches PyRankVote")
        else:
            report.append("❌ VERIFICATION FAILED - Discrepancies found")

        report.append("")
        report.append("WINNER VERIFICATION:")
        report.append(f"Our winner: {verification_results['our_winner']}")
        report.append(f"PyRankVote winner: {verification_results['pyrankvote_winner']}")

        if (
            not verification_results["winners_match"]
            and verification_results["had_ties"]
        ):
            report.append(
                "⚠️  Elimination ties occurred; tie-break policies may legitimately differ"
            )

        report.append("")
        if verification_results["first_choice_matches"]:
            report.append("✅ First choice tallies consistent with ballots")
        else:
            report.append("❌ First choice tallies do not match ballots")

        if "error" in verification_results:
            report.append("")
            report.append(f"Error: {verification_results['error']}")

        report.append(f"Total votes: {verification_results['total_votes']}")

        return "\n".join(report)
