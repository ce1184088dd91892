#!/usr/bin/env python3
"""
Run Instant-Runoff tabulation on a file of vote records.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

# Add src to path so we can import our modules
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from analysis.config import TabulationConfig, TieBreakPolicy  # noqa: E402
from analysis.results import tabulate_election  # noqa: E402
from analysis.verification import PyRankVoteVerifier  # noqa: E402
from data.ballots import normalize_ballots  # noqa: E402
from data.vote_records import load_vote_records  # noqa: E402

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def print_rounds(result):
    """Print the round-by-round elimination trace."""
    print("\n=== Round-by-Round Results ===")
    for round_obj in result.elimination_rounds:
        print(f"\nRound {round_obj.round_number}:")
        for candidate_id, votes in sorted(
            round_obj.vote_counts.items(), key=lambda item: -item[1]
        ):
            if candidate_id == round_obj.winner:
                status_symbol = "🏆"
            elif candidate_id == round_obj.eliminated:
                status_symbol = "❌"
            else:
                status_symbol = "  "
            print(f"  {status_symbol} {str(candidate_id):25s}: {votes:6d} votes")

        if round_obj.tied_candidates:
            tied = ", ".join(str(c) for c in round_obj.tied_candidates)
            print(f"     Tie for fewest votes: {tied}")
        if round_obj.exhausted_ballots > 0:
            print(f"     {'Exhausted':25s}: {round_obj.exhausted_ballots:6d} ballots")


def print_final_results(result):
    """Print final standings."""
    print("\n=== Final Results ===")
    print(f"Total votes: {result.total_votes}")
    print(f"Winner: {result.winner}")
    final_results = result.get_final_results()
    for _, row in final_results.iterrows():
        print(
            f"  {row['rank']:3d}. {str(row['candidate_id']):30s}: "
            f"{row['first_choice_votes']:6d} first-choice votes"
        )


def export_results(result, export):
    """Export final standings and round summary to CSV."""
    export_path = Path(export)

    result.get_final_results().to_csv(export_path.with_suffix(".csv"), index=False)
    print(f"\n✓ Final results exported to: {export_path.with_suffix('.csv')}")

    rounds_path = export_path.with_name(export_path.stem + "_rounds").with_suffix(
        ".csv"
    )
    result.get_round_summary().to_csv(rounds_path, index=False)
    print(f"✓ Round summary exported to: {rounds_path}")


def main():
    parser = argparse.ArgumentParser(description="Run Instant-Runoff tabulation")
    parser.add_argument(
        "--ballots", required=True, help="Path to vote records (.json or .csv)"
    )
    parser.add_argument(
        "--tie-break",
        choices=[policy.value for policy in TieBreakPolicy],
        help="Tie-break policy for eliminations (default: $RCV_TIE_BREAK or first-inserted)",
    )
    parser.add_argument("--export", help="Export results to CSV file")
    parser.add_argument(
        "--json", action="store_true", help="Print the result as JSON"
    )
    parser.add_argument(
        "--verify", action="store_true", help="Cross-check the winner with PyRankVote"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        if args.tie_break:
            policy = TieBreakPolicy.from_name(args.tie_break)
            config = TabulationConfig(tie_break=policy)
        else:
            config = TabulationConfig.from_env()

        vote_records = load_vote_records(args.ballots)
    except (OSError, ValueError) as e:
        logger.error(f"Could not load vote records: {e}")
        sys.exit(1)

    try:
        result = tabulate_election(vote_records, config=config)

        if args.json:
            print(json.dumps(result.to_dict(), indent=2, default=str))
        else:
            print_rounds(result)
            print_final_results(result)

        if args.export:
            export_results(result, args.export)

        if args.verify:
            normalized = normalize_ballots(vote_records)
            verifier = PyRankVoteVerifier()
            report = verifier.verify(result, normalized.ballots, normalized.candidates)
            print()
            print(verifier.generate_verification_report(report))
            if not report["verification_passed"]:
                sys.exit(1)

        if not args.json:
            print("\n✓ IRV tabulation completed successfully")

    except Exception as e:
        logger.error(f"Error running IRV tabulation: {e}")
        import traceback

        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
