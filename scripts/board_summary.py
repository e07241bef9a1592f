#!/usr/bin/env python3
"""
HireBoard - Board Summary CLI

Open a board session against a running applicant store and print each
pipeline column with its applicants.

Usage:
    python scripts/board_summary.py                 # whole board
    python scripts/board_summary.py walker          # only applicants matching "walker"

The store URL and acting user come from HIREBOARD_CLIENT_* settings.
"""
import asyncio
import sys
import os

# Add project root to path so we can import hireboard modules
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from hireboard.controller import board_session
from hireboard.stages import get_stage


async def summarize(query: str = None) -> int:
    """Print the board; returns the process exit code."""
    async with board_session(load=False) as board:
        if query:
            board.filters = board.filters.replace(query=query)
        if not await board.reload():
            print(f"Could not load applicants from {board.store.base_url}", file=sys.stderr)
            return 1

        if board.total == 0:
            print("No applicants found.")

        counts = board.column_counts()
        for stage_id, applicants in board.board().items():
            print(f"{get_stage(stage_id).name} ({counts[stage_id]})")
            for applicant in applicants:
                stars = "*" * applicant.rating
                print(f"  - {applicant.candidate.name} [{applicant.job.title}] {stars}")

        rejected = len(board.applicants) - sum(counts.values())
        if rejected:
            print(f"Rejected: {rejected}")
    return 0


if __name__ == "__main__":
    if len(sys.argv) > 2:
        print("Usage: python scripts/board_summary.py [search]")
        sys.exit(1)

    sys.exit(asyncio.run(summarize(sys.argv[1] if len(sys.argv) == 2 else None)))
