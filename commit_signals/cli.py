"""Command-line front end: analyze, check tone, or commit."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import List, Optional

from rich.console import Console  # type: ignore[import]

from commit_signals import __version__
from commit_signals.commit_ingest import GitRepository, GitRepositoryError
from commit_signals.config import settings
from commit_signals.services import AnalysisReport, CommitService, CommitServiceError

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="commit-signals",
        description="Deterministic Conventional Commit signals for the current changes",
        epilog="Example: commit-signals --base main",
    )
    parser.add_argument("-v", "--version", action="version", version=f"%(prog)s {__version__}")

    # Analyze phase
    parser.add_argument("--repo", type=str, metavar="PATH", help="Git repository path (default: cwd)")
    parser.add_argument("--unstaged", action="store_true", help="Analyze working tree diff instead of staged changes")
    parser.add_argument("--base", type=str, metavar="REF", help="Compare REF...HEAD instead of staged/unstaged diff")
    parser.add_argument("--max-chars", type=int, metavar="N", help="Max diff characters to analyze")
    parser.add_argument("--no-untracked", action="store_true", help="Ignore untracked files")

    # Tone phase
    parser.add_argument("--tone", type=str, metavar="MSG", help="Validate the tone of a commit header")
    parser.add_argument("--min-tone-score", type=float, metavar="SCORE", help="Rewrite threshold (default: 0.8)")

    # Execute phase
    parser.add_argument("--commit-message", type=str, metavar="MSG", help="Execute commit phase with this message")
    parser.add_argument("--commit-body", type=str, metavar="BODY", help="Optional commit body (second -m)")
    parser.add_argument("--commit-footer", type=str, metavar="FOOTER", help="Optional commit footer (third -m)")
    parser.add_argument("--dry-run", action="store_true", help="Use git commit --dry-run")
    parser.add_argument("--no-auto-stage", action="store_true", help="Commit the index as-is, without staging analyzed files")

    # General
    parser.add_argument("--json", action="store_true", help="Print full structured JSON output")
    parser.add_argument("--verbose", action="store_true", help="Show debug logging")
    return parser.parse_args(argv)


def _report_to_dict(report: AnalysisReport) -> dict:
    payload = asdict(report.analysis)
    payload["has_changes"] = report.has_changes
    payload["related_recent_commits"] = [asdict(commit) for commit in report.related_commits]
    return payload


def _print_json(payload: dict) -> None:
    print(json.dumps(payload, indent=2, default=str))


def run(args: argparse.Namespace, console: Optional[Console] = None) -> int:
    console = console or Console(width=settings.console_width)
    cfg = settings.model_copy(update={"repo_path": Path(args.repo)}) if args.repo else settings

    repository = GitRepository(cfg.repo_path)
    service = CommitService(repository, config=cfg)

    if args.tone:
        result = service.validate_tone(args.tone, min_tone_score=args.min_tone_score)
        if args.json:
            _print_json(asdict(result))
        else:
            CommitService.render_tone(result, console=console)
        return 0

    if args.commit_message and args.no_auto_stage:
        outcome = service.execute_commit(
            args.commit_message,
            body=args.commit_body,
            footer=args.commit_footer,
            dry_run=args.dry_run,
            auto_stage_analyzed=False,
        )
        if args.json:
            _print_json(asdict(outcome))
        else:
            CommitService.render_commit(outcome, console=console)
        return 0

    report = service.analyze(
        staged=not args.unstaged,
        base_ref=args.base,
        max_chars=args.max_chars,
        include_untracked=not args.no_untracked,
    )

    if args.commit_message:
        # Each CLI run is its own process, so the analysis above feeds auto-staging.
        outcome = service.execute_commit(
            args.commit_message,
            body=args.commit_body,
            footer=args.commit_footer,
            dry_run=args.dry_run,
        )
        if args.json:
            _print_json(asdict(outcome))
        else:
            CommitService.render_commit(outcome, console=console)
        return 0

    if args.json:
        _print_json(_report_to_dict(report))
    else:
        CommitService.render_analysis(report, console=console)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        return run(args)
    except (GitRepositoryError, CommitServiceError) as exc:
        print(f"Client error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
