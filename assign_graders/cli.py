"""Command-line entry point: assign graders to pending written interviews."""
from __future__ import annotations

import argparse
import random
import sys
from pathlib import Path

from assign_graders.balancer import LoadBalancer, RunSummary
from assign_graders.browser import open_session
from assign_graders.config import (
    get_base_url,
    get_graders_path,
    get_headless,
    get_profile_dir,
    get_timeout_ms,
    load_roster,
)
from assign_graders.errors import ConfigError, UIError, UserError
from assign_graders.log import configure_logging, get_logger
from assign_graders.report import build_run_report, write_run_report

log = get_logger(__name__)


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="assign-graders",
        description="Randomly assign two graders to every written interview with a scorecard due.",
    )
    parser.add_argument("--graders", type=str, default=None,
                        help="graders YAML file (default: $GRADERS_FILE or config/graders.yaml)")
    parser.add_argument("--jobs", nargs="+", metavar="JOB", default=None,
                        help="only process these job titles (must be listed in the graders file)")
    parser.add_argument("--dry-run", action="store_true",
                        help="read and pick, but never type names or save")
    parser.add_argument("--seed", type=int, default=None, help="seed for reproducible picks")
    parser.add_argument("--headless", action="store_true", default=None,
                        help="run without a browser window (default: $RUN_HEADLESS)")
    parser.add_argument("--no-report", action="store_true", help="don't write a Markdown report")
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING…")
    return parser.parse_args(argv)


def select_jobs(configured: set[str], requested: list[str] | None) -> set[str]:
    if not requested:
        return configured
    unknown = [j for j in requested if j not in configured]
    if unknown:
        raise ConfigError(f"Unknown job(s): {', '.join(unknown)}")
    return set(requested)


def _write_report(summary: RunSummary | None, args: argparse.Namespace) -> None:
    if summary is None or args.no_report:
        return
    write_run_report(build_run_report(summary))


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    # config has loaded .env by now, so $LOG_LEVEL from it applies too
    configure_logging(args.log_level)

    balancer: LoadBalancer | None = None
    try:
        path = Path(args.graders).expanduser() if args.graders else get_graders_path()
        graders, configured_jobs = load_roster(path)
        jobs = select_jobs(configured_jobs, args.jobs)
        headless = get_headless() if args.headless is None else args.headless
        rng = random.Random(args.seed) if args.seed is not None else None

        log.info("Processing job(s): %s", ", ".join(sorted(jobs)))
        with open_session(get_profile_dir(), headless=headless, timeout_ms=get_timeout_ms()) as session:
            balancer = LoadBalancer(
                session, graders, jobs, get_base_url(),
                dry_run=args.dry_run, rng=rng,
            )
            summary = balancer.execute()
    except UserError as exc:
        log.error("%s", exc)
        _write_report(balancer.summary if balancer else None, args)
        return 2
    except UIError as exc:
        log.error("Greenhouse UI problem: %s", exc)
        _write_report(balancer.summary if balancer else None, args)
        return 1

    _write_report(summary, args)
    return 0


if __name__ == "__main__":
    sys.exit(main())
