"""
Assign two graders to every pending written interview in the listing.

Runs: open listing → read signed-in user → per application: open grader
editor → reconcile → pick → type names → save. One application at a time,
no retries; any exception ends the run.
"""
from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Iterable, Sequence
from urllib.parse import urlencode

from assign_graders.listing import ApplicationListing
from assign_graders.log import get_logger
from assign_graders.models import Application, Grader
from assign_graders.reconcile import Action, find_current_user, plan
from assign_graders.selector import GraderSelector
from assign_graders.session import UISession

log = get_logger(__name__)

LISTING_QUERY: list[tuple[str, str]] = [
    ("sort_by", "last_activity"),
    ("sort_order", "desc"),
    ("stage_status_id[]", "2"),
    ("in_stages[]", "Written Interview"),
]
EDITOR_MODAL = "[aria-describedby='edit_take_home_test_graders_modal']"
ASSIGNED_CHIPS = "ul .search-choice span"
ASSIGNED_SCRIPT = "(els) => els.map((el) => el.textContent)"
SEARCH_INPUT = ".search-field input[type='text']"
SAVE_BUTTON = "input[type='submit']"


def listing_url(base_url: str) -> str:
    return f"{base_url}people?{urlencode(LISTING_QUERY)}"


def row_selector(application: Application) -> str:
    return f'.person[application="{application.application_id}"]'


@dataclass
class Outcome:
    application: Application
    action: Action
    graders: tuple[Grader, ...] = ()
    already_assigned: tuple[str, ...] = ()


@dataclass
class RunSummary:
    current_user: str = ""
    dry_run: bool = False
    outcomes: list[Outcome] = field(default_factory=list)
    pages_visited: int = 0
    rows_seen: int = 0
    rows_dropped: int = 0
    aborted: str = ""

    @property
    def assigned(self) -> list[Outcome]:
        return [o for o in self.outcomes if o.action is not Action.SKIP]

    @property
    def skipped(self) -> list[Outcome]:
        return [o for o in self.outcomes if o.action is Action.SKIP]


class LoadBalancer:
    def __init__(
        self,
        session: UISession,
        graders: Sequence[Grader],
        jobs: Iterable[str],
        base_url: str,
        *,
        dry_run: bool = False,
        rng: random.Random | None = None,
    ) -> None:
        self.session = session
        self.jobs = frozenset(jobs)
        self.base_url = base_url
        self.dry_run = dry_run
        self.selector = GraderSelector(graders, rng=rng)
        self.summary: RunSummary | None = None

    def _open_editor(self, application: Application) -> None:
        row = row_selector(application)
        self.session.wait_for_selector(f"{row} .toggle-interviews")
        self.session.click(f"{row} .toggle-interviews")
        self.session.wait_for_selector(f"{row} .edit-take-home-test-graders-link")
        self.session.click(f"{row} .edit-take-home-test-graders-link")
        self.session.wait_for_selector(EDITOR_MODAL)

    def _read_assigned(self) -> list[str]:
        names = self.session.query_all(ASSIGNED_CHIPS, ASSIGNED_SCRIPT)
        return [n for n in names if isinstance(n, str)]

    def _write_grader(self, grader: Grader) -> None:
        self.session.type(SEARCH_INPUT, grader.name)
        self.session.press("Enter")

    def process(self, application: Application, current_user: str) -> Outcome:
        """Handle one application whose row is on the current page."""
        self._open_editor(application)
        decision = plan(self._read_assigned(), current_user)

        if decision.action is Action.SKIP:
            log.info(
                "Skip %s (%s): already graded by %s",
                application.candidate, application.job, ", ".join(decision.assigned),
            )
            return Outcome(application, decision.action, already_assigned=decision.assigned)

        # picked before touching the editor so a roster error writes nothing
        graders = self.selector.pick(application)

        if self.dry_run:
            log.info(
                "[dry-run] Written Interview from %s would go to: %s",
                application.candidate, ", ".join(g.name for g in graders),
            )
            # close the editor so the next row can be clicked
            self.session.press("Escape")
            return Outcome(application, decision.action, graders, decision.assigned)

        self.session.wait_for_selector(SEARCH_INPUT)
        self.session.click(SEARCH_INPUT)
        for _ in range(decision.removals):
            # first Backspace highlights the chip, second deletes it
            self.session.press("Backspace")
            self.session.press("Backspace")
        for grader in graders:
            self._write_grader(grader)

        log.info(
            "Written Interview from %s assigned to: %s",
            application.candidate, ", ".join(g.name for g in graders),
        )
        self.session.click(SAVE_BUTTON)
        return Outcome(application, decision.action, graders, decision.assigned)

    def execute(self) -> RunSummary:
        """Process the whole listing.

        ``self.summary`` is filled as items complete, so after an exception it
        still records what was saved before the run stopped.
        """
        summary = self.summary = RunSummary(dry_run=self.dry_run)
        listing: ApplicationListing | None = None
        try:
            self.session.goto(listing_url(self.base_url))
            summary.current_user = find_current_user(self.session)

            listing = ApplicationListing(self.session, self.jobs)
            for application in listing:
                log.debug("Processing %s", application)
                summary.outcomes.append(self.process(application, summary.current_user))
        except Exception as exc:
            summary.aborted = str(exc) or exc.__class__.__name__
            raise
        finally:
            if listing is not None:
                summary.pages_visited = listing.pages_visited
                summary.rows_seen = listing.rows_seen
                summary.rows_dropped = listing.rows_dropped

        log.info(
            "Run complete — assigned=%d, skipped=%d, pages=%d",
            len(summary.assigned), len(summary.skipped), summary.pages_visited,
        )
        return summary
