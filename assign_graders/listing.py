"""
Walk the paginated "Written Interview" people listing.

Each page is scraped fresh from the live session, filtered to rows whose
scorecard is due for a selected job, and then the "next page" link is
followed until it disappears or turns disabled.
"""
from __future__ import annotations

import re
from typing import Any, Iterator

from assign_graders.errors import ListingExhaustedError
from assign_graders.log import get_logger
from assign_graders.models import Application
from assign_graders.session import UISession

log = get_logger(__name__)

ROW_SELECTOR = ".person"
NEXT_PAGE_SELECTOR = "a.next_page:not(.disabled)"
SCORECARD_DUE = "Scorecard due"

# Raw strings only; all cleanup happens in parse_row.
ROW_SCRIPT = """
(people) => people.map((p) => ({
    applicationID: p.getAttribute("application"),
    candidate: p.querySelector(".name a")?.textContent ?? null,
    job: p.querySelector(".job")?.textContent ?? null,
    toggle: p.querySelector("a.toggle-interviews")?.textContent ?? null,
}))
"""

_REQUISITION_RE = re.compile(r"\(\d+\)")


def normalize_job(text: str) -> str:
    """'Backend Engineer (4012345)' -> 'Backend Engineer'."""
    return _REQUISITION_RE.sub("", text, count=1).strip()


def parse_row(raw: dict[str, Any]) -> Application | None:
    """Build an Application from one scraped row, or None if a field is missing."""
    if not isinstance(raw, dict):
        return None
    application_id = raw.get("applicationID")
    candidate = raw.get("candidate")
    job = raw.get("job")
    toggle = raw.get("toggle")
    if application_id is None or candidate is None or job is None or toggle is None:
        return None
    return Application(
        application_id=str(application_id),
        candidate=str(candidate).strip(),
        job=normalize_job(str(job)),
        to_grade=SCORECARD_DUE in str(toggle),
    )


class ApplicationListing:
    """Single pass over the listing the session is currently showing.

    Iterating drives the session forward page by page, so a listing can only
    be consumed once. Navigate back to the first page and build a new
    listing for another pass.
    """

    def __init__(self, session: UISession, jobs: set[str] | frozenset[str]) -> None:
        self.session = session
        self.jobs = frozenset(jobs)
        self.pages_visited = 0
        self.rows_seen = 0
        self.rows_dropped = 0
        self._started = False

    def __iter__(self) -> Iterator[Application]:
        if self._started:
            raise ListingExhaustedError(
                "Application listing already consumed — navigate to the first page and start a new one"
            )
        self._started = True
        return self._walk()

    def _walk(self) -> Iterator[Application]:
        while True:
            self.session.wait_for_selector(ROW_SELECTOR)
            self.pages_visited += 1
            rows = self.session.query_all(ROW_SELECTOR, ROW_SCRIPT)
            log.debug("Page %d: %d row(s)", self.pages_visited, len(rows))

            for raw in rows:
                self.rows_seen += 1
                application = parse_row(raw)
                if application is None:
                    self.rows_dropped += 1
                    app_id = raw.get("applicationID") if isinstance(raw, dict) else None
                    log.warning(
                        "Skipping unreadable row on page %d (application=%s): %r",
                        self.pages_visited, app_id, raw,
                    )
                    continue
                if application.to_grade and application.job in self.jobs:
                    yield application

            if not self.session.has(NEXT_PAGE_SELECTOR):
                log.info(
                    "Listing done: %d page(s), %d row(s), %d unreadable",
                    self.pages_visited, self.rows_seen, self.rows_dropped,
                )
                return
            self.session.click_and_wait_for_navigation(NEXT_PAGE_SELECTOR)
