"""Open a Chromium window that keeps the Greenhouse login between runs."""
from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from playwright.sync_api import sync_playwright

from assign_graders.log import get_logger
from assign_graders.session import PlaywrightSession

log = get_logger(__name__)


@contextmanager
def open_session(
    profile_dir: Path,
    *,
    headless: bool = False,
    timeout_ms: int = 30_000,
) -> Iterator[PlaywrightSession]:
    """Yield a PlaywrightSession on a persistent profile.

    Sign in to Greenhouse by hand in a headed run once; later runs reuse the
    cookies stored in ``profile_dir``.
    """
    profile_dir.mkdir(parents=True, exist_ok=True)
    with sync_playwright() as p:
        context = p.chromium.launch_persistent_context(
            str(profile_dir),
            headless=headless,
            viewport={"width": 1280, "height": 900},
        )
        try:
            page = context.pages[0] if context.pages else context.new_page()
            log.debug("Browser ready (headless=%s, profile=%s)", headless, profile_dir)
            yield PlaywrightSession(page, timeout_ms=timeout_ms)
        finally:
            context.close()
