from __future__ import annotations

import re

from assign_graders.balancer import ASSIGNED_CHIPS, EDITOR_MODAL, SAVE_BUTTON
from assign_graders.errors import UITimeoutError
from assign_graders.listing import NEXT_PAGE_SELECTOR, ROW_SELECTOR
from assign_graders.reconcile import USER_MARKER_SELECTOR
from assign_graders.session import UISession

_APP_ID_RE = re.compile(r'application="([^"]+)"')


def row(app_id, candidate="Jane Doe", job="Software Engineer (4012345)", toggle="Scorecard due"):
    return {"applicationID": app_id, "candidate": candidate, "job": job, "toggle": toggle}


class FakeSession(UISession):
    """Scripted stand-in for the Greenhouse people listing and grader editor."""

    def __init__(self, pages, *, assigned=None, user="Hannah Lead"):
        self.pages = [list(p) for p in pages]
        self.page_index = 0
        self.assigned = {k: list(v) for k, v in (assigned or {}).items()}
        self.user = user
        self.calls: list[tuple[str, str]] = []
        self._open_app = None
        self._chips: list[str] = []
        self._typed = ""
        self._backspaces = 0

    # reads
    def goto(self, url):
        self.calls.append(("goto", url))
        self.page_index = 0

    def wait_for_selector(self, selector, timeout=None):
        self.calls.append(("wait", selector))
        if selector == ROW_SELECTOR and not self.pages[self.page_index]:
            raise UITimeoutError(selector)
        if selector == EDITOR_MODAL and self._open_app is None:
            raise UITimeoutError(selector)

    def query_all(self, selector, script):
        if selector == ROW_SELECTOR:
            return [dict(r) for r in self.pages[self.page_index]]
        if selector == ASSIGNED_CHIPS:
            return list(self._chips)
        return []

    def query_attribute(self, selector, attribute):
        if selector == USER_MARKER_SELECTOR:
            return self.user
        return None

    def has(self, selector):
        if selector == NEXT_PAGE_SELECTOR:
            return self.page_index < len(self.pages) - 1
        return False

    # writes
    def click(self, selector):
        self.calls.append(("click", selector))
        if selector.endswith(".edit-take-home-test-graders-link"):
            self._open_app = _APP_ID_RE.search(selector).group(1)
            self._chips = list(self.assigned.get(self._open_app, []))
        elif selector == SAVE_BUTTON:
            self.assigned[self._open_app] = list(self._chips)
            self._open_app = None

    def type(self, selector, text):
        self.calls.append(("type", text))
        self._typed += text

    def press(self, key):
        self.calls.append(("press", key))
        if key == "Backspace":
            self._backspaces += 1
            if self._backspaces % 2 == 0 and self._chips:
                self._chips.pop()
        elif key == "Enter" and self._typed:
            self._chips.append(self._typed)
            self._typed = ""
        elif key == "Escape":
            self._open_app = None
            self._chips = []

    def click_and_wait_for_navigation(self, selector):
        self.calls.append(("next", selector))
        if self.page_index + 1 >= len(self.pages):
            raise UITimeoutError("no page to navigate to")
        self.page_index += 1

    # helpers
    def writes(self):
        return [
            c for c in self.calls
            if c[0] == "type" or c == ("press", "Backspace") or c == ("click", SAVE_BUTTON)
        ]
