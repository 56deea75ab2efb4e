"""
UI session capability.

The listing, reconciliation and balancer code only talk to ``UISession``; the
Playwright-backed implementation lives here too so the browser stays an
external collaborator that tests can swap for a scripted fake.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from playwright.sync_api import TimeoutError as PlaywrightTimeout

from assign_graders.errors import UITimeoutError
from assign_graders.log import get_logger

log = get_logger(__name__)


class UISession(ABC):
    @abstractmethod
    def goto(self, url: str) -> None:
        pass

    @abstractmethod
    def wait_for_selector(self, selector: str, timeout: int | None = None) -> None:
        """Block until ``selector`` matches; raise UITimeoutError otherwise."""

    @abstractmethod
    def query_all(self, selector: str, script: str) -> list[Any]:
        """Run ``script`` over every element matching ``selector``."""

    @abstractmethod
    def query_attribute(self, selector: str, attribute: str) -> str | None:
        pass

    @abstractmethod
    def has(self, selector: str) -> bool:
        pass

    @abstractmethod
    def click(self, selector: str) -> None:
        pass

    @abstractmethod
    def type(self, selector: str, text: str) -> None:
        pass

    @abstractmethod
    def press(self, key: str) -> None:
        pass

    @abstractmethod
    def click_and_wait_for_navigation(self, selector: str) -> None:
        pass


class PlaywrightSession(UISession):
    """UISession over a Playwright sync ``Page``."""

    def __init__(self, page, *, timeout_ms: int = 30_000) -> None:
        self.page = page
        self.timeout_ms = timeout_ms
        page.set_default_timeout(timeout_ms)

    def goto(self, url: str) -> None:
        log.debug("goto %s", url)
        try:
            self.page.goto(url, wait_until="load")
        except PlaywrightTimeout as exc:
            raise UITimeoutError(f"Timed out loading {url}") from exc

    def wait_for_selector(self, selector: str, timeout: int | None = None) -> None:
        try:
            self.page.wait_for_selector(selector, timeout=timeout or self.timeout_ms)
        except PlaywrightTimeout as exc:
            raise UITimeoutError(f"Element never appeared: {selector}") from exc

    def query_all(self, selector: str, script: str) -> list[Any]:
        return self.page.eval_on_selector_all(selector, script)

    def query_attribute(self, selector: str, attribute: str) -> str | None:
        el = self.page.query_selector(selector)
        if el is None:
            return None
        return el.get_attribute(attribute)

    def has(self, selector: str) -> bool:
        return self.page.query_selector(selector) is not None

    def click(self, selector: str) -> None:
        try:
            self.page.click(selector)
        except PlaywrightTimeout as exc:
            raise UITimeoutError(f"Could not click {selector}") from exc

    def type(self, selector: str, text: str) -> None:
        try:
            self.page.locator(selector).first.press_sequentially(text)
        except PlaywrightTimeout as exc:
            raise UITimeoutError(f"Could not type into {selector}") from exc

    def press(self, key: str) -> None:
        self.page.keyboard.press(key)

    def click_and_wait_for_navigation(self, selector: str) -> None:
        try:
            with self.page.expect_navigation():
                self.page.click(selector)
        except PlaywrightTimeout as exc:
            raise UITimeoutError(f"Navigation after clicking {selector} timed out") from exc
